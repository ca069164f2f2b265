from typing import List

from fastapi import APIRouter, Depends

from protrack.config import settings
from protrack.dependencies import get_gateway, require_page_access
from protrack.schemas.actual_entry import ActualEntry
from protrack.schemas.auth import UserRecord
from protrack.schemas.common import StageBuckets
from protrack.schemas.crushing import CrushingCreate, CrushingEntry, CrushingItems, CrushingSubmissionResult
from protrack.services.auth_service import PAGE_CRUSHING
from protrack.services.crushing_service import CrushingService
from protrack.services.master_data_service import MasterDataService
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(prefix="/crushing", tags=["Crushing"])


def get_crushing_service(gateway: SheetsGateway = Depends(get_gateway)) -> CrushingService:
    return CrushingService(gateway, upload_folder_id=settings.UPLOAD_FOLDER_ID)


@router.get("/jobs", response_model=StageBuckets[ActualEntry])
async def crushing_jobs(
    service: CrushingService = Depends(get_crushing_service),
    _: UserRecord = Depends(require_page_access(PAGE_CRUSHING)),
):
    return await service.jobs()


@router.get("/entries", response_model=List[CrushingEntry])
async def list_crushing_entries(
    service: CrushingService = Depends(get_crushing_service),
    _: UserRecord = Depends(require_page_access(PAGE_CRUSHING)),
):
    return await service.list_entries()


@router.get("/items", response_model=CrushingItems)
async def crushing_items(
    gateway: SheetsGateway = Depends(get_gateway),
    _: UserRecord = Depends(require_page_access(PAGE_CRUSHING)),
):
    return await MasterDataService(gateway).crushing_items()


@router.post("", response_model=CrushingSubmissionResult, status_code=201)
async def log_crushing(
    body: CrushingCreate,
    service: CrushingService = Depends(get_crushing_service),
    _: UserRecord = Depends(require_page_access(PAGE_CRUSHING)),
):
    return await service.log_crushing(body)
