from typing import List

from fastapi import APIRouter, Depends

from protrack.config import settings
from protrack.dependencies import get_gateway, require_page_access
from protrack.schemas.actual_entry import ActualEntry, ActualEntryCreate
from protrack.schemas.auth import UserRecord
from protrack.schemas.job_card import JobCard
from protrack.services.actual_entry_service import ActualEntryService
from protrack.services.auth_service import PAGE_ACTUAL_ENTRY
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(prefix="/actual-entries", tags=["Actual Entries"])


def get_actual_entry_service(gateway: SheetsGateway = Depends(get_gateway)) -> ActualEntryService:
    return ActualEntryService(gateway, upload_folder_id=settings.UPLOAD_FOLDER_ID)


@router.get("", response_model=List[ActualEntry])
async def list_entries(
    service: ActualEntryService = Depends(get_actual_entry_service),
    _: UserRecord = Depends(require_page_access(PAGE_ACTUAL_ENTRY)),
):
    return await service.list_entries()


@router.get("/pending-job-cards", response_model=List[JobCard])
async def pending_job_cards(
    service: ActualEntryService = Depends(get_actual_entry_service),
    _: UserRecord = Depends(require_page_access(PAGE_ACTUAL_ENTRY)),
):
    return await service.pending_job_cards()


@router.get("/next-serial")
async def next_serial(
    service: ActualEntryService = Depends(get_actual_entry_service),
    _: UserRecord = Depends(require_page_access(PAGE_ACTUAL_ENTRY)),
):
    return {"serial": await service.next_serial()}


@router.post("", response_model=ActualEntry, status_code=201)
async def log_entry(
    body: ActualEntryCreate,
    service: ActualEntryService = Depends(get_actual_entry_service),
    _: UserRecord = Depends(require_page_access(PAGE_ACTUAL_ENTRY)),
):
    return await service.log_entry(body)
