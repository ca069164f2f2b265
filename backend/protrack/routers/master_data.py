from typing import List

from fastapi import APIRouter, Depends

from protrack.dependencies import get_current_user, get_gateway
from protrack.schemas.auth import UserRecord
from protrack.services.master_data_service import MasterDataService
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(prefix="/master-data", tags=["Master Data"])


def get_master_data_service(gateway: SheetsGateway = Depends(get_gateway)) -> MasterDataService:
    return MasterDataService(gateway)


@router.get("/supervisors", response_model=List[str])
async def supervisors(
    service: MasterDataService = Depends(get_master_data_service),
    _: UserRecord = Depends(get_current_user),
):
    return await service.supervisors()


@router.get("/raw-materials", response_model=List[str])
async def raw_materials(
    service: MasterDataService = Depends(get_master_data_service),
    _: UserRecord = Depends(get_current_user),
):
    return await service.raw_materials()


@router.get("/semi-finished-options", response_model=List[str])
async def semi_finished_options(
    service: MasterDataService = Depends(get_master_data_service),
    _: UserRecord = Depends(get_current_user),
):
    return await service.semi_finished_options()
