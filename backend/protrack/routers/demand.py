from typing import List

from fastapi import APIRouter, Depends

from protrack.dependencies import get_gateway, require_page_access
from protrack.schemas.auth import UserRecord
from protrack.schemas.production_order import DemandCreate, ProductionOrder
from protrack.services.auth_service import PAGE_PRODUCTION
from protrack.services.demand_service import DemandService
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(prefix="/demand", tags=["Demand"])


def get_demand_service(gateway: SheetsGateway = Depends(get_gateway)) -> DemandService:
    return DemandService(gateway)


@router.get("/orders", response_model=List[ProductionOrder])
async def list_orders(
    service: DemandService = Depends(get_demand_service),
    _: UserRecord = Depends(require_page_access(PAGE_PRODUCTION)),
):
    return await service.list_orders()


@router.get("/next-serial")
async def next_serial(
    service: DemandService = Depends(get_demand_service),
    _: UserRecord = Depends(require_page_access(PAGE_PRODUCTION)),
):
    return {"serial": await service.next_serial()}


@router.post("/orders", response_model=ProductionOrder, status_code=201)
async def submit_demand(
    body: DemandCreate,
    service: DemandService = Depends(get_demand_service),
    _: UserRecord = Depends(require_page_access(PAGE_PRODUCTION)),
):
    return await service.submit_demand(body)
