from fastapi import APIRouter, Depends

from protrack.dependencies import get_gateway, get_state_store, require_page_access
from protrack.repositories.state_store import StateStore
from protrack.schemas.auth import UserRecord
from protrack.schemas.tracker import DashboardSummary, TrackerSnapshot
from protrack.services.auth_service import PAGE_DASHBOARD
from protrack.services.dashboard_service import DashboardService
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(
    gateway: SheetsGateway = Depends(get_gateway),
    store: StateStore = Depends(get_state_store),
) -> DashboardService:
    return DashboardService(gateway, store)


@router.get("/summary", response_model=DashboardSummary)
async def summary(
    service: DashboardService = Depends(get_dashboard_service),
    _: UserRecord = Depends(require_page_access(PAGE_DASHBOARD)),
):
    return await service.summary()


@router.get("/snapshot", response_model=TrackerSnapshot)
async def snapshot(
    service: DashboardService = Depends(get_dashboard_service),
    _: UserRecord = Depends(require_page_access(PAGE_DASHBOARD)),
):
    return await service.snapshot()


@router.post("/refresh", response_model=TrackerSnapshot)
async def refresh(
    service: DashboardService = Depends(get_dashboard_service),
    _: UserRecord = Depends(require_page_access(PAGE_DASHBOARD)),
):
    return await service.refresh()


@router.get("/last-refresh", response_model=TrackerSnapshot)
def last_refresh(
    service: DashboardService = Depends(get_dashboard_service),
    _: UserRecord = Depends(require_page_access(PAGE_DASHBOARD)),
):
    return service.last_refresh()
