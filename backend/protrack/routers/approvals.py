from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from protrack.dependencies import get_gateway, require_page_access
from protrack.schemas.actual_entry import ActualEntry
from protrack.schemas.auth import UserRecord
from protrack.schemas.common import StageBuckets
from protrack.services.approval_service import ApprovalService
from protrack.services.auth_service import PAGE_MARK_DONE
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(prefix="/approvals", tags=["Approvals"])


def get_approval_service(gateway: SheetsGateway = Depends(get_gateway)) -> ApprovalService:
    return ApprovalService(gateway)


@router.get("", response_model=StageBuckets[ActualEntry])
async def list_approvals(
    service: ApprovalService = Depends(get_approval_service),
    _: UserRecord = Depends(require_page_access(PAGE_MARK_DONE)),
):
    return await service.buckets()


@router.post("/rows/{row_index}", response_model=ActualEntry)
async def approve_row(
    row_index: int = Path(ge=1),
    service: ApprovalService = Depends(get_approval_service),
    _: UserRecord = Depends(require_page_access(PAGE_MARK_DONE)),
):
    return await service.approve(row_index=row_index)


@router.post("/{serial}", response_model=ActualEntry)
async def approve(
    serial: str,
    row_index: Optional[int] = Query(default=None, ge=1),
    service: ApprovalService = Depends(get_approval_service),
    _: UserRecord = Depends(require_page_access(PAGE_MARK_DONE)),
):
    return await service.approve(serial, row_index)
