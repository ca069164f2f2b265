from typing import List

from fastapi import APIRouter, Depends

from protrack.dependencies import get_gateway, require_page_access
from protrack.schemas.auth import UserRecord
from protrack.schemas.job_card import JobCard, JobCardCreate, PlanningBoard
from protrack.services.auth_service import PAGE_PLANNING
from protrack.services.job_card_service import JobCardService
from protrack.sheets.gateway import SheetsGateway

router = APIRouter(prefix="/job-cards", tags=["Job Cards"])


def get_job_card_service(gateway: SheetsGateway = Depends(get_gateway)) -> JobCardService:
    return JobCardService(gateway)


@router.get("/board", response_model=PlanningBoard)
async def planning_board(
    service: JobCardService = Depends(get_job_card_service),
    _: UserRecord = Depends(require_page_access(PAGE_PLANNING)),
):
    return await service.planning_board()


@router.get("", response_model=List[JobCard])
async def list_job_cards(
    service: JobCardService = Depends(get_job_card_service),
    _: UserRecord = Depends(require_page_access(PAGE_PLANNING)),
):
    return await service.list_job_cards()


@router.get("/next-serial")
async def next_serial(
    service: JobCardService = Depends(get_job_card_service),
    _: UserRecord = Depends(require_page_access(PAGE_PLANNING)),
):
    return {"serial": await service.next_serial()}


@router.get("/by-order/{serial}", response_model=List[JobCard])
async def job_cards_for_order(
    serial: str,
    service: JobCardService = Depends(get_job_card_service),
    _: UserRecord = Depends(require_page_access(PAGE_PLANNING)),
):
    return await service.job_cards_for_order(serial)


@router.post("", response_model=JobCard, status_code=201)
async def create_job_card(
    body: JobCardCreate,
    service: JobCardService = Depends(get_job_card_service),
    _: UserRecord = Depends(require_page_access(PAGE_PLANNING)),
):
    return await service.create_job_card(body)
