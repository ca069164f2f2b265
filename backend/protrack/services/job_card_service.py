import logging
from datetime import datetime
from typing import Callable, List

from protrack.core.exceptions import EntityNotFoundException, GatewayWriteError
from protrack.repositories.base import find_by_serial
from protrack.repositories.job_card_repository import JobCardRepository
from protrack.repositories.production_order_repository import ProductionOrderRepository
from protrack.schemas.job_card import JobCard, JobCardCreate, PlanningBoard
from protrack.services.pipeline import PipelineStage, ensure_pending, partition
from protrack.services.serial_number_service import SerialNumberService
from protrack.services.tracker_service import TrackerService
from protrack.sheets.codec import encode_job_card_row
from protrack.utils.dates import format_timestamp

logger = logging.getLogger(__name__)


class JobCardService:
    def __init__(
        self,
        gateway,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._orders = ProductionOrderRepository(gateway)
        self._repo = JobCardRepository(gateway)
        self._serials = SerialNumberService(gateway)
        self._tracker = TrackerService(gateway)
        self._clock = clock

    async def planning_board(self) -> PlanningBoard:
        snapshot = await self._tracker.load_snapshot()
        buckets = partition(snapshot.productions, PipelineStage.PLANNING)
        return PlanningBoard(
            pending_orders=buckets.pending,
            history_orders=buckets.history,
            job_cards=snapshot.job_cards,
        )

    async def list_job_cards(self) -> List[JobCard]:
        return (await self._tracker.load_snapshot()).job_cards

    async def job_cards_for_order(self, order_serial: str) -> List[JobCard]:
        wanted = order_serial.strip()
        return [c for c in await self.list_job_cards() if c.production_order_ref == wanted]

    async def next_serial(self) -> str:
        return await self._serials.next_job_card_serial()

    async def create_job_card(self, body: JobCardCreate) -> JobCard:
        order = find_by_serial(await self._orders.list_all(), body.production_order_ref)
        if order is None:
            raise EntityNotFoundException("ProductionOrder", body.production_order_ref)
        ensure_pending(order, PipelineStage.PLANNING, "Production order")

        serial = await self._serials.next_job_card_serial()
        card = JobCard(
            serial=serial,
            created_at=format_timestamp(self._clock()),
            production_order_ref=order.serial,
            supervisor=body.supervisor.strip(),
            product_name=order.name,
            planned_qty=body.qty,
            production_date=body.production_date,
            pending_qty=body.qty,
        )
        if not await self._repo.insert(encode_job_card_row(card)):
            raise GatewayWriteError(f"The store rejected job card '{serial}'.")
        logger.info(
            "job_card_created serial=%s order=%s supervisor=%s qty=%s",
            serial,
            order.serial,
            card.supervisor,
            card.planned_qty,
        )

        return find_by_serial(await self.list_job_cards(), serial) or card
