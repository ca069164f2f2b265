import logging
from datetime import datetime
from typing import Callable, List

from protrack.core.exceptions import GatewayWriteError
from protrack.repositories.base import find_by_serial
from protrack.repositories.production_order_repository import ProductionOrderRepository
from protrack.schemas.production_order import DemandCreate, ProductionOrder
from protrack.services.serial_number_service import SerialNumberService
from protrack.services.tracker_service import TrackerService
from protrack.sheets.codec import encode_demand_row
from protrack.utils.dates import format_timestamp

logger = logging.getLogger(__name__)


class DemandService:
    def __init__(
        self,
        gateway,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._repo = ProductionOrderRepository(gateway)
        self._serials = SerialNumberService(gateway)
        self._tracker = TrackerService(gateway)
        self._clock = clock

    async def list_orders(self) -> List[ProductionOrder]:
        return (await self._tracker.load_snapshot()).productions

    async def next_serial(self) -> str:
        return await self._serials.next_production_serial()

    async def submit_demand(self, body: DemandCreate) -> ProductionOrder:
        serial = await self._serials.next_production_serial()
        created_at = format_timestamp(self._clock())
        name = body.name.strip()
        notes = body.notes.strip()

        if not await self._repo.insert(encode_demand_row(created_at, serial, name, body.qty, notes)):
            raise GatewayWriteError(f"The store rejected demand '{serial}'.")
        logger.info("demand_submitted serial=%s name=%s qty=%s", serial, name, body.qty)

        created = find_by_serial(await self.list_orders(), serial)
        if created is not None:
            return created
        # Row accepted but not visible yet.
        return ProductionOrder(
            serial=serial,
            created_at=created_at,
            name=name,
            target_qty=body.qty,
            notes=notes,
            pending=body.qty,
        )
