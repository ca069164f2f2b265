import logging
from datetime import datetime
from typing import Callable, Optional

from protrack.core.exceptions import GatewayWriteError
from protrack.repositories.actual_entry_repository import ActualEntryRepository
from protrack.schemas.actual_entry import ActualEntry
from protrack.schemas.common import StageBuckets
from protrack.services.pipeline import PipelineStage, partition, select_pending
from protrack.utils.dates import format_timestamp

logger = logging.getLogger(__name__)


class ApprovalService:
    """Stage one: an approver marks logged production as done."""

    def __init__(self, gateway, clock: Callable[[], datetime] = datetime.now):
        self._repo = ActualEntryRepository(gateway)
        self._clock = clock

    async def buckets(self) -> StageBuckets[ActualEntry]:
        return partition(await self._repo.list_all(), PipelineStage.APPROVAL)

    async def approve(self, serial: str = "", row_index: Optional[int] = None) -> ActualEntry:
        entries, schema = await self._repo.list_with_schema()
        entry = select_pending(entries, PipelineStage.APPROVAL, "Actual entry", serial, row_index)

        stamp = format_timestamp(self._clock())
        if not await self._repo.set_marker(entry, schema, "stage1_approved_at", stamp):
            raise GatewayWriteError(f"The store rejected the approval of '{entry.serial}'.")
        logger.info("actual_entry_approved serial=%s row=%s at=%s", entry.serial, entry.row_index, stamp)
        return entry.model_copy(update={"stage1_approved_at": stamp})
