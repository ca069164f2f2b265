"""
Stage two: turning approved semi-finished output into finished goods.

Logging a crushing run is two store calls: the crushing row is inserted, then
the source entry's stage-two cell is stamped with the same timestamp. The
store offers no transaction, so when the second call fails the crushing row
stays and the source remains pending; the result reports ``source_marked``.
"""
import logging
from datetime import datetime
from typing import Callable, List

from protrack.core.exceptions import GatewayWriteError
from protrack.repositories.actual_entry_repository import ActualEntryRepository
from protrack.repositories.crushing_repository import CrushingRepository
from protrack.schemas.actual_entry import ActualEntry
from protrack.schemas.common import StageBuckets
from protrack.schemas.crushing import CrushingCreate, CrushingEntry, CrushingSubmissionResult
from protrack.services.pipeline import PipelineStage, partition, select_pending
from protrack.services.upload_service import UploadService
from protrack.sheets.codec import encode_crushing_row
from protrack.utils.dates import format_timestamp

logger = logging.getLogger(__name__)


class CrushingService:
    def __init__(
        self,
        gateway,
        upload_folder_id: str = "",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._entries = ActualEntryRepository(gateway)
        self._repo = CrushingRepository(gateway)
        self._uploads = UploadService(gateway, upload_folder_id)
        self._clock = clock

    async def jobs(self) -> StageBuckets[ActualEntry]:
        return partition(await self._entries.list_all(), PipelineStage.CRUSHING)

    async def list_entries(self) -> List[CrushingEntry]:
        return await self._repo.list_all()

    async def log_crushing(self, body: CrushingCreate) -> CrushingSubmissionResult:
        entries, schema = await self._entries.list_with_schema()
        source = select_pending(
            entries, PipelineStage.CRUSHING, "Actual entry", body.source_serial, body.source_row_index
        )

        now = self._clock()
        stamp = format_timestamp(now)
        millis = int(now.timestamp() * 1000)
        start_photo_url = await self._uploads.upload_photo(body.start_photo, f"START_{source.serial}_{millis}")
        end_photo_url = await self._uploads.upload_photo(body.end_photo, f"END_{source.serial}_{millis}")

        entry = CrushingEntry(
            serial=stamp,
            created_at=stamp,
            date=body.date,
            production_date=body.production_date or source.date,
            source_actual_entry_ref=source.serial,
            product_name=body.crushing_product_name or source.product_name,
            input_qty=source.qty_produced,
            finished_goods=[g for g in body.finished_goods if g.name.strip()],
            start_photo_url=start_photo_url,
            end_photo_url=end_photo_url,
            remarks=body.remarks,
            machine_running_hours=body.machine_running_hours,
        )
        if not await self._repo.insert(encode_crushing_row(entry)):
            raise GatewayWriteError(f"The store rejected the crushing entry for '{source.serial}'.")
        logger.info("crushing_logged source=%s product=%s at=%s", source.serial, entry.product_name, stamp)

        try:
            source_marked = await self._entries.set_marker(source, schema, "stage2_approved_at", stamp)
        except GatewayWriteError as exc:
            logger.error("crushing_source_mark_failed source=%s error=%s", source.serial, exc)
            source_marked = False
        else:
            if not source_marked:
                logger.error("crushing_source_mark_rejected source=%s", source.serial)

        if source_marked:
            message = f"Crushing logged and '{source.serial}' marked done."
        else:
            message = f"Crushing logged but '{source.serial}' could not be marked done; it is still pending."
        return CrushingSubmissionResult(entry=entry, source_marked=source_marked, message=message)
