import logging
from datetime import datetime
from typing import Callable, List, Optional

from protrack.core.exceptions import EntityNotFoundException, GatewayWriteError
from protrack.repositories.actual_entry_repository import ActualEntryRepository
from protrack.repositories.base import find_by_serial
from protrack.repositories.job_card_repository import JobCardRepository
from protrack.schemas.actual_entry import ActualEntry, ActualEntryCreate
from protrack.schemas.common import MaterialLine
from protrack.schemas.job_card import JobCard
from protrack.services.pipeline import PipelineStage, ensure_pending, partition
from protrack.services.serial_number_service import SerialNumberService
from protrack.services.tracker_service import TrackerService
from protrack.services.upload_service import UploadService
from protrack.sheets.codec import encode_actual_entry_row
from protrack.utils.dates import format_timestamp

logger = logging.getLogger(__name__)


class ActualEntryService:
    def __init__(
        self,
        gateway,
        upload_folder_id: str = "",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._repo = ActualEntryRepository(gateway)
        self._job_cards = JobCardRepository(gateway)
        self._serials = SerialNumberService(gateway)
        self._uploads = UploadService(gateway, upload_folder_id)
        self._tracker = TrackerService(gateway)
        self._clock = clock

    async def pending_job_cards(self) -> List[JobCard]:
        snapshot = await self._tracker.load_snapshot()
        return partition(snapshot.job_cards, PipelineStage.ENTRY).pending

    async def list_entries(self) -> List[ActualEntry]:
        return await self._repo.list_all()

    async def next_serial(self) -> str:
        return await self._serials.next_actual_entry_serial()

    async def log_entry(self, body: ActualEntryCreate) -> ActualEntry:
        card: Optional[JobCard] = find_by_serial(await self._job_cards.list_all(), body.job_card_ref)
        if card is None:
            raise EntityNotFoundException("JobCard", body.job_card_ref)
        ensure_pending(card, PipelineStage.ENTRY, "Job card")

        now = self._clock()
        millis = int(now.timestamp() * 1000)
        start_photo_url = await self._uploads.upload_photo(body.start_photo, f"start_{card.serial}_{millis}.jpg")
        end_photo_url = await self._uploads.upload_photo(body.end_photo, f"end_{card.serial}_{millis}.jpg")

        serial = await self._serials.next_actual_entry_serial()
        entry = ActualEntry(
            serial=serial,
            created_at=format_timestamp(now),
            job_card_ref=card.serial,
            production_order_ref=card.production_order_ref,
            supervisor=card.supervisor,
            date=card.production_date,
            product_name=card.product_name,
            qty_produced=body.qty_produced,
            raw_materials=[m for m in body.raw_materials if m.name.strip()],
            has_end_product=body.has_end_product,
            end_product=body.end_product if body.has_end_product else MaterialLine(),
            narration=body.narration.value,
            start_reading=body.start_reading,
            end_reading=body.end_reading,
            start_photo_url=start_photo_url,
            end_photo_url=end_photo_url,
        )
        if not await self._repo.insert(encode_actual_entry_row(entry)):
            raise GatewayWriteError(f"The store rejected actual entry '{serial}'.")
        logger.info(
            "actual_entry_logged serial=%s job_card=%s qty=%s running_hours=%s",
            serial,
            card.serial,
            entry.qty_produced,
            entry.machine_running_hours,
        )

        return find_by_serial(await self._repo.list_all(), serial) or entry
