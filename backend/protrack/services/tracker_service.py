import asyncio
import logging
from typing import Optional

from protrack.repositories.actual_entry_repository import ActualEntryRepository
from protrack.repositories.crushing_repository import CrushingRepository
from protrack.repositories.job_card_repository import JobCardRepository
from protrack.repositories.production_order_repository import ProductionOrderRepository
from protrack.repositories.state_store import SNAPSHOT_KEY, StateStore
from protrack.schemas.tracker import TrackerSnapshot
from protrack.services.aggregation_service import recompute
from protrack.sheets.gateway import SheetsGateway

logger = logging.getLogger(__name__)


class TrackerService:
    """Loads the four data sheets and returns them with fresh aggregates.

    Reads never touch the state store; only ``refresh`` caches the snapshot.
    """

    def __init__(self, gateway: SheetsGateway, store: Optional[StateStore] = None):
        self._orders = ProductionOrderRepository(gateway)
        self._job_cards = JobCardRepository(gateway)
        self._entries = ActualEntryRepository(gateway)
        self._crushing = CrushingRepository(gateway)
        self._store = store

    async def load_snapshot(self) -> TrackerSnapshot:
        productions, job_cards, entries, crushing = await asyncio.gather(
            self._orders.list_all(),
            self._job_cards.list_all(),
            self._entries.list_all(),
            self._crushing.list_all(),
        )
        snapshot = recompute(
            TrackerSnapshot(
                productions=productions,
                job_cards=job_cards,
                actual_entries=entries,
                crushing_entries=crushing,
            )
        )
        logger.debug(
            "snapshot_loaded orders=%s job_cards=%s entries=%s crushing=%s",
            len(productions),
            len(job_cards),
            len(entries),
            len(crushing),
        )
        return snapshot

    async def refresh(self) -> TrackerSnapshot:
        snapshot = await self.load_snapshot()
        if self._store is not None:
            self._store.save(SNAPSHOT_KEY, snapshot.model_dump(mode="json"))
        return snapshot

    def cached_snapshot(self) -> Optional[TrackerSnapshot]:
        if self._store is None:
            return None
        data = self._store.load(SNAPSHOT_KEY)
        return TrackerSnapshot.model_validate(data) if data else None
