import math
from typing import Optional

from protrack.core.exceptions import EntityNotFoundException
from protrack.repositories.state_store import StateStore
from protrack.schemas.production_order import ProductionStatus
from protrack.schemas.tracker import AchievementItem, DashboardSummary, TrackerSnapshot
from protrack.services.tracker_service import TrackerService
from protrack.sheets.gateway import SheetsGateway

ACHIEVEMENT_COUNT = 3


def percent(part: float, whole: float) -> int:
    """Whole percent, halves rounded up; zero when there is nothing to measure against."""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def summarize(snapshot: TrackerSnapshot) -> DashboardSummary:
    orders = snapshot.productions
    total_target = sum(o.target_qty for o in orders)
    total_made = sum(o.total_made for o in orders)
    crushed = sum(c.input_qty for c in snapshot.crushing_entries)

    achievements = [
        AchievementItem(
            label=o.name,
            serial=o.serial,
            current=o.total_made,
            total=o.target_qty,
            percent=percent(o.total_made, o.target_qty),
            completed=o.status == ProductionStatus.COMPLETED,
        )
        for o in orders[:ACHIEVEMENT_COUNT]
    ]

    return DashboardSummary(
        total_orders=len(orders),
        completed_orders=sum(1 for o in orders if o.status == ProductionStatus.COMPLETED),
        total_target_qty=total_target,
        actual_produced_qty=total_made,
        total_crushed_qty=crushed,
        overall_efficiency_pct=percent(total_made, total_target),
        open_job_cards=sum(
            1 for c in snapshot.job_cards if not c.marked_complete and c.actual_made < c.planned_qty
        ),
        achievements=achievements,
    )


class DashboardService:
    def __init__(self, gateway: SheetsGateway, store: Optional[StateStore] = None):
        self._tracker = TrackerService(gateway, store)

    async def snapshot(self) -> TrackerSnapshot:
        return await self._tracker.load_snapshot()

    async def summary(self) -> DashboardSummary:
        return summarize(await self._tracker.load_snapshot())

    async def refresh(self) -> TrackerSnapshot:
        return await self._tracker.refresh()

    def last_refresh(self) -> TrackerSnapshot:
        snapshot = self._tracker.cached_snapshot()
        if snapshot is None:
            raise EntityNotFoundException("Snapshot", "last refresh")
        return snapshot
