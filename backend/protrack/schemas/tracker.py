from typing import List

from pydantic import BaseModel, Field

from protrack.schemas.actual_entry import ActualEntry
from protrack.schemas.crushing import CrushingEntry
from protrack.schemas.job_card import JobCard
from protrack.schemas.production_order import ProductionOrder


class TrackerSnapshot(BaseModel):
    productions: List[ProductionOrder] = Field(default_factory=list)
    job_cards: List[JobCard] = Field(default_factory=list)
    actual_entries: List[ActualEntry] = Field(default_factory=list)
    crushing_entries: List[CrushingEntry] = Field(default_factory=list)


class AchievementItem(BaseModel):
    label: str
    serial: str
    current: float
    total: float
    percent: int
    completed: bool


class DashboardSummary(BaseModel):
    total_orders: int
    completed_orders: int
    total_target_qty: float
    actual_produced_qty: float
    total_crushed_qty: float
    overall_efficiency_pct: int
    open_job_cards: int
    achievements: List[AchievementItem]
