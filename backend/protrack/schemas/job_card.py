from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from protrack.schemas.production_order import ProductionOrder
from protrack.utils.dates import normalize_date


class JobCard(BaseModel):
    serial: str
    created_at: str = ""
    production_order_ref: str = ""
    supervisor: str = ""
    product_name: str = ""
    planned_qty: float = 0
    production_date: str = ""
    actual_made: float = 0
    pending_qty: float = 0
    status: str = ""
    planned_at: Optional[str] = None
    marked_complete: bool = False
    row_index: Optional[int] = None


class JobCardCreate(BaseModel):
    production_order_ref: str = Field(min_length=1)
    supervisor: str = Field(min_length=1)
    qty: float = Field(gt=0)
    production_date: str = Field(min_length=1)

    @field_validator("production_date")
    @classmethod
    def normalize_production_date(cls, value: str) -> str:
        return normalize_date(value)


class PlanningBoard(BaseModel):
    pending_orders: List[ProductionOrder]
    history_orders: List[ProductionOrder]
    job_cards: List[JobCard]
