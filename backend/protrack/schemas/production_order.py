from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ProductionStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: str) -> Optional["ProductionStatus"]:
        key = raw.strip().upper().replace("_", " ")
        for member in cls:
            if member.value.upper() == key:
                return member
        return None


def derive_status(total_made: float, pending: float) -> ProductionStatus:
    if pending <= 0:
        return ProductionStatus.COMPLETED
    if total_made > 0:
        return ProductionStatus.IN_PROGRESS
    return ProductionStatus.PENDING


class ProductionOrder(BaseModel):
    serial: str
    created_at: str = ""
    name: str = ""
    target_qty: float = 0
    notes: str = ""
    total_planned: float = 0
    total_made: float = 0
    pending: float = 0
    status: ProductionStatus = ProductionStatus.PENDING
    planned_at: Optional[str] = None
    actual_at: Optional[str] = None
    row_index: Optional[int] = None


class DemandCreate(BaseModel):
    name: str = Field(min_length=1)
    qty: float = Field(gt=0)
    notes: str = ""
