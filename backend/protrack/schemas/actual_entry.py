from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from protrack.schemas.common import MaterialLine, PhotoUpload

MAX_RAW_MATERIALS = 5


class Narration(str, Enum):
    NORMAL = "Normal"
    BREAKDOWN = "Breakdown"
    MAINTENANCE = "Maintenance"
    TESTING = "Testing"


def running_hours(start_reading: float, end_reading: float) -> float:
    """Meter difference; a reading that went backwards counts as zero."""
    return max(0.0, end_reading - start_reading)


class ActualEntry(BaseModel):
    serial: str = ""
    created_at: str = ""
    job_card_ref: str
    production_order_ref: str = ""
    supervisor: str = ""
    date: str = ""
    product_name: str = ""
    qty_produced: float = 0
    raw_materials: List[MaterialLine] = Field(default_factory=list, max_length=MAX_RAW_MATERIALS)
    has_end_product: bool = False
    end_product: MaterialLine = Field(default_factory=MaterialLine)
    narration: str = ""
    start_reading: float = 0
    end_reading: float = 0
    machine_running_hours: Optional[float] = None
    start_photo_url: str = ""
    end_photo_url: str = ""
    stage1_planned_at: Optional[str] = None
    stage1_approved_at: Optional[str] = None
    stage2_planned_at: Optional[str] = None
    stage2_approved_at: Optional[str] = None
    row_index: Optional[int] = None

    @model_validator(mode="after")
    def fill_running_hours(self):
        if self.machine_running_hours is None:
            self.machine_running_hours = running_hours(self.start_reading, self.end_reading)
        return self


class ActualEntryCreate(BaseModel):
    job_card_ref: str = Field(min_length=1)
    qty_produced: float = Field(ge=0)
    raw_materials: List[MaterialLine] = Field(default_factory=list, max_length=MAX_RAW_MATERIALS)
    has_end_product: bool = False
    end_product: MaterialLine = Field(default_factory=MaterialLine)
    narration: Narration = Narration.NORMAL
    start_reading: float = 0
    end_reading: float = 0
    start_photo: Optional[PhotoUpload] = None
    end_photo: Optional[PhotoUpload] = None
