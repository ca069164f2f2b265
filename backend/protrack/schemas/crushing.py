from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from protrack.schemas.common import MaterialLine, PhotoUpload
from protrack.utils.dates import normalize_date

MAX_FINISHED_GOODS = 4


class CrushingEntry(BaseModel):
    serial: str = ""
    created_at: str = ""
    date: str = ""
    production_date: str = ""
    source_actual_entry_ref: str = ""
    product_name: str = ""
    input_qty: float = 0
    finished_goods: List[MaterialLine] = Field(default_factory=list, max_length=MAX_FINISHED_GOODS)
    start_photo_url: str = ""
    end_photo_url: str = ""
    remarks: str = ""
    machine_running_hours: float = 0
    row_index: Optional[int] = None


class CrushingCreate(BaseModel):
    source_serial: str = ""
    # Sheet row of the source entry; needed when its serial is blank or repeated.
    source_row_index: Optional[int] = Field(default=None, ge=1)
    date: str = ""
    production_date: Optional[str] = None
    crushing_product_name: Optional[str] = None
    finished_goods: List[MaterialLine] = Field(default_factory=list, max_length=MAX_FINISHED_GOODS)
    remarks: str = ""
    machine_running_hours: float = Field(default=0, ge=0)
    start_photo: Optional[PhotoUpload] = None
    end_photo: Optional[PhotoUpload] = None

    @field_validator("date", "production_date")
    @classmethod
    def normalize_dates(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else normalize_date(value)

    @model_validator(mode="after")
    def require_source(self):
        if not self.source_serial.strip() and self.source_row_index is None:
            raise ValueError("source_serial or source_row_index is required.")
        return self


class CrushingSubmissionResult(BaseModel):
    entry: CrushingEntry
    source_marked: bool
    message: str


class CrushingItems(BaseModel):
    headers: List[str]
    options: List[List[str]]
