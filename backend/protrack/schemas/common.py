from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class MaterialLine(BaseModel):
    """A named quantity: raw material consumed, end product, finished good."""

    name: str = ""
    qty: float = 0


class PhotoUpload(BaseModel):
    base64_content: str = Field(min_length=1)
    mime_type: str = "image/jpeg"
    file_name: Optional[str] = None


class StageBuckets(BaseModel, Generic[T]):
    pending: List[T] = Field(default_factory=list)
    history: List[T] = Field(default_factory=list)


class OperationResponse(BaseModel):
    success: bool
    message: str
