from typing import Any, Generic, List, Optional, Sequence, TypeVar

from protrack.sheets.codec import decode_rows
from protrack.sheets.gateway import SheetsGateway
from protrack.sheets.layout import SheetKind, SheetLayout

ModelType = TypeVar("ModelType")


class SheetRepository(Generic[ModelType]):
    """Fetch-and-decode access to one data sheet of the store."""

    layout: SheetLayout
    kind: SheetKind

    def __init__(self, gateway: SheetsGateway):
        self.gateway = gateway

    @property
    def sheet_name(self) -> str:
        return self.layout.sheet.value

    async def fetch_raw(self) -> List[List[str]]:
        return await self.gateway.fetch_rows(self.sheet_name)

    async def list_all(self) -> List[ModelType]:
        return decode_rows(await self.fetch_raw(), self.kind)

    async def insert(self, row: Sequence[Any]) -> bool:
        return await self.gateway.insert_row(self.sheet_name, row)


def find_by_serial(records: Sequence[ModelType], serial: str) -> Optional[ModelType]:
    wanted = serial.strip()
    return next((r for r in records if getattr(r, "serial", None) == wanted), None)
