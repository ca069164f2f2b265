from typing import List, Tuple

from protrack.repositories.base import SheetRepository
from protrack.schemas.actual_entry import ActualEntry
from protrack.sheets.codec import decode_actual_entries
from protrack.sheets.layout import ACTUAL_LAYOUT, SheetKind
from protrack.sheets.schema import TableSchema, resolve_schema


class ActualEntryRepository(SheetRepository[ActualEntry]):
    layout = ACTUAL_LAYOUT
    kind = SheetKind.ACTUAL

    async def list_with_schema(self) -> Tuple[List[ActualEntry], TableSchema]:
        """Entries plus the resolved schema needed to address their marker cells."""
        rows = await self.fetch_raw()
        schema = resolve_schema(rows, self.layout)
        return decode_actual_entries(rows, schema), schema

    async def set_marker(self, entry: ActualEntry, schema: TableSchema, field: str, value: str) -> bool:
        if entry.row_index is None:
            raise ValueError(f"Actual entry '{entry.serial}' has no sheet row.")
        return await self.gateway.update_cell(
            self.sheet_name,
            entry.row_index,
            schema.column(field) + 1,
            value,
        )
