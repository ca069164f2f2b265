from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from protrack.sheets.layout import SheetLayout


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class TableSchema:
    """Where the data of one fetched sheet starts and which column holds each field."""

    data_start_row: int
    column_index_by_field: Mapping[str, int]
    header_row: Optional[int] = None

    @property
    def header_found(self) -> bool:
        return self.header_row is not None

    def column(self, field: str) -> int:
        return self.column_index_by_field[field]

    def sheet_row_number(self, offset: int) -> int:
        """1-based sheet row of the ``offset``-th row after ``data_start_row``."""
        return self.data_start_row + offset + 1


def resolve_schema(rows: Sequence[Sequence[Any]], layout: SheetLayout) -> TableSchema:
    columns = dict(layout.columns)
    if not layout.markers:
        return TableSchema(data_start_row=layout.default_start_row, column_index_by_field=columns)

    for row_idx, row in enumerate(rows[: layout.scan_rows]):
        found = {}
        for col_idx, value in enumerate(row or ()):
            text = cell_text(value)
            for marker in layout.markers:
                if marker.field not in found and marker.matches(text):
                    found[marker.field] = col_idx
        if found:
            columns.update(found)
            return TableSchema(
                data_start_row=row_idx + 1,
                column_index_by_field=columns,
                header_row=row_idx,
            )

    return TableSchema(data_start_row=layout.default_start_row, column_index_by_field=columns)
