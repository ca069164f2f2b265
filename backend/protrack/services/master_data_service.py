"""
Dropdown data for the entry forms.

Lookups read the *Master* and *Crusing Items Name* sheets. A missing column
or an unreachable store never blocks a form: the affected list falls back to
a fixed default and the fallback is logged.
"""
import logging
from typing import List, Sequence

from protrack.core.exceptions import GatewayException
from protrack.repositories.master_data_repository import MasterDataRepository
from protrack.schemas.crushing import CrushingItems
from protrack.sheets.codec import cell, column_values
from protrack.sheets.gateway import SheetsGateway
from protrack.sheets.layout import (
    CRUSHING_ITEM_COLUMNS,
    CRUSHING_ITEMS_LAYOUT,
    RAW_MATERIAL_LAYOUT,
    SUPERVISOR_LAYOUT,
    SheetLayout,
)

logger = logging.getLogger(__name__)

DEFAULT_SUPERVISORS = ["Rahul Kumar", "Amit Singh", "Sunil Verma", "Suresh Das", "Rajesh Kumar"]
DEFAULT_RAW_MATERIALS = [
    "Raw Stone",
    "Fuel",
    "Lubricants",
    "Coolant",
    "Misc",
    "Stone-A",
    "Stone-B",
    "Fuel-D",
    "Mobil-1",
    "Grease-X",
]
# An unreachable store gets the short list.
OFFLINE_RAW_MATERIALS = DEFAULT_RAW_MATERIALS[:5]


class MasterDataService:
    def __init__(self, gateway: SheetsGateway):
        self._repo = MasterDataRepository(gateway)

    async def supervisors(self) -> List[str]:
        return await self._master_column(SUPERVISOR_LAYOUT, DEFAULT_SUPERVISORS, DEFAULT_SUPERVISORS)

    async def raw_materials(self) -> List[str]:
        return await self._master_column(RAW_MATERIAL_LAYOUT, DEFAULT_RAW_MATERIALS, OFFLINE_RAW_MATERIALS)

    async def semi_finished_options(self) -> List[str]:
        try:
            rows = await self._repo.fetch_crushing_items()
        except GatewayException as exc:
            logger.warning("semi_finished_options_unavailable error=%s", exc)
            return []
        if not rows:
            return []
        schema, values = column_values(rows, CRUSHING_ITEMS_LAYOUT)
        if not schema.header_found:
            logger.warning("semi_finished_header_missing sheet=%s", CRUSHING_ITEMS_LAYOUT.sheet.value)
        return sorted(set(values))

    async def crushing_items(self) -> CrushingItems:
        try:
            rows = await self._repo.fetch_crushing_items()
        except GatewayException as exc:
            logger.warning("crushing_items_unavailable error=%s", exc)
            return CrushingItems(headers=[], options=[[] for _ in CRUSHING_ITEM_COLUMNS])

        header = rows[0] if rows else []
        headers = [cell(header, col).strip() or f"Column {col}" for col in CRUSHING_ITEM_COLUMNS]
        options = [
            [value for value in (cell(row, col).strip() for row in rows[1:]) if value]
            for col in CRUSHING_ITEM_COLUMNS
        ]
        return CrushingItems(headers=headers, options=options)

    async def _master_column(
        self,
        layout: SheetLayout,
        missing_default: Sequence[str],
        offline_default: Sequence[str],
    ) -> List[str]:
        try:
            rows = await self._repo.fetch_master()
        except GatewayException as exc:
            logger.warning("master_lookup_unavailable field=%s error=%s", layout.identifier_field, exc)
            return list(offline_default)
        if not rows:
            return []

        schema, values = column_values(rows, layout)
        if not schema.header_found:
            logger.warning("master_column_missing field=%s", layout.identifier_field)
            return list(missing_default)
        return values
