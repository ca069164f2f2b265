from typing import List

from protrack.sheets.gateway import SheetsGateway
from protrack.sheets.layout import SheetName


class MasterDataRepository:
    """Lookup sheets feeding the form dropdowns."""

    def __init__(self, gateway: SheetsGateway):
        self.gateway = gateway

    async def fetch_master(self) -> List[List[str]]:
        return await self.gateway.fetch_rows(SheetName.MASTER.value)

    async def fetch_crushing_items(self) -> List[List[str]]:
        return await self.gateway.fetch_rows(SheetName.CRUSHING_ITEMS.value)
