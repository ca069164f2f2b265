from typing import Optional

from protrack.schemas.auth import UserRecord
from protrack.sheets.codec import cell
from protrack.sheets.gateway import SheetsGateway
from protrack.sheets.layout import USER_LAYOUT


class UserRepository:
    def __init__(self, gateway: SheetsGateway):
        self.gateway = gateway

    async def find_by_credentials(self, username: str, password: str) -> Optional[UserRecord]:
        rows = await self.gateway.fetch_rows(USER_LAYOUT.sheet.value)
        col = USER_LAYOUT.columns
        wanted = username.strip().lower()

        for row in rows[USER_LAYOUT.default_start_row:]:
            sheet_username = cell(row, col["username"]).strip()
            sheet_password = cell(row, col["password"]).strip()
            if sheet_username.lower() != wanted or sheet_password != password:
                continue

            access = cell(row, col["page_access"]).strip()
            pages = [p.strip() for p in access.split(",") if p.strip()] if access else ["all"]
            return UserRecord(
                username=sheet_username,
                name=cell(row, col["name"]).strip(),
                page_access=pages,
            )
        return None
