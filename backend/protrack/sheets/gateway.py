"""
Client for the spreadsheet web app.

The store exposes one URL: ``GET ?sheet=<name>`` returns a sheet's cell grid,
``POST`` with an ``action`` form field inserts a row, updates a cell or stores
an uploaded file. Every response body is JSON carrying a ``success`` flag.
"""
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

from protrack.core.exceptions import FetchError, GatewayWriteError
from protrack.sheets.schema import cell_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    success: bool
    file_url: str = ""


class SheetsGateway(ABC):
    @abstractmethod
    async def fetch_rows(self, sheet_name: str) -> List[List[str]]:
        ...

    @abstractmethod
    async def insert_row(self, sheet_name: str, row: Sequence[Any]) -> bool:
        ...

    @abstractmethod
    async def update_cell(self, sheet_name: str, row_index: int, column_index: int, value: str) -> bool:
        ...

    @abstractmethod
    async def upload_file(self, folder_id: str, file_name: str, mime_type: str, base64_content: str) -> UploadResult:
        ...


class AppsScriptGateway(SheetsGateway):
    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = 30.0):
        self._base_url = base_url
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_rows(self, sheet_name: str) -> List[List[str]]:
        try:
            response = await self._client.get(self._base_url, params={"sheet": sheet_name})
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("unexpected response body")
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("sheet_fetch_failed sheet=%s error=%s", sheet_name, exc)
            raise FetchError(f"Could not fetch sheet '{sheet_name}': {exc}") from exc

        if not payload.get("success"):
            message = payload.get("error") or "Failed to fetch data"
            logger.error("sheet_fetch_rejected sheet=%s error=%s", sheet_name, message)
            raise FetchError(f"Could not fetch sheet '{sheet_name}': {message}")

        return [[cell_text(value) for value in (row or [])] for row in payload.get("data") or []]

    async def insert_row(self, sheet_name: str, row: Sequence[Any]) -> bool:
        payload = await self._post(
            {"action": "insert", "sheetName": sheet_name, "rowData": json.dumps(list(row))},
            operation="insert",
        )
        return payload.get("success") is True

    async def update_cell(self, sheet_name: str, row_index: int, column_index: int, value: str) -> bool:
        payload = await self._post(
            {
                "action": "updateCell",
                "sheetName": sheet_name,
                "rowIndex": str(row_index),
                "columnIndex": str(column_index),
                "value": value,
            },
            operation="updateCell",
        )
        return payload.get("success") is True

    async def upload_file(self, folder_id: str, file_name: str, mime_type: str, base64_content: str) -> UploadResult:
        payload = await self._post(
            {
                "action": "uploadFile",
                "folderId": folder_id,
                "fileName": file_name,
                "mimeType": mime_type,
                "base64Data": base64_content,
            },
            operation="uploadFile",
        )
        return UploadResult(success=payload.get("success") is True, file_url=payload.get("fileUrl") or "")

    async def _post(self, form: Dict[str, str], operation: str) -> Dict[str, Any]:
        try:
            response = await self._client.post(self._base_url, data=form)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("unexpected response body")
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("sheet_write_failed operation=%s sheet=%s error=%s", operation, form.get("sheetName"), exc)
            raise GatewayWriteError(f"Gateway {operation} failed: {exc}") from exc

        if not payload.get("success"):
            logger.warning(
                "sheet_write_rejected operation=%s sheet=%s error=%s",
                operation,
                form.get("sheetName"),
                payload.get("error"),
            )
        return payload
