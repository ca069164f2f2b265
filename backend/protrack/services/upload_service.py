import logging
from typing import Optional

from protrack.core.exceptions import GatewayWriteError
from protrack.schemas.common import PhotoUpload
from protrack.sheets.gateway import SheetsGateway

logger = logging.getLogger(__name__)


class UploadService:
    def __init__(self, gateway: SheetsGateway, folder_id: str = ""):
        self._gateway = gateway
        self._folder_id = folder_id

    async def upload_photo(self, photo: Optional[PhotoUpload], default_name: str) -> str:
        """Store a photo and return its URL; no photo means an empty URL."""
        if photo is None:
            return ""
        file_name = photo.file_name or default_name
        result = await self._gateway.upload_file(
            self._folder_id,
            file_name,
            photo.mime_type,
            photo.base64_content,
        )
        if not result.success:
            raise GatewayWriteError(f"Upload of '{file_name}' was rejected by the store.")
        logger.info("photo_uploaded file_name=%s", file_name)
        return result.file_url
