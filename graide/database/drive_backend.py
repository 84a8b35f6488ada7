from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Optional

from graide.core.errors import AuthExpiredError, BackendError, NotAuthenticatedError
from graide.database.google_api import GoogleApiClient

logger = logging.getLogger("graide.drive")

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
# Drive answers these for files that were deleted or unshared
GONE_STATUSES = (403, 404, 410)


def _quote_literal(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


class DriveBackend(ABC):
    """Folder operations the workspace bootstrapper needs. Nothing else touches Drive."""

    @abstractmethod
    async def find_file(self, folder_id: str, name: str, mime_type: str) -> Optional[str]:
        """Id of the first non-trashed file called `name` directly inside `folder_id`."""
        raise NotImplementedError

    @abstractmethod
    async def create_folder(self, parent_id: str, name: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def add_parent(self, file_id: str, folder_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def is_trashed(self, file_id: str) -> bool:
        """True when the file is in the trash or can no longer be reached."""
        raise NotImplementedError


class GoogleDriveBackend(GoogleApiClient, DriveBackend):
    api_name = "Drive API"

    async def find_file(self, folder_id: str, name: str, mime_type: str) -> Optional[str]:
        query = (
            f"name='{_quote_literal(name)}' and '{_quote_literal(folder_id)}' in parents "
            f"and mimeType='{mime_type}' and trashed=false"
        )
        data = await self._request(
            "GET",
            f"{self.base_url}/files",
            params={"q": query, "fields": "files(id,name)", "pageSize": 10},
        )
        files = data.get("files") or []
        return files[0]["id"] if files else None

    async def create_folder(self, parent_id: str, name: str) -> str:
        data = await self._request(
            "POST",
            f"{self.base_url}/files",
            params={"fields": "id,name"},
            json={"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]},
        )
        return data["id"]

    async def add_parent(self, file_id: str, folder_id: str) -> None:
        await self._request(
            "PATCH",
            f"{self.base_url}/files/{file_id}",
            params={"addParents": folder_id, "fields": "id,parents"},
        )

    async def is_trashed(self, file_id: str) -> bool:
        try:
            data = await self._request(
                "GET", f"{self.base_url}/files/{file_id}", params={"fields": "trashed"}
            )
        except (AuthExpiredError, NotAuthenticatedError):
            raise
        except BackendError as exc:
            # 404/403: deleted or no longer shared with us, same as trashed
            if exc.status_code not in GONE_STATUSES:
                raise
            logger.info("File unreachable, treating as trashed", extra={"file_id": file_id, "status": exc.status_code})
            return True
        return data.get("trashed") is True
