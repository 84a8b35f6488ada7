from __future__ import annotations
import logging
import re
from typing import Optional

from graide.core.errors import InvalidInputError, WorkspaceNotConfiguredError
from graide.database import sheet_requests
from graide.database.drive_backend import FOLDER_MIME_TYPE, SPREADSHEET_MIME_TYPE, DriveBackend
from graide.database.repositories import ConfigRepository
from graide.database.sheets_table_store import SheetsTableStore
from graide.database.spreadsheet_backend import SpreadsheetBackend
from graide.database.tables import SCHEMA_VERSION_KEY, SchemaRegistry, registry
from graide.schemas.workspace import WorkspaceContext, WorkspaceStateStore, WorkspaceStatus
from graide.services.documentation import readme_rows
from graide.services.schema_reconciler import SchemaReconciler

logger = logging.getLogger("graide.workspace")

_FOLDER_PATTERNS = [
    re.compile(r"/u/\d+/folders/([a-zA-Z0-9_-]+)"),
    re.compile(r"folders/([a-zA-Z0-9_-]+)"),
    re.compile(r"[?&]id=([a-zA-Z0-9_-]+)"),
]


def extract_folder_id(share_link: str) -> str:
    """Drive folder id from a share link, a /u/N/ link, an ?id= link or a bare id."""
    link = share_link.strip()
    if "/" not in link and "?" not in link and len(link) > 20:
        return link
    for pattern in _FOLDER_PATTERNS:
        match = pattern.search(link)
        if match:
            return match.group(1)
    raise InvalidInputError("Invalid Drive folder link format")


class WorkspaceService:
    """Locates or creates the backing spreadsheet inside the workspace folder.

    This is the only place a spreadsheet gets created; the reconciler only
    adds tabs to one that already exists.
    """

    def __init__(
        self,
        sheets: SpreadsheetBackend,
        drive: DriveBackend,
        state: WorkspaceStateStore,
        *,
        spreadsheet_name: str = "graide-data",
        organized_folder_name: str = "organized",
        schema: SchemaRegistry = registry,
    ) -> None:
        self.sheets = sheets
        self.drive = drive
        self.state = state
        self.spreadsheet_name = spreadsheet_name
        self.organized_folder_name = organized_folder_name
        self.schema = schema
        self.context = state.load()

    def _save(self) -> None:
        self.state.save(self.context)

    def store(self) -> SheetsTableStore:
        return SheetsTableStore(self.sheets, self.context)

    # -----------------------------
    # Bootstrap
    # -----------------------------
    async def setup(self, share_link: str) -> WorkspaceStatus:
        folder_id = extract_folder_id(share_link)
        if folder_id != self.context.folder_id:
            # different workspace: nothing cached for the old one applies
            self.context = WorkspaceContext(folder_id=folder_id)
            self._save()
        return await self.initialize()

    async def initialize(self) -> WorkspaceStatus:
        if not self.context.folder_id:
            raise WorkspaceNotConfiguredError()

        organized_id = await self.ensure_organized_folder()
        spreadsheet_id = await self.ensure_spreadsheet()
        result = await SchemaReconciler(self.store(), self.schema).reconcile()

        logger.info(
            "Workspace ready",
            extra={"folder_id": self.context.folder_id, "spreadsheet_id": spreadsheet_id, "organized_folder_id": organized_id},
        )
        return WorkspaceStatus(
            is_initialized=True,
            folder_id=self.context.folder_id,
            spreadsheet_id=spreadsheet_id,
            organized_folder_id=organized_id,
            schema_version=result.current_version,
        )

    async def ensure_spreadsheet(self) -> str:
        folder_id = self.context.folder_id
        if not folder_id:
            raise WorkspaceNotConfiguredError()

        cached = self.context.spreadsheet_id
        if cached:
            if not await self.drive.is_trashed(cached):
                logger.info("Using cached spreadsheet", extra={"spreadsheet_id": cached})
                return cached
            logger.info("Cached spreadsheet is gone, discarding", extra={"spreadsheet_id": cached})
            self.context.spreadsheet_id = None
            self._save()

        found = await self.drive.find_file(folder_id, self.spreadsheet_name, SPREADSHEET_MIME_TYPE)
        if found:
            logger.info("Found existing spreadsheet", extra={"spreadsheet_id": found})
            spreadsheet_id = found
        else:
            spreadsheet_id = await self._create_spreadsheet(folder_id)

        self.context.spreadsheet_id = spreadsheet_id
        self._save()
        return spreadsheet_id

    async def _create_spreadsheet(self, folder_id: str) -> str:
        logger.info("Creating spreadsheet", extra={"folder_id": folder_id, "title": self.spreadsheet_name})
        created = await self.sheets.create(self.spreadsheet_name, self.schema.sheet_titles)
        spreadsheet_id = created["spreadsheetId"]

        # cache straight away: Drive search may not index the new file for a while
        self.context.spreadsheet_id = spreadsheet_id
        self._save()

        await self.drive.add_parent(spreadsheet_id, folder_id)

        sheet_ids = {s["properties"]["title"]: s["properties"]["sheetId"] for s in created.get("sheets", [])}
        await self.sheets.batch_update(
            spreadsheet_id,
            [sheet_requests.header_row(sheet_ids[name], self.schema.headers(name)) for name in self.schema.table_names],
        )

        store = self.store()
        await store.write_documentation(self.schema.documentation_sheet, readme_rows(self.schema))
        await ConfigRepository(store, self.schema).set_value(SCHEMA_VERSION_KEY, str(self.schema.version))
        return spreadsheet_id

    async def ensure_organized_folder(self) -> str:
        folder_id = self.context.folder_id
        if not folder_id:
            raise WorkspaceNotConfiguredError()

        cached = self.context.organized_folder_id
        if cached and not await self.drive.is_trashed(cached):
            return cached

        organized_id = await self.drive.find_file(folder_id, self.organized_folder_name, FOLDER_MIME_TYPE)
        if not organized_id:
            organized_id = await self.drive.create_folder(folder_id, self.organized_folder_name)
            logger.info("Created organized folder", extra={"folder_id": organized_id})
        self.context.organized_folder_id = organized_id
        self._save()
        return organized_id

    # -----------------------------
    # Status / maintenance
    # -----------------------------
    async def verify(self) -> WorkspaceStatus:
        """Current state, dropping cached ids whose Drive entries are trashed."""
        if not self.context.folder_id:
            return WorkspaceStatus(is_initialized=False, error="No Drive folder configured")

        if self.context.spreadsheet_id and await self.drive.is_trashed(self.context.spreadsheet_id):
            logger.info("Cached spreadsheet is trashed, clearing", extra={"spreadsheet_id": self.context.spreadsheet_id})
            self.context.spreadsheet_id = None
            # both live in the same folder; recreate them together
            self.context.organized_folder_id = None
            self._save()

        if self.context.organized_folder_id and await self.drive.is_trashed(self.context.organized_folder_id):
            self.context.organized_folder_id = None
            self._save()

        schema_version: Optional[int] = None
        if self.context.spreadsheet_id:
            schema_version = await SchemaReconciler(self.store(), self.schema).stored_version()

        return WorkspaceStatus(
            is_initialized=bool(self.context.spreadsheet_id),
            folder_id=self.context.folder_id,
            spreadsheet_id=self.context.spreadsheet_id,
            organized_folder_id=self.context.organized_folder_id,
            schema_version=schema_version,
        )

    async def reinitialize(self) -> WorkspaceStatus:
        if not self.context.folder_id:
            raise WorkspaceNotConfiguredError("No folder ID found. Please configure a Drive folder first.")
        self.context.spreadsheet_id = None
        self.context.organized_folder_id = None
        self._save()
        return await self.initialize()

    def reset(self) -> None:
        self.context = WorkspaceContext()
        self.state.clear()
        logger.info("Workspace context cleared")
