from __future__ import annotations
import logging
from typing import Optional, Sequence

from graide.core.errors import BackendError, WorkspaceNotConfiguredError
from graide.database import sheet_requests
from graide.database.spreadsheet_backend import SpreadsheetBackend
from graide.database.table_store import TableStore
from graide.schemas.workspace import WorkspaceContext

logger = logging.getLogger("graide.table_store")

LAST_COLUMN = "ZZ"
README_WIDTH = 4


def a1(table: str, cells: str) -> str:
    escaped = table.replace("'", "''")
    return f"'{escaped}'!{cells}"


class SheetsTableStore(TableStore):
    def __init__(self, backend: SpreadsheetBackend, context: WorkspaceContext):
        self.backend = backend
        self.context = context
        self._sheet_ids: Optional[dict[str, int]] = None

    @property
    def spreadsheet_id(self) -> str:
        if not self.context.spreadsheet_id:
            raise WorkspaceNotConfiguredError()
        return self.context.spreadsheet_id

    async def _load_sheet_ids(self, refresh: bool = False) -> dict[str, int]:
        if self._sheet_ids is None or refresh:
            meta = await self.backend.get(self.spreadsheet_id)
            self._sheet_ids = {
                s["properties"]["title"]: s["properties"]["sheetId"] for s in meta.get("sheets", [])
            }
        return self._sheet_ids

    async def _sheet_id(self, table: str) -> int:
        sheet_ids = await self._load_sheet_ids()
        if table not in sheet_ids:
            sheet_ids = await self._load_sheet_ids(refresh=True)
        if table not in sheet_ids:
            raise BackendError(404, f"Sheet {table} not found", api="Sheets API")
        return sheet_ids[table]

    # 1) rows
    async def read_all(self, table: str) -> list[list[str]]:
        rows = await self.backend.values_get(self.spreadsheet_id, a1(table, f"A2:{LAST_COLUMN}"))
        return [list(r) for r in rows]

    async def append(self, table: str, rows: Sequence[Sequence[str]]) -> None:
        if not rows:
            return
        await self.backend.values_append(self.spreadsheet_id, a1(table, "A:A"), [list(r) for r in rows])
        logger.debug("Rows appended", extra={"table": table, "count": len(rows)})

    async def update_row(self, table: str, row_index: int, cells: Sequence[str]) -> None:
        if row_index < 1:
            raise ValueError("row_index is 1-based")
        sheet_row = row_index + 1
        await self.backend.values_update(
            self.spreadsheet_id, a1(table, f"A{sheet_row}:{LAST_COLUMN}{sheet_row}"), [list(cells)]
        )
        logger.debug("Row updated", extra={"table": table, "row_index": row_index})

    async def delete_row(self, table: str, row_index: int) -> None:
        if row_index < 1:
            raise ValueError("row_index is 1-based")
        sheet_id = await self._sheet_id(table)
        await self.backend.batch_update(
            self.spreadsheet_id, [sheet_requests.delete_row(sheet_id, row_index + 1)]
        )
        logger.debug("Row deleted", extra={"table": table, "row_index": row_index})

    # 2) tabs
    async def list_tables(self) -> list[str]:
        return list(await self._load_sheet_ids(refresh=True))

    async def create_tables(self, tables: dict[str, list[str]]) -> None:
        existing = await self._load_sheet_ids(refresh=True)
        missing = [name for name in tables if name not in existing]
        if not missing:
            return

        reply = await self.backend.batch_update(
            self.spreadsheet_id, [sheet_requests.add_sheet(name) for name in missing]
        )
        for name, answer in zip(missing, reply.get("replies", [])):
            existing[name] = answer["addSheet"]["properties"]["sheetId"]

        header_requests = [
            sheet_requests.header_row(existing[name], tables[name]) for name in missing if tables[name]
        ]
        if header_requests:
            await self.backend.batch_update(self.spreadsheet_id, header_requests)
        logger.info("Tables created", extra={"tables": missing})

    async def write_documentation(self, table: str, rows: list[tuple[str, list[str]]]) -> None:
        sheet_id = await self._sheet_id(table)
        await self.backend.batch_update(
            self.spreadsheet_id,
            [
                sheet_requests.clear_sheet(sheet_id),
                sheet_requests.styled_rows(sheet_id, rows, README_WIDTH),
                sheet_requests.column_width(sheet_id, 0, 1, 200),
                sheet_requests.column_width(sheet_id, 1, README_WIDTH, 250),
            ],
        )
        logger.debug("Documentation rewritten", extra={"table": table, "rows": len(rows)})
