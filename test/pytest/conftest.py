import re
from typing import Optional

import pytest

from graide.core.errors import BackendError
from graide.database.drive_backend import DriveBackend
from graide.database.sheets_table_store import SheetsTableStore
from graide.database.spreadsheet_backend import SpreadsheetBackend
from graide.database.tables import SCHEMA_VERSION, SCHEMA_VERSION_KEY, registry
from graide.schemas.workspace import WorkspaceContext, WorkspaceStateStore

RANGE = re.compile(r"^'(?P<title>(?:[^']|'')+)'!(?P<cells>.+)$")
ROW_RANGE = re.compile(r"^A(?P<row>\d+):[A-Z]+(?P=row)$")


class FakeSpreadsheet(SpreadsheetBackend):
    """One spreadsheet held in memory. tabs[title] includes the header row."""

    def __init__(self, spreadsheet_id: str = "sheet-1"):
        self.spreadsheet_id = spreadsheet_id
        self.tabs: dict[str, list[list[str]]] = {}
        self.sheet_ids: dict[str, int] = {}
        self.header_bold: dict[str, bool] = {}
        self.calls: list[str] = []
        self.fail_on: dict[str, Exception] = {}

    def add_tab(self, title: str, rows: Optional[list[list[str]]] = None) -> int:
        self.sheet_ids[title] = 1000 + len(self.sheet_ids)
        self.tabs[title] = [list(r) for r in rows or []]
        return self.sheet_ids[title]

    def data_rows(self, title: str) -> list[list[str]]:
        return self.tabs[title][1:]

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def _meta(self) -> dict:
        return {
            "spreadsheetId": self.spreadsheet_id,
            "sheets": [{"properties": {"title": t, "sheetId": i}} for t, i in self.sheet_ids.items()],
        }

    def _parse(self, range_: str) -> tuple[str, str]:
        match = RANGE.match(range_)
        title = match["title"].replace("''", "'") if match else None
        if title not in self.tabs:
            raise BackendError(400, f"Unable to parse range: {range_}", api="Sheets API")
        return title, match["cells"]

    def _title_for(self, sheet_id: int) -> str:
        return next(t for t, i in self.sheet_ids.items() if i == sheet_id)

    async def get(self, spreadsheet_id):
        self._record("get")
        return self._meta()

    async def create(self, title, sheet_titles):
        self._record("create")
        for name in sheet_titles:
            self.add_tab(name)
        return self._meta()

    async def values_get(self, spreadsheet_id, range_):
        self._record("values_get")
        title, _ = self._parse(range_)
        rows = []
        for row in self.tabs[title][1:]:
            trimmed = list(row)
            while trimmed and trimmed[-1] == "":
                trimmed.pop()
            rows.append(trimmed)
        while rows and not rows[-1]:
            rows.pop()
        return rows

    async def values_append(self, spreadsheet_id, range_, rows):
        self._record("values_append")
        title, _ = self._parse(range_)
        self.tabs[title].extend([list(r) for r in rows])

    async def values_update(self, spreadsheet_id, range_, rows):
        self._record("values_update")
        title, cells = self._parse(range_)
        index = int(ROW_RANGE.match(cells)["row"]) - 1
        while len(self.tabs[title]) <= index:
            self.tabs[title].append([])
        self.tabs[title][index] = list(rows[0])

    async def batch_update(self, spreadsheet_id, requests):
        self._record("batch_update")
        replies = []
        for request in requests:
            if "addSheet" in request:
                title = request["addSheet"]["properties"]["title"]
                sheet_id = self.add_tab(title)
                replies.append({"addSheet": {"properties": {"title": title, "sheetId": sheet_id}}})
            elif "updateCells" in request:
                body = request["updateCells"]
                title = self._title_for(body["range"]["sheetId"])
                if "rows" not in body:
                    self.tabs[title] = []
                else:
                    start = body["range"].get("startRowIndex", 0)
                    for offset, row in enumerate(body["rows"]):
                        cells = [c["userEnteredValue"]["stringValue"] for c in row["values"]]
                        while len(self.tabs[title]) <= start + offset:
                            self.tabs[title].append([])
                        self.tabs[title][start + offset] = cells
                        if start + offset == 0:
                            self.header_bold[title] = all(
                                c["userEnteredFormat"]["textFormat"]["bold"] for c in row["values"]
                            )
                replies.append({})
            elif "deleteDimension" in request:
                rng = request["deleteDimension"]["range"]
                title = self._title_for(rng["sheetId"])
                del self.tabs[title][rng["startIndex"]:rng["endIndex"]]
                replies.append({})
            else:
                replies.append({})
        return {"replies": replies}


class FakeDrive(DriveBackend):
    def __init__(self):
        self.files: dict[str, dict] = {}
        self.calls: list[str] = []
        self._next = 0

    def add(self, file_id, name, mime_type, parent, trashed=False):
        self.files[file_id] = {"name": name, "mimeType": mime_type, "parents": [parent], "trashed": trashed}

    async def find_file(self, folder_id, name, mime_type):
        self.calls.append("find_file")
        for file_id, f in self.files.items():
            if f["name"] == name and f["mimeType"] == mime_type and folder_id in f["parents"] and not f["trashed"]:
                return file_id
        return None

    async def create_folder(self, parent_id, name):
        self.calls.append("create_folder")
        self._next += 1
        folder_id = f"folder-{self._next}"
        self.add(folder_id, name, "application/vnd.google-apps.folder", parent_id)
        return folder_id

    async def add_parent(self, file_id, folder_id):
        self.calls.append("add_parent")
        entry = self.files.setdefault(
            file_id, {"name": "graide-data", "mimeType": "application/vnd.google-apps.spreadsheet", "parents": [], "trashed": False}
        )
        entry["parents"].append(folder_id)

    async def is_trashed(self, file_id):
        self.calls.append("is_trashed")
        entry = self.files.get(file_id)
        return True if entry is None else entry["trashed"]


def provision(fake: FakeSpreadsheet, schema=registry, *, version: Optional[int] = None) -> FakeSpreadsheet:
    """Give `fake` every table of `schema` with its header row, plus README and a version marker."""
    fake.add_tab(schema.documentation_sheet, [["📚 grAIde Data - README"]])
    for name in schema.table_names:
        fake.add_tab(name, [schema.headers(name)])
    if "Config" in fake.tabs:
        fake.tabs["Config"].append([SCHEMA_VERSION_KEY, str(schema.version if version is None else version)])
    return fake


@pytest.fixture
def sheet():
    return provision(FakeSpreadsheet())


@pytest.fixture
def store(sheet):
    return SheetsTableStore(sheet, WorkspaceContext(folder_id="folder-root", spreadsheet_id=sheet.spreadsheet_id))


@pytest.fixture
def drive():
    return FakeDrive()


@pytest.fixture
def state(tmp_path):
    return WorkspaceStateStore(tmp_path / "workspace.json")


@pytest.fixture
def schema_version():
    return SCHEMA_VERSION
