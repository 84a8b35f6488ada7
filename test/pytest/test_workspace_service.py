import pytest

from conftest import FakeSpreadsheet, provision

from graide.core.errors import InvalidInputError, WorkspaceNotConfiguredError
from graide.database.drive_backend import FOLDER_MIME_TYPE, SPREADSHEET_MIME_TYPE
from graide.database.tables import registry
from graide.schemas.workspace import WorkspaceContext
from graide.services.workspace_service import WorkspaceService, extract_folder_id

FOLDER = "1AbCdEfGhIjKlMnOpQrStUvWxYz012345"


@pytest.mark.parametrize(
    "link",
    [
        f"https://drive.google.com/drive/folders/{FOLDER}",
        f"https://drive.google.com/drive/folders/{FOLDER}?usp=sharing",
        f"https://drive.google.com/drive/u/1/folders/{FOLDER}",
        f"https://drive.google.com/open?id={FOLDER}",
        f"  {FOLDER}  ",
    ],
)
def test_extract_folder_id(link):
    assert extract_folder_id(link) == FOLDER


@pytest.mark.parametrize("link", ["", "short", "https://example.com/nothing/here"])
def test_extract_folder_id_rejects_unknown_formats(link):
    with pytest.raises(InvalidInputError):
        extract_folder_id(link)


def service_for(sheets, drive, state):
    return WorkspaceService(sheets, drive, state)


@pytest.mark.asyncio
async def test_setup_creates_spreadsheet_and_organized_folder(drive, state):
    sheets = FakeSpreadsheet("new-sheet")

    status = await service_for(sheets, drive, state).setup(f"https://drive.google.com/drive/folders/{FOLDER}")

    assert status.is_initialized is True
    assert status.spreadsheet_id == "new-sheet"
    assert status.schema_version == registry.version
    assert list(sheets.tabs) == registry.sheet_titles
    for name in registry.table_names:
        assert sheets.tabs[name][0] == registry.headers(name)
    assert sheets.data_rows("Config") == [["schema_version", "3"]]
    assert FOLDER in drive.files["new-sheet"]["parents"]
    assert drive.files[status.organized_folder_id]["mimeType"] == FOLDER_MIME_TYPE

    saved = state.load()
    assert saved == WorkspaceContext(
        folder_id=FOLDER, spreadsheet_id="new-sheet", organized_folder_id=status.organized_folder_id
    )


@pytest.mark.asyncio
async def test_second_initialize_reuses_cached_ids(drive, state):
    sheets = FakeSpreadsheet("new-sheet")
    await service_for(sheets, drive, state).setup(FOLDER)
    sheets.calls.clear()
    drive.calls.clear()

    status = await service_for(sheets, drive, state).initialize()

    assert status.spreadsheet_id == "new-sheet"
    assert "create" not in sheets.calls
    assert "find_file" not in drive.calls
    assert "create_folder" not in drive.calls


@pytest.mark.asyncio
async def test_existing_spreadsheet_in_folder_is_found_not_recreated(drive, state):
    sheets = provision(FakeSpreadsheet("existing"))
    drive.add("existing", "graide-data", SPREADSHEET_MIME_TYPE, FOLDER)

    status = await service_for(sheets, drive, state).setup(FOLDER)

    assert status.spreadsheet_id == "existing"
    assert "create" not in sheets.calls


@pytest.mark.asyncio
async def test_trashed_cached_spreadsheet_is_replaced(drive, state):
    state.save(WorkspaceContext(folder_id=FOLDER, spreadsheet_id="old"))
    drive.add("old", "graide-data", SPREADSHEET_MIME_TYPE, FOLDER, trashed=True)
    sheets = FakeSpreadsheet("fresh")

    spreadsheet_id = await service_for(sheets, drive, state).ensure_spreadsheet()

    assert spreadsheet_id == "fresh"
    assert state.load().spreadsheet_id == "fresh"


@pytest.mark.asyncio
async def test_new_spreadsheet_id_is_cached_before_later_steps_fail(drive, state):
    sheets = FakeSpreadsheet("half-made")
    sheets.fail_on["batch_update"] = RuntimeError("network down")
    service = service_for(sheets, drive, state)
    service.context = WorkspaceContext(folder_id=FOLDER)

    with pytest.raises(RuntimeError):
        await service.ensure_spreadsheet()

    assert state.load().spreadsheet_id == "half-made"


@pytest.mark.asyncio
async def test_initialize_without_folder_is_not_configured(drive, state):
    with pytest.raises(WorkspaceNotConfiguredError):
        await service_for(FakeSpreadsheet(), drive, state).initialize()


@pytest.mark.asyncio
async def test_setup_with_other_folder_drops_cached_ids(drive, state):
    state.save(WorkspaceContext(folder_id="x" * 25, spreadsheet_id="old-sheet", organized_folder_id="old-org"))
    sheets = FakeSpreadsheet("new-sheet")

    status = await service_for(sheets, drive, state).setup(FOLDER)

    assert status.folder_id == FOLDER
    assert status.spreadsheet_id == "new-sheet"
    assert status.organized_folder_id != "old-org"


@pytest.mark.asyncio
async def test_verify_clears_trashed_ids(drive, state):
    state.save(WorkspaceContext(folder_id=FOLDER, spreadsheet_id="gone", organized_folder_id="org"))
    drive.add("gone", "graide-data", SPREADSHEET_MIME_TYPE, FOLDER, trashed=True)
    drive.add("org", "organized", FOLDER_MIME_TYPE, FOLDER)

    status = await service_for(FakeSpreadsheet(), drive, state).verify()

    assert status.is_initialized is False
    assert status.spreadsheet_id is None
    assert status.organized_folder_id is None
    assert state.load() == WorkspaceContext(folder_id=FOLDER)


@pytest.mark.asyncio
async def test_verify_reports_stored_schema_version(drive, state):
    sheets = provision(FakeSpreadsheet("live"))
    drive.add("live", "graide-data", SPREADSHEET_MIME_TYPE, FOLDER)
    state.save(WorkspaceContext(folder_id=FOLDER, spreadsheet_id="live"))

    status = await service_for(sheets, drive, state).verify()

    assert status.is_initialized is True
    assert status.schema_version == 3


@pytest.mark.asyncio
async def test_verify_without_folder(drive, state):
    status = await service_for(FakeSpreadsheet(), drive, state).verify()
    assert status.is_initialized is False
    assert status.error


@pytest.mark.asyncio
async def test_reinitialize_searches_again(drive, state):
    sheets = provision(FakeSpreadsheet("found"))
    drive.add("found", "graide-data", SPREADSHEET_MIME_TYPE, FOLDER)
    state.save(WorkspaceContext(folder_id=FOLDER, spreadsheet_id="stale"))

    status = await service_for(sheets, drive, state).reinitialize()

    assert status.spreadsheet_id == "found"
    assert state.load().spreadsheet_id == "found"
    assert "create" not in sheets.calls


@pytest.mark.asyncio
async def test_reset_forgets_everything(drive, state):
    state.save(WorkspaceContext(folder_id=FOLDER, spreadsheet_id="s"))
    service = service_for(FakeSpreadsheet(), drive, state)

    service.reset()

    assert service.context == WorkspaceContext()
    assert state.load() == WorkspaceContext()
    with pytest.raises(WorkspaceNotConfiguredError):
        await service.reinitialize()
