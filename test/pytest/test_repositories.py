import re

import pytest

from graide.core.errors import InvalidInputError, NotFoundError, RowDecodeError
from graide.database.repositories import (
    ClassRepository, ConfigRepository, StudentRepository, SubmissionDetailRepository, SubmissionRepository,
    generate_id, normalize_class_name, utc_now,
)


def math_5a():
    return {"subject": "Mathematics", "class_name": "5a ", "grade_level": 5, "school_year": "2025-2026"}


def test_generate_id_is_timestamp_and_suffix():
    first, second = generate_id(), generate_id()
    assert re.fullmatch(r"\d{13}-[a-z0-9]{7}", first)
    assert first != second


def test_utc_now_is_iso_with_z_suffix():
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z", utc_now())


def test_class_names_are_trimmed_and_uppercased():
    assert normalize_class_name("  5a ") == "5A"


@pytest.mark.asyncio
async def test_create_assigns_id_and_timestamp_and_writes_header_order(store, sheet):
    repo = ClassRepository(store)

    created = await repo.create({**math_5a(), "id": "mine", "created_at": "yesterday"})

    assert created.id != "mine"
    assert created.created_at != "yesterday"
    assert created.class_name == "5A"
    assert sheet.data_rows("Classes") == [
        [created.id, "Mathematics", "5A", "5", "2025-2026", created.created_at]
    ]


@pytest.mark.asyncio
async def test_get_returns_none_and_require_raises_for_unknown_ids(store):
    repo = ClassRepository(store)
    assert await repo.get("missing") is None
    with pytest.raises(NotFoundError):
        await repo.require("missing")


@pytest.mark.asyncio
async def test_update_merges_changes_and_keeps_the_id(store, sheet):
    repo = ClassRepository(store)
    created = await repo.create(math_5a())

    updated = await repo.update(created.id, {"subject": "Physics", "id": "hijack"})

    assert updated.id == created.id
    assert updated.subject == "Physics"
    assert updated.grade_level == 5
    assert sheet.data_rows("Classes")[0][1] == "Physics"


@pytest.mark.asyncio
async def test_update_and_delete_of_unknown_id_do_not_write(store, sheet):
    repo = StudentRepository(store)
    sheet.calls.clear()

    with pytest.raises(NotFoundError):
        await repo.update("ghost", {"name": "x"})
    with pytest.raises(NotFoundError):
        await repo.delete("ghost")

    assert "values_update" not in sheet.calls
    assert "batch_update" not in sheet.calls


@pytest.mark.asyncio
async def test_delete_in_the_middle_keeps_later_rows_addressable(store, sheet):
    repo = StudentRepository(store)
    a, b, c = await repo.create_many(
        {"class_name": "5A", "school_year": "2025-2026", "name": name} for name in ("A", "B", "C")
    )

    await repo.delete(b.id)
    await repo.update(c.id, {"student_num": "3"})

    assert [s.name for s in await repo.list()] == ["A", "C"]
    assert (await repo.require(c.id)).student_num == "3"
    assert (await repo.require(a.id)).student_num is None
    with pytest.raises(NotFoundError):
        await repo.require(b.id)


@pytest.mark.asyncio
async def test_create_many_is_a_single_append(store, sheet):
    repo = StudentRepository(store)
    sheet.calls.clear()

    created = await repo.create_many(
        [{"class_name": "5a", "school_year": "2025-2026", "name": f" Student {i} "} for i in range(4)]
    )

    assert sheet.calls.count("values_append") == 1
    assert len({s.id for s in created}) == 4
    assert created[0].name == "Student 0"


@pytest.mark.asyncio
async def test_list_filters(store):
    students = StudentRepository(store)
    await students.create({"class_name": "5A", "school_year": "2025-2026", "name": "Ana"})
    await students.create({"class_name": "5B", "school_year": "2025-2026", "name": "Bo"})
    await students.create({"class_name": "5A", "school_year": "2024-2025", "name": "Cy"})

    assert [s.name for s in await students.list(class_name="5a")] == ["Ana", "Cy"]
    assert [s.name for s in await students.list(class_name="5A", school_year="2025-2026")] == ["Ana"]


@pytest.mark.asyncio
async def test_blank_rows_are_skipped_but_positions_hold(store, sheet):
    repo = StudentRepository(store)
    first = await repo.create({"class_name": "5A", "school_year": "2025-2026", "name": "Ana"})
    sheet.tabs["Students"].append([])
    last = await repo.create({"class_name": "5A", "school_year": "2025-2026", "name": "Bo"})

    await repo.update(last.id, {"name": "Bob"})

    assert [s.name for s in await repo.list()] == ["Ana", "Bob"]
    assert sheet.data_rows("Students")[0][0] == first.id
    assert sheet.data_rows("Students")[2][3] == "Bob"


@pytest.mark.asyncio
async def test_numeric_cells_decode_and_floats_write_without_decimals(store, sheet):
    subs = SubmissionRepository(store)
    created = await subs.create({"test_id": "t1", "student_id": "s1", "class_id": "c1", "status": "new"})

    await subs.update(created.id, {"grade": 8.0, "ai_grade": 7.5})

    row = sheet.data_rows("Submissions")[0]
    assert row[5] == "8"
    assert row[6] == "7.5"
    fetched = await subs.require(created.id)
    assert fetched.grade == 8.0
    assert fetched.notes is None


@pytest.mark.asyncio
async def test_malformed_row_raises_decode_error(store, sheet):
    sheet.tabs["Classes"].append(["c1", "Math", "5A", "not-a-number", "2025-2026", "t"])

    with pytest.raises(RowDecodeError) as info:
        await ClassRepository(store).list()
    assert info.value.row_index == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("changes", [{"subject": None}, {"grade_level": "fifth"}])
async def test_invalid_update_is_rejected_before_writing(store, sheet, changes):
    repo = ClassRepository(store)
    created = await repo.create(math_5a())
    before = [list(row) for row in sheet.data_rows("Classes")]
    sheet.calls.clear()

    with pytest.raises(InvalidInputError) as info:
        await repo.update(created.id, changes)

    assert next(iter(changes)) in str(info.value)
    assert "values_update" not in sheet.calls
    assert sheet.data_rows("Classes") == before


@pytest.mark.asyncio
async def test_details_default_to_empty_description_and_zero_points(store):
    details = SubmissionDetailRepository(store)

    created = await details.create({"submission_id": "sub-1", "question_num": 2, "mistake_type": "calculation"})

    fetched = (await details.list(submission_id="sub-1"))[0]
    assert fetched.id == created.id
    assert fetched.description == ""
    assert fetched.points_deducted == 0
    assert fetched.ai_confidence is None


@pytest.mark.asyncio
async def test_deleting_a_class_leaves_its_submissions_dangling(store):
    classes = ClassRepository(store)
    subs = SubmissionRepository(store)
    school_class = await classes.create(math_5a())
    sub = await subs.create({"test_id": "t1", "student_id": "s1", "class_id": school_class.id, "status": "new"})

    await classes.delete(school_class.id)

    assert await classes.get(school_class.id) is None
    assert (await subs.require(sub.id)).class_id == school_class.id


@pytest.mark.asyncio
async def test_config_set_value_updates_in_place(store, sheet):
    config = ConfigRepository(store)

    await config.set_value("teacher_name", "Ms. Rossi")
    await config.set_value("teacher_name", "Ms. Bianchi")

    assert await config.get_value("teacher_name") == "Ms. Bianchi"
    assert await config.get_value("missing") is None
    assert [e.key for e in await config.all()] == ["schema_version", "teacher_name"]
    assert len(sheet.data_rows("Config")) == 2
