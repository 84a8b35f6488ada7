from __future__ import annotations
import logging
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, Sequence, TypeVar

from pydantic import ValidationError

from graide.core.errors import InvalidInputError, NotFoundError, RowDecodeError
from graide.database import codec
from graide.database.table_store import TableStore
from graide.database.tables import (
    CLASSES, CONFIG, RUBRICS, STUDENTS, SUBMISSION_DETAILS, SUBMISSIONS, TESTS,
    SchemaRegistry, registry,
)
from graide.schemas.entities import (
    Assessment, ConfigEntry, Rubric, SchoolClass, SheetRecord, Student, Submission, SubmissionDetail,
)

logger = logging.getLogger("graide.repository")

ModelT = TypeVar("ModelT", bound=SheetRecord)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """Millisecond timestamp plus a random suffix, e.g. 1734012345678-k3j9x2a."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"{int(time.time() * 1000)}-{suffix}"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_class_name(value: str) -> str:
    return value.strip().upper()


def _cell_value(value: Any) -> Any:
    # 10.0 -> "10" in the sheet
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class SheetRepository(Generic[ModelT]):
    """list/get/create/update/delete for one table, on top of a TableStore.

    update and delete re-read the whole table and find the row by its key
    (always the first column) right before writing, since row positions are
    not stable across deletes.
    """

    table: str
    model: type[ModelT]
    entity: str
    key_field = "id"
    timestamped = False

    def __init__(self, store: TableStore, schema: SchemaRegistry = registry):
        self.store = store
        self.schema = schema
        self.headers = schema.headers(self.table)
        self._nullable = schema.nullable_columns(self.table)

    # -----------------------------
    # Row <-> record
    # -----------------------------
    def _decode(self, cells: Sequence[str], row_index: int) -> ModelT:
        raw = codec.blank_to_none(codec.decode(self.headers, cells), self._nullable)
        try:
            return self.model.model_validate(raw)
        except ValidationError as exc:
            raise RowDecodeError(self.table, row_index, str(exc)) from exc

    def _encode(self, record: ModelT) -> list[str]:
        data = {k: _cell_value(v) for k, v in record.model_dump(mode="json").items()}
        return codec.encode(self.headers, data)

    def _prepare(self, data: dict[str, Any]) -> dict[str, Any]:
        """Per-entity normalisation applied on create and update."""
        return data

    def _new_record(self, fields: Mapping[str, Any]) -> ModelT:
        data = dict(fields)
        data[self.key_field] = generate_id()
        if self.timestamped:
            data["created_at"] = utc_now()
        return self.model.model_validate(self._prepare(data))

    async def _locate(self, key: str) -> tuple[int, list[str]]:
        rows = await self.store.read_all(self.table)
        for position, row in enumerate(rows, start=1):
            if row and row[0] == key:
                return position, row
        raise NotFoundError(self.entity, key)

    # -----------------------------
    # CRUD
    # -----------------------------
    async def list(self, predicate: Optional[Callable[[ModelT], bool]] = None) -> list[ModelT]:
        rows = await self.store.read_all(self.table)
        # blank rows (cleared by hand in the sheet) still count for positions
        records = [self._decode(row, i) for i, row in enumerate(rows, start=1) if row and row[0]]
        if predicate is not None:
            records = [r for r in records if predicate(r)]
        return records

    async def get(self, key: str) -> Optional[ModelT]:
        for record in await self.list():
            if getattr(record, self.key_field) == key:
                return record
        return None

    async def require(self, key: str) -> ModelT:
        record = await self.get(key)
        if record is None:
            raise NotFoundError(self.entity, key)
        return record

    async def create(self, fields: Mapping[str, Any]) -> ModelT:
        record = self._new_record(fields)
        await self.store.append(self.table, [self._encode(record)])
        logger.debug("%s created", self.entity, extra={"table": self.table, "key": getattr(record, self.key_field)})
        return record

    async def create_many(self, items: Iterable[Mapping[str, Any]]) -> list[ModelT]:
        """One multi-row append for the whole batch."""
        records = [self._new_record(fields) for fields in items]
        if records:
            await self.store.append(self.table, [self._encode(r) for r in records])
            logger.debug("%s batch created", self.entity, extra={"table": self.table, "count": len(records)})
        return records

    async def update(self, key: str, changes: Mapping[str, Any]) -> ModelT:
        position, row = await self._locate(key)
        current = self._decode(row, position)
        merged = current.model_dump()
        merged.update({k: v for k, v in changes.items() if k != self.key_field})
        try:
            updated = self.model.model_validate(self._prepare(merged))
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
            raise InvalidInputError(f"Invalid {self.entity} update: {fields or exc}") from exc
        await self.store.update_row(self.table, position, self._encode(updated))
        logger.debug("%s updated", self.entity, extra={"table": self.table, "key": key, "row_index": position})
        return updated

    async def delete(self, key: str) -> None:
        position, _ = await self._locate(key)
        await self.store.delete_row(self.table, position)
        logger.debug("%s deleted", self.entity, extra={"table": self.table, "key": key, "row_index": position})


class ClassRepository(SheetRepository[SchoolClass]):
    table = CLASSES
    model = SchoolClass
    entity = "Class"
    timestamped = True

    def _prepare(self, data):
        if data.get("class_name"):
            data["class_name"] = normalize_class_name(data["class_name"])
        return data

    async def list(self, predicate=None, *, school_year: Optional[str] = None) -> list[SchoolClass]:
        classes = await super().list(predicate)
        if school_year:
            classes = [c for c in classes if c.school_year == school_year]
        return classes


class StudentRepository(SheetRepository[Student]):
    table = STUDENTS
    model = Student
    entity = "Student"

    def _prepare(self, data):
        if data.get("class_name"):
            data["class_name"] = normalize_class_name(data["class_name"])
        if data.get("name"):
            data["name"] = data["name"].strip()
        return data

    async def list(
        self, predicate=None, *, class_name: Optional[str] = None, school_year: Optional[str] = None
    ) -> list[Student]:
        students = await super().list(predicate)
        if class_name:
            wanted = normalize_class_name(class_name)
            students = [s for s in students if s.class_name == wanted]
        if school_year:
            students = [s for s in students if s.school_year == school_year]
        return students

    async def roster(self, school_class: SchoolClass) -> list[Student]:
        """Students join classes on (class_name, school_year), not on Class.id."""
        return await self.list(class_name=school_class.class_name, school_year=school_class.school_year)


class AssessmentRepository(SheetRepository[Assessment]):
    table = TESTS
    model = Assessment
    entity = "Test"
    timestamped = True

    async def list(
        self, predicate=None, *, class_id: Optional[str] = None, status: Optional[str] = None
    ) -> list[Assessment]:
        tests = await super().list(predicate)
        if class_id:
            tests = [t for t in tests if class_id in t.class_id_list]
        if status:
            tests = [t for t in tests if t.status == status]
        return tests


class SubmissionRepository(SheetRepository[Submission]):
    table = SUBMISSIONS
    model = Submission
    entity = "Submission"
    timestamped = True

    async def list(
        self,
        predicate=None,
        *,
        test_id: Optional[str] = None,
        student_id: Optional[str] = None,
        class_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Submission]:
        subs = await super().list(predicate)
        if test_id:
            subs = [s for s in subs if s.test_id == test_id]
        if student_id:
            subs = [s for s in subs if s.student_id == student_id]
        if class_id:
            subs = [s for s in subs if s.class_id == class_id]
        if status:
            subs = [s for s in subs if s.status == status]
        return subs


class SubmissionDetailRepository(SheetRepository[SubmissionDetail]):
    table = SUBMISSION_DETAILS
    model = SubmissionDetail
    entity = "SubmissionDetail"

    async def list(self, predicate=None, *, submission_id: Optional[str] = None) -> list[SubmissionDetail]:
        details = await super().list(predicate)
        if submission_id:
            details = [d for d in details if d.submission_id == submission_id]
        return details


class RubricRepository(SheetRepository[Rubric]):
    table = RUBRICS
    model = Rubric
    entity = "Rubric"

    async def list(self, predicate=None, *, test_id: Optional[str] = None) -> list[Rubric]:
        rubrics = await super().list(predicate)
        if test_id:
            rubrics = [r for r in rubrics if r.test_id == test_id]
        return rubrics


class ConfigRepository(SheetRepository[ConfigEntry]):
    """Key-value singleton table; the key column doubles as the row id."""

    table = CONFIG
    model = ConfigEntry
    entity = "Config"
    key_field = "key"

    async def all(self) -> list[ConfigEntry]:
        return await self.list()

    async def create(self, fields: Mapping[str, Any]) -> ConfigEntry:
        return await self.set_value(fields["key"], str(fields.get("value", "")))

    async def get_value(self, key: str) -> Optional[str]:
        entry = await self.get(key)
        return entry.value if entry else None

    async def set_value(self, key: str, value: str) -> ConfigEntry:
        entry = ConfigEntry(key=key, value=value)
        try:
            position, _ = await self._locate(key)
        except NotFoundError:
            await self.store.append(self.table, [self._encode(entry)])
        else:
            await self.store.update_row(self.table, position, self._encode(entry))
        logger.debug("Config set", extra={"key": key})
        return entry
