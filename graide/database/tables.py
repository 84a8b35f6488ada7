from sqlalchemy import MetaData, Table, Column, String, Integer, Float

# Bump on every change to a table's shape (new column, new table, rename).
# Columns are only ever appended: header order is the on-disk row layout.
SCHEMA_VERSION = 3

DOCUMENTATION_SHEET = "README"
SCHEMA_VERSION_KEY = "schema_version"

CLASSES = "Classes"
STUDENTS = "Students"
TESTS = "Tests"
SUBMISSIONS = "Submissions"
SUBMISSION_DETAILS = "SubmissionDetails"
RUBRICS = "Rubrics"
CONFIG = "Config"

metadata = MetaData()

classes = Table(
    CLASSES,
    metadata,
    Column("id", String, primary_key=True),
    Column("subject", String, nullable=False),
    Column("class_name", String, nullable=False),
    Column("grade_level", Integer, nullable=False),
    Column("school_year", String, nullable=False),
    Column("created_at", String, nullable=False),
)

students = Table(
    STUDENTS,
    metadata,
    Column("id", String, primary_key=True),
    Column("class_name", String, nullable=False),
    Column("school_year", String, nullable=False),
    Column("name", String, nullable=False),
    Column("student_num", String, nullable=True),
)

tests = Table(
    TESTS,
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("type", String, nullable=False),
    Column("class_ids", String, nullable=False),
    Column("given_at", String, nullable=False),
    Column("deadline", String, nullable=False),
    Column("grading_system", String, nullable=False),
    Column("max_score", Float, nullable=False),
    Column("status", String, nullable=False),
    Column("drive_folder_id", String, nullable=True),
    Column("created_at", String, nullable=False),
)

submissions = Table(
    SUBMISSIONS,
    metadata,
    Column("id", String, primary_key=True),
    Column("test_id", String, nullable=False),
    Column("student_id", String, nullable=False),
    Column("class_id", String, nullable=False),
    Column("status", String, nullable=False),
    Column("grade", Float, nullable=True),
    Column("ai_grade", Float, nullable=True),
    Column("drive_file_ids", String, nullable=True),
    Column("notes", String, nullable=True),
    Column("corrected_at", String, nullable=True),
    Column("created_at", String, nullable=False),
)

submission_details = Table(
    SUBMISSION_DETAILS,
    metadata,
    Column("id", String, primary_key=True),
    Column("submission_id", String, nullable=False),
    Column("file_id", String, nullable=True),
    Column("question_num", Integer, nullable=False),
    Column("mistake_type", String, nullable=False),
    Column("description", String, nullable=False),
    Column("points_deducted", Float, nullable=False),
    Column("ai_notes", String, nullable=True),
    Column("teacher_notes", String, nullable=True),
    Column("ai_confidence", Float, nullable=True),
)

rubrics = Table(
    RUBRICS,
    metadata,
    Column("id", String, primary_key=True),
    Column("test_id", String, nullable=False),
    Column("question_num", Integer, nullable=False),
    Column("answer_key", String, nullable=False),
    Column("partial_credit", String, nullable=True),
    Column("max_points", Float, nullable=False),
)

config = Table(
    CONFIG,
    metadata,
    Column("key", String, primary_key=True),
    Column("value", String, nullable=False),
)


class SchemaRegistry:
    """Versioned table-name -> ordered header list declaration.

    The Reconciler diffs a live spreadsheet against one of these; the
    repositories read their header lists from it.
    """

    def __init__(self, version: int, schema: MetaData, *, documentation_sheet: str = DOCUMENTATION_SHEET):
        self.version = version
        self.metadata = schema
        self.documentation_sheet = documentation_sheet

    @property
    def table_names(self) -> list[str]:
        # MetaData keeps declaration order
        return list(self.metadata.tables.keys())

    @property
    def sheet_titles(self) -> list[str]:
        """Every tab a fully provisioned spreadsheet carries, README first."""
        return [self.documentation_sheet, *self.table_names]

    def table(self, name: str) -> Table:
        try:
            return self.metadata.tables[name]
        except KeyError:
            raise KeyError(f"Table {name!r} is not declared in schema v{self.version}") from None

    def columns(self, name: str) -> list[Column]:
        return list(self.table(name).columns)

    def headers(self, name: str) -> list[str]:
        return [c.name for c in self.table(name).columns]

    def nullable_columns(self, name: str) -> set[str]:
        return {c.name for c in self.table(name).columns if c.nullable and not c.primary_key}


registry = SchemaRegistry(SCHEMA_VERSION, metadata)
