"""Content of the README tab, rebuilt from the schema registry on every reconciliation."""
from __future__ import annotations
from datetime import date
from typing import Optional

from sqlalchemy import Float, Integer

from graide.database.tables import SchemaRegistry

TABLE_NOTES = {
    "Classes": (
        "Subject-class combinations (Math-5A, etc.)",
        "One row per subject-class (e.g., Math-5A, Romanian-5A)",
    ),
    "Students": (
        "Student information",
        'Shared across subjects (class_name like "5A")',
    ),
    "Tests": (
        "Assessments (tests, homework, projects, quizzes)",
        "class_ids lists every class the assessment is given to",
    ),
    "Submissions": (
        "One student's attempt at one test",
        "Central table linking photos to grades",
    ),
    "SubmissionDetails": (
        "Mistakes flagged per question",
        "Linked to Submissions via submission_id",
    ),
    "Rubrics": (
        "Answer keys per test",
        "Linked to Tests via test_id",
    ),
    "Config": (
        "App settings (key-value)",
        "schema_version is managed by grAIde",
    ),
}

RELATIONSHIPS = [
    ("Class Name → Students", 'Students linked by class_name + school_year (e.g., "5A") - shared across subjects'),
    ("Classes → Tests", "Tests list their classes in class_ids (comma-separated Classes.id)"),
    ("Students + Tests → Submissions", "One submission per student per test (student_id, test_id)"),
    ("Submissions → SubmissionDetails", "Each submission can have many flagged mistakes (submission_id)"),
    ("Tests → Rubrics", "Each test has answer keys for questions (test_id)"),
]

FIELD_NOTES = {
    "id": ("Unique identifier (auto-generated)", "1734012345678-k3j9x2a"),
    "subject": ("Subject name", "Matematică, Limba Română"),
    "class_name": ("Class identifier (shared across subjects)", "5A, 7B, 8C"),
    "grade_level": ("Grade number", "5, 6, 7, 8"),
    "school_year": ("Academic year", "2025-2026"),
    "class_ids": ("Comma-separated Classes.id", "1734-abc,1735-def"),
    "type": ("Assessment type", "test, homework, project, quiz"),
    "grading_system": ("How grades are expressed", "1-10, 1-100, percentage, points"),
    "status": ("Row status", "active/archived, new/correcting/corrected/absent"),
    "test_id": ("Reference to Tests.id", "1734012345678-k3j9x2a"),
    "student_id": ("Reference to Students.id", "1734012345678-k3j9x2a"),
    "class_id": ("Reference to Classes.id", "1734012345678-k3j9x2a"),
    "submission_id": ("Reference to Submissions.id", "1734012345678-k3j9x2a"),
    "drive_file_ids": ("Comma-separated Google Drive file ids", "abc123xyz789"),
    "mistake_type": ("Error category", "wrong_formula, calculation_error, concept_error"),
    "ai_confidence": ("AI confidence score (0.0-1.0)", "0.95"),
}


def _type_label(column) -> str:
    if isinstance(column.type, (Integer, Float)):
        return "Number"
    return "String"


def readme_rows(registry: SchemaRegistry, today: Optional[date] = None) -> list[tuple[str, list[str]]]:
    today = today or date.today()
    rows: list[tuple[str, list[str]]] = [
        ("title", ["📚 grAIde Data - README"]),
        ("plain", []),
        ("plain", ["Welcome to grAIde!"]),
        ("plain", ["This spreadsheet contains all your grading data. You can view and edit it directly in Google Sheets."]),
        ("plain", []),
        ("section", ["📊 SHEETS OVERVIEW"]),
        ("plain", []),
        ("columns", ["Sheet", "Purpose", "Columns", "Notes"]),
    ]
    for name in registry.table_names:
        purpose, notes = TABLE_NOTES.get(name, ("", ""))
        rows.append(("plain", [name, purpose, ", ".join(registry.headers(name)), notes]))

    rows += [("plain", []), ("section", ["🔗 RELATIONSHIPS"]), ("plain", [])]
    rows += [("plain", [left, right]) for left, right in RELATIONSHIPS]

    rows += [
        ("plain", []),
        ("section", ["📝 FIELD DESCRIPTIONS"]),
        ("plain", []),
        ("columns", ["Field", "Type", "Description", "Example"]),
    ]
    seen = set()
    for name in registry.table_names:
        for column in registry.columns(name):
            if column.name in seen or column.name not in FIELD_NOTES:
                continue
            seen.add(column.name)
            description, example = FIELD_NOTES[column.name]
            rows.append(("plain", [column.name, _type_label(column), description, example]))

    rows += [
        ("plain", []),
        ("section", ["✏️ EDITING DATA"]),
        ("plain", []),
        ("plain", ["✅ You can edit:", "Student names, test metadata, grades, teacher notes"]),
        ("plain", ["⚠️ Be careful:", "Do not delete ID columns or change IDs (breaks relationships)"]),
        ("plain", ["🚫 Do not edit:", "Header rows, column order, the Config schema_version row"]),
        ("plain", []),
        ("section", ["💡 TIPS"]),
        ("plain", []),
        ("plain", ["• Filter & Sort:", "Use Google Sheets filters to analyze data"]),
        ("plain", ["• Export:", "Download as Excel (File → Download → Microsoft Excel)"]),
        ("plain", ["• Version History:", "File → Version history to see/restore previous versions"]),
        ("plain", []),
        ("plain", [f"Schema version: {registry.version}"]),
        ("plain", [f"Last updated: {today.isoformat()}"]),
    ]
    return rows
