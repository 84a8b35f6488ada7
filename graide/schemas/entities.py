from __future__ import annotations
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AssessmentType(str, Enum):
    test = "test"
    homework = "homework"
    project = "project"
    quiz = "quiz"


class GradingSystem(str, Enum):
    ten_point = "1-10"
    hundred_point = "1-100"
    percentage = "percentage"
    points = "points"


class AssessmentStatus(str, Enum):
    active = "active"
    archived = "archived"


class SubmissionStatus(str, Enum):
    new = "new"
    correcting = "correcting"
    corrected = "corrected"
    absent = "absent"


class SheetRecord(BaseModel):
    model_config = ConfigDict(use_enum_values=True)


class SchoolClass(SheetRecord):
    id: str
    subject: str
    class_name: str
    grade_level: int = Field(..., ge=5, le=8)
    school_year: str
    created_at: str


class Student(SheetRecord):
    id: str
    class_name: str
    school_year: str
    name: str
    student_num: Optional[str] = None


class Assessment(SheetRecord):
    """A row of the Tests table."""

    id: str
    name: str
    type: AssessmentType
    class_ids: str
    given_at: str
    deadline: str
    grading_system: GradingSystem
    max_score: float
    status: AssessmentStatus = AssessmentStatus.active
    drive_folder_id: Optional[str] = None
    created_at: str

    @property
    def class_id_list(self) -> list[str]:
        return [c for c in self.class_ids.split(",") if c]


class Submission(SheetRecord):
    id: str
    test_id: str
    student_id: str
    class_id: str
    status: SubmissionStatus = SubmissionStatus.new
    grade: Optional[float] = None
    ai_grade: Optional[float] = None
    drive_file_ids: Optional[str] = None
    notes: Optional[str] = None
    corrected_at: Optional[str] = None
    created_at: str


class SubmissionDetail(SheetRecord):
    id: str
    submission_id: str
    file_id: Optional[str] = None
    question_num: int
    mistake_type: str
    description: str = ""
    points_deducted: float = 0
    ai_notes: Optional[str] = None
    teacher_notes: Optional[str] = None
    ai_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)


class Rubric(SheetRecord):
    id: str
    test_id: str
    question_num: int
    answer_key: str
    partial_credit: Optional[str] = None
    max_points: float


class ConfigEntry(SheetRecord):
    key: str
    value: str = ""
