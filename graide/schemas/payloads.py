from __future__ import annotations
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from graide.schemas.entities import AssessmentStatus, AssessmentType, GradingSystem, SubmissionStatus

# ---- Classes / Students ----
class ClassCreate(BaseModel):
    subject: str = Field(..., min_length=1)
    class_name: str = Field(..., min_length=1)
    grade_level: int = Field(..., ge=5, le=8)
    school_year: str = Field(..., min_length=1)
    students: list[str] = Field(default_factory=list)

class ClassUpdate(BaseModel):
    subject: Optional[str] = None
    class_name: Optional[str] = None
    grade_level: Optional[int] = Field(None, ge=5, le=8)
    school_year: Optional[str] = None

class StudentCreate(BaseModel):
    class_name: str = Field(..., min_length=1)
    school_year: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    student_num: Optional[str] = None

class StudentUpdate(BaseModel):
    class_name: Optional[str] = None
    school_year: Optional[str] = None
    name: Optional[str] = None
    student_num: Optional[str] = None

# ---- Tests ----
class AssessmentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: AssessmentType = AssessmentType.test
    class_ids: list[str] = Field(..., min_length=1)
    given_at: date
    deadline: Optional[date] = None
    grading_system: GradingSystem = GradingSystem.ten_point
    max_score: Optional[float] = Field(None, gt=0)
    drive_folder_id: Optional[str] = None

class AssessmentUpdate(BaseModel):
    name: Optional[str] = None
    deadline: Optional[date] = None
    max_score: Optional[float] = Field(None, gt=0)
    status: Optional[AssessmentStatus] = None
    drive_folder_id: Optional[str] = None

# ---- Submissions ----
class SubmissionUpdate(BaseModel):
    grade: Optional[float] = None
    ai_grade: Optional[float] = None
    drive_file_ids: Optional[str] = None
    notes: Optional[str] = None

class StatusChange(BaseModel):
    status: SubmissionStatus

class AbsenceMarking(BaseModel):
    student_ids: list[str] = Field(default_factory=list)

class SubmissionDetailCreate(BaseModel):
    file_id: Optional[str] = None
    question_num: int = Field(..., ge=1)
    mistake_type: str
    description: str = ""
    points_deducted: float = 0
    ai_notes: Optional[str] = None
    teacher_notes: Optional[str] = None
    ai_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)

class SubmissionDetailUpdate(BaseModel):
    mistake_type: Optional[str] = None
    description: Optional[str] = None
    points_deducted: Optional[float] = None
    teacher_notes: Optional[str] = None

# ---- Rubrics / Config / Workspace ----
class RubricCreate(BaseModel):
    test_id: str
    question_num: int = Field(..., ge=1)
    answer_key: str
    partial_credit: Optional[str] = None
    max_points: float = Field(..., ge=0)

class RubricUpdate(BaseModel):
    answer_key: Optional[str] = None
    partial_credit: Optional[str] = None
    max_points: Optional[float] = Field(None, ge=0)

class ConfigValue(BaseModel):
    value: str

class WorkspaceSetup(BaseModel):
    share_link: str = Field(..., min_length=1)
