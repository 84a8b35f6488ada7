from typing import Annotated

import httpx
from fastapi import Depends, Request

from graide.core.config import Settings, settings
from graide.database.drive_backend import DriveBackend, GoogleDriveBackend
from graide.database.google_api import StaticTokenProvider
from graide.database.repositories import (
    AssessmentRepository, ClassRepository, ConfigRepository, RubricRepository, StudentRepository,
    SubmissionDetailRepository, SubmissionRepository,
)
from graide.database.sheets_table_store import SheetsTableStore
from graide.database.spreadsheet_backend import GoogleSheetsBackend, SpreadsheetBackend
from graide.database.table_store import TableStore
from graide.schemas.workspace import WorkspaceStateStore
from graide.services.assessment_service import AssessmentService
from graide.services.auth_service import AuthService
from graide.services.class_service import ClassService
from graide.services.submission_service import SubmissionService
from graide.services.workspace_service import WorkspaceService


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", settings)

def get_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise RuntimeError("HTTP client not initialised")
    return client

def get_workspace_state(request: Request) -> WorkspaceStateStore:
    state = getattr(request.app.state, "workspace_state", None)
    if state is None:
        raise RuntimeError("Workspace state not initialised")
    return state


SettingsDep = Annotated[Settings, Depends(get_settings)]
HttpDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
TokensDep = Annotated[StaticTokenProvider, Depends(AuthService.get_token_provider)]


def get_sheets_backend(http: HttpDep, tokens: TokensDep, cfg: SettingsDep) -> SpreadsheetBackend:
    return GoogleSheetsBackend(http, tokens, cfg.sheets_api_base)

def get_drive_backend(http: HttpDep, tokens: TokensDep, cfg: SettingsDep) -> DriveBackend:
    return GoogleDriveBackend(http, tokens, cfg.drive_api_base)


SheetsDep = Annotated[SpreadsheetBackend, Depends(get_sheets_backend)]
DriveDep = Annotated[DriveBackend, Depends(get_drive_backend)]
StateDep = Annotated[WorkspaceStateStore, Depends(get_workspace_state)]


def get_workspace_service(sheets: SheetsDep, drive: DriveDep, state: StateDep, cfg: SettingsDep) -> WorkspaceService:
    return WorkspaceService(
        sheets,
        drive,
        state,
        spreadsheet_name=cfg.spreadsheet_name,
        organized_folder_name=cfg.organized_folder_name,
    )

def get_table_store(sheets: SheetsDep, state: StateDep) -> TableStore:
    return SheetsTableStore(sheets, state.load())


WorkspaceDep = Annotated[WorkspaceService, Depends(get_workspace_service)]
StoreDep = Annotated[TableStore, Depends(get_table_store)]


def get_class_repository(store: StoreDep) -> ClassRepository:
    return ClassRepository(store)

def get_student_repository(store: StoreDep) -> StudentRepository:
    return StudentRepository(store)

def get_test_repository(store: StoreDep) -> AssessmentRepository:
    return AssessmentRepository(store)

def get_submission_repository(store: StoreDep) -> SubmissionRepository:
    return SubmissionRepository(store)

def get_detail_repository(store: StoreDep) -> SubmissionDetailRepository:
    return SubmissionDetailRepository(store)

def get_rubric_repository(store: StoreDep) -> RubricRepository:
    return RubricRepository(store)

def get_config_repository(store: StoreDep) -> ConfigRepository:
    return ConfigRepository(store)


ClassRepoDep = Annotated[ClassRepository, Depends(get_class_repository)]
StudentRepoDep = Annotated[StudentRepository, Depends(get_student_repository)]
TestRepoDep = Annotated[AssessmentRepository, Depends(get_test_repository)]
SubmissionRepoDep = Annotated[SubmissionRepository, Depends(get_submission_repository)]
DetailRepoDep = Annotated[SubmissionDetailRepository, Depends(get_detail_repository)]
RubricRepoDep = Annotated[RubricRepository, Depends(get_rubric_repository)]
ConfigRepoDep = Annotated[ConfigRepository, Depends(get_config_repository)]


def get_submission_service(
    submissions: SubmissionRepoDep, students: StudentRepoDep, classes: ClassRepoDep, tests: TestRepoDep
) -> SubmissionService:
    return SubmissionService(submissions, students, classes, tests)


SubmissionServiceDep = Annotated[SubmissionService, Depends(get_submission_service)]


def get_class_service(classes: ClassRepoDep, students: StudentRepoDep) -> ClassService:
    return ClassService(classes, students)

def get_assessment_service(tests: TestRepoDep, classes: ClassRepoDep, submissions: SubmissionServiceDep) -> AssessmentService:
    return AssessmentService(tests, classes, submissions)


ClassServiceDep = Annotated[ClassService, Depends(get_class_service)]
AssessmentServiceDep = Annotated[AssessmentService, Depends(get_assessment_service)]
