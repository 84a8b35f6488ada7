from typing import Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel

from graide.core.deps import AssessmentServiceDep, SubmissionServiceDep, TestRepoDep
from graide.schemas.entities import Assessment, AssessmentStatus, Submission
from graide.schemas.payloads import AbsenceMarking, AssessmentCreate, AssessmentUpdate

router = APIRouter(prefix="/tests")


class AssessmentCreated(BaseModel):
    test: Assessment
    submissions: list[Submission]


@router.get("", response_model=list[Assessment])
async def list_tests(
    repo: TestRepoDep,
    class_id: Optional[str] = None,
    test_status: Optional[AssessmentStatus] = Query(None, alias="status"),
):
    return await repo.list(class_id=class_id, status=test_status.value if test_status else None)

@router.post("", response_model=AssessmentCreated, status_code=status.HTTP_201_CREATED)
async def create_test(payload: AssessmentCreate, service: AssessmentServiceDep):
    test, submissions = await service.create(payload)
    return AssessmentCreated(test=test, submissions=submissions)

@router.get("/{test_id}", response_model=Assessment)
async def get_test(test_id: str, repo: TestRepoDep):
    return await repo.require(test_id)

@router.patch("/{test_id}", response_model=Assessment)
async def update_test(test_id: str, payload: AssessmentUpdate, service: AssessmentServiceDep):
    return await service.update(test_id, payload)

@router.delete("/{test_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_test(test_id: str, repo: TestRepoDep):
    await repo.delete(test_id)

@router.post("/{test_id}/classes/{class_id}/submissions", response_model=list[Submission])
async def bulk_create_submissions(test_id: str, class_id: str, service: SubmissionServiceDep):
    return await service.bulk_create(test_id, class_id)

@router.put("/{test_id}/absences", response_model=list[Submission])
async def mark_absences(test_id: str, payload: AbsenceMarking, service: SubmissionServiceDep):
    return await service.mark_absences(test_id, payload.student_ids)
