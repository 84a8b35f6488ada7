from typing import Optional

from fastapi import APIRouter, Query, status

from graide.core.deps import DetailRepoDep, SubmissionRepoDep, SubmissionServiceDep
from graide.schemas.entities import Submission, SubmissionDetail, SubmissionStatus
from graide.schemas.payloads import (
    StatusChange, SubmissionDetailCreate, SubmissionDetailUpdate, SubmissionUpdate,
)

router = APIRouter()

# ---- Submissions ----
@router.get("/submissions", response_model=list[Submission])
async def list_submissions(
    repo: SubmissionRepoDep,
    test_id: Optional[str] = None,
    student_id: Optional[str] = None,
    class_id: Optional[str] = None,
    submission_status: Optional[SubmissionStatus] = Query(None, alias="status"),
):
    return await repo.list(
        test_id=test_id,
        student_id=student_id,
        class_id=class_id,
        status=submission_status.value if submission_status else None,
    )

@router.get("/submissions/{submission_id}", response_model=Submission)
async def get_submission(submission_id: str, repo: SubmissionRepoDep):
    return await repo.require(submission_id)

@router.patch("/submissions/{submission_id}", response_model=Submission)
async def update_submission(submission_id: str, payload: SubmissionUpdate, repo: SubmissionRepoDep):
    return await repo.update(submission_id, payload.model_dump(exclude_unset=True))

@router.post("/submissions/{submission_id}/status", response_model=Submission)
async def change_submission_status(submission_id: str, payload: StatusChange, service: SubmissionServiceDep):
    return await service.transition(submission_id, payload.status)

# ---- Details (mistakes) ----
@router.get("/submissions/{submission_id}/details", response_model=list[SubmissionDetail])
async def list_details(submission_id: str, repo: DetailRepoDep):
    return await repo.list(submission_id=submission_id)

@router.post(
    "/submissions/{submission_id}/details",
    response_model=SubmissionDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_detail(
    submission_id: str, payload: SubmissionDetailCreate, repo: DetailRepoDep, submissions: SubmissionRepoDep
):
    await submissions.require(submission_id)
    return await repo.create({**payload.model_dump(), "submission_id": submission_id})

@router.patch("/details/{detail_id}", response_model=SubmissionDetail)
async def update_detail(detail_id: str, payload: SubmissionDetailUpdate, repo: DetailRepoDep):
    return await repo.update(detail_id, payload.model_dump(exclude_unset=True))

@router.delete("/details/{detail_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_detail(detail_id: str, repo: DetailRepoDep):
    await repo.delete(detail_id)
