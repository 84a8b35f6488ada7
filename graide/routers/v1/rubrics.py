from typing import Optional

from fastapi import APIRouter, status

from graide.core.deps import RubricRepoDep, TestRepoDep
from graide.schemas.entities import Rubric
from graide.schemas.payloads import RubricCreate, RubricUpdate

router = APIRouter()

# ---- Rubrics ----
@router.get("/rubrics", response_model=list[Rubric])
async def list_rubrics(repo: RubricRepoDep, test_id: Optional[str] = None):
    return await repo.list(test_id=test_id)

@router.post("/rubrics", response_model=Rubric, status_code=status.HTTP_201_CREATED)
async def create_rubric(payload: RubricCreate, repo: RubricRepoDep, tests: TestRepoDep):
    await tests.require(payload.test_id)
    return await repo.create(payload.model_dump())

@router.patch("/rubrics/{rubric_id}", response_model=Rubric)
async def update_rubric(rubric_id: str, payload: RubricUpdate, repo: RubricRepoDep):
    return await repo.update(rubric_id, payload.model_dump(exclude_unset=True))

@router.delete("/rubrics/{rubric_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rubric(rubric_id: str, repo: RubricRepoDep):
    await repo.delete(rubric_id)
