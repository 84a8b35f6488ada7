from typing import Optional

from fastapi import APIRouter, status
from pydantic import BaseModel

from graide.core.deps import ClassRepoDep, ClassServiceDep, StudentRepoDep
from graide.schemas.entities import SchoolClass, Student
from graide.schemas.payloads import ClassCreate, ClassUpdate, StudentCreate, StudentUpdate

router = APIRouter()


class ClassWithRoster(BaseModel):
    school_class: SchoolClass
    students: list[Student]


# ---- Classes ----
@router.get("/classes", response_model=list[SchoolClass])
async def list_classes(repo: ClassRepoDep, school_year: Optional[str] = None):
    return await repo.list(school_year=school_year)

@router.post("/classes", response_model=ClassWithRoster, status_code=status.HTTP_201_CREATED)
async def create_class(payload: ClassCreate, service: ClassServiceDep):
    school_class, students = await service.create_with_roster(payload)
    return ClassWithRoster(school_class=school_class, students=students)

@router.get("/classes/{class_id}", response_model=SchoolClass)
async def get_class(class_id: str, repo: ClassRepoDep):
    return await repo.require(class_id)

@router.patch("/classes/{class_id}", response_model=SchoolClass)
async def update_class(class_id: str, payload: ClassUpdate, repo: ClassRepoDep):
    return await repo.update(class_id, payload.model_dump(exclude_unset=True))

@router.delete("/classes/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class(class_id: str, repo: ClassRepoDep):
    # students, tests and submissions of the class are kept
    await repo.delete(class_id)


# ---- Students ----
@router.get("/students", response_model=list[Student])
async def list_students(
    repo: StudentRepoDep, class_name: Optional[str] = None, school_year: Optional[str] = None
):
    return await repo.list(class_name=class_name, school_year=school_year)

@router.post("/students", response_model=Student, status_code=status.HTTP_201_CREATED)
async def create_student(payload: StudentCreate, repo: StudentRepoDep):
    return await repo.create(payload.model_dump())

@router.get("/students/{student_id}", response_model=Student)
async def get_student(student_id: str, repo: StudentRepoDep):
    return await repo.require(student_id)

@router.patch("/students/{student_id}", response_model=Student)
async def update_student(student_id: str, payload: StudentUpdate, repo: StudentRepoDep):
    return await repo.update(student_id, payload.model_dump(exclude_unset=True))

@router.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_id: str, repo: StudentRepoDep):
    await repo.delete(student_id)
