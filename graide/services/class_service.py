from __future__ import annotations
import logging

from graide.database.repositories import ClassRepository, StudentRepository
from graide.schemas.entities import SchoolClass, Student
from graide.schemas.payloads import ClassCreate

logger = logging.getLogger("graide.classes")


class ClassService:
    def __init__(self, classes: ClassRepository, students: StudentRepository):
        self.classes = classes
        self.students = students

    async def create_with_roster(self, payload: ClassCreate) -> tuple[SchoolClass, list[Student]]:
        """Create a subject-class and, the first time its class_name/year shows up, its students.

        Students are shared by every subject of the same class_name and
        school_year, so an existing roster is reused as is.
        """
        school_class = await self.classes.create(payload.model_dump(exclude={"students"}))

        roster = await self.students.roster(school_class)
        if roster:
            logger.info("Reusing existing roster", extra={"class_id": school_class.id, "students": len(roster)})
            return school_class, roster

        names = [n.strip() for n in payload.students if n and n.strip()]
        created = await self.students.create_many(
            {"class_name": school_class.class_name, "school_year": school_class.school_year, "name": name}
            for name in names
        )
        return school_class, created
