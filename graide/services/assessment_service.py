from __future__ import annotations
import logging
from datetime import date
from typing import Any

from graide.core.errors import InvalidInputError
from graide.database.repositories import AssessmentRepository, ClassRepository
from graide.schemas.entities import Assessment, AssessmentStatus, AssessmentType, GradingSystem, Submission
from graide.schemas.payloads import AssessmentCreate, AssessmentUpdate
from graide.services.submission_service import SubmissionService

logger = logging.getLogger("graide.tests")

DEFAULT_MAX_SCORE = {
    GradingSystem.ten_point: 10,
    GradingSystem.hundred_point: 100,
    GradingSystem.percentage: 100,
}

SAME_DAY_TYPES = {AssessmentType.test, AssessmentType.quiz}


class AssessmentService:
    def __init__(self, tests: AssessmentRepository, classes: ClassRepository, submissions: SubmissionService):
        self.tests = tests
        self.classes = classes
        self.submissions = submissions

    @staticmethod
    def _schedule(kind: AssessmentType, given_at, deadline) -> str:
        # tests and quizzes are handed in the day they are given
        if kind in SAME_DAY_TYPES or deadline is None:
            return given_at.isoformat()
        if deadline < given_at:
            raise InvalidInputError("deadline must not be before given_at")
        return deadline.isoformat()

    async def create(self, payload: AssessmentCreate) -> tuple[Assessment, list[Submission]]:
        max_score = payload.max_score or DEFAULT_MAX_SCORE.get(payload.grading_system)
        if max_score is None:
            raise InvalidInputError("max_score is required for the points grading system")

        class_ids = list(dict.fromkeys(payload.class_ids))
        known = {c.id for c in await self.classes.list()}
        unknown = [c for c in class_ids if c not in known]
        if unknown:
            raise InvalidInputError(f"Unknown class ids: {', '.join(unknown)}")

        test = await self.tests.create(
            {
                "name": payload.name.strip(),
                "type": payload.type,
                "class_ids": ",".join(class_ids),
                "given_at": payload.given_at.isoformat(),
                "deadline": self._schedule(payload.type, payload.given_at, payload.deadline),
                "grading_system": payload.grading_system,
                "max_score": max_score,
                "status": AssessmentStatus.active,
                "drive_folder_id": payload.drive_folder_id,
            }
        )

        created: list[Submission] = []
        for class_id in class_ids:
            created += await self.submissions.bulk_create(test.id, class_id)
        logger.info("Test created", extra={"test_id": test.id, "classes": len(class_ids), "submissions": len(created)})
        return test, created

    async def update(self, test_id: str, payload: AssessmentUpdate) -> Assessment:
        changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
        if "deadline" in changes:
            current = await self.tests.require(test_id)
            given_at = date.fromisoformat(current.given_at)
            changes["deadline"] = self._schedule(AssessmentType(current.type), given_at, changes["deadline"])
        return await self.tests.update(test_id, changes)
