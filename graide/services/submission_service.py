from __future__ import annotations
import logging
from typing import Iterable

from graide.core.errors import InvalidTransitionError
from graide.database.repositories import (
    AssessmentRepository, ClassRepository, StudentRepository, SubmissionRepository, utc_now,
)
from graide.schemas.entities import Submission, SubmissionStatus

logger = logging.getLogger("graide.submissions")

S = SubmissionStatus

# Every change is an explicit teacher action; nothing expires on its own.
TRANSITIONS: dict[str, set[str]] = {
    S.new.value: {S.correcting.value, S.absent.value},
    S.correcting.value: {S.corrected.value},
    S.corrected.value: {S.correcting.value},
    S.absent.value: {S.new.value},
}


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, set())


class SubmissionService:
    def __init__(
        self,
        submissions: SubmissionRepository,
        students: StudentRepository,
        classes: ClassRepository,
        tests: AssessmentRepository,
    ):
        self.submissions = submissions
        self.students = students
        self.classes = classes
        self.tests = tests

    async def transition(self, submission_id: str, target: SubmissionStatus | str) -> Submission:
        target = SubmissionStatus(target).value
        current = await self.submissions.require(submission_id)
        if current.status == target:
            return current
        if not can_transition(current.status, target):
            raise InvalidTransitionError(current.status, target)

        changes: dict = {"status": target}
        if target == S.corrected.value:
            changes["corrected_at"] = utc_now()
        # reopening (corrected -> correcting) keeps the previous corrected_at

        updated = await self.submissions.update(submission_id, changes)
        logger.info(
            "Submission status changed",
            extra={"submission_id": submission_id, "from_status": current.status, "to_status": target},
        )
        return updated

    async def bulk_create(self, test_id: str, class_id: str) -> list[Submission]:
        """One `new` submission per student enrolled in the class.

        Students that already have a submission for this test are skipped, so
        calling it twice for the same test and class creates nothing the
        second time.
        """
        school_class = await self.classes.require(class_id)
        await self.tests.require(test_id)

        roster = await self.students.roster(school_class)
        existing = {s.student_id for s in await self.submissions.list(test_id=test_id)}

        pending = [
            {"test_id": test_id, "student_id": student.id, "class_id": class_id, "status": S.new.value}
            for student in roster
            if student.id not in existing
        ]
        created = await self.submissions.create_many(pending)
        logger.info(
            "Submissions created",
            extra={"test_id": test_id, "class_id": class_id, "created": len(created), "skipped": len(roster) - len(created)},
        )
        return created

    async def mark_absences(self, test_id: str, absent_student_ids: Iterable[str]) -> list[Submission]:
        """Sync new/absent statuses of a test's submissions with the absent set.

        Submissions already being graded are left as they are.
        """
        absent = set(absent_student_ids)
        changed = []
        for sub in await self.submissions.list(test_id=test_id):
            if sub.student_id in absent and sub.status == S.new.value:
                changed.append(await self.submissions.update(sub.id, {"status": S.absent.value}))
            elif sub.student_id not in absent and sub.status == S.absent.value:
                changed.append(await self.submissions.update(sub.id, {"status": S.new.value}))
        return changed
