from __future__ import annotations

import logging
import typing as t

from bulletin.model import ClassID, GenerationResult, ReportCardDraft, ReportCardID, StudentID, Subject, \
    SubjectAverage

from .average import compute_overall_average, compute_subject_average
from .errors import ClassNotFoundError, InvalidInputError, StudentComputationError
from .rank import assign_ranks
from .source import ReportCardStore, ScoreSource

logger = logging.getLogger(__name__)


class BulletinGenerator(object):
    """Generates the report cards of a class for one term of a school year.

    Every enrolled student without a report card for the term gets one, then
    the whole cohort (cards from earlier runs included) is re-ranked. Running
    it again for the same class, term and year creates only the cards still
    missing and leaves existing averages untouched.

    Generation is not transactional across students: each card is written as
    soon as it is computed. A student whose averages cannot be computed is
    logged and left out; a failed write (PersistenceError) ends the run.
    Callers are expected to serialize runs on the same cohort.
    """

    def __init__(
        self,
        source: ScoreSource,
        store: ReportCardStore,
        terms: t.Collection[int] = (1, 2, 3),
        precision: int = 2,
    ):
        self.source = source
        self.store = store
        self.terms = tuple(terms)
        self.precision = precision

    def validate(self, class_id: ClassID | str, term: int, school_year: str) -> tuple[ClassID, int, str]:
        """Check a generation request before anything is read or written.

        Raises:
            InvalidInputError: If the class id is malformed, the term is not a configured term
                or the school year is blank
        """
        if not isinstance(class_id, ClassID):
            if not isinstance(class_id, str) or not class_id.strip():
                raise InvalidInputError("class id is required")
            try:
                class_id = ClassID(class_id.strip())
            except ValueError as e:
                raise InvalidInputError(str(e)) from e

        if isinstance(term, bool) or not isinstance(term, int) or term not in self.terms:
            raise InvalidInputError(f"term must be one of {list(self.terms)}, got {term!r}")

        if not isinstance(school_year, str) or not school_year.strip():
            raise InvalidInputError("school year is required")

        return class_id, term, school_year

    def generate(self, class_id: ClassID | str, term: int, school_year: str) -> GenerationResult:
        """
        Raises:
            InvalidInputError: If the request is malformed
            ClassNotFoundError: If the class does not exist
            PersistenceError: If a report card or rank could not be written
        """
        class_id, term, school_year = self.validate(class_id, term, school_year)
        if self.source.get_class(class_id) is None:
            raise ClassNotFoundError(class_id)

        students = self.source.list_enrolled_students(class_id)
        result = GenerationResult(class_id=class_id, term=term, school_year=school_year, enrolled=len(students))
        context = {"class_id": class_id, "term": term, "school_year": school_year}
        if not students:
            logger.info("no students enrolled, no report cards generated", extra=context)
            return result

        subjects = self.source.list_subjects_for_class(class_id)
        created = []
        for student_id in students:
            if self.store.find(student_id, term, school_year) is not None:
                logger.debug("report card already exists", extra={**context, "student_id": student_id})
                result.skipped_existing += 1
                continue

            try:
                draft = self.draft(student_id, class_id, term, school_year, subjects, cohort_size=len(students))
            except StudentComputationError:
                logger.exception("skipping student", extra={**context, "student_id": student_id})
                result.failed.append(student_id)
                continue

            created.append(self.store.create(draft))

        ranks = self.rank(class_id, term, school_year)
        result.created = [card.model_copy(update={"rank": ranks.get(card.report_card_id)}) for card in created]

        logger.info(
            f"generated {len(result.created)} report cards",
            extra={
                **context,
                "enrolled": result.enrolled,
                "generated": len(result.created),
                "skipped_existing": result.skipped_existing,
                "failed": len(result.failed),
            },
        )
        return result

    def draft(
        self,
        student_id: StudentID,
        class_id: ClassID,
        term: int,
        school_year: str,
        subjects: t.Sequence[Subject],
        cohort_size: int,
    ) -> ReportCardDraft:
        """Compute one student's report card without saving it.

        Subjects in which the student has no score are left off the card.

        Raises:
            StudentComputationError: If the student's scores could not be read or averaged
        """
        try:
            averages: list[SubjectAverage] = []
            for subject in subjects:
                scores = self.source.list_scores(student_id, subject.subject_id, class_id, term)
                if not scores:
                    continue
                average = compute_subject_average(scores, self.precision)
                averages.append(SubjectAverage(subject_id=subject.subject_id, average=average, weight=subject.weight))

            return ReportCardDraft(
                student_id=student_id,
                class_id=class_id,
                term=term,
                school_year=school_year,
                overall_average=compute_overall_average(averages, self.precision),
                cohort_size=cohort_size,
                subject_averages=tuple(averages),
            )
        except Exception as e:
            raise StudentComputationError(student_id, str(e) or e.__class__.__name__) from e

    def rank(self, class_id: ClassID, term: int, school_year: str) -> dict[ReportCardID, int]:
        """Re-rank every report card of a cohort and save the new ranks."""
        assignments = assign_ranks(self.store.list_by_cohort(class_id, term, school_year))
        for assignment in assignments:
            self.store.update_rank(assignment.report_card_id, assignment.rank)
        return {a.report_card_id: a.rank for a in assignments}
