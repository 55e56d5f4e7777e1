"""Where the engine reads scores from and writes report cards to.

The engine only depends on the two protocols below; the ``SQL*`` classes
implement them over :mod:`bulletin.storage`. Each adapter call runs in a
transaction of its own, so a report card is committed as soon as it is
created and a later failure does not undo it.
"""

from __future__ import annotations

import typing as t

from sqlalchemy.exc import SQLAlchemyError

import bulletin.storage as storage
from bulletin.model import ClassID, Evaluation, EvaluationID, ReportCard, ReportCardDraft, ReportCardID, SchoolClass, \
    Score, ScoredEvaluation, StudentID, Subject, SubjectID

from .errors import PersistenceError


class ScoreSource(t.Protocol):
    def get_class(self, class_id: ClassID) -> SchoolClass | None: ...

    def list_enrolled_students(self, class_id: ClassID) -> t.Sequence[StudentID]: ...

    def list_subjects_for_class(self, class_id: ClassID) -> t.Sequence[Subject]: ...

    def list_scores(
        self, student_id: StudentID, subject_id: SubjectID, class_id: ClassID, term: int
    ) -> t.Sequence[ScoredEvaluation]: ...

    def get_evaluation(self, evaluation_id: EvaluationID) -> Evaluation | None: ...

    def list_evaluation_scores(self, evaluation_id: EvaluationID) -> t.Sequence[Score]: ...


class ReportCardStore(t.Protocol):
    def get(self, report_card_id: ReportCardID) -> ReportCard | None: ...

    def find(self, student_id: StudentID, term: int, school_year: str) -> ReportCard | None: ...

    def list_for_student(self, student_id: StudentID, school_year: str | None = None) -> t.Sequence[ReportCard]: ...

    def list_by_cohort(self, class_id: ClassID, term: int, school_year: str) -> t.Sequence[ReportCard]: ...

    def create(self, draft: ReportCardDraft) -> ReportCard: ...

    def update_rank(self, report_card_id: ReportCardID, rank: int) -> None: ...


class SQLScoreSource(object):
    def __init__(self, session: storage.Session):
        self.session = session

    def get_class(self, class_id: ClassID) -> SchoolClass | None:
        with self.session.begin():
            return storage.school.get_class(class_id, session=self.session)

    def list_enrolled_students(self, class_id: ClassID) -> list[StudentID]:
        with self.session.begin():
            return [s.student_id for s in storage.school.find_students(class_id=class_id, session=self.session)]

    def list_subjects_for_class(self, class_id: ClassID) -> tuple[Subject, ...]:
        with self.session.begin():
            return storage.school.find_subjects(class_id=class_id, session=self.session)

    def list_scores(
        self, student_id: StudentID, subject_id: SubjectID, class_id: ClassID, term: int
    ) -> tuple[ScoredEvaluation, ...]:
        with self.session.begin():
            return storage.evaluation.find_scores(
                student_id=student_id, subject_id=subject_id, class_id=class_id, term=term, session=self.session
            )

    def get_evaluation(self, evaluation_id: EvaluationID) -> Evaluation | None:
        with self.session.begin():
            return storage.evaluation.get(evaluation_id, session=self.session)

    def list_evaluation_scores(self, evaluation_id: EvaluationID) -> tuple[Score, ...]:
        with self.session.begin():
            return storage.evaluation.find_scores_for(evaluation_id, session=self.session)


class SQLReportCardStore(object):
    def __init__(self, session: storage.Session):
        self.session = session

    def get(self, report_card_id: ReportCardID) -> ReportCard | None:
        with self.session.begin():
            return storage.report_card.get(report_card_id, session=self.session)

    def find(self, student_id: StudentID, term: int, school_year: str) -> ReportCard | None:
        with self.session.begin():
            return storage.report_card.get(
                student_id=student_id, term=term, school_year=school_year, session=self.session
            )

    def list_for_student(self, student_id: StudentID, school_year: str | None = None) -> tuple[ReportCard, ...]:
        with self.session.begin():
            return storage.report_card.find(student_id=student_id, school_year=school_year, session=self.session)

    def list_by_cohort(self, class_id: ClassID, term: int, school_year: str) -> tuple[ReportCard, ...]:
        with self.session.begin():
            return storage.report_card.find(
                class_id=class_id, term=term, school_year=school_year, session=self.session
            )

    def create(self, draft: ReportCardDraft) -> ReportCard:
        try:
            with self.session.begin():
                return storage.report_card.create(
                    student_id=draft.student_id,
                    class_id=draft.class_id,
                    term=draft.term,
                    school_year=draft.school_year,
                    overall_average=draft.overall_average,
                    cohort_size=draft.cohort_size,
                    subject_averages=draft.subject_averages,
                    session=self.session,
                )
        except SQLAlchemyError as e:
            raise PersistenceError(f"could not create report card for student {draft.student_id}") from e

    def update_rank(self, report_card_id: ReportCardID, rank: int) -> None:
        try:
            with self.session.begin():
                storage.report_card.update_rank(report_card_id, rank, session=self.session)
        except SQLAlchemyError as e:
            raise PersistenceError(f"could not rank report card {report_card_id}") from e
        except KeyError as e:
            # the card was deleted between listing the cohort and ranking it
            raise PersistenceError(str(e)) from e

