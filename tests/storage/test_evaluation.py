"""Tests for bulletin.storage.evaluation."""

from __future__ import annotations

import decimal
import typing as t

import pytest
from sqlalchemy.orm import Session

from bulletin.model import Evaluation, EvaluationID, SchoolClass, Student, StudentID, Subject
from bulletin.storage import evaluation as evaluation_storage

D = decimal.Decimal


@pytest.fixture
def lesson(
    class_factory: t.Callable[..., SchoolClass],
    subject_factory: t.Callable[..., Subject],
    student_factory: t.Callable[..., Student],
) -> tuple[SchoolClass, Subject, Student]:
    klass = class_factory()
    subject = subject_factory(name="Mathematics", weight=4, class_id=klass.class_id)
    student = student_factory(name="Awa", class_id=klass.class_id)
    return klass, subject, student


class TestCreate(object):
    """Tests for evaluation creation against the grading policy."""

    def test_defaults(self, db_session: Session, lesson: tuple[SchoolClass, Subject, Student]) -> None:
        """Max score defaults to the configured scale."""
        klass, subject, _ = lesson
        with db_session.begin():
            evaluation = evaluation_storage.create(
                class_id=klass.class_id, subject_id=subject.subject_id, name="Quiz", term=2, session=db_session
            )

        assert evaluation.term == 2
        assert evaluation.weight == D(1)
        assert evaluation.max_score == D(20)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"term": 4},
            {"term": 0},
            {"term": 1, "weight": D("0.25")},
            {"term": 1, "weight": 11},
            {"term": 1, "max_score": 0},
            {"term": 1, "max_score": 40},
        ],
    )
    def test_outside_policy(
        self, db_session: Session, lesson: tuple[SchoolClass, Subject, Student], kwargs: dict[str, t.Any]
    ) -> None:
        klass, subject, _ = lesson
        with db_session.begin():
            with pytest.raises(ValueError):
                evaluation_storage.create(
                    class_id=klass.class_id, subject_id=subject.subject_id, name="Quiz", session=db_session, **kwargs
                )

    def test_find_by_term(
        self,
        db_session: Session,
        lesson: tuple[SchoolClass, Subject, Student],
        evaluation_factory: t.Callable[..., Evaluation],
    ) -> None:
        klass, subject, _ = lesson
        first = evaluation_factory(klass.class_id, subject.subject_id, term=1)
        evaluation_factory(klass.class_id, subject.subject_id, term=2)

        with db_session.begin():
            result = evaluation_storage.find(class_id=klass.class_id, term=1, session=db_session)

        assert [e.evaluation_id for e in result] == [first.evaluation_id]


class TestScores(object):
    """Tests for recording and reading scores."""

    def test_record_replaces(
        self,
        db_session: Session,
        lesson: tuple[SchoolClass, Subject, Student],
        evaluation_factory: t.Callable[..., Evaluation],
    ) -> None:
        """Recording a score twice keeps only the latest value."""
        klass, subject, student = lesson
        evaluation = evaluation_factory(klass.class_id, subject.subject_id)

        with db_session.begin():
            evaluation_storage.record_score(
                evaluation.evaluation_id, student.student_id, value=9, session=db_session
            )
            score = evaluation_storage.record_score(
                evaluation.evaluation_id, student.student_id, value="14.5", remark="retake", session=db_session
            )
            stored = evaluation_storage.get_score(evaluation.evaluation_id, student.student_id, session=db_session)

        assert score.value == D("14.5")
        assert stored == score
        assert stored.remark == "retake"

    @pytest.mark.parametrize("value", ["-1", "20.5"])
    def test_out_of_range(
        self,
        db_session: Session,
        lesson: tuple[SchoolClass, Subject, Student],
        evaluation_factory: t.Callable[..., Evaluation],
        value: str,
    ) -> None:
        """Scores must lie between 0 and the evaluation's max score."""
        klass, subject, student = lesson
        evaluation = evaluation_factory(klass.class_id, subject.subject_id)

        with db_session.begin():
            with pytest.raises(ValueError):
                evaluation_storage.record_score(
                    evaluation.evaluation_id, student.student_id, value=value, session=db_session
                )

    def test_unknown_evaluation(self, db_session: Session) -> None:
        with db_session.begin():
            with pytest.raises(KeyError):
                evaluation_storage.record_score(EvaluationID(), StudentID(), value=10, session=db_session)

    def test_find_scores(
        self,
        db_session: Session,
        lesson: tuple[SchoolClass, Subject, Student],
        subject_factory: t.Callable[..., Subject],
        evaluation_factory: t.Callable[..., Evaluation],
        score_factory: t.Callable[..., t.Any],
    ) -> None:
        """Only the student's scores for the subject and term come back, with evaluation weights."""
        klass, subject, student = lesson
        other_subject = subject_factory(name="French", class_id=klass.class_id)
        quiz = evaluation_factory(klass.class_id, subject.subject_id, weight=1)
        exam = evaluation_factory(klass.class_id, subject.subject_id, weight=2)
        later = evaluation_factory(klass.class_id, subject.subject_id, term=2)
        dictation = evaluation_factory(klass.class_id, other_subject.subject_id)
        score_factory(quiz, student.student_id, 12)
        score_factory(exam, student.student_id, 16)
        score_factory(later, student.student_id, 5)
        score_factory(dictation, student.student_id, 7)

        with db_session.begin():
            result = evaluation_storage.find_scores(
                student_id=student.student_id,
                subject_id=subject.subject_id,
                class_id=klass.class_id,
                term=1,
                session=db_session,
            )

        assert sorted((s.value, s.weight) for s in result) == [(D(12), D(1)), (D(16), D(2))]

    @pytest.mark.parametrize("value", ["13.145", "0.001"])
    def test_more_places_than_stored(
        self,
        db_session: Session,
        lesson: tuple[SchoolClass, Subject, Student],
        evaluation_factory: t.Callable[..., Evaluation],
        value: str,
    ) -> None:
        """A score that the table would round is refused rather than silently truncated."""
        klass, subject, student = lesson
        evaluation = evaluation_factory(klass.class_id, subject.subject_id)

        with db_session.begin():
            with pytest.raises(ValueError):
                evaluation_storage.record_score(
                    evaluation.evaluation_id, student.student_id, value=value, session=db_session
                )
            stored = evaluation_storage.get_score(evaluation.evaluation_id, student.student_id, session=db_session)
        assert stored is None

    def test_trailing_zeros_accepted(
        self,
        db_session: Session,
        lesson: tuple[SchoolClass, Subject, Student],
        evaluation_factory: t.Callable[..., Evaluation],
    ) -> None:
        klass, subject, student = lesson
        evaluation = evaluation_factory(klass.class_id, subject.subject_id)

        with db_session.begin():
            score = evaluation_storage.record_score(
                evaluation.evaluation_id, student.student_id, value="13.100", session=db_session
            )

        assert score.value == D("13.1")

    def test_find_scores_for(
        self,
        db_session: Session,
        lesson: tuple[SchoolClass, Subject, Student],
        student_factory: t.Callable[..., Student],
        evaluation_factory: t.Callable[..., Evaluation],
        score_factory: t.Callable[..., t.Any],
    ) -> None:
        """Scores of one evaluation come back ordered by student name."""
        klass, subject, awa = lesson
        zoe = student_factory(name="Zoé", class_id=klass.class_id)
        binta = student_factory(name="Binta", class_id=klass.class_id)
        student_factory(name="Chloé", class_id=klass.class_id)
        evaluation = evaluation_factory(klass.class_id, subject.subject_id)
        other = evaluation_factory(klass.class_id, subject.subject_id)
        score_factory(evaluation, zoe.student_id, 9)
        score_factory(evaluation, awa.student_id, 14)
        score_factory(evaluation, binta.student_id, "11.5")
        score_factory(other, awa.student_id, 3)

        with db_session.begin():
            result = evaluation_storage.find_scores_for(evaluation.evaluation_id, session=db_session)
            empty = evaluation_storage.find_scores_for(EvaluationID(), session=db_session)

        assert [s.student_id for s in result] == [awa.student_id, binta.student_id, zoe.student_id]
        assert [s.value for s in result] == [D(14), D("11.5"), D(9)]
        assert empty == ()
