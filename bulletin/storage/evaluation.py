from __future__ import annotations

import datetime
import decimal

import sqlalchemy as sqla
from sqlalchemy.dialects import postgresql, sqlite

from bulletin.core import di
from bulletin.core.config import GradingSettings
from bulletin.model import ClassID, Evaluation, EvaluationID, Score, ScoredEvaluation, StudentID, SubjectID

from . import Session
from .table import evaluations, scores, students

# scale of the scores.value column
SCORE_PLACES = decimal.Decimal("0.01")


def get(
    evaluation_id: EvaluationID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Evaluation | None:
    stmt = sqla.select(evaluations.__table__).where(evaluations.evaluation_id == evaluation_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Evaluation(**row) if row else None


def find(
    *,
    class_id: ClassID,
    subject_id: SubjectID | None = None,
    term: int | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Evaluation, ...]:
    """Find the evaluations held in a class, optionally narrowed to a subject and term."""
    stmt = sqla.select(evaluations.__table__).where(evaluations.class_id == class_id)
    if subject_id is not None:
        stmt = stmt.where(evaluations.subject_id == subject_id)
    if term is not None:
        stmt = stmt.where(evaluations.term == term)
    stmt = stmt.order_by(evaluations.term, evaluations.held_on, evaluations.create_time)
    rows = session.execute(stmt).mappings().all()
    return tuple(Evaluation(**row) for row in rows)


@di.inject
def create(
    *,
    class_id: ClassID,
    subject_id: SubjectID,
    name: str,
    term: int,
    weight: decimal.Decimal | int = 1,
    max_score: decimal.Decimal | int | None = None,
    held_on: datetime.date | None = None,
    session: Session = di.Provide["storage.persistent.session"],
    grading: GradingSettings = di.Provide["config.grading", di.as_(GradingSettings)],
) -> Evaluation:
    """Create an evaluation.

    Raises:
        ValueError: If the term, weight or max score falls outside the grading policy
    """
    if term not in grading.terms:
        raise ValueError(f"term must be one of {grading.terms}, got {term}")
    weight = decimal.Decimal(weight)
    if not (grading.min_weight <= weight <= grading.max_weight):
        raise ValueError(f"weight must be between {grading.min_weight} and {grading.max_weight}, got {weight}")
    max_score = grading.default_max_score if max_score is None else decimal.Decimal(max_score)
    if not (0 < max_score <= grading.max_score_ceiling):
        raise ValueError(f"max score must be between 0 and {grading.max_score_ceiling}, got {max_score}")

    evaluation_id = EvaluationID()
    stmt = sqla.insert(evaluations).values(
        evaluation_id=evaluation_id,
        class_id=class_id,
        subject_id=subject_id,
        name=name,
        term=term,
        held_on=held_on,
        weight=weight,
        max_score=max_score,
    )
    session.execute(stmt)
    session.flush()
    return get(evaluation_id, session=session)  # type: ignore[return-value]


def get_score(
    evaluation_id: EvaluationID,
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Score | None:
    stmt = sqla.select(scores.__table__).where(scores.evaluation_id == evaluation_id, scores.student_id == student_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Score(**row) if row else None


def record_score(
    evaluation_id: EvaluationID,
    student_id: StudentID,
    *,
    value: decimal.Decimal | int | str,
    remark: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Score:
    """Record a student's score on an evaluation, replacing any earlier one.

    Raises:
        KeyError: If evaluation_id does not correspond to an evaluation
        ValueError: If the value is negative or above the evaluation's max score
            or has more decimal places than the scores table keeps
    """
    evaluation = get(evaluation_id, session=session)
    if evaluation is None:
        raise KeyError(f"Evaluation {evaluation_id} not found")

    value = decimal.Decimal(value)
    if not (0 <= value <= evaluation.max_score):
        raise ValueError(f"score must be between 0 and {evaluation.max_score}, got {value}")
    if value != value.quantize(SCORE_PLACES):
        raise ValueError(f"scores are kept to 2 decimal places, got {value}")

    insert = postgresql.insert if session.get_bind().dialect.name == "postgresql" else sqlite.insert
    stmt = insert(scores).values(evaluation_id=evaluation_id, student_id=student_id, value=value, remark=remark)
    stmt = stmt.on_conflict_do_update(
        index_elements=["evaluation_id", "student_id"],
        set_={
            "value": stmt.excluded.value,
            "remark": stmt.excluded.remark,
        },
    )
    session.execute(stmt)
    session.flush()
    result = get_score(evaluation_id, student_id, session=session)
    assert result is not None
    return result


def find_scores(
    *,
    student_id: StudentID,
    subject_id: SubjectID,
    class_id: ClassID,
    term: int,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[ScoredEvaluation, ...]:
    """Find a student's scores in one subject of a class for a term, each with its evaluation's weight."""
    stmt = (
        sqla
        .select(scores.value, evaluations.weight)
        .join(evaluations, scores.evaluation_id == evaluations.evaluation_id)
        .where(
            scores.student_id == student_id,
            evaluations.subject_id == subject_id,
            evaluations.class_id == class_id,
            evaluations.term == term,
        )
        .order_by(evaluations.held_on, evaluations.evaluation_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(ScoredEvaluation(**row) for row in rows)


def find_scores_for(
    evaluation_id: EvaluationID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Score, ...]:
    """Find every score recorded on an evaluation, in the order of the students' names."""
    stmt = (
        sqla
        .select(scores.__table__)
        .join(students, scores.student_id == students.student_id)
        .where(scores.evaluation_id == evaluation_id)
        .order_by(students.name, scores.student_id)
    )
    rows = session.execute(stmt).mappings().all()
    return tuple(Score(**row) for row in rows)
