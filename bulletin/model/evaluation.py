import datetime
import decimal

import pydantic as p

from .base import BaseModel, ValueModel, WithCtime, WithTimestamps
from .id import ClassID, EvaluationID, StudentID, SubjectID


class Evaluation(WithTimestamps):
    evaluation_id: EvaluationID
    class_id: ClassID
    subject_id: SubjectID

    name: str
    term: int = p.Field(ge=1)
    held_on: datetime.date | None = None

    weight: decimal.Decimal = p.Field(default=decimal.Decimal("1"), gt=0)
    max_score: decimal.Decimal = p.Field(default=decimal.Decimal("20"), gt=0)


class Score(WithCtime):
    evaluation_id: EvaluationID
    student_id: StudentID
    value: decimal.Decimal = p.Field(ge=0)
    remark: str | None = None


class ScoredEvaluation(ValueModel):
    """One recorded score paired with the weight of its evaluation."""

    value: decimal.Decimal
    weight: decimal.Decimal


class EvaluationStatistics(ValueModel):
    average: decimal.Decimal = decimal.Decimal("0")
    min: decimal.Decimal = decimal.Decimal("0")
    max: decimal.Decimal = decimal.Decimal("0")
    count: int = 0


class EvaluationDetail(BaseModel):
    """An evaluation with its scores, ordered by student name, and their statistics."""

    evaluation: Evaluation
    scores: list[Score] = []
    statistics: EvaluationStatistics
