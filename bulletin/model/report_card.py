import decimal

import pydantic as p

from .base import BaseModel, ValueModel, WithTimestamps
from .id import ClassID, ReportCardID, StudentID, SubjectID


class SubjectAverage(ValueModel):
    subject_id: SubjectID
    average: decimal.Decimal
    weight: decimal.Decimal = p.Field(gt=0)


class ReportCardDraft(ValueModel):
    """A computed report card that has not been persisted yet."""

    student_id: StudentID
    class_id: ClassID
    term: int
    school_year: str
    overall_average: decimal.Decimal
    cohort_size: int = p.Field(ge=0)
    subject_averages: tuple[SubjectAverage, ...] = ()


class ReportCard(WithTimestamps):
    report_card_id: ReportCardID
    student_id: StudentID
    class_id: ClassID
    term: int
    school_year: str

    overall_average: decimal.Decimal
    rank: int | None = p.Field(default=None, ge=1)
    cohort_size: int

    comment: str | None = None
    subject_averages: list[SubjectAverage] = []


class RankAssignment(ValueModel):
    report_card_id: ReportCardID
    rank: int = p.Field(ge=1)


class ClassStatistics(ValueModel):
    average: decimal.Decimal = decimal.Decimal("0")
    min: decimal.Decimal = decimal.Decimal("0")
    max: decimal.Decimal = decimal.Decimal("0")


class ReportCardDetail(BaseModel):
    report_card: ReportCard
    statistics: ClassStatistics


class GenerationResult(BaseModel):
    class_id: ClassID
    term: int
    school_year: str
    enrolled: int = 0

    created: list[ReportCard] = []
    skipped_existing: int = 0
    failed: list[StudentID] = []
