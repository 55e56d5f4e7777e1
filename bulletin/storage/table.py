import datetime
import decimal

from sqlalchemy import ForeignKey, func, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import Numeric

from bulletin.model import ClassID, EvaluationID, ReportCardID, StudentID, SubjectID

from .type import ShortUUIDKeyType


class base(MappedAsDataclass, DeclarativeBase):
    type_annotation_map = {
        ClassID: ShortUUIDKeyType(ClassID),
        StudentID: ShortUUIDKeyType(StudentID),
        SubjectID: ShortUUIDKeyType(SubjectID),
        EvaluationID: ShortUUIDKeyType(EvaluationID),
        ReportCardID: ShortUUIDKeyType(ReportCardID),
        decimal.Decimal: Numeric(6, 2),
    }


# School


class classes(base):
    __tablename__ = "classes"

    class_id: Mapped[ClassID] = mapped_column(primary_key=True)
    name: Mapped[str]
    level: Mapped[str | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


class subjects(base):
    __tablename__ = "subjects"

    subject_id: Mapped[SubjectID] = mapped_column(primary_key=True)
    name: Mapped[str]
    code: Mapped[str] = mapped_column(unique=True)
    weight: Mapped[decimal.Decimal] = mapped_column(Numeric(4, 2), default=decimal.Decimal("1.0"))
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


class class_subjects(base):
    __tablename__ = "class_subjects"

    class_id: Mapped[ClassID] = mapped_column(ForeignKey("classes.class_id"), primary_key=True)
    subject_id: Mapped[SubjectID] = mapped_column(ForeignKey("subjects.subject_id"), primary_key=True)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


class students(base):
    __tablename__ = "students"

    student_id: Mapped[StudentID] = mapped_column(primary_key=True)
    name: Mapped[str]
    class_id: Mapped[ClassID | None] = mapped_column(ForeignKey("classes.class_id"), default=None, index=True)
    student_number: Mapped[str | None] = mapped_column(default=None, unique=True)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


# Evaluations & Scores


class evaluations(base):
    __tablename__ = "evaluations"

    evaluation_id: Mapped[EvaluationID] = mapped_column(primary_key=True)
    class_id: Mapped[ClassID] = mapped_column(ForeignKey("classes.class_id"), index=True)
    subject_id: Mapped[SubjectID] = mapped_column(ForeignKey("subjects.subject_id"))
    name: Mapped[str]
    term: Mapped[int]
    held_on: Mapped[datetime.date | None] = mapped_column(default=None)
    weight: Mapped[decimal.Decimal] = mapped_column(Numeric(4, 2), default=decimal.Decimal("1.0"))
    max_score: Mapped[decimal.Decimal] = mapped_column(default=decimal.Decimal("20"))
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


class scores(base):
    __tablename__ = "scores"

    evaluation_id: Mapped[EvaluationID] = mapped_column(ForeignKey("evaluations.evaluation_id"), primary_key=True)
    student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"), primary_key=True)
    value: Mapped[decimal.Decimal]
    remark: Mapped[str | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())


# Report cards


class report_cards(base):
    __tablename__ = "report_cards"
    __table_args__ = (
        UniqueConstraint("student_id", "term", "school_year", name="uq_report_cards_student_term_year"),
        Index("ix_report_cards_cohort", "class_id", "term", "school_year"),
    )

    report_card_id: Mapped[ReportCardID] = mapped_column(primary_key=True)
    student_id: Mapped[StudentID] = mapped_column(ForeignKey("students.student_id"))
    class_id: Mapped[ClassID] = mapped_column(ForeignKey("classes.class_id"))
    term: Mapped[int]
    school_year: Mapped[str]
    overall_average: Mapped[decimal.Decimal]
    cohort_size: Mapped[int]
    rank: Mapped[int | None] = mapped_column(default=None)
    comment: Mapped[str | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


class report_card_subjects(base):
    __tablename__ = "report_card_subjects"

    report_card_id: Mapped[ReportCardID] = mapped_column(
        ForeignKey("report_cards.report_card_id", ondelete="CASCADE"), primary_key=True
    )
    subject_id: Mapped[SubjectID] = mapped_column(ForeignKey("subjects.subject_id"), primary_key=True)
    position: Mapped[int]
    average: Mapped[decimal.Decimal]
    weight: Mapped[decimal.Decimal] = mapped_column(Numeric(4, 2))
