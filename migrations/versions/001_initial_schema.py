"""Initial schema: classes, subjects, students, evaluations, scores, report cards

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy.schema import Column, ForeignKey, UniqueConstraint
from sqlalchemy.types import Date, DateTime, Integer, Numeric, String

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None


def upgrade() -> None:
    # School
    op.create_table(
        "classes",
        Column("class_id", String(22), primary_key=True),
        Column("name", String, nullable=False),
        Column("level", String, nullable=True),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    op.create_table(
        "subjects",
        Column("subject_id", String(22), primary_key=True),
        Column("name", String, nullable=False),
        Column("code", String, unique=True, nullable=False),
        Column("weight", Numeric(4, 2), nullable=False),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    op.create_table(
        "class_subjects",
        Column("class_id", String(22), ForeignKey("classes.class_id"), primary_key=True),
        Column("subject_id", String(22), ForeignKey("subjects.subject_id"), primary_key=True),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
    )

    op.create_table(
        "students",
        Column("student_id", String(22), primary_key=True),
        Column("name", String, nullable=False),
        Column("class_id", String(22), ForeignKey("classes.class_id"), nullable=True),
        Column("student_number", String, unique=True, nullable=True),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    # Evaluations & Scores
    op.create_table(
        "evaluations",
        Column("evaluation_id", String(22), primary_key=True),
        Column("class_id", String(22), ForeignKey("classes.class_id"), nullable=False),
        Column("subject_id", String(22), ForeignKey("subjects.subject_id"), nullable=False),
        Column("name", String, nullable=False),
        Column("term", Integer, nullable=False),
        Column("held_on", Date, nullable=True),
        Column("weight", Numeric(4, 2), nullable=False),
        Column("max_score", Numeric(6, 2), nullable=False),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    op.create_table(
        "scores",
        Column("evaluation_id", String(22), ForeignKey("evaluations.evaluation_id"), primary_key=True),
        Column("student_id", String(22), ForeignKey("students.student_id"), primary_key=True),
        Column("value", Numeric(6, 2), nullable=False),
        Column("remark", String, nullable=True),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
    )

    # Report cards
    op.create_table(
        "report_cards",
        Column("report_card_id", String(22), primary_key=True),
        Column("student_id", String(22), ForeignKey("students.student_id"), nullable=False),
        Column("class_id", String(22), ForeignKey("classes.class_id"), nullable=False),
        Column("term", Integer, nullable=False),
        Column("school_year", String, nullable=False),
        Column("overall_average", Numeric(6, 2), nullable=False),
        Column("cohort_size", Integer, nullable=False),
        Column("rank", Integer, nullable=True),
        Column("comment", String, nullable=True),
        Column("create_time", DateTime, server_default=f.now(), nullable=False),
        Column("update_time", DateTime, server_default=f.now(), onupdate=f.now(), nullable=False),
        UniqueConstraint("student_id", "term", "school_year", name="uq_report_cards_student_term_year"),
    )

    op.create_table(
        "report_card_subjects",
        Column(
            "report_card_id",
            String(22),
            ForeignKey("report_cards.report_card_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        Column("subject_id", String(22), ForeignKey("subjects.subject_id"), primary_key=True),
        Column("position", Integer, nullable=False),
        Column("average", Numeric(6, 2), nullable=False),
        Column("weight", Numeric(4, 2), nullable=False),
    )

    op.create_index("ix_students_class_id", "students", ["class_id"])
    op.create_index("ix_evaluations_class_id", "evaluations", ["class_id"])
    op.create_index("ix_report_cards_cohort", "report_cards", ["class_id", "term", "school_year"])


def downgrade() -> None:
    op.drop_index("ix_report_cards_cohort")
    op.drop_index("ix_evaluations_class_id")
    op.drop_index("ix_students_class_id")

    # Drop tables in reverse order (respecting foreign keys)
    op.drop_table("report_card_subjects")
    op.drop_table("report_cards")
    op.drop_table("scores")
    op.drop_table("evaluations")
    op.drop_table("students")
    op.drop_table("class_subjects")
    op.drop_table("subjects")
    op.drop_table("classes")
