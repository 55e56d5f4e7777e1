"""Persisted report cards and the subject averages printed on them."""

from __future__ import annotations

import collections
import decimal
import typing as t

import sqlalchemy as sqla

from bulletin.core import di
from bulletin.model import ClassID, ReportCard, ReportCardID, StudentID, SubjectAverage

from . import Session
from .table import report_card_subjects, report_cards


def _subject_averages(
    report_card_ids: t.Sequence[ReportCardID], session: Session
) -> dict[ReportCardID, list[SubjectAverage]]:
    found: dict[ReportCardID, list[SubjectAverage]] = collections.defaultdict(list)
    if not report_card_ids:
        return found

    stmt = (
        sqla
        .select(report_card_subjects.__table__)
        .where(report_card_subjects.report_card_id.in_(report_card_ids))
        .order_by(report_card_subjects.report_card_id, report_card_subjects.position)
    )
    for row in session.execute(stmt).mappings():
        found[row["report_card_id"]].append(
            SubjectAverage(subject_id=row["subject_id"], average=row["average"], weight=row["weight"])
        )
    return found


@t.overload
def get(
    report_card_id: ReportCardID,
    *,
    session: Session = ...,
) -> ReportCard | None: ...


@t.overload
def get(
    report_card_id: None = None,
    *,
    student_id: StudentID,
    term: int,
    school_year: str,
    session: Session = ...,
) -> ReportCard | None: ...


def get(
    report_card_id: ReportCardID | None = None,
    *,
    student_id: StudentID | None = None,
    term: int | None = None,
    school_year: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> ReportCard | None:
    """Get a report card by ID, or by the (student, term, school year) it covers."""
    if report_card_id is not None:
        stmt = sqla.select(report_cards.__table__).where(report_cards.report_card_id == report_card_id)
    elif student_id is not None and term is not None and school_year is not None:
        stmt = sqla.select(report_cards.__table__).where(
            report_cards.student_id == student_id,
            report_cards.term == term,
            report_cards.school_year == school_year,
        )
    else:
        raise ValueError("either report_card_id or student_id, term and school_year must be provided")

    row = session.execute(stmt).mappings().one_or_none()
    if row is None:
        return None
    averages = _subject_averages([row["report_card_id"]], session)
    return ReportCard(**row, subject_averages=averages[row["report_card_id"]])


def find(
    *,
    student_id: StudentID | None = None,
    class_id: ClassID | None = None,
    term: int | None = None,
    school_year: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[ReportCard, ...]:
    """Find report cards, most recent school year first, then by term.

    Within a term, cards are ordered by overall average, best first.
    """
    stmt = sqla.select(report_cards.__table__)
    if student_id is not None:
        stmt = stmt.where(report_cards.student_id == student_id)
    if class_id is not None:
        stmt = stmt.where(report_cards.class_id == class_id)
    if term is not None:
        stmt = stmt.where(report_cards.term == term)
    if school_year is not None:
        stmt = stmt.where(report_cards.school_year == school_year)
    stmt = stmt.order_by(
        report_cards.school_year.desc(),
        report_cards.term.asc(),
        report_cards.overall_average.desc(),
        report_cards.report_card_id,
    )

    rows = session.execute(stmt).mappings().all()
    averages = _subject_averages([row["report_card_id"] for row in rows], session)
    return tuple(ReportCard(**row, subject_averages=averages[row["report_card_id"]]) for row in rows)


def create(
    *,
    student_id: StudentID,
    class_id: ClassID,
    term: int,
    school_year: str,
    overall_average: decimal.Decimal,
    cohort_size: int,
    subject_averages: t.Sequence[SubjectAverage] = (),
    session: Session = di.Provide["storage.persistent.session"],
) -> ReportCard:
    """Create a report card, unranked, with its subject averages in the given order."""
    report_card_id = ReportCardID()
    session.execute(
        sqla.insert(report_cards).values(
            report_card_id=report_card_id,
            student_id=student_id,
            class_id=class_id,
            term=term,
            school_year=school_year,
            overall_average=overall_average,
            cohort_size=cohort_size,
        )
    )
    if subject_averages:
        session.execute(
            sqla.insert(report_card_subjects),
            [
                {
                    "report_card_id": report_card_id,
                    "subject_id": sa.subject_id,
                    "position": position,
                    "average": sa.average,
                    "weight": sa.weight,
                }
                for position, sa in enumerate(subject_averages)
            ],
        )
    session.flush()
    return get(report_card_id, session=session)  # type: ignore[return-value]


def update_rank(
    report_card_id: ReportCardID,
    rank: int,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Set the rank of a report card within its cohort.

    Raises:
        KeyError: If report_card_id does not correspond to a report card
    """
    stmt = sqla.update(report_cards).where(report_cards.report_card_id == report_card_id).values(rank=rank)
    result = session.execute(stmt)
    if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
        raise KeyError(f"Report card {report_card_id} not found")
    session.flush()
