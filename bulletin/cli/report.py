"""CLI commands for generating and reading report cards."""

from __future__ import annotations

from sqlalchemy.orm import Session

import bulletin.lib.cli as click
import bulletin.lib.json as json
from bulletin.core import di
from bulletin.grading import BulletinGenerator, ClassStatisticsComputer, EvaluationStatisticsComputer, \
    SQLReportCardStore
from bulletin.model import ClassID, EvaluationID, ReportCard, ReportCardID, StudentID, SubjectID
from bulletin.storage import school as school_storage


@click.group("report")
def report():
    """Generate and inspect report cards."""
    ...


def _subject_names(subject_ids: list[SubjectID], session: Session) -> dict[SubjectID, str]:
    names: dict[SubjectID, str] = {}
    with session.begin():
        for subject_id in subject_ids:
            subject = school_storage.get_subject(subject_id, session=session)
            names[subject_id] = subject.name if subject else str(subject_id)
    return names


def _echo_card(card: ReportCard) -> None:
    rank = f"{card.rank}/{card.cohort_size}" if card.rank is not None else f"-/{card.cohort_size}"
    click.echo(f"{card.report_card_id}  {card.school_year} T{card.term}  {card.overall_average:>6}  rank {rank}")


@report.command("generate")
@click.argument("class_id", type=click.KeyParamType(ClassID))
@click.argument("term", type=int)
@click.argument("school_year")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON")
@di.inject
def report_generate(
    class_id: ClassID,
    term: int,
    school_year: str,
    as_json: bool,
    generator: BulletinGenerator = di.Provide["grading.generator"],
) -> None:
    """Generate the report cards of a class for a term.

    CLASS_ID is the class id (clas$...).
    TERM is the term number.
    SCHOOL_YEAR is the school year, e.g. 2023-2024.
    """
    result = generator.generate(class_id, term, school_year)
    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    click.echo(f"Class {result.class_id}, term {result.term}, {result.school_year}")
    click.echo(f"  Enrolled: {result.enrolled}")
    click.echo(f"  Created: {len(result.created)}")
    click.echo(f"  Already existing: {result.skipped_existing}")
    if result.failed:
        click.echo(click.style(f"  Failed: {len(result.failed)}", fg="yellow"))
        for student_id in result.failed:
            click.echo(f"    {student_id}")
    for card in result.created:
        _echo_card(card)


@report.command("show")
@click.argument("report_card_id", type=click.KeyParamType(ReportCardID))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the report card as JSON")
@di.inject
def report_show(
    report_card_id: ReportCardID,
    as_json: bool,
    statistics: ClassStatisticsComputer = di.Provide["grading.statistics"],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Show a report card with its class statistics.

    REPORT_CARD_ID is the report card id (bltn$...).
    """
    detail = statistics.describe(report_card_id)
    if as_json:
        click.echo(json.dumps(detail, indent=2))
        return

    card = detail.report_card
    _echo_card(card)
    names = _subject_names([sa.subject_id for sa in card.subject_averages], session)
    for sa in card.subject_averages:
        click.echo(f"  {names[sa.subject_id]:<24} {sa.average:>6}  x{sa.weight}")
    stats = detail.statistics
    click.echo(f"Class average {stats.average}, lowest {stats.min}, highest {stats.max}")
    if card.comment:
        click.echo(f"Comment: {card.comment}")


@report.command("history")
@click.argument("student_id", type=click.KeyParamType(StudentID))
@click.option("--year", "-y", "school_year", default=None, help="Only show this school year")
@di.inject
def report_history(
    student_id: StudentID,
    school_year: str | None,
    store: SQLReportCardStore = di.Provide["grading.report_cards"],
) -> None:
    """List a student's report cards, most recent school year first.

    STUDENT_ID is the student id (stud$...).
    """
    cards = store.list_for_student(student_id, school_year)
    if not cards:
        click.echo("No report cards.")
        return
    for card in cards:
        _echo_card(card)


@report.command("evaluation")
@click.argument("evaluation_id", type=click.KeyParamType(EvaluationID))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the scores as JSON")
@di.inject
def report_evaluation(
    evaluation_id: EvaluationID,
    as_json: bool,
    statistics: EvaluationStatisticsComputer = di.Provide["grading.evaluation_statistics"],
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Show the scores of an evaluation with their mean, lowest and highest.

    EVALUATION_ID is the evaluation id (eval$...).
    """
    detail = statistics.describe_evaluation(evaluation_id)
    if as_json:
        click.echo(json.dumps(detail, indent=2))
        return

    evaluation = detail.evaluation
    click.echo(f"{evaluation.name}  T{evaluation.term}  /{evaluation.max_score}  x{evaluation.weight}")
    with session.begin():
        for score in detail.scores:
            student = school_storage.get_student(score.student_id, session=session)
            name = student.name if student else str(score.student_id)
            remark = f"  {score.remark}" if score.remark else ""
            click.echo(f"  {name:<24} {score.value:>6}{remark}")
    stats = detail.statistics
    click.echo(f"{stats.count} scores, average {stats.average}, lowest {stats.min}, highest {stats.max}")
