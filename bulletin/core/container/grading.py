from __future__ import annotations

import typing as t

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Factory, Provider
from sqlalchemy.orm import Session

from bulletin.grading import BulletinGenerator, ClassStatisticsComputer, EvaluationStatisticsComputer, \
    SQLReportCardStore, SQLScoreSource


def provide_generator(session: Session, terms: t.Collection[int], precision: int) -> BulletinGenerator:
    # source and store must read and write through the same session
    return BulletinGenerator(
        source=SQLScoreSource(session),
        store=SQLReportCardStore(session),
        terms=terms,
        precision=precision,
    )


class GradingContainer(DeclarativeContainer):
    """Report-card generation and statistics over the persistent store.

    Every resolution of ``session`` may yield a new session, so providers that
    combine adapters take it once and build them all from it.
    """

    config: Configuration = Configuration()
    session: Provider[Session] = Dependency(instance_of=Session)

    score_source: Provider[SQLScoreSource] = Factory(SQLScoreSource, session=session)
    report_cards: Provider[SQLReportCardStore] = Factory(SQLReportCardStore, session=session)

    generator: Provider[BulletinGenerator] = Factory(
        provide_generator,
        session=session,
        terms=config.terms,
        precision=config.precision.as_int(),
    )
    statistics: Provider[ClassStatisticsComputer] = Factory(
        ClassStatisticsComputer,
        store=report_cards,
        precision=config.precision.as_int(),
    )
    evaluation_statistics: Provider[EvaluationStatisticsComputer] = Factory(
        EvaluationStatisticsComputer,
        source=score_source,
        precision=config.precision.as_int(),
    )
