from __future__ import annotations

import decimal
import logging
import typing as t

from bulletin.lib.util import quantize
from bulletin.model import ClassID, ClassStatistics, EvaluationDetail, EvaluationID, EvaluationStatistics, \
    ReportCardDetail, ReportCardID

from .errors import EvaluationNotFoundError, ReportCardNotFoundError
from .source import ReportCardStore, ScoreSource

logger = logging.getLogger(__name__)


def summarize(averages: t.Sequence[decimal.Decimal], places: int = 2) -> ClassStatistics:
    """Mean, lowest and highest of a cohort's overall averages.

    The mean is rounded like any other average; min and max are already
    rounded values. An empty cohort summarizes to zeros.
    """
    if not averages:
        return ClassStatistics()
    mean = sum(averages, decimal.Decimal(0)) / len(averages)
    return ClassStatistics(average=quantize(mean, places), min=min(averages), max=max(averages))


def summarize_scores(values: t.Sequence[decimal.Decimal], places: int = 2) -> EvaluationStatistics:
    """Like :func:`summarize`, over the raw scores of one evaluation, with their count."""
    summary = summarize(values, places)
    return EvaluationStatistics(average=summary.average, min=summary.min, max=summary.max, count=len(values))


class ClassStatisticsComputer(object):
    def __init__(self, store: ReportCardStore, precision: int = 2):
        self.store = store
        self.precision = precision

    def compute(self, class_id: ClassID, term: int, school_year: str) -> ClassStatistics:
        cohort = self.store.list_by_cohort(class_id, term, school_year)
        return summarize([card.overall_average for card in cohort], self.precision)

    def describe(self, report_card_id: ReportCardID) -> ReportCardDetail:
        """A report card together with the statistics of its cohort.

        Raises:
            ReportCardNotFoundError: If report_card_id does not correspond to a report card
        """
        card = self.store.get(report_card_id)
        if card is None:
            raise ReportCardNotFoundError(report_card_id)

        statistics = self.compute(card.class_id, card.term, card.school_year)
        logger.debug(
            "described report card",
            extra={"report_card_id": report_card_id, "class_average": statistics.average},
        )
        return ReportCardDetail(report_card=card, statistics=statistics)


class EvaluationStatisticsComputer(object):
    def __init__(self, source: ScoreSource, precision: int = 2):
        self.source = source
        self.precision = precision

    def describe_evaluation(self, evaluation_id: EvaluationID) -> EvaluationDetail:
        """An evaluation, its scores ordered by student name and their statistics.

        Raises:
            EvaluationNotFoundError: If evaluation_id does not correspond to an evaluation
        """
        evaluation = self.source.get_evaluation(evaluation_id)
        if evaluation is None:
            raise EvaluationNotFoundError(evaluation_id)

        scores = list(self.source.list_evaluation_scores(evaluation_id))
        statistics = summarize_scores([score.value for score in scores], self.precision)
        logger.debug(
            "described evaluation",
            extra={"evaluation_id": evaluation_id, "count": statistics.count, "average": statistics.average},
        )
        return EvaluationDetail(evaluation=evaluation, scores=scores, statistics=statistics)
