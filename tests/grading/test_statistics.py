"""Tests for bulletin.grading.statistics."""

from __future__ import annotations

import decimal

import pytest
from fakes import FakeReportCardStore, FakeScoreSource

from bulletin.grading import BulletinGenerator, ClassStatisticsComputer, EvaluationNotFoundError, \
    EvaluationStatisticsComputer, ReportCardNotFoundError, summarize, summarize_scores
from bulletin.model import ClassID, ClassStatistics, EvaluationID, EvaluationStatistics, ReportCardID

D = decimal.Decimal
YEAR = "2023-2024"


class TestSummarize(object):
    """Tests for summarize()."""

    def test_average_min_max(self) -> None:
        """The mean is rounded; min and max are the extreme averages."""
        result = summarize([D("12.50"), D("14.00"), D("15.25")])

        # 41.75 / 3 = 13.9166...
        assert result == ClassStatistics(average=D("13.92"), min=D("12.50"), max=D("15.25"))

    def test_empty_is_zeros(self) -> None:
        """An empty cohort summarizes to zeros."""
        assert summarize([]) == ClassStatistics(average=D(0), min=D(0), max=D(0))

    def test_single(self) -> None:
        """One card is its own average, minimum and maximum."""
        assert summarize([D("11.11")]) == ClassStatistics(average=D("11.11"), min=D("11.11"), max=D("11.11"))


class TestClassStatisticsComputer(object):
    """Tests for ClassStatisticsComputer."""

    @pytest.fixture
    def cohort(self) -> tuple[FakeReportCardStore, ClassID]:
        source, store = FakeScoreSource(), FakeReportCardStore()
        class_id = source.add_class()
        math = source.add_subject(class_id, "Mathematics")
        for value in ("9", "13.5", "16"):
            source.score(source.enroll(class_id), math, class_id, value)
        BulletinGenerator(source, store).generate(class_id, 1, YEAR)
        return store, class_id

    def test_compute(self, cohort: tuple[FakeReportCardStore, ClassID]) -> None:
        """Statistics cover every card of the class for the term."""
        store, class_id = cohort

        result = ClassStatisticsComputer(store).compute(class_id, 1, YEAR)

        # 38.5 / 3 = 12.833...
        assert result == ClassStatistics(average=D("12.83"), min=D("9.00"), max=D("16.00"))

    def test_compute_empty_cohort(self, cohort: tuple[FakeReportCardStore, ClassID]) -> None:
        """Another term has no cards; its statistics are zeros."""
        store, class_id = cohort

        result = ClassStatisticsComputer(store).compute(class_id, 2, YEAR)

        assert (result.average, result.min, result.max) == (0, 0, 0)

    def test_describe(self, cohort: tuple[FakeReportCardStore, ClassID]) -> None:
        """describe() pairs a report card with its cohort's statistics."""
        store, class_id = cohort
        card = next(c for c in store.cards.values() if c.overall_average == D("13.50"))

        detail = ClassStatisticsComputer(store).describe(card.report_card_id)

        assert detail.report_card == card
        assert detail.report_card.rank == 2
        assert detail.statistics.average == D("12.83")

    def test_describe_unknown(self) -> None:
        """An unknown id raises ReportCardNotFoundError, which is also a KeyError."""
        computer = ClassStatisticsComputer(FakeReportCardStore())

        with pytest.raises(ReportCardNotFoundError, match="not found"):
            computer.describe(ReportCardID())
        with pytest.raises(KeyError):
            computer.describe(ReportCardID())


class TestSummarizeScores(object):
    """Tests for summarize_scores()."""

    def test_counts_scores(self) -> None:
        # 44.5 / 3 = 14.8333...
        result = summarize_scores([D("12"), D("15.5"), D("17")])

        assert result == EvaluationStatistics(average=D("14.83"), min=D("12"), max=D("17"), count=3)

    def test_half_rounds_up(self) -> None:
        """A mean of exactly 12.125 rounds up to 12.13."""
        assert summarize_scores([D("12.25"), D("12")]).average == D("12.13")

    def test_empty_is_zeros(self) -> None:
        assert summarize_scores([]) == EvaluationStatistics(average=D(0), min=D(0), max=D(0), count=0)


class TestEvaluationStatisticsComputer(object):
    """Tests for EvaluationStatisticsComputer."""

    def test_describe_evaluation(self) -> None:
        """The evaluation comes back with its scores in source order and their statistics."""
        source = FakeScoreSource()
        class_id = source.add_class()
        math = source.add_subject(class_id, "Mathematics")
        quiz = source.add_evaluation(class_id, math, name="Quiz")
        awa, binta = source.enroll(class_id), source.enroll(class_id)
        source.grade(quiz, awa, "8.5")
        source.grade(quiz, binta, 19)

        detail = EvaluationStatisticsComputer(source, precision=1).describe_evaluation(quiz)

        assert detail.evaluation.name == "Quiz"
        assert [s.student_id for s in detail.scores] == [awa, binta]
        # 27.5 / 2 = 13.75
        assert detail.statistics == EvaluationStatistics(average=D("13.8"), min=D("8.5"), max=D(19), count=2)

    def test_no_scores(self) -> None:
        """An evaluation nobody has been scored on yet has zero statistics."""
        source = FakeScoreSource()
        class_id = source.add_class()
        quiz = source.add_evaluation(class_id, source.add_subject(class_id, "French"))

        detail = EvaluationStatisticsComputer(source).describe_evaluation(quiz)

        assert detail.scores == []
        assert detail.statistics.count == 0
        assert (detail.statistics.average, detail.statistics.min, detail.statistics.max) == (0, 0, 0)

    def test_unknown_evaluation(self) -> None:
        computer = EvaluationStatisticsComputer(FakeScoreSource())

        with pytest.raises(EvaluationNotFoundError, match="not found"):
            computer.describe_evaluation(EvaluationID())
