"""Weighted means over scores and over subject averages.

Both reduce ``(value, weight)`` pairs to ``Σ(value × weight) / Σ(weight)``,
rounded half-up to a fixed number of places.
"""

from __future__ import annotations

import decimal
import typing as t

from bulletin.lib.util import quantize
from bulletin.model import ScoredEvaluation, SubjectAverage

Number = decimal.Decimal | int


def weighted_mean(pairs: t.Iterable[tuple[Number, Number]]) -> decimal.Decimal:
    """Unrounded weighted mean of ``(value, weight)`` pairs.

    Raises:
        ValueError: If there are no pairs or a weight is not positive
    """
    total = decimal.Decimal(0)
    total_weight = decimal.Decimal(0)
    for value, weight in pairs:
        if weight <= 0:
            raise ValueError(f"weights must be positive, got {weight}")
        total += decimal.Decimal(value) * decimal.Decimal(weight)
        total_weight += decimal.Decimal(weight)
    if not total_weight:
        raise ValueError("cannot average an empty sequence")
    return total / total_weight


def compute_subject_average(scores: t.Sequence[ScoredEvaluation], places: int = 2) -> decimal.Decimal:
    """Average one subject's scores, each weighted by its evaluation's coefficient.

    Callers skip subjects without scores; an empty sequence raises ValueError.
    """
    return quantize(weighted_mean((s.value, s.weight) for s in scores), places)


def compute_overall_average(subject_averages: t.Sequence[SubjectAverage], places: int = 2) -> decimal.Decimal:
    """Average subject averages, each weighted by its curriculum coefficient.

    A student with no scored subject at all averages 0.
    """
    if not subject_averages:
        return quantize(0, places)
    return quantize(weighted_mean((sa.average, sa.weight) for sa in subject_averages), places)
