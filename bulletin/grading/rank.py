from __future__ import annotations

import typing as t

from bulletin.model import RankAssignment, ReportCard


def assign_ranks(cohort: t.Iterable[ReportCard]) -> list[RankAssignment]:
    """Rank a cohort by overall average, best first, using competition ranking.

    Equal averages share a rank and the next distinct average takes its
    position in the sorted order, so [18, 16, 16, 14] ranks as [1, 2, 2, 4].
    Equivalently a card's rank is one more than the number of cards with a
    strictly greater average.
    """
    ordered = sorted(cohort, key=lambda card: card.overall_average, reverse=True)

    assignments: list[RankAssignment] = []
    rank = 0
    previous = None
    for position, card in enumerate(ordered, start=1):
        if previous is None or card.overall_average != previous:
            rank = position
            previous = card.overall_average
        assignments.append(RankAssignment(report_card_id=card.report_card_id, rank=rank))
    return assignments
