__all__ = [
    "BulletinGenerator",
    "ClassNotFoundError",
    "ClassStatisticsComputer",
    "EvaluationNotFoundError",
    "EvaluationStatisticsComputer",
    "GradingError",
    "InvalidInputError",
    "PersistenceError",
    "ReportCardNotFoundError",
    "ReportCardStore",
    "ScoreSource",
    "SQLReportCardStore",
    "SQLScoreSource",
    "StudentComputationError",
    "assign_ranks",
    "compute_overall_average",
    "compute_subject_average",
    "summarize",
    "summarize_scores",
]

from .average import compute_overall_average, compute_subject_average
from .errors import ClassNotFoundError, EvaluationNotFoundError, GradingError, InvalidInputError, PersistenceError, \
    ReportCardNotFoundError, StudentComputationError
from .generator import BulletinGenerator
from .rank import assign_ranks
from .source import ReportCardStore, ScoreSource, SQLReportCardStore, SQLScoreSource
from .statistics import ClassStatisticsComputer, EvaluationStatisticsComputer, summarize, summarize_scores
