__all__ = [
    # Base
    "BaseModel",
    "ValueModel",
    "WithCtime",
    "WithTimestamps",
    # Enums
    "DeploymentEnvironment",
    # ID Types
    "ClassID",
    "StudentID",
    "SubjectID",
    "EvaluationID",
    "ReportCardID",
    # School
    "SchoolClass",
    "Student",
    "Subject",
    # Evaluations
    "Evaluation",
    "EvaluationDetail",
    "EvaluationStatistics",
    "Score",
    "ScoredEvaluation",
    # Report cards
    "ClassStatistics",
    "GenerationResult",
    "RankAssignment",
    "ReportCard",
    "ReportCardDetail",
    "ReportCardDraft",
    "SubjectAverage",
]

from .base import BaseModel, ValueModel, WithCtime, WithTimestamps
from .enum import DeploymentEnvironment
from .evaluation import Evaluation, EvaluationDetail, EvaluationStatistics, Score, ScoredEvaluation
from .id import ClassID, EvaluationID, ReportCardID, StudentID, SubjectID
from .report_card import ClassStatistics, GenerationResult, RankAssignment, ReportCard, ReportCardDetail, \
    ReportCardDraft, SubjectAverage
from .school import SchoolClass, Student, Subject
