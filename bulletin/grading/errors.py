from __future__ import annotations

from bulletin.model import ClassID, EvaluationID, ReportCardID, StudentID


class GradingError(Exception):
    """Base class for errors raised by the grading engine."""


class InvalidInputError(GradingError, ValueError):
    """A generation request was malformed; nothing was persisted."""


class ClassNotFoundError(InvalidInputError):
    def __init__(self, class_id: ClassID):
        super().__init__(f"class {class_id} not found")
        self.class_id = class_id


class ReportCardNotFoundError(GradingError, KeyError):
    def __init__(self, report_card_id: ReportCardID):
        super().__init__(f"report card {report_card_id} not found")
        self.report_card_id = report_card_id

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class EvaluationNotFoundError(GradingError, KeyError):
    def __init__(self, evaluation_id: EvaluationID):
        super().__init__(f"evaluation {evaluation_id} not found")
        self.evaluation_id = evaluation_id

    def __str__(self) -> str:
        return str(self.args[0])


class StudentComputationError(GradingError):
    """Computing one student's averages failed; generation moves on to the next student."""

    def __init__(self, student_id: StudentID, reason: str):
        super().__init__(f"could not compute report card for student {student_id}: {reason}")
        self.student_id = student_id


class PersistenceError(GradingError):
    """A report card could not be written. Cards written earlier in the run are kept."""
