import decimal

import pydantic as p

from .base import WithTimestamps
from .id import ClassID, StudentID, SubjectID


class SchoolClass(WithTimestamps):
    class_id: ClassID
    name: str
    level: str | None = None


class Subject(WithTimestamps):
    subject_id: SubjectID
    name: str
    code: str
    # curriculum coefficient used when averaging subjects together
    weight: decimal.Decimal = p.Field(default=decimal.Decimal("1"), gt=0)


class Student(WithTimestamps):
    student_id: StudentID
    class_id: ClassID | None = None
    name: str
    student_number: str | None = None
