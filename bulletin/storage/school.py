"""Classes, subjects and student enrollment.

These rows are maintained by the school administration; the grading engine
only reads them.
"""

from __future__ import annotations

import decimal

import sqlalchemy as sqla

from bulletin.core import di
from bulletin.model import ClassID, SchoolClass, Student, StudentID, Subject, SubjectID

from . import Session
from .table import class_subjects, classes, students, subjects

# Classes


def get_class(
    class_id: ClassID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> SchoolClass | None:
    stmt = sqla.select(classes.__table__).where(classes.class_id == class_id)
    row = session.execute(stmt).mappings().one_or_none()
    return SchoolClass(**row) if row else None


def find_classes(*, session: Session = di.Provide["storage.persistent.session"]) -> tuple[SchoolClass, ...]:
    stmt = sqla.select(classes.__table__).order_by(classes.name)
    rows = session.execute(stmt).mappings().all()
    return tuple(SchoolClass(**row) for row in rows)


def create_class(
    *,
    name: str,
    level: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> SchoolClass:
    class_id = ClassID()
    stmt = sqla.insert(classes).values(class_id=class_id, name=name, level=level)
    session.execute(stmt)
    session.flush()
    return get_class(class_id, session=session)  # type: ignore[return-value]


# Subjects


def get_subject(
    subject_id: SubjectID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Subject | None:
    stmt = sqla.select(subjects.__table__).where(subjects.subject_id == subject_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Subject(**row) if row else None


def find_subjects(
    *,
    class_id: ClassID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Subject, ...]:
    """Find subjects, optionally only those taught in a class, ordered by name."""
    stmt = sqla.select(subjects.__table__)
    if class_id is not None:
        stmt = stmt.join(class_subjects, class_subjects.subject_id == subjects.subject_id).where(
            class_subjects.class_id == class_id
        )
    stmt = stmt.order_by(subjects.name, subjects.subject_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Subject(**row) for row in rows)


def create_subject(
    *,
    name: str,
    code: str,
    weight: decimal.Decimal | int = 1,
    session: Session = di.Provide["storage.persistent.session"],
) -> Subject:
    if weight <= 0:
        raise ValueError(f"subject weight must be positive, got {weight}")

    subject_id = SubjectID()
    stmt = sqla.insert(subjects).values(subject_id=subject_id, name=name, code=code, weight=decimal.Decimal(weight))
    session.execute(stmt)
    session.flush()
    return get_subject(subject_id, session=session)  # type: ignore[return-value]


def add_subject(
    class_id: ClassID,
    subject_id: SubjectID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> None:
    """Attach a subject to the curriculum of a class. Attaching twice is a no-op."""
    stmt = sqla.select(class_subjects.__table__).where(
        class_subjects.class_id == class_id, class_subjects.subject_id == subject_id
    )
    if session.execute(stmt).first() is not None:
        return
    session.execute(sqla.insert(class_subjects).values(class_id=class_id, subject_id=subject_id))
    session.flush()


# Students


def get_student(
    student_id: StudentID,
    *,
    session: Session = di.Provide["storage.persistent.session"],
) -> Student | None:
    stmt = sqla.select(students.__table__).where(students.student_id == student_id)
    row = session.execute(stmt).mappings().one_or_none()
    return Student(**row) if row else None


def find_students(
    *,
    class_id: ClassID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Student, ...]:
    """Find students, optionally those enrolled in a class, ordered by name."""
    stmt = sqla.select(students.__table__)
    if class_id is not None:
        stmt = stmt.where(students.class_id == class_id)
    stmt = stmt.order_by(students.name, students.student_id)
    rows = session.execute(stmt).mappings().all()
    return tuple(Student(**row) for row in rows)


def create_student(
    *,
    name: str,
    class_id: ClassID | None = None,
    student_number: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Student:
    student_id = StudentID()
    stmt = sqla.insert(students).values(
        student_id=student_id, name=name, class_id=class_id, student_number=student_number
    )
    session.execute(stmt)
    session.flush()
    return get_student(student_id, session=session)  # type: ignore[return-value]
