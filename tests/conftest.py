"""Pytest fixtures for bulletin integration tests.

The container is booted once per session in the Test environment, which
points storage at an in-memory SQLite database. Every test runs inside a
transaction that is rolled back afterwards.

Usage:
    def test_get_class(db_session: Session, class_factory):
        klass = class_factory(name="6e A")
        with db_session.begin():
            assert school_storage.get_class(klass.class_id, session=db_session) is not None
"""

from __future__ import annotations

import decimal
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
from sqlalchemy.orm import Session

import bulletin
from bulletin.core import BulletinContainer
from bulletin.model import ClassID, DeploymentEnvironment, Evaluation, SchoolClass, Score, Student, StudentID, \
    Subject, SubjectID
from bulletin.storage import evaluation as evaluation_storage
from bulletin.storage import school as school_storage
from bulletin.storage.table import base


@pytest.fixture(scope="session")
def container() -> t.Generator[BulletinContainer]:
    """Boot the DI container for the test session and create the schema."""
    ct = BulletinContainer()
    root = Path(os.path.dirname(bulletin.__file__)).parent

    BulletinContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )
    base.metadata.create_all(ct.storage().persistent().engine())

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def db_session(container: BulletinContainer) -> t.Generator[Session]:
    """Provide a database session wrapped in a transaction.

    Uses join_transaction_mode="create_savepoint" so that the session.begin()
    calls made by storage code create savepoints inside the outer
    transaction, which is rolled back when the test completes.
    """
    engine = container.storage().persistent().engine()

    connection = engine.connect()
    transaction = connection.begin()

    session = Session(
        bind=connection,
        autobegin=False,
        join_transaction_mode="create_savepoint",
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def class_factory(db_session: Session) -> t.Callable[..., SchoolClass]:
    def create_class(name: str = "6e A", level: str | None = "6e") -> SchoolClass:
        with db_session.begin():
            return school_storage.create_class(name=name, level=level, session=db_session)

    return create_class


@pytest.fixture
def subject_factory(db_session: Session) -> t.Callable[..., Subject]:
    """Create subjects, optionally attached to a class.

    Usage:
        math = subject_factory(name="Mathematics", weight=4, class_id=klass.class_id)
    """

    def create_subject(
        name: str = "Mathematics",
        code: str | None = None,
        weight: decimal.Decimal | int = 1,
        class_id: ClassID | None = None,
    ) -> Subject:
        with db_session.begin():
            subject = school_storage.create_subject(
                name=name, code=code or f"{name[:4].upper()}-{SubjectID().key[:6]}", weight=weight, session=db_session
            )
            if class_id is not None:
                school_storage.add_subject(class_id, subject.subject_id, session=db_session)
            return subject

    return create_subject


@pytest.fixture
def student_factory(db_session: Session) -> t.Callable[..., Student]:
    def create_student(name: str = "Awa Diallo", class_id: ClassID | None = None) -> Student:
        with db_session.begin():
            return school_storage.create_student(name=name, class_id=class_id, session=db_session)

    return create_student


@pytest.fixture
def evaluation_factory(db_session: Session) -> t.Callable[..., Evaluation]:
    def create_evaluation(
        class_id: ClassID,
        subject_id: SubjectID,
        term: int = 1,
        weight: decimal.Decimal | int = 1,
        max_score: decimal.Decimal | int = 20,
        name: str = "Devoir",
    ) -> Evaluation:
        with db_session.begin():
            return evaluation_storage.create(
                class_id=class_id,
                subject_id=subject_id,
                name=name,
                term=term,
                weight=weight,
                max_score=max_score,
                session=db_session,
            )

    return create_evaluation


@pytest.fixture
def score_factory(db_session: Session) -> t.Callable[..., Score]:
    def record_score(evaluation: Evaluation, student_id: StudentID, value: decimal.Decimal | int | str) -> Score:
        with db_session.begin():
            return evaluation_storage.record_score(
                evaluation.evaluation_id, student_id, value=value, session=db_session
            )

    return record_score
