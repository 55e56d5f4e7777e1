"""Tests for the bulletin command line, run against the test container."""

from __future__ import annotations

import decimal
import json
import typing as t
from pathlib import Path

import alembic.config
import pytest
from click.testing import CliRunner
from sqlalchemy.orm import Session

import bulletin
from bulletin.cli.__main__ import main
from bulletin.core import BulletinContainer
from bulletin.model import Evaluation, SchoolClass, Score, Student, Subject

D = decimal.Decimal
YEAR = "2023-2024"


@pytest.fixture
def cli(container: BulletinContainer, db_session: Session) -> t.Generator[t.Callable[..., t.Any]]:
    """Run the CLI on the booted container, with storage going through db_session."""
    persistent = container.storage().persistent()
    persistent.session.override(db_session)
    runner = CliRunner()

    def invoke(*args: str) -> t.Any:
        return runner.invoke(main, ["-E", "test", *args], obj=container)

    try:
        yield invoke
    finally:
        persistent.session.reset_override()


@pytest.fixture
def lesson(
    class_factory: t.Callable[..., SchoolClass],
    subject_factory: t.Callable[..., Subject],
    student_factory: t.Callable[..., Student],
    evaluation_factory: t.Callable[..., Evaluation],
    score_factory: t.Callable[..., Score],
) -> dict[str, t.Any]:
    klass = class_factory(name="5e B")
    math = subject_factory(name="Mathematics", weight=2, class_id=klass.class_id)
    moussa = student_factory(name="Moussa", class_id=klass.class_id)
    fatou = student_factory(name="Fatou", class_id=klass.class_id)
    quiz = evaluation_factory(klass.class_id, math.subject_id, name="Quiz")
    score_factory(quiz, moussa.student_id, 15)
    score_factory(quiz, fatou.student_id, "10.5")
    return {"class": klass, "quiz": quiz, "moussa": moussa, "fatou": fatou}


class TestReportCommands(object):
    """The report group boots the container and runs against storage."""

    def test_generate_json(self, cli: t.Callable[..., t.Any], lesson: dict[str, t.Any]) -> None:
        result = cli("report", "generate", lesson["class"].class_id, "1", YEAR, "--json")

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["enrolled"] == 2
        assert payload["failed"] == []
        ranks = {card["student_id"]: card["rank"] for card in payload["created"]}
        assert ranks == {lesson["moussa"].student_id: 1, lesson["fatou"].student_id: 2}

    def test_generate_text(self, cli: t.Callable[..., t.Any], lesson: dict[str, t.Any]) -> None:
        result = cli("report", "generate", lesson["class"].class_id, "1", YEAR)

        assert result.exit_code == 0, result.output
        assert "Created: 2" in result.output

    def test_generate_bad_term(self, cli: t.Callable[..., t.Any], lesson: dict[str, t.Any]) -> None:
        """A term outside the grading policy fails the command."""
        result = cli("report", "generate", lesson["class"].class_id, "9", YEAR, "--json")

        assert result.exit_code != 0

    def test_evaluation_json(self, cli: t.Callable[..., t.Any], lesson: dict[str, t.Any]) -> None:
        """Scores are listed by student name with their statistics."""
        result = cli("report", "evaluation", lesson["quiz"].evaluation_id, "--json")

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert [s["student_id"] for s in payload["scores"]] == [
            lesson["fatou"].student_id,
            lesson["moussa"].student_id,
        ]
        statistics = payload["statistics"]
        assert [D(statistics[k]) for k in ("average", "min", "max")] == [D("12.75"), D("10.5"), D(15)]
        assert statistics["count"] == 2

    def test_evaluation_text(self, cli: t.Callable[..., t.Any], lesson: dict[str, t.Any]) -> None:
        result = cli("report", "evaluation", lesson["quiz"].evaluation_id)

        assert result.exit_code == 0, result.output
        assert result.output.index("Fatou") < result.output.index("Moussa")
        assert "2 scores, average 12.75" in result.output

    def test_unknown_id_rejected(self, cli: t.Callable[..., t.Any]) -> None:
        result = cli("report", "evaluation", "eval$nope")

        assert result.exit_code == 2


class TestBoot(object):
    """Booting resolves everything that is wired at module level."""

    def test_alembic_config_after_boot(self, container: BulletinContainer) -> None:
        conf = container.storage().persistent().alembic_config()

        assert isinstance(conf, alembic.config.Config)
        root = Path(bulletin.__file__).resolve().parents[1]
        assert Path(conf.get_main_option("script_location")).resolve() == (root / "migrations").resolve()

    def test_schema_commands_listed(self, cli: t.Callable[..., t.Any]) -> None:
        result = cli("schema", "--help")

        assert result.exit_code == 0, result.output
        for name in ("current", "check", "generate", "up", "down", "history"):
            assert name in result.output
