from __future__ import annotations

import alembic.command
import alembic.config
import alembic.util.exc

import bulletin.lib.cli as click
from bulletin.core import di


@click.group("schema")
def schema():
    """Manage the database schema of classes, scores and report cards."""
    ...


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def current(verbose: bool, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    """Show the revision the database is at."""
    alembic.command.current(alembic_conf, verbose=verbose)


@schema.command()
@di.inject
def check(alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    """Fail if the tables have drifted from the latest revision."""
    try:
        alembic.command.check(alembic_conf)
    except alembic.util.exc.AutogenerateDiffsDetected as e:
        raise click.ClickException(str(e)) from e
    click.echo("schema is up to date")


@schema.command()
@click.argument("message")
@click.option("--autogenerate/--empty", default=True, help="Diff the tables against the database")
@di.inject
def generate(
    message: str,
    autogenerate: bool,
    alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"],
):
    """Create a new revision file."""
    alembic.command.revision(alembic_conf, message, autogenerate=autogenerate)


@schema.command()
@click.argument("revision", default="head")
@click.option("--sql", is_flag=True, default=False, help="Print the SQL instead of running it")
@di.inject
def up(
    revision: str,
    sql: bool,
    alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"],
):
    """Upgrade to REVISION (default: head)."""
    alembic.command.upgrade(alembic_conf, revision, sql=sql)


@schema.command()
@click.argument("revision")
@click.option("--sql", is_flag=True, default=False, help="Print the SQL instead of running it")
@di.inject
def down(
    revision: str,
    sql: bool,
    alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"],
):
    """Downgrade to REVISION, e.g. -1 or base."""
    alembic.command.downgrade(alembic_conf, revision, sql=sql)


@schema.command()
@click.option("--verbose", "-v", is_flag=True, default=False)
@di.inject
def history(verbose: bool, alembic_conf: alembic.config.Config = di.Provide["storage.persistent.alembic_config"]):
    """List revisions, marking the current one."""
    alembic.command.history(alembic_conf, verbose=verbose, indicate_current=True)
