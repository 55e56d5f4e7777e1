from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN
from sqlalchemy.pool import StaticPool

from ..config.secrets import PostgresqlSecrets
from ..config.storage import DatabaseSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider


def create_dsn(config: DatabaseSettings, secrets: PostgresqlSecrets) -> DSN:
    if config.is_sqlite:
        return DSN.create(config.driver, database=config.database)
    return DSN.create(
        config.driver,
        port=config.port,
        host=str(config.host) if config.host else None,
        username=secrets.username.get_secret_value() if secrets.username else None,
        password=secrets.password.get_secret_value() if secrets.password else None,
        database=config.database,
    )


def provide_alembic_conf(
    migration_path: Path, config: DatabaseSettings, secrets: PostgresqlSecrets, root: Path | NotReady
) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    dsn = create_dsn(config, secrets)
    escaped_str = dsn.render_as_string(hide_password=False).replace("%", "%%")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / migration_path))
    ac.set_section_option("alembic", "sqlalchemy.url", escaped_str)
    ac.set_section_option("alembic", "file_template", "%%(year)d-%%(month).2d-%%(day).2d-%%(slug)s-%%(rev)s")
    return ac


def provide_engine(config: DatabaseSettings, secrets: PostgresqlSecrets, logging: LoggingProvider) -> sqlalchemy.Engine:
    logger = logging.get_logger()

    dsn = create_dsn(config, secrets)
    if config.is_sqlite:
        # one shared connection, otherwise every checkout of :memory: is a new, empty database
        engine = sqlalchemy.create_engine(
            dsn,
            echo=config.echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        sqlalchemy.event.listen(engine, "connect", register_sqlite_transactions)
        sqlalchemy.event.listen(engine, "begin", emit_sqlite_begin)
    else:
        engine = sqlalchemy.create_engine(dsn, echo=config.echo)
        sqlalchemy.event.listen(engine, "connect", register_timezone)
    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "driver": config.driver,
            "database": config.database,
            "host": config.host,
            "port": config.port,
        },
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session. Callers open their own transactions with ``session.begin()``."""
    maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
    return maker(autobegin=False)


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    secrets = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_conf,
        migration_path=Path("migrations/"),
        config=config.database.as_(DatabaseSettings),
        secrets=secrets.postgresql.as_(PostgresqlSecrets),
        root=root,
    )
    engine: Provider[sqlalchemy.Engine] = Singleton(
        provide_engine,
        config=config.database.as_(DatabaseSettings),
        secrets=secrets.postgresql.as_(PostgresqlSecrets),
        logging=logging,
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    secrets: Provider[StorageSettings] = Configuration(strict=True)
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, logging=logging, root=root
    )


def register_timezone(dbapi_conn: t.Any, _: t.Any) -> None:
    """Set the connection timezone to UTC.

    TIMESTAMP WITH TIME ZONE values come back converted to the connection's
    timezone; pinning it keeps create_time and update_time comparable.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("SET TIMEZONE TO 'UTC'")
    cursor.close()


def register_sqlite_transactions(dbapi_conn: t.Any, _: t.Any) -> None:
    # pysqlite's own BEGIN handling breaks SAVEPOINT; SQLAlchemy emits BEGIN instead
    dbapi_conn.isolation_level = None


def emit_sqlite_begin(conn: sqlalchemy.Connection) -> None:
    conn.exec_driver_sql("BEGIN")
