from __future__ import annotations

import os
import sys
import types
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import bulletin
from bulletin.model import BaseModel, DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady
from ..provider import LoggingProvider
from .grading import GradingContainer
from .storage import StorageContainer


class BootConfiguration(BaseModel):
    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    override: tuple[str, ...]


class BulletinContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, logging=logging, root=root
    )
    grading: Provider[GradingContainer] = Container(
        GradingContainer,
        config=config.grading,
        session=storage.provided.persistent.session.call(),
    )

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: BulletinContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        ps = Settings(env=env, root=config_root, override=override or ())
        ct.config.from_pydantic(ps)
        ct.secrets.from_pydantic(Secrets(env=env))
        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(os.path.dirname(bulletin.__file__)).parent)

        # markers at module level are resolved while wiring, so everything they reach must be set by now
        ct.wire(packages=["bulletin"])
        if wiring:
            ct.wire(modules=wiring)
        if imported := [mod for name, mod in sys.modules.items() if name.startswith("bulletin.")]:
            ct.wire(modules=imported)

        logger = ct.logging().get_logger()
        for ov in ps.override:
            k, v = ov.split("=", 1)
            logger.info(
                "overriding configuration parameter",
                extra={
                    "key": k,
                    "value": v,
                },
            )

        logger.debug(
            "configuration finished",
            extra={
                "config": str(config_root),
            },
        )
        ct._boot_config.override(
            BootConfiguration(debug=debug, env=env, config_root=config_root, override=override or ())
        )
