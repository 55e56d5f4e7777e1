from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from bulletin.model import DeploymentEnvironment

from .base import BaseSecrets


class PostgresqlSecrets(BaseSecrets):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None


class Secrets(BaseSecrets):  # pyright: ignore [reportIncompatibleVariableOverride]
    """Credentials, read from BULLETIN_SECRETS_* environment variables.

    e.g. BULLETIN_SECRETS_POSTGRESQL__PASSWORD=...
    """

    env: DeploymentEnvironment
    postgresql: PostgresqlSecrets = p.Field(default_factory=PostgresqlSecrets)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings
