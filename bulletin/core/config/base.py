import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import SettingsConfigDict

from bulletin.model import BaseModel


# NOTE: BaseModel contributes serialize_by_alias to the merged model_config
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)


class BaseSecrets(BaseSettings):  # pyright: ignore [reportIncompatibleVariableOverride]
    model_config = SettingsConfigDict(env_prefix="BULLETIN_SECRETS_", env_nested_delimiter="__", extra="ignore")
