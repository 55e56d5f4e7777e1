from __future__ import annotations

import enum
import typing as t

import click
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

from bulletin.model.id import ShortUUIDKey

# Thin wrapper around Click: commands import this module as `click` and get
# the extra parameter types below alongside everything Click exports.

EnumT = t.TypeVar("EnumT", bound=enum.Enum)
KeyT = t.TypeVar("KeyT", bound=ShortUUIDKey)


class EnumType(click.Choice, t.Generic[EnumT]):
    """A choice among the values of an enum, converted to the member."""

    def __init__(self, enum: type[EnumT]):
        self.enum = enum
        super().__init__([e.value for e in enum], case_sensitive=False)
        self.name = enum.__name__

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> EnumT:
        if isinstance(value, self.enum):
            return value
        return self.enum(super().convert(value, param, ctx))


class KeyParamType(click.ParamType, t.Generic[KeyT]):
    """Parse a prefixed entity id such as ``bltn$...`` into its key type."""

    def __init__(self, key_type: type[KeyT]):
        self.key_type = key_type
        self.name = key_type.__name__

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> KeyT:
        if isinstance(value, self.key_type):
            return value

        try:
            return self.key_type(str(value).strip())
        except ValueError as e:
            self.fail(str(e), param, ctx)

    def __repr__(self) -> str:
        return self.key_type.__name__
