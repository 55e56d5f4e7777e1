"""Injection markers used across the package.

Storage functions default their ``session`` to
``di.Provide["storage.persistent.session"]``; ``BulletinContainer.boot``
wires the package so that those defaults resolve against the container.
"""

from __future__ import annotations

__all__ = [
    "NotReady",
    "Provide",
    "as_",
    "inject",
]

import typing as t

from dependency_injector.wiring import inject, Provide, TypeModifier

from bulletin.lib.sentinel import NotReady

TAs = t.TypeVar("TAs")


def as_(type_: type[TAs]) -> TypeModifier:
    """Convert an injected configuration value, e.g. a settings dict to GradingSettings."""
    # wiring.as_ is typed too narrowly for pydantic models
    return TypeModifier(type_)
