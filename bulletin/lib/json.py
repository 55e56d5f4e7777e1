"""JSON output for report cards and generation summaries.

Decimals are written as strings so that an average of 13.10 is printed
with its scale instead of as the float 13.1.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import json as pyjson
import typing as t

import pydantic as p


class JSONEncoder(pyjson.JSONEncoder):
    def default(self, o: t.Any) -> t.Any:
        match o:
            case p.BaseModel():
                return o.model_dump(mode="json")
            case decimal.Decimal():
                return str(o)
            case datetime.date():
                return o.isoformat()
            case enum.Enum():
                return o.value
            case set() | frozenset():
                return sorted(o)
        return super().default(o)


def dumps(obj: t.Any, *, indent: int | None = None, sort_keys: bool = False, **kw: t.Any) -> str:
    return pyjson.dumps(obj, cls=JSONEncoder, indent=indent, sort_keys=sort_keys, ensure_ascii=False, **kw)
