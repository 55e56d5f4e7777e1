from __future__ import annotations

import typing as t

import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid

KEY_LENGTH = 22


class ShortUUIDKey(str):
    """A prefixed shortuuid, e.g. ``clas$3hN9...``.

    Stored in the database as the bare 22-character key; rendered everywhere
    else with its prefix so that a student id cannot be passed where a class
    id is expected.

    ``ClassID()`` mints a new id, ``ClassID("clas$...")`` parses one and
    ``ClassID(key="...")`` wraps a bare key loaded from a row.
    """

    prefix: t.ClassVar[str]
    separator: t.ClassVar[str] = "$"

    def __init_subclass__(cls, prefix: str, **kwargs: t.Any):
        super().__init_subclass__(**kwargs)
        if len(prefix) != 4:
            raise TypeError(f"{cls.__name__}: prefix must be 4 characters, got {prefix!r}")
        cls.prefix = prefix

    def __new__(cls, s: str | None = None, /, key: str | None = None) -> t.Self:
        if key is None:
            key = shortuuid.uuid() if s is None else cls.parse_key(s)
        elif len(key) != KEY_LENGTH:
            raise ValueError(f"invalid {cls.__name__}: key must have length {KEY_LENGTH}")
        return super().__new__(cls, f"{cls.prefix}{cls.separator}{key}")

    @classmethod
    def parse_key(cls, s: str) -> str:
        """Strip and check the prefix of ``s``, returning the bare key."""
        head = cls.prefix + cls.separator
        if not s.startswith(head):
            raise ValueError(f"invalid {cls.__name__}: key must begin with {head}")
        key = s[len(head) :]
        if len(key) != KEY_LENGTH:
            raise ValueError(f"invalid {cls.__name__}: key must have length {KEY_LENGTH}")
        alphabet = shortuuid.get_alphabet()
        if any(c not in alphabet for c in key):
            raise ValueError(f"invalid {cls.__name__}: key must comprise only {alphabet}")
        return key

    @property
    def key(self) -> str:
        return self[len(self.prefix) + len(self.separator) :]

    @classmethod
    def __get_pydantic_core_schema__(cls, src: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        from_str = core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema([core_schema.is_instance_schema(cls), from_str]),
            serialization=core_schema.plain_serializer_function_ser_schema(str.__str__),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, src: t.Any, handler: p.GetJsonSchemaHandler) -> p.json_schema.JsonSchemaValue:
        return {"type": "string", "pattern": f"^{cls.prefix}\\{cls.separator}"}

    def __hash__(self) -> int:
        return str.__hash__(self)

    def __str__(self) -> str:
        return str.__str__(self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.key}>"


# fmt: off
class ClassID(ShortUUIDKey, prefix="clas"): ...
class StudentID(ShortUUIDKey, prefix="stud"): ...
class SubjectID(ShortUUIDKey, prefix="subj"): ...
class EvaluationID(ShortUUIDKey, prefix="eval"): ...
class ReportCardID(ShortUUIDKey, prefix="bltn"): ...
# fmt: on
