from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeDecorator
from sqlalchemy.types import String

from bulletin.model.id import ShortUUIDKey


class ShortUUIDKeyType(TypeDecorator[ShortUUIDKey]):
    """Stores the bare 22-character key, loads it back as the prefixed id type."""

    impl = String
    cache_ok = True

    def __init__(self, key_type: type[ShortUUIDKey]):
        self.key_type = key_type
        super().__init__(22)  # length of shortuuid

    def process_bind_param(self, value: ShortUUIDKey | str | None, dialect: Dialect) -> str | None:
        if value is None:
            return value
        if not isinstance(value, ShortUUIDKey):
            value = self.key_type(value)
        return value.key

    def process_result_value(self, value: str | None, dialect: Dialect) -> ShortUUIDKey | None:
        if value is not None:
            value = self.key_type(key=value)
        return value
