import decimal
import typing as t
from collections.abc import Mapping

KT = t.TypeVar("KT")
VT = t.TypeVar("VT")
RecursiveMapping = VT | Mapping[KT, "RecursiveMapping[KT, VT]"]


def deep_update(
    d1: dict[KT, RecursiveMapping[KT, VT]], d2: Mapping[KT, RecursiveMapping[KT, VT]]
) -> dict[KT, RecursiveMapping[KT, VT]]:
    result = d1.copy()
    for k, v in d2.items():
        if isinstance(v, Mapping) and k in result and isinstance(result[k], Mapping):
            result[k] = deep_update(result[k], v)  # type: ignore
        else:
            result[k] = v
    return result


def quantize(value: decimal.Decimal | int | str, places: int = 2) -> decimal.Decimal:
    """Round half-up to a fixed number of decimal places.

    Python's ``round()`` and the default decimal context both round half to
    even, which would turn 13.125 into 13.12.
    """
    exponent = decimal.Decimal(1).scaleb(-places)
    return decimal.Decimal(value).quantize(exponent, rounding=decimal.ROUND_HALF_UP)
