import re
from typing import Iterable, List

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def normalize_ingredients(items: Iterable[str]) -> List[str]:
    return [s.strip() for s in items if s and s.strip()]


def normalize_tags(items: Iterable[str]) -> List[str]:
    return [s.strip().lower() for s in items if s and s.strip()]


def split_tags(raw: str, normalize: bool = False) -> List[str]:
    """Split a comma separated query value into an ordered, de-duplicated list."""
    parts = raw.split(",")
    if normalize:
        parts = normalize_tags(parts)
    return list(dict.fromkeys(parts))


def parse_leading_int(value: str | None) -> int | None:
    """Leading integer of ``value`` ("12abc" -> 12, "3.7" -> 3), or None."""
    if value is None:
        return None
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


def clamp_int64(n: int) -> int:
    return max(INT64_MIN, min(INT64_MAX, n))


def parse_number(value: str | None) -> int | None:
    """Integer part of a numeric string, or None when it is not a number.

    Results are clamped to the signed 64-bit range BSON can encode.
    """
    if value is None or not str(value).strip():
        return None
    try:
        num = float(value)
    except ValueError:
        return None
    if num != num or num in (float("inf"), float("-inf")):
        return None
    return clamp_int64(int(num))
