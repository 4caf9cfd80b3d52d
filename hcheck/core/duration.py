"""Duration expressions for timeout configuration.

Parse and render compact duration strings such as ``3s``, ``500ms``,
``1m30s`` or ``1.5h``. A duration is an optional sign followed by one or more
``<number><unit>`` components. The bare literal ``0`` needs no unit.

Supported units:
    ns, us (also µs), ms, s, m, h
"""

import re
from datetime import timedelta

# Multipliers expressed in microseconds, the resolution of `timedelta`.
_UNIT_MICROSECONDS: dict[str, float] = {
    "ns": 1e-3,
    "us": 1.0,
    "µs": 1.0,  # U+00B5 micro sign
    "μs": 1.0,  # U+03BC greek mu
    "ms": 1e3,
    "s": 1e6,
    "m": 60e6,
    "h": 3600e6,
}

_NUMBER = re.compile(r"[0-9]+\.?[0-9]*|\.[0-9]+")
_UNIT = re.compile(r"[^0-9.]+")

# Largest duration representable as a signed 64-bit nanosecond count.
MAX_DURATION = timedelta(microseconds=(2**63 - 1) // 1000)
_MAX_MICROSECONDS = (2**63 - 1) // 1000


def parse_duration(value: str) -> timedelta:
    """Parse a duration expression into a `timedelta`.

    Args:
        value: Duration text, e.g. ``"2s"``, ``"1m30s"`` or ``"-1.5h"``.

    Returns:
        timedelta: The parsed duration.

    Raises:
        ValueError: If the text is empty, lacks a unit, uses an unknown unit,
            contains characters outside the grammar, or exceeds `MAX_DURATION`.

    Example:
        >>> parse_duration("1m30s")
        datetime.timedelta(seconds=90)
    """
    body = value
    negative = False
    if body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]

    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {value!r}")

    total = 0.0
    pos = 0
    while pos < len(body):
        number = _NUMBER.match(body, pos)
        if number is None:
            raise ValueError(f"invalid duration {value!r}")

        unit = _UNIT.match(body, number.end())
        if unit is None:
            raise ValueError(f"missing unit in duration {value!r}")
        if unit.group() not in _UNIT_MICROSECONDS:
            raise ValueError(f"unknown unit {unit.group()!r} in duration {value!r}")

        total += float(number.group()) * _UNIT_MICROSECONDS[unit.group()]
        pos = unit.end()

    if total > _MAX_MICROSECONDS:
        raise ValueError(f"invalid duration {value!r}")

    duration = timedelta(microseconds=total)
    return -duration if negative else duration


def _trim(value: int, digits: int) -> str:
    whole, frac = divmod(value, 10**digits)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def format_duration(duration: timedelta) -> str:
    """Render a `timedelta` in the notation accepted by `parse_duration`.

    Args:
        duration: The duration to render.

    Returns:
        str: Text such as ``"2s"``, ``"1m30s"``, ``"1h0m0s"`` or ``"250ms"``.
    """
    micros = (duration.days * 86400 + duration.seconds) * 10**6 + duration.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 10**6:
        if micros < 10**3:
            return f"{sign}{micros}µs"
        return f"{sign}{_trim(micros, 3)}ms"

    hours, rest = divmod(micros, 3600 * 10**6)
    minutes, rest = divmod(rest, 60 * 10**6)

    text = sign
    if hours:
        text += f"{hours}h"
    if hours or minutes:
        text += f"{minutes}m"
    return f"{text}{_trim(rest, 6)}s"
