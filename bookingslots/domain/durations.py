"""
Duration resolution for services.

Service durations reach the engine either as minutes or as the labels the
business admin picks from (``"30 min"``, ``"1 orë 30 min"``, ``"1 ditë"``).
Resolution is lenient on purpose: a malformed duration falls back to a
default instead of failing the whole availability calculation.
"""

import logging
import re
from decimal import Decimal
from typing import Dict, Iterable, Union

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 30

DURATION_LABELS: Dict[str, int] = {
    "5 min": 5,
    "10 min": 10,
    "15 min": 15,
    "20 min": 20,
    "25 min": 25,
    "30 min": 30,
    "45 min": 45,
    "1 orë": 60,
    "1 orë 15 min": 75,
    "1 orë 30 min": 90,
    "1 orë 45 min": 105,
    "2 orë": 120,
    "2 orë 15 min": 135,
    "2 orë 30 min": 150,
    "2 orë 45 min": 165,
    "3 orë": 180,
    "3 orë 15 min": 195,
    "3 orë 30 min": 210,
    "3 orë 45 min": 225,
    "4 orë": 240,
    "5 orë": 300,
    "6 orë": 360,
    "8 orë": 480,
    "1 ditë": 1440,
}

_UNIT_MINUTES = {
    "ditë": 1440,
    "dite": 1440,
    "days": 1440,
    "day": 1440,
    "orë": 60,
    "ore": 60,
    "hours": 60,
    "hour": 60,
    "h": 60,
    "minutes": 1,
    "minute": 1,
    "min": 1,
}

# Longest unit names first so "hours" wins over "h"
_UNIT_PATTERN = re.compile(
    r"(\d+)\s*(" + "|".join(sorted(_UNIT_MINUTES, key=len, reverse=True)) + r")",
    re.IGNORECASE,
)
_FIRST_INTEGER = re.compile(r"\d+")

DurationValue = Union[int, float, str, None]


def resolve_duration(value: DurationValue, default: int = DEFAULT_DURATION_MINUTES) -> int:
    """
    Resolve a duration label or minute count into a positive number of minutes.

    Resolution order:
    1. Positive integers (and integral floats) are taken as minutes
    2. Known labels from the admin vocabulary
    3. Labels built from ``N ditë`` / ``N orë`` / ``N min`` parts are summed
    4. The first embedded integer, read as minutes
    5. ``default``
    """
    if isinstance(value, bool):
        # bool is an int subclass; True/False are never durations
        pass
    elif isinstance(value, int):
        if value > 0:
            return value
    elif isinstance(value, float):
        if value > 0 and value.is_integer():
            return int(value)
    elif isinstance(value, str):
        label = " ".join(value.split())

        if label in DURATION_LABELS:
            return DURATION_LABELS[label]

        if label.isdigit() and int(label) > 0:
            return int(label)

        parts = _UNIT_PATTERN.findall(label)
        total = sum(int(amount) * _UNIT_MINUTES[unit.lower()] for amount, unit in parts)
        if total > 0:
            return total

        match = _FIRST_INTEGER.search(label)
        if match and int(match.group()) > 0:
            logger.warning("Unrecognized duration label %r, reading %s as minutes", value, match.group())
            return int(match.group())

    logger.warning("Unusable duration %r, falling back to %d minutes", value, default)
    return default


def total_duration(durations: Iterable[int], default: int = DEFAULT_DURATION_MINUTES) -> int:
    """Sum service durations; an empty selection resolves to ``default``."""
    total = sum(durations)
    return total if total > 0 else default


def total_price(prices: Iterable[Decimal]) -> Decimal:
    """Sum service prices."""
    return sum(prices, Decimal("0"))
