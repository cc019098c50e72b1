"""Numeric helpers shared by the scoring stages"""

import math
from typing import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity (2.5 -> 3, -2.5 -> -2)"""
    return math.floor(value + 0.5)


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit value to the closed range [lower, upper]"""
    return max(lower, min(value, upper))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence"""
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N), 0.0 for an empty sequence"""
    if not values:
        return 0.0
    avg = mean(values)
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance)
