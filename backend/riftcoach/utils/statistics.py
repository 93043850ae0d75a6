"""Statistical utility functions for safe calculations."""

import math
import statistics
from typing import List


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if denominator is not positive.

    Args:
        numerator: The numerator
        denominator: The denominator
        default: Value to return if denominator is zero or negative

    Returns:
        Result of division or default value
    """
    return numerator / denominator if denominator > 0 else default


def safe_mean(values: List[float], default: float = 0.0) -> float:
    """
    Safely calculate mean of values, returning default if list is empty.

    Args:
        values: List of numeric values
        default: Value to return if list is empty

    Returns:
        Mean of values or default value
    """
    return statistics.fmean(values) if values else default


def coefficient_of_variation(values: List[float], default: float = 0.0) -> float:
    """
    Population standard deviation divided by the mean.

    Args:
        values: List of numeric values
        default: Value to return when empty or when the mean is not positive

    Returns:
        Coefficient of variation or default value
    """
    if not values:
        return default
    mean = statistics.fmean(values)
    return safe_divide(statistics.pstdev(values), mean, default)


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit value to the closed interval [lower, upper]."""
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def calculate_kda(kills: float, deaths: float, assists: float) -> float:
    """KDA ratio; kills + assists when there are no deaths."""
    if deaths == 0:
        return float(kills + assists)
    return (kills + assists) / deaths
