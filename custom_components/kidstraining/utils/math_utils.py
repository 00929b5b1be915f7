# File: utils/math_utils.py
"""Math and calculation utilities for KidsTraining.

Pure Python math functions with ZERO Home Assistant dependencies.

UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - clamp: Bound a value to a closed range
    - progress_fraction: Progress ratio in [0, 1] with rounding
    - weighted_choice: Pick an item proportionally to integer weights
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import TypeVar

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

# Float precision for fractions exposed in sensor attributes
DATA_FLOAT_PRECISION = 4


def clamp(value: int, min_val: int, max_val: int) -> int:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))


def progress_fraction(
    current: float, target: float, precision: int = DATA_FLOAT_PRECISION
) -> float:
    """Return ``current / target`` clamped to [0, 1], or 0.0 if target is 0.

    Examples:
        progress_fraction(30, 120) → 0.25
        progress_fraction(5, 0) → 0.0
    """
    if target <= 0:
        return 0.0
    return round(max(0.0, min(1.0, current / target)), precision)


def weighted_choice(
    items: Sequence[T], weights: Sequence[int], rng: random.Random
) -> T:
    """Pick one item with probability proportional to its weight.

    Weights below 1 are raised to 1 so every item stays reachable.

    Raises:
        ValueError: If ``items`` is empty or lengths differ.
    """
    if not items:
        raise ValueError("weighted_choice requires at least one item")
    if len(items) != len(weights):
        raise ValueError("items and weights must have the same length")

    normalized = [max(1, int(weight)) for weight in weights]
    roll = rng.uniform(0, sum(normalized))
    accumulated = 0
    for item, weight in zip(items, normalized):
        accumulated += weight
        if roll <= accumulated:
            return item
    return items[-1]
