"""Pure Python utilities for KidsTraining.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Date keys, parsing and local-day calculations
    - math_utils: Clamping, progress fractions, weighted random choice
    - tag_utils: Session tag normalization
"""

from . import dt_utils, math_utils, tag_utils

__all__ = ["dt_utils", "math_utils", "tag_utils"]
