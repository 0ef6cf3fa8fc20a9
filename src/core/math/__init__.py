"""
Core math modules

Округление количеств и цен по шагам биржи.
"""

from src.core.math.precision import (
    COMMISSION_RATE,
    MalformedStepSizeError,
    apply_commission,
    precision_of,
    round_half_away_from_zero,
    truncate_down,
)

__all__ = [
    # Constants
    "COMMISSION_RATE",
    # Exceptions
    "MalformedStepSizeError",
    # Functions
    "precision_of",
    "round_half_away_from_zero",
    "truncate_down",
    "apply_commission",
]
