"""
Core math modules для пула ликвидности

Целочисленные примитивы с явным направлением округления и
fixed-point расчёты constant-product пула.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    UNIT_ZERO,
    ceil_div,
    floor_div,
    mul_div_ceil,
    mul_div_floor,
    require_int,
    validate_non_negative,
    validate_positive,
)

# Rate Math
from src.core.math.rate_math import (
    Fee,
    payout_for_shares,
    quote_proportional,
    shares_for_deposit,
    spot_price,
    swap_input_from_output,
    swap_output_from_input,
)

__all__ = [
    # Numerical Safeguards: Constants
    "UNIT_ZERO",
    # Numerical Safeguards: Rounding
    "ceil_div",
    "floor_div",
    "mul_div_ceil",
    "mul_div_floor",
    # Numerical Safeguards: Validation
    "require_int",
    "validate_non_negative",
    "validate_positive",
    # Rate Math: Types
    "Fee",
    # Rate Math: Functions
    "payout_for_shares",
    "quote_proportional",
    "shares_for_deposit",
    "spot_price",
    "swap_input_from_output",
    "swap_output_from_input",
]
