"""
Тесты для Numerical Safeguards — Integer Rounding Primitives

Проверяемые инварианты:
1. floor_div / ceil_div округляют в заявленную сторону
2. Деление на ноль и отрицательные аргументы отвергаются
3. bool и float не принимаются как количества
"""

import pytest

from src.core.math.numerical_safeguards import (
    ceil_div,
    floor_div,
    mul_div_ceil,
    mul_div_floor,
    require_int,
    validate_non_negative,
    validate_positive,
)


# =============================================================================
# ТЕСТЫ: Валидация
# =============================================================================


class TestValidation:
    """Тесты require_int / validate_non_negative / validate_positive."""

    def test_int_accepted(self):
        assert require_int("x", 5) == 5
        assert require_int("x", 0) == 0

    def test_bool_rejected(self):
        """bool — подкласс int, но не количество."""
        with pytest.raises(TypeError, match="must be an int"):
            require_int("flag", True)

    def test_float_rejected(self):
        with pytest.raises(TypeError, match="must be an int"):
            require_int("amount", 1.0)

    def test_non_negative(self):
        assert validate_non_negative("amount", 0) == 0
        with pytest.raises(ValueError, match="non-negative"):
            validate_non_negative("amount", -1)

    def test_positive(self):
        assert validate_positive("amount", 1) == 1
        with pytest.raises(ValueError, match="positive"):
            validate_positive("amount", 0)


# =============================================================================
# ТЕСТЫ: Округление
# =============================================================================


class TestRounding:
    """Тесты floor_div / ceil_div."""

    def test_floor_div(self):
        assert floor_div(10, 3) == 3
        assert floor_div(9, 3) == 3
        assert floor_div(0, 7) == 0

    def test_ceil_div(self):
        assert ceil_div(10, 3) == 4
        assert ceil_div(9, 3) == 3
        assert ceil_div(0, 7) == 0
        assert ceil_div(1, 1000) == 1

    def test_ceil_never_below_floor(self):
        for numerator in range(0, 50):
            for denominator in range(1, 12):
                low = floor_div(numerator, denominator)
                high = ceil_div(numerator, denominator)
                assert low <= high <= low + 1
                assert (high == low) == (numerator % denominator == 0)

    def test_zero_denominator_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            floor_div(10, 0)
        with pytest.raises(ValueError, match="positive"):
            ceil_div(10, 0)

    def test_negative_numerator_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            floor_div(-10, 3)

    def test_mul_div_exact_for_large_values(self):
        """Python int не теряет точность на больших произведениях."""
        a = 10**30 + 7
        b = 10**30 + 11
        assert mul_div_floor(a, b, 10**30) == (a * b) // 10**30
        assert mul_div_ceil(a, b, 10**30) == mul_div_floor(a, b, 10**30) + 1
