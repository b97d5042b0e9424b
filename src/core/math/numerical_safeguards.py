"""
Numerical Safeguards — Integer Rounding Primitives

Модуль обеспечивает детерминированную целочисленную арифметику пула:
- Деление с явным направлением округления (floor / ceil)
- Умножение-деление без промежуточной потери точности (mul_div_floor / mul_div_ceil)
- Валидация неотрицательных целых количеств

Все суммы в пуле — целые числа минимальных единиц актива. Float запрещён:
округление является частью контракта корректности, а не деталью реализации.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждое деление явно указывает направление округления
2. Деление на ноль никогда не происходит молча (ValueError)
3. bool не принимается как целое количество
4. Все операции детерминированы и воспроизводимы
"""

from typing import Final

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Минимальная единица количества актива
UNIT_ZERO: Final[int] = 0


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def require_int(name: str, value: int) -> int:
    """
    Проверка, что value — целое число (не bool, не float).

    Args:
        name: Имя параметра (для сообщения об ошибке)
        value: Проверяемое значение

    Returns:
        value без изменений

    Raises:
        TypeError: Если value не int или является bool
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


def validate_non_negative(name: str, value: int) -> int:
    """
    Проверка неотрицательного целого количества.

    Raises:
        TypeError: Если value не int
        ValueError: Если value < 0
    """
    require_int(name, value)
    if value < UNIT_ZERO:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(name: str, value: int) -> int:
    """
    Проверка строго положительного целого количества.

    Raises:
        TypeError: Если value не int
        ValueError: Если value <= 0
    """
    require_int(name, value)
    if value <= UNIT_ZERO:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


# =============================================================================
# ДЕЛЕНИЕ С ЯВНЫМ ОКРУГЛЕНИЕМ
# =============================================================================


def floor_div(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с округлением вниз.

    Для неотрицательных аргументов эквивалентно numerator // denominator.

    Args:
        numerator: Числитель (>= 0)
        denominator: Знаменатель (> 0)

    Returns:
        floor(numerator / denominator)

    Raises:
        ValueError: Если denominator <= 0 или numerator < 0

    Examples:
        >>> floor_div(10, 3)
        3
        >>> floor_div(9, 3)
        3
        >>> floor_div(0, 7)
        0
    """
    validate_non_negative("numerator", numerator)
    validate_positive("denominator", denominator)
    return numerator // denominator


def ceil_div(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с округлением вверх.

    Args:
        numerator: Числитель (>= 0)
        denominator: Знаменатель (> 0)

    Returns:
        ceil(numerator / denominator)

    Raises:
        ValueError: Если denominator <= 0 или numerator < 0

    Examples:
        >>> ceil_div(10, 3)
        4
        >>> ceil_div(9, 3)
        3
        >>> ceil_div(0, 7)
        0
    """
    validate_non_negative("numerator", numerator)
    validate_positive("denominator", denominator)
    return -(-numerator // denominator)


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) без промежуточного округления.

    Python int не переполняется, поэтому произведение вычисляется точно.
    """
    return floor_div(a * b, denominator)


def mul_div_ceil(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator) без промежуточного округления."""
    return ceil_div(a * b, denominator)
