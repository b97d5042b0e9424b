"""
Rate Math — Fixed-Point расчёты constant-product пула

Чистые функции без состояния. Все суммы — целые числа.

ФОРМУЛЫ:
    quote_proportional:
        amount_other = floor(amount_known * reserve_other / reserve_known)

    swap_output_from_input (exact-input):
        amount_out = floor(amount_in * fee_num * reserve_out
                           / (reserve_in * fee_den + amount_in * fee_num))

    swap_input_from_output (exact-output):
        amount_in = ceil(reserve_in * amount_out * fee_den
                         / ((reserve_out - amount_out) * fee_num))

ПРАВИЛА ОКРУГЛЕНИЯ:
1. Всё, что пул отдаёт (amount_out, доли, выплаты) — округляется вниз
2. Всё, что пул получает (amount_in для exact-output) — округляется вверх
3. Следствие: reserve_in * reserve_out никогда не уменьшается при swap
"""

from typing import NamedTuple

from src.core.domain.errors import InsufficientLiquidity, InsufficientShares, ZeroAmount
from src.core.math.numerical_safeguards import (
    ceil_div,
    floor_div,
    mul_div_floor,
    validate_non_negative,
)


class Fee(NamedTuple):
    """
    Множитель комиссии как рациональное число.

    numerator/denominator — доля входа, участвующая в ценообразовании
    (997/1000 означает комиссию 0.3%).
    """

    numerator: int
    denominator: int


# =============================================================================
# ПРОПОРЦИИ
# =============================================================================


def quote_proportional(amount_known: int, reserve_known: int, reserve_other: int) -> int:
    """
    Сумма второго актива в текущем соотношении резервов.

    Используется для парного депозита. Округление вниз: депозитор
    никогда не получает больше, чем оправдывает его вклад.

    Args:
        amount_known: Известная сумма
        reserve_known: Резерв того же актива
        reserve_other: Резерв второго актива

    Returns:
        floor(amount_known * reserve_other / reserve_known)

    Raises:
        InsufficientLiquidity: Если reserve_known == 0
    """
    validate_non_negative("amount_known", amount_known)
    validate_non_negative("reserve_other", reserve_other)
    validate_non_negative("reserve_known", reserve_known)
    if reserve_known == 0:
        raise InsufficientLiquidity("reserve_known is zero, ratio undefined")
    return mul_div_floor(amount_known, reserve_other, reserve_known)


def shares_for_deposit(amount_quote: int, reserve_quote: int, total_shares: int) -> int:
    """Доли, выпускаемые за amount_quote: floor(amount_quote * total_shares / reserve_quote)."""
    return quote_proportional(amount_quote, reserve_quote, total_shares)


def payout_for_shares(shares: int, reserve: int, total_shares: int) -> int:
    """
    Выплата одного резерва за сжигаемые доли.

    floor(reserve * shares / total_shares)

    Raises:
        InsufficientLiquidity: Если total_shares == 0
        InsufficientShares: Если shares > total_shares
    """
    validate_non_negative("shares", shares)
    validate_non_negative("reserve", reserve)
    validate_non_negative("total_shares", total_shares)
    if total_shares == 0:
        raise InsufficientLiquidity("no shares outstanding")
    if shares > total_shares:
        raise InsufficientShares(f"shares {shares} exceed total_shares {total_shares}")
    return mul_div_floor(reserve, shares, total_shares)


# =============================================================================
# SWAP
# =============================================================================


def _validate_fee(fee: Fee) -> None:
    validate_non_negative("fee.numerator", fee.numerator)
    validate_non_negative("fee.denominator", fee.denominator)
    if fee.numerator == 0 or fee.numerator > fee.denominator:
        raise ValueError(
            f"fee must satisfy 0 < numerator <= denominator, got {fee.numerator}/{fee.denominator}"
        )


def _validate_swap_inputs(amount: int, reserve_in: int, reserve_out: int, fee: Fee) -> None:
    validate_non_negative("amount", amount)
    validate_non_negative("reserve_in", reserve_in)
    validate_non_negative("reserve_out", reserve_out)
    _validate_fee(fee)
    if amount == 0:
        raise ZeroAmount("swap amount must be non-zero")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity(
            f"cannot swap against an empty reserve (reserve_in={reserve_in}, reserve_out={reserve_out})"
        )


def swap_output_from_input(amount_in: int, reserve_in: int, reserve_out: int, fee: Fee) -> int:
    """
    Максимальный amount_out для точного amount_in.

    Args:
        amount_in: Вход (> 0)
        reserve_in: Резерв входного актива (> 0)
        reserve_out: Резерв выходного актива (> 0)
        fee: Множитель комиссии

    Returns:
        floor(amount_in * fee_num * reserve_out / (reserve_in * fee_den + amount_in * fee_num))

    Raises:
        ZeroAmount: Если amount_in == 0
        InsufficientLiquidity: Если один из резервов пуст

    Examples:
        >>> swap_output_from_input(10, 100, 100, Fee(997, 1000))
        9
    """
    _validate_swap_inputs(amount_in, reserve_in, reserve_out, fee)

    amount_in_with_fee = amount_in * fee.numerator
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * fee.denominator + amount_in_with_fee
    return floor_div(numerator, denominator)


def swap_input_from_output(amount_out: int, reserve_in: int, reserve_out: int, fee: Fee) -> int:
    """
    Минимальный amount_in для точного amount_out.

    Args:
        amount_out: Желаемый выход (> 0, < reserve_out)
        reserve_in: Резерв входного актива (> 0)
        reserve_out: Резерв выходного актива (> 0)
        fee: Множитель комиссии

    Returns:
        ceil(reserve_in * amount_out * fee_den / ((reserve_out - amount_out) * fee_num))

    Raises:
        ZeroAmount: Если amount_out == 0
        InsufficientLiquidity: Если резерв пуст или amount_out >= reserve_out
    """
    _validate_swap_inputs(amount_out, reserve_in, reserve_out, fee)
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"amount_out {amount_out} would drain reserve_out {reserve_out}"
        )

    numerator = reserve_in * amount_out * fee.denominator
    denominator = (reserve_out - amount_out) * fee.numerator
    return ceil_div(numerator, denominator)


def spot_price(unit: int, reserve_in: int, reserve_out: int, fee: Fee) -> int:
    """
    Выход за `unit` единиц входного актива (цена с учётом комиссии и impact).

    Тот же расчёт, что и swap_output_from_input; unit задаётся конфигурацией пула.
    """
    return swap_output_from_input(unit, reserve_in, reserve_out, fee)
