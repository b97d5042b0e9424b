"""
Pool Errors — таксономия ошибок пула ликвидности

Каждая ошибка терминальна для операции, которая её подняла:
- Частичное состояние не сохраняется (TransactionScope откатывает ledger)
- Внутренних повторов нет: политика retry принадлежит вызывающей стороне
- Каждый класс несёт стабильный code для логов и диагностики

Ошибки программиста (отрицательные суммы, невалидная конфигурация)
поднимаются как ValueError / TypeError и в таксономию не входят.
"""


class PoolError(Exception):
    """Базовая ошибка операции пула."""

    code: str = "pool_error"


# =============================================================================
# GUARD ERRORS
# =============================================================================


class DeadlinePassed(PoolError):
    """Текущее логическое время больше deadline, переданного вызывающим."""

    code = "deadline_passed"


class ZeroAmount(PoolError):
    """Пользовательская сумма равна нулю."""

    code = "zero_amount"


class InvalidAssetPair(PoolError):
    """asset_in и asset_out совпадают."""

    code = "invalid_asset_pair"


# =============================================================================
# BOUND ERRORS
# =============================================================================


class ExcessiveInput(PoolError):
    """Требуемый BASE для депозита превышает max_base."""

    code = "excessive_input"


class InputTooHigh(PoolError):
    """Вычисленный amount_in для exact-output swap превышает max_amount_in."""

    code = "input_too_high"


class SlippageTooHigh(PoolError):
    """Результат депозита/вывода хуже минимума, заданного вызывающим."""

    code = "slippage_too_high"


class OutputTooLow(PoolError):
    """Вычисленный amount_out для exact-input swap ниже min_amount_out."""

    code = "output_too_low"


# =============================================================================
# LEDGER ERRORS
# =============================================================================


class Underflow(PoolError):
    """Debit/burn опустил бы баланс ledger ниже нуля."""

    code = "underflow"


class InsufficientLiquidity(PoolError):
    """Swap потребовал бы опустошить резерв (или резерв уже пуст)."""

    code = "insufficient_liquidity"


class MinimumLiquidity(PoolError):
    """Bootstrap-депозит ниже минимального порога."""

    code = "minimum_liquidity"


class InsufficientShares(PoolError):
    """Вывод превышает баланс долей вызывающего."""

    code = "insufficient_shares"


class InvariantViolation(PoolError):
    """
    Нарушен инвариант ledger после операции (пустой пул или constant-product).

    Не должен возникать при корректной работе: операция откатывается.
    """

    code = "invariant_violation"


# =============================================================================
# EXTERNAL ERRORS
# =============================================================================


class TransferFailed(PoolError):
    """Внешний коллаборатор не смог переместить актив."""

    code = "transfer_failed"
