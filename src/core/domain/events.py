"""
Pool Events — записи о зафиксированных операциях пула

Событие добавляется в журнал внутри TransactionScope: при откате операции
журнал откатывается вместе с ledger, поэтому в нём остаются только
завершённые операции.
"""

from dataclasses import dataclass

from .pool_state import Asset


@dataclass(frozen=True)
class LiquidityAdded:
    """Депозит ликвидности."""

    party: str
    base_deposited: int
    quote_deposited: int
    shares_minted: int


@dataclass(frozen=True)
class LiquidityRemoved:
    """Вывод ликвидности."""

    party: str
    base_withdrawn: int
    quote_withdrawn: int
    shares_burned: int


@dataclass(frozen=True)
class Swapped:
    """Выполненный swap (exact-input или exact-output)."""

    party: str
    asset_in: Asset
    amount_in: int
    asset_out: Asset
    amount_out: int
    exact_output: bool


@dataclass(frozen=True)
class RebatePaid:
    """Выплата rebate из бонусного счёта."""

    party: str
    asset: Asset
    amount: int


PoolEvent = LiquidityAdded | LiquidityRemoved | Swapped | RebatePaid
