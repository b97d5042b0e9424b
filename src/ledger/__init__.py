"""Ledger — учёт резервов, долей и бонусного счёта пула.

- ReserveLedger: резервы BASE/QUOTE и supply долей
- ShareRegistry: балансы долей по участникам
- BonusAccount: изолированный счёт rebate-выплат
"""

from .bonus_account import BonusAccount
from .reserve_ledger import LedgerSnapshot, ReserveLedger
from .share_registry import ShareRegistry

__all__ = [
    "BonusAccount",
    "LedgerSnapshot",
    "ReserveLedger",
    "ShareRegistry",
]
