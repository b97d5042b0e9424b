"""Pool — пул ликвидности constant-product (BASE/QUOTE).

- Pool: агрегат состояния и публичные операции
- LiquidityManager: deposit / withdraw
- SwapEngine: exact-input / exact-output swap
- TransactionScope: all-or-nothing откат операции
"""

from .config import PoolConfig, RebateConfig
from .event_log import EventLog
from .liquidity_manager import DepositPreview, LiquidityManager, WithdrawPreview
from .pool import Pool
from .swap_engine import SwapEngine, SwapQuote, SwapStats
from .transaction import TransactionScope, TransferDirection, request_transfer

__all__ = [
    "Pool",
    "PoolConfig",
    "RebateConfig",
    "EventLog",
    "LiquidityManager",
    "DepositPreview",
    "WithdrawPreview",
    "SwapEngine",
    "SwapQuote",
    "SwapStats",
    "TransactionScope",
    "TransferDirection",
    "request_transfer",
]
