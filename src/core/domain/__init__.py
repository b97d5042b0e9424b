"""
Domain models and value objects.

Contains the pool state snapshot, assets, events and the error taxonomy.
"""

from src.core.domain.errors import (
    DeadlinePassed,
    ExcessiveInput,
    InputTooHigh,
    InsufficientLiquidity,
    InsufficientShares,
    InvalidAssetPair,
    InvariantViolation,
    MinimumLiquidity,
    OutputTooLow,
    PoolError,
    SlippageTooHigh,
    TransferFailed,
    Underflow,
    ZeroAmount,
)
from src.core.domain.events import (
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    RebatePaid,
    Swapped,
)
from src.core.domain.pool_state import (
    Asset,
    BonusState,
    FeeRate,
    PoolLifecycle,
    PoolState,
    PoolStats,
)

__all__ = [
    # Errors
    "PoolError",
    "DeadlinePassed",
    "ZeroAmount",
    "InvalidAssetPair",
    "ExcessiveInput",
    "InputTooHigh",
    "SlippageTooHigh",
    "OutputTooLow",
    "Underflow",
    "InsufficientLiquidity",
    "MinimumLiquidity",
    "InsufficientShares",
    "InvariantViolation",
    "TransferFailed",
    # Events
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "RebatePaid",
    "PoolEvent",
    # Pool state
    "Asset",
    "BonusState",
    "FeeRate",
    "PoolLifecycle",
    "PoolState",
    "PoolStats",
]
