"""Gatekeeper — Guard Layer для публичных операций пула.

Фиксированный порядок проверок:
- Deadline
- Zero-amount
- Bounds операции (slippage / max input)

Все проверки выполняются до мутации ledger.
"""

from .guards import Bound, BoundKind, GuardConfig, GuardResult, OperationGuard

__all__ = [
    "Bound",
    "BoundKind",
    "GuardConfig",
    "GuardResult",
    "OperationGuard",
]
