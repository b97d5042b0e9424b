"""Collaborators — внешние стороны пула (перевод активов, часы).

Пул не реализует custody: он только запрашивает переводы у коллабораторов
после фиксации ledger.
"""

from .in_memory import POOL_ACCOUNT, InMemoryAssetBank, ManualClock
from .interfaces import AssetTransfer, Clock, Transactional

__all__ = [
    "AssetTransfer",
    "Clock",
    "Transactional",
    "InMemoryAssetBank",
    "ManualClock",
    "POOL_ACCOUNT",
]
