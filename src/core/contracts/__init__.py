"""
Contract Validation Module

Модуль для валидации JSON контрактов персистентного состояния пула.
"""

from .validators import (
    ContractValidator,
    PoolStateValidator,
    SchemaLoader,
    dump_pool_state,
    load_pool_state,
    validate_pool_state,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PoolStateValidator",
    # Functions
    "validate_pool_state",
    "dump_pool_state",
    "load_pool_state",
]
