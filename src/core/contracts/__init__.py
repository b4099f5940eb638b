"""
Contract Validation Module

Модуль для валидации JSON контрактов (конфигурация пула, снапшоты истории).
"""

from .validators import (
    ContractValidator,
    PoolHistoryValidator,
    PoolKeyValidator,
    SchemaLoader,
    validate_pool_history,
    validate_pool_key,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PoolKeyValidator",
    "PoolHistoryValidator",
    # Functions
    "validate_pool_key",
    "validate_pool_history",
]
