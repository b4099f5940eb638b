"""Pool setup validator — допуск пула к динамической комиссии.

Пул допускается к DynamicFeeEngine только если его номинальный fee несёт
DYNAMIC_FEE_FLAG, а base_fee (номинал без маркера) не превышает MAX_LP_FEE.
Проверка выполняется один раз при инициализации пула, до любых запросов комиссии.
"""

from typing import Any, Dict

from loguru import logger

from src.core.contracts import validate_pool_key
from src.core.domain.pool import DYNAMIC_FEE_FLAG, MAX_LP_FEE, PoolKey


class PoolNotDynamicFeeError(ValueError):
    """Пул не запросил динамическую комиссию (нет DYNAMIC_FEE_FLAG)."""
    pass


class InvalidBaseFeeError(ValueError):
    """base_fee пула вне диапазона [0, MAX_LP_FEE]."""
    pass


class PoolNotInitializedError(LookupError):
    """Запрос к пулу, не прошедшему setup validation."""
    pass


class PoolSetupValidator:
    """Проверка конфигурации пула при инициализации.

    Порядок проверок:
    1. Контракт pool_key (JSON Schema)
    2. DYNAMIC_FEE_FLAG установлен
    3. base_fee <= MAX_LP_FEE
    """

    def validate(self, pool: PoolKey) -> None:
        """
        Args:
            pool: конфигурация пула

        Raises:
            ValidationError: нарушение контракта pool_key
            PoolNotDynamicFeeError: пул без маркера динамической комиссии
            InvalidBaseFeeError: base_fee превышает MAX_LP_FEE
        """
        validate_pool_key(pool.model_dump())

        if not pool.is_dynamic_fee:
            logger.warning(
                "Rejected pool {}: fee {:#x} lacks dynamic fee flag {:#x}",
                pool.pool_id, pool.fee, DYNAMIC_FEE_FLAG,
            )
            raise PoolNotDynamicFeeError(
                f"Pool {pool.pool_id} must use a dynamic fee (fee={pool.fee:#x})"
            )

        if pool.base_fee > MAX_LP_FEE:
            logger.warning(
                "Rejected pool {}: base fee {} exceeds {}",
                pool.pool_id, pool.base_fee, MAX_LP_FEE,
            )
            raise InvalidBaseFeeError(
                f"Pool {pool.pool_id} base fee {pool.base_fee} exceeds maximum {MAX_LP_FEE}"
            )

    def parse(self, data: Dict[str, Any]) -> PoolKey:
        """Пул из сырой конфигурации (dict) с полной проверкой."""
        validate_pool_key(data)
        pool = PoolKey(**data)
        self.validate(pool)
        return pool
