"""Liquidity rebalancer — перенаправление выведенной ликвидности во внешний yield.

При событии "liquidity removed" выведенные суммы пересылаются в одну из внешних
yield-интеграций. Интеграция выбирается один раз при конфигурации (закрытый
enum YieldIntegrationKind), а не разбором строки на каждом событии. Внутреннее
устройство интеграций вне модуля: используется только контракт deposit().

DynamicFeeEngine не зависит от rebalancer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Tuple

from loguru import logger
from pydantic import BaseModel, Field


class UnsupportedIntegrationError(ValueError):
    """Неизвестная или несконфигурированная yield-интеграция."""
    pass


class YieldIntegrationKind(str, Enum):
    """Вид внешней yield-интеграции"""

    AAVE = "aave"
    COMPOUND = "compound"

    @classmethod
    def parse(cls, raw: str) -> "YieldIntegrationKind":
        """
        Разбор конфигурационного значения (регистр и пробелы игнорируются).

        Raises:
            UnsupportedIntegrationError: Если значение не соответствует ни одному виду
        """
        normalized = raw.strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        supported = ", ".join(kind.value for kind in cls)
        raise UnsupportedIntegrationError(
            f"Unsupported yield integration {raw!r} (supported: {supported})"
        )


class YieldIntegration(ABC):
    """Контракт внешней yield-интеграции."""

    @abstractmethod
    def deposit(self, currency: str, amount: int) -> None:
        """Передать amount актива currency в интеграцию."""


class LiquidityRemoved(BaseModel):
    """Событие вывода ликвидности из пула."""

    pool_id: str = Field(..., min_length=1, description="Идентификатор пула")
    epoch: int = Field(..., ge=0, description="Epoch события")
    currency0: str = Field(..., min_length=1, description="Первый актив пары")
    currency1: str = Field(..., min_length=1, description="Второй актив пары")
    amount0: int = Field(..., ge=0, description="Выведено currency0")
    amount1: int = Field(..., ge=0, description="Выведено currency1")

    model_config = {"frozen": True}


@dataclass(frozen=True)
class RebalancerConfig:
    """Конфигурация rebalancer.

    - integration: вид yield-интеграции
    - min_amount: минимальная пересылаемая сумма (меньшие суммы пропускаются)
    """
    integration: YieldIntegrationKind
    min_amount: int = 1

    def __post_init__(self):
        if self.min_amount < 1:
            raise ValueError(f"min_amount must be >= 1, got {self.min_amount}")

    @classmethod
    def from_raw(cls, integration: str, min_amount: int = 1) -> "RebalancerConfig":
        return cls(integration=YieldIntegrationKind.parse(integration), min_amount=min_amount)


@dataclass(frozen=True)
class RebalanceResult:
    """Результат обработки события вывода ликвидности."""

    pool_id: str
    integration: YieldIntegrationKind
    forwarded: Tuple[Tuple[str, int], ...]

    details: str


class LiquidityRebalancer:
    """Пересылка выведенной ликвидности в сконфигурированную интеграцию."""

    def __init__(
        self,
        config: RebalancerConfig,
        integrations: Mapping[YieldIntegrationKind, YieldIntegration],
    ):
        """
        Args:
            config: конфигурация (вид интеграции)
            integrations: доступные реализации интеграций по виду

        Raises:
            UnsupportedIntegrationError: Если реализация для config.integration не передана
        """
        if config.integration not in integrations:
            raise UnsupportedIntegrationError(
                f"No implementation registered for {config.integration.value}"
            )
        self.config = config
        self._integration = integrations[config.integration]

    def on_liquidity_removed(self, event: LiquidityRemoved) -> RebalanceResult:
        forwarded = []
        for currency, amount in ((event.currency0, event.amount0), (event.currency1, event.amount1)):
            if amount < self.config.min_amount:
                continue
            self._integration.deposit(currency, amount)
            forwarded.append((currency, amount))

        if forwarded:
            logger.bind(pool_id=event.pool_id, epoch=event.epoch).info(
                "Forwarded {} to {}", forwarded, self.config.integration.value
            )

        return RebalanceResult(
            pool_id=event.pool_id,
            integration=self.config.integration,
            forwarded=tuple(forwarded),
            details=(
                f"forwarded {len(forwarded)} amount(s) to {self.config.integration.value}"
                if forwarded else "nothing to forward"
            ),
        )
