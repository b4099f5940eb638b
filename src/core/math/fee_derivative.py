"""
Fee Derivative — направление тренда и шаг изменения комиссий

Комиссии BUY и SELL двигаются в противоположные стороны пропорционально
обнаруженному тренду price indicator:
- тренд растёт  → BUY дорожает на delta, SELL дешевеет на delta
- тренд не растёт (включая равенство) → BUY дешевеет, SELL дорожает

delta = floor(avg(prev_buy, prev_sell) * step_pct / 100), по умолчанию 10% от
средней комиссии прошлой epoch. Все вычитания saturating (не ниже нуля).
"""

from typing import Final

from src.core.domain.fee import PriceTrend, TradeDirection
from src.core.math.numerical_safeguards import (
    saturating_add,
    saturating_sub,
    validate_non_negative_int,
)
from src.core.domain.pool import MAX_LP_FEE

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Шаг изменения комиссии за epoch (% от средней комиссии)
DEFAULT_FEE_STEP_PCT: Final[int] = 10

PCT_DENOMINATOR: Final[int] = 100


# =============================================================================
# ТРЕНД
# =============================================================================


def price_trend(prev_indicator: int, prev_prev_indicator: int) -> PriceTrend:
    """
    Направление тренда за (epoch-2, epoch-1).

    Args:
        prev_indicator: Indicator[epoch-1]
        prev_prev_indicator: Indicator[epoch-2]

    Returns:
        INCREASING если prev_indicator > prev_prev_indicator, иначе NOT_INCREASING
    """
    if prev_indicator > prev_prev_indicator:
        return PriceTrend.INCREASING
    return PriceTrend.NOT_INCREASING


def direction_from_swap(zero_for_one: bool) -> TradeDirection:
    """
    Направление комиссии по стороне swap.

    zero_for_one=True: трейдер отдаёт currency0 → SELL.
    """
    return TradeDirection.SELL if zero_for_one else TradeDirection.BUY


# =============================================================================
# ШАГ КОМИССИИ
# =============================================================================


def fee_step(prev_buy: int, prev_sell: int, step_pct: int = DEFAULT_FEE_STEP_PCT) -> int:
    """
    Шаг изменения комиссии: step_pct% от средней комиссии прошлой epoch.

    Целочисленное деление (floor): сначала среднее, затем процент.

    Examples:
        >>> fee_step(3000, 3000)
        300
        >>> fee_step(2700, 3300)
        300
        >>> fee_step(5, 4)
        0
    """
    validate_non_negative_int(prev_buy, "prev_buy")
    validate_non_negative_int(prev_sell, "prev_sell")
    validate_non_negative_int(step_pct, "step_pct")

    average = (prev_buy + prev_sell) // 2
    return average * step_pct // PCT_DENOMINATOR


def next_buy_fee(prev_buy: int, delta: int, trend: PriceTrend, max_fee: int = MAX_LP_FEE) -> int:
    """Новая BUY комиссия: растёт с трендом, падает против (не ниже нуля)."""
    if trend == PriceTrend.INCREASING:
        return saturating_add(prev_buy, delta, max_fee)
    return saturating_sub(prev_buy, delta)


def next_sell_fee(prev_sell: int, delta: int, trend: PriceTrend, max_fee: int = MAX_LP_FEE) -> int:
    """Новая SELL комиссия: зеркально к BUY."""
    if trend == PriceTrend.INCREASING:
        return saturating_sub(prev_sell, delta)
    return saturating_add(prev_sell, delta, max_fee)


def next_fee(
    side: TradeDirection,
    prev_fee: int,
    delta: int,
    trend: PriceTrend,
    max_fee: int = MAX_LP_FEE,
) -> int:
    """
    Новая комиссия для стороны.

    Args:
        side: Сторона комиссии
        prev_fee: Комиссия этой стороны в epoch-1
        delta: Шаг (fee_step)
        trend: Тренд за (epoch-2, epoch-1)
        max_fee: Верхняя граница комиссии

    Returns:
        next_sell_fee для SELL, next_buy_fee для BUY
    """
    if side == TradeDirection.SELL:
        return next_sell_fee(prev_fee, delta, trend, max_fee)
    return next_buy_fee(prev_fee, delta, trend, max_fee)
