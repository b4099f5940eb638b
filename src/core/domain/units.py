"""
FeeUnits — Централизованный модуль конверсии единиц комиссии

Единственный допустимый способ преобразований между:
- fee_ppm (parts per million, целое)
- fee_fraction (безразмерная доля)
- fee_amount (комиссия в единицах входного актива, целое)

ЗАПРЕЩЕНО смешивать единицы без явного конвертера из этого модуля.
"""

from typing import Final

from src.core.domain.pool import MAX_LP_FEE


# =============================================================================
# ПАРАМЕТРЫ ЕДИНИЦ
# =============================================================================

# Знаменатель ppm
PPM_DENOMINATOR: Final[int] = 1_000_000

# 1 basis point в ppm
PPM_PER_BPS: Final[int] = 100


# =============================================================================
# БАЗОВЫЕ КОНВЕРТЕРЫ
# =============================================================================


def ppm_to_fraction(fee_ppm: int) -> float:
    """
    Конверсия: ppm → доля

    Args:
        fee_ppm: Комиссия в ppm (например, 3000 = 0.3%)

    Returns:
        Комиссия в долях (0.003)
    """
    validate_fee_ppm(fee_ppm)
    return fee_ppm / PPM_DENOMINATOR


def bps_to_ppm(fee_bps: int) -> int:
    """
    Конверсия: basis points → ppm

    Args:
        fee_bps: Комиссия в bps (30 = 0.3%)

    Returns:
        Комиссия в ppm
    """
    fee_ppm = fee_bps * PPM_PER_BPS
    validate_fee_ppm(fee_ppm)
    return fee_ppm


def fee_amount(amount_in: int, fee_ppm: int) -> int:
    """
    Комиссия сделки в единицах входного актива.

    Округление вверх, как при списании комиссии пулом: ненулевая сделка
    с ненулевой комиссией всегда платит хотя бы одну единицу.

    Args:
        amount_in: Объём входного актива (целое, >= 0)
        fee_ppm: Комиссия в ppm

    Returns:
        ceil(amount_in * fee_ppm / PPM_DENOMINATOR)

    Raises:
        ValueError: Если amount_in отрицательный или fee_ppm вне диапазона
    """
    if amount_in < 0:
        raise ValueError(f"amount_in cannot be negative: {amount_in}")
    validate_fee_ppm(fee_ppm)
    return -(-amount_in * fee_ppm // PPM_DENOMINATOR)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_fee_ppm(fee_ppm: int) -> None:
    """
    Проверка, что комиссия в допустимом диапазоне [0, MAX_LP_FEE].

    Raises:
        ValueError: Если комиссия отрицательная или превышает 100%
    """
    if fee_ppm < 0:
        raise ValueError(f"Fee cannot be negative: {fee_ppm}")

    if fee_ppm > MAX_LP_FEE:
        raise ValueError(f"Fee {fee_ppm} ppm exceeds maximum {MAX_LP_FEE} ppm")
