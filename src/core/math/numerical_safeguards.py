"""
Numerical Safeguards — Safe Integer Math Primitives

Модуль обеспечивает арифметическую безопасность расчёта комиссий:
- Saturating вычитание (никогда не уходит ниже нуля)
- Saturating сложение (не выше заданного потолка)
- Валидация целочисленных параметров (epoch, fee)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Вычитание комиссий никогда не даёт отрицательного значения
2. Никакого wraparound: результат всегда в [floor, +inf)
3. Все операции детерминированы и воспроизводимы
"""

from typing import Final

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Нижняя граница комиссии
FEE_FLOOR: Final[int] = 0

# Первая допустимая epoch
EPOCH_MIN: Final[int] = 0


# =============================================================================
# SATURATING АРИФМЕТИКА
# =============================================================================


def saturating_sub(value: int, amount: int, floor: int = FEE_FLOOR) -> int:
    """
    Вычитание с насыщением на нижней границе.

    Args:
        value: Уменьшаемое
        amount: Вычитаемое (>= 0)
        floor: Нижняя граница результата (default: FEE_FLOOR)

    Returns:
        max(value - amount, floor)

    Examples:
        >>> saturating_sub(3000, 300)
        2700
        >>> saturating_sub(100, 300)
        0
        >>> saturating_sub(100, 300, floor=50)
        50
    """
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")

    return max(value - amount, floor)


def saturating_add(value: int, amount: int, ceiling: int) -> int:
    """
    Сложение с насыщением на верхней границе.

    Args:
        value: Слагаемое
        amount: Прибавляемое (>= 0)
        ceiling: Верхняя граница результата

    Returns:
        min(value + amount, ceiling)
    """
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")

    return min(value + amount, ceiling)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_non_negative_int(value: int, name: str) -> None:
    """
    Проверка, что значение — неотрицательное целое.

    Raises:
        TypeError: Если значение не int (bool не допускается)
        ValueError: Если значение отрицательное
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_epoch(epoch: int) -> None:
    """Проверка epoch: целое >= EPOCH_MIN."""
    validate_non_negative_int(epoch, "epoch")


def validate_indicator(value: int) -> None:
    """Проверка price indicator: любое знаковое целое."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"indicator must be an int, got {type(value).__name__}")
