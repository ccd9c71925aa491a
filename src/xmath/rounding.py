"""
Exact Rounding — Точные примитивы округления

Модуль обеспечивает округление без скрытых ошибок над рациональными
числами произвольной точности (fractions.Fraction) и IEEE-754 double:
- floor / ceil / round для Fraction и float
- Деление с усечением к нулю и тегом точности (Accuracy)
- Конверсии в int64 / uint64 с насыщением и тегом направления
- Точные конверсии float <-> Fraction
- Округление float до p разрядов в заданном основании

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Никаких промежуточных float-вычислений: половина для round — это
   точная Fraction(1, 2), а не литерал 0.5
2. Ничья (ровно .5) всегда округляется от нуля, независимо от знака
3. Остаток деления с усечением имеет знак числителя
4. Тег Accuracy говорит, больше (ROUNDED_UP), меньше (ROUNDED_DOWN) или
   равно (EXACT) возвращённое значение истинному
"""

import math
from enum import Enum
from fractions import Fraction
from typing import Final, Optional

# =============================================================================
# ГРАНИЦЫ ЦЕЛЫХ ФИКСИРОВАННОЙ ШИРИНЫ
# =============================================================================

INT64_MIN: Final[int] = -(1 << 63)
INT64_MAX: Final[int] = (1 << 63) - 1
UINT64_MAX: Final[int] = (1 << 64) - 1

_HALF: Final[Fraction] = Fraction(1, 2)


# =============================================================================
# ACCURACY
# =============================================================================


class Accuracy(int, Enum):
    """
    Тег точности результата.

    Описывает возвращённое значение относительно истинного:
    ROUNDED_DOWN < истинного, EXACT == истинному, ROUNDED_UP > истинного.
    """

    ROUNDED_DOWN = -1
    EXACT = 0
    ROUNDED_UP = 1


# =============================================================================
# ДЕЛЕНИЕ С УСЕЧЕНИЕМ
# =============================================================================


def truncating_divide(numerator: int, denominator: int) -> tuple[int, int, Accuracy]:
    """
    Целочисленное деление с усечением к нулю.

    Args:
        numerator: Числитель
        denominator: Знаменатель (не ноль, любой знак)

    Returns:
        (quotient, remainder, accuracy):
            - quotient: частное, усечённое к нулю
            - remainder: numerator - quotient * denominator (знак числителя)
            - accuracy: положение quotient относительно numerator/denominator

    Raises:
        ZeroDivisionError: Если denominator == 0

    Examples:
        >>> truncating_divide(24, 10)
        (2, 4, <Accuracy.ROUNDED_DOWN: -1>)
        >>> truncating_divide(-65, 10)
        (-6, -5, <Accuracy.ROUNDED_UP: 1>)
        >>> truncating_divide(65, -10)
        (-6, 5, <Accuracy.ROUNDED_UP: 1>)
        >>> truncating_divide(-90, 10)
        (-9, 0, <Accuracy.EXACT: 0>)
    """
    if denominator == 0:
        raise ZeroDivisionError("truncating_divide: division by zero")

    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        quotient = -quotient
    remainder = numerator - quotient * denominator

    if remainder == 0:
        return quotient, remainder, Accuracy.EXACT

    # numerator/denominator - quotient == remainder/denominator
    if (remainder > 0) == (denominator > 0):
        return quotient, remainder, Accuracy.ROUNDED_DOWN
    return quotient, remainder, Accuracy.ROUNDED_UP


# =============================================================================
# FLOOR / CEIL / ROUND ДЛЯ FRACTION
# =============================================================================


def floor_rat(x: Fraction) -> int:
    """Наибольшее целое <= x."""
    quotient, remainder, _ = truncating_divide(x.numerator, x.denominator)
    if remainder < 0:
        quotient -= 1
    return quotient


def ceil_rat(x: Fraction) -> int:
    """Наименьшее целое >= x."""
    quotient, remainder, _ = truncating_divide(x.numerator, x.denominator)
    if remainder > 0:
        quotient += 1
    return quotient


def round_rat(x: Fraction) -> int:
    """
    Ближайшее целое, ничья округляется от нуля.

    round(x) = floor(x + 1/2) для x >= 0, -floor(-x + 1/2) для x < 0.

    Examples:
        >>> round_rat(Fraction(5, 2))
        3
        >>> round_rat(Fraction(-5, 2))
        -3
        >>> round_rat(Fraction(-12, 5))
        -2
    """
    if x < 0:
        return -floor_rat(-x + _HALF)
    return floor_rat(x + _HALF)


def int_rat(x: Fraction) -> tuple[int, Accuracy]:
    """
    Усечение x к нулю.

    Returns:
        (n, accuracy): EXACT если x целое, иначе ROUNDED_DOWN / ROUNDED_UP
    """
    quotient, _, accuracy = truncating_divide(x.numerator, x.denominator)
    return quotient, accuracy


def int64_rat(x: Fraction) -> tuple[int, Accuracy]:
    """
    Усечение x к нулю с насыщением до int64.

    Returns:
        (n, accuracy) как у int_rat, если INT64_MIN <= x <= INT64_MAX;
        (INT64_MIN, ROUNDED_UP) для x < INT64_MIN;
        (INT64_MAX, ROUNDED_DOWN) для x > INT64_MAX.
    """
    n, accuracy = int_rat(x)
    if n < INT64_MIN:
        return INT64_MIN, Accuracy.ROUNDED_UP
    if n > INT64_MAX:
        return INT64_MAX, Accuracy.ROUNDED_DOWN
    return n, accuracy


def uint64_rat(x: Fraction) -> tuple[int, Accuracy]:
    """
    Усечение x к нулю с насыщением до uint64.

    Returns:
        (n, accuracy) как у int_rat, если 0 <= x <= UINT64_MAX;
        (0, ROUNDED_UP) для x < 0;
        (UINT64_MAX, ROUNDED_DOWN) для x > UINT64_MAX.
    """
    n, accuracy = int_rat(x)
    if n < 0:
        return 0, Accuracy.ROUNDED_UP
    if n > UINT64_MAX:
        return UINT64_MAX, Accuracy.ROUNDED_DOWN
    # -1 < x < 0 усекается в 0, который больше x
    return n, accuracy


# =============================================================================
# FLOAT <-> FRACTION
# =============================================================================


def float_to_rat(x: float) -> Fraction:
    """
    Точная конверсия конечного float в Fraction.

    Любой конечный double — двоично-рациональное число, поэтому потерь нет.

    Raises:
        ValueError: Если x — NaN или бесконечность
    """
    if not math.isfinite(x):
        raise ValueError(f"float_to_rat: non-finite value {x}")
    return Fraction(x)


def rat_to_float(x: Fraction) -> tuple[float, Accuracy]:
    """
    Ближайший к x double (round-half-even по IEEE-754) с тегом точности.

    При переполнении возвращается бесконечность соответствующего знака.

    Examples:
        >>> rat_to_float(Fraction(1, 4))
        (0.25, <Accuracy.EXACT: 0>)
        >>> rat_to_float(Fraction(1, 10))
        (0.1, <Accuracy.ROUNDED_UP: 1>)
    """
    try:
        # int / int в CPython корректно округляется
        result = x.numerator / x.denominator
    except OverflowError:
        result = math.inf if x > 0 else -math.inf

    if math.isinf(result):
        return result, Accuracy.ROUNDED_UP if result > 0 else Accuracy.ROUNDED_DOWN

    exact = Fraction(result)
    if exact == x:
        return result, Accuracy.EXACT
    if exact > x:
        return result, Accuracy.ROUNDED_UP
    return result, Accuracy.ROUNDED_DOWN


# =============================================================================
# FLOOR / CEIL / ROUND ДЛЯ FLOAT
# =============================================================================


def floor_float(x: float) -> Optional[int]:
    """
    Наибольшее целое <= x.

    Returns:
        Целое или None для NaN/Inf (операция неприменима)
    """
    if not math.isfinite(x):
        return None
    return floor_rat(Fraction(x))


def ceil_float(x: float) -> Optional[int]:
    """Наименьшее целое >= x; None для NaN/Inf."""
    if not math.isfinite(x):
        return None
    return ceil_rat(Fraction(x))


def round_float(x: float) -> Optional[int]:
    """
    Ближайшее целое с округлением ничьей от нуля; None для NaN/Inf.

    Examples:
        >>> round_float(2.5)
        3
        >>> round_float(-2.5)
        -3
        >>> round_float(-2.4)
        -2
    """
    if not math.isfinite(x):
        return None
    return round_rat(Fraction(x))


# =============================================================================
# ОКРУГЛЕНИЕ ДО P РАЗРЯДОВ
# =============================================================================


def _scaled_float(x: float, p: int, base: int, rounder) -> float:
    if not math.isfinite(x):
        return x
    k = Fraction(base) ** p
    result, _ = rat_to_float(Fraction(rounder(Fraction(x) * k)) / k)
    return result


def floor_p(x: float, p: int, base: int = 10) -> float:
    """
    Наибольшее значение <= x с p разрядами после точки в основании base.

    Вычисление точное; единственное округление — финальная конверсия
    в ближайший double. NaN/Inf возвращаются без изменений.

    Examples:
        >>> floor_p(3.1416, 3)
        3.141
        >>> floor_p(-3.1416, 2)
        -3.15
    """
    return _scaled_float(x, p, base, floor_rat)


def ceil_p(x: float, p: int, base: int = 10) -> float:
    """
    Наименьшее значение >= x с p разрядами после точки в основании base.

    Examples:
        >>> ceil_p(3.1416, 3)
        3.142
        >>> ceil_p(-3.1416, 2)
        -3.14
    """
    return _scaled_float(x, p, base, ceil_rat)


def round_p(x: float, p: int, base: int = 10) -> float:
    """
    Ближайшее значение с p разрядами после точки, ничья от нуля.

    Examples:
        >>> round_p(3.1416, 2)
        3.14
        >>> round_p(-3.1416, 3)
        -3.142
        >>> round_p(0.125, 2, base=2)
        0.25
    """
    return _scaled_float(x, p, base, round_rat)
