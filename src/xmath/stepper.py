"""
Stepper — Дискретная равномерная сетка над числовым диапазоном

Stepper отображает диапазон [min, max] (или полуоткрытый/неограниченный
диапазон) на сетку точно представимых значений с шагом step и выполняет
двустороннюю конверсию индекс <-> значение.

Конструирование (все проверки выполняются один раз):
1. base в [2, 36]                                  -> InvalidBaseError
2. step конечен, > 0, без потерь на сетке           -> STEP_OVERFLOW
3. max без потерь на сетке, соседний double близко   -> MAX_OVERFLOW
4. min симметрично                                  -> MIN_OVERFLOW
5. max и min — бесконечности одного знака           -> RANGE_OVERFLOW
6. max < min                                        -> UNORDERED_MAX_MIN
7. (max - min) / step не целое                      -> RANGE_OVERFLOW

Начало сетки (anchor): min, если конечен; иначе max, если конечен; иначе 0.
Проверка границ в step/normalize выполняется для каждой конечной стороны.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждая точка сетки внутри конечного диапазона точно переводится в double
   и обратно (иначе StepperInvariantError, это дефект валидации). Для
   неограниченного диапазона точки вдали от начала могут терять точность
   double, это сообщается тем же StepperInvariantError
2. Выход за границу не является исключением: StepResult содержит граничное
   значение и вид ошибки
3. Все вычисления: точная рациональная арифметика Number
"""

import logging
import math
import operator
from fractions import Fraction
from typing import NamedTuple, NoReturn, Optional

from src.xmath.errors import ErrorKind, StepperError, StepperInvariantError
from src.xmath.number import Number, check_base
from src.xmath.rounding import (
    INT64_MAX,
    INT64_MIN,
    Accuracy,
    int64_rat,
    int_rat,
    round_rat,
)

logger = logging.getLogger(__name__)


# =============================================================================
# STEP RESULT
# =============================================================================


class StepResult(NamedTuple):
    """
    Результат запроса к Stepper.

    Attributes:
        value: Значение сетки; при выходе за границу — граница (для step)
        error: None при успехе, иначе MAX_EXCEEDED / MIN_EXCEEDED
    """

    value: float
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> float:
        """
        Значение или исключение.

        Raises:
            StepperError: Если запрос вышел за границу диапазона
        """
        if self.error is not None:
            raise StepperError(self.error, value=self.value)
        return self.value


# =============================================================================
# STEPPER
# =============================================================================


class Stepper:
    """
    Сетка значений с шагом step в диапазоне [min_value, max_value].

    После создания объект неизменяем; step/normalize безопасно вызывать
    из нескольких потоков.

    Args:
        precision: Число разрядов после точки в основании base
        base: Основание системы счисления [2, 36]
        step: Шаг сетки (> 0)
        max_value: Верхняя граница (+inf: неограничен сверху)
        min_value: Нижняя граница (-inf: неограничен снизу)

    Raises:
        InvalidBaseError: Если base вне [2, 36]
        StepperError: При невалидной комбинации step/max/min

    Examples:
        >>> s = Stepper(2, 10, 0.1, 3.01, 2.31)
        >>> s.count
        8
        >>> s.step(7)
        StepResult(value=3.01, error=None)
        >>> s.step(8)
        StepResult(value=3.01, error=<ErrorKind.MAX_EXCEEDED: 'max exceeded'>)
    """

    def __init__(
        self,
        precision: int,
        base: int,
        step: float,
        max_value: float = math.inf,
        min_value: float = -math.inf,
    ):
        check_base(base)
        self._prec = int(precision)
        self._base = base
        self._unit = Fraction(base) ** -self._prec

        step = float(step)
        max_value = float(max_value)
        min_value = float(min_value)

        self._step = self._convert_step(step)
        self._max = self._convert_bound(max_value, ErrorKind.MAX_OVERFLOW, upward=True)
        self._min = self._convert_bound(min_value, ErrorKind.MIN_OVERFLOW, upward=False)

        if self._max.is_inf() and self._min.is_inf() and self._max.signbit() == self._min.signbit():
            self._fail(ErrorKind.RANGE_OVERFLOW, "both bounds are infinite with the same sign")

        interval = self._new().sub(self._max, self._min)
        if interval.is_inf():
            if interval.signbit():
                self._fail(ErrorKind.UNORDERED_MAX_MIN, f"max {max_value!r} < min {min_value!r}")
            # count 0 означает неограниченный диапазон
            self._count = 0
        else:
            ratio = interval.rat() / self._step.rat()
            if ratio < 0:
                self._fail(ErrorKind.UNORDERED_MAX_MIN, f"max {max_value!r} < min {min_value!r}")
            steps, accuracy = int_rat(ratio)
            if accuracy != Accuracy.EXACT:
                self._fail(
                    ErrorKind.RANGE_OVERFLOW,
                    f"range {max_value!r} - {min_value!r} is not a multiple of step {step!r}",
                )
            self._count = steps + 1

        if self._min.is_finite():
            self._anchor = self._new().set(self._min)
        elif self._max.is_finite():
            self._anchor = self._new().set(self._max)
        else:
            self._anchor = self._new()

        self._step_float = step
        self._max_float = max_value
        self._min_float = min_value

        logger.debug(
            "Stepper grid accepted: precision=%d base=%d step=%r max=%r min=%r count=%d",
            self._prec,
            self._base,
            step,
            max_value,
            min_value,
            self._count,
        )

    # -------------------------------------------------------------------------
    # Валидация
    # -------------------------------------------------------------------------

    def _new(self) -> Number:
        return Number(self._prec, self._base)

    def _fail(self, kind: ErrorKind, reason: str) -> NoReturn:
        logger.debug(
            "Stepper rejected (precision=%d base=%d): %s: %s",
            self._prec,
            self._base,
            kind.value,
            reason,
        )
        raise StepperError(kind, message=f"{kind.value}: {reason}")

    def _convert_step(self, step: float) -> Number:
        if not math.isfinite(step) or step <= 0:
            self._fail(ErrorKind.STEP_OVERFLOW, f"step {step!r} must be finite and positive")
        number = self._new().set_float64(step)
        if number.to_float64()[0] != step:
            self._fail(
                ErrorKind.STEP_OVERFLOW,
                f"step {step!r} is not representable with precision {self._prec} base {self._base}",
            )
        return number

    def _convert_bound(self, bound: float, kind: ErrorKind, upward: bool) -> Number:
        if math.isnan(bound):
            self._fail(kind, "bound is NaN")
        number = self._new().set_float64(bound)
        if math.isinf(bound):
            return number
        if number.to_float64()[0] != bound:
            self._fail(
                kind,
                f"{bound!r} is not representable with precision {self._prec} base {self._base}",
            )

        neighbour = math.nextafter(bound, math.inf if upward else -math.inf)
        if not math.isfinite(neighbour):
            self._fail(kind, f"{bound!r} has no finite neighbour")
        gap = abs(Fraction(neighbour) - Fraction(bound))
        step = self._step.rat()
        if gap >= step:
            self._fail(kind, f"float spacing {float(gap)!r} at {bound!r} is not below step")
        # Точки сетки у границы переживают round-trip через double, если
        # шаг double меньше единицы сетки или все точки кратны шагу double
        if gap >= self._unit and _rat_gcd(number.rat(), step) % gap != 0:
            self._fail(
                kind,
                f"float spacing {float(gap)!r} at {bound!r} is too coarse for the grid",
            )
        return number

    # -------------------------------------------------------------------------
    # Свойства
    # -------------------------------------------------------------------------

    @property
    def precision(self) -> int:
        return self._prec

    @property
    def base(self) -> int:
        return self._base

    @property
    def step_size(self) -> float:
        return self._step_float

    @property
    def max_value(self) -> float:
        return self._max_float

    @property
    def min_value(self) -> float:
        return self._min_float

    @property
    def count(self) -> int:
        """Число точек конечного диапазона (включая обе границы); 0 для неограниченного."""
        return self._count

    @property
    def bounded(self) -> bool:
        return self._count > 0

    def count64(self) -> tuple[int, Accuracy]:
        """count с насыщением до int64."""
        return int64_rat(Fraction(self._count))

    # -------------------------------------------------------------------------
    # Запросы
    # -------------------------------------------------------------------------

    def step(self, index: int) -> StepResult:
        """
        Значение сетки с индексом index.

        Для конечного диапазона допустимы индексы [0, count); вне диапазона
        возвращается граница с MIN_EXCEEDED / MAX_EXCEEDED. Для полуоткрытого
        диапазона проверяется только конечная сторона.

        Raises:
            TypeError: Если index не целое
            StepperInvariantError: Точка сетки не представима точно как float
        """
        index = operator.index(index)

        if self._count > 0:
            if index < 0:
                return StepResult(self._min_float, ErrorKind.MIN_EXCEEDED)
            if index >= self._count:
                return StepResult(self._max_float, ErrorKind.MAX_EXCEEDED)
            return StepResult(self._to_float(self._point(index)))

        point = self._point(index)
        if self._max.is_finite() and point.cmp(self._max) > 0:
            return StepResult(self._max_float, ErrorKind.MAX_EXCEEDED)
        if self._min.is_finite() and point.cmp(self._min) < 0:
            return StepResult(self._min_float, ErrorKind.MIN_EXCEEDED)
        return StepResult(self._to_float(point))

    def step64(self, index: int) -> StepResult:
        """
        step для индекса в диапазоне int64.

        Raises:
            OverflowError: Если index вне int64
        """
        index = operator.index(index)
        if index < INT64_MIN or index > INT64_MAX:
            raise OverflowError(f"index out of int64 range: {index}")
        return self.step(index)

    def normalize(self, value: float) -> StepResult:
        """
        Ближайшая к value точка сетки (ничья — от нуля по индексу).

        NaN возвращается без изменений и без ошибки. Бесконечность
        возвращается без изменений; если в её сторону диапазон ограничен,
        с MAX_EXCEEDED / MIN_EXCEEDED.

        Raises:
            StepperInvariantError: Ближайшая точка не представима точно как float

        Examples:
            >>> s = Stepper(2, 10, 0.25, -5.0, -7.0)
            >>> s.normalize(-6.375)
            StepResult(value=-6.25, error=None)
        """
        value = float(value)
        if math.isnan(value):
            return StepResult(value)
        if math.isinf(value):
            if value > 0 and self._max.is_finite():
                return StepResult(value, ErrorKind.MAX_EXCEEDED)
            if value < 0 and self._min.is_finite():
                return StepResult(value, ErrorKind.MIN_EXCEEDED)
            return StepResult(value)

        raw_index = (Fraction(value) - self._anchor.rat()) / self._step.rat()
        return self.step(round_rat(raw_index))

    # -------------------------------------------------------------------------
    # Внутреннее
    # -------------------------------------------------------------------------

    def _point(self, index: int) -> Number:
        point = self._new().set_int(index)
        point.mul(point, self._step)
        return point.add(point, self._anchor)

    def _to_float(self, point: Number) -> float:
        result, _ = point.to_float64()
        if math.isfinite(result) and self._new().set_float64(result).cmp(point) == 0:
            return result
        logger.error(
            "Stepper invariant violated: grid point %s has no exact float (step=%r max=%r min=%r)",
            point,
            self._step_float,
            self._max_float,
            self._min_float,
        )
        raise StepperInvariantError(f"grid point {point} is not exactly representable as float")

    def __repr__(self) -> str:
        return (
            f"Stepper(precision={self._prec}, base={self._base}, step={self._step_float!r}, "
            f"max_value={self._max_float!r}, min_value={self._min_float!r})"
        )


def _rat_gcd(a: Fraction, b: Fraction) -> Fraction:
    """Наибольшее рациональное r, для которого a/r и b/r — целые."""
    denominator = a.denominator * b.denominator
    return Fraction(
        math.gcd(a.numerator * b.denominator, b.numerator * a.denominator),
        denominator,
    )
