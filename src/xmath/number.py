"""
Number — Рациональное число фиксированной точности

Значение хранится точно (fractions.Fraction) и после каждой изменяющей
операции перенормализуется к сетке base^-precision с округлением ничьей
от нуля:

    value = round_half_away_from_zero(value * k) / k,   k = base^precision

k — точная Fraction (precision может быть отрицательной: тогда значения
кратны base^|precision|).

Специальные значения (+Inf, -Inf, NaN) ведут себя как в IEEE-754:
- x / 0 = ±Inf, 0 / 0 = NaN, Inf - Inf = NaN, 0 * Inf = NaN
- sqrt(отрицательного) = NaN
- Перенормализация бесконечности и NaN не выполняется

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Конечное значение всегда кратно base^-precision
2. Перенормализация идемпотентна
3. set_float64(d).to_float64() == (d, ...) для любого d, лежащего на сетке
4. text() / set_string() — точный обратимый формат в основании base
5. Сравнение с NaN — нарушение контракта (ValueError), а не молчаливый ответ
"""

import math
from fractions import Fraction
from typing import Any, Final, Optional, Union

from src.xmath.contracts import validate_number
from src.xmath.errors import InvalidBaseError
from src.xmath.rounding import (
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    Accuracy,
    int64_rat,
    int_rat,
    rat_to_float,
    round_rat,
    uint64_rat,
)

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

MIN_BASE: Final[int] = 2
MAX_BASE: Final[int] = 36

DEFAULT_PRECISION: Final[int] = 0
DEFAULT_BASE: Final[int] = 10

DIGITS: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"

_POS_INF: Final[float] = math.inf
_NEG_INF: Final[float] = -math.inf


def check_base(base: int) -> None:
    """
    Проверка основания системы счисления.

    Raises:
        InvalidBaseError: Если base вне [MIN_BASE, MAX_BASE]
    """
    if isinstance(base, bool) or not isinstance(base, int):
        raise InvalidBaseError(base)
    if base < MIN_BASE or base > MAX_BASE:
        raise InvalidBaseError(base)


# =============================================================================
# NUMBER
# =============================================================================


class Number:
    """
    Число фиксированной точности и основания.

    Precision и base задаются при создании и не меняются. Значения по
    умолчанию — precision=0, base=10 (десятичные целые).

    Операции в стиле z.op(x, y) записывают результат в z и возвращают z.
    Бинарные операторы Python (+, -, *, /) возвращают новый Number в
    формате левого операнда. Смешивать операнды разной точности/основания
    в одной операции нельзя: результат всегда приводится к формату z.

    Examples:
        >>> n = Number.decimal(1)
        >>> str(n.set_float64(0.33 * 5))
        '1.7'
        >>> str(Number().set_float64(2.5))
        '3'
    """

    __slots__ = ("_prec", "_base", "_k", "_value", "_special")

    def __init__(self, precision: int = DEFAULT_PRECISION, base: int = DEFAULT_BASE):
        check_base(base)
        self._prec = int(precision)
        self._base = base
        self._k = Fraction(base) ** self._prec
        self._value = Fraction(0)
        # None для конечных значений, иначе inf / -inf / nan
        self._special: Optional[float] = None

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def binary(cls, precision: int) -> "Number":
        """Number с основанием 2."""
        return cls(precision, 2)

    @classmethod
    def octal(cls, precision: int) -> "Number":
        """Number с основанием 8."""
        return cls(precision, 8)

    @classmethod
    def decimal(cls, precision: int) -> "Number":
        """Number с основанием 10."""
        return cls(precision, 10)

    @classmethod
    def hexadecimal(cls, precision: int) -> "Number":
        """Number с основанием 16."""
        return cls(precision, 16)

    def new(self) -> "Number":
        """Новый нулевой Number того же формата."""
        return type(self)(self._prec, self._base)

    # -------------------------------------------------------------------------
    # Свойства
    # -------------------------------------------------------------------------

    @property
    def precision(self) -> int:
        return self._prec

    @property
    def base(self) -> int:
        return self._base

    def rat(self) -> Optional[Fraction]:
        """Точное значение; None для Inf/NaN."""
        if self._special is not None:
            return None
        return self._value

    def is_inf(self) -> bool:
        return self._special is not None and math.isinf(self._special)

    def is_nan(self) -> bool:
        return self._special is not None and math.isnan(self._special)

    def is_finite(self) -> bool:
        return self._special is None

    def is_int(self) -> bool:
        return self._special is None and self._value.denominator == 1

    def sign(self) -> int:
        """
        -1, 0 или +1.

        Raises:
            ValueError: Для NaN
        """
        if self._special is not None:
            if math.isnan(self._special):
                raise ValueError("sign of NaN")
            return 1 if self._special > 0 else -1
        if self._value > 0:
            return 1
        if self._value < 0:
            return -1
        return 0

    def signbit(self) -> bool:
        """True для отрицательных значений и -Inf."""
        if self._special is not None:
            return math.copysign(1.0, self._special) < 0
        return self._value < 0

    # -------------------------------------------------------------------------
    # Перенормализация
    # -------------------------------------------------------------------------

    def _round(self) -> "Number":
        if self._special is not None:
            return self
        self._value = Fraction(round_rat(self._value * self._k)) / self._k
        return self

    def _set_special(self, value: float) -> "Number":
        self._special = value
        self._value = Fraction(0)
        return self

    def _set_finite(self, value: Fraction) -> "Number":
        self._special = None
        self._value = value
        return self._round()

    def _proxy(self) -> float:
        # Для операций со специальными значениями важен только знак конечного
        if self._special is not None:
            return self._special
        return float(self.sign())

    # -------------------------------------------------------------------------
    # Установка значения
    # -------------------------------------------------------------------------

    def set(self, x: "Number") -> "Number":
        """z = x с перенормализацией к формату z."""
        if x._special is not None:
            return self._set_special(x._special)
        return self._set_finite(x._value)

    def copy(self, x: "Number") -> "Number":
        """Синоним set."""
        return self.set(x)

    def set_float64(self, x: float) -> "Number":
        """Точное присваивание double с последующей перенормализацией."""
        x = float(x)
        if not math.isfinite(x):
            return self._set_special(x)
        return self._set_finite(Fraction(x))

    def set_int(self, x: int) -> "Number":
        return self._set_finite(Fraction(int(x)))

    def set_int64(self, x: int) -> "Number":
        """
        Raises:
            OverflowError: Если x вне диапазона int64
        """
        if x < INT64_MIN or x > INT64_MAX:
            raise OverflowError(f"value out of int64 range: {x}")
        return self.set_int(x)

    def set_uint64(self, x: int) -> "Number":
        """
        Raises:
            OverflowError: Если x вне диапазона uint64
        """
        if x < 0 or x > UINT64_MAX:
            raise OverflowError(f"value out of uint64 range: {x}")
        return self.set_int(x)

    def set_rat(self, x: Fraction) -> "Number":
        return self._set_finite(Fraction(x))

    def set_inf(self, signbit: bool) -> "Number":
        """+Inf если signbit == False, иначе -Inf."""
        return self._set_special(_NEG_INF if signbit else _POS_INF)

    def set_nan(self) -> "Number":
        return self._set_special(math.nan)

    def set_string(self, text: str) -> "Number":
        """
        Разбор текста в основании числа.

        Формат: [+-]digits[.digits], "Inf", "+Inf", "-Inf", "NaN"
        (регистр не важен). Цифры 0-9a-z.

        Raises:
            ValueError: Если текст не является числом в основании base
        """
        s = text.strip()
        lowered = s.lower()
        if lowered in ("inf", "+inf", "infinity", "+infinity"):
            return self.set_inf(False)
        if lowered in ("-inf", "-infinity"):
            return self.set_inf(True)
        if lowered == "nan":
            return self.set_nan()

        negative = False
        body = lowered
        if body[:1] in ("+", "-"):
            negative = body[0] == "-"
            body = body[1:]

        int_part, _, frac_part = body.partition(".")
        if not int_part and not frac_part:
            raise ValueError(f"invalid number text for base {self._base}: {text!r}")
        if "_" in body or any(
            ch not in DIGITS[: self._base] for ch in int_part + frac_part
        ):
            raise ValueError(f"invalid number text for base {self._base}: {text!r}")

        value = Fraction(int(int_part, self._base) if int_part else 0)
        if frac_part:
            value += Fraction(int(frac_part, self._base), self._base ** len(frac_part))
        if negative:
            value = -value
        return self._set_finite(value)

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def add(self, x: "Number", y: "Number") -> "Number":
        """z = x + y"""
        if x._special is not None or y._special is not None:
            return self._set_special(x._proxy() + y._proxy())
        return self._set_finite(x._value + y._value)

    def sub(self, x: "Number", y: "Number") -> "Number":
        """z = x - y"""
        if x._special is not None or y._special is not None:
            return self._set_special(x._proxy() - y._proxy())
        return self._set_finite(x._value - y._value)

    def mul(self, x: "Number", y: "Number") -> "Number":
        """z = x * y"""
        if x._special is not None or y._special is not None:
            return self._set_special(x._proxy() * y._proxy())
        return self._set_finite(x._value * y._value)

    def quo(self, x: "Number", y: "Number") -> "Number":
        """
        z = x / y

        Деление на точный ноль даёт бесконечность со знаком делимого,
        0 / 0 и Inf / Inf дают NaN.
        """
        if x.is_nan() or y.is_nan():
            return self.set_nan()
        if x.is_inf():
            if y.is_inf():
                return self.set_nan()
            negative = x.signbit() != y.signbit()
            return self.set_inf(negative)
        if y.is_inf():
            return self._set_finite(Fraction(0))
        if y._value == 0:
            if x._value == 0:
                return self.set_nan()
            return self.set_inf(x._value < 0)
        return self._set_finite(x._value / y._value)

    def neg(self, x: "Number") -> "Number":
        """z = -x"""
        if x._special is not None:
            return self._set_special(-x._special)
        return self._set_finite(-x._value)

    def abs(self, x: "Number") -> "Number":
        """z = |x|"""
        if x._special is not None:
            return self._set_special(abs(x._special))
        return self._set_finite(abs(x._value))

    def sqrt(self, x: "Number") -> "Number":
        """
        z = sqrt(x), корректно округлённый к сетке z.

        Корень иррационален в общем случае, поэтому вычисляется сразу
        округлённое значение round(sqrt(x) * k) = round(sqrt(x * k^2))
        через целочисленный isqrt.
        """
        if x._special is not None:
            if x._special > 0:
                return self._set_special(x._special)
            return self.set_nan()
        if x._value < 0:
            return self.set_nan()

        scaled = x._value * self._k * self._k
        n = math.isqrt(scaled.numerator // scaled.denominator)
        # sqrt(scaled) >= n + 1/2  <=>  4 * scaled >= (2n + 1)^2
        if 4 * scaled >= (2 * n + 1) ** 2:
            n += 1
        return self._set_finite(Fraction(n) / self._k)

    # -------------------------------------------------------------------------
    # Сравнение
    # -------------------------------------------------------------------------

    def _order_key(self) -> tuple[int, Fraction]:
        if self._special is not None:
            if math.isnan(self._special):
                raise ValueError("NaN is not comparable")
            return (1 if self._special > 0 else -1, Fraction(0))
        return (0, self._value)

    def cmp(self, y: "Number") -> int:
        """
        -1 если x < y, 0 если x == y, +1 если x > y.

        Raises:
            ValueError: Если x или y — NaN
        """
        a, b = self._order_key(), y._order_key()
        if a < b:
            return -1
        if a > b:
            return 1
        return 0

    # -------------------------------------------------------------------------
    # Конверсии
    # -------------------------------------------------------------------------

    def to_float64(self) -> tuple[float, Accuracy]:
        """Ближайший double и тег точности."""
        if self._special is not None:
            return self._special, Accuracy.EXACT
        return rat_to_float(self._value)

    def to_int(self) -> tuple[Optional[int], Accuracy]:
        """
        Усечение к нулю без ограничения разрядности.

        Returns:
            (n, accuracy); для ±Inf — (None, ROUNDED_DOWN / ROUNDED_UP)

        Raises:
            ValueError: Для NaN
        """
        if self._special is not None:
            if math.isnan(self._special):
                raise ValueError("cannot convert NaN to int")
            if self._special > 0:
                return None, Accuracy.ROUNDED_DOWN
            return None, Accuracy.ROUNDED_UP
        return int_rat(self._value)

    def to_int64(self) -> tuple[int, Accuracy]:
        """
        Усечение к нулю с насыщением до int64.

        Raises:
            ValueError: Для NaN
        """
        if self._special is not None:
            if math.isnan(self._special):
                raise ValueError("cannot convert NaN to int64")
            if self._special > 0:
                return INT64_MAX, Accuracy.ROUNDED_DOWN
            return INT64_MIN, Accuracy.ROUNDED_UP
        return int64_rat(self._value)

    def to_uint64(self) -> tuple[int, Accuracy]:
        """
        Усечение к нулю с насыщением до uint64.

        Raises:
            ValueError: Для NaN
        """
        if self._special is not None:
            if math.isnan(self._special):
                raise ValueError("cannot convert NaN to uint64")
            if self._special > 0:
                return UINT64_MAX, Accuracy.ROUNDED_DOWN
            return 0, Accuracy.ROUNDED_UP
        return uint64_rat(self._value)

    # -------------------------------------------------------------------------
    # Текст
    # -------------------------------------------------------------------------

    def text(self, fixed: bool = False) -> str:
        """
        Точное текстовое представление в основании числа.

        Args:
            fixed: Если True, выводятся все precision разрядов дробной части
                (без удаления хвостовых нулей)

        Examples:
            >>> Number.decimal(2).set_float64(3.1).text()
            '3.1'
            >>> Number.decimal(2).set_float64(3.1).text(fixed=True)
            '3.10'
            >>> Number.hexadecimal(1).set_float64(-2.5).text()
            '-2.8'
        """
        if self._special is not None:
            if math.isnan(self._special):
                return "NaN"
            return "+Inf" if self._special > 0 else "-Inf"

        frac_digits = max(self._prec, 0)
        scale = self._base**frac_digits
        scaled = abs(self._value) * scale
        # Значение на сетке, поэтому scaled целое
        units = scaled.numerator // scaled.denominator
        int_units, frac_units = divmod(units, scale)

        text = _int_to_base(int_units, self._base)
        if frac_digits > 0:
            frac_text = _int_to_base(frac_units, self._base).rjust(frac_digits, "0")
            if not fixed:
                frac_text = frac_text.rstrip("0")
            if frac_text:
                text = f"{text}.{frac_text}"
        if self._value < 0:
            text = f"-{text}"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Сериализация по контракту number.json."""
        return {"precision": self._prec, "base": self._base, "value": self.text()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Number":
        """
        Десериализация по контракту number.json.

        Raises:
            jsonschema.ValidationError: Если data не соответствует контракту
            ValueError: Если value не разбирается в заданном основании
        """
        validate_number(data)
        return cls(data["precision"], data["base"]).set_string(data["value"])

    # -------------------------------------------------------------------------
    # Протокол Python
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return self.text()

    def __repr__(self) -> str:
        return f"Number(precision={self._prec}, base={self._base}, value={self.text()!r})"

    def __float__(self) -> float:
        return self.to_float64()[0]

    def _coerce(self, other: Union["Number", int, float, Fraction]) -> "Number":
        if isinstance(other, Number):
            return other
        if isinstance(other, float):
            return self.new().set_float64(other)
        if isinstance(other, (int, Fraction)):
            return self.new().set_rat(Fraction(other))
        return NotImplemented

    def __add__(self, other):
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.new().add(self, y)

    def __sub__(self, other):
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.new().sub(self, y)

    def __mul__(self, other):
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.new().mul(self, y)

    def __truediv__(self, other):
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.new().quo(self, y)

    def __neg__(self) -> "Number":
        return self.new().neg(self)

    def __abs__(self) -> "Number":
        return self.new().abs(self)

    def __eq__(self, other) -> bool:
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        if self.is_nan() or y.is_nan():
            return False
        return self.cmp(y) == 0

    def __lt__(self, other) -> bool:
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.cmp(y) < 0

    def __le__(self, other) -> bool:
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.cmp(y) <= 0

    def __gt__(self, other) -> bool:
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.cmp(y) > 0

    def __ge__(self, other) -> bool:
        y = self._coerce(other)
        if y is NotImplemented:
            return NotImplemented
        return self.cmp(y) >= 0

    # Изменяемый объект
    __hash__ = None  # type: ignore[assignment]


Real = Number


def _int_to_base(n: int, base: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n > 0:
        n, digit = divmod(n, base)
        digits.append(DIGITS[digit])
    return "".join(reversed(digits))
