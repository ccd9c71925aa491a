"""
Тесты для Number — рационального числа фиксированной точности

Проверяемые инварианты:
1. Перенормализация к сетке base^-precision после каждой операции
2. Округление ничьей от нуля
3. Идемпотентность перенормализации
4. Точный round-trip double -> Number -> double
5. IEEE-754 семантика Inf/NaN
6. Обратимый текстовый формат в основании числа
"""

import math
from fractions import Fraction

import pytest
from jsonschema import ValidationError

from src.xmath.errors import ErrorKind, InvalidBaseError
from src.xmath.number import Number, Real
from src.xmath.rounding import INT64_MAX, INT64_MIN, Accuracy

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def dec2():
    """Фабрика десятичных чисел с двумя разрядами"""

    def make(value: float) -> Number:
        return Number.decimal(2).set_float64(value)

    return make


# =============================================================================
# ТЕСТЫ: Создание
# =============================================================================


class TestConstruction:
    """Создание Number и проверка основания"""

    def test_default_is_decimal_integer(self) -> None:
        """По умолчанию precision=0, base=10"""
        n = Number()
        assert n.precision == 0
        assert n.base == 10
        assert n.rat() == 0

    def test_named_bases(self) -> None:
        """Фабрики именованных оснований"""
        assert Number.binary(3).base == 2
        assert Number.octal(3).base == 8
        assert Number.decimal(3).base == 10
        assert Number.hexadecimal(3).base == 16
        assert Number.hexadecimal(3).precision == 3

    def test_real_alias(self) -> None:
        """Real — синоним Number"""
        assert Real is Number

    @pytest.mark.parametrize("base", [-10, 0, 1, 37, 100])
    def test_invalid_base(self, base) -> None:
        """Основание вне [2, 36] отвергается"""
        with pytest.raises(InvalidBaseError) as exc_info:
            Number(2, base)
        assert exc_info.value.kind == ErrorKind.INVALID_BASE
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("base", [2, 10, 36])
    def test_valid_base_boundaries(self, base) -> None:
        """Границы диапазона допустимы"""
        assert Number(2, base).base == base

    def test_new_keeps_format(self) -> None:
        """new() создаёт ноль того же формата"""
        n = Number(3, 8).set_float64(1.5)
        m = n.new()
        assert (m.precision, m.base) == (3, 8)
        assert m.rat() == 0


# =============================================================================
# ТЕСТЫ: Перенормализация
# =============================================================================


class TestRenormalization:
    """Округление к сетке base^-precision"""

    def test_quarter_steps_to_integers(self) -> None:
        """Number() округляет до целых, ничья — от нуля"""
        expected = [
            "0", "0", "1", "1", "1", "1", "2", "2", "2", "2",
            "3", "3", "3", "3", "4", "4", "4", "4", "5", "5",
        ]
        n = Number()
        for i, text in enumerate(expected):
            assert str(n.set_float64(0.25 * i)) == text

    def test_decimal_one_digit(self) -> None:
        """Один десятичный разряд"""
        expected = ["0", "0.3", "0.7", "1", "1.3", "1.7", "2", "2.3", "2.6", "3"]
        n = Number.decimal(1)
        for i, text in enumerate(expected):
            assert str(n.set_float64(0.33 * i)) == text

    def test_half_away_from_zero(self) -> None:
        """round(2.5) = 3, round(-2.5) = -3, round(±2.4) = ±2"""
        n = Number()
        assert n.set_float64(2.5).rat() == 3
        assert n.set_float64(-2.5).rat() == -3
        assert n.set_float64(2.4).rat() == 2
        assert n.set_float64(-2.4).rat() == -2

    def test_result_is_grid_multiple(self, dec2) -> None:
        """Значение кратно 1/100"""
        for value in (0.1, 2.31, -7.777, 1234.5678):
            scaled = dec2(value).rat() * 100
            assert scaled.denominator == 1

    def test_idempotent(self) -> None:
        """Повторная перенормализация не меняет значение"""
        n = Number.decimal(2).set_float64(1.005)
        first = n.rat()
        n.set(n)
        assert n.rat() == first
        n.set(n).set(n)
        assert n.rat() == first

    def test_uses_exact_double_value(self) -> None:
        """1.005 хранится как 1.00499..., поэтому округляется вниз"""
        assert Number.decimal(2).set_float64(1.005).rat() == 1

    def test_negative_precision_scales_up(self) -> None:
        """Отрицательная точность округляет до сотен"""
        n = Number(-2, 10)
        assert n.set_int(1250).rat() == 1300
        assert n.set_int(-1249).rat() == -1200
        assert str(n.set_int(1250)) == "1300"

    def test_set_renormalizes_to_target_format(self) -> None:
        """set() приводит значение к формату получателя"""
        source = Number.decimal(3).set_float64(2.345)
        target = Number.decimal(1).set(source)
        assert target.rat() == Fraction(23, 10)


# =============================================================================
# ТЕСТЫ: Round-trip через double
# =============================================================================


class TestFloatRoundTrip:
    """set_float64 / to_float64"""

    @pytest.mark.parametrize(
        "precision, base, value",
        [
            (10, 2, 0.5 + 2**-10),
            (2, 8, 0.125),
            (2, 8, -12.015625),
            (2, 16, 3.00390625),
            (0, 10, 12345.0),
        ],
    )
    def test_dyadic_values_exact(self, precision, base, value) -> None:
        """Двоично-рациональные значения на сетке возвращаются точно"""
        n = Number(precision, base).set_float64(value)
        assert n.to_float64() == (value, Accuracy.EXACT)

    @pytest.mark.parametrize("value", [0.1, 2.31, 3.01, -7.25, 0.3, 1e10 + 0.01])
    def test_decimal_values_same_double(self, dec2, value) -> None:
        """Десятичные значения на сетке возвращают тот же double"""
        assert dec2(value).to_float64()[0] == value

    def test_decimal_sum_is_exact(self, dec2) -> None:
        """0.1 + 0.2 == 0.3 на десятичной сетке"""
        z = Number.decimal(2).add(dec2(0.1), dec2(0.2))
        assert z.rat() == Fraction(3, 10)
        assert z.to_float64()[0] == 0.3

    def test_special_values(self) -> None:
        """Inf/NaN сохраняются"""
        n = Number.decimal(2)
        assert n.set_float64(math.inf).to_float64() == (math.inf, Accuracy.EXACT)
        assert n.set_float64(-math.inf).to_float64()[0] == -math.inf
        assert math.isnan(n.set_float64(math.nan).to_float64()[0])

    def test_float_protocol(self, dec2) -> None:
        """float(n)"""
        assert float(dec2(2.31)) == 2.31


# =============================================================================
# ТЕСТЫ: Арифметика
# =============================================================================


class TestArithmetic:
    """add / sub / mul / quo / neg / abs / sqrt"""

    def test_add_sub(self, dec2) -> None:
        z = Number.decimal(2)
        assert z.add(dec2(2.31), dec2(0.7)).to_float64()[0] == 3.01
        assert z.sub(dec2(2.31), dec2(3.01)).to_float64()[0] == -0.7

    def test_mul_renormalizes(self, dec2) -> None:
        """0.05 * 0.5 = 0.025 -> 0.03 (ничья от нуля)"""
        z = Number.decimal(2)
        assert z.mul(dec2(0.05), dec2(0.5)).rat() == Fraction(3, 100)
        assert z.mul(dec2(-0.05), dec2(0.5)).rat() == Fraction(-3, 100)

    def test_quo_renormalizes(self, dec2) -> None:
        z = Number.decimal(2)
        assert z.quo(dec2(1), dec2(3)).rat() == Fraction(33, 100)
        assert z.quo(dec2(2), dec2(3)).rat() == Fraction(67, 100)
        assert z.quo(dec2(-2), dec2(3)).rat() == Fraction(-67, 100)

    def test_quo_by_zero(self, dec2) -> None:
        """x / 0 = ±Inf, 0 / 0 = NaN"""
        z = Number.decimal(2)
        assert z.quo(dec2(1.5), dec2(0)).to_float64()[0] == math.inf
        assert z.quo(dec2(-1.5), dec2(0)).to_float64()[0] == -math.inf
        assert z.quo(dec2(0), dec2(0)).is_nan()

    def test_quo_with_infinity(self, dec2) -> None:
        z = Number.decimal(2)
        assert z.quo(dec2(1), dec2(math.inf)).rat() == 0
        assert z.quo(dec2(math.inf), dec2(math.inf)).is_nan()
        assert z.quo(dec2(-math.inf), dec2(2)).to_float64()[0] == -math.inf
        assert z.quo(dec2(math.inf), dec2(-2)).to_float64()[0] == -math.inf

    def test_infinity_arithmetic(self, dec2) -> None:
        """IEEE-754 правила для бесконечностей"""
        z = Number.decimal(2)
        assert z.add(dec2(math.inf), dec2(1)).to_float64()[0] == math.inf
        assert z.sub(dec2(math.inf), dec2(math.inf)).is_nan()
        assert z.add(dec2(math.inf), dec2(-math.inf)).is_nan()
        assert z.mul(dec2(0), dec2(math.inf)).is_nan()
        assert z.mul(dec2(-3), dec2(math.inf)).to_float64()[0] == -math.inf
        assert z.sub(dec2(1), dec2(math.inf)).to_float64()[0] == -math.inf

    def test_infinity_not_renormalized(self) -> None:
        """Перенормализация бесконечности — no-op"""
        n = Number.decimal(2).set_inf(False)
        assert n.is_inf()
        assert not n.signbit()
        n.set_inf(True)
        assert n.is_inf()
        assert n.signbit()

    def test_neg_abs(self, dec2) -> None:
        z = Number.decimal(2)
        assert z.neg(dec2(2.31)).rat() == Fraction(-231, 100)
        assert z.abs(dec2(-2.31)).rat() == Fraction(231, 100)
        assert z.neg(dec2(math.inf)).to_float64()[0] == -math.inf
        assert z.abs(dec2(-math.inf)).to_float64()[0] == math.inf

    def test_sqrt(self, dec2) -> None:
        """Корень корректно округлён к сетке"""
        z = Number.decimal(2)
        assert z.sqrt(dec2(2)).rat() == Fraction(141, 100)
        assert z.sqrt(dec2(2.25)).rat() == Fraction(3, 2)
        assert z.sqrt(dec2(0)).rat() == 0

    def test_sqrt_tie_rounds_away(self, dec2) -> None:
        """sqrt(6.25) = 2.5 -> 3 при precision=0"""
        assert Number().sqrt(dec2(6.25)).rat() == 3

    def test_sqrt_special(self, dec2) -> None:
        z = Number.decimal(2)
        assert z.sqrt(dec2(-1)).is_nan()
        assert z.sqrt(dec2(-math.inf)).is_nan()
        assert z.sqrt(dec2(math.inf)).to_float64()[0] == math.inf

    def test_in_place_returns_receiver(self, dec2) -> None:
        """z.op(x, y) возвращает z"""
        z = Number.decimal(2)
        assert z.add(dec2(1), dec2(2)) is z

    def test_operators_return_new(self, dec2) -> None:
        """Операторы Python не изменяют операнды"""
        a, b = dec2(0.1), dec2(0.2)
        c = a + b
        assert c is not a
        assert a.rat() == Fraction(1, 10)
        assert c.rat() == Fraction(3, 10)
        assert (a - b).rat() == Fraction(-1, 10)
        assert (a * 10).rat() == 1
        assert (b / a).rat() == 2
        assert (-a).rat() == Fraction(-1, 10)
        assert abs(-a).rat() == Fraction(1, 10)

    def test_operators_with_plain_numbers(self, dec2) -> None:
        """float и int приводятся к формату левого операнда"""
        assert (dec2(2.31) + 0.7) == 3.01
        assert (dec2(1) + Fraction(1, 3)).rat() == Fraction(133, 100)


# =============================================================================
# ТЕСТЫ: Сравнение
# =============================================================================


class TestComparison:
    """cmp и rich comparisons"""

    def test_total_order(self) -> None:
        values = [-math.inf, -1.5, 0.0, 0.25, math.inf]
        numbers = [Number.decimal(2).set_float64(v) for v in values]
        for i, a in enumerate(numbers):
            for j, b in enumerate(numbers):
                expected = (i > j) - (i < j)
                assert a.cmp(b) == expected

    def test_rich_comparisons(self, dec2) -> None:
        assert dec2(1) < dec2(2)
        assert dec2(2) >= dec2(2)
        assert dec2(0.3) == 0.3
        assert dec2(0.1) + dec2(0.2) == dec2(0.3)

    def test_nan_comparison_is_contract_violation(self, dec2) -> None:
        """Сравнение с NaN — ValueError"""
        nan = dec2(math.nan)
        with pytest.raises(ValueError, match="NaN"):
            nan.cmp(dec2(1))
        with pytest.raises(ValueError, match="NaN"):
            dec2(1).cmp(nan)
        with pytest.raises(ValueError):
            _ = nan < dec2(1)

    def test_nan_equality_false(self, dec2) -> None:
        nan = dec2(math.nan)
        assert not (nan == nan)

    def test_sign(self, dec2) -> None:
        assert dec2(-0.01).sign() == -1
        assert dec2(0.001).sign() == 0
        assert dec2(math.inf).sign() == 1
        with pytest.raises(ValueError):
            dec2(math.nan).sign()

    def test_unhashable(self, dec2) -> None:
        """Изменяемый объект не хешируется"""
        with pytest.raises(TypeError):
            hash(dec2(1))


# =============================================================================
# ТЕСТЫ: Конверсии в целые
# =============================================================================


class TestIntegerConversion:
    """to_int / to_int64 / to_uint64 / set_int64 / set_uint64"""

    def test_to_int64_truncates(self) -> None:
        n = Number.decimal(1)
        assert n.set_float64(2.5).to_int64() == (2, Accuracy.ROUNDED_DOWN)
        assert n.set_float64(-2.5).to_int64() == (-2, Accuracy.ROUNDED_UP)
        assert n.set_float64(7.0).to_int64() == (7, Accuracy.EXACT)

    def test_to_int64_clamps(self) -> None:
        n = Number()
        assert n.set_int(INT64_MAX + 10).to_int64() == (INT64_MAX, Accuracy.ROUNDED_DOWN)
        assert n.set_int(INT64_MIN - 10).to_int64() == (INT64_MIN, Accuracy.ROUNDED_UP)
        assert n.set_inf(False).to_int64() == (INT64_MAX, Accuracy.ROUNDED_DOWN)
        assert n.set_inf(True).to_int64() == (INT64_MIN, Accuracy.ROUNDED_UP)

    def test_to_uint64(self) -> None:
        n = Number.decimal(1)
        assert n.set_float64(-0.5).to_uint64() == (0, Accuracy.ROUNDED_UP)
        assert n.set_float64(42.0).to_uint64() == (42, Accuracy.EXACT)

    def test_to_int_unbounded(self) -> None:
        n = Number()
        assert n.set_int(10**30).to_int() == (10**30, Accuracy.EXACT)
        assert n.set_inf(False).to_int() == (None, Accuracy.ROUNDED_DOWN)

    def test_nan_conversion_raises(self) -> None:
        n = Number().set_nan()
        with pytest.raises(ValueError):
            n.to_int64()
        with pytest.raises(ValueError):
            n.to_uint64()

    def test_set_int64_range(self) -> None:
        n = Number()
        assert n.set_int64(INT64_MIN).rat() == INT64_MIN
        with pytest.raises(OverflowError):
            n.set_int64(INT64_MAX + 1)
        with pytest.raises(OverflowError):
            n.set_uint64(-1)

    def test_is_int(self, dec2) -> None:
        assert dec2(3).is_int()
        assert not dec2(3.5).is_int()
        assert not dec2(math.inf).is_int()


# =============================================================================
# ТЕСТЫ: Текст
# =============================================================================


class TestText:
    """text() / set_string()"""

    def test_text_trims_trailing_zeros(self, dec2) -> None:
        assert dec2(3.1).text() == "3.1"
        assert dec2(3.0).text() == "3"
        assert dec2(-0.05).text() == "-0.05"

    def test_text_fixed(self, dec2) -> None:
        assert dec2(3.1).text(fixed=True) == "3.10"
        assert dec2(0).text(fixed=True) == "0.00"

    def test_text_other_bases(self) -> None:
        assert Number.hexadecimal(1).set_float64(-2.5).text() == "-2.8"
        assert Number.binary(3).set_float64(0.625).text() == "0.101"
        assert Number(0, 36).set_int(35).text() == "z"
        assert Number.octal(2).set_float64(8.125).text() == "10.1"

    def test_text_special(self) -> None:
        n = Number.decimal(2)
        assert n.set_inf(False).text() == "+Inf"
        assert n.set_inf(True).text() == "-Inf"
        assert n.set_nan().text() == "NaN"

    def test_parse_is_exact(self) -> None:
        """3.145 разбирается точно, поэтому ничья округляется от нуля"""
        n = Number.decimal(2).set_string("3.145")
        assert n.rat() == Fraction(315, 100)

    def test_parse_other_bases(self) -> None:
        assert Number.hexadecimal(2).set_string("ff.8").rat() == Fraction(511, 2)
        assert Number.hexadecimal(2).set_string("-FF.8").rat() == Fraction(-511, 2)
        assert Number.binary(4).set_string("+0.0101").rat() == Fraction(5, 16)

    def test_parse_special(self) -> None:
        n = Number.decimal(2)
        assert n.set_string("-Inf").signbit()
        assert n.set_string("+inf").is_inf()
        assert n.set_string("NaN").is_nan()

    @pytest.mark.parametrize("text", ["", ".", "12g", "1_0", "0x10", "1.2.3", "--1"])
    def test_parse_invalid(self, text) -> None:
        with pytest.raises(ValueError):
            Number.hexadecimal(2).set_string(text)

    def test_parse_digit_outside_base(self) -> None:
        with pytest.raises(ValueError):
            Number.binary(2).set_string("102")

    def test_round_trip_arithmetic_results(self) -> None:
        """Результаты арифметики переживают text -> set_string"""
        for precision, base in [(2, 10), (3, 16), (5, 2), (1, 36), (-2, 10)]:
            x = Number(precision, base).set_float64(123.456)
            y = Number(precision, base).set_float64(-7.89)
            for z in (x + y, x - y, x * y, x / y, -x):
                parsed = Number(precision, base).set_string(z.text())
                assert parsed.rat() == z.rat()

    def test_repr(self, dec2) -> None:
        assert repr(dec2(2.31)) == "Number(precision=2, base=10, value='2.31')"


# =============================================================================
# ТЕСТЫ: Сериализация
# =============================================================================


class TestSerialization:
    """to_dict / from_dict по контракту number.json"""

    def test_to_dict(self, dec2) -> None:
        assert dec2(-6.25).to_dict() == {"precision": 2, "base": 10, "value": "-6.25"}

    def test_round_trip(self) -> None:
        n = Number.hexadecimal(3).set_float64(-1234.5)
        restored = Number.from_dict(n.to_dict())
        assert restored.precision == 3
        assert restored.base == 16
        assert restored.rat() == n.rat()

    def test_infinite_round_trip(self) -> None:
        n = Number.decimal(2).set_inf(True)
        restored = Number.from_dict(n.to_dict())
        assert restored.is_inf()
        assert restored.signbit()

    def test_invalid_base_rejected_by_contract(self) -> None:
        with pytest.raises(ValidationError):
            Number.from_dict({"precision": 2, "base": 40, "value": "1"})

    def test_invalid_value_rejected_by_contract(self) -> None:
        with pytest.raises(ValidationError):
            Number.from_dict({"precision": 2, "base": 10, "value": "1 000"})

    def test_digit_outside_base(self) -> None:
        """Контракт не знает основания цифр, это проверяет разбор"""
        with pytest.raises(ValueError):
            Number.from_dict({"precision": 2, "base": 2, "value": "1.5"})
