"""
Errors — Закрытая таксономия ошибок xmath

Все ошибки библиотеки описываются одним перечислением ErrorKind.
Вид ошибки передаётся по значению (сравнение через ==), а не через
разделяемые объекты-синглтоны.

Политика распространения:
- Ошибки конструктора (Number, Stepper) выбрасываются как исключения
- Ошибки запросов Stepper (step/normalize) возвращаются вместе со значением
  в StepResult, исключение можно получить явно через raise_for_error()
- StepperInvariantError сигнализирует о дефекте валидации, не о плохом вводе
"""

from enum import Enum
from typing import Optional


# =============================================================================
# ERROR KINDS
# =============================================================================


class ErrorKind(str, Enum):
    """Вид ошибки xmath"""

    INVALID_BASE = "invalid base"
    STEP_OVERFLOW = "step overflow"
    MAX_OVERFLOW = "max overflow"
    MIN_OVERFLOW = "min overflow"
    RANGE_OVERFLOW = "range overflow"
    UNORDERED_MAX_MIN = "unordered max min"
    MAX_EXCEEDED = "max exceeded"
    MIN_EXCEEDED = "min exceeded"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class XMathError(Exception):
    """
    Базовое исключение xmath.

    Attributes:
        kind: Вид ошибки (ErrorKind)
    """

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or kind.value)


class InvalidBaseError(XMathError, ValueError):
    """Основание системы счисления вне диапазона [2, 36]."""

    def __init__(self, base: int):
        self.base = base
        super().__init__(ErrorKind.INVALID_BASE, f"invalid base: {base}")


class StepperError(XMathError):
    """
    Ошибка Stepper.

    Для MAX_EXCEEDED / MIN_EXCEEDED атрибут value содержит граничное
    значение, которое вернул запрос.
    """

    def __init__(
        self,
        kind: ErrorKind,
        value: Optional[float] = None,
        message: Optional[str] = None,
    ):
        self.value = value
        super().__init__(kind, message)


class StepperInvariantError(RuntimeError):
    """
    Нарушение внутреннего инварианта Stepper.

    Точка сетки не представима точно как float. Для конечного диапазона
    это дефект логики конструктора; для неограниченного диапазона так
    сообщается индекс, слишком далёкий от начала сетки.
    """

    pass
