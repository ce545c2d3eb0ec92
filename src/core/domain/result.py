"""Resultado explícito (valor o error) para accesos que no lanzan excepción.

Por qué un tipo propio:
- Las variantes `get_optional_*` de la API devuelven un vacío en vez de lanzar,
  pero el llamador necesita poder consultar la causa después.
- El error viaja dentro del propio `Result`; no hay tabla global indexada por
  identidad, así que una consulta nunca devuelve el error de otro objeto.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a (possibly absent) value or the error that prevented it."""

    value: T | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if self.value is not None and self.error is not None:
            raise ValueError("a Result cannot hold both a value and an error")

    @classmethod
    def ok(cls, value: T | None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def empty(cls) -> "Result[T]":
        return cls()

    @classmethod
    def failure(cls, error: Exception) -> "Result[T]":
        if error is None:
            raise ValueError("error is required for a failed Result")
        return cls(error=error)

    @property
    def is_present(self) -> bool:
        return self.value is not None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def __bool__(self) -> bool:
        return self.is_present

    def get(self) -> T:
        if self.value is None:
            raise LookupError("no value present")
        return self.value

    def or_else(self, default: T) -> T:
        return self.value if self.value is not None else default

    def or_else_raise(self) -> T:
        """Return the value, re-raising the carried error if there is one."""

        if self.error is not None:
            raise self.error
        return self.get()

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        if self.value is None:
            return Result(error=self.error)
        return Result(value=fn(self.value))


def optional_exception(result: Result[object]) -> Exception | None:
    """Return the error carried by `result`, or None when it did not fail."""

    return result.error
