"""`Dict`: un `dict` con setters encadenables y getters tipados.

Por qué Pydantic para las conversiones:
- `TypeAdapter` ya sabe convertir en modo laxo ("12" -> 12, "true" -> True,
  ISO-8601 -> datetime), así que no se reimplementan conversores a mano.
- `parse`/`to_model` reutilizan los mismos modelos del dominio.

Un valor que no se puede convertir se trata como ausente (devuelve `default`).
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

M = TypeVar("M", bound=BaseModel)
E = TypeVar("E", bound=Enum)
V = TypeVar("V")


@lru_cache(maxsize=None)
def _adapter(target: type) -> TypeAdapter[Any]:
    return TypeAdapter(target)


class Dict(dict[str, Any]):
    @classmethod
    def create(cls) -> "Dict":
        return cls()

    @classmethod
    def parse(cls, model: BaseModel, *, exclude_none: bool = False, by_alias: bool = False) -> "Dict":
        """Build a `Dict` from a pydantic model instance."""

        if model is None:
            raise ValueError("model must not be None")
        return cls(model.model_dump(exclude_none=exclude_none, by_alias=by_alias))

    def to_model(self, model_cls: type[M]) -> M:
        return model_cls.model_validate(dict(self))

    def set(self, key: str, value: Any) -> "Dict":
        self[key] = value
        return self

    def set_ignore_null(self, key: str | None, value: Any) -> "Dict":
        if key is not None and value is not None:
            self[key] = value
        return self

    def filter(self, *keys: str) -> "Dict":
        return Dict({k: self[k] for k in keys if k in self})

    def remove_equal(self, other: dict[str, Any], *without: str) -> None:
        """Drop every key whose value equals the one in `other`, except `without`."""

        skip = set(without)
        for key, value in other.items():
            if key in skip:
                continue
            current = self.get(key)
            if current is not None and current == value:
                del self[key]

    def _convert(self, key: str, target: type[V], default: V | None) -> V | None:
        value = self.get(key)
        if value is None:
            return default
        try:
            return _adapter(target).validate_python(value)
        except ValidationError:
            return default

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, Enum):
            return str(value.value)
        return str(value)

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Integer value of `key`; numeric fractions are truncated toward zero (1.5 -> 1)."""

        value = self.get(key)
        if isinstance(value, (float, Decimal)) and not isinstance(value, bool):
            if not math.isfinite(value):
                return default
            return int(value)
        return self._convert(key, int, default)

    def get_float(self, key: str, default: float | None = None) -> float | None:
        return self._convert(key, float, default)

    def get_bool(self, key: str, default: bool | None = None) -> bool | None:
        return self._convert(key, bool, default)

    def get_decimal(self, key: str, default: Decimal | None = None) -> Decimal | None:
        return self._convert(key, Decimal, default)

    def get_datetime(self, key: str, default: datetime | None = None) -> datetime | None:
        return self._convert(key, datetime, default)

    def get_enum(self, enum_cls: type[E], key: str, default: E | None = None) -> E | None:
        """Resolve by value first, then by member name."""

        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            pass
        if isinstance(value, str) and value in enum_cls.__members__:
            return enum_cls.__members__[value]
        return default

    def copy(self) -> "Dict":
        return Dict(self)
