"""Construcción de parámetros de formulario/query para la API GitLab.

Reglas de codificación:
- `None` no se envía; un parámetro requerido vacío lanza `GitLabApiException`.
- bool -> "true"/"false", Enum -> su valor, fechas -> ISO-8601.
- Las listas se envían como `name[]` repetido.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Iterator

from adapters.gitlab.errors import GitLabApiException

PAGE_PARAM = "page"
PER_PAGE_PARAM = "per_page"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="seconds") + "Z"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class GitLabApiForm:
    """Ordered list of (name, value) pairs, built fluently."""

    def __init__(self) -> None:
        self._params: list[tuple[str, str]] = []

    def with_param(self, name: str, value: Any, required: bool = False) -> "GitLabApiForm":
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                raise GitLabApiException(f"{name} cannot be empty or null")
            if value is None:
                return self

        if isinstance(value, (list, tuple, set)):
            if required and not value:
                raise GitLabApiException(f"{name} cannot be empty or null")
            for item in value:
                self._params.append((f"{name}[]", _format_value(item)))
            return self

        self._params.append((name, _format_value(value)))
        return self

    def with_page(self, page: int | None, per_page: int | None) -> "GitLabApiForm":
        return self.with_param(PAGE_PARAM, page).with_param(PER_PAGE_PARAM, per_page)

    def as_list(self) -> list[tuple[str, str]]:
        return list(self._params)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def get(self, name: str) -> str | None:
        for key, value in self._params:
            if key == name:
                return value
        return None
