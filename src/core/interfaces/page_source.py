"""Contrato de las fuentes paginadas.

Por qué Protocol:
- El paginador solo necesita "pedir una página" y leer cabeceras + JSON.
- Permite probar el paginador con cualquier objeto que cumpla el contrato,
  sin acoplar el Core a httpx.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class PageResponse(Protocol):
    """Lo mínimo que el paginador lee de una respuesta HTTP."""

    @property
    def headers(self) -> Mapping[str, str]: ...

    def json(self) -> Any: ...


@runtime_checkable
class PageSource(Protocol):
    """Contrato mínimo de una API que sabe pedir colecciones.

    Reglas de diseño:
    - `get` es síncrono y bloqueante: una llamada, un round-trip.
    - Lanza la excepción de dominio si el estado no es `expected_status`.
    """

    def get(
        self,
        expected_status: int,
        params: Sequence[tuple[str, Any]] | None,
        *path_args: object,
    ) -> PageResponse: ...
