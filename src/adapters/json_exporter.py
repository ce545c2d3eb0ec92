"""Exportación JSON de resultados de la API.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines (jq, scripts de CI).
- Los modelos Pydantic ya saben serializarse (`model_dump(mode="json")`).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel


def models_to_json(items: Iterable[BaseModel]) -> str:
    """Serializa modelos a JSON UTF-8 con formato estable (sin campos nulos)."""

    payload = [item.model_dump(mode="json", exclude_none=True) for item in items]
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_models_json(*, items: Iterable[BaseModel], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(models_to_json(items), encoding="utf-8")
    return output_path
