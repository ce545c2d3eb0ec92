"""Excepción de dominio para el cliente GitLab.

Una sola clase de error para todo el cliente:
- `http_status` es 0 cuando el fallo ocurrió antes de tener respuesta.
- `validation_errors` se rellena cuando GitLab devuelve errores por campo.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class GitLabApiException(Exception):
    """Error raised by every GitLab API call."""

    def __init__(
        self,
        message: str | None = None,
        *,
        http_status: int = 0,
        reason: str | None = None,
        validation_errors: dict[str, list[str]] | None = None,
    ) -> None:
        self.message = message or reason or "GitLab API request failed"
        self.http_status = http_status
        self.reason = reason
        self.validation_errors = validation_errors
        super().__init__(self.message)

    @property
    def has_validation_errors(self) -> bool:
        return bool(self.validation_errors)

    @classmethod
    def from_response(cls, response: "httpx.Response") -> "GitLabApiException":
        """Build the exception from an error response body.

        GitLab reports errors as `{"message": ...}` (string, list or a mapping
        of field -> errors) or as OAuth style `{"error": ..., "error_description": ...}`.
        """

        status = response.status_code
        reason = response.reason_phrase or None
        text = response.text or ""

        payload: Any = None
        if text:
            try:
                payload = json.loads(text)
            except ValueError:
                payload = None

        message: str | None = None
        validation_errors: dict[str, list[str]] | None = None

        if isinstance(payload, dict):
            raw_message = payload.get("message")
            if isinstance(raw_message, str):
                message = raw_message
            elif isinstance(raw_message, dict):
                validation_errors = {
                    str(field): [str(e) for e in errors] if isinstance(errors, list) else [str(errors)]
                    for field, errors in raw_message.items()
                }
                message = "The following fields have validation errors: " + ", ".join(validation_errors)
            elif isinstance(raw_message, list):
                message = "\n".join(str(m) for m in raw_message)
            elif isinstance(payload.get("error"), str):
                message = payload["error"]
                description = payload.get("error_description")
                if isinstance(description, str) and description:
                    message = f"{message}: {description}"
        elif text.strip():
            message = text.strip()

        return cls(
            message or reason,
            http_status=status,
            reason=reason,
            validation_errors=validation_errors,
        )

    def __repr__(self) -> str:
        return f"GitLabApiException(http_status={self.http_status}, message={self.message!r})"
