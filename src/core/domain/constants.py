"""Enumeraciones compartidas del dominio GitLab.

Por qué aquí:
- El transporte HTTP, los modelos y la CLI necesitan los mismos valores
  (versión de API, tipo de token, niveles de acceso) sin importarse entre sí.
- Los valores de cada enum son exactamente los que viajan por la API REST.
"""

from __future__ import annotations

from enum import Enum, IntEnum

import structlog

log = structlog.get_logger(__name__)


class ApiVersion(str, Enum):
    """GitLab REST API versions."""

    V3 = "v3"
    V4 = "v4"

    @property
    def api_namespace(self) -> str:
        return f"/api/{self.value}"


class TokenType(str, Enum):
    """How the configured auth token is presented to the server."""

    ACCESS = "access"
    OAUTH2_ACCESS = "oauth2_access"
    PRIVATE = "private"

    def header(self, token: str) -> tuple[str, str]:
        """Return the single credential header for `token`."""

        if self is TokenType.PRIVATE:
            return "PRIVATE-TOKEN", token
        return "Authorization", f"Bearer {token}"


class AccessLevel(IntEnum):
    INVALID = -1
    NONE = 0
    GUEST = 10
    REPORTER = 20
    DEVELOPER = 30
    MAINTAINER = 40
    # Alias obsoleto de MAINTAINER (mismo valor).
    MASTER = 40
    OWNER = 50
    ADMIN = 60

    @classmethod
    def for_value(cls, value: int | None) -> "AccessLevel | None":
        """Map a raw access level to a member, `INVALID` when unknown."""

        if value is None:
            return None
        try:
            return cls(int(value))
        except ValueError:
            log.warning("invalid_access_level", value=value)
            return cls.INVALID


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class ProjectOrderBy(str, Enum):
    ID = "id"
    NAME = "name"
    PATH = "path"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    LAST_ACTIVITY_AT = "last_activity_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class MergeMethod(str, Enum):
    MERGE = "merge"
    REBASE_MERGE = "rebase_merge"
    FF = "ff"


class VariableType(str, Enum):
    ENV_VAR = "env_var"
    FILE = "file"
