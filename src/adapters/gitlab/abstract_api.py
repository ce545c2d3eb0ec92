"""Base común de las APIs por recurso (proyectos, usuarios, sesiones).

Por qué una base:
- Todas las APIs comparten el mismo transporte (`GitLabApiClient`) y las mismas
  reglas para identificar recursos (id numérico o ruta URL-encoded).
- La lectura de respuestas a modelos Pydantic vive en un único sitio.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from adapters.gitlab.errors import GitLabApiException
from adapters.gitlab.form import GitLabApiForm
from adapters.http_client import GitLabApiClient, QueryParams
from core.domain.constants import ApiVersion
from core.domain.models import Project, User

if TYPE_CHECKING:
    from adapters.gitlab.api import GitLabApi

M = TypeVar("M", bound=BaseModel)


def _encode_path(value: str) -> str:
    return quote(value.strip(), safe="")


class AbstractApi:
    def __init__(self, gitlab_api: "GitLabApi") -> None:
        self._gitlab_api = gitlab_api

    @property
    def gitlab_api(self) -> "GitLabApi":
        return self._gitlab_api

    @property
    def api_client(self) -> GitLabApiClient:
        return self._gitlab_api.api_client

    @property
    def default_per_page(self) -> int:
        return self._gitlab_api.default_per_page

    def is_api_version(self, version: ApiVersion) -> bool:
        return self._gitlab_api.api_version is version

    def status_for(self, v4_status: int) -> int:
        """v3 answers 200 where v4 answers 201/202/204."""

        return 200 if self.is_api_version(ApiVersion.V3) else v4_status

    def get_project_id_or_path(self, obj: Any) -> int | str:
        """Resolve a project reference to the path segment GitLab expects.

        Accepts an int id, a "group/project" path (URL-encoded, slashes
        included) or a `Project`, which uses its id first and falls back to
        `path_with_namespace`.
        """

        if obj is None:
            raise ValueError("Cannot determine ID or path from null object")
        if isinstance(obj, bool):
            raise ValueError(f"Cannot determine ID or path from provided {type(obj).__name__} instance")
        if isinstance(obj, int):
            return obj
        if isinstance(obj, str):
            return _encode_path(obj)
        if isinstance(obj, Project):
            if obj.id is not None and obj.id > 0:
                return obj.id
            if obj.path_with_namespace and obj.path_with_namespace.strip():
                return _encode_path(obj.path_with_namespace)
            raise ValueError("Cannot determine ID or path from provided Project instance")
        raise ValueError(
            f"Cannot determine ID or path from provided {type(obj).__name__} instance, "
            "must be int, str, or a Project instance"
        )

    def get_user_id_or_username(self, obj: Any) -> int | str:
        if obj is None:
            raise ValueError("Cannot determine ID or username from null object")
        if isinstance(obj, int) and not isinstance(obj, bool):
            return obj
        if isinstance(obj, str):
            return _encode_path(obj)
        if isinstance(obj, User):
            if obj.id is not None and obj.id > 0:
                return obj.id
            if obj.username and obj.username.strip():
                return _encode_path(obj.username)
            raise ValueError("Cannot determine ID or username from provided User instance")
        raise ValueError(
            f"Cannot determine ID or username from provided {type(obj).__name__} instance, "
            "must be int, str, or a User instance"
        )

    def page_params(self, page: int, per_page: int) -> list[tuple[str, str]]:
        return GitLabApiForm().with_page(page, per_page).as_list()

    def get(self, expected_status: int, params: QueryParams, *path_args: object) -> httpx.Response:
        return self.api_client.get(expected_status, params, *path_args)

    def post(self, expected_status: int, data: QueryParams, *path_args: object) -> httpx.Response:
        return self.api_client.post(expected_status, data, *path_args)

    def put(self, expected_status: int, data: QueryParams, *path_args: object) -> httpx.Response:
        return self.api_client.put(expected_status, data, *path_args)

    def delete(self, expected_status: int, params: QueryParams, *path_args: object) -> httpx.Response:
        return self.api_client.delete(expected_status, params, *path_args)

    def upload(
        self,
        expected_status: int,
        field_name: str,
        file_path: Path,
        media_type: str | None,
        *path_args: object,
        method: str = "POST",
    ) -> httpx.Response:
        return self.api_client.upload(expected_status, field_name, file_path, media_type, *path_args, method=method)

    @staticmethod
    def _payload(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GitLabApiException(
                f"Invalid JSON in response from {response.request.url}",
                http_status=response.status_code,
            ) from exc

    def read(self, response: httpx.Response, model: type[M]) -> M:
        try:
            return model.model_validate(self._payload(response))
        except ValidationError as exc:
            raise GitLabApiException(f"Unexpected {model.__name__} payload: {exc}") from exc

    def read_list(self, response: httpx.Response, model: type[M]) -> list[M]:
        payload = self._payload(response)
        if not isinstance(payload, list):
            raise GitLabApiException("Invalid response from server: expected a JSON list")
        try:
            return [model.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise GitLabApiException(f"Unexpected {model.__name__} payload: {exc}") from exc
