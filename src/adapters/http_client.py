"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers, credenciales y logging de peticiones.
- Facilita testeo: se puede inyectar un `httpx.MockTransport` en vez de red real.

Modelo de ejecución:
- Síncrono. Cada llamada bloquea durante un único round-trip HTTP.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence, Union

import httpx
import structlog

from adapters.gitlab.errors import GitLabApiException
from core.config import AppSettings
from core.domain.constants import ApiVersion, TokenType

log = structlog.get_logger(__name__)

DEFAULT_MASKED_HEADER_NAMES: tuple[str, ...] = (
    "PRIVATE-TOKEN",
    "Authorization",
    "Proxy-Authorization",
    "Sudo",
)

QueryParams = Union[Mapping[str, Any], Sequence[tuple[str, Any]], None]


def build_client(
    settings: AppSettings | None = None,
    *,
    verify: bool = True,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
    event_hooks: dict[str, list[Callable[..., Any]]] | None = None,
    **client_kwargs: Any,
) -> httpx.Client:
    """Crea un `httpx.Client` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `client_kwargs` permite pasar configuración extra de httpx (proxies, limits).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        verify=verify,
        transport=transport,
        event_hooks=event_hooks,
        **client_kwargs,
    )


def _form_body(data: QueryParams) -> dict[str, Any] | None:
    # httpx solo acepta un Mapping como `data`; las claves repetidas van como lista.
    if data is None:
        return None
    if isinstance(data, Mapping):
        return dict(data)
    body: dict[str, Any] = {}
    for key, value in data:
        if key in body:
            previous = body[key]
            body[key] = [*previous, value] if isinstance(previous, list) else [previous, value]
        else:
            body[key] = value
    return body


def mask_headers(headers: Iterable[tuple[str, str]], masked_names: Iterable[str]) -> dict[str, str]:
    masked = {name.lower() for name in masked_names}
    return {k: ("********" if k.lower() in masked else v) for k, v in headers}


class GitLabApiClient:
    """Transporte autenticado contra `{host}/api/{v3|v4}`.

    Estado mutable tras la construcción:
    - `sudo_as_id`: si está definido, todas las peticiones llevan `sudo=<id>`.
    - `ignore_certificate_errors`: reconstruye el cliente httpx con `verify=False`.

    El cliente httpx se crea y se reemplaza bajo `_http_lock`. Un hilo que ya
    tiene una petición en vuelo puede ver cerrado su cliente si otro hilo
    cambia TLS o logging; hacer esos cambios antes de repartir la instancia.
    """

    def __init__(
        self,
        api_version: ApiVersion,
        host_url: str,
        token_type: TokenType,
        auth_token: str | None,
        secret_token: str | None = None,
        client_config: dict[str, Any] | None = None,
        *,
        settings: AppSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not host_url or not host_url.strip():
            raise ValueError("host_url cannot be empty")

        self._api_version = api_version
        self._host_url = host_url.strip().rstrip("/")
        self._base_url = self._host_url + api_version.api_namespace
        self._token_type = token_type
        self._auth_token = auth_token
        self._secret_token = secret_token
        self._client_config = dict(client_config or {})
        self._settings = settings or AppSettings()
        self._transport = transport

        self._sudo_as_id: int | None = None
        self._ignore_certificate_errors = False
        self._logging: tuple[int, int, tuple[str, ...]] | None = None
        self._http: httpx.Client | None = None
        self._http_lock = threading.RLock()

    @property
    def api_version(self) -> ApiVersion:
        return self._api_version

    @property
    def host_url(self) -> str:
        return self._host_url

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token_type(self) -> TokenType:
        return self._token_type

    @property
    def auth_token(self) -> str | None:
        return self._auth_token

    @property
    def secret_token(self) -> str | None:
        return self._secret_token

    @property
    def client_config(self) -> dict[str, Any]:
        return dict(self._client_config)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def transport(self) -> httpx.BaseTransport | None:
        return self._transport

    @property
    def sudo_as_id(self) -> int | None:
        return self._sudo_as_id

    @sudo_as_id.setter
    def sudo_as_id(self, value: int | None) -> None:
        self._sudo_as_id = value

    @property
    def ignore_certificate_errors(self) -> bool:
        return self._ignore_certificate_errors

    @ignore_certificate_errors.setter
    def ignore_certificate_errors(self, value: bool) -> None:
        with self._http_lock:
            if value != self._ignore_certificate_errors:
                self._ignore_certificate_errors = value
                self._reset_http()

    def set_host_url_to_base_url(self) -> None:
        """Point requests at the bare host (used by the oauth2 bootstrap)."""

        self._base_url = self._host_url

    def enable_request_response_logging(
        self,
        level: int = logging.DEBUG,
        max_entity_size: int = 0,
        masked_header_names: Sequence[str] = DEFAULT_MASKED_HEADER_NAMES,
    ) -> None:
        with self._http_lock:
            self._logging = (level, max_entity_size, tuple(masked_header_names))
            self._reset_http()

    def auth_headers(self) -> dict[str, str]:
        if not self._auth_token:
            return {}
        name, value = self._token_type.header(self._auth_token)
        return {name: value}

    def url_for(self, *path_args: object) -> str:
        segments = [str(a).strip("/") for a in path_args if a is not None and str(a) != ""]
        return "/".join([self._base_url, *segments])

    def _reset_http(self) -> None:
        with self._http_lock:
            if self._http is not None:
                self._http.close()
                self._http = None

    def _event_hooks(self) -> dict[str, list[Callable[..., Any]]] | None:
        if self._logging is None:
            return None
        level, max_entity_size, masked = self._logging

        def log_request(request: httpx.Request) -> None:
            fields: dict[str, Any] = {
                "method": request.method,
                "url": str(request.url),
                "headers": mask_headers(request.headers.items(), masked),
            }
            if max_entity_size > 0 and request.content:
                fields["body"] = request.content[:max_entity_size].decode("utf-8", errors="replace")
            log.log(level, "gitlab_request", **fields)

        def log_response(response: httpx.Response) -> None:
            fields: dict[str, Any] = {
                "status": response.status_code,
                "url": str(response.request.url),
                "headers": mask_headers(response.headers.items(), masked),
            }
            if max_entity_size > 0:
                response.read()
                fields["body"] = response.text[:max_entity_size]
            log.log(level, "gitlab_response", **fields)

        return {"request": [log_request], "response": [log_response]}

    def http(self) -> httpx.Client:
        with self._http_lock:
            if self._http is None:
                self._http = build_client(
                    self._settings,
                    verify=not self._ignore_certificate_errors,
                    transport=self._transport,
                    extra_headers=self.auth_headers(),
                    event_hooks=self._event_hooks(),
                    **self._client_config,
                )
            return self._http

    def _query(self, params: QueryParams) -> list[tuple[str, Any]]:
        query: list[tuple[str, Any]] = []
        if params:
            items = params.items() if isinstance(params, Mapping) else params
            query.extend((k, v) for k, v in items if v is not None)
        if self._sudo_as_id is not None:
            query.append(("sudo", self._sudo_as_id))
        return query

    def request(
        self,
        method: str,
        expected_status: int,
        *path_args: object,
        params: QueryParams = None,
        data: QueryParams = None,
        json: Any = None,
        files: Any = None,
    ) -> httpx.Response:
        """Issue one request and validate the status code.

        Raises `GitLabApiException` for transport failures and for any status
        other than `expected_status`.
        """

        url = self.url_for(*path_args)
        body = _form_body(data)
        try:
            response = self.http().request(
                method,
                url,
                params=self._query(params),
                data=body,
                json=json,
                files=files,
            )
        except httpx.HTTPError as exc:
            raise GitLabApiException(f"{method} {url} failed: {exc}") from exc

        if response.status_code != expected_status:
            raise GitLabApiException.from_response(response)
        return response

    def get(self, expected_status: int, params: QueryParams, *path_args: object) -> httpx.Response:
        return self.request("GET", expected_status, *path_args, params=params)

    def post(self, expected_status: int, data: QueryParams, *path_args: object) -> httpx.Response:
        return self.request("POST", expected_status, *path_args, data=data)

    def post_json(self, expected_status: int, payload: Any, *path_args: object) -> httpx.Response:
        return self.request("POST", expected_status, *path_args, json=payload)

    def put(self, expected_status: int, data: QueryParams, *path_args: object) -> httpx.Response:
        return self.request("PUT", expected_status, *path_args, data=data)

    def delete(self, expected_status: int, params: QueryParams, *path_args: object) -> httpx.Response:
        return self.request("DELETE", expected_status, *path_args, params=params)

    def upload(
        self,
        expected_status: int,
        field_name: str,
        file_path: Path,
        media_type: str | None,
        *path_args: object,
        method: str = "POST",
    ) -> httpx.Response:
        path = Path(file_path)
        if not path.is_file():
            raise GitLabApiException(f"file not found: {path}")
        with path.open("rb") as fh:
            content = fh.read()
        upload = (path.name, content, media_type) if media_type else (path.name, content)
        return self.request(method, expected_status, *path_args, files={field_name: upload})

    def close(self) -> None:
        self._reset_http()

    def __enter__(self) -> "GitLabApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
