"""Fachada del cliente GitLab.

`GitLabApi` es el punto de entrada: posee el transporte autenticado
(`GitLabApiClient`), el contexto de sudo y el tamaño de página por defecto, y
crea bajo demanda las APIs por recurso (`projects`, `users`, `sessions`).

Modelo de concurrencia:
- Las llamadas son síncronas (un round-trip por llamada).
- Las sub-APIs se crean con double-checked locking sobre un `threading.Lock`
  propio de cada instancia. El cliente httpx perezoso de `GitLabApiClient`
  tiene su propio lock, así que las llamadas concurrentes comparten un único
  cliente. Cambiar TLS, logging o sudo se hace antes de repartir la fachada.
- `Pager` no es thread-safe: cada hilo debe crear el suyo.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Sequence, TypeVar

import httpx
import structlog

from adapters.gitlab.errors import GitLabApiException
from adapters.gitlab.project_api import ProjectApi
from adapters.gitlab.session_api import SessionApi
from adapters.gitlab.user_api import UserApi
from adapters.http_client import DEFAULT_MASKED_HEADER_NAMES, GitLabApiClient
from core.config import AppSettings
from core.domain.constants import ApiVersion, TokenType
from core.domain.models import OauthTokenResponse, Session, Version
from core.domain.result import Result

log = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_PER_PAGE = 96


class GitLabApi:
    def __init__(
        self,
        host_url: str,
        auth_token: str | None,
        token_type: TokenType = TokenType.PRIVATE,
        *,
        api_version: ApiVersion = ApiVersion.V4,
        secret_token: str | None = None,
        client_config: dict[str, Any] | None = None,
        transport: httpx.BaseTransport | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._api_version = api_version
        self._gitlab_server_url = host_url
        self._client_config = dict(client_config or {})
        self._default_per_page = DEFAULT_PER_PAGE
        self._session: Session | None = None

        self.api_client = GitLabApiClient(
            api_version,
            host_url,
            token_type,
            auth_token,
            secret_token,
            self._client_config,
            settings=settings,
            transport=transport,
        )

        self._lock = threading.Lock()
        self._project_api: ProjectApi | None = None
        self._user_api: UserApi | None = None
        self._session_api: SessionApi | None = None

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> "GitLabApi":
        """Build a client from `BUS_*` settings.

        `sudo_as_id` from the settings is applied as is; use `set_sudo_as_id`
        when the user should be verified against the server first.
        """

        settings = settings or AppSettings()
        api = cls(
            settings.gitlab_url,
            settings.auth_token,
            settings.token_type,
            api_version=settings.api_version,
            secret_token=settings.secret_token,
            transport=transport,
            settings=settings,
        )
        api.default_per_page = settings.default_per_page
        if settings.ignore_certificate_errors:
            api.ignore_certificate_errors = True
        if settings.sudo_as_id is not None:
            api.api_client.sudo_as_id = settings.sudo_as_id
        return api

    @classmethod
    def oauth2_login(
        cls,
        url: str,
        username: str,
        password: str,
        *,
        api_version: ApiVersion = ApiVersion.V4,
        secret_token: str | None = None,
        client_config: dict[str, Any] | None = None,
        ignore_certificate_errors: bool = False,
        transport: httpx.BaseTransport | None = None,
        settings: AppSettings | None = None,
    ) -> "GitLabApi":
        """Exchange username/password for an OAuth2 token (`POST /oauth/token`)."""

        if not username or not username.strip():
            raise ValueError("both username and email cannot be empty or null")

        bootstrap = cls(url, None, api_version=api_version, transport=transport, settings=settings)
        bootstrap.api_client.set_host_url_to_base_url()
        if ignore_certificate_errors:
            bootstrap.ignore_certificate_errors = True

        payload = {"grant_type": "password", "username": username, "password": password}
        try:
            response = bootstrap.api_client.post_json(200, payload, "oauth", "token")
            token = OauthTokenResponse.model_validate(response.json())
        except ValueError as exc:
            raise GitLabApiException(f"Invalid OAuth2 token response: {exc}") from exc
        finally:
            bootstrap.close()

        api = cls(
            url,
            token.access_token,
            TokenType.OAUTH2_ACCESS,
            api_version=api_version,
            secret_token=secret_token,
            client_config=client_config,
            transport=transport,
            settings=settings,
        )
        if ignore_certificate_errors:
            api.ignore_certificate_errors = True
        log.info("oauth2_login_ok", url=url, username=username)
        return api

    @classmethod
    def login(
        cls,
        url: str,
        username: str,
        password: str,
        *,
        api_version: ApiVersion = ApiVersion.V4,
        ignore_certificate_errors: bool = False,
        transport: httpx.BaseTransport | None = None,
        settings: AppSettings | None = None,
    ) -> "GitLabApi":
        """Session login (`POST /session`), falling back to OAuth2 on HTTP 404."""

        bootstrap = cls(url, None, api_version=api_version, transport=transport, settings=settings)
        if ignore_certificate_errors:
            bootstrap.ignore_certificate_errors = True

        try:
            session = bootstrap.sessions.login(username, None, password)
        except GitLabApiException as exc:
            if exc.http_status != 404:
                raise
            log.info("session_login_unavailable", url=url, fallback="oauth2")
            return cls.oauth2_login(
                url,
                username,
                password,
                api_version=api_version,
                ignore_certificate_errors=ignore_certificate_errors,
                transport=transport,
                settings=settings,
            )
        finally:
            bootstrap.close()

        api = cls(url, session.private_token, TokenType.PRIVATE, api_version=api_version, transport=transport, settings=settings)
        api._session = session
        if ignore_certificate_errors:
            api.ignore_certificate_errors = True
        return api

    @staticmethod
    def get_optional_exception(result: Result[Any]) -> Exception | None:
        return result.error

    @staticmethod
    def or_else_throw(result: Result[T]) -> T:
        return result.or_else_raise()

    def duplicate(self) -> "GitLabApi":
        """Independent copy sharing credentials, sudo context and page size."""

        api = GitLabApi(
            self._gitlab_server_url,
            self.auth_token,
            self.token_type,
            api_version=self._api_version,
            secret_token=self.secret_token,
            client_config=self._client_config,
            transport=self.api_client.transport,
            settings=self.api_client.settings,
        )
        if self.sudo_as_id is not None:
            api.api_client.sudo_as_id = self.sudo_as_id
        if self.ignore_certificate_errors:
            api.ignore_certificate_errors = True
        api.default_per_page = self._default_per_page
        return api

    @property
    def session(self) -> Session | None:
        return self._session

    def with_request_response_logging(
        self,
        level: int = logging.DEBUG,
        max_entity_size: int = 0,
        masked_header_names: Sequence[str] = DEFAULT_MASKED_HEADER_NAMES,
    ) -> "GitLabApi":
        self.enable_request_response_logging(level, max_entity_size, masked_header_names)
        return self

    def enable_request_response_logging(
        self,
        level: int = logging.DEBUG,
        max_entity_size: int = 0,
        masked_header_names: Sequence[str] = DEFAULT_MASKED_HEADER_NAMES,
    ) -> None:
        self.api_client.enable_request_response_logging(level, max_entity_size, masked_header_names)

    def sudo(self, username: str | None) -> None:
        """Impersonate `username` on every following call; blank clears sudo."""

        if not username or not username.strip():
            self.api_client.sudo_as_id = None
            return

        user = self.users.get_user_by_username(username)
        if user is None or user.id is None:
            raise GitLabApiException("the specified username was not found")
        self.api_client.sudo_as_id = user.id

    def unsudo(self) -> None:
        self.api_client.sudo_as_id = None

    @property
    def sudo_as_id(self) -> int | None:
        return self.api_client.sudo_as_id

    def set_sudo_as_id(self, sudo_as_id: int | None) -> None:
        if sudo_as_id is None:
            self.api_client.sudo_as_id = None
            return

        user = self.users.get_user(sudo_as_id)
        if user is None or user.id != sudo_as_id:
            raise GitLabApiException("the specified user ID was not found")
        self.api_client.sudo_as_id = sudo_as_id

    @property
    def api_version(self) -> ApiVersion:
        return self._api_version

    @property
    def gitlab_server_url(self) -> str:
        return self._gitlab_server_url

    @property
    def auth_token(self) -> str | None:
        return self.api_client.auth_token

    @property
    def token_type(self) -> TokenType:
        return self.api_client.token_type

    @property
    def secret_token(self) -> str | None:
        return self.api_client.secret_token

    @property
    def default_per_page(self) -> int:
        return self._default_per_page

    @default_per_page.setter
    def default_per_page(self, value: int) -> None:
        if value < 1:
            raise ValueError("default_per_page must be >= 1")
        self._default_per_page = value

    @property
    def ignore_certificate_errors(self) -> bool:
        return self.api_client.ignore_certificate_errors

    @ignore_certificate_errors.setter
    def ignore_certificate_errors(self, value: bool) -> None:
        self.api_client.ignore_certificate_errors = value

    def get_version(self) -> Version:
        response = self.api_client.get(200, None, "version")
        return Version.model_validate(response.json())

    @property
    def projects(self) -> ProjectApi:
        if self._project_api is None:
            with self._lock:
                if self._project_api is None:
                    self._project_api = ProjectApi(self)
        return self._project_api

    @property
    def users(self) -> UserApi:
        if self._user_api is None:
            with self._lock:
                if self._user_api is None:
                    self._user_api = UserApi(self)
        return self._user_api

    @property
    def sessions(self) -> SessionApi:
        if self._session_api is None:
            with self._lock:
                if self._session_api is None:
                    self._session_api = SessionApi(self)
        return self._session_api

    def close(self) -> None:
        self.api_client.close()

    def __enter__(self) -> "GitLabApi":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
