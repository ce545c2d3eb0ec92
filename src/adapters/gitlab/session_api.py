"""API de sesión (`POST /session`).

Solo existe en servidores antiguos; `GitLabApi.login` la usa primero y cae a
OAuth2 cuando el servidor responde 404.
"""

from __future__ import annotations

from adapters.gitlab.abstract_api import AbstractApi
from adapters.gitlab.errors import GitLabApiException
from adapters.gitlab.form import GitLabApiForm
from core.domain.models import Session


class SessionApi(AbstractApi):
    def login(self, username: str | None, email: str | None, password: str) -> Session:
        if not (username or "").strip() and not (email or "").strip():
            raise ValueError("both username and email cannot be empty or null")

        form = (
            GitLabApiForm()
            .with_param("login", username)
            .with_param("email", email)
            .with_param("password", password, required=True)
        )
        response = self.post(201, form.as_list(), "session")
        session = self.read(response, Session)
        if not session.private_token:
            raise GitLabApiException("session response carries no private token")
        return session
