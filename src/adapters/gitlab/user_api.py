"""API de usuarios: lo justo para sudo y para la CLI."""

from __future__ import annotations

from typing import Iterator

import structlog

from adapters.gitlab.abstract_api import AbstractApi
from adapters.gitlab.errors import GitLabApiException
from adapters.gitlab.form import GitLabApiForm
from adapters.gitlab.pager import Pager
from core.domain.models import User
from core.domain.result import Result

log = structlog.get_logger(__name__)


class UserApi(AbstractApi):
    def get_current_user(self) -> User:
        return self.read(self.get(200, None, "user"), User)

    def get_user(self, user_id: int) -> User:
        return self.read(self.get(200, None, "users", user_id), User)

    def get_user_by_username(self, username: str) -> User | None:
        """Look a user up by username; None when the server knows no such user."""

        form = GitLabApiForm().with_param("username", username, required=True).with_page(1, self.default_per_page)
        users = self.read_list(self.get(200, form.as_list(), "users"), User)
        return users[0] if users else None

    def get_optional_user(self, user: int | str) -> Result[User]:
        try:
            if isinstance(user, int):
                return Result.ok(self.get_user(user))
            return Result.ok(self.get_user_by_username(user))
        except GitLabApiException as exc:
            log.debug("optional_user_failed", user=user, http_status=exc.http_status)
            return Result.failure(exc)

    def get_users(self) -> list[User]:
        return self.get_users_pager(self.default_per_page).all()

    def get_users_page(self, page: int, per_page: int) -> list[User]:
        return self.read_list(self.get(200, self.page_params(page, per_page), "users"), User)

    def get_users_pager(self, items_per_page: int) -> Pager[User]:
        return Pager(self, User, items_per_page, None, "users")

    def get_users_stream(self) -> Iterator[User]:
        return self.get_users_pager(self.default_per_page).stream()
