"""Root conftest: shared test configuration.

- Local `BUS_*` variables and the per-user `.env` must not leak into tests.
- HTTP never leaves the process: every client gets an `httpx.MockTransport`.
"""

import os
import tempfile
from typing import Callable

import httpx
import pytest

# Antes de importar `core.config`: su env_file por usuario se resuelve al importar.
os.environ["XDG_CONFIG_HOME"] = tempfile.mkdtemp(prefix="bus-toolkit-tests-")

from adapters.gitlab.api import GitLabApi  # noqa: E402
from core.domain.constants import ApiVersion, TokenType  # noqa: E402

HOST = "https://gitlab.example.com"


@pytest.fixture(autouse=True)
def _clean_bus_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("BUS_"):
            monkeypatch.delenv(key, raising=False)


class Recorder:
    """Mock transport handler that records every request it serves."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def make_api():
    """Factory: `make_api(handler, **kwargs)` -> (GitLabApi, Recorder)."""

    created: list[GitLabApi] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        *,
        token: str | None = "secret-token",
        token_type: TokenType = TokenType.PRIVATE,
        api_version: ApiVersion = ApiVersion.V4,
        host: str = HOST,
    ) -> tuple[GitLabApi, Recorder]:
        recorder = Recorder(handler)
        api = GitLabApi(host, token, token_type, api_version=api_version, transport=recorder.transport)
        created.append(api)
        return api, recorder

    yield _make
    for api in created:
        api.close()


def paginated(items: list[dict], *, with_totals: bool = True, fail_on_page: int | None = None):
    """Handler serving `items` the way GitLab paginates a collection."""

    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        page = int(params.get("page", "1"))
        per_page = int(params.get("per_page", "20"))
        if fail_on_page is not None and page == fail_on_page:
            return httpx.Response(500, json={"message": "500 Internal Server Error"})

        total_pages = max(1, -(-len(items) // per_page))
        chunk = items[(page - 1) * per_page: page * per_page]
        headers = {
            "X-Page": str(page),
            "X-Per-Page": str(per_page),
            "X-Next-Page": str(page + 1) if page < total_pages else "",
        }
        if with_totals:
            headers["X-Total"] = str(len(items))
            headers["X-Total-Pages"] = str(total_pages)
        return httpx.Response(200, json=chunk, headers=headers)

    return handler


def project_items(count: int) -> list[dict]:
    return [
        {"id": i, "name": f"p{i}", "path_with_namespace": f"group/p{i}", "visibility": "private"}
        for i in range(1, count + 1)
    ]
