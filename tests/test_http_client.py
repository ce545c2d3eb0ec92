"""GitLabApiClient tests: URL namespace, credentials, sudo and error mapping.

Tests cover:
    - Base URL: {host}/api/{v3|v4}, trailing slash handling
    - Exactly one credential header per token type
    - sudo query parameter on every request while set
    - Status mismatch and transport failures -> GitLabApiException
    - Form bodies with repeated keys, multipart uploads
    - Request/response logging with masked credential headers
"""

import json
from urllib.parse import parse_qs

import httpx
import pytest
from structlog.testing import capture_logs

from adapters.gitlab.errors import GitLabApiException
from adapters.http_client import DEFAULT_MASKED_HEADER_NAMES, GitLabApiClient, mask_headers
from core.domain.constants import ApiVersion, TokenType


def _client(handler, *, token="tok", token_type=TokenType.PRIVATE, version=ApiVersion.V4, host="https://gl.example/"):
    return GitLabApiClient(version, host, token_type, token, transport=httpx.MockTransport(handler))


def _ok(request):
    return httpx.Response(200, json={"ok": True})


# -- URL namespace ------------------------------------------------------------

def test_base_url_strips_trailing_slash_and_adds_namespace():
    client = _client(_ok)
    assert client.host_url == "https://gl.example"
    assert client.base_url == "https://gl.example/api/v4"


def test_v3_namespace():
    client = _client(_ok, version=ApiVersion.V3)
    assert client.url_for("projects", 1) == "https://gl.example/api/v3/projects/1"


def test_set_host_url_to_base_url():
    client = _client(_ok)
    client.set_host_url_to_base_url()
    assert client.url_for("oauth", "token") == "https://gl.example/oauth/token"


def test_empty_host_is_rejected():
    with pytest.raises(ValueError):
        GitLabApiClient(ApiVersion.V4, "  ", TokenType.PRIVATE, "tok")


def test_request_hits_versioned_path():
    seen = []

    def handler(request):
        seen.append(request)
        return _ok(request)

    with _client(handler) as client:
        client.get(200, None, "projects", 42)

    assert seen[0].url.path == "/api/v4/projects/42"
    assert seen[0].headers["Accept"] == "application/json"


# -- credentials --------------------------------------------------------------

def test_private_token_header():
    seen = []

    def handler(request):
        seen.append(request)
        return _ok(request)

    with _client(handler) as client:
        client.get(200, None, "user")

    assert seen[0].headers["PRIVATE-TOKEN"] == "tok"
    assert "Authorization" not in seen[0].headers


@pytest.mark.parametrize("token_type", [TokenType.OAUTH2_ACCESS, TokenType.ACCESS])
def test_bearer_token_header(token_type):
    seen = []

    def handler(request):
        seen.append(request)
        return _ok(request)

    with _client(handler, token_type=token_type) as client:
        client.get(200, None, "user")

    assert seen[0].headers["Authorization"] == "Bearer tok"
    assert "PRIVATE-TOKEN" not in seen[0].headers


def test_no_token_sends_no_credentials():
    seen = []

    def handler(request):
        seen.append(request)
        return _ok(request)

    with _client(handler, token=None) as client:
        client.get(200, None, "version")

    assert "PRIVATE-TOKEN" not in seen[0].headers
    assert "Authorization" not in seen[0].headers


# -- sudo ---------------------------------------------------------------------

def test_sudo_parameter_added_while_set():
    seen = []

    def handler(request):
        seen.append(request)
        return _ok(request)

    with _client(handler) as client:
        client.sudo_as_id = 7
        client.get(200, [("search", "x")], "projects")
        client.sudo_as_id = None
        client.get(200, None, "projects")

    assert seen[0].url.params["sudo"] == "7"
    assert seen[0].url.params["search"] == "x"
    assert "sudo" not in seen[1].url.params


def test_none_query_values_are_dropped():
    seen = []

    def handler(request):
        seen.append(request)
        return _ok(request)

    with _client(handler) as client:
        client.get(200, {"search": None, "owned": "true"}, "projects")

    assert dict(seen[0].url.params) == {"owned": "true"}


# -- errors -------------------------------------------------------------------

def test_unexpected_status_raises_with_server_message():
    def handler(request):
        return httpx.Response(404, json={"message": "404 Project Not Found"})

    with _client(handler) as client, pytest.raises(GitLabApiException) as excinfo:
        client.get(200, None, "projects", 1)

    assert excinfo.value.http_status == 404
    assert excinfo.value.message == "404 Project Not Found"


def test_expected_status_other_than_200():
    """A 200 where 201 is expected is an error too."""
    with _client(_ok) as client, pytest.raises(GitLabApiException) as excinfo:
        client.post(201, [("name", "x")], "projects")
    assert excinfo.value.http_status == 200


def test_transport_failure_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client, pytest.raises(GitLabApiException) as excinfo:
        client.get(200, None, "version")

    assert excinfo.value.http_status == 0
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


# -- bodies -------------------------------------------------------------------

def test_form_body_keeps_repeated_keys():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={})

    with _client(handler) as client:
        client.post(201, [("tag[]", "a"), ("tag[]", "b"), ("name", "x")], "projects")

    body = parse_qs(seen[0].content.decode())
    assert body == {"tag[]": ["a", "b"], "name": ["x"]}


def test_put_and_delete_methods():
    seen = []

    def handler(request):
        seen.append(request.method)
        return httpx.Response(204 if request.method == "DELETE" else 200, json={})

    with _client(handler) as client:
        client.put(200, [("name", "y")], "projects", 1)
        client.delete(204, None, "projects", 1)

    assert seen == ["PUT", "DELETE"]


def test_upload_sends_multipart(tmp_path):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"url": "/uploads/x/readme.md"})

    file_path = tmp_path / "readme.md"
    file_path.write_text("# hi", encoding="utf-8")

    with _client(handler) as client:
        client.upload(201, "file", file_path, "text/markdown", "projects", 1, "uploads")

    request = seen[0]
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="file"; filename="readme.md"' in request.content
    assert b"# hi" in request.content


def test_upload_missing_file(tmp_path):
    with _client(_ok) as client, pytest.raises(GitLabApiException):
        client.upload(201, "file", tmp_path / "missing.txt", None, "projects", 1, "uploads")


# -- logging ------------------------------------------------------------------

def test_mask_headers():
    masked = mask_headers([("PRIVATE-TOKEN", "tok"), ("accept", "*/*"), ("sudo", "3")], DEFAULT_MASKED_HEADER_NAMES)
    assert masked == {"PRIVATE-TOKEN": "********", "accept": "*/*", "sudo": "********"}


def test_request_response_logging_masks_token():
    with _client(_ok) as client:
        client.enable_request_response_logging(max_entity_size=100)
        with capture_logs() as logs:
            client.get(200, None, "version")

    events = [entry["event"] for entry in logs]
    assert events == ["gitlab_request", "gitlab_response"]
    request_log = logs[0]
    headers = {k.lower(): v for k, v in request_log["headers"].items()}
    assert headers["private-token"] == "********"
    assert logs[1]["status"] == 200
    assert json.loads(logs[1]["body"]) == {"ok": True}
