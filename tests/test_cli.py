"""CLI tests: `bus` commands against a mocked GitLab server.

Tests cover:
    - projects list: --json output, --limit stops fetching early, --output file
    - projects show: panel on success, exit code 1 on HTTP errors
    - version, base32 encode/decode
    - doctor run / setup-token
"""

import json

import httpx
import pytest
from structlog.testing import capture_logs
from typer.testing import CliRunner

from cli import doctor
from cli import main as cli_main
from conftest import HOST, paginated, project_items
from core.config import write_user_env_vars

runner = CliRunner()


@pytest.fixture(autouse=True)
def _captured_logs(monkeypatch):
    monkeypatch.setattr(cli_main, "configure_logging", lambda *args, **kwargs: None)
    with capture_logs() as logs:
        yield logs


@pytest.fixture
def use_api(make_api, monkeypatch):
    """Route the CLI to a mocked server: `use_api(handler)` -> Recorder."""

    def _use(handler):
        api, recorder = make_api(handler)
        monkeypatch.setattr(cli_main, "build_api", lambda settings: api)
        monkeypatch.setattr(doctor, "build_api", lambda settings: api)
        return recorder

    return _use


# -- projects -----------------------------------------------------------------

def test_projects_list_json_respects_limit(use_api, _captured_logs):
    recorder = use_api(paginated(project_items(30)))

    result = runner.invoke(cli_main.app, ["projects", "list", "--json", "--limit", "3", "--per-page", "5"])

    assert result.exit_code == 0, result.output
    assert [p["id"] for p in json.loads(result.stdout)] == [1, 2, 3]
    assert len(recorder.requests) == 1
    assert recorder.requests[0].url.params["simple"] == "true"
    assert any(entry["event"] == "projects_listed" and entry["count"] == 3 for entry in _captured_logs)


def test_projects_list_table_and_output_file(use_api, tmp_path):
    use_api(paginated(project_items(2)))
    output = tmp_path / "projects.json"

    result = runner.invoke(cli_main.app, ["projects", "list", "--owned", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert "group/p1" in result.stdout
    assert [p["name"] for p in json.loads(output.read_text(encoding="utf-8"))] == ["p1", "p2"]


def test_projects_list_http_error(use_api):
    use_api(lambda request: httpx.Response(401, json={"message": "401 Unauthorized"}))

    result = runner.invoke(cli_main.app, ["projects", "list"])

    assert result.exit_code == 1
    assert "401 Unauthorized" in result.stdout


def test_projects_show(use_api):
    recorder = use_api(
        lambda request: httpx.Response(
            200, json={"id": 7, "path_with_namespace": "group/demo", "default_branch": "main"}
        )
    )

    result = runner.invoke(cli_main.app, ["projects", "show", "group/demo"])

    assert result.exit_code == 0, result.output
    assert "group/demo" in result.stdout
    assert "Default branch: main" in result.stdout
    assert recorder.requests[0].url.raw_path.startswith(b"/api/v4/projects/group%2Fdemo")


def test_projects_show_numeric_id_with_members(use_api):
    def handler(request):
        if request.url.path == "/api/v4/projects/7":
            return httpx.Response(200, json={"id": 7, "name": "demo"})
        return paginated([{"id": 1, "username": "dev", "access_level": 30}])(request)

    recorder = use_api(handler)

    result = runner.invoke(cli_main.app, ["projects", "show", "7", "--members"])

    assert result.exit_code == 0, result.output
    assert "DEVELOPER" in result.stdout
    assert recorder.requests[1].url.path == "/api/v4/projects/7/members"


def test_projects_show_not_found(use_api):
    use_api(lambda request: httpx.Response(404, json={"message": "404 Project Not Found"}))

    result = runner.invoke(cli_main.app, ["projects", "show", "group/missing"])

    assert result.exit_code == 1
    assert "404 Project Not Found" in result.stdout


# -- version / base32 ---------------------------------------------------------

def test_version(use_api):
    use_api(lambda request: httpx.Response(200, json={"version": "16.1.0", "revision": "abc123"}))

    result = runner.invoke(cli_main.app, ["version"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "16.1.0 abc123"


def test_base32_encode_decode():
    encoded = runner.invoke(cli_main.app, ["base32", "encode", "foobar"])
    decoded = runner.invoke(cli_main.app, ["base32", "decode", "mzxw6ytboi"])

    assert encoded.stdout.strip() == "MZXW6YTBOI"
    assert decoded.stdout.strip() == "foobar"


def test_base32_decode_rejects_non_utf8():
    result = runner.invoke(cli_main.app, ["base32", "decode", "7777"])
    assert result.exit_code == 2


# -- doctor -------------------------------------------------------------------

def _doctor_handler(request):
    if request.url.path == "/api/v4/version":
        return httpx.Response(200, json={"version": "16.1.0"})
    if request.url.path == "/api/v4/user":
        return httpx.Response(200, json={"id": 1, "username": "root"})
    return httpx.Response(404, json={"message": "404 Not Found"})


def test_doctor_run_ok(use_api, monkeypatch):
    monkeypatch.setenv("BUS_GITLAB_URL", HOST)
    monkeypatch.setenv("BUS_AUTH_TOKEN", "tok")
    use_api(_doctor_handler)

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "GitLab 16.1.0" in result.stdout
    assert "@root" in result.stdout


def test_doctor_run_fails_on_unreachable_server(use_api, monkeypatch):
    monkeypatch.setenv("BUS_AUTH_TOKEN", "tok")

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    use_api(handler)

    result = runner.invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 1
    assert "FAIL" in result.stdout


def test_doctor_setup_token_writes_env(monkeypatch, tmp_path):
    env_path = tmp_path / ".env"
    monkeypatch.setattr(doctor, "write_user_env_vars", lambda values: write_user_env_vars(values, env_path))

    result = runner.invoke(cli_main.app, ["doctor", "setup-token"], input=f"{HOST}\naccess\nglpat-123\n")

    assert result.exit_code == 0, result.output
    content = env_path.read_text(encoding="utf-8")
    assert f"BUS_GITLAB_URL={HOST}" in content
    assert "BUS_TOKEN_TYPE=access" in content
    assert "BUS_AUTH_TOKEN=glpat-123" in content


def test_doctor_setup_token_rejects_unknown_type(monkeypatch, tmp_path):
    monkeypatch.setattr(doctor, "write_user_env_vars", lambda values: write_user_env_vars(values, tmp_path / ".env"))

    result = runner.invoke(cli_main.app, ["doctor", "setup-token"], input=f"{HOST}\nweird\ntok\n")

    assert result.exit_code == 2
    assert not (tmp_path / ".env").exists()
