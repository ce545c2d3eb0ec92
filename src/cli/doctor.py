"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.gitlab.api import GitLabApi
from adapters.gitlab.errors import GitLabApiException
from core.config import AppSettings, get_user_env_file, read_user_env_vars, write_user_env_vars
from core.domain.constants import TokenType

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def build_api(settings: AppSettings) -> GitLabApi:
    return GitLabApi.from_settings(settings)


def _check_server(api: GitLabApi) -> tuple[bool, str]:
    try:
        version = api.get_version()
        return True, f"GitLab {version.version}" + (f" ({version.revision})" if version.revision else "")
    except GitLabApiException as exc:
        status = f"HTTP {exc.http_status}: " if exc.http_status else ""
        return False, f"{status}{exc.message}"


def _check_user(api: GitLabApi) -> tuple[bool, str]:
    try:
        user = api.users.get_current_user()
        return True, f"@{user.username}" if user.username else "OK"
    except GitLabApiException as exc:
        return False, f"HTTP {exc.http_status}: {exc.message}" if exc.http_status else exc.message


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="BUS-TOOLKIT Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("GitLab URL", "OK", f"{settings.gitlab_url.rstrip('/')}{settings.api_version.api_namespace}")
    if settings.auth_token:
        table.add_row("Auth token", "OK", f"{settings.token_type.value} token set")
    else:
        table.add_row("Auth token", "MISSING", "Run `bus doctor setup-token`")
    if settings.ignore_certificate_errors:
        table.add_row("TLS", "WARN", "Certificate validation disabled")
    user_env = read_user_env_vars()
    table.add_row("User config", "OK" if user_env else "-", str(get_user_env_file()))

    ok_server = ok_user = False
    with build_api(settings) as api:
        ok_server, detail_server = _check_server(api)
        table.add_row("Server", "OK" if ok_server else "FAIL", detail_server)
        if settings.auth_token:
            ok_user, detail_user = _check_user(api)
            table.add_row("Authenticated user", "OK" if ok_user else "FAIL", detail_user)

    _console.print(table)

    if not ok_server or (settings.auth_token and not ok_user):
        raise typer.Exit(code=1)


@app.command(name="setup-token")
def setup_token() -> None:
    """Interactive token setup (stores config in the user config .env).

    No manual .env editing needed.
    """

    url = typer.prompt("GitLab URL", default="https://gitlab.com", show_default=True).strip()
    token_type = typer.prompt(
        "Token type (private, access, oauth2_access)",
        default=TokenType.PRIVATE.value,
        show_default=True,
    ).strip().lower()
    token = typer.prompt("Token", hide_input=True, confirmation_prompt=False).strip()

    if not url or not token:
        raise typer.BadParameter("url and token are required")
    try:
        TokenType(token_type)
    except ValueError as exc:
        raise typer.BadParameter(f"unknown token type: {token_type}") from exc

    env_path = write_user_env_vars(
        {
            "BUS_GITLAB_URL": url,
            "BUS_TOKEN_TYPE": token_type,
            "BUS_AUTH_TOKEN": token,
        }
    )

    _console.print(f"[green]Saved GitLab config to:[/green] {env_path}")
