"""CLI principal (`bus`).

Por qué Typer + Rich:
- Typer da subcomandos tipados y `--help` gratis.
- Rich renderiza tablas/paneles legibles; `--json` deja la salida lista para
  pipelines (sin banner ni colores).

Los comandos solo orquestan: toda la lógica vive en `adapters.gitlab` y en
`core.utils`.
"""

from __future__ import annotations

from itertools import islice
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console

from adapters.gitlab.api import GitLabApi
from adapters.gitlab.errors import GitLabApiException
from adapters.json_exporter import export_models_json, models_to_json
from cli import doctor
from cli.ui_components import build_members_table, build_project_panel, build_projects_table, print_banner
from core.config import AppSettings
from core.domain.constants import Visibility
from core.domain.models import ProjectFilter
from core.logging_config import configure_logging
from core.utils import base32

log = structlog.get_logger(__name__)

app = typer.Typer(no_args_is_help=True, help="GitLab API client and utility toolkit.")
projects_app = typer.Typer(no_args_is_help=True, help="Project listing and inspection.")
base32_app = typer.Typer(no_args_is_help=True, help="Base32 encode/decode (RFC 4648 alphabet, no padding).")

app.add_typer(projects_app, name="projects")
app.add_typer(base32_app, name="base32")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def build_api(settings: AppSettings) -> GitLabApi:
    return GitLabApi.from_settings(settings)


def _fail(exc: GitLabApiException) -> None:
    status = f" (HTTP {exc.http_status})" if exc.http_status else ""
    _console.print(f"[red]Error{status}:[/red] {exc.message}")
    if exc.has_validation_errors:
        for field, errors in (exc.validation_errors or {}).items():
            _console.print(f"  [yellow]{field}[/yellow]: {', '.join(errors)}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override BUS_LOG_LEVEL."),
    log_json: bool = typer.Option(False, "--log-json", help="Render logs as JSON."),
) -> None:
    settings = AppSettings()
    configure_logging(log_level or settings.log_level, json=log_json or settings.log_json)


@projects_app.command("list")
def list_projects(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Match name/path."),
    owned: bool = typer.Option(False, "--owned", help="Only projects you own."),
    membership: bool = typer.Option(False, "--membership", help="Only projects you are a member of."),
    starred: bool = typer.Option(False, "--starred", help="Only starred projects."),
    archived: Optional[bool] = typer.Option(None, "--archived/--active", help="Filter by archive state."),
    visibility: Optional[Visibility] = typer.Option(None, "--visibility", help="public, internal or private."),
    per_page: Optional[int] = typer.Option(None, "--per-page", min=1, max=100, help="Page size for each request."),
    limit: int = typer.Option(50, "--limit", "-n", min=1, help="Stop after this many projects."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the JSON to this file."),
) -> None:
    """List projects lazily (only the pages needed for --limit are fetched)."""

    settings = AppSettings()
    project_filter = ProjectFilter(
        search=search,
        owned=owned or None,
        membership=membership or None,
        starred=starred or None,
        archived=archived,
        visibility=visibility,
        simple=True,
    )

    try:
        with build_api(settings) as api:
            if per_page is not None:
                api.default_per_page = per_page
            pager = api.projects.get_projects_pager(project_filter, api.default_per_page)
            projects = list(islice(pager.stream(), limit))
    except GitLabApiException as exc:
        _fail(exc)
        return

    log.info("projects_listed", count=len(projects), total=pager.total_items)

    if output is not None:
        export_models_json(items=projects, output_path=output)
    if as_json:
        typer.echo(models_to_json(projects), nl=False)
        return

    print_banner(_console)
    _console.print(build_projects_table(projects))
    if pager.total_items is not None and pager.total_items > len(projects):
        _console.print(f"[dim]Showing {len(projects)} of {pager.total_items}.[/dim]")


@projects_app.command("show")
def show_project(
    project: str = typer.Argument(..., help="Numeric ID or 'group/project' path."),
    members: bool = typer.Option(False, "--members", help="Also list project members."),
) -> None:
    """Show one project; exits with code 1 when it cannot be fetched."""

    settings = AppSettings()
    target: int | str = int(project) if project.isdigit() else project

    with build_api(settings) as api:
        result = api.projects.get_optional_project(target)
        if result.is_failure:
            _fail(result.error)  # type: ignore[arg-type]
        if not result.is_present:
            _console.print(f"[red]Project not found:[/red] {project}")
            raise typer.Exit(code=1)

        _console.print(build_project_panel(result.get()))
        if members:
            try:
                _console.print(build_members_table(api.projects.get_members(target)))
            except GitLabApiException as exc:
                _fail(exc)


@app.command()
def version() -> None:
    """Print the GitLab server version."""

    settings = AppSettings()
    try:
        with build_api(settings) as api:
            server = api.get_version()
    except GitLabApiException as exc:
        _fail(exc)
        return
    typer.echo(f"{server.version} {server.revision or ''}".rstrip())


@base32_app.command("encode")
def base32_encode(text: str = typer.Argument(..., help="UTF-8 text to encode.")) -> None:
    typer.echo(base32.encode_str(text))


@base32_app.command("decode")
def base32_decode(text: str = typer.Argument(..., help="Base32 text to decode.")) -> None:
    try:
        typer.echo(base32.decode_str(text))
    except UnicodeDecodeError as exc:
        raise typer.BadParameter("decoded bytes are not valid UTF-8") from exc


def run() -> None:
    app()
