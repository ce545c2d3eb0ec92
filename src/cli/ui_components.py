"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Member, Project


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("BUS-TOOLKIT", style="bold cyan")
    subtitle = Text("GitLab API • Paginación • Utilidades", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_projects_table(projects: Iterable[Project], *, title: str = "Projects") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Path", style="white")
    table.add_column("Visibility", style="green")
    table.add_column("Stars", justify="right")
    table.add_column("URL", style="magenta")
    for project in projects:
        table.add_row(
            str(project.id) if project.id is not None else "-",
            project.path_with_namespace or project.name or "-",
            project.visibility.value if project.visibility else "-",
            str(project.star_count) if project.star_count is not None else "-",
            project.web_url or "",
        )
    return table


def build_members_table(members: Iterable[Member]) -> Table:
    table = Table(title="Members")
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Username", style="white")
    table.add_column("Access", style="green")
    table.add_column("Expires", style="dim")
    for member in members:
        table.add_row(
            str(member.id) if member.id is not None else "-",
            member.username or "-",
            member.access_level.name if member.access_level is not None else "-",
            member.expires_at.isoformat() if member.expires_at else "",
        )
    return table


def build_project_panel(project: Project) -> Panel:
    """Panel con el detalle de un proyecto."""

    title = Text(project.path_with_namespace or project.name or "project", style="bold yellow")
    body = Text()
    if project.description:
        body.append(project.description.strip() + "\n\n")
    body.append(f"ID: {project.id}\n")
    if project.default_branch:
        body.append(f"Default branch: {project.default_branch}\n")
    if project.visibility:
        body.append(f"Visibility: {project.visibility.value}\n")
    if project.tag_list:
        body.append(f"Tags: {', '.join(project.tag_list)}\n")
    if project.web_url:
        body.append(f"\n{project.web_url}", style="dim")

    return Panel(body, title=title, border_style="yellow")
