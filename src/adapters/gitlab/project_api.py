"""API de proyectos (`/projects/...`).

Convenciones de esta API:
- Un proyecto se identifica con un id (int), una ruta "grupo/proyecto" (str) o
  una instancia de `Project` (ver `AbstractApi.get_project_id_or_path`).
- Los listados existen en cuatro formas: lista completa (`get_x`), una página
  (`get_x_page`), un `Pager` (`get_x_pager`) y un generador perezoso
  (`get_x_stream`).
- Las variantes `get_optional_*` nunca lanzan `GitLabApiException`: devuelven un
  `Result` que lleva el valor o el error.
- Los estados esperados dependen de la versión: v3 responde 200 donde v4
  responde 201/202/204 (`status_for`).
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterator, TypeVar

import structlog

from adapters.gitlab.abstract_api import AbstractApi
from adapters.gitlab.errors import GitLabApiException
from adapters.gitlab.form import GitLabApiForm
from adapters.gitlab.pager import Pager
from core.domain.constants import AccessLevel, ApiVersion, VariableType, Visibility
from core.domain.models import (
    AccessRequest,
    Badge,
    Event,
    FileUpload,
    Member,
    Project,
    ProjectFetches,
    ProjectFilter,
    ProjectHook,
    ProjectUser,
    PushRules,
    Snippet,
    Variable,
)
from core.domain.result import Result

log = structlog.get_logger(__name__)

R = TypeVar("R")

GITLAB_COM = "https://gitlab.com"

# Campos de `Project` que se envían tal cual al crear/actualizar.
_PROJECT_FORM_FIELDS = (
    "name",
    "path",
    "default_branch",
    "description",
    "issues_enabled",
    "merge_method",
    "merge_requests_enabled",
    "jobs_enabled",
    "wiki_enabled",
    "snippets_enabled",
    "container_registry_enabled",
    "shared_runners_enabled",
    "public_jobs",
    "only_allow_merge_if_pipeline_succeeds",
    "only_allow_merge_if_all_discussions_are_resolved",
    "lfs_enabled",
    "request_access_enabled",
    "repository_storage",
    "approvals_before_merge",
    "printing_merge_request_link_enabled",
    "resolve_outdated_diff_discussions",
    "packages_enabled",
)

_HOOK_EVENT_FIELDS = (
    ("push_events", "push_events"),
    ("push_events_branch_filter", "push_events_branch_filter"),
    ("issues_events", "issues_events"),
    ("confidential_issues_events", "confidential_issues_events"),
    ("merge_requests_events", "merge_requests_events"),
    ("tag_push_events", "tag_push_events"),
    ("note_events", "note_events"),
    ("confidential_note_events", "confidential_note_events"),
    ("job_events", "job_events"),
    ("pipeline_events", "pipeline_events"),
    ("wiki_events", "wiki_page_events"),
    ("repository_update_events", "repository_update_events"),
)

_PUSH_RULE_FIELDS = (
    "deny_delete_tag",
    "member_check",
    "prevent_secrets",
    "commit_message_regex",
    "branch_name_regex",
    "author_email_regex",
    "file_name_regex",
    "max_file_size",
)


def _access_value(level: AccessLevel | int) -> int:
    return int(level)


class ProjectApi(AbstractApi):
    def _optional(self, fn: Callable[..., R], *args: Any, **kwargs: Any) -> Result[R]:
        try:
            return Result.ok(fn(*args, **kwargs))
        except GitLabApiException as exc:
            log.debug("optional_call_failed", call=fn.__name__, http_status=exc.http_status)
            return Result.failure(exc)

    def _filter_form(self, project_filter: ProjectFilter | None) -> GitLabApiForm:
        form = GitLabApiForm()
        if project_filter is None:
            return form
        for name, value in project_filter.model_dump(exclude_none=True).items():
            form.with_param(name, value)
        return form

    # -- statistics ---------------------------------------------------------

    def get_project_statistics(self, project: Any) -> ProjectFetches:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "statistics")
        return self.read(response, ProjectFetches)

    def get_optional_project_statistics(self, project: Any) -> Result[ProjectFetches]:
        return self._optional(self.get_project_statistics, project)

    # -- listing ------------------------------------------------------------

    def get_projects(self, project_filter: ProjectFilter | None = None) -> list[Project]:
        """Every project visible to the caller.

        Unfiltered against gitlab.com this walks hundreds of thousands of public projects;
        prefer a filter, a pager or the stream.
        """

        if project_filter is None and self.api_client.host_url.startswith(GITLAB_COM):
            log.warning("listing_all_gitlab_com_projects", hint="use a filter, a pager or the stream")
        return self.get_projects_pager(project_filter, self.default_per_page).all()

    def get_projects_page(self, page: int, per_page: int, project_filter: ProjectFilter | None = None) -> list[Project]:
        form = self._filter_form(project_filter).with_page(page, per_page)
        return self.read_list(self.get(200, form.as_list(), "projects"), Project)

    def get_projects_pager(self, project_filter: ProjectFilter | None = None, items_per_page: int | None = None) -> Pager[Project]:
        form = self._filter_form(project_filter)
        return Pager(self, Project, items_per_page or self.default_per_page, form.as_list(), "projects")

    def get_projects_stream(self, project_filter: ProjectFilter | None = None) -> Iterator[Project]:
        return self.get_projects_pager(project_filter, self.default_per_page).stream()

    def _with_flag(self, project_filter: ProjectFilter | None, **flags: Any) -> ProjectFilter:
        return (project_filter or ProjectFilter()).model_copy(update=flags)

    def get_member_projects(self, project_filter: ProjectFilter | None = None) -> list[Project]:
        return self.get_projects_pager(self._with_flag(project_filter, membership=True)).all()

    def get_member_projects_page(self, page: int, per_page: int, project_filter: ProjectFilter | None = None) -> list[Project]:
        return self.get_projects_page(page, per_page, self._with_flag(project_filter, membership=True))

    def get_member_projects_pager(self, items_per_page: int | None = None, project_filter: ProjectFilter | None = None) -> Pager[Project]:
        return self.get_projects_pager(self._with_flag(project_filter, membership=True), items_per_page)

    def get_member_projects_stream(self, project_filter: ProjectFilter | None = None) -> Iterator[Project]:
        return self.get_member_projects_pager(None, project_filter).stream()

    def get_owned_projects(self, project_filter: ProjectFilter | None = None) -> list[Project]:
        return self.get_projects_pager(self._with_flag(project_filter, owned=True)).all()

    def get_owned_projects_page(self, page: int, per_page: int, project_filter: ProjectFilter | None = None) -> list[Project]:
        return self.get_projects_page(page, per_page, self._with_flag(project_filter, owned=True))

    def get_owned_projects_pager(self, items_per_page: int | None = None, project_filter: ProjectFilter | None = None) -> Pager[Project]:
        return self.get_projects_pager(self._with_flag(project_filter, owned=True), items_per_page)

    def get_owned_projects_stream(self, project_filter: ProjectFilter | None = None) -> Iterator[Project]:
        return self.get_owned_projects_pager(None, project_filter).stream()

    def get_starred_projects(self, project_filter: ProjectFilter | None = None) -> list[Project]:
        return self.get_projects_pager(self._with_flag(project_filter, starred=True)).all()

    def get_starred_projects_page(self, page: int, per_page: int, project_filter: ProjectFilter | None = None) -> list[Project]:
        return self.get_projects_page(page, per_page, self._with_flag(project_filter, starred=True))

    def get_starred_projects_pager(self, items_per_page: int | None = None, project_filter: ProjectFilter | None = None) -> Pager[Project]:
        return self.get_projects_pager(self._with_flag(project_filter, starred=True), items_per_page)

    def get_starred_projects_stream(self, project_filter: ProjectFilter | None = None) -> Iterator[Project]:
        return self.get_starred_projects_pager(None, project_filter).stream()

    def get_user_projects(self, user: Any, project_filter: ProjectFilter | None = None) -> list[Project]:
        return self.get_user_projects_pager(user, project_filter).all()

    def get_user_projects_page(
        self, user: Any, page: int, per_page: int, project_filter: ProjectFilter | None = None
    ) -> list[Project]:
        form = self._filter_form(project_filter).with_page(page, per_page)
        response = self.get(200, form.as_list(), "users", self.get_user_id_or_username(user), "projects")
        return self.read_list(response, Project)

    def get_user_projects_pager(
        self, user: Any, project_filter: ProjectFilter | None = None, items_per_page: int | None = None
    ) -> Pager[Project]:
        form = self._filter_form(project_filter)
        return Pager(
            self,
            Project,
            items_per_page or self.default_per_page,
            form.as_list(),
            "users",
            self.get_user_id_or_username(user),
            "projects",
        )

    def get_user_projects_stream(self, user: Any, project_filter: ProjectFilter | None = None) -> Iterator[Project]:
        return self.get_user_projects_pager(user, project_filter).stream()

    # -- single project -----------------------------------------------------

    def get_project(self, project: Any, statistics: bool | None = None) -> Project:
        form = GitLabApiForm().with_param("statistics", statistics)
        response = self.get(200, form.as_list(), "projects", self.get_project_id_or_path(project))
        return self.read(response, Project)

    def get_optional_project(self, project: Any, statistics: bool | None = None) -> Result[Project]:
        return self._optional(self.get_project, project, statistics)

    def get_project_by_path(self, namespace: str, project: str, statistics: bool | None = None) -> Project:
        if not namespace:
            raise ValueError("namespace cannot be empty")
        if not project:
            raise ValueError("project cannot be empty")
        return self.get_project(f"{namespace.strip()}/{project.strip()}", statistics)

    def get_optional_project_by_path(
        self, namespace: str, project: str, statistics: bool | None = None
    ) -> Result[Project]:
        return self._optional(self.get_project_by_path, namespace, project, statistics)

    # -- create / update / delete -------------------------------------------

    def _project_form(self, project: Project, *, action: str) -> GitLabApiForm:
        form = GitLabApiForm()
        for name in _PROJECT_FORM_FIELDS:
            form.with_param(name, getattr(project, name))

        if self.is_api_version(ApiVersion.V3):
            form.with_param("visibility_level", project.visibility_level)
            is_public = project.public if project.public is not None else project.visibility is Visibility.PUBLIC
            form.with_param("public", is_public)
            if project.tag_list:
                raise ValueError(f"GitLab API v3 does not support tag lists when {action} projects")
        else:
            visibility = project.visibility
            if visibility is None and project.public is True:
                visibility = Visibility.PUBLIC
            form.with_param("visibility", visibility)
            form.with_param("visibility_level", project.visibility_level)
            if project.tag_list:
                form.with_param("tag_list", ",".join(project.tag_list))
        return form

    def create_project(self, project: Project | None, import_url: str | None = None) -> Project | None:
        """Create `project`; None when neither name nor path is set."""

        if project is None:
            return None
        if not (project.name or "").strip() and not (project.path or "").strip():
            return None

        form = self._project_form(project, action="creating")
        form.with_param("import_url", import_url)
        form.with_param("initialize_with_readme", project.initialize_with_readme)
        if project.namespace is not None and project.namespace.id is not None:
            form.with_param("namespace_id", project.namespace.id)

        response = self.post(201, form.as_list(), "projects")
        return self.read(response, Project)

    def create_project_with_name(self, name: str, namespace_id: int | None = None) -> Project:
        form = GitLabApiForm().with_param("namespace_id", namespace_id).with_param("name", name, required=True)
        return self.read(self.post(201, form.as_list(), "projects"), Project)

    def update_project(self, project: Project) -> Project:
        if project is None:
            raise ValueError("Project instance cannot be null.")
        identifier = self.get_project_id_or_path(project)
        form = self._project_form(project, action="updating")
        return self.read(self.put(200, form.as_list(), "projects", identifier), Project)

    def delete_project(self, project: Any) -> None:
        self.delete(self.status_for(202), None, "projects", self.get_project_id_or_path(project))

    # -- forks --------------------------------------------------------------

    def fork_project(self, project: Any, namespace: str | int) -> Project:
        form = GitLabApiForm().with_param("namespace", namespace, required=True)
        response = self.post(self.status_for(201), form.as_list(), "projects", self.get_project_id_or_path(project), "fork")
        return self.read(response, Project)

    def create_forked_from_relationship(self, project: Any, forked_from_id: int) -> Project:
        response = self.post(
            self.status_for(201), None, "projects", self.get_project_id_or_path(project), "fork", forked_from_id
        )
        return self.read(response, Project)

    def delete_forked_from_relationship(self, project: Any) -> None:
        self.delete(self.status_for(202), None, "projects", self.get_project_id_or_path(project), "fork")

    def get_forks(self, project: Any) -> list[Project]:
        return self.get_forks_pager(project).all()

    def get_forks_page(self, project: Any, page: int, per_page: int) -> list[Project]:
        response = self.get(200, self.page_params(page, per_page), "projects", self.get_project_id_or_path(project), "forks")
        return self.read_list(response, Project)

    def get_forks_pager(self, project: Any, items_per_page: int | None = None) -> Pager[Project]:
        return Pager(
            self, Project, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "forks",
        )

    def get_forks_stream(self, project: Any) -> Iterator[Project]:
        return self.get_forks_pager(project).stream()

    # -- members ------------------------------------------------------------

    def get_members(self, project: Any) -> list[Member]:
        return self.get_members_pager(project).all()

    def get_members_page(self, project: Any, page: int, per_page: int) -> list[Member]:
        response = self.get(200, self.page_params(page, per_page), "projects", self.get_project_id_or_path(project), "members")
        return self.read_list(response, Member)

    def get_members_pager(self, project: Any, items_per_page: int | None = None) -> Pager[Member]:
        return Pager(
            self, Member, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "members",
        )

    def get_members_stream(self, project: Any) -> Iterator[Member]:
        return self.get_members_pager(project).stream()

    def get_all_members(self, project: Any) -> list[Member]:
        """Members including those inherited from ancestor groups."""

        return self.get_all_members_pager(project).all()

    def get_all_members_page(self, project: Any, page: int, per_page: int) -> list[Member]:
        response = self.get(
            200, self.page_params(page, per_page), "projects", self.get_project_id_or_path(project), "members", "all"
        )
        return self.read_list(response, Member)

    def get_all_members_pager(self, project: Any, items_per_page: int | None = None) -> Pager[Member]:
        return Pager(
            self, Member, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "members", "all",
        )

    def get_all_members_stream(self, project: Any) -> Iterator[Member]:
        return self.get_all_members_pager(project).stream()

    def get_member(self, project: Any, user_id: int) -> Member:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "members", user_id)
        return self.read(response, Member)

    def get_optional_member(self, project: Any, user_id: int) -> Result[Member]:
        return self._optional(self.get_member, project, user_id)

    def add_member(
        self, project: Any, user_id: int, access_level: AccessLevel | int, expires_at: date | None = None
    ) -> Member:
        form = (
            GitLabApiForm()
            .with_param("user_id", user_id, required=True)
            .with_param("access_level", _access_value(access_level), required=True)
            .with_param("expires_at", expires_at)
        )
        response = self.post(201, form.as_list(), "projects", self.get_project_id_or_path(project), "members")
        return self.read(response, Member)

    def update_member(
        self, project: Any, user_id: int, access_level: AccessLevel | int, expires_at: date | None = None
    ) -> Member:
        form = (
            GitLabApiForm()
            .with_param("access_level", _access_value(access_level), required=True)
            .with_param("expires_at", expires_at)
        )
        response = self.put(200, form.as_list(), "projects", self.get_project_id_or_path(project), "members", user_id)
        return self.read(response, Member)

    def remove_member(self, project: Any, user_id: int) -> None:
        self.delete(self.status_for(204), None, "projects", self.get_project_id_or_path(project), "members", user_id)

    # -- users / events -----------------------------------------------------

    def get_project_users(self, project: Any, search: str | None = None) -> list[ProjectUser]:
        return self.get_project_users_pager(project, search).all()

    def get_project_users_pager(
        self, project: Any, search: str | None = None, items_per_page: int | None = None
    ) -> Pager[ProjectUser]:
        params = GitLabApiForm().with_param("search", search).as_list()
        return Pager(
            self, ProjectUser, items_per_page or self.default_per_page, params,
            "projects", self.get_project_id_or_path(project), "users",
        )

    def get_project_users_stream(self, project: Any, search: str | None = None) -> Iterator[ProjectUser]:
        return self.get_project_users_pager(project, search).stream()

    def get_project_events(self, project: Any) -> list[Event]:
        return self.get_project_events_pager(project).all()

    def get_project_events_page(self, project: Any, page: int, per_page: int) -> list[Event]:
        response = self.get(200, self.page_params(page, per_page), "projects", self.get_project_id_or_path(project), "events")
        return self.read_list(response, Event)

    def get_project_events_pager(self, project: Any, items_per_page: int | None = None) -> Pager[Event]:
        return Pager(
            self, Event, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "events",
        )

    def get_project_events_stream(self, project: Any) -> Iterator[Event]:
        return self.get_project_events_pager(project).stream()

    # -- hooks --------------------------------------------------------------

    def get_hooks(self, project: Any) -> list[ProjectHook]:
        return self.get_hooks_pager(project).all()

    def get_hooks_page(self, project: Any, page: int, per_page: int) -> list[ProjectHook]:
        response = self.get(200, self.page_params(page, per_page), "projects", self.get_project_id_or_path(project), "hooks")
        return self.read_list(response, ProjectHook)

    def get_hooks_pager(self, project: Any, items_per_page: int | None = None) -> Pager[ProjectHook]:
        return Pager(
            self, ProjectHook, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "hooks",
        )

    def get_hooks_stream(self, project: Any) -> Iterator[ProjectHook]:
        return self.get_hooks_pager(project).stream()

    def get_hook(self, project: Any, hook_id: int) -> ProjectHook:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "hooks", hook_id)
        return self.read(response, ProjectHook)

    def get_optional_hook(self, project: Any, hook_id: int) -> Result[ProjectHook]:
        return self._optional(self.get_hook, project, hook_id)

    def add_hook(
        self,
        project: Any,
        url: str,
        enabled_hooks: ProjectHook,
        enable_ssl_verification: bool,
        secret_token: str | None = None,
    ) -> ProjectHook:
        form = GitLabApiForm().with_param("url", url, required=True)
        for param, field in _HOOK_EVENT_FIELDS:
            form.with_param(param, getattr(enabled_hooks, field))
        form.with_param("enable_ssl_verification", enable_ssl_verification)
        form.with_param("token", secret_token)
        response = self.post(201, form.as_list(), "projects", self.get_project_id_or_path(project), "hooks")
        return self.read(response, ProjectHook)

    def modify_hook(self, hook: ProjectHook) -> ProjectHook:
        form = GitLabApiForm().with_param("url", hook.url, required=True)
        for param, field in _HOOK_EVENT_FIELDS:
            form.with_param(param, getattr(hook, field))
        form.with_param("enable_ssl_verification", hook.enable_ssl_verification)
        form.with_param("token", hook.token)
        response = self.put(200, form.as_list(), "projects", hook.project_id, "hooks", hook.id)
        return self.read(response, ProjectHook)

    def delete_hook(self, project: Any, hook_id: int) -> None:
        self.delete(self.status_for(204), None, "projects", self.get_project_id_or_path(project), "hooks", hook_id)

    # -- snippets -----------------------------------------------------------

    def get_snippets(self, project: Any) -> list[Snippet]:
        return self.get_snippets_pager(project).all()

    def get_snippets_page(self, project: Any, page: int, per_page: int) -> list[Snippet]:
        response = self.get(200, self.page_params(page, per_page), "projects", self.get_project_id_or_path(project), "snippets")
        return self.read_list(response, Snippet)

    def get_snippets_pager(self, project: Any, items_per_page: int | None = None) -> Pager[Snippet]:
        return Pager(
            self, Snippet, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "snippets",
        )

    def get_snippets_stream(self, project: Any) -> Iterator[Snippet]:
        return self.get_snippets_pager(project).stream()

    def get_snippet(self, project: Any, snippet_id: int) -> Snippet:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "snippets", snippet_id)
        return self.read(response, Snippet)

    def get_optional_snippet(self, project: Any, snippet_id: int) -> Result[Snippet]:
        return self._optional(self.get_snippet, project, snippet_id)

    def create_snippet(
        self,
        project: Any,
        title: str,
        file_name: str,
        description: str | None,
        code: str,
        visibility: Visibility,
    ) -> Snippet:
        form = (
            GitLabApiForm()
            .with_param("title", title, required=True)
            .with_param("file_name", file_name, required=True)
            .with_param("description", description)
            .with_param("code", code, required=True)
            .with_param("visibility", visibility, required=True)
        )
        response = self.post(201, form.as_list(), "projects", self.get_project_id_or_path(project), "snippets")
        return self.read(response, Snippet)

    def update_snippet(
        self,
        project: Any,
        snippet_id: int,
        title: str | None = None,
        file_name: str | None = None,
        description: str | None = None,
        code: str | None = None,
        visibility: Visibility | None = None,
    ) -> Snippet:
        form = (
            GitLabApiForm()
            .with_param("title", title)
            .with_param("file_name", file_name)
            .with_param("description", description)
            .with_param("code", code)
            .with_param("visibility", visibility)
        )
        response = self.put(200, form.as_list(), "projects", self.get_project_id_or_path(project), "snippets", snippet_id)
        return self.read(response, Snippet)

    def delete_snippet(self, project: Any, snippet_id: int) -> None:
        self.delete(204, None, "projects", self.get_project_id_or_path(project), "snippets", snippet_id)

    def get_raw_snippet_content(self, project: Any, snippet_id: int) -> str:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "snippets", snippet_id, "raw")
        return response.text

    def get_optional_raw_snippet_content(self, project: Any, snippet_id: int) -> Result[str]:
        return self._optional(self.get_raw_snippet_content, project, snippet_id)

    # -- sharing / archiving ------------------------------------------------

    def share_project(
        self, project: Any, group_id: int, access_level: AccessLevel | int, expires_at: date | None = None
    ) -> None:
        form = (
            GitLabApiForm()
            .with_param("group_id", group_id, required=True)
            .with_param("group_access", _access_value(access_level), required=True)
            .with_param("expires_at", expires_at)
        )
        self.post(201, form.as_list(), "projects", self.get_project_id_or_path(project), "share")

    def unshare_project(self, project: Any, group_id: int) -> None:
        self.delete(self.status_for(204), None, "projects", self.get_project_id_or_path(project), "share", group_id)

    def archive_project(self, project: Any) -> Project:
        response = self.post(201, None, "projects", self.get_project_id_or_path(project), "archive")
        return self.read(response, Project)

    def unarchive_project(self, project: Any) -> Project:
        response = self.post(201, None, "projects", self.get_project_id_or_path(project), "unarchive")
        return self.read(response, Project)

    # -- uploads ------------------------------------------------------------

    def upload_file(self, project: Any, file_path: Path, media_type: str | None = None) -> FileUpload:
        response = self.upload(201, "file", file_path, media_type, "projects", self.get_project_id_or_path(project), "uploads")
        return self.read(response, FileUpload)

    def set_project_avatar(self, project: Any, avatar_file: Path) -> Project:
        response = self.upload(
            200, "avatar", avatar_file, None, "projects", self.get_project_id_or_path(project), method="PUT"
        )
        return self.read(response, Project)

    # -- push rules ---------------------------------------------------------

    def _push_rules_form(self, push_rules: PushRules) -> GitLabApiForm:
        form = GitLabApiForm()
        for name in _PUSH_RULE_FIELDS:
            form.with_param(name, getattr(push_rules, name))
        return form

    def get_push_rules(self, project: Any) -> PushRules:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "push_rule")
        return self.read(response, PushRules)

    def create_push_rules(self, project: Any, push_rules: PushRules) -> PushRules:
        form = self._push_rules_form(push_rules)
        response = self.post(201, form.as_list(), "projects", self.get_project_id_or_path(project), "push_rule")
        return self.read(response, PushRules)

    def update_push_rules(self, project: Any, push_rules: PushRules) -> PushRules:
        form = self._push_rules_form(push_rules)
        response = self.put(200, form.as_list(), "projects", self.get_project_id_or_path(project), "push_rule")
        return self.read(response, PushRules)

    def delete_push_rules(self, project: Any) -> None:
        self.delete(200, None, "projects", self.get_project_id_or_path(project), "push_rule")

    # -- misc ---------------------------------------------------------------

    def star_project(self, project: Any) -> Project:
        response = self.post(self.status_for(201), None, "projects", self.get_project_id_or_path(project), "star")
        return self.read(response, Project)

    def unstar_project(self, project: Any) -> Project:
        response = self.post(self.status_for(201), None, "projects", self.get_project_id_or_path(project), "unstar")
        return self.read(response, Project)

    def get_project_languages(self, project: Any) -> dict[str, float]:
        """Language name -> percentage of the repository."""

        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "languages")
        payload = self._payload(response)
        if not isinstance(payload, dict):
            raise GitLabApiException("Invalid response from server: expected a JSON object")
        return {str(k): float(v) for k, v in payload.items()}

    def transfer_project(self, project: Any, namespace: str | int) -> Project:
        form = GitLabApiForm().with_param("namespace", namespace, required=True)
        response = self.put(200, form.as_list(), "projects", self.get_project_id_or_path(project), "transfer")
        return self.read(response, Project)

    def trigger_housekeeping(self, project: Any) -> None:
        self.post(self.status_for(201), None, "projects", self.get_project_id_or_path(project), "housekeeping")

    # -- variables ----------------------------------------------------------

    def get_variables(self, project: Any) -> list[Variable]:
        return self.get_variables_pager(project).all()

    def get_variables_page(self, project: Any, page: int, per_page: int) -> list[Variable]:
        response = self.get(
            200, self.page_params(page, per_page), "projects", self.get_project_id_or_path(project), "variables"
        )
        return self.read_list(response, Variable)

    def get_variables_pager(self, project: Any, items_per_page: int | None = None) -> Pager[Variable]:
        return Pager(
            self, Variable, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "variables",
        )

    def get_variables_stream(self, project: Any) -> Iterator[Variable]:
        return self.get_variables_pager(project).stream()

    def get_variable(self, project: Any, key: str) -> Variable:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "variables", key)
        return self.read(response, Variable)

    def get_optional_variable(self, project: Any, key: str) -> Result[Variable]:
        return self._optional(self.get_variable, project, key)

    def create_variable(
        self,
        project: Any,
        key: str,
        value: str,
        variable_type: VariableType | None = None,
        protected: bool | None = None,
        masked: bool | None = None,
        environment_scope: str | None = None,
    ) -> Variable:
        form = (
            GitLabApiForm()
            .with_param("key", key, required=True)
            .with_param("value", value, required=True)
            .with_param("variable_type", variable_type)
            .with_param("protected", protected)
            .with_param("masked", masked)
            .with_param("environment_scope", environment_scope)
        )
        response = self.post(201, form.as_list(), "projects", self.get_project_id_or_path(project), "variables")
        return self.read(response, Variable)

    def update_variable(
        self,
        project: Any,
        key: str,
        value: str,
        variable_type: VariableType | None = None,
        protected: bool | None = None,
        masked: bool | None = None,
        environment_scope: str | None = None,
    ) -> Variable:
        form = (
            GitLabApiForm()
            .with_param("value", value, required=True)
            .with_param("variable_type", variable_type)
            .with_param("protected", protected)
            .with_param("masked", masked)
            .with_param("environment_scope", environment_scope)
        )
        response = self.put(200, form.as_list(), "projects", self.get_project_id_or_path(project), "variables", key)
        return self.read(response, Variable)

    def delete_variable(self, project: Any, key: str) -> None:
        self.delete(204, None, "projects", self.get_project_id_or_path(project), "variables", key)

    # -- access requests ----------------------------------------------------

    def get_access_requests(self, project: Any) -> list[AccessRequest]:
        return self.get_access_requests_pager(project).all()

    def get_access_requests_pager(self, project: Any, items_per_page: int | None = None) -> Pager[AccessRequest]:
        return Pager(
            self, AccessRequest, items_per_page or self.default_per_page, None,
            "projects", self.get_project_id_or_path(project), "access_requests",
        )

    def get_access_requests_stream(self, project: Any) -> Iterator[AccessRequest]:
        return self.get_access_requests_pager(project).stream()

    def request_access(self, project: Any) -> AccessRequest:
        response = self.post(201, None, "projects", self.get_project_id_or_path(project), "access_requests")
        return self.read(response, AccessRequest)

    def approve_access_request(
        self, project: Any, user_id: int, access_level: AccessLevel | int | None = None
    ) -> AccessRequest:
        level = _access_value(access_level) if access_level is not None else None
        form = GitLabApiForm().with_param("access_level", level)
        response = self.put(
            201, form.as_list(), "projects", self.get_project_id_or_path(project), "access_requests", user_id, "approve"
        )
        return self.read(response, AccessRequest)

    def deny_access_request(self, project: Any, user_id: int) -> None:
        self.delete(204, None, "projects", self.get_project_id_or_path(project), "access_requests", user_id)

    # -- badges -------------------------------------------------------------

    def get_badges(self, project: Any) -> list[Badge]:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "badges")
        return self.read_list(response, Badge)

    def get_badge(self, project: Any, badge_id: int) -> Badge:
        response = self.get(200, None, "projects", self.get_project_id_or_path(project), "badges", badge_id)
        return self.read(response, Badge)

    def get_optional_badge(self, project: Any, badge_id: int) -> Result[Badge]:
        return self._optional(self.get_badge, project, badge_id)

    def add_badge(self, project: Any, link_url: str, image_url: str) -> Badge:
        form = GitLabApiForm().with_param("link_url", link_url, required=True).with_param("image_url", image_url, required=True)
        response = self.post(201, form.as_list(), "projects", self.get_project_id_or_path(project), "badges")
        return self.read(response, Badge)

    def edit_badge(self, project: Any, badge_id: int, link_url: str | None = None, image_url: str | None = None) -> Badge:
        form = GitLabApiForm().with_param("link_url", link_url).with_param("image_url", image_url)
        response = self.put(200, form.as_list(), "projects", self.get_project_id_or_path(project), "badges", badge_id)
        return self.read(response, Badge)

    def remove_badge(self, project: Any, badge_id: int) -> None:
        self.delete(204, None, "projects", self.get_project_id_or_path(project), "badges", badge_id)

    def preview_badge(self, project: Any, link_url: str, image_url: str) -> Badge:
        form = GitLabApiForm().with_param("link_url", link_url, required=True).with_param("image_url", image_url, required=True)
        response = self.get(200, form.as_list(), "projects", self.get_project_id_or_path(project), "badges", "render")
        return self.read(response, Badge)
