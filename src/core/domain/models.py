"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Las respuestas JSON de GitLab se normalizan en un único paso (`model_validate`).

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
- Se ignoran los campos desconocidos: GitLab añade campos en cada versión.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.constants import AccessLevel, MergeMethod, ProjectOrderBy, SortOrder, VariableType, Visibility


class GitLabModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Namespace(GitLabModel):
    id: int | None = None
    name: str | None = None
    path: str | None = None
    kind: str | None = None
    full_path: str | None = None


class User(GitLabModel):
    id: int | None = None
    username: str | None = None
    name: str | None = None
    email: str | None = None
    state: str | None = None
    avatar_url: str | None = None
    web_url: str | None = None
    is_admin: bool | None = None
    created_at: datetime | None = None


class ProjectStatistics(GitLabModel):
    commit_count: int | None = None
    storage_size: int | None = None
    repository_size: int | None = None
    lfs_objects_size: int | None = None
    job_artifacts_size: int | None = None


class Project(GitLabModel):
    """Proyecto GitLab.

    Por qué tantos campos opcionales:
    - El mismo modelo sirve para respuestas (`simple=true` devuelve pocos campos)
      y como plantilla de creación/actualización (solo se envía lo no nulo).
    """

    id: int | None = Field(default=None, description="ID numérico del proyecto.")
    name: str | None = Field(default=None, description="Nombre legible.")
    path: str | None = Field(default=None, description="Slug del proyecto dentro del namespace.")
    name_with_namespace: str | None = None
    path_with_namespace: str | None = Field(
        default=None,
        description="Ruta completa 'grupo/proyecto'; identifica al proyecto si no hay ID.",
    )
    description: str | None = Field(default=None, max_length=100_000)
    default_branch: str | None = None
    visibility: Visibility | None = None
    visibility_level: int | None = None
    public: bool | None = Field(default=None, description="Solo API v3.")
    archived: bool | None = None
    web_url: str | None = None
    http_url_to_repo: str | None = None
    ssh_url_to_repo: str | None = None
    namespace: Namespace | None = None
    owner: User | None = None
    created_at: datetime | None = None
    last_activity_at: datetime | None = None
    star_count: int | None = None
    forks_count: int | None = None
    open_issues_count: int | None = None
    tag_list: list[str] = Field(default_factory=list)

    issues_enabled: bool | None = None
    merge_requests_enabled: bool | None = None
    jobs_enabled: bool | None = None
    wiki_enabled: bool | None = None
    snippets_enabled: bool | None = None
    container_registry_enabled: bool | None = None
    shared_runners_enabled: bool | None = None
    public_jobs: bool | None = None
    lfs_enabled: bool | None = None
    request_access_enabled: bool | None = None
    packages_enabled: bool | None = None
    initialize_with_readme: bool | None = None
    only_allow_merge_if_pipeline_succeeds: bool | None = None
    only_allow_merge_if_all_discussions_are_resolved: bool | None = None
    printing_merge_request_link_enabled: bool | None = None
    resolve_outdated_diff_discussions: bool | None = None
    merge_method: MergeMethod | None = None
    repository_storage: str | None = None
    approvals_before_merge: int | None = None

    statistics: ProjectStatistics | None = None


class FetchDay(GitLabModel):
    count: int = 0
    day: date = Field(..., alias="date")


class FetchStats(GitLabModel):
    total: int = 0
    days: list[FetchDay] = Field(default_factory=list)


class ProjectFetches(GitLabModel):
    fetches: FetchStats = Field(default_factory=FetchStats)


class Member(GitLabModel):
    id: int | None = None
    username: str | None = None
    name: str | None = None
    state: str | None = None
    avatar_url: str | None = None
    web_url: str | None = None
    access_level: AccessLevel | None = None
    expires_at: date | None = None
    created_at: datetime | None = None

    @field_validator("access_level", mode="before")
    @classmethod
    def _access_level(cls, value: Any) -> AccessLevel | None:
        return AccessLevel.for_value(value)


class ProjectUser(GitLabModel):
    id: int | None = None
    username: str | None = None
    name: str | None = None
    state: str | None = None
    avatar_url: str | None = None
    web_url: str | None = None


class Event(GitLabModel):
    id: int | None = None
    title: str | None = None
    project_id: int | None = None
    action_name: str | None = None
    target_id: int | None = None
    target_iid: int | None = None
    target_type: str | None = None
    target_title: str | None = None
    author_id: int | None = None
    author_username: str | None = None
    author: User | None = None
    created_at: datetime | None = None


class ProjectHook(GitLabModel):
    id: int | None = None
    url: str | None = None
    project_id: int | None = None
    push_events: bool | None = None
    push_events_branch_filter: str | None = None
    issues_events: bool | None = None
    confidential_issues_events: bool | None = None
    merge_requests_events: bool | None = None
    tag_push_events: bool | None = None
    note_events: bool | None = None
    confidential_note_events: bool | None = None
    job_events: bool | None = None
    pipeline_events: bool | None = None
    wiki_page_events: bool | None = None
    repository_update_events: bool | None = None
    enable_ssl_verification: bool | None = None
    token: str | None = None
    created_at: datetime | None = None


class Snippet(GitLabModel):
    id: int | None = None
    title: str | None = None
    file_name: str | None = None
    description: str | None = None
    visibility: Visibility | None = None
    author: User | None = None
    web_url: str | None = None
    raw_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Variable(GitLabModel):
    key: str
    value: str | None = None
    variable_type: VariableType | None = None
    protected: bool | None = None
    masked: bool | None = None
    environment_scope: str | None = None


class AccessRequest(GitLabModel):
    id: int | None = None
    username: str | None = None
    name: str | None = None
    state: str | None = None
    created_at: datetime | None = None
    requested_at: datetime | None = None
    access_level: AccessLevel | None = None

    @field_validator("access_level", mode="before")
    @classmethod
    def _access_level(cls, value: Any) -> AccessLevel | None:
        return AccessLevel.for_value(value)


class Badge(GitLabModel):
    id: int | None = None
    link_url: str | None = None
    image_url: str | None = None
    rendered_link_url: str | None = None
    rendered_image_url: str | None = None
    kind: str | None = None


class PushRules(GitLabModel):
    id: int | None = None
    project_id: int | None = None
    commit_message_regex: str | None = None
    branch_name_regex: str | None = None
    deny_delete_tag: bool | None = None
    member_check: bool | None = None
    prevent_secrets: bool | None = None
    author_email_regex: str | None = None
    file_name_regex: str | None = None
    max_file_size: int | None = None
    created_at: datetime | None = None


class FileUpload(GitLabModel):
    alt: str | None = None
    url: str | None = None
    markdown: str | None = None


class Version(GitLabModel):
    version: str
    revision: str | None = None


class OauthTokenResponse(GitLabModel):
    access_token: str = Field(..., min_length=1)
    token_type: str | None = None
    refresh_token: str | None = None
    scope: str | None = None
    created_at: int | None = None


class Session(GitLabModel):
    id: int | None = None
    username: str | None = None
    email: str | None = None
    name: str | None = None
    private_token: str = Field(..., min_length=1)
    is_admin: bool | None = None


class ProjectFilter(BaseModel):
    """Filtros aceptados por `GET /projects` (y `GET /users/:id/projects`).

    Solo se envían los campos no nulos.
    """

    archived: bool | None = None
    visibility: Visibility | None = None
    order_by: ProjectOrderBy | None = None
    sort: SortOrder | None = None
    search: str | None = None
    simple: bool | None = None
    owned: bool | None = None
    membership: bool | None = None
    starred: bool | None = None
    statistics: bool | None = None
    with_custom_attributes: bool | None = None
    with_issues_enabled: bool | None = None
    with_merge_requests_enabled: bool | None = None
    min_access_level: AccessLevel | None = None
