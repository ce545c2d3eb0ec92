"""Lazy, page-at-a-time access to a paginated GitLab collection.

Page boundaries come from the response headers (`X-Total-Pages`, or
`X-Next-Page` when the server omits totals for very large collections), never
from counting items on the client side.

Three ways to consume a pager:
- `all()` materializes every item;
- `next()` / `page(n)` / iterating the pager pulls one page at a time;
- `stream()` is a lazy generator that fetches a page only when its items are
  needed. It can be issued once per pager.

A `Pager` is not thread-safe and is meant to be discarded after use.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, Sequence, TypeVar

from pydantic import ValidationError

from adapters.gitlab.errors import GitLabApiException
from adapters.gitlab.form import PAGE_PARAM, PER_PAGE_PARAM
from core.interfaces.page_source import PageResponse, PageSource

T = TypeVar("T")

PAGE_HEADER = "X-Page"
PER_PAGE_HEADER = "X-Per-Page"
TOTAL_HEADER = "X-Total"
TOTAL_PAGES_HEADER = "X-Total-Pages"
NEXT_PAGE_HEADER = "X-Next-Page"


def _int_header(response: PageResponse, name: str) -> int | None:
    raw = response.headers.get(name)
    if raw is None or not str(raw).strip():
        return None
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise GitLabApiException(f"Invalid '{name}' header value ({raw}) from server") from exc


class Pager(Generic[T]):
    """Fetches successive pages of `path_args` and parses them into `model_type`.

    The constructor fetches page 1 (so a bad request fails early) and keeps it
    cached, which means `all()` costs exactly one request per page.
    """

    def __init__(
        self,
        api: PageSource,
        model_type: type[T],
        items_per_page: int,
        query_params: Sequence[tuple[str, Any]] | None = None,
        *path_args: object,
    ) -> None:
        if items_per_page < 1:
            raise ValueError("items_per_page must be >= 1")

        self._api = api
        self._model_type = model_type
        self._path_args = path_args
        self._query = [
            (k, v) for k, v in (query_params or []) if k not in (PAGE_PARAM, PER_PAGE_PARAM)
        ]
        self._requested_per_page = items_per_page

        self._items_per_page = items_per_page
        self._total_pages: int | None = None
        self._total_items: int | None = None
        self._next_page: int | None = None
        self._last_fetched_page = 0

        self._current_page = 0
        self._current_items: list[T] = []
        self._stream_issued = False

        response = self._fetch(1)
        self._first_items = self._parse(response)
        self._first_next_page = self._next_page

    @property
    def items_per_page(self) -> int:
        return self._items_per_page

    @property
    def total_pages(self) -> int | None:
        """Total page count, or None when the server did not report it."""

        return self._total_pages

    @property
    def total_items(self) -> int | None:
        return self._total_items

    @property
    def current_page(self) -> int:
        return self._current_page

    def _fetch(self, page_number: int) -> PageResponse:
        params = [*self._query, (PAGE_PARAM, page_number), (PER_PAGE_PARAM, self._requested_per_page)]
        response = self._api.get(200, params, *self._path_args)

        per_page = _int_header(response, PER_PAGE_HEADER)
        if per_page is not None:
            self._items_per_page = per_page
        self._total_pages = _int_header(response, TOTAL_PAGES_HEADER)
        self._total_items = _int_header(response, TOTAL_HEADER)
        self._next_page = _int_header(response, NEXT_PAGE_HEADER)
        self._last_fetched_page = _int_header(response, PAGE_HEADER) or page_number
        return response

    def _parse(self, response: PageResponse) -> list[T]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise GitLabApiException("Invalid JSON in paginated response") from exc
        if not isinstance(payload, list):
            raise GitLabApiException("Invalid response from server: expected a JSON list")
        if self._model_type is dict:
            return list(payload)
        try:
            return [self._model_type.model_validate(item) for item in payload]  # type: ignore[attr-defined]
        except ValidationError as exc:
            raise GitLabApiException(f"Unexpected {self._model_type.__name__} payload: {exc}") from exc

    def has_next(self) -> bool:
        if self._total_pages is not None:
            return self._current_page < self._total_pages
        # Sin totales: solo se sabe si hay siguiente respecto a la última página pedida.
        if self._current_page < self._last_fetched_page:
            return True
        return self._next_page is not None

    def page(self, page_number: int) -> list[T]:
        """Return the items of `page_number` and make it the current page."""

        if page_number < 1:
            raise LookupError(f"page {page_number} does not exist")
        if self._total_pages is not None and page_number > self._total_pages and page_number > 1:
            raise LookupError(f"page {page_number} does not exist (total pages: {self._total_pages})")

        if page_number == 1:
            items = self._first_items
            self._next_page = self._first_next_page
            self._last_fetched_page = 1
        else:
            items = self._parse(self._fetch(page_number))

        self._current_page = page_number
        self._current_items = items
        return items

    def next(self) -> list[T]:
        if not self.has_next():
            raise LookupError("no more pages")
        return self.page(self._current_page + 1)

    def first(self) -> list[T]:
        return self.page(1)

    def last(self) -> list[T]:
        if self._total_pages is not None:
            return self.page(max(self._total_pages, 1))
        items = self.current() if self._current_page else self.first()
        while self.has_next():
            items = self.next()
        return items

    def current(self) -> list[T]:
        return list(self._current_items)

    def all(self) -> list[T]:
        """Fetch every item, starting from page 1 regardless of the current page."""

        self._current_page = 0
        items: list[T] = []
        while self.has_next():
            items.extend(self.next())
        return items

    def stream(self) -> Iterator[T]:
        """Lazy generator over every item, starting from page 1."""

        if self._stream_issued:
            raise RuntimeError("stream already issued for this pager")
        self._stream_issued = True
        self._current_page = 0
        return self._iter_items()

    def _iter_items(self) -> Iterator[T]:
        while self.has_next():
            yield from self.next()

    def __iter__(self) -> Iterator[list[T]]:
        self._current_page = 0
        while self.has_next():
            yield self.next()
