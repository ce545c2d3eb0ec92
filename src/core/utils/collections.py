"""Helpers de colecciones.

Las operaciones de conjunto tratan sus entradas como multiconjuntos: para cada
elemento `e`, el resultado contiene `max` (unión), `min` (intersección) o
`|diferencia|` (disyunción) de las apariciones de `e` en cada entrada. El orden
de salida sigue la primera aparición de cada elemento.

Los elementos deben ser hashables.
"""

from __future__ import annotations

from collections import Counter, deque
from typing import Any, Callable, Hashable, Iterable, Sequence, TypeVar

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


def count_map(items: Iterable[T]) -> dict[T, int]:
    return dict(Counter(items))


def is_empty(items: Iterable[Any] | None) -> bool:
    if items is None:
        return True
    try:
        return len(items) == 0  # type: ignore[arg-type]
    except TypeError:
        return next(iter(items), _MISSING) is _MISSING


def is_not_empty(items: Iterable[Any] | None) -> bool:
    return not is_empty(items)


def _ordered_keys(*collections: Sequence[T]) -> list[T]:
    return list(dict.fromkeys(e for coll in collections for e in coll))


def _expand(keys: Iterable[T], counts: Callable[[T], int]) -> list[T]:
    out: list[T] = []
    for key in keys:
        out.extend([key] * counts(key))
    return out


def _union2(a: Sequence[T], b: Sequence[T]) -> list[T]:
    if not a:
        return list(b)
    if not b:
        return list(a)
    ca, cb = Counter(a), Counter(b)
    return _expand(_ordered_keys(a, b), lambda e: max(ca[e], cb[e]))


def _intersection2(a: Sequence[T], b: Sequence[T]) -> list[T]:
    if not a or not b:
        return []
    ca, cb = Counter(a), Counter(b)
    return _expand(_ordered_keys(a), lambda e: min(ca[e], cb[e]))


def union(first: Iterable[T], second: Iterable[T], *others: Iterable[T]) -> list[T]:
    result = _union2(list(first), list(second))
    for other in others:
        result = _union2(result, list(other))
    return result


def intersection(first: Iterable[T], second: Iterable[T], *others: Iterable[T]) -> list[T]:
    result = _intersection2(list(first), list(second))
    for other in others:
        if not result:
            break
        result = _intersection2(result, list(other))
    return result


def disjunction(first: Iterable[T], second: Iterable[T]) -> list[T]:
    """Symmetric multiset difference; with one side empty, the other side as is."""

    a, b = list(first), list(second)
    if not a:
        return b
    if not b:
        return a
    ca, cb = Counter(a), Counter(b)
    return _expand(_ordered_keys(a, b), lambda e: abs(ca[e] - cb[e]))


def contains_any(first: Iterable[Any], second: Iterable[Any]) -> bool:
    a = list(first)
    b = list(second)
    if not a or not b:
        return False
    smaller, larger = (a, b) if len(a) <= len(b) else (b, a)
    pool = set(larger)
    return any(e in pool for e in smaller)


def distinct(items: Iterable[T]) -> list[T]:
    return list(dict.fromkeys(items))


def sub(items: Sequence[T], start: int, end: int, step: int = 1) -> list[T]:
    """Slice with negative indexes counted from the end and swapped bounds allowed."""

    size = len(items)
    if size == 0:
        return []
    if start < 0:
        start += size
    if end < 0:
        end += size
    if start == size:
        return []
    if start > end:
        start, end = end, start
    if end > size:
        if start >= size:
            return []
        end = size
    return list(items[start:end:max(step, 1)])


def split(items: Iterable[T], size: int) -> list[list[T]]:
    if size < 1:
        raise ValueError("size must be >= 1")
    chunks: list[list[T]] = []
    current: list[T] = []
    for item in items:
        if len(current) >= size:
            chunks.append(current)
            current = []
        current.append(item)
    if current:
        chunks.append(current)
    return chunks


def page(page_no: int, page_size: int, items: Sequence[T]) -> list[T]:
    """1-based page of `items`; an out of range page is empty."""

    if not items:
        return []
    if len(items) <= page_size:
        return list(items) if page_no <= 1 else []
    page_no = max(page_no, 1)
    page_size = max(page_size, 0)
    start = (page_no - 1) * page_size
    return list(items[start:start + page_size])


def total_page(total_count: int, page_size: int) -> int:
    if page_size == 0:
        return 0
    return -(-total_count // page_size)


def sort_page_all(
    page_no: int,
    page_size: int,
    *collections: Iterable[T],
    key: Callable[[T], Any] | None = None,
) -> list[T]:
    """Merge `collections`, sort them (when `key` is given) and return one page."""

    merged: list[T] = [item for coll in collections for item in coll]
    if key is not None:
        merged.sort(key=key)
    return page(page_no, page_size, merged)


def rainbow(current_page: int, page_count: int, display_count: int = 10) -> list[int]:
    """Page numbers for a pager bar of `display_count` slots centred on `current_page`."""

    is_even = display_count % 2 == 0
    left = display_count // 2
    right = display_count // 2 + (1 if is_even else 0)

    if page_count < display_count:
        return list(range(1, page_count + 1))
    if current_page <= left:
        first = 1
    elif current_page > page_count - right:
        first = page_count - display_count + 1
    else:
        first = current_page - left + (1 if is_even else 0)
    return list(range(first, first + display_count))


def zip_to_dict(
    keys: Iterable[K] | str,
    values: Iterable[V] | str,
    delimiter: str | None = None,
) -> dict[Any, Any]:
    """Pair keys with values; strings are first split on `delimiter`."""

    if isinstance(keys, str):
        keys = keys.split(delimiter or ",")
    if isinstance(values, str):
        values = values.split(delimiter or ",")
    return dict(zip(keys, values))


def group(items: Iterable[T], key: Callable[[T], Hashable] | None = None) -> list[list[T]]:
    """Bucket `items` by `key` (the item itself by default), in first-seen order."""

    key = key or (lambda item: item)
    buckets: dict[Hashable, list[T]] = {}
    for item in items:
        buckets.setdefault(key(item), []).append(item)
    return list(buckets.values())


def find_one(items: Iterable[T], predicate: Callable[[T], bool]) -> T | None:
    return next((item for item in items if predicate(item)), None)


def get_field_values(items: Iterable[Any], field_name: str) -> list[Any]:
    values: list[Any] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, dict):
            values.append(item.get(field_name))
        else:
            values.append(getattr(item, field_name, None))
    return values


def first_not_none(items: Iterable[T | None]) -> T | None:
    return next((item for item in items if item is not None), None)


def join(items: Iterable[Any], conjunction: str) -> str:
    return conjunction.join("" if item is None else str(item) for item in items)


def pop_part(stack: list[T] | deque[T], part_size: int) -> list[T]:
    """Pop up to `part_size` items: from the top of a list, the head of a deque."""

    popped: list[T] = []
    pop = stack.popleft if isinstance(stack, deque) else stack.pop
    for _ in range(min(part_size, len(stack))):
        popped.append(pop())
    return popped
