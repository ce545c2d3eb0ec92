"""Collection helper tests: multiset algebra, paging and misc helpers.

Tests cover:
    - union/intersection/disjunction as max/min/|diff| of element counts
    - First-seen output order
    - page/total_page/rainbow for pager bars
    - sub/split/zip_to_dict/group/pop_part
"""

from collections import Counter, deque

import pytest

from core.utils import collections as cu

A = ["a", "b", "b", "c", "x"]
B = ["b", "c", "c", "d", "x", "x"]


# -- multiset algebra ---------------------------------------------------------

def test_union_takes_max_count():
    result = cu.union(A, B)
    counts = Counter(result)
    for element in set(A) | set(B):
        assert counts[element] == max(A.count(element), B.count(element))


def test_union_keeps_first_seen_order():
    assert cu.union(["c", "a"], ["b", "a", "a"]) == ["c", "a", "a", "b"]


def test_union_variadic():
    assert Counter(cu.union([1], [2, 2], [1, 1, 1])) == Counter({1: 3, 2: 2})


def test_intersection_takes_min_count():
    assert Counter(cu.intersection(A, B)) == Counter({"b": 1, "c": 1, "x": 1})


def test_intersection_with_empty_side():
    assert cu.intersection(A, []) == []
    assert cu.intersection([1, 2], [2], [3]) == []


def test_disjunction_takes_absolute_difference():
    assert Counter(cu.disjunction(A, B)) == Counter({"a": 1, "b": 1, "c": 1, "d": 1, "x": 1})


def test_disjunction_with_empty_side_returns_other():
    assert cu.disjunction([], [1, 1, 2]) == [1, 1, 2]
    assert cu.disjunction([3, 3], []) == [3, 3]


def test_count_map():
    assert cu.count_map("abca") == {"a": 2, "b": 1, "c": 1}


def test_contains_any_and_distinct():
    assert cu.contains_any([1, 2, 3], [9, 3])
    assert not cu.contains_any([1, 2], [])
    assert cu.distinct([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_is_empty_accepts_iterators():
    assert cu.is_empty(None)
    assert cu.is_empty([])
    assert cu.is_empty(iter(()))
    assert cu.is_not_empty(x for x in [0])


# -- paging -------------------------------------------------------------------

def test_page_is_one_based():
    items = list(range(1, 8))
    assert cu.page(1, 3, items) == [1, 2, 3]
    assert cu.page(3, 3, items) == [7]
    assert cu.page(4, 3, items) == []


def test_page_smaller_than_page_size():
    assert cu.page(1, 10, [1, 2]) == [1, 2]
    assert cu.page(2, 10, [1, 2]) == []


def test_total_page():
    assert cu.total_page(10, 3) == 4
    assert cu.total_page(9, 3) == 3
    assert cu.total_page(5, 0) == 0


def test_sort_page_all():
    assert cu.sort_page_all(1, 3, [5, 1], [4, 2, 3], key=lambda n: n) == [1, 2, 3]
    assert cu.sort_page_all(2, 3, [5, 1], [4, 2, 3], key=lambda n: n) == [4, 5]


def test_rainbow():
    assert cu.rainbow(1, 20) == list(range(1, 11))
    assert cu.rainbow(20, 20) == list(range(11, 21))
    assert cu.rainbow(10, 20) == list(range(6, 16))
    assert cu.rainbow(3, 5) == [1, 2, 3, 4, 5]


# -- slicing ------------------------------------------------------------------

def test_sub_with_negative_and_swapped_bounds():
    items = [1, 2, 3, 4, 5]
    assert cu.sub(items, 1, 3) == [2, 3]
    assert cu.sub(items, -2, 5) == [4, 5]
    assert cu.sub(items, 4, 1) == [2, 3, 4]
    assert cu.sub(items, 0, 5, 2) == [1, 3, 5]
    assert cu.sub([], 0, 3) == []


def test_split():
    assert cu.split(range(5), 2) == [[0, 1], [2, 3], [4]]
    assert cu.split([], 3) == []
    with pytest.raises(ValueError):
        cu.split([1], 0)


# -- misc ---------------------------------------------------------------------

def test_zip_to_dict_splits_strings():
    assert cu.zip_to_dict("a,b,c", "1,2,3") == {"a": "1", "b": "2", "c": "3"}
    assert cu.zip_to_dict("a|b", [1, 2], delimiter="|") == {"a": 1, "b": 2}


def test_group_by_key():
    assert cu.group(["apple", "avocado", "bean"], key=lambda s: s[0]) == [["apple", "avocado"], ["bean"]]


def test_find_one_and_field_values():
    rows = [{"id": 1, "name": "a"}, None, {"id": 2}]
    assert cu.find_one([1, 4, 6], lambda n: n % 2 == 0) == 4
    assert cu.get_field_values(rows, "name") == ["a", None]


def test_first_not_none_and_join():
    assert cu.first_not_none([None, 0, 1]) == 0
    assert cu.join([1, None, "x"], "-") == "1--x"


def test_pop_part_list_and_deque():
    stack = [1, 2, 3, 4]
    assert cu.pop_part(stack, 3) == [4, 3, 2]
    assert stack == [1]

    queue = deque([1, 2, 3])
    assert cu.pop_part(queue, 5) == [1, 2, 3]
    assert cu.pop_part(queue, 2) == []
