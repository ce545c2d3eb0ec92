"""Result tests: explicit value/error carrier for optional lookups.

Tests cover:
    - ok/empty/failure states
    - A Result never holds a value and an error together
    - Errors are carried per instance (no shared lookup table)
"""

import pytest

from adapters.gitlab.errors import GitLabApiException
from core.domain.result import Result, optional_exception


def test_ok_result():
    result = Result.ok(5)
    assert result.is_present and not result.is_failure
    assert result.get() == 5
    assert bool(result)


def test_empty_result():
    result = Result.empty()
    assert not result.is_present and not result.is_failure
    assert result.or_else(3) == 3
    with pytest.raises(LookupError):
        result.get()


def test_failure_result_keeps_error():
    error = GitLabApiException("not found", http_status=404)
    result = Result.failure(error)

    assert not result.is_present
    assert optional_exception(result) is error
    with pytest.raises(GitLabApiException) as excinfo:
        result.or_else_raise()
    assert excinfo.value is error


def test_value_and_error_are_exclusive():
    with pytest.raises(ValueError):
        Result(value=1, error=RuntimeError("x"))


def test_failure_requires_error():
    with pytest.raises(ValueError):
        Result.failure(None)


def test_map():
    assert Result.ok(2).map(lambda n: n * 10).get() == 20
    failed = Result.failure(RuntimeError("boom")).map(lambda n: n * 10)
    assert failed.is_failure


def test_equal_values_do_not_share_errors():
    """Two empty results with equal content are independent of earlier failures."""
    first = Result.failure(RuntimeError("first"))
    second = Result.empty()

    assert optional_exception(first) is not None
    assert optional_exception(second) is None
