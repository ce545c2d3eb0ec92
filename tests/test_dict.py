"""Dict tests: chainable setters and lax typed getters.

Tests cover:
    - set/set_ignore_null/filter/remove_equal
    - Typed getters convert leniently and fall back to the default
    - Enum lookup by value, then by member name
    - parse/to_model round trip through a pydantic model
"""

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel

from core.domain.constants import Visibility
from core.utils.dict import Dict


class _Item(BaseModel):
    id: int
    name: str | None = None


# -- setters ------------------------------------------------------------------

def test_chained_setters():
    d = Dict.create().set("a", 1).set_ignore_null("b", None).set_ignore_null(None, 3).set_ignore_null("c", 0)
    assert d == {"a": 1, "c": 0}


def test_filter_keeps_only_existing_keys():
    d = Dict({"a": 1, "b": 2})
    assert d.filter("a", "z") == {"a": 1}
    assert isinstance(d.filter("a"), Dict)


def test_remove_equal():
    d = Dict({"a": 1, "b": 2, "c": 3})
    d.remove_equal({"a": 1, "b": 5, "c": 3}, "c")
    assert d == {"b": 2, "c": 3}


# -- typed getters ------------------------------------------------------------

def test_numeric_getters_convert_strings():
    d = Dict({"n": "12", "f": "1.5", "dec": "1.50", "bad": "abc"})
    assert d.get_int("n") == 12
    assert d.get_float("f") == 1.5
    assert d.get_decimal("dec") == Decimal("1.50")
    assert d.get_int("bad", -1) == -1
    assert d.get_int("missing", 7) == 7


def test_get_int_truncates_numeric_fractions():
    d = Dict().set("f", 1.5).set("neg", -2.9).set("dec", Decimal("3.99")).set("nan", float("nan"))
    assert d.get_int("f") == 1
    assert d.get_int("neg") == -2
    assert d.get_int("dec") == 3
    assert d.get_int("nan", 5) == 5


def test_bool_and_str_getters():
    d = Dict({"yes": "true", "no": 0, "v": Visibility.PUBLIC})
    assert d.get_bool("yes") is True
    assert d.get_bool("no") is False
    assert d.get_str("v") == "public"
    assert d.get_str("missing", "x") == "x"


def test_datetime_getter():
    d = Dict({"at": "2024-01-02T03:04:05Z"})
    assert d.get_datetime("at") == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_enum_getter_by_value_then_name():
    d = Dict({"by_value": "internal", "by_name": "PRIVATE", "bad": "secret"})
    assert d.get_enum(Visibility, "by_value") is Visibility.INTERNAL
    assert d.get_enum(Visibility, "by_name") is Visibility.PRIVATE
    assert d.get_enum(Visibility, "bad", Visibility.PUBLIC) is Visibility.PUBLIC


# -- models -------------------------------------------------------------------

def test_parse_and_to_model():
    d = Dict.parse(_Item(id=3), exclude_none=True)
    assert d == {"id": 3}
    assert d.set("name", "x").to_model(_Item) == _Item(id=3, name="x")


def test_copy_is_independent():
    d = Dict({"a": 1})
    other = d.copy().set("b", 2)
    assert d == {"a": 1}
    assert isinstance(other, Dict)
