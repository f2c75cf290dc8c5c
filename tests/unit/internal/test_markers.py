from __future__ import annotations

import pytest

from bindwire.exceptions import BindwireInvalidRegistrationError
from bindwire.markers import CONSTRUCTOR_MARKER, constructor, is_constructor


class Report:
    def __init__(self, title: str) -> None:
        self.title = title

    @constructor
    @classmethod
    def marked_outside(cls) -> Report:
        return cls("outside")

    @classmethod
    @constructor
    def marked_inside(cls) -> Report:
        return cls("inside")

    @classmethod
    def unmarked(cls) -> Report:
        return cls("unmarked")

    @staticmethod
    @constructor
    def static_marked() -> Report:
        return Report("static")


def test_marker_in_either_position() -> None:
    assert is_constructor(vars(Report)["marked_outside"])
    assert is_constructor(vars(Report)["marked_inside"])


def test_unmarked_classmethod() -> None:
    assert not is_constructor(vars(Report)["unmarked"])


def test_only_classmethods_count() -> None:
    assert not is_constructor(vars(Report)["static_marked"])
    assert not is_constructor(vars(Report)["__init__"])


def test_marker_is_set_on_function() -> None:
    assert getattr(vars(Report)["marked_outside"].__func__, CONSTRUCTOR_MARKER) is True


def test_constructor_returns_same_object() -> None:
    method = classmethod(lambda cls: cls)

    assert constructor(method) is method


def test_rejects_non_callables() -> None:
    with pytest.raises(BindwireInvalidRegistrationError):
        constructor(42)
