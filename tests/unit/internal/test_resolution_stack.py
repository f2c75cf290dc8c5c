from __future__ import annotations

import threading

import pytest

from bindwire.container import Container
from bindwire.container_interface import IContainer
from bindwire.container_resolution_stack import (
    FACTORY_FRAME,
    SINGLETON_FRAME,
    constructor_frame,
    current_resolution_path,
    resolution_frame,
)
from bindwire.exceptions import BindwireCyclicDependencyError


class ServiceA:
    pass


class ServiceB:
    pass


class Consumer:
    def __init__(self, b: ServiceB) -> None:
        self.b = b


def test_frames_are_pushed_and_popped() -> None:
    with resolution_frame(ServiceA, FACTORY_FRAME):
        with resolution_frame(ServiceB, constructor_frame("__init__")):
            assert current_resolution_path() == [ServiceA, ServiceB]
        assert current_resolution_path() == [ServiceA]

    assert current_resolution_path() == []


def test_same_frame_twice_is_a_cycle() -> None:
    with resolution_frame(ServiceA, FACTORY_FRAME), resolution_frame(ServiceB, FACTORY_FRAME):
        with pytest.raises(BindwireCyclicDependencyError) as exc_info:
            with resolution_frame(ServiceA, FACTORY_FRAME):
                pass

    assert exc_info.value.key is ServiceA
    assert exc_info.value.chain == [ServiceA, ServiceB]
    assert current_resolution_path() == []


def test_same_key_in_different_modes_is_not_a_cycle() -> None:
    with resolution_frame(ServiceA, FACTORY_FRAME), resolution_frame(ServiceA, SINGLETON_FRAME):
        with resolution_frame(ServiceA, constructor_frame("__init__")):
            assert current_resolution_path() == [ServiceA, ServiceA, ServiceA]


def test_different_constructors_are_different_frames() -> None:
    with resolution_frame(ServiceA, constructor_frame("__init__")):
        with resolution_frame(ServiceA, constructor_frame("from_b")):
            assert len(current_resolution_path()) == 2


def test_frame_is_popped_when_body_raises() -> None:
    with pytest.raises(ValueError, match="boom"), resolution_frame(ServiceA, FACTORY_FRAME):
        msg = "boom"
        raise ValueError(msg)

    assert current_resolution_path() == []


def test_path_seen_from_inside_a_factory() -> None:
    container = Container()
    seen: list[list[object]] = []

    def factory(_: IContainer) -> ServiceB:
        seen.append(current_resolution_path())
        return ServiceB()

    container.bind(ServiceB, factory)
    container.resolve(Consumer)

    assert seen == [[Consumer, ServiceB]]


def test_other_threads_do_not_see_frames() -> None:
    seen: list[list[object]] = []

    def inspect_path() -> None:
        seen.append(current_resolution_path())
        with resolution_frame(ServiceA, FACTORY_FRAME):
            seen.append(current_resolution_path())

    with resolution_frame(ServiceB, FACTORY_FRAME):
        thread = threading.Thread(target=inspect_path)
        thread.start()
        thread.join()
        assert current_resolution_path() == [ServiceB]

    assert seen[-1][-1] is ServiceA
    assert ServiceA not in seen[0]
