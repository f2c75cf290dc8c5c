"""Tests for contextual bindings and the when/needs/give builder."""

from abc import ABC
from collections import deque

import pytest

from bindwire.container import Container
from bindwire.contextual import ContextualBindingBuilder
from bindwire.exceptions import (
    BindwireInvalidRegistrationError,
    BindwirePreconditionError,
    BindwireUnboundAbstractTypeError,
    BindwireUnsupportedParameterKindError,
)


class Storage(ABC):
    """Marker interface."""


class DiskStorage(Storage):
    pass


class MemoryStorage(Storage):
    pass


class ReportJob:
    def __init__(self, storage: Storage, retries: int) -> None:
        self.storage = storage
        self.retries = retries


class CleanupJob:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage


class Scheduler:
    def __init__(self, job: CleanupJob) -> None:
        self.job = job


class Settings:
    def __init__(self, name: str, debug: bool) -> None:  # noqa: FBT001
        self.name = name
        self.debug = debug


class Holder:
    def __init__(self, items: deque[int]) -> None:
        self.items = items


class Plugin:
    def __init__(self, kind: type) -> None:
        self.kind = kind


class Optionalish:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage


class TestContextualTypeBindings:
    def test_override_applies_to_owner(self, container: Container) -> None:
        container.when(CleanupJob).needs(Storage).give(DiskStorage)

        assert type(container.resolve(CleanupJob).storage) is DiskStorage

    def test_override_does_not_leak_to_other_owners(self, container: Container) -> None:
        container.when(CleanupJob).needs(Storage).give(DiskStorage)
        container.when(ReportJob).needs(int).give(3)

        with pytest.raises(BindwireUnboundAbstractTypeError):
            container.resolve(ReportJob)
        with pytest.raises(BindwireUnboundAbstractTypeError):
            container.resolve(Storage)

    def test_override_wins_over_global_binding(self, container: Container) -> None:
        container.bind(Storage, MemoryStorage)
        container.when(CleanupJob).needs(Storage).give(DiskStorage)

        assert type(container.resolve(CleanupJob).storage) is DiskStorage
        assert type(container.resolve(Storage)) is MemoryStorage

    def test_override_applies_to_nested_owner(self, container: Container) -> None:
        container.when(CleanupJob).needs(Storage).give(DiskStorage)

        scheduler = container.resolve(Scheduler)

        assert type(scheduler.job.storage) is DiskStorage

    def test_override_does_not_cascade_from_nested_owner(self, container: Container) -> None:
        container.when(Scheduler).needs(Storage).give(DiskStorage)

        with pytest.raises(BindwireUnboundAbstractTypeError):
            container.resolve(Scheduler)

    def test_bound_concrete_is_resolved_through_its_own_bindings(
        self,
        container: Container,
    ) -> None:
        container.bind(DiskStorage, MemoryStorage)
        container.when(CleanupJob).needs(Storage).give(DiskStorage)

        assert type(container.resolve(CleanupJob).storage) is MemoryStorage

    def test_each_owner_gets_its_own_override(self, container: Container) -> None:
        container.when(CleanupJob).needs(Storage).give(DiskStorage)
        container.when(ReportJob).needs(Storage).give(MemoryStorage)
        container.when(ReportJob).needs(int).give(1)

        assert type(container.resolve(CleanupJob).storage) is DiskStorage
        assert type(container.resolve(ReportJob).storage) is MemoryStorage

    def test_rebinding_overwrites(self, container: Container) -> None:
        container.when(CleanupJob).needs(Storage).give(DiskStorage)
        container.when(CleanupJob).needs(Storage).give(MemoryStorage)

        assert type(container.resolve(CleanupJob).storage) is MemoryStorage


class TestContextualValueBindings:
    def test_primitive_values(self, container: Container) -> None:
        container.when(Settings).needs(str).give("reports")
        container.when(Settings).needs(bool).give(False)  # noqa: FBT003

        settings = container.resolve(Settings)

        assert settings.name == "reports"
        assert settings.debug is False

    def test_missing_primitive_fails(self, container: Container) -> None:
        container.when(Settings).needs(str).give("reports")

        with pytest.raises(BindwireUnsupportedParameterKindError) as exc_info:
            container.resolve(Settings)

        assert exc_info.value.key is bool

    def test_value_used_as_is(self, container: Container) -> None:
        storage = MemoryStorage()
        container.when(CleanupJob).needs(Storage).give(storage)

        assert container.resolve(CleanupJob).storage is storage

    def test_none_value(self, container: Container) -> None:
        container.when(Optionalish).needs(Storage).give(None)

        assert container.resolve(Optionalish).storage is None

    def test_class_as_value(self, container: Container) -> None:
        container.when(Plugin).needs(type).give_value(DiskStorage)

        assert container.resolve(Plugin).kind is DiskStorage

    def test_value_for_erased_generic(self, container: Container) -> None:
        items = deque([1, 2])
        container.when(Holder).needs(deque).give(items)

        assert container.resolve(Holder).items is items

    def test_value_for_exact_generic(self, container: Container) -> None:
        items = deque([3])
        container.when(Holder).needs(deque[int]).give(items)

        assert container.resolve(Holder).items is items

    def test_type_binding_checked_before_value_binding(self, container: Container) -> None:
        container.add_contextual_value(CleanupJob, Storage, MemoryStorage())
        container.add_contextual_binding(CleanupJob, Storage, DiskStorage)

        assert type(container.resolve(CleanupJob).storage) is DiskStorage


class TestAddContextualBinding:
    def test_class_registers_type_binding(self, container: Container) -> None:
        assert container.add_contextual_binding(CleanupJob, Storage, DiskStorage) is True

        assert container.registry.has_contextual_type(CleanupJob, Storage)
        assert not container.registry.has_contextual_value(CleanupJob, Storage)

    def test_value_registers_value_binding(self, container: Container) -> None:
        assert container.add_contextual_binding(ReportJob, int, 5) is True

        assert container.registry.has_contextual_value(ReportJob, int)
        assert not container.registry.has_contextual_type(ReportJob, int)

    def test_unhashable_owner(self, container: Container) -> None:
        with pytest.raises(BindwireInvalidRegistrationError):
            container.add_contextual_binding([ReportJob], int, 5)


class TestBuilder:
    def test_when_returns_builder(self, container: Container) -> None:
        builder = container.when(ReportJob)

        assert isinstance(builder, ContextualBindingBuilder)
        assert builder.needs(int) is builder

    def test_give_returns_true(self, container: Container) -> None:
        assert container.when(ReportJob).needs(int).give(2) is True

    def test_give_without_needs(self, container: Container) -> None:
        with pytest.raises(BindwirePreconditionError):
            container.when(ReportJob).give(2)

    def test_give_value_without_needs(self, container: Container) -> None:
        with pytest.raises(BindwirePreconditionError):
            container.when(ReportJob).give_value(2)

    def test_needs_twice(self, container: Container) -> None:
        builder = container.when(ReportJob).needs(int)

        with pytest.raises(BindwirePreconditionError):
            builder.needs(str)

    def test_give_twice(self, container: Container) -> None:
        builder = container.when(ReportJob).needs(int)
        builder.give(1)

        with pytest.raises(BindwirePreconditionError):
            builder.give(2)

        assert container.registry.get_contextual_value(ReportJob, int) == (True, 1)

    def test_give_type_rejects_values(self, container: Container) -> None:
        with pytest.raises(BindwireInvalidRegistrationError):
            container.when(CleanupJob).needs(Storage).give_type(MemoryStorage())

    def test_give_type_registers_type_binding(self, container: Container) -> None:
        container.when(CleanupJob).needs(Storage).give_type(DiskStorage)

        assert type(container.resolve(CleanupJob).storage) is DiskStorage

    def test_repr(self, container: Container) -> None:
        builder = container.when(ReportJob)

        assert "<unset>" in repr(builder)
        assert "int" in repr(builder.needs(int))
