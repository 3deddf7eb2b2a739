"""Tests for the capability registry."""

from unittest.mock import MagicMock

import pytest

from entities.capabilities import EntitiesAdminRights, EntitiesSearchDuplicate
from entities.exceptions import ErrorKind, ImplementationNotFoundError, LocatorError, TypeNotFoundError
from entities.gateway import TypesGateway
from entities.implementations import GroupEntities
from entities.locator import MappingLocator
from entities.models import EntityType, Interface
from entities.registry import CapabilityRegistry


class DuplicateOnly(EntitiesSearchDuplicate):
    def build_search_duplicate(self, qb, entity) -> None:
        qb.limit_to_name(entity.name)


@pytest.fixture
def types_gateway() -> MagicMock:
    """Create a mock types gateway with a few registered types."""
    gateway = MagicMock(spec=TypesGateway)
    gateway.get_all_registered_types.return_value = [
        EntityType(interface="IEntities", type="group", class_name="group"),
        EntityType(interface="IEntities", type="searchable", class_name="searchable"),
        EntityType(interface="IEntities", type="broken", class_name="broken"),
        EntityType(interface="IEntitiesAccounts", type="group", class_name="accounts"),
    ]
    return gateway


@pytest.fixture
def locator() -> MagicMock:
    """Create a locator building fresh instances, failing for 'broken'."""
    real = MappingLocator({"group": GroupEntities, "searchable": DuplicateOnly, "accounts": object})
    mock = MagicMock(wraps=real)
    return mock


@pytest.fixture
def registry(types_gateway: MagicMock, locator: MagicMock) -> CapabilityRegistry:
    return CapabilityRegistry(types_gateway, locator)


def test_resolve_registered_type(registry: CapabilityRegistry) -> None:
    """Test resolving a registered type without capability check."""
    plugin = registry.resolve(Interface.ENTITIES, "group")
    assert isinstance(plugin, GroupEntities)


def test_resolve_accepts_interface_name(registry: CapabilityRegistry) -> None:
    """Test that interfaces can be given by name."""
    assert isinstance(registry.resolve("IEntities", "group"), GroupEntities)


def test_resolve_with_capability(registry: CapabilityRegistry) -> None:
    """Test resolving a type that implements the requested capability."""
    plugin = registry.resolve(Interface.ENTITIES, "group", EntitiesAdminRights)
    assert isinstance(plugin, EntitiesAdminRights)


def test_resolve_unknown_type(registry: CapabilityRegistry) -> None:
    """Test that an unregistered type fails with TypeNotFoundError."""
    with pytest.raises(TypeNotFoundError):
        registry.resolve(Interface.ENTITIES, "widget")


def test_resolve_matches_interface(registry: CapabilityRegistry) -> None:
    """Test that the same type tag under another interface is a different record."""
    plugin = registry.resolve(Interface.ENTITIES_ACCOUNTS, "group")
    assert not isinstance(plugin, GroupEntities)
    with pytest.raises(TypeNotFoundError):
        registry.resolve(Interface.ENTITIES_MEMBERS, "group")


def test_construction_failure_is_type_not_found(registry: CapabilityRegistry) -> None:
    """Test that a type whose implementation cannot be built is reported as not found."""
    resolution = registry.lookup(Interface.ENTITIES, "broken")
    assert resolution.kind is ErrorKind.TYPE_NOT_FOUND
    with pytest.raises(TypeNotFoundError):
        resolution.unwrap()


def test_missing_capability(registry: CapabilityRegistry) -> None:
    """Test that a type lacking the capability fails with ImplementationNotFoundError."""
    with pytest.raises(ImplementationNotFoundError) as exc_info:
        registry.resolve(Interface.ENTITIES, "searchable", EntitiesAdminRights)

    assert "DuplicateOnly" in str(exc_info.value)
    assert "EntitiesAdminRights" in str(exc_info.value)


def test_lookup_outcomes(registry: CapabilityRegistry) -> None:
    """Test the outcome kinds of lookups."""
    ok = registry.lookup(Interface.ENTITIES, "group", EntitiesAdminRights)
    assert ok.ok
    assert ok.kind is None
    assert ok.unwrap() is ok.plugin

    missing = registry.lookup(Interface.ENTITIES, "searchable", EntitiesAdminRights)
    assert not missing.ok
    assert missing.kind is ErrorKind.IMPLEMENTATION_NOT_FOUND

    unknown = registry.lookup(Interface.ENTITIES, "widget")
    assert unknown.kind is ErrorKind.TYPE_NOT_FOUND


def test_resolution_is_idempotent(registry: CapabilityRegistry, locator: MagicMock) -> None:
    """Test that resolving twice returns the same instance, built once."""
    first = registry.resolve(Interface.ENTITIES, "group")
    second = registry.resolve(Interface.ENTITIES, "group", EntitiesAdminRights)
    assert first is second
    locator.materialize.assert_called_once_with("group")


def test_types_are_loaded_once(registry: CapabilityRegistry, types_gateway: MagicMock) -> None:
    """Test that registered types are read from the gateway only once."""
    registry.resolve(Interface.ENTITIES, "group")
    registry.lookup(Interface.ENTITIES, "widget")
    registry.resolve_all(Interface.ENTITIES)
    types_gateway.get_all_registered_types.assert_called_once()


def test_empty_registry_is_loaded_once() -> None:
    """Test that an empty type list is cached too."""
    gateway = MagicMock(spec=TypesGateway)
    gateway.get_all_registered_types.return_value = []
    registry = CapabilityRegistry(gateway, MappingLocator())

    assert registry.lookup(Interface.ENTITIES, "group").kind is ErrorKind.TYPE_NOT_FOUND
    assert registry.resolve_all(Interface.ENTITIES) == []
    gateway.get_all_registered_types.assert_called_once()


def test_resolve_all_skips_failures(registry: CapabilityRegistry) -> None:
    """Test that fan-out resolution skips broken types and missing capabilities."""
    plugins = registry.resolve_all(Interface.ENTITIES, EntitiesSearchDuplicate)
    assert sorted(type(p).__name__ for p in plugins) == ["DuplicateOnly", "GroupEntities"]

    admins = registry.resolve_all(Interface.ENTITIES, EntitiesAdminRights)
    assert [type(p).__name__ for p in admins] == ["GroupEntities"]


def test_resolve_all_without_capability(registry: CapabilityRegistry) -> None:
    """Test fan-out resolution of every buildable type of an interface."""
    plugins = registry.resolve_all(Interface.ENTITIES)
    assert len(plugins) == 2


def test_failed_construction_is_retried(types_gateway: MagicMock) -> None:
    """Test that a failed construction is not cached."""
    locator = MagicMock()
    locator.materialize.side_effect = [LocatorError("not yet"), GroupEntities()]
    registry = CapabilityRegistry(types_gateway, locator)

    with pytest.raises(TypeNotFoundError):
        registry.resolve(Interface.ENTITIES, "group")
    assert isinstance(registry.resolve(Interface.ENTITIES, "group"), GroupEntities)
