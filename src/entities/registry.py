"""Resolution of (interface, type) pairs to type implementation instances."""

import threading
from dataclasses import dataclass
from typing import Any

import structlog

from entities.exceptions import (
    EntitiesError,
    ErrorKind,
    ImplementationNotFoundError,
    LocatorError,
    TypeNotFoundError,
)
from entities.gateway import TypesGateway
from entities.locator import ServiceLocator
from entities.models import EntityType, Interface

logger = structlog.get_logger()


@dataclass
class Resolution:
    """Outcome of a registry lookup: either a plugin or the reason there is none."""

    plugin: Any = None
    error: EntitiesError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.plugin


def _interface_name(interface: Interface | str) -> str:
    return interface.value if isinstance(interface, Interface) else interface


class CapabilityRegistry:
    """Registry of type implementations, loaded once and materialized lazily.

    Registered types are read from the types gateway on first use and never
    reloaded; registering a new type requires a new registry. Instances are
    built through the service locator the first time they are needed and
    cached per (interface, type) for the registry lifetime. The cache is
    guarded by a lock so a registry can be shared between threads.
    """

    def __init__(self, types_gateway: TypesGateway, locator: ServiceLocator) -> None:
        self.types_gateway = types_gateway
        self.locator = locator
        self._records: list[EntityType] | None = None
        self._instances: dict[tuple[str, str], Any] = {}
        self._lock = threading.RLock()

    def records(self) -> list[EntityType]:
        """Return every registered type, loading them on first call."""
        with self._lock:
            if self._records is None:
                self._records = list(self.types_gateway.get_all_registered_types())
                logger.debug("Registered types loaded", count=len(self._records))
            return self._records

    def lookup(self, interface: Interface | str, type_tag: str, capability: type | None = None) -> Resolution:
        """Find the implementation of ``type_tag`` for ``interface``.

        Args:
            interface: Interface the type is registered under
            type_tag: Type tag
            capability: Optional capability class the instance must implement

        Returns:
            Resolution carrying the instance, or a TypeNotFoundError /
            ImplementationNotFoundError
        """
        name = _interface_name(interface)
        record = next((r for r in self.records() if r.interface == name and r.type == type_tag), None)
        if record is None:
            return Resolution(error=TypeNotFoundError(f"No implementation registered for {name}/{type_tag}"))

        try:
            plugin = self._materialize(record)
        except LocatorError as e:
            return Resolution(error=TypeNotFoundError(str(e)))

        if capability is not None and not isinstance(plugin, capability):
            return Resolution(
                error=ImplementationNotFoundError(
                    f"{type(plugin).__name__} does not implement {capability.__name__}"
                )
            )

        return Resolution(plugin=plugin)

    def resolve(self, interface: Interface | str, type_tag: str, capability: type | None = None) -> Any:
        """Return the implementation of ``type_tag`` or raise the lookup error."""
        return self.lookup(interface, type_tag, capability).unwrap()

    def resolve_all(self, interface: Interface | str, capability: type | None = None) -> list[Any]:
        """Return every implementation registered for ``interface``.

        Types whose implementation cannot be built, or does not implement
        ``capability``, are skipped.
        """
        name = _interface_name(interface)
        plugins = []
        for record in self.records():
            if record.interface != name:
                continue

            try:
                plugin = self._materialize(record)
            except LocatorError as e:
                logger.debug("Skipping type", interface=name, type=record.type, error=str(e))
                continue

            if capability is not None and not isinstance(plugin, capability):
                continue

            plugins.append(plugin)

        return plugins

    def _materialize(self, record: EntityType) -> Any:
        key = (record.interface, record.type)
        with self._lock:
            if key not in self._instances:
                logger.debug("Materializing type", interface=record.interface, type=record.type)
                self._instances[key] = self.locator.materialize(record.class_name)
            return self._instances[key]
