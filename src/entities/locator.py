"""Service locators used to materialize type implementations."""

import importlib
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from entities.exceptions import LocatorError

logger = structlog.get_logger()


class ServiceLocator(ABC):
    """Build an instance from the locator string stored with a registered type."""

    @abstractmethod
    def materialize(self, name: str) -> Any:
        """Return a new instance for ``name``.

        Raises:
            LocatorError: if the instance cannot be built
        """
        pass


class ImportLocator(ServiceLocator):
    """Import ``package.module:Class`` (or ``package.module.Class``) and call it.

    The imported callable is invoked without arguments.
    """

    def materialize(self, name: str) -> Any:
        module_path, _, attribute = name.rpartition(":")
        if not module_path:
            module_path, _, attribute = name.rpartition(".")
        if not module_path or not attribute:
            raise LocatorError(f"Invalid service name: {name}")

        logger.debug("Importing service", module=module_path, attribute=attribute)
        try:
            module = importlib.import_module(module_path)
            factory = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            raise LocatorError(f"Cannot import {name}: {e}") from e

        try:
            return factory()
        except Exception as e:
            raise LocatorError(f"Cannot instantiate {name}: {e}") from e


class MappingLocator(ServiceLocator):
    """Resolve names through an explicit mapping of factories."""

    def __init__(self, factories: Mapping[str, Callable[[], Any]] | None = None) -> None:
        self.factories: dict[str, Callable[[], Any]] = dict(factories or {})

    def register(self, name: str, factory: Callable[[], Any]) -> None:
        self.factories[name] = factory

    def materialize(self, name: str) -> Any:
        if name not in self.factories:
            raise LocatorError(f"No service registered as {name}")

        try:
            return self.factories[name]()
        except Exception as e:
            raise LocatorError(f"Cannot instantiate {name}: {e}") from e
