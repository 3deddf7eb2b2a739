"""Capability interfaces a type implementation may provide.

A type implementation is registered for an interface (see ``Interface``) and a
type tag. It opts into each optional behavior by subclassing the matching
capability below; the registry checks capabilities with ``isinstance``.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from entities.models import Entity, EntityAccount

if TYPE_CHECKING:
    from entities.query_builder import EntitiesQueryBuilder


class EntitiesConfirmCreation(ABC):
    """Adjust or veto an entity before it is persisted."""

    @abstractmethod
    def confirm_creation_status(self, entity: Entity) -> None:
        """Confirm the creation of an entity.

        Raise ``EntityCreationError`` to refuse it.
        """
        pass


class EntitiesSearchDuplicate(ABC):
    """Describe what makes two entities of a type the same."""

    @abstractmethod
    def build_search_duplicate(self, qb: "EntitiesQueryBuilder", entity: Entity) -> None:
        """Add the filters matching an existing duplicate of ``entity`` to ``qb``."""
        pass


class EntitiesSearchEntities(ABC):
    @abstractmethod
    def build_search_entities(self, qb: "EntitiesQueryBuilder", needle: str) -> None:
        """Contribute search filters for ``needle`` to an entities query."""
        pass


class EntitiesAdminRights(ABC):
    @abstractmethod
    def has_admin_rights(self, entity: Entity) -> bool:
        """Return True if membership of ``entity`` confers admin rights."""
        pass


class AccountsSearchDuplicate(ABC):
    """Describe what makes two accounts of a type the same."""

    @abstractmethod
    def build_search_duplicate(self, qb: "EntitiesQueryBuilder", account: EntityAccount) -> None:
        """Add the filters matching an existing duplicate of ``account`` to ``qb``."""
        pass


class AccountsSearchAccounts(ABC):
    @abstractmethod
    def build_search_accounts(self, qb: "EntitiesQueryBuilder", needle: str) -> None:
        """Contribute search filters for ``needle`` to an accounts query."""
        pass


class AccountsSearchEntities(ABC):
    @abstractmethod
    def build_search_entities(self, qb: "EntitiesQueryBuilder", needle: str) -> None:
        """Contribute account-based search filters for ``needle`` to an entities query."""
        pass
