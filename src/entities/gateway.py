"""Persistence interfaces required by the entities manager."""

from abc import ABC, abstractmethod
from typing import Any

from entities.models import Entity, EntityAccount, EntityMember, EntityType
from entities.query_builder import EntitiesQueryBuilder


class EntitiesGateway(ABC):
    """Abstract access to the entities table."""

    @abstractmethod
    def create(self, entity: Entity) -> None:
        """Persist a new entity."""
        pass

    @abstractmethod
    def get_all(self, type: str = "") -> list[Entity]:
        """List entities, optionally limited to one type."""
        pass

    @abstractmethod
    def get_from_id(self, entity_id: str) -> Entity:
        """Read an entity by ID.

        Raises:
            EntityNotFoundError: if no entity has this ID
        """
        pass

    @abstractmethod
    def search(self, needle: str, type: str = "", plugins: list[Any] | None = None) -> list[Entity]:
        """Search entities, letting each plugin contribute search filters."""
        pass

    @abstractmethod
    def new_select_query(self) -> EntitiesQueryBuilder:
        """Return a select query over entities, for plugins to refine."""
        pass

    @abstractmethod
    def materialize_one(self, qb: EntitiesQueryBuilder) -> Entity | None:
        """Run ``qb`` and return its first entity, or None."""
        pass


class AccountsGateway(ABC):
    """Abstract access to the accounts table."""

    @abstractmethod
    def create(self, account: EntityAccount) -> None:
        pass

    @abstractmethod
    def get_all(self, type: str = "") -> list[EntityAccount]:
        pass

    @abstractmethod
    def get_from_id(self, account_id: str) -> EntityAccount:
        """Read an account by ID.

        Raises:
            AccountNotFoundError: if no account has this ID
        """
        pass

    @abstractmethod
    def get_from_local_user_id(self, user_id: str) -> EntityAccount:
        """Read the account mapped to a local user.

        Raises:
            AccountNotFoundError: if the user has no account
        """
        pass

    @abstractmethod
    def search(self, needle: str, type: str = "", plugins: list[Any] | None = None) -> list[EntityAccount]:
        pass

    @abstractmethod
    def new_select_query(self) -> EntitiesQueryBuilder:
        pass

    @abstractmethod
    def materialize_one(self, qb: EntitiesQueryBuilder) -> EntityAccount | None:
        pass


class MembersGateway(ABC):
    """Abstract access to the members table."""

    @abstractmethod
    def create(self, member: EntityMember) -> None:
        pass

    @abstractmethod
    def get_from_id(self, member_id: str) -> EntityMember:
        """Read a member by ID.

        Raises:
            MemberNotFoundError: if no member has this ID
        """
        pass

    @abstractmethod
    def get_member_status(self, account_id: str, entity_id: str) -> EntityMember | None:
        """Return the member row of ``account_id`` in ``entity_id``, if it is a full member."""
        pass

    @abstractmethod
    def get_members(self, entity: Entity) -> list[EntityMember]:
        pass

    @abstractmethod
    def get_membership(self, account: EntityAccount) -> list[EntityMember]:
        pass


class TypesGateway(ABC):
    """Abstract access to the registered types."""

    @abstractmethod
    def get_all_registered_types(self) -> list[EntityType]:
        pass

    @abstractmethod
    def register(self, entity_type: EntityType) -> None:
        """Register an implementation for an (interface, type) pair."""
        pass
