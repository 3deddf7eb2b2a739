"""Entities manager: creation protocol, lookups and admin rights."""

from typing import Any

import structlog

from entities.capabilities import (
    AccountsSearchAccounts,
    AccountsSearchDuplicate,
    AccountsSearchEntities,
    EntitiesAdminRights,
    EntitiesConfirmCreation,
    EntitiesSearchDuplicate,
    EntitiesSearchEntities,
)
from entities.config import Config
from entities.exceptions import (
    AccountAlreadyExistsError,
    AccountCreationError,
    EntityAlreadyExistsError,
    EntityCreationError,
    EntityNotFoundError,
    ErrorKind,
    MemberAlreadyExistsError,
)
from entities.gateway import AccountsGateway, EntitiesGateway, MembersGateway, TypesGateway
from entities.gateways import (
    SqlAccountsGateway,
    SqlEntitiesGateway,
    SqlMembersGateway,
    SqlTypesGateway,
    make_engine,
)
from entities.locator import ImportLocator, ServiceLocator
from entities.models import (
    Entity,
    EntityAccount,
    EntityMember,
    Interface,
    MemberLevel,
    MemberStatus,
)
from entities.query_builder import EntitiesQueryBuilder
from entities.registry import CapabilityRegistry, Resolution
from entities.sql_log import SqlLog

logger = structlog.get_logger()


class EntitiesManager:
    """Create and query entities, accounts and members.

    Type-specific behavior is delegated to the implementations registered in
    the types gateway, resolved through a ``CapabilityRegistry``.

    Entities and accounts are only created after a duplicate search performed
    by their type implementation. A type that is not registered cannot be
    created. With ``strict_duplicates`` (the default), neither can a type
    whose implementation does not provide duplicate detection; otherwise such
    a type is created without any duplicate check.
    """

    def __init__(
        self,
        entities: EntitiesGateway,
        accounts: AccountsGateway,
        members: MembersGateway,
        types: TypesGateway,
        locator: ServiceLocator,
        *,
        sql_log: SqlLog | None = None,
        strict_duplicates: bool = True,
    ) -> None:
        self.entities = entities
        self.accounts = accounts
        self.members = members
        self.types = types
        self.registry = CapabilityRegistry(types, locator)
        self.sql_log = sql_log
        self.strict_duplicates = strict_duplicates

    @classmethod
    def from_config(cls, config: Config, locator: ServiceLocator | None = None) -> "EntitiesManager":
        """Build a manager on the SQL gateways described by ``config``."""
        engine = make_engine(config.get("database.url"))
        sql_log = SqlLog(config.get("entities.log.sql"), config.data_directory)
        return cls(
            SqlEntitiesGateway(engine, sql_log),
            SqlAccountsGateway(engine, sql_log),
            SqlMembersGateway(engine, sql_log),
            SqlTypesGateway(engine, sql_log),
            locator or ImportLocator(),
            sql_log=sql_log,
            strict_duplicates=config.get_bool("entities.strict_duplicates"),
        )

    def __enter__(self) -> "EntitiesManager":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Flush the collected SQL log, if any."""
        if self.sql_log is not None:
            self.sql_log.flush()

    def log_sql(self, qb: EntitiesQueryBuilder, elapsed: float) -> None:
        if self.sql_log is not None:
            self.sql_log.record(qb.get_sql(), qb.get_parameters(), elapsed)

    # Creation

    def save_entity(self, entity: Entity, owner_id: str = "") -> None:
        """Create an entity, optionally owned by an existing account.

        When an owner is given, the owner membership is created first.

        Raises:
            AccountNotFoundError: if ``owner_id`` is not a known account
            MemberAlreadyExistsError: if the owner membership already exists
            EntityCreationError: if the entity type is unknown or refuses the creation
            EntityAlreadyExistsError: if a duplicate exists; ``entity.id`` is
                set to the ID of the known entity
        """
        if owner_id:
            owner = self.get_account(owner_id)
            entity.set_owner(owner)

            member = EntityMember(
                entity_id=entity.id,
                account_id=owner.id,
                status=MemberStatus.MEMBER.value,
                level=MemberLevel.OWNER,
            )
            self.save_member(member)

        self.confirm_creation_status(entity)

        known = self.search_duplicate_entity(entity)
        if known is not None:
            logger.warning(
                "Entity creation failed: duplicate entry",
                type=entity.type,
                name=entity.name,
                entity_id=entity.id,
                known_id=known.id,
            )
            entity.id = known.id
            raise EntityAlreadyExistsError(known.id)

        self.entities.create(entity)

    def save_account(self, account: EntityAccount) -> None:
        """Create an account.

        Raises:
            AccountCreationError: if the account type is unknown
            AccountAlreadyExistsError: if a duplicate exists
        """
        known = self.search_duplicate_account(account)
        if known is not None:
            logger.warning(
                "EntityAccount creation failed: duplicate entry",
                type=account.type,
                account=account.account,
                known_id=known.id,
            )
            raise AccountAlreadyExistsError(known.id)

        self.accounts.create(account)

    def save_member(self, member: EntityMember) -> None:
        """Create a membership.

        Raises:
            MemberAlreadyExistsError: if the account is already a member of the entity
        """
        known = self.members.get_member_status(member.account_id, member.entity_id)
        if known is not None:
            raise MemberAlreadyExistsError(known.id)

        self.members.create(member)

    def confirm_creation_status(self, entity: Entity) -> None:
        """Let the entity type adjust or refuse the creation of ``entity``.

        Types without this capability accept every entity.

        Raises:
            EntityCreationError: if the type is unknown or refuses the entity
        """
        resolution = self.registry.lookup(Interface.ENTITIES, entity.type, EntitiesConfirmCreation)
        if resolution.kind is ErrorKind.TYPE_NOT_FOUND:
            logger.warning("Entity creation failed: type not found", type=entity.type)
            raise EntityCreationError("Unknown Entity Type") from resolution.error
        if resolution.ok:
            resolution.plugin.confirm_creation_status(entity)

    def search_duplicate_entity(self, entity: Entity) -> Entity | None:
        """Return the known entity ``entity`` duplicates, if any.

        Raises:
            EntityCreationError: if the type has no duplicate detection
        """
        resolution = self.registry.lookup(Interface.ENTITIES, entity.type, EntitiesSearchDuplicate)
        if not self._has_duplicate_detection(resolution, entity.type):
            raise EntityCreationError("Unknown Entity Type") from resolution.error
        if not resolution.ok:
            return None

        qb = self.entities.new_select_query()
        resolution.plugin.build_search_duplicate(qb, entity)
        return self.entities.materialize_one(qb)

    def search_duplicate_account(self, account: EntityAccount) -> EntityAccount | None:
        """Return the known account ``account`` duplicates, if any.

        Raises:
            AccountCreationError: if the type has no duplicate detection
        """
        resolution = self.registry.lookup(Interface.ENTITIES_ACCOUNTS, account.type, AccountsSearchDuplicate)
        if not self._has_duplicate_detection(resolution, account.type):
            raise AccountCreationError("Unknown EntityAccount Type") from resolution.error
        if not resolution.ok:
            return None

        qb = self.accounts.new_select_query()
        resolution.plugin.build_search_duplicate(qb, account)
        return self.accounts.materialize_one(qb)

    def _has_duplicate_detection(self, resolution: Resolution, type_tag: str) -> bool:
        # False means creation must be refused
        if resolution.kind is ErrorKind.TYPE_NOT_FOUND:
            logger.warning("Creation failed: type not found", type=type_tag)
            return False
        if resolution.kind is ErrorKind.IMPLEMENTATION_NOT_FOUND:
            if self.strict_duplicates:
                logger.warning("Creation failed: no duplicate detection", type=type_tag, error=str(resolution.error))
                return False
            logger.debug("Creating without duplicate detection", type=type_tag)
        return True

    # Lookups

    def get_all_entities(self, type: str = "") -> list[Entity]:
        return self.entities.get_all(type)

    def get_all_accounts(self, type: str = "") -> list[EntityAccount]:
        return self.accounts.get_all(type)

    def search_entities(self, needle: str, type: str = "") -> list[Entity]:
        """Search entities by name and through every type offering entity search."""
        plugins = self.registry.resolve_all(Interface.ENTITIES_ACCOUNTS, AccountsSearchEntities)
        plugins += self.registry.resolve_all(Interface.ENTITIES, EntitiesSearchEntities)
        return self.entities.search(needle, type, plugins)

    def search_accounts(self, needle: str, type: str = "") -> list[EntityAccount]:
        plugins = self.registry.resolve_all(Interface.ENTITIES_ACCOUNTS, AccountsSearchAccounts)
        return self.accounts.search(needle, type, plugins)

    def get_entity(self, entity_id: str) -> Entity:
        return self.entities.get_from_id(entity_id)

    def get_account(self, account_id: str) -> EntityAccount:
        return self.accounts.get_from_id(account_id)

    def get_member(self, member_id: str) -> EntityMember:
        return self.members.get_from_id(member_id)

    def get_local_account(self, user_id: str) -> EntityAccount:
        return self.accounts.get_from_local_user_id(user_id)

    # Membership

    def entity_get_members(self, entity: Entity) -> list[EntityMember]:
        return self.members.get_members(entity)

    def account_belongs_to(self, account: EntityAccount) -> list[EntityMember]:
        """Return the direct memberships of ``account``."""
        return self.members.get_membership(account)

    def entity_has_admin_rights(self, entity: Entity) -> bool:
        """Return True if the entity type grants admin rights to its members.

        Unknown types, and types without the capability, grant nothing.
        """
        resolution = self.registry.lookup(Interface.ENTITIES, entity.type, EntitiesAdminRights)
        if not resolution.ok:
            return False
        return resolution.plugin.has_admin_rights(entity)

    def account_has_admin_rights(self, account: EntityAccount) -> bool:
        """Return True if any entity ``account`` belongs to grants admin rights."""
        for member in self.account_belongs_to(account):
            entity = member.entity
            if entity is None:
                try:
                    entity = self.get_entity(member.entity_id)
                except EntityNotFoundError:
                    logger.debug("Membership of unknown entity", member_id=member.id, entity_id=member.entity_id)
                    continue

            if self.entity_has_admin_rights(entity):
                return True

        return False
