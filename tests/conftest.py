"""Shared fixtures: in-memory database, gateways and a manager with test types."""

import pytest
from sqlalchemy import Engine

from entities.capabilities import EntitiesConfirmCreation, EntitiesSearchDuplicate
from entities.exceptions import EntityCreationError
from entities.gateways import (
    SqlAccountsGateway,
    SqlEntitiesGateway,
    SqlMembersGateway,
    SqlTypesGateway,
    create_schema,
    make_engine,
)
from entities.implementations import AdminGroupEntities, GroupEntities, LocalUserAccounts
from entities.locator import MappingLocator
from entities.manager import EntitiesManager
from entities.models import Entity, EntityType, Interface
from entities.query_builder import EntitiesQueryBuilder
from entities.sql_log import SqlLog


class DuplicateOnlyEntities(EntitiesSearchDuplicate):
    """Duplicate detection on name, and nothing else."""

    def build_search_duplicate(self, qb: EntitiesQueryBuilder, entity: Entity) -> None:
        qb.limit_to_type(entity.type).limit_to_name(entity.name)


class BareEntities:
    """Registered type without any capability."""


class VetoEntities(EntitiesConfirmCreation, EntitiesSearchDuplicate):
    """Refuses every entity."""

    def confirm_creation_status(self, entity: Entity) -> None:
        raise EntityCreationError("Creation refused")

    def build_search_duplicate(self, qb: EntitiesQueryBuilder, entity: Entity) -> None:
        qb.limit_to_name(entity.name)


def _broken() -> object:
    raise RuntimeError("cannot build")


TEST_TYPES = [
    (Interface.ENTITIES_ACCOUNTS, "local_user", "local_users", LocalUserAccounts),
    (Interface.ENTITIES, "group", "groups", GroupEntities),
    (Interface.ENTITIES, "admin_group", "admin_groups", AdminGroupEntities),
    (Interface.ENTITIES, "searchable", "duplicate_only", DuplicateOnlyEntities),
    (Interface.ENTITIES, "bare", "bare", BareEntities),
    (Interface.ENTITIES, "veto", "veto", VetoEntities),
    (Interface.ENTITIES, "broken", "broken", _broken),
    (Interface.ENTITIES_ACCOUNTS, "bare_account", "bare", BareEntities),
]


@pytest.fixture
def engine() -> Engine:
    """Create an in-memory database with the entities schema."""
    engine = make_engine("sqlite://")
    create_schema(engine)
    return engine


@pytest.fixture
def sql_log() -> SqlLog:
    return SqlLog(mode="0")


@pytest.fixture
def entities_gateway(engine: Engine, sql_log: SqlLog) -> SqlEntitiesGateway:
    return SqlEntitiesGateway(engine, sql_log)


@pytest.fixture
def accounts_gateway(engine: Engine, sql_log: SqlLog) -> SqlAccountsGateway:
    return SqlAccountsGateway(engine, sql_log)


@pytest.fixture
def members_gateway(engine: Engine, sql_log: SqlLog) -> SqlMembersGateway:
    return SqlMembersGateway(engine, sql_log)


@pytest.fixture
def types_gateway(engine: Engine, sql_log: SqlLog) -> SqlTypesGateway:
    return SqlTypesGateway(engine, sql_log)


@pytest.fixture
def locator() -> MappingLocator:
    return MappingLocator({name: factory for _, _, name, factory in TEST_TYPES})


@pytest.fixture
def registered_types(types_gateway: SqlTypesGateway) -> list[EntityType]:
    """Register every test type."""
    types = [
        EntityType(interface=interface.value, type=type_tag, class_name=name)
        for interface, type_tag, name, _ in TEST_TYPES
    ]
    for entity_type in types:
        types_gateway.register(entity_type)
    return types


@pytest.fixture
def manager(
    entities_gateway: SqlEntitiesGateway,
    accounts_gateway: SqlAccountsGateway,
    members_gateway: SqlMembersGateway,
    types_gateway: SqlTypesGateway,
    locator: MappingLocator,
    sql_log: SqlLog,
    registered_types: list[EntityType],
) -> EntitiesManager:
    """Create a manager over the in-memory database with the test types registered."""
    return EntitiesManager(
        entities_gateway, accounts_gateway, members_gateway, types_gateway, locator, sql_log=sql_log
    )
