"""SQL gateway implementations."""

from entities.gateways.accounts import SqlAccountsGateway
from entities.gateways.core import create_schema, make_engine
from entities.gateways.entities import SqlEntitiesGateway
from entities.gateways.members import SqlMembersGateway
from entities.gateways.types import SqlTypesGateway

__all__ = [
    "SqlAccountsGateway",
    "SqlEntitiesGateway",
    "SqlMembersGateway",
    "SqlTypesGateway",
    "create_schema",
    "make_engine",
]
