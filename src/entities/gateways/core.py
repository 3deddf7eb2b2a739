"""Shared plumbing for the SQL gateways."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from entities.models import Entity, EntityAccount, EntityMember
from entities.schema import LEFT_JOIN_PREFIX_ENTITIES, LEFT_JOIN_PREFIX_ENTITIES_ACCOUNT, metadata
from entities.sql_log import SqlLog

logger = structlog.get_logger()


def make_engine(db_url: str, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine for the given URL.

    Args:
        db_url: Database connection URL
        **kwargs: Additional arguments for create_engine

    Returns:
        A SQLAlchemy Engine instance
    """
    connect_args = kwargs.pop("connect_args", {})
    if db_url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            # A single shared connection, otherwise every checkout sees an empty database
            kwargs.setdefault("poolclass", StaticPool)

    return create_engine(db_url, connect_args=connect_args, **kwargs)


def create_schema(engine: Engine) -> None:
    """Create the entities tables if they do not exist."""
    metadata.create_all(engine)
    logger.debug("Entities schema created", url=str(engine.url))


def now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CoreGateway:
    """Base class of the SQL gateways: engine access and row conversion."""

    def __init__(self, engine: Engine, sql_log: SqlLog | None = None) -> None:
        self.engine = engine
        self.sql_log = sql_log

    @staticmethod
    def row_to_account(row: Mapping[str, Any], prefix: str = "") -> EntityAccount | None:
        if row.get(prefix + "id") is None:
            return None
        return EntityAccount(
            id=row[prefix + "id"],
            type=row[prefix + "type"],
            account=row[prefix + "account"],
            creation=row[prefix + "creation"],
        )

    @classmethod
    def row_to_entity(cls, row: Mapping[str, Any], prefix: str = "") -> Entity | None:
        if row.get(prefix + "id") is None:
            return None
        entity = Entity(
            id=row[prefix + "id"],
            type=row[prefix + "type"],
            owner_id=row[prefix + "owner_id"],
            visibility=row[prefix + "visibility"],
            access=row[prefix + "access"],
            name=row[prefix + "name"],
            creation=row[prefix + "creation"],
        )
        # The owner is only available when joined on the unprefixed row
        if not prefix:
            entity.owner = cls.row_to_account(row, LEFT_JOIN_PREFIX_ENTITIES_ACCOUNT)
        return entity

    @classmethod
    def row_to_member(cls, row: Mapping[str, Any]) -> EntityMember:
        return EntityMember(
            id=row["id"],
            entity_id=row["entity_id"],
            account_id=row["account_id"],
            status=row["status"],
            level=row["level"],
            creation=row["creation"],
            entity=cls.row_to_entity(row, LEFT_JOIN_PREFIX_ENTITIES),
            account=cls.row_to_account(row, LEFT_JOIN_PREFIX_ENTITIES_ACCOUNT),
        )
