"""Query builder with entity-specific filters and joins."""

import time
from typing import Any

import structlog
from sqlalchemy import Select, Table, or_, select
from sqlalchemy.engine import Connection, CursorResult
from sqlalchemy.sql import ColumnElement
from sqlalchemy.sql.expression import Executable

from entities.schema import (
    ACCOUNT_COLUMNS,
    ENTITY_COLUMNS,
    LEFT_JOIN_PREFIX_ENTITIES,
    LEFT_JOIN_PREFIX_ENTITIES_ACCOUNT,
    accounts_table,
    entities_table,
)
from entities.sql_log import SqlLog

logger = structlog.get_logger()

ALIAS_LEFT_JOIN_ENTITY = "lj_e"
ALIAS_LEFT_JOIN_ENTITY_ACCOUNT = "lj_ea"


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class EntitiesQueryBuilder:
    """Fluent wrapper around a SQLAlchemy statement.

    Equality filters (``limit_to_*``) are ANDed onto the statement as they are
    added. Substring filters (``search_in_*``) are collected and ORed together
    when the statement is executed, so several search providers can each
    contribute a way to match the same needle.
    """

    def __init__(self, statement: Executable, alias: Any, sql_log: SqlLog | None = None) -> None:
        self._statement = statement
        self._aliases: dict[str, Any] = {alias.name: alias}
        self.default_alias = alias
        self.sql_log = sql_log
        self._search: list[ColumnElement[bool]] = []

    @classmethod
    def select(cls, table: Table, alias_name: str, sql_log: SqlLog | None = None) -> "EntitiesQueryBuilder":
        """Build a select query over all columns of ``table`` aliased as ``alias_name``."""
        alias = table.alias(alias_name)
        return cls(select(alias), alias, sql_log)

    def is_select(self) -> bool:
        return isinstance(self._statement, Select)

    @property
    def statement(self) -> Executable:
        """The statement including the collected search filters."""
        if self._search:
            return self._statement.where(or_(*self._search))
        return self._statement

    def alias(self, name: str | None = None) -> Any:
        """Return the default alias, or a joined alias by name."""
        if name is None:
            return self.default_alias
        return self._aliases[name]

    def has_alias(self, name: str) -> bool:
        return name in self._aliases

    def where(self, clause: ColumnElement[bool]) -> "EntitiesQueryBuilder":
        self._statement = self._statement.where(clause)
        return self

    def limit_to_db_field(self, field: str, value: Any, alias: str | None = None) -> "EntitiesQueryBuilder":
        return self.where(self.alias(alias).c[field] == value)

    def limit_to_interface(self, interface: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("interface", interface)

    def limit_to_type(self, type: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("type", type)

    def limit_to_owner_id(self, owner_id: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("owner_id", owner_id)

    def limit_to_name(self, name: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("name", name)

    def limit_to_account(self, account: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("account", account)

    def limit_to_account_id(self, account_id: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("account_id", account_id)

    def limit_to_entity_id(self, entity_id: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("entity_id", entity_id)

    def limit_to_status(self, status: str) -> "EntitiesQueryBuilder":
        return self.limit_to_db_field("status", status)

    def search_in_db_field(self, field: str, like: str, alias: str | None = None) -> "EntitiesQueryBuilder":
        """Match rows where ``field`` contains ``like``, case-insensitively."""
        column = self.alias(alias).c[field]
        self._search.append(column.ilike(f"%{_escape_like(like)}%", escape="\\"))
        return self

    def search_in_name(self, like: str) -> "EntitiesQueryBuilder":
        return self.search_in_db_field("name", like)

    def search_in_account(self, like: str, alias: str | None = None) -> "EntitiesQueryBuilder":
        return self.search_in_db_field("account", like, alias)

    def order_by_creation(self) -> "EntitiesQueryBuilder":
        if self.is_select():
            self._statement = self._statement.order_by(self.default_alias.c.creation, self.default_alias.c.id)
        return self

    def left_join_entity(self, field_entity_id: str = "entity_id") -> "EntitiesQueryBuilder":
        """Join the entity referenced by ``field_entity_id``.

        Its columns are selected with the ``lj_e_`` prefix. Does nothing on a
        non-select statement or when the entity is already joined.
        """
        return self._left_join(
            entities_table, ALIAS_LEFT_JOIN_ENTITY, field_entity_id, ENTITY_COLUMNS, LEFT_JOIN_PREFIX_ENTITIES
        )

    def left_join_entity_account(self, field_account_id: str = "account_id") -> "EntitiesQueryBuilder":
        """Join the account referenced by ``field_account_id``.

        Its columns are selected with the ``lj_ea_`` prefix. Does nothing on a
        non-select statement or when the account is already joined.
        """
        return self._left_join(
            accounts_table,
            ALIAS_LEFT_JOIN_ENTITY_ACCOUNT,
            field_account_id,
            ACCOUNT_COLUMNS,
            LEFT_JOIN_PREFIX_ENTITIES_ACCOUNT,
        )

    def _left_join(
        self, table: Table, alias_name: str, field: str, columns: tuple[str, ...], prefix: str
    ) -> "EntitiesQueryBuilder":
        if not self.is_select() or self.has_alias(alias_name):
            return self

        joined = table.alias(alias_name)
        self._aliases[alias_name] = joined
        self._statement = self._statement.add_columns(
            *[joined.c[column].label(prefix + column) for column in columns]
        ).join_from(self.default_alias, joined, self.default_alias.c[field] == joined.c.id, isouter=True)
        return self

    def get_sql(self) -> str:
        return str(self.statement)

    def get_parameters(self) -> dict[str, Any]:
        return dict(self.statement.compile().params)

    def execute(self, connection: Connection) -> CursorResult:
        """Execute the statement, recording its duration when SQL logging is on."""
        if self.sql_log is None or not self.sql_log.enabled:
            return connection.execute(self.statement)

        start = time.perf_counter()
        result = connection.execute(self.statement)
        elapsed = time.perf_counter() - start
        self.sql_log.record(self.get_sql(), self.get_parameters(), elapsed)
        logger.debug("Query executed", elapsed=elapsed)
        return result
