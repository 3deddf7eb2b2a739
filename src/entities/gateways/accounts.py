"""SQL gateway for entity accounts."""

from typing import Any

import structlog
from sqlalchemy import insert

from entities.capabilities import AccountsSearchAccounts
from entities.exceptions import AccountNotFoundError
from entities.gateway import AccountsGateway
from entities.gateways.core import CoreGateway, now
from entities.models import EntityAccount
from entities.query_builder import EntitiesQueryBuilder
from entities.schema import accounts_table

logger = structlog.get_logger()

LOCAL_USER_TYPE = "local_user"


class SqlAccountsGateway(CoreGateway, AccountsGateway):
    """Accounts stored in the ``entities_accounts`` table."""

    def new_select_query(self) -> EntitiesQueryBuilder:
        return EntitiesQueryBuilder.select(accounts_table, "ea", self.sql_log)

    def create(self, account: EntityAccount) -> None:
        if account.creation is None:
            account.creation = now()

        with self.engine.begin() as conn:
            conn.execute(
                insert(accounts_table).values(
                    id=account.id,
                    type=account.type,
                    account=account.account,
                    creation=account.creation,
                )
            )
        logger.debug("EntityAccount created", account_id=account.id, type=account.type)

    def get_all(self, type: str = "") -> list[EntityAccount]:
        qb = self.new_select_query()
        if type:
            qb.limit_to_type(type)
        return self.materialize_all(qb.order_by_creation())

    def get_from_id(self, account_id: str) -> EntityAccount:
        account = self.materialize_one(self.new_select_query().limit_to_db_field("id", account_id))
        if account is None:
            raise AccountNotFoundError(f"EntityAccount {account_id} not found")
        return account

    def get_from_local_user_id(self, user_id: str) -> EntityAccount:
        qb = self.new_select_query().limit_to_type(LOCAL_USER_TYPE).limit_to_account(user_id)
        account = self.materialize_one(qb)
        if account is None:
            raise AccountNotFoundError(f"No EntityAccount for local user {user_id}")
        return account

    def search(self, needle: str, type: str = "", plugins: list[Any] | None = None) -> list[EntityAccount]:
        qb = self.new_select_query()
        if type:
            qb.limit_to_type(type)
        qb.search_in_account(needle)

        for plugin in plugins or []:
            if isinstance(plugin, AccountsSearchAccounts):
                plugin.build_search_accounts(qb, needle)

        return self.materialize_all(qb.order_by_creation())

    def materialize_one(self, qb: EntitiesQueryBuilder) -> EntityAccount | None:
        with self.engine.connect() as conn:
            row = qb.execute(conn).mappings().first()
        if row is None:
            return None
        return self.row_to_account(row)

    def materialize_all(self, qb: EntitiesQueryBuilder) -> list[EntityAccount]:
        with self.engine.connect() as conn:
            rows = qb.execute(conn).mappings().all()
        return [self.row_to_account(row) for row in rows]
