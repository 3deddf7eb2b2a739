"""Accounts mapped to local users."""

from entities.capabilities import AccountsSearchAccounts, AccountsSearchDuplicate, AccountsSearchEntities
from entities.gateways.accounts import LOCAL_USER_TYPE
from entities.models import EntityAccount
from entities.query_builder import ALIAS_LEFT_JOIN_ENTITY_ACCOUNT, EntitiesQueryBuilder


class LocalUserAccounts(AccountsSearchDuplicate, AccountsSearchAccounts, AccountsSearchEntities):
    """One account per local user id."""

    TYPE = LOCAL_USER_TYPE

    def build_search_duplicate(self, qb: EntitiesQueryBuilder, account: EntityAccount) -> None:
        qb.limit_to_type(account.type).limit_to_account(account.account)

    def build_search_accounts(self, qb: EntitiesQueryBuilder, needle: str) -> None:
        qb.search_in_account(needle)

    def build_search_entities(self, qb: EntitiesQueryBuilder, needle: str) -> None:
        # Entities owned by a matching local user
        qb.left_join_entity_account("owner_id")
        qb.search_in_account(needle, alias=ALIAS_LEFT_JOIN_ENTITY_ACCOUNT)
