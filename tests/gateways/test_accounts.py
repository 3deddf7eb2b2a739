"""Tests for the SQL accounts gateway."""

import pytest

from entities.exceptions import AccountNotFoundError
from entities.gateways import SqlAccountsGateway
from entities.implementations import LocalUserAccounts
from entities.models import EntityAccount


def test_create_and_read(accounts_gateway: SqlAccountsGateway) -> None:
    """Test creating an account and reading it back."""
    account = EntityAccount(type="local_user", account="alice")
    accounts_gateway.create(account)

    read = accounts_gateway.get_from_id(account.id)
    assert read.id == account.id
    assert read.type == "local_user"
    assert read.account == "alice"
    assert read.creation is not None


def test_get_from_unknown_id(accounts_gateway: SqlAccountsGateway) -> None:
    """Test that reading an unknown account raises AccountNotFoundError."""
    with pytest.raises(AccountNotFoundError):
        accounts_gateway.get_from_id("missing")


def test_get_from_local_user_id(accounts_gateway: SqlAccountsGateway) -> None:
    """Test finding the account of a local user."""
    local = EntityAccount(type="local_user", account="alice")
    accounts_gateway.create(EntityAccount(type="mail", account="alice"))
    accounts_gateway.create(local)

    assert accounts_gateway.get_from_local_user_id("alice").id == local.id
    with pytest.raises(AccountNotFoundError):
        accounts_gateway.get_from_local_user_id("bob")


def test_get_all(accounts_gateway: SqlAccountsGateway) -> None:
    """Test listing accounts, optionally by type."""
    accounts_gateway.create(EntityAccount(type="local_user", account="alice"))
    accounts_gateway.create(EntityAccount(type="mail", account="bob@example.com"))

    assert [a.account for a in accounts_gateway.get_all()] == ["alice", "bob@example.com"]
    assert [a.account for a in accounts_gateway.get_all("mail")] == ["bob@example.com"]


def test_search(accounts_gateway: SqlAccountsGateway) -> None:
    """Test searching accounts by account string."""
    accounts_gateway.create(EntityAccount(type="local_user", account="alice"))
    accounts_gateway.create(EntityAccount(type="local_user", account="malice"))
    accounts_gateway.create(EntityAccount(type="local_user", account="bob"))

    found = accounts_gateway.search("alic", plugins=[LocalUserAccounts()])
    assert [a.account for a in found] == ["alice", "malice"]
    assert accounts_gateway.search("alic", "mail") == []
