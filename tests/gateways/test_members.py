"""Tests for the SQL members gateway."""

import pytest

from entities.exceptions import MemberNotFoundError
from entities.gateways import SqlAccountsGateway, SqlEntitiesGateway, SqlMembersGateway
from entities.models import Entity, EntityAccount, EntityMember, MemberLevel, MemberStatus


@pytest.fixture
def alice(accounts_gateway: SqlAccountsGateway) -> EntityAccount:
    account = EntityAccount(type="local_user", account="alice")
    accounts_gateway.create(account)
    return account


@pytest.fixture
def engineering(entities_gateway: SqlEntitiesGateway) -> Entity:
    entity = Entity(type="group", name="Engineering")
    entities_gateway.create(entity)
    return entity


def test_create_and_read(members_gateway: SqlMembersGateway, alice: EntityAccount, engineering: Entity) -> None:
    """Test creating a member and reading it back with its entity and account."""
    member = EntityMember(entity_id=engineering.id, account_id=alice.id, level=MemberLevel.ADMIN)
    members_gateway.create(member)

    read = members_gateway.get_from_id(member.id)
    assert read.entity_id == engineering.id
    assert read.account_id == alice.id
    assert read.status == "member"
    assert read.level == MemberLevel.ADMIN
    assert read.entity.name == "Engineering"
    assert read.account.account == "alice"


def test_get_from_unknown_id(members_gateway: SqlMembersGateway) -> None:
    """Test that reading an unknown member raises MemberNotFoundError."""
    with pytest.raises(MemberNotFoundError):
        members_gateway.get_from_id("missing")


def test_get_member_status(members_gateway: SqlMembersGateway, alice: EntityAccount, engineering: Entity) -> None:
    """Test that only full members are returned by get_member_status."""
    assert members_gateway.get_member_status(alice.id, engineering.id) is None

    invited = EntityMember(entity_id=engineering.id, account_id=alice.id, status=MemberStatus.INVITED.value)
    members_gateway.create(invited)
    assert members_gateway.get_member_status(alice.id, engineering.id) is None

    member = EntityMember(entity_id=engineering.id, account_id=alice.id)
    members_gateway.create(member)
    assert members_gateway.get_member_status(alice.id, engineering.id).id == member.id


def test_members_and_membership(
    members_gateway: SqlMembersGateway,
    accounts_gateway: SqlAccountsGateway,
    entities_gateway: SqlEntitiesGateway,
    alice: EntityAccount,
    engineering: Entity,
) -> None:
    """Test listing the members of an entity and the memberships of an account."""
    bob = EntityAccount(type="local_user", account="bob")
    accounts_gateway.create(bob)
    marketing = Entity(type="group", name="Marketing")
    entities_gateway.create(marketing)

    members_gateway.create(EntityMember(entity_id=engineering.id, account_id=alice.id))
    members_gateway.create(EntityMember(entity_id=engineering.id, account_id=bob.id))
    members_gateway.create(EntityMember(entity_id=marketing.id, account_id=alice.id))

    assert [m.account.account for m in members_gateway.get_members(engineering)] == ["alice", "bob"]
    assert [m.entity.name for m in members_gateway.get_membership(alice)] == ["Engineering", "Marketing"]
    assert [m.entity.name for m in members_gateway.get_membership(bob)] == ["Engineering"]


def test_membership_of_deleted_entity(members_gateway: SqlMembersGateway, alice: EntityAccount) -> None:
    """Test that a membership of a missing entity has no joined entity."""
    members_gateway.create(EntityMember(entity_id="gone", account_id=alice.id))

    memberships = members_gateway.get_membership(alice)
    assert len(memberships) == 1
    assert memberships[0].entity is None
