"""Data models for entities, accounts, members and registered types."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum


def generate_id() -> str:
    """Generate a new record identifier."""
    return uuid.uuid4().hex


class Interface(str, Enum):
    """Interfaces a type implementation can be registered under."""

    ENTITIES = "IEntities"
    ENTITIES_ACCOUNTS = "IEntitiesAccounts"
    ENTITIES_MEMBERS = "IEntitiesMembers"
    ENTITIES_TYPES = "IEntitiesTypes"


class MemberStatus(str, Enum):
    INVITED = "invited"
    REQUESTING = "requesting"
    MEMBER = "member"


class MemberLevel(IntEnum):
    NONE = 0
    MEMBER = 1
    MODERATOR = 4
    ADMIN = 8
    OWNER = 9


class Visibility(IntEnum):
    NONE = 0
    MODERATOR = 1
    MEMBERS = 2
    ALL = 4


class Access(IntEnum):
    LIMITED = 0
    INVITE = 1
    REQUEST = 2
    FREE = 4


@dataclass
class EntityAccount:
    """An identity able to own entities and hold memberships."""

    type: str
    account: str
    id: str = field(default_factory=generate_id)
    creation: datetime | None = None


@dataclass
class Entity:
    """A typed object (group, circle, project...) that accounts can belong to."""

    type: str
    name: str = ""
    id: str = field(default_factory=generate_id)
    owner_id: str = ""
    visibility: int = Visibility.NONE
    access: int = Access.LIMITED
    creation: datetime | None = None
    owner: EntityAccount | None = None

    def set_owner(self, owner: EntityAccount) -> None:
        self.owner = owner
        self.owner_id = owner.id


@dataclass
class EntityMember:
    """The relation between one account and one entity."""

    entity_id: str
    account_id: str
    status: str = MemberStatus.MEMBER.value
    level: int = MemberLevel.MEMBER
    id: str = field(default_factory=generate_id)
    creation: datetime | None = None
    entity: Entity | None = None
    account: EntityAccount | None = None


@dataclass
class EntityType:
    """A registered implementation for an (interface, type) pair.

    ``class_name`` is the string handed to the service locator to build the
    implementation instance.
    """

    interface: str
    type: str
    class_name: str
    id: str = field(default_factory=generate_id)
    creation: datetime | None = None
