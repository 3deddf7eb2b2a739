"""Entities - typed entities, accounts and memberships with pluggable types."""

from entities.exceptions import EntitiesError, ErrorKind
from entities.manager import EntitiesManager
from entities.models import (
    Access,
    Entity,
    EntityAccount,
    EntityMember,
    EntityType,
    Interface,
    MemberLevel,
    MemberStatus,
    Visibility,
)
from entities.registry import CapabilityRegistry, Resolution

__all__ = [
    "Access",
    "CapabilityRegistry",
    "EntitiesError",
    "EntitiesManager",
    "Entity",
    "EntityAccount",
    "EntityMember",
    "EntityType",
    "ErrorKind",
    "Interface",
    "MemberLevel",
    "MemberStatus",
    "Resolution",
    "Visibility",
]
