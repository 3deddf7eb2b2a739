"""Built-in type implementations."""

from entities.gateway import TypesGateway
from entities.implementations.groups import AdminGroupEntities, GroupEntities
from entities.implementations.local_users import LocalUserAccounts
from entities.models import EntityType, Interface

BUILTIN_TYPES = [
    (Interface.ENTITIES_ACCOUNTS, LocalUserAccounts.TYPE, "entities.implementations:LocalUserAccounts"),
    (Interface.ENTITIES, GroupEntities.TYPE, "entities.implementations:GroupEntities"),
    (Interface.ENTITIES, AdminGroupEntities.TYPE, "entities.implementations:AdminGroupEntities"),
]


def install_builtin_types(types_gateway: TypesGateway) -> list[EntityType]:
    """Register the built-in types that are not registered yet.

    Returns:
        The newly registered types
    """
    known = {(t.interface, t.type) for t in types_gateway.get_all_registered_types()}
    installed = []
    for interface, type_tag, class_name in BUILTIN_TYPES:
        if (interface.value, type_tag) in known:
            continue
        entity_type = EntityType(interface=interface.value, type=type_tag, class_name=class_name)
        types_gateway.register(entity_type)
        installed.append(entity_type)
    return installed


__all__ = ["AdminGroupEntities", "BUILTIN_TYPES", "GroupEntities", "LocalUserAccounts", "install_builtin_types"]
