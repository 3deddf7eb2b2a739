"""Type registration commands for the entities CLI."""

from typing import Literal

from cyclopts import App

from entities.models import EntityType

type_app = App(name="type", help="Manage registered type implementations")


@type_app.command(name="list")
def list_types() -> None:
    """List the registered types."""
    from entities.cli import run_command

    types = run_command(lambda manager: manager.registry.records())

    if not types:
        print("No registered types")
        return

    for entity_type in types:
        print(f"{entity_type.interface} {entity_type.type} -> {entity_type.class_name}")


@type_app.command
def register(
    interface: Literal["IEntities", "IEntitiesAccounts", "IEntitiesMembers", "IEntitiesTypes"],
    type: str,
    class_name: str,
) -> None:
    """Register an implementation for a type.

    Args:
        interface: Interface the type belongs to
        type: Type tag
        class_name: Importable implementation, as ``package.module:Class``
    """
    from entities.cli import run_command

    entity_type = EntityType(interface=interface, type=type, class_name=class_name)
    run_command(lambda manager: manager.types.register(entity_type))
    print(f"Registered {interface} {type} -> {class_name}")
