"""CLI for the entities manager."""

import sys
from collections.abc import Callable
from typing import Annotated, Any, Literal

import structlog
from cyclopts import App, Parameter

from entities.account_commands import account_app
from entities.config import get_config
from entities.config_commands import config_app
from entities.exceptions import EntitiesError
from entities.gateways import create_schema
from entities.implementations import install_builtin_types
from entities.manager import EntitiesManager
from entities.models import Access, Entity, EntityMember, MemberLevel, MemberStatus, Visibility
from entities.type_commands import type_app

logger = structlog.get_logger()

app = App(
    help="Entities - typed entities, accounts and memberships",
)

app.command(account_app)
app.command(type_app)
app.command(config_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_manager() -> EntitiesManager:
    """Get a manager for the configured database."""
    return EntitiesManager.from_config(get_config())


def run_command(command: Callable[[EntitiesManager], Any]) -> Any:
    """Run ``command`` with a manager, reporting entities errors on stderr."""
    with get_manager() as manager:
        try:
            return command(manager)
        except EntitiesError as e:
            logger.debug("Command failed", kind=e.kind.value, error=str(e))
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)


def format_entity(entity: Entity) -> str:
    owner = f" (owner: {entity.owner.account})" if entity.owner else ""
    return f"{entity.id} [{entity.type}] {entity.name}{owner}"


def format_member(member: EntityMember) -> str:
    account = member.account.account if member.account else member.account_id
    entity = member.entity.name if member.entity else member.entity_id
    try:
        level = MemberLevel(member.level).name.lower()
    except ValueError:
        level = str(member.level)
    return f"{member.id} {account} -> {entity} ({member.status}, {level})"


@app.command
def init() -> None:
    """Create the database tables and register the built-in types."""
    with get_manager() as manager:
        create_schema(manager.entities.engine)
        installed = install_builtin_types(manager.types)
    print(f"Database ready, {len(installed)} type(s) registered")


@app.command
def create(
    type: str,
    name: str,
    owner: str = "",
    visibility: int = Visibility.NONE,
    access: int = Access.LIMITED,
) -> None:
    """Create a new entity."""
    entity = Entity(type=type, name=name, visibility=visibility, access=access)
    run_command(lambda manager: manager.save_entity(entity, owner))
    print(f"Created entity {entity.id}: {entity.name}")


@app.command
def read(entity_id: str) -> None:
    """Read an entity by ID."""
    entity = run_command(lambda manager: manager.get_entity(entity_id))

    print(f"Entity: {entity.id}")
    print(f"Type: {entity.type}")
    print(f"Name: {entity.name}")
    print(f"Visibility: {entity.visibility}")
    print(f"Access: {entity.access}")
    if entity.owner:
        print(f"Owner: {entity.owner.account} ({entity.owner.id})")
    if entity.creation:
        print(f"Created: {entity.creation.isoformat()}")


@app.command
def list(type: str = "") -> None:
    """List entities, optionally of one type."""
    entities = run_command(lambda manager: manager.get_all_entities(type))

    print(f"Found {len(entities)} entity(ies):\n")
    for entity in entities:
        print(format_entity(entity))


@app.command
def search(needle: str, type: str = "") -> None:
    """Search entities."""
    entities = run_command(lambda manager: manager.search_entities(needle, type))

    print(f"Found {len(entities)} entity(ies):\n")
    for entity in entities:
        print(format_entity(entity))


@app.command
def members(entity_id: str) -> None:
    """List the members of an entity."""
    found = run_command(lambda manager: manager.entity_get_members(manager.get_entity(entity_id)))

    if not found:
        print(f"No members for entity {entity_id}")
        return

    print(f"Members of entity {entity_id}:\n")
    for member in found:
        print(f"  {format_member(member)}")


@app.command
def join(
    entity_id: str,
    account_id: str,
    level: int = MemberLevel.MEMBER,
    status: Literal["invited", "requesting", "member"] = "member",
) -> None:
    """Add an account to an entity."""

    def _join(manager: EntitiesManager) -> EntityMember:
        entity = manager.get_entity(entity_id)
        account = manager.get_account(account_id)
        member = EntityMember(entity_id=entity.id, account_id=account.id, status=MemberStatus(status).value, level=level)
        manager.save_member(member)
        return member

    member = run_command(_join)
    print(f"Added member {member.id}")


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    app(tokens)


def run() -> None:
    app.meta()


if __name__ == "__main__":
    run()
