"""Group entity types."""

import structlog

from entities.capabilities import (
    EntitiesAdminRights,
    EntitiesConfirmCreation,
    EntitiesSearchDuplicate,
    EntitiesSearchEntities,
)
from entities.exceptions import EntityCreationError
from entities.models import Access, Entity
from entities.query_builder import EntitiesQueryBuilder

logger = structlog.get_logger()


class GroupEntities(EntitiesSearchDuplicate, EntitiesSearchEntities, EntitiesAdminRights):
    """Named groups; two groups with the same name are duplicates."""

    TYPE = "group"

    def build_search_duplicate(self, qb: EntitiesQueryBuilder, entity: Entity) -> None:
        qb.limit_to_type(entity.type).limit_to_name(entity.name)

    def build_search_entities(self, qb: EntitiesQueryBuilder, needle: str) -> None:
        qb.search_in_name(needle)

    def has_admin_rights(self, entity: Entity) -> bool:
        return False


class AdminGroupEntities(GroupEntities, EntitiesConfirmCreation):
    """Groups whose members are administrators. They can only be joined by invitation."""

    TYPE = "admin_group"

    def confirm_creation_status(self, entity: Entity) -> None:
        if not entity.name:
            raise EntityCreationError("An admin group needs a name")

        if entity.access != Access.INVITE:
            logger.debug("Restricting admin group access", entity_id=entity.id, access=entity.access)
            entity.access = Access.INVITE

    def has_admin_rights(self, entity: Entity) -> bool:
        return True
