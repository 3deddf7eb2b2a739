"""SQL gateway for entities."""

from typing import Any

import structlog
from sqlalchemy import insert

from entities.capabilities import AccountsSearchEntities, EntitiesSearchEntities
from entities.exceptions import EntityNotFoundError
from entities.gateway import EntitiesGateway
from entities.gateways.core import CoreGateway, now
from entities.models import Entity
from entities.query_builder import EntitiesQueryBuilder
from entities.schema import entities_table

logger = structlog.get_logger()


class SqlEntitiesGateway(CoreGateway, EntitiesGateway):
    """Entities stored in the ``entities`` table."""

    def new_select_query(self) -> EntitiesQueryBuilder:
        qb = EntitiesQueryBuilder.select(entities_table, "e", self.sql_log)
        qb.left_join_entity_account("owner_id")
        return qb

    def create(self, entity: Entity) -> None:
        if entity.creation is None:
            entity.creation = now()

        with self.engine.begin() as conn:
            conn.execute(
                insert(entities_table).values(
                    id=entity.id,
                    type=entity.type,
                    owner_id=entity.owner_id,
                    visibility=int(entity.visibility),
                    access=int(entity.access),
                    name=entity.name,
                    creation=entity.creation,
                )
            )
        logger.debug("Entity created", entity_id=entity.id, type=entity.type)

    def get_all(self, type: str = "") -> list[Entity]:
        qb = self.new_select_query()
        if type:
            qb.limit_to_type(type)
        return self.materialize_all(qb.order_by_creation())

    def get_from_id(self, entity_id: str) -> Entity:
        qb = self.new_select_query().limit_to_db_field("id", entity_id)
        entity = self.materialize_one(qb)
        if entity is None:
            raise EntityNotFoundError(f"Entity {entity_id} not found")
        return entity

    def search(self, needle: str, type: str = "", plugins: list[Any] | None = None) -> list[Entity]:
        qb = self.new_select_query()
        if type:
            qb.limit_to_type(type)
        qb.search_in_name(needle)

        for plugin in plugins or []:
            if isinstance(plugin, (EntitiesSearchEntities, AccountsSearchEntities)):
                plugin.build_search_entities(qb, needle)

        return self.materialize_all(qb.order_by_creation())

    def materialize_one(self, qb: EntitiesQueryBuilder) -> Entity | None:
        with self.engine.connect() as conn:
            row = qb.execute(conn).mappings().first()
        if row is None:
            return None
        return self.row_to_entity(row)

    def materialize_all(self, qb: EntitiesQueryBuilder) -> list[Entity]:
        with self.engine.connect() as conn:
            rows = qb.execute(conn).mappings().all()
        return [self.row_to_entity(row) for row in rows]
