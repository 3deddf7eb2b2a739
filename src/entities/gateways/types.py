"""SQL gateway for registered types."""

import structlog
from sqlalchemy import insert

from entities.gateway import TypesGateway
from entities.gateways.core import CoreGateway, now
from entities.models import EntityType
from entities.query_builder import EntitiesQueryBuilder
from entities.schema import types_table

logger = structlog.get_logger()


class SqlTypesGateway(CoreGateway, TypesGateway):
    """Type implementations registered in the ``entities_types`` table."""

    def get_all_registered_types(self) -> list[EntityType]:
        qb = EntitiesQueryBuilder.select(types_table, "et", self.sql_log).order_by_creation()
        with self.engine.connect() as conn:
            rows = qb.execute(conn).mappings().all()

        return [
            EntityType(
                id=row["id"],
                interface=row["interface"],
                type=row["type"],
                class_name=row["class"],
                creation=row["creation"],
            )
            for row in rows
        ]

    def register(self, entity_type: EntityType) -> None:
        if entity_type.creation is None:
            entity_type.creation = now()

        with self.engine.begin() as conn:
            conn.execute(
                insert(types_table).values(
                    id=entity_type.id,
                    interface=entity_type.interface,
                    type=entity_type.type,
                    **{"class": entity_type.class_name},
                    creation=entity_type.creation,
                )
            )
        logger.info("Type registered", interface=entity_type.interface, type=entity_type.type)
