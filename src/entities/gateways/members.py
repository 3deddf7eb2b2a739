"""SQL gateway for entity members."""

import structlog
from sqlalchemy import insert

from entities.exceptions import MemberNotFoundError
from entities.gateway import MembersGateway
from entities.gateways.core import CoreGateway, now
from entities.models import Entity, EntityAccount, EntityMember, MemberStatus
from entities.query_builder import EntitiesQueryBuilder
from entities.schema import members_table

logger = structlog.get_logger()


class SqlMembersGateway(CoreGateway, MembersGateway):
    """Members stored in the ``entities_members`` table, read with their entity and account."""

    def new_select_query(self) -> EntitiesQueryBuilder:
        qb = EntitiesQueryBuilder.select(members_table, "em", self.sql_log)
        return qb.left_join_entity().left_join_entity_account()

    def create(self, member: EntityMember) -> None:
        if member.creation is None:
            member.creation = now()

        with self.engine.begin() as conn:
            conn.execute(
                insert(members_table).values(
                    id=member.id,
                    entity_id=member.entity_id,
                    account_id=member.account_id,
                    status=str(getattr(member.status, "value", member.status)),
                    level=int(member.level),
                    creation=member.creation,
                )
            )
        logger.debug(
            "EntityMember created", member_id=member.id, entity_id=member.entity_id, account_id=member.account_id
        )

    def get_from_id(self, member_id: str) -> EntityMember:
        members = self.materialize_all(self.new_select_query().limit_to_db_field("id", member_id))
        if not members:
            raise MemberNotFoundError(f"EntityMember {member_id} not found")
        return members[0]

    def get_member_status(self, account_id: str, entity_id: str) -> EntityMember | None:
        qb = (
            self.new_select_query()
            .limit_to_account_id(account_id)
            .limit_to_entity_id(entity_id)
            .limit_to_status(MemberStatus.MEMBER.value)
        )
        members = self.materialize_all(qb)
        return members[0] if members else None

    def get_members(self, entity: Entity) -> list[EntityMember]:
        qb = self.new_select_query().limit_to_entity_id(entity.id).order_by_creation()
        return self.materialize_all(qb)

    def get_membership(self, account: EntityAccount) -> list[EntityMember]:
        qb = self.new_select_query().limit_to_account_id(account.id).order_by_creation()
        return self.materialize_all(qb)

    def materialize_all(self, qb: EntitiesQueryBuilder) -> list[EntityMember]:
        with self.engine.connect() as conn:
            rows = qb.execute(conn).mappings().all()
        return [self.row_to_member(row) for row in rows]
