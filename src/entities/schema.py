"""SQL tables backing the entities gateways."""

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table

TABLE_ENTITIES = "entities"
TABLE_ENTITIES_ACCOUNTS = "entities_accounts"
TABLE_ENTITIES_MEMBERS = "entities_members"
TABLE_ENTITIES_TYPES = "entities_types"

LEFT_JOIN_PREFIX_ENTITIES = "lj_e_"
LEFT_JOIN_PREFIX_ENTITIES_ACCOUNT = "lj_ea_"

metadata = MetaData()

entities_table = Table(
    TABLE_ENTITIES,
    metadata,
    Column("id", String(32), primary_key=True),
    Column("type", String(64), nullable=False, index=True),
    Column("owner_id", String(32), nullable=False, default=""),
    Column("visibility", Integer, nullable=False, default=0),
    Column("access", Integer, nullable=False, default=0),
    Column("name", String(255), nullable=False, default=""),
    Column("creation", DateTime, nullable=False),
)

accounts_table = Table(
    TABLE_ENTITIES_ACCOUNTS,
    metadata,
    Column("id", String(32), primary_key=True),
    Column("type", String(64), nullable=False, index=True),
    Column("account", String(127), nullable=False, default=""),
    Column("creation", DateTime, nullable=False),
)

members_table = Table(
    TABLE_ENTITIES_MEMBERS,
    metadata,
    Column("id", String(32), primary_key=True),
    Column("entity_id", String(32), nullable=False, index=True),
    Column("account_id", String(32), nullable=False, index=True),
    Column("status", String(15), nullable=False),
    Column("level", Integer, nullable=False, default=0),
    Column("creation", DateTime, nullable=False),
)

types_table = Table(
    TABLE_ENTITIES_TYPES,
    metadata,
    Column("id", String(32), primary_key=True),
    Column("interface", String(63), nullable=False),
    Column("type", String(63), nullable=False),
    Column("class", String(255), nullable=False),
    Column("creation", DateTime, nullable=False),
)

# Columns projected by the left-join helpers, per joined table.
ENTITY_COLUMNS = ("id", "type", "owner_id", "visibility", "access", "name", "creation")
ACCOUNT_COLUMNS = ("id", "type", "account", "creation")
