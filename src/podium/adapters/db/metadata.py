"""The `MetaData` every PODIUM table attaches to.

The naming convention gives constraints the names the migrations create
(``uq_event_store_event_id``, ``ck_event_store_positive_version``, ...), so
`create_all()` and Alembic produce the same schema and the event store can
tell constraint violations apart by name.
"""

from sqlalchemy import MetaData

NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "ix": "ix_%(table_name)s_%(column_0_N_label)s",
    "fk": "fk_%(table_name)s_%(column_0_N_name)s_%(referred_table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
