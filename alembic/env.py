"""
Alembic environment for the clinic schema.

The clinic tables share a PostgreSQL database with the hosted auth and
storage schemas, so autogenerate only compares tables declared on the
clinic models and ignores everything else it reflects.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from app.config.settings import get_settings
from app.database.base import Base
from app.domains.clinic.infrastructure.persistence.sqlalchemy import models  # noqa: F401

CLINIC_VERSION_TABLE = "clinic_alembic_version"

config = context.config
config.set_main_option("sqlalchemy.url", get_settings().database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
clinic_tables = frozenset(target_metadata.tables)


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    """Skip reflected tables (and their indexes) that the clinic models do not own."""
    if type_ == "table":
        return name in clinic_tables
    table = getattr(obj, "table", None)
    if table is not None:
        return table.name in clinic_tables
    return True


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        version_table=CLINIC_VERSION_TABLE,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure(connection=connection, transaction_per_migration=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
