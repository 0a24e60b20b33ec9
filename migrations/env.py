"""Alembic environment for the study-tracker schema.

The database URL comes from application settings (``POSTGRES_*`` env
vars) unless overridden on the command line::

    alembic -x db_url=postgresql+psycopg://... upgrade head

Migrations run through a synchronous psycopg 3 engine.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from study_tracker.config import settings
from study_tracker.storage.orm import Base

config = context.config

config.set_main_option(
    "sqlalchemy.url",
    context.get_x_argument(as_dictionary=True).get("db_url", settings.database_url),
)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it (``alembic upgrade --sql``)."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single short-lived connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
