"""Alembic migration runner for the accounts schema (users table).

The database URL comes from accounts Settings so migrations and the API
always target the same store.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from accounts.core.config import get_settings
from accounts.models import Base, User  # noqa: F401  (registers the users table)

config = context.config
if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name)
    except KeyError:
        # alembic.ini carries no [loggers]/[handlers]/[formatters] sections.
        pass

target_metadata = Base.metadata
database_url = get_settings().DATABASE_URL


if context.is_offline_mode():
    # Emit SQL for review instead of connecting.
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(database_url, poolclass=NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
