import sys
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config
from sqlalchemy import pool

# Add the repository root to sys.path so `backend.app` imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

# Import SQLModel base (registers all tables) and config
from backend.app.db.base import SQLModel
from backend.app.config import get_settings

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Database URL precedence:
# 1. -x sqlalchemy.url="..." on the command line
# 2. sqlalchemy.url already set on the Config (application startup, tests)
# 3. settings.DATABASE_URL
db_url = None
if hasattr(config, 'cmd_opts') and hasattr(config.cmd_opts, 'x'):
    if config.cmd_opts.x:
        for x_arg in config.cmd_opts.x:
            if x_arg.startswith('sqlalchemy.url='):
                db_url = x_arg.split('=', 1)[1]
                break

if db_url:
    config.set_main_option("sqlalchemy.url", db_url)
elif not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL)

# Logging is configured by the application (structlog); the ini file carries
# no logger sections.

# Set SQLModel metadata for autogenerate
target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits SQL to the script output without connecting to the database.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,  # Enable batch mode for SQLite
        )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a sync engine."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,  # Enable batch mode for SQLite
            )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
