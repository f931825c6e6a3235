"""
Alembic environment configuration for the session store migrations.

This script sets up the migration context, connects to the database using settings.DATABASE_URL
through the async driver the application uses, and targets the SQLModel metadata. It adds the
project root to sys.path so the `src` package resolves when alembic runs from the repository root.
"""
import asyncio  # For running the async engine
import os  # For path manipulation
import sys  # For modifying sys.path
from logging.config import fileConfig  # For configuring logging

from alembic import context  # For migration context
from sqlalchemy import pool  # For database connection
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

# Add project root to sys.path to resolve src/ imports
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))  # Parent of alembic/
if project_root not in sys.path:
    sys.path.insert(0, project_root)  # Prepend to ensure priority

from src.core.config.settings import settings  # Import settings after path adjustment
from src.domain import entities  # noqa: F401 - registers users and user_sessions
from sqlmodel import SQLModel  # For metadata

# Alembic Config object, provides access to alembic.ini
config = context.config

# Set database URL from settings for consistency with FastAPI
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# Configure logging from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata for SQLModel models, includes all defined tables
target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode, generating SQL scripts without a database connection.
    """
    url = config.get_main_option("sqlalchemy.url")  # Database URL from config
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,  # Use literal SQL values
        dialect_opts={"paramstyle": "named"},  # Named parameters for SQL
    )

    with context.begin_transaction():
        context.run_migrations()  # Generate SQL scripts


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()  # Apply migrations


async def run_async_migrations() -> None:
    """
    Apply migrations over an async connection, without pooling.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),  # Database config from alembic.ini
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # Disable pooling for migrations
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode against settings.DATABASE_URL.
    """
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()  # Run offline migrations
else:
    run_migrations_online()  # Run online migrations
