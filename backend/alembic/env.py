"""
Alembic environment for the posts schema.

The URL always comes from DATABASE_URL through app settings; alembic.ini
carries no connection string. Online runs go through a NullPool async engine
so a migration never leaves a pooled connection behind.

    alembic upgrade head                 apply every pending revision
    alembic upgrade head --sql           print the SQL instead (offline)
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from app.config import get_settings
from app.database import Base
from app.models import post  # noqa: F401  registers the posts table

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

DATABASE_URL = get_settings().database_url


def _run(**configure_kwargs) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **configure_kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    engine = create_async_engine(DATABASE_URL, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(lambda sync_conn: _run(connection=sync_conn))
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _run(url=DATABASE_URL, literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(_run_online())
