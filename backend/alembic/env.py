"""Alembic environment for the workout blob store; the URL always comes from DATABASE_URL."""

from logging.config import fileConfig

from alembic import context

from mapty.config import settings
from mapty.db.base import Base
from mapty.models import StorageEntry  # noqa: F401 - registers storage_entries on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite cannot ALTER most column properties in place; batch mode rebuilds the table.
_render_as_batch = settings.database_url.startswith("sqlite")


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=_render_as_batch,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the storage table without a live connection."""
    _configure(url=settings.database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # The engine the app writes through (DATABASE_URL)
    from mapty.db.session import engine

    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
