"""Alembic environment for CIRCULATION.

Policy defaults:
  - compare_type=True (catch column type drift)
  - compare_server_default=True (catch server default drift)
  - render_as_batch=True on SQLite (safe ALTER TABLE emulation)
  - URL precedence: `-x url=...` > config sqlalchemy.url > CIRCULATION_DB_URL
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Registers the tables on the shared metadata for autogenerate
import circulation.adapters.db.schema  # noqa: F401 # pylint: disable=unused-import
from circulation.adapters.db.dialects import DialectName
from circulation.adapters.db.metadata import metadata
from circulation.config import DB_URL_ENVVAR

# pylint: disable=no-member

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = metadata


def get_url() -> str:
    """Resolve the DB URL: `-x url` > config > environment."""
    url = context.get_x_argument(as_dictionary=True).get("url")

    if not url:
        url = config.get_main_option("sqlalchemy.url")

    # an unexpanded %(...)s placeholder counts as unset
    if not url or "%(" in url:  # pylint: disable=R2004
        url = os.environ.get(DB_URL_ENVVAR)

    if not url:
        raise RuntimeError(f"Set {DB_URL_ENVVAR} to your database URL.")
    return url


def run_migrations_offline() -> None:
    """Emit the migration SQL to the script output without connecting."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run the migrations over a live connection."""
    connectable = engine_from_config(
        {"sqlalchemy.url": get_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        is_sqlite = DialectName.from_sqlalchemy(connection) is DialectName.SQLITE
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=is_sqlite,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
