from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, create_engine

from onpoint.core.config import settings
from onpoint.db.session import Base

# Import all models so Alembic sees them in metadata
from onpoint.models.user import User  # noqa: F401
from onpoint.models.destination import Destination  # noqa: F401
from onpoint.models.trip import Trip  # noqa: F401
from onpoint.models.addon import Addon  # noqa: F401
from onpoint.models.booking import Booking  # noqa: F401
from onpoint.models.booking_addon import BookingAddon  # noqa: F401
from onpoint.models.payment import Payment  # noqa: F401
from onpoint.models.invoice import Invoice  # noqa: F401


# Alembic Config object
config = context.config

# an explicit sqlalchemy.url (start_api.py) wins; the alembic CLI uses DATABASE_URL
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# Logging config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata for autogenerate
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    url = config.get_main_option("sqlalchemy.url")

    # engine_from_config would read alembic.ini, which carries no URL
    connectable = create_engine(url, poolclass=pool.NullPool)

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
