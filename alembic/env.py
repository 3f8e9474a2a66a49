from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, create_engine

from fleet_admin.core.config import settings
from fleet_admin.db.session import Base

# Import all models so Alembic sees them in metadata
from fleet_admin.models.user import User  # noqa: F401
from fleet_admin.models.quote import ContactQuote  # noqa: F401
from fleet_admin.models.booking import RentRequest  # noqa: F401
from fleet_admin.models.car import Car, Color  # noqa: F401
from fleet_admin.models.notification import Notification  # noqa: F401
from fleet_admin.models.email_log import EmailLog  # noqa: F401
from fleet_admin.models.audit_log import AuditLog  # noqa: F401


# Alembic Config object
config = context.config

# Migrations go through DIRECT_URL when set so they bypass the connection pooler
config.set_main_option("sqlalchemy.url", settings.migration_url)

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
