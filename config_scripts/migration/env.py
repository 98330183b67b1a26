# encoding: utf-8

from alembic import context
from sqlalchemy import engine_from_config, pool

import config_scripts.model.meta as meta

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Only the script history table is managed here. Application tables that
# share the metadata belong to the application's own migrations.
target_metadata = meta.metadata
version_table = config.get_main_option(u"version_table")


def include_name(name, type_, parent_names):
    if type_ == 'table':
        return name == u'config_scripts'
    return True


def run_migrations_offline():
    """Run migrations in 'offline' mode.

    This configures the context with just a URL
    and not an Engine, though an Engine is acceptable
    here as well.  By skipping the Engine creation
    we don't even need a DBAPI to be available.

    Calls to context.execute() here emit the given string to the
    script output.

    """
    url = config.get_main_option(u"sqlalchemy.url")
    context.configure(
        url=url, target_metadata=target_metadata, literal_binds=True,
        include_name=include_name, version_table=version_table,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode.

    The engine of the initialized model is reused when it points to the same
    database, which keeps in-memory SQLite databases visible.

    """
    url = config.get_main_option(u"sqlalchemy.url")
    if meta.engine is not None and \
            meta.engine.url.render_as_string(hide_password=False) == url:
        connectable = meta.engine
    else:
        connectable = engine_from_config(
            config.get_section(config.config_ini_section),
            prefix=u'sqlalchemy.',
            poolclass=pool.NullPool
        )

    with connectable.connect() as connection:
        context.configure(
            connection=connection, target_metadata=target_metadata,
            include_name=include_name, version_table=version_table,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
