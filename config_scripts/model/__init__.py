# encoding: utf-8
from __future__ import annotations

import contextlib
import logging
import os
from typing import Any, Iterator, Optional

import sqlalchemy as sa
from sqlalchemy import MetaData
from sqlalchemy.engine import Engine

from alembic.command import (
    upgrade as alembic_upgrade,
    downgrade as alembic_downgrade,
    current as alembic_current,
)
from alembic.config import Config as AlembicConfig

import config_scripts.migration
import config_scripts.model.meta as meta

from config_scripts.common import config
from config_scripts.exceptions import ConfigScriptsConfigurationException
from config_scripts.model.meta import Session
from config_scripts.model.base import BaseModel
from config_scripts.model.domain_object import DomainObject
from config_scripts.model.script_history import (
    ScriptHistory,
    script_history_table,
)
from config_scripts.types import AlchemySession

log = logging.getLogger(__name__)

__all__ = [
    "Session", "BaseModel", "DomainObject",
    "ScriptHistory", "script_history_table",
    "init_model", "ensure_engine", "repo",
]

ALEMBIC_VERSION_TABLE = u"config_scripts_alembic_version"


def init_model(engine: Engine) -> None:
    '''Call me before using any of the tables or classes in the model'''
    meta.Session.remove()
    meta.Session.configure(bind=engine)
    meta.engine = engine


def ensure_engine() -> Engine:
    """Return initialized SQLAlchemy engine or raise an error.

    This function guarantees that engine is initialized and provides a hint
    when someone attempts to use the database before model is properly
    initialized.

    Prefer using this function instead of direct access to engine via
    `meta.engine`.

    """
    if not meta.engine:
        log.error(
            "%s:%s must be called before any interaction with the database",
            init_model.__module__, init_model.__name__
        )
        raise ConfigScriptsConfigurationException("Model is not initialized")
    return meta.engine


class Repository():
    metadata: MetaData
    session: AlchemySession

    _alembic_ini: str = os.path.join(
        os.path.dirname(config_scripts.migration.__file__),
        u"alembic.ini"
    )
    _alembic_output: list[tuple[str, ...]]

    def __init__(self, metadata: MetaData, session: AlchemySession) -> None:
        self.metadata = metadata
        self.session = session
        self._alembic_output = []

    @contextlib.contextmanager
    def transaction(self) -> Iterator[AlchemySession]:
        '''Run the body as a single unit of work.

        Everything is committed when the body finishes, and rolled back
        when it raises. The exception is re-raised.
        '''
        try:
            yield self.session
        except BaseException:
            self.session.rollback()
            raise
        else:
            self.session.commit()

    def init_db(self) -> None:
        '''Ensures the script history table exists.
        '''
        self.session.rollback()
        self.session.remove()
        self.upgrade_db()
        log.info('Database initialised')

    def create_db(self) -> None:
        '''Create every table known to the metadata, without migrations.
        '''
        with ensure_engine().begin() as conn:
            self.metadata.create_all(conn)

        log.info('Database tables created')

    def delete_all(self) -> None:
        '''Delete all data from all tables.'''
        self.session.remove()
        connection: Any = self.session.connection()
        inspector = sa.inspect(connection)
        for table in reversed(self.metadata.sorted_tables):
            # if a model is imported without its migrations applied, the
            # corresponding table can be missing from DB
            if not inspector.has_table(table.name):
                continue

            connection.execute(sa.delete(table))
        self.session.commit()
        log.info('Database table data deleted')

    def reset_alembic_output(self) -> None:
        self._alembic_output = []

    def add_alembic_output(self, text: str, *args: str) -> None:
        self._alembic_output.append((text, *args))

    def take_alembic_output(self,
                            with_reset: bool = True) -> list[tuple[str, ...]]:
        output = self._alembic_output
        if with_reset:
            self.reset_alembic_output()
        return output

    def setup_migration_version_control(self) -> None:
        self.reset_alembic_output()
        alembic_config = AlembicConfig(self._alembic_ini)
        alembic_config.set_main_option(
            "sqlalchemy.url", config.get("sqlalchemy.url")
        )
        alembic_config.set_main_option(
            "version_table", ALEMBIC_VERSION_TABLE
        )
        # This is an interceptor for alembic output. Otherwise,
        # everything will be printed to stdout
        alembic_config.print_stdout = self.add_alembic_output

        self.alembic_config = alembic_config

    def current_version(self) -> Optional[str]:
        """Returns current revision of the migration repository.

        Returns "base" when none of the migrations were applied. If current
        revision is the newest one, ` (head)` suffix added to the result

        """
        self.setup_migration_version_control()
        try:
            alembic_current(self.alembic_config)
            return self.take_alembic_output()[0][0]
        except (TypeError, IndexError):
            # alembic is not initialized yet
            return 'base'

    def downgrade_db(self, version: str = 'base') -> None:
        self.setup_migration_version_control()
        alembic_downgrade(self.alembic_config, version)
        log.info(u'Script history version set to: %s', version)

    def upgrade_db(self, version: str = 'head') -> None:
        '''Upgrade db using alembic migrations.

        @param version: version to upgrade to (if None upgrade to latest)
        '''
        version_before = self.current_version()
        self.setup_migration_version_control()
        alembic_upgrade(self.alembic_config, version)
        version_after = self.current_version()

        if version_after != version_before:
            log.info(
                u'Script history version upgraded: %s -> %s',
                version_before,
                version_after
            )
        else:
            log.info(u'Script history version remains as: %s', version_after)


repo = Repository(meta.metadata, meta.Session)
