# encoding: utf-8

"""SQLAlchemy Metadata and Session object"""
from typing import Optional
from sqlalchemy import MetaData
import sqlalchemy.orm as orm
from sqlalchemy.engine import Engine

from config_scripts.types import AlchemySession


__all__ = ['Session']


# SQLAlchemy database engine. Updated by model.init_model()
engine: Optional[Engine] = None


Session: AlchemySession = orm.scoped_session(orm.sessionmaker(
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
))


# Global metadata. Application models that are written to seed files
# may share it, but they are free to use their own.
metadata = MetaData()

registry = orm.registry(metadata=metadata)

mapper = registry.map_imperatively
