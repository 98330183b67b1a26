# encoding: utf-8
from __future__ import annotations

from typing import Optional

from sqlalchemy import types, Column, Table
from typing_extensions import Self

from config_scripts.model import meta
from config_scripts.model.domain_object import DomainObject
from config_scripts.types import Query

__all__ = [u"ScriptHistory", u"script_history_table"]


script_history_table = Table(
    u"config_scripts",
    meta.metadata,
    Column(u"id", types.Integer, primary_key=True, autoincrement=True),
    Column(u"script_name", types.UnicodeText, index=True),
)


class ScriptHistory(DomainObject):
    """A record of a script being run.

    The name of the script is its timestamp. A script counts as applied
    while at least one record with its timestamp exists.
    """
    id: int
    script_name: str

    def __init__(self, script_name: Optional[str] = None) -> None:
        self.script_name = script_name

    @classmethod
    def entries_for(cls, timestamp: str) -> Query[Self]:
        return meta.Session.query(cls).filter(cls.script_name == timestamp)

    @classmethod
    def was_applied(cls, timestamp: str) -> bool:
        return meta.Session.query(
            cls.entries_for(timestamp).exists()).scalar()

    @classmethod
    def record(cls, timestamp: str) -> Self:
        """Record that the script with this timestamp has been run.

        An existing record is returned as is, so recording twice leaves a
        single entry. The new record is flushed but not committed.
        """
        entry = cls.entries_for(timestamp).first()
        if entry is None:
            entry = cls(timestamp)
            entry.add()
            meta.Session.flush()
        return entry

    @classmethod
    def remove(cls, timestamp: str) -> int:
        """Delete every record for the timestamp. Not committed.
        """
        entries = cls.entries_for(timestamp).all()
        for entry in entries:
            entry.delete()
        meta.Session.flush()
        return len(entries)

    @classmethod
    def latest(cls) -> Optional[Self]:
        """The most recently recorded entry, if any.
        """
        return meta.Session.query(cls).order_by(cls.id.desc()).first()


meta.mapper(ScriptHistory, script_history_table)
