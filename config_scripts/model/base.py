# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any

from sqlalchemy import orm

from .meta import registry, Session

BaseModel = registry.generate_base()


class SessionMixin:
    """Attach the scoped session to the model class.

    Example:
        class ScriptHistory(SessionMixin):
            ...
            @classmethod
            def latest(cls):
                return cls.Session.query(cls).order_by(cls.id.desc()).first()

    """
    Session = Session


class DebugMixin:
    """Defines __repr__ method that shows all the mapped columns.

    Example:
        >>> ScriptHistory(script_name="20140208182050")
        <ScriptHistory id=None script_name=20140208182050>
    """

    def __repr__(self):
        output = u'<%s' % self.__class__.__name__
        table: Any = orm.class_mapper(self.__class__).persist_selectable
        for col in table.c:
            try:
                output += u' %s=%s' % (col.name, getattr(self, col.name))
            except Exception as inst:
                output += u' %s=%s' % (col.name, inst)

        output += '>'
        return output
