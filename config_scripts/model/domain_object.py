# encoding: utf-8
from __future__ import annotations

from typing import Any

from .base import DebugMixin, SessionMixin

__all__ = ['DomainObject']


class DomainObject(SessionMixin, DebugMixin):
    """Base for the classes mapped imperatively onto package tables.
    """

    def __init__(self, **kwargs: Any) -> None:
        for k, v in kwargs.items():
            setattr(self, k, v)

    def add(self) -> None:
        """Add to the session, without flushing or committing.
        """
        self.Session.add(self)

    def delete(self) -> None:
        """Mark for removal, without flushing or committing.
        """
        self.Session.delete(self)
