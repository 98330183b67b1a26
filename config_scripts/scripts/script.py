# encoding: utf-8
"""The base class for config scripts and the registry of script classes.

A config script lives in a file named ``<timestamp>_<slug>.py`` and defines
a class whose name is the camel-cased slug plus a suffix (``Config`` by
default)::

    # db/config_scripts/20140208182050_create_admins.py
    from config_scripts import Script

    class CreateAdminsConfig(Script):
        def apply(self):
            ...

        def revert(self):
            ...

Defining the class registers it under its class name. The runner looks it
up with the class name built from the slug of the file, ``create_admins``.
"""
from __future__ import annotations

import logging
import re
import traceback
from typing import Callable, ClassVar, Optional

import config_scripts.model as model
from config_scripts.common import config
from config_scripts.exceptions import ScriptExecutionError, ScriptNotFound
from config_scripts.lib import signals

log = logging.getLogger(__name__)

__all__ = [
    "Script", "APPLY", "REVERT",
    "register_script", "get_script_factory", "clear_registered_scripts",
    "camelize", "underscore", "class_name_for",
]

APPLY = u"apply"
REVERT = u"revert"

ScriptFactory = Callable[[str], "Script"]

# keyed by class name
_registered_scripts: dict[str, ScriptFactory] = {}


def camelize(slug: str) -> str:
    """Turn ``create_admins`` into ``CreateAdmins``.
    """
    return u"".join(part[:1].upper() + part[1:] for part in slug.split(u"_"))


def underscore(name: str) -> str:
    """Turn ``CreateAdmins`` into ``create_admins``.
    """
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace(u"-", u"_").lower()


def _class_suffix() -> str:
    return config.get(u"config_scripts.scripts.class_suffix")


def class_name_for(slug: str) -> str:
    return camelize(slug) + _class_suffix()


def register_script(slug: str, factory: ScriptFactory) -> None:
    """Make `factory` the constructor used for scripts with this slug.

    The factory is called with the timestamp of the script file.
    """
    _registered_scripts[class_name_for(slug)] = factory


def get_script_factory(slug: str) -> ScriptFactory:
    class_name = class_name_for(slug)
    try:
        return _registered_scripts[class_name]
    except KeyError:
        raise ScriptNotFound(u"could not find class {}".format(class_name))


def clear_registered_scripts() -> None:
    _registered_scripts.clear()


class Script(object):
    """Base class for all of the config scripts that the app will define.

    Subclasses are registered under their own name when they are defined,
    unless the class sets `slug` explicitly.
    """

    #: Slug of the script file, when the class is not named after it.
    slug: ClassVar[Optional[str]] = None

    timestamp: str

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        slug = cls.__dict__.get(u"slug")
        if slug:
            register_script(slug, cls)
        else:
            _registered_scripts[cls.__name__] = cls

    def __init__(self, timestamp: str) -> None:
        self.timestamp = timestamp

    @property
    def session(self):
        return model.Session

    def apply(self) -> None:
        """Perform the changes for this config script.

        Subclasses must define this method. If there are any issues running
        the script, it should raise an exception.
        """
        raise NotImplementedError(u"Not supported")

    def revert(self) -> None:
        """Roll back the changes for this config script.

        Subclasses must define this method if their scripts can be rolled
        back.
        """
        raise NotImplementedError(u"Not supported")

    def run(self, direction: str, contained: bool = False) -> bool:
        """Run the script in a given direction.

        The call to `apply` or `revert` is wrapped in a transaction together
        with the update of the script history, so a failing script leaves
        no changes behind.

        :param direction: ``"apply"`` or ``"revert"``
        :param contained: return ``False`` on failure instead of raising
            :py:class:`~config_scripts.exceptions.ScriptExecutionError`

        """
        if direction not in (APPLY, REVERT):
            raise ValueError(u"Unknown direction: {}".format(direction))

        try:
            with model.repo.transaction():
                getattr(self, direction)()
                if direction == APPLY:
                    model.ScriptHistory.record(self.timestamp)
                else:
                    model.ScriptHistory.remove(self.timestamp)
        except Exception as e:
            log.error(u"Error running script for %s: %s",
                      type(self).__name__, e)
            frames = traceback.extract_tb(e.__traceback__)
            if frames:
                frame = frames[-1]
                log.error(u"%s:%s in %s", frame.filename, frame.lineno,
                          frame.name)
            if contained:
                return False
            raise ScriptExecutionError(self, direction, e) from e

        if direction == APPLY:
            signals.script_applied.send(self)
        else:
            signals.script_reverted.send(self)
        return True

    def __repr__(self) -> str:
        return u"<{} {}>".format(type(self).__name__, self.timestamp)
