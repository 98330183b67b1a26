# encoding: utf-8
from __future__ import annotations

import glob
import importlib.util
import logging
import os
import re
import sys
from types import ModuleType
from typing import Optional

import config_scripts.model as model
from config_scripts.common import config
from config_scripts.exceptions import NothingToRollback, ScriptNotFound
from config_scripts.scripts.script import (
    APPLY,
    REVERT,
    Script,
    camelize,
    get_script_factory,
)

log = logging.getLogger(__name__)

__all__ = ["ScriptRunner", "TIMESTAMP_LENGTH"]

TIMESTAMP_LENGTH = 14
EXTENSION = u".py"

_script_filename = re.compile(r"^\d{%d}_\w+$" % TIMESTAMP_LENGTH)


def timestamp_for(filename: str) -> str:
    return filename[:TIMESTAMP_LENGTH]


def slug_for(filename: str) -> str:
    return filename[TIMESTAMP_LENGTH + 1:]


class ScriptRunner(object):
    """Finds the config scripts on disk and runs them.

    Script files are named ``<timestamp>_<slug>.py``, where the timestamp is
    a fourteen digit ``YYYYmmddHHMMSS`` string. Scripts always run in
    timestamp order.
    """

    def __init__(self, script_directory: Optional[str] = None) -> None:
        self._script_directory = script_directory

    @property
    def script_directory(self) -> str:
        """The directory in which the scripts are stored.

        Defaults to the ``config_scripts.directory`` config option.
        """
        return self._script_directory or config.get(
            u"config_scripts.directory")

    def _filenames(self, pattern: str = u"*") -> list[str]:
        paths = glob.glob(
            os.path.join(self.script_directory, pattern + EXTENSION))
        filenames = (os.path.basename(path)[:-len(EXTENSION)]
                     for path in paths)
        # glob gives no ordering guarantees
        return sorted(name for name in filenames
                      if _script_filename.match(name))

    def script_filenames(self) -> list[str]:
        """All the script filenames, without extension, in timestamp order.
        """
        return self._filenames()

    def pending_scripts(self) -> list[str]:
        """The filenames of the scripts that have not been run yet.
        """
        return [
            filename for filename in self.script_filenames()
            if not model.ScriptHistory.was_applied(timestamp_for(filename))
        ]

    def _find_by_name(self, config_name: str) -> str:
        matches = [
            filename for filename in self.script_filenames()
            if slug_for(filename).endswith(config_name)
            or camelize(slug_for(filename)).endswith(config_name)
        ]
        if not matches:
            log.error(u"Aborting: no script found by the name %s",
                      config_name)
            raise ScriptNotFound(
                u"no script found by the name {}".format(config_name))
        return matches[0]

    def _load_module(self, filename: str) -> ModuleType:
        path = os.path.join(self.script_directory, filename + EXTENSION)
        module_name = u"_config_script_" + filename
        spec = importlib.util.spec_from_file_location(module_name, path)
        assert spec and spec.loader
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        return module

    def load_script(self, filename: str) -> Script:
        """Import the script file and build the script it defines.

        Raises :py:class:`~config_scripts.exceptions.ScriptNotFound` when the
        file does not define a script class for its slug.
        """
        self._load_module(filename)
        try:
            factory = get_script_factory(slug_for(filename))
        except ScriptNotFound as e:
            log.error(u"Aborting: %s", e)
            raise
        return factory(timestamp_for(filename))

    def run_pending(self) -> list[str]:
        """Run all the scripts that have not yet been run.

        Stops at the first script that cannot be loaded or fails. Scripts
        that ran before it stay applied.

        Returns the filenames of the scripts that were run.
        """
        done = []
        for filename in self.pending_scripts():
            script = self.load_script(filename)
            log.info(u"Running %s", filename)
            script.run(APPLY)
            done.append(filename)
        return done

    def run(self, config_name: str) -> str:
        """Run a single script, found by its name.

        The name can be given either as the slug or as the camel-cased class
        name without the suffix. Returns the filename of the script.
        """
        filename = self._find_by_name(config_name)
        script = self.load_script(filename)
        log.info(u"Running %s", slug_for(filename))
        script.run(APPLY)
        return filename

    def list_pending(self) -> list[str]:
        pending = self.pending_scripts()
        for filename in pending:
            log.info(u"Pending: %s", filename)
        return pending

    def rollback(self, config_name: Optional[str] = None) -> str:
        """Roll back a script, found by its name.

        Without a name the most recently run script is rolled back.
        Returns the filename of the script.
        """
        if not config_name:
            return self.rollback_latest()

        filename = self._find_by_name(config_name)
        self._rollback(filename)
        return filename

    def rollback_latest(self) -> str:
        latest = model.ScriptHistory.latest()
        if latest is None:
            log.error(u"Aborting: no scripts have been run yet.")
            raise NothingToRollback(u"no scripts have been run yet")

        matches = self._filenames(latest.script_name + u"*")
        if not matches:
            log.error(u"Aborting: no script in %s for timestamp %s",
                      self.script_directory, latest.script_name)
            raise NothingToRollback(
                u"no script in script directory for timestamp {}".format(
                    latest.script_name))

        filename = matches[0]
        self._rollback(filename)
        return filename

    def _rollback(self, filename: str) -> None:
        script = self.load_script(filename)
        log.info(u"Rolling back %s", slug_for(filename))
        script.run(REVERT)
