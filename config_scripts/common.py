# encoding: utf-8

# This file contains the configuration object and the small conversion
# helpers that are shared by the whole package.
#
# NOTE:  This file is specificaly created for
# from config_scripts.common import x, y, z to be allowed
from __future__ import annotations

import logging
from collections.abc import MutableMapping

from typing import Any, Callable, NamedTuple, TYPE_CHECKING

from config_scripts.exceptions import ConfigScriptsConfigurationException

if TYPE_CHECKING:
    MutableMapping = MutableMapping[str, Any]

SENTINEL = {}

log = logging.getLogger(__name__)

truthy = frozenset([u'true', u'yes', u'on', u'y', u't', u'1'])
falsy = frozenset([u'false', u'no', u'off', u'n', u'f', u'0'])


def asbool(obj: Any) -> bool:
    """Convert a string (e.g. 1, true, True) into a boolean.

    Example::

        assert asbool("yes") is True

    """

    if isinstance(obj, str):
        obj = obj.strip().lower()
        if obj in truthy:
            return True
        elif obj in falsy:
            return False
        else:
            raise ValueError(u"String is not true/false: {}".format(obj))
    return bool(obj)


def _one_of(*choices: str) -> Callable[[Any], str]:
    def validator(value: Any) -> str:
        value = str(value).strip()
        if value not in choices:
            raise ValueError(u"Expected one of {}, got {}".format(
                u", ".join(choices), value))
        return value
    return validator


class Option(NamedTuple):
    default: Any
    normalize: Callable[[Any], Any] = str
    required: bool = False


# Every option the package reads. Values from the INI file are passed
# through `normalize`, the default is returned as is.
config_declaration: dict[str, Option] = {
    u"sqlalchemy.url": Option(None, required=True),
    u"config_scripts.directory": Option(u"db/config_scripts"),
    u"config_scripts.scripts.class_suffix": Option(u"Config"),
    u"config_scripts.seeds.definitions_directory": Option(
        u"db/seeds/definitions"),
    u"config_scripts.seeds.data_directory": Option(u"db/seeds/data"),
    u"config_scripts.seeds.extension": Option(u"csv"),
    u"config_scripts.seeds.on_collision": Option(
        u"increment", _one_of(u"increment", u"reject")),
    u"config_scripts.echo_sql": Option(False, asbool),
}


class Config(MutableMapping):
    u'''Main configuration object

    This is a dict-like object that knows the defaults of every declared
    option.

    The actual `config` instance in this module is populated from the INI file
    by the CLI, or directly by the code that embeds the package.

    '''
    store: dict[str, Any]

    def __init__(self, *args: Any, **kwargs: Any):
        self.store = dict()
        self.update(dict(*args, **kwargs))

    def __getitem__(self, key: str):
        return self.store[key]

    def __iter__(self):
        return iter(self.store)

    def __len__(self):
        return len(self.store)

    def __repr__(self):
        return self.store.__repr__()

    def copy(self) -> dict[str, Any]:
        return self.store.copy()

    def clear(self) -> None:
        self.store.clear()

    def __setitem__(self, key: str, value: Any):
        self.store[key] = value

    def __delitem__(self, key: str):
        del self.store[key]

    def is_declared(self, key: str) -> bool:
        return key in config_declaration

    def get(self, key: str, default: Any = SENTINEL) -> Any:
        """Return the value for key if key is in the config, else default.

        Declared options fall back to their declared default when the
        `default` argument is omitted.
        """
        option = config_declaration.get(key)
        if key in self.store:
            value = self.store[key]
            if option and isinstance(value, str):
                try:
                    return option.normalize(value)
                except ValueError as e:
                    raise ConfigScriptsConfigurationException(
                        u"Invalid value for {}: {}".format(key, e))
            return value

        if default is not SENTINEL:
            return default
        if option is None:
            log.debug("Option %s is not declared", key)
            return None
        if option.required:
            raise ConfigScriptsConfigurationException(
                u"Config option `{}` is required".format(key))
        return option.default


config = Config()
