# encoding: utf-8
from __future__ import annotations

import os
from typing import Any, Optional

import click
import logging
from logging.config import fileConfig as loggingFileConfig
from configparser import ConfigParser

from config_scripts.exceptions import ConfigScriptsConfigurationException
from config_scripts.types import Config

log = logging.getLogger(__name__)

ENV_PREFIX = u'CONFIG_SCRIPTS_'
ENV_INI = u'CONFIG_SCRIPTS_INI'


class ConfigLoader(object):
    config: Config
    config_file: str
    parser: ConfigParser
    section: str

    def __init__(self, filename: str) -> None:
        self.config_file = filename.strip()
        self.config = dict()
        self.parser = ConfigParser()
        # Preserve case in config keys
        self.parser.optionxform = lambda optionstr: str(optionstr)
        self.section = u'app:main'
        defaults = dict(
            (k, v) for k, v in os.environ.items()
            if k.startswith(ENV_PREFIX))
        defaults['__file__'] = os.path.abspath(self.config_file)
        defaults['here'] = os.path.dirname(os.path.abspath(self.config_file))
        self._update_defaults(defaults)
        self._create_config_object()

    def _update_defaults(self, new_defaults: dict[str, Any]) -> None:
        for key, value in new_defaults.items():
            # type_ignore_reason: using implementation details
            self.parser._defaults[key] = value  # type: ignore

    def _create_config_object(self) -> None:
        if not os.path.exists(self.config_file):
            raise ConfigScriptsConfigurationException(
                u'Config file not found: {}'.format(self.config_file))
        self.parser.read(self.config_file)
        if not self.parser.has_section(self.section):
            raise ConfigScriptsConfigurationException(
                u'Section [{}] is missing from {}'.format(
                    self.section, self.config_file))
        for option in self.parser.options(self.section):
            self.config[option] = self.parser.get(self.section, option)
        log.debug(u'Loaded configuration from %s', self.config_file)

    def has_logging_config(self) -> bool:
        return self.parser.has_section(u'loggers')

    def get_config(self) -> Config:
        return self.config.copy()


def load_config(ini_path: Optional[str] = None) -> Config:
    if ini_path:
        if ini_path.startswith(u'~'):
            ini_path = os.path.expanduser(ini_path)
        filename: Optional[str] = os.path.abspath(ini_path)
        config_source = [u'-c parameter']
    elif os.environ.get(ENV_INI):
        filename = os.environ[ENV_INI]
        config_source = [u'$' + ENV_INI]
    else:
        default_filenames = [u'config_scripts.ini', u'development.ini']
        config_source = default_filenames
        filename = None
        for default_filename in default_filenames:
            check_file = os.path.join(os.getcwd(), default_filename)
            if os.path.exists(check_file):
                filename = check_file
                break
        if not filename:
            # give really clear error message for this common situation
            msg = u'''
ERROR: You need to specify the config (.ini) file path.

Use the --config parameter or set environment variable {}
or have one of {} in the current directory.'''
            msg = msg.format(ENV_INI, u', '.join(default_filenames))
            raise ConfigScriptsConfigurationException(msg)

    if not filename or not os.path.exists(filename):
        msg = u'Config file not found: %s' % filename
        msg += u'\n(Given by: %s)' % config_source
        raise ConfigScriptsConfigurationException(msg)

    config_loader = ConfigLoader(filename)
    if config_loader.has_logging_config():
        loggingFileConfig(
            filename,
            defaults={u'here': os.path.dirname(filename)},
            disable_existing_loggers=False,
        )
    log.info(u'Using configuration file {}'.format(filename))

    return config_loader.get_config()


def error_shout(exception: Any) -> None:
    """Report CLI error with a styled message.
    """
    click.secho(str(exception), fg=u'red', err=True)
