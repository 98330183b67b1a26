# encoding: utf-8
from __future__ import annotations

import logging
from typing import Optional

import click
import sqlalchemy as sa

import config_scripts
import config_scripts.cli as cs_cli
import config_scripts.model as model
from config_scripts.common import config
from config_scripts.exceptions import ConfigScriptsConfigurationException
from config_scripts.model import meta
from . import (
    db,
    error_shout,
    generate,
    scripts,
    seeds,
)

log = logging.getLogger(__name__)


class CtxObject(object):

    def __init__(self, conf: Optional[str] = None):
        # Don't import `load_config` by itself, rather call it using
        # module so that it can be patched during tests
        raw_config = cs_cli.load_config(conf)
        config.update(raw_config)
        self.config = config
        self.engine = _ensure_model()


def _ensure_model() -> sa.engine.Engine:
    """Bind the session to the configured database.

    An engine that is already bound to the same URL is kept, so in-memory
    databases survive repeated invocations within one process.
    """
    url = config.get(u"sqlalchemy.url")
    engine = meta.engine
    if engine is None or \
            engine.url.render_as_string(hide_password=False) != url:
        engine = sa.create_engine(
            url, echo=config.get(u"config_scripts.echo_sql"))
        model.init_model(engine)
    return engine


@click.group(
    context_settings={u"help_option_names": [u"-h", u"--help"]})
@click.option(u'-c', u'--config', metavar=u'CONFIG',
              help=u'Config file to use (default: config_scripts.ini)')
@click.version_option(config_scripts.__version__)
@click.pass_context
def config_scripts_cli(ctx: click.Context, config: Optional[str]):
    """Run config scripts and read or write seed data.
    """
    try:
        ctx.obj = CtxObject(config)
    except ConfigScriptsConfigurationException as e:
        error_shout(e)
        ctx.abort()


config_scripts_cli.add_command(db.db)
config_scripts_cli.add_command(generate.generate)
config_scripts_cli.add_command(scripts.scripts)
config_scripts_cli.add_command(seeds.seeds)
