# encoding: utf-8
from __future__ import annotations

import logging

import click

import config_scripts.model as model
from . import error_shout

log = logging.getLogger(__name__)


@click.group(short_help=u"Script history table management commands.")
def db():
    """Script history table management commands.
    """
    pass


@db.command()
def init():
    """Create the script history table.
    """
    log.info(u"Initialize the script history table")
    try:
        model.repo.init_db()
    except Exception as e:
        error_shout(e)
        raise click.Abort()
    click.secho(u'Initialising DB: SUCCESS', fg=u'green', bold=True)


@db.command()
@click.option(u'-v', u'--version', help=u'Migration version', default=u'head')
def upgrade(version: str):
    """Upgrade the script history table.
    """
    model.repo.upgrade_db(version)
    click.secho(u'Upgrading DB: SUCCESS', fg=u'green', bold=True)


@db.command()
@click.option(u'-v', u'--version', help=u'Migration version', default=u'base')
def downgrade(version: str):
    """Downgrade the script history table.
    """
    model.repo.downgrade_db(version)
    click.secho(u'Downgrading DB: SUCCESS', fg=u'green', bold=True)


@db.command()
def version():
    """Returns current version of the script history table.
    """
    current = model.repo.current_version() or u''
    click.secho(u'Current DB version: {}'.format(current),
                fg=u'green',
                bold=True)
