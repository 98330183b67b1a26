# encoding: utf-8
from __future__ import annotations

import logging
from typing import Optional

import click

from config_scripts.exceptions import ConfigScriptsException
from config_scripts.seeds import registry
from . import error_shout

log = logging.getLogger(__name__)


@click.group(short_help=u"Read and write seed data.")
def seeds():
    """Read and write seed data.
    """
    pass


@seeds.command(short_help=u"Write seed data from the database to files.")
@click.argument(u"set_number", type=int, required=False)
def write(set_number: Optional[int]):
    """Write the data for every seed set, or for SET_NUMBER only.
    """
    try:
        sets = registry.write(set_number)
    except (ConfigScriptsException, OSError) as e:
        error_shout(e)
        raise click.Abort()
    if not sets:
        error_shout(u'No seed sets found')
        raise click.Abort()
    for seed_set in sets:
        click.secho(u'Wrote seeds for {}'.format(seed_set.name), fg=u'green')


@seeds.command(short_help=u"Load seed data from files into the database.")
@click.argument(u"set_number", type=int, required=False)
def read(set_number: Optional[int]):
    """Load the data for every seed set, or for SET_NUMBER only.

    A single seed set is reset before it is loaded.
    """
    try:
        sets = registry.read(set_number)
    except (ConfigScriptsException, OSError) as e:
        error_shout(e)
        raise click.Abort()
    if not sets:
        error_shout(u'No seed sets found')
        raise click.Abort()
    for seed_set in sets:
        click.secho(u'Read seeds for {}'.format(seed_set.name), fg=u'green')


@seeds.command(u"list", short_help=u"List the seed sets.")
def list_sets():
    """List every seed set, with its set number.
    """
    for set_number, name in registry.list_sets():
        click.echo(u'{}: {}'.format(set_number, name))
