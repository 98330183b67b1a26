# encoding: utf-8
from __future__ import annotations

import datetime
import logging
import os
from typing import Optional

import click

from config_scripts.common import config
from config_scripts.scripts.script import class_name_for, underscore
from . import error_shout

log = logging.getLogger(__name__)

SCRIPT_TEMPLATE = u'''# encoding: utf-8
from config_scripts import Script


class {class_name}(Script):

    def apply(self):
        raise NotImplementedError(u"Not supported")

    def revert(self):
        raise NotImplementedError(u"Not supported")
'''


@click.group(short_help=u"Scaffolding for new config scripts.")
def generate():
    """Scaffolding for new config scripts.
    """
    pass


@generate.command(short_help=u"Create a new config script.")
@click.argument(u"name")
@click.option(u"-o", u"--output-dir", help=u"Location to put the script in.")
def script(name: str, output_dir: Optional[str]):
    """Create a new, timestamped config script called NAME.
    """
    slug = underscore(name)
    output_dir = output_dir or config.get(u"config_scripts.directory")
    timestamp = datetime.datetime.now().strftime(u"%Y%m%d%H%M%S")
    path = os.path.join(output_dir, u"{}_{}.py".format(timestamp, slug))
    if os.path.exists(path):
        error_shout(u"Script already exists: {}".format(path))
        raise click.Abort()

    os.makedirs(output_dir, exist_ok=True)
    with open(path, u"w", encoding=u"utf-8") as f:
        f.write(SCRIPT_TEMPLATE.format(class_name=class_name_for(slug)))
    log.info(u"Created %s", path)
    click.secho(u"Script file created: {}".format(path), fg=u"green")
