# encoding: utf-8
from __future__ import annotations

import logging
from typing import Any, Optional

import click

from config_scripts.exceptions import NotFound, ScriptExecutionError
from config_scripts.lib import signals
from config_scripts.scripts import ScriptRunner
from . import error_shout

log = logging.getLogger(__name__)


def _report_applied(script: Any, **kwargs: Any):
    click.secho(u'Applied {}'.format(script.timestamp), fg=u'green')


def _report_reverted(script: Any, **kwargs: Any):
    click.secho(u'Rolled back {}'.format(script.timestamp), fg=u'green')


@click.group(short_help=u"Run and roll back config scripts.")
def scripts():
    """Run and roll back config scripts.
    """
    pass


@scripts.command(short_help=u"Run all pending scripts, or a single one.")
@click.argument(u"name", required=False)
def run(name: Optional[str]):
    """Run all the scripts that have not been run yet.

    With NAME, run only the script whose filename ends with that name.
    """
    runner = ScriptRunner()
    try:
        with signals.script_applied.connected_to(_report_applied):
            if name:
                runner.run(name)
            else:
                done = runner.run_pending()
                if not done:
                    click.secho(u'No pending scripts', fg=u'green')
    except NotFound as e:
        error_shout(u'Aborting: {}'.format(e))
        raise click.Abort()
    except ScriptExecutionError as e:
        error_shout(e)
        raise click.Abort()


@scripts.command(short_help=u"List the scripts that have not been run.")
def pending():
    """List the scripts that have not been run.
    """
    for filename in ScriptRunner().list_pending():
        click.echo(filename)


@scripts.command(short_help=u"Roll back the latest script, or a named one.")
@click.argument(u"name", required=False)
def rollback(name: Optional[str]):
    """Roll back the most recently run script.

    With NAME, roll back the script whose filename ends with that name.
    """
    runner = ScriptRunner()
    try:
        with signals.script_reverted.connected_to(_report_reverted):
            runner.rollback(name)
    except NotFound as e:
        error_shout(u'Aborting: {}'.format(e))
        raise click.Abort()
    except ScriptExecutionError as e:
        error_shout(e)
        raise click.Abort()
