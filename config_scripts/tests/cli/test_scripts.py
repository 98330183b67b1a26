# -*- coding: utf-8 -*-

import pytest

from config_scripts.cli.cli import config_scripts_cli
from config_scripts.model import ScriptHistory


@pytest.mark.usefixtures(u"clean_db")
class TestRun(object):
    def test_run_pending(self, cli, write_script):
        write_script(u"20140208182050", u"create_red")
        write_script(u"20140301000000", u"create_blue")

        result = cli.invoke(config_scripts_cli, [u"scripts", u"run"])

        assert not result.exit_code, result.output
        assert u"Applied 20140208182050" in result.output
        assert u"Applied 20140301000000" in result.output
        assert ScriptHistory.was_applied(u"20140301000000")

    def test_nothing_pending(self, cli, script_dir):
        result = cli.invoke(config_scripts_cli, [u"scripts", u"run"])

        assert not result.exit_code, result.output
        assert u"No pending scripts" in result.output

    def test_run_named(self, cli, write_script):
        write_script(u"20140208182050", u"create_red")
        write_script(u"20140301000000", u"create_blue")

        result = cli.invoke(
            config_scripts_cli, [u"scripts", u"run", u"create_blue"])

        assert not result.exit_code, result.output
        assert u"Applied 20140301000000" in result.output
        assert not ScriptHistory.was_applied(u"20140208182050")

    def test_unknown_name(self, cli, write_script):
        write_script(u"20140208182050", u"create_red")

        result = cli.invoke(
            config_scripts_cli, [u"scripts", u"run", u"create_green"])

        assert result.exit_code == 1
        assert u"Aborting: no script found by the name create_green" in \
            result.output

    def test_missing_class(self, cli, write_script):
        write_script(u"20140208182050", u"create_red", u"x = 1\n")

        result = cli.invoke(config_scripts_cli, [u"scripts", u"run"])

        assert result.exit_code == 1
        assert u"could not find class CreateRedConfig" in result.output

    def test_failing_script(self, cli, write_script):
        write_script(u"20140208182050", u"create_red", u'''
            from config_scripts import Script


            class CreateRedConfig(Script):
                def apply(self):
                    raise RuntimeError(u"no red today")
        ''')

        result = cli.invoke(config_scripts_cli, [u"scripts", u"run"])

        assert result.exit_code == 1
        assert u"no red today" in result.output
        assert not ScriptHistory.was_applied(u"20140208182050")


@pytest.mark.usefixtures(u"clean_db")
class TestPending(object):
    def test_lists_pending(self, cli, write_script):
        write_script(u"20140208182050", u"create_red")
        write_script(u"20140301000000", u"create_blue")
        ScriptHistory.record(u"20140208182050")
        ScriptHistory.Session.commit()

        result = cli.invoke(config_scripts_cli, [u"scripts", u"pending"])

        assert not result.exit_code, result.output
        assert u"20140301000000_create_blue" in result.output
        assert u"20140208182050_create_red" not in result.output


@pytest.mark.usefixtures(u"clean_db")
class TestRollback(object):
    def test_rollback_latest(self, cli, write_script):
        write_script(u"20140208182050", u"create_red")
        cli.invoke(config_scripts_cli, [u"scripts", u"run"])

        result = cli.invoke(config_scripts_cli, [u"scripts", u"rollback"])

        assert not result.exit_code, result.output
        assert u"Rolled back 20140208182050" in result.output
        assert not ScriptHistory.was_applied(u"20140208182050")

    def test_rollback_named(self, cli, write_script):
        write_script(u"20140208182050", u"create_red")
        write_script(u"20140301000000", u"create_blue")
        cli.invoke(config_scripts_cli, [u"scripts", u"run"])

        result = cli.invoke(
            config_scripts_cli, [u"scripts", u"rollback", u"create_red"])

        assert not result.exit_code, result.output
        assert u"Rolled back 20140208182050" in result.output
        assert ScriptHistory.was_applied(u"20140301000000")

    def test_nothing_to_rollback(self, cli, script_dir):
        result = cli.invoke(config_scripts_cli, [u"scripts", u"rollback"])

        assert result.exit_code == 1
        assert u"Aborting: no scripts have been run yet" in result.output
