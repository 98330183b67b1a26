# -*- coding: utf-8 -*-

import os

import pytest

import config_scripts
import config_scripts.cli
from config_scripts.cli import ConfigLoader, load_config
from config_scripts.cli.cli import config_scripts_cli
from config_scripts.exceptions import ConfigScriptsConfigurationException


@pytest.fixture
def ini(tmp_path):
    path = tmp_path / u"config_scripts.ini"
    path.write_text(u"""
[app:main]
sqlalchemy.url = sqlite://
config_scripts.directory = %(here)s/scripts
config_scripts.seeds.data_directory = %(CONFIG_SCRIPTS_DATA)s
""")
    return str(path)


def test_version(cli):
    result = cli.invoke(config_scripts_cli, [u"--version"])

    assert not result.exit_code, result.output
    assert config_scripts.__version__ in result.output


def test_bad_configuration_aborts(cli, monkeypatch):
    def broken(path=None):
        raise ConfigScriptsConfigurationException(u"Config file not found")

    monkeypatch.setattr(config_scripts.cli, u"load_config", broken)
    result = cli.invoke(config_scripts_cli, [u"scripts", u"pending"])

    assert result.exit_code == 1
    assert u"Config file not found" in result.output


class TestLoadConfig(object):
    def test_options_from_app_section(self, ini, monkeypatch):
        monkeypatch.setenv(u"CONFIG_SCRIPTS_DATA", u"/srv/seeds")

        config = load_config(ini)

        assert config[u"sqlalchemy.url"] == u"sqlite://"
        assert config[u"config_scripts.directory"] == os.path.join(
            os.path.dirname(ini), u"scripts")
        assert config[u"config_scripts.seeds.data_directory"] == u"/srv/seeds"

    def test_path_from_environment(self, ini, monkeypatch):
        monkeypatch.setenv(u"CONFIG_SCRIPTS_DATA", u"/srv/seeds")
        monkeypatch.setenv(u"CONFIG_SCRIPTS_INI", ini)

        assert load_config()[u"sqlalchemy.url"] == u"sqlite://"

    def test_file_in_working_directory(self, ini, monkeypatch):
        monkeypatch.setenv(u"CONFIG_SCRIPTS_DATA", u"/srv/seeds")
        monkeypatch.delenv(u"CONFIG_SCRIPTS_INI", raising=False)
        monkeypatch.chdir(os.path.dirname(ini))

        assert load_config()[u"sqlalchemy.url"] == u"sqlite://"

    def test_no_config_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv(u"CONFIG_SCRIPTS_INI", raising=False)
        monkeypatch.chdir(str(tmp_path))

        with pytest.raises(ConfigScriptsConfigurationException):
            load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigScriptsConfigurationException):
            load_config(str(tmp_path / u"nope.ini"))

    def test_missing_section(self, tmp_path):
        path = tmp_path / u"other.ini"
        path.write_text(u"[server:main]\nport = 5000\n")

        with pytest.raises(ConfigScriptsConfigurationException):
            ConfigLoader(str(path))

    def test_logging_sections(self, ini, monkeypatch):
        monkeypatch.setenv(u"CONFIG_SCRIPTS_DATA", u"/srv/seeds")

        assert not ConfigLoader(ini).has_logging_config()
