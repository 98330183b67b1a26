# encoding: utf-8

import pytest

from config_scripts.common import Config, asbool
from config_scripts.exceptions import ConfigScriptsConfigurationException


@pytest.mark.parametrize(u"value, expected", [
    (u"true", True),
    (u" Yes ", True),
    (u"1", True),
    (u"off", False),
    (u"F", False),
    (True, True),
    (0, False),
    (None, False),
])
def test_asbool(value, expected):
    assert asbool(value) is expected


def test_asbool_rejects_other_strings():
    with pytest.raises(ValueError):
        asbool(u"maybe")


class TestConfig(object):
    def test_declared_default(self):
        config = Config()

        assert config.get(u"config_scripts.seeds.extension") == u"csv"
        assert config.get(u"config_scripts.echo_sql") is False

    def test_explicit_default_wins(self):
        config = Config()

        assert config.get(u"config_scripts.seeds.extension", u"txt") == u"txt"

    def test_values_are_normalized(self):
        config = Config({u"config_scripts.echo_sql": u"yes"})

        assert config.get(u"config_scripts.echo_sql") is True
        assert config[u"config_scripts.echo_sql"] == u"yes"

    def test_invalid_value(self):
        config = Config({u"config_scripts.seeds.on_collision": u"ignore"})

        with pytest.raises(ConfigScriptsConfigurationException):
            config.get(u"config_scripts.seeds.on_collision")

    def test_required_option(self):
        with pytest.raises(ConfigScriptsConfigurationException):
            Config().get(u"sqlalchemy.url")

    def test_undeclared_option(self):
        config = Config({u"custom": 1})

        assert config.get(u"custom") == 1
        assert config.get(u"other") is None
        assert not config.is_declared(u"custom")
        assert config.is_declared(u"sqlalchemy.url")

    def test_mapping_interface(self):
        config = Config(a=1)
        config[u"b"] = 2
        del config[u"a"]

        assert dict(config) == {u"b": 2}
        assert len(config) == 1
        assert config.copy() == {u"b": 2}
