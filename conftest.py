# encoding: utf-8

pytest_plugins = [
    u'config_scripts.tests.pytest_config_scripts.config_scripts_setup',
    u'config_scripts.tests.pytest_config_scripts.fixtures',
]
