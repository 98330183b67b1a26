# encoding: utf-8
"""Generating and running one-off configuration scripts.
"""
from config_scripts.scripts.script import (  # noqa: F401
    APPLY,
    REVERT,
    Script,
    register_script,
    get_script_factory,
    clear_registered_scripts,
)
from config_scripts.scripts.runner import ScriptRunner  # noqa: F401
