# encoding: utf-8

__version__ = u'0.3.0'

from config_scripts.scripts import Script  # noqa: F401,E402
from config_scripts.seeds import SeedSet, POLYMORPHIC, register  # noqa: F401,E402
