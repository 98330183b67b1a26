# -*- coding: utf-8 -*-
"""Signals sent by the script runner.

Applications that keep caches of database state connect receivers here, so
the caches are dropped whenever a script changes the data::

    from config_scripts.lib import signals

    @signals.script_applied.connect
    def _clear_cache(script, **kwargs):
        cache.clear()

"""

from blinker import Namespace

config_scripts = Namespace()

script_applied = config_scripts.signal(u"script_applied")
"""This signal is sent after a script has been applied and its transaction
committed. The sender is the script instance.
"""

script_reverted = config_scripts.signal(u"script_reverted")
"""This signal is sent after a script has been rolled back and its
transaction committed. The sender is the script instance.
"""

seeds_read = config_scripts.signal(u"seeds_read")
"""This signal is sent after the data of a seed set has been loaded into the
database. The sender is the seed set.
"""
