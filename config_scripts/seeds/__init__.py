# encoding: utf-8
"""Reading and writing seed data.
"""
from config_scripts.seeds.seed_type import (  # noqa: F401
    SeedType,
    SeedTypeOptions,
    POLYMORPHIC,
    DELIMITER,
)
from config_scripts.seeds.seed_set import SeedSet  # noqa: F401
from config_scripts.seeds.registry import register  # noqa: F401
from config_scripts.seeds import registry  # noqa: F401
