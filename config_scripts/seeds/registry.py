# encoding: utf-8
"""The seed sets an application has defined.

Definition files in the ``config_scripts.seeds.definitions_directory`` folder
are plain Python modules that build seed sets and register them::

    from config_scripts.seeds import SeedSet, register
    from myapp.model import HairColor

    colors = register(SeedSet("colors", 1))
    colors.seeds_for(HairColor, fields=["color"], key_fields=["color"])

"""
from __future__ import annotations

import glob
import importlib.util
import logging
import os
import sys
from typing import Iterator, Optional

from config_scripts.common import config
from config_scripts.exceptions import SeedSetCollision
from config_scripts.seeds.seed_set import SeedSet

log = logging.getLogger(__name__)

__all__ = [
    "register", "clear", "registered_sets", "load_seed_sets",
    "each_set", "write", "read", "list_sets",
]

_registered_sets: dict[int, SeedSet] = {}
_loaded_definitions: set[str] = set()


def registered_sets() -> dict[int, SeedSet]:
    return _registered_sets


def register(seed_set: SeedSet) -> SeedSet:
    """Add a seed set to the registry.

    If another set already has the same set number, the number is
    incremented until a free one is found. With
    ``config_scripts.seeds.on_collision = reject`` a
    :py:class:`~config_scripts.exceptions.SeedSetCollision` is raised
    instead. Registering the same set twice does nothing.
    """
    while seed_set.set_number in _registered_sets:
        existing = _registered_sets[seed_set.set_number]
        if existing is seed_set:
            return seed_set
        if config.get(u"config_scripts.seeds.on_collision") == u"reject":
            raise SeedSetCollision(
                u"Seed sets {} and {} both use number {}".format(
                    existing.name, seed_set.name, seed_set.set_number))
        seed_set.set_number += 1
    _registered_sets[seed_set.set_number] = seed_set
    return seed_set


def clear() -> None:
    """Forget all the registered seed sets and loaded definition files.
    """
    _registered_sets.clear()
    _loaded_definitions.clear()


def load_seed_sets(directory: Optional[str] = None) -> None:
    """Run every definition file that has not been run yet.
    """
    directory = directory or config.get(
        u"config_scripts.seeds.definitions_directory")
    for path in sorted(glob.glob(os.path.join(directory, u"*.py"))):
        path = os.path.abspath(path)
        if path in _loaded_definitions:
            continue
        module_name = u"_seed_definitions_" + \
            os.path.splitext(os.path.basename(path))[0]
        spec = importlib.util.spec_from_file_location(module_name, path)
        assert spec and spec.loader
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        _loaded_definitions.add(path)
        log.debug(u"Loaded seed definitions from %s", path)


def each_set(set_number: Optional[int] = None) -> Iterator[SeedSet]:
    """Iterate over the seed sets, lowest number first.

    With a `set_number` only that set is visited, if it exists.
    """
    load_seed_sets()
    if set_number is not None:
        seed_set = _registered_sets.get(set_number)
        if seed_set is None:
            log.warning(u"No seed set with number %s", set_number)
            return
        yield seed_set
    else:
        for number in sorted(_registered_sets):
            yield _registered_sets[number]


def write(set_number: Optional[int] = None) -> list[SeedSet]:
    """Write the data for every seed set, or just one, to its folder.
    """
    sets = list(each_set(set_number))
    for seed_set in sets:
        seed_set.write()
    return sets


def read(set_number: Optional[int] = None) -> list[SeedSet]:
    """Load the data for every seed set, or just one, into the database.

    A set that is read on its own is reset first.
    """
    sets = list(each_set(set_number))
    for seed_set in sets:
        seed_set.read(set_number is not None)
    return sets


def list_sets() -> list[tuple[int, str]]:
    return [(seed_set.set_number, seed_set.name) for seed_set in each_set()]
