# encoding: utf-8
from __future__ import annotations

import dataclasses
import logging
import os
import re
from typing import Any, Callable, Optional, Sequence

import sqlalchemy as sa

import config_scripts.model as model
from config_scripts.common import config
from config_scripts.lib import signals
from config_scripts.scripts.script import underscore
from config_scripts.seeds.seed_type import SeedType, SeedTypeOptions, is_record
from config_scripts.types import Resolution, Tokens

log = logging.getLogger(__name__)

__all__ = ["SeedSet", "pluralize"]

_irregular = {
    u"person": u"people",
    u"child": u"children",
}


def pluralize(word: str) -> str:
    """Naive English plural of the last word in a snake_case name.
    """
    head, _sep, last = word.rpartition(u"_")
    prefix = head + u"_" if head else u""
    if last in _irregular:
        return prefix + _irregular[last]
    if re.search(u"[^aeiou]y$", last):
        return prefix + last[:-1] + u"ies"
    if re.search(u"(s|x|z|ch|sh)$", last):
        return prefix + last + u"es"
    return prefix + last + u"s"


class SeedSet(object):
    """A set of related seeds, stored as CSV files in a folder together.

    Seed types are added with :py:meth:`seeds_for`::

        people = SeedSet("people", 1)
        people.seeds_for(HairColor, fields=["color", "hex_value"],
                         key_fields=["color"])
        people.seeds_for(Person, fields=["name", "hair_color"],
                         key_fields=["hair_color", "name"])

    and the set is made available to the batch operations with
    :py:func:`config_scripts.seeds.register`.
    """
    name: str
    set_number: int
    folder: str
    options: dict[str, Any]
    seed_types: dict[type, SeedType]
    reset_block: Optional[Callable[[], Any]]

    def __init__(self, name: str, set_number: int = 1,
                 folder: Optional[str] = None,
                 options: Optional[dict[str, Any]] = None,
                 reset: Optional[Callable[[], Any]] = None) -> None:
        self.name = str(name)
        self.set_number = set_number
        self.folder = folder or self.name
        self.options = options or {}
        self.seed_types = {}
        self.reset_block = reset
        self._record_cache: dict[tuple[type, Tokens], Any] = {}

    def __repr__(self) -> str:
        return u"<SeedSet {}: {}>".format(self.set_number, self.name)

    # Definition

    def seeds_for(self, klass: type, filename: Optional[str] = None,
                  options: Optional[SeedTypeOptions] = None,
                  **kwargs: Any) -> SeedType:
        """Define the seed type for a model class within this set.

        The options can be given as a
        :py:class:`~config_scripts.seeds.SeedTypeOptions` instance, as keyword
        arguments, or both, in which case the keywords win.

        The filename defaults to the plural of the class name, in snake_case,
        without extension.
        """
        if options is None:
            options = SeedTypeOptions(**kwargs)
        elif kwargs:
            options = dataclasses.replace(options, **kwargs)
        filename = filename or pluralize(underscore(klass.__name__))
        seed_type = SeedType(self, klass, filename, options)
        self.seed_types[klass] = seed_type
        return seed_type

    def when_resetting(self, block: Callable[[], Any]) -> Callable[[], Any]:
        """Set the function that clears existing records before a read.

        It runs when the set is read on its own, but not when all the sets
        are read together. Can be used as a decorator.
        """
        self.reset_block = block
        return block

    # Reading and writing

    @property
    def folder_path(self) -> str:
        return os.path.join(
            config.get(u"config_scripts.seeds.data_directory"), self.folder)

    def write(self) -> None:
        """Write the file for every seed type into the seed folder.
        """
        folder_path = self.folder_path
        os.makedirs(folder_path, exist_ok=True)
        log.info(u"Writing seeds for %s to %s", self.name, folder_path)
        for seed_type in self.seed_types.values():
            seed_type.write_to_folder(folder_path)

    def read(self, reset: bool = False) -> None:
        """Load the records from the seed folder into the database.

        All the seed types are read in one transaction. When `reset` is set
        the reset function runs first, inside the same transaction. Records
        resolved by an earlier read may have been deleted or rolled back
        since, so the cache starts empty.
        """
        folder_path = self.folder_path
        os.makedirs(folder_path, exist_ok=True)
        log.info(u"Reading seeds for %s from %s", self.name, folder_path)
        self.clear_cache()
        with model.repo.transaction():
            if reset:
                self.reset_records()
            for seed_type in self.seed_types.values():
                seed_type.read_from_folder(folder_path)
        signals.seeds_read.send(self)

    def reset_records(self) -> None:
        if self.reset_block:
            self.reset_block()

    # Seed identifiers

    def seed_type_for_class(self, klass: Any) -> Optional[SeedType]:
        """The seed type for a class, or for its closest mapped parent.
        """
        if klass in self.seed_types:
            return self.seed_types[klass]
        mapper = sa.inspect(klass, raiseerr=False)
        while mapper is not None:
            seed_type = self.seed_types.get(mapper.class_)
            if seed_type:
                return seed_type
            mapper = mapper.inherits
        return None

    def class_for_name(self, name: str) -> Optional[type]:
        """Find the class a polymorphic reference names.

        Classes that have a seed type in this set, and their mapped
        subclasses, are searched first. Other mapped classes are written as
        their primary key and can be named too.
        """
        for klass in self.seed_types:
            for mapper in sa.inspect(klass).self_and_descendants:
                if mapper.class_.__name__ == name:
                    return mapper.class_
        for mapper in model.meta.registry.mappers:
            if mapper.class_.__name__ == name:
                return mapper.class_
        log.warning(u"No mapped class named %s in %s", name, self.name)
        return None

    def seed_identifier_for_record(self, record: Any) -> Any:
        """The identifier for a record when writing seeds that refer to it.

        Falls back to the primary key for records of classes that have no
        seed type, and to ``None`` for values that are not records at all.
        """
        seed_type = self.seed_type_for_class(type(record))
        if seed_type:
            return seed_type.seed_identifier_for_record(record)
        if not is_record(record):
            return None
        identity = sa.inspect(record).identity
        return identity[0] if identity else None

    def record_for_seed_identifier(self, klass: Any,
                                   tokens: Sequence[str]) -> Resolution:
        """Find a record from the parts of a seed identifier.

        The tokens the record needs are taken from the front; the record (or
        ``None``) is returned together with the tokens that are left. The
        same tokens always resolve to the same record, so results are cached
        for the lifetime of the set.
        """
        tokens = tuple(tokens)
        seed_type = self.seed_type_for_class(klass)
        if seed_type is None:
            return None, tokens

        for length in range(len(tokens), 0, -1):
            record = self._record_cache.get((klass, tokens[:length]))
            if record is not None:
                return record, tokens[length:]

        record, remaining = seed_type.record_for_seed_identifier(tokens)
        consumed = tokens[:len(tokens) - len(remaining)]
        if record is not None and consumed:
            self._record_cache[(klass, consumed)] = record
        return record, remaining

    def clear_cache(self) -> None:
        self._record_cache.clear()
