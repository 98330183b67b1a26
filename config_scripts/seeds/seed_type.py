# encoding: utf-8
from __future__ import annotations

import csv
import dataclasses
import datetime
import decimal
import logging
import os
from typing import Any, Optional, TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import orm
from sqlalchemy.orm.interfaces import MANYTOONE

import config_scripts.model as model
from config_scripts.common import asbool, config
from config_scripts.exceptions import (
    ConfigScriptsConfigurationException,
    SeedPersistenceError,
)
from config_scripts.types import (
    Filter, Query, ReadTransform, Resolution, Tokens, WriteTransform,
)

if TYPE_CHECKING:
    from config_scripts.seeds.seed_set import SeedSet

log = logging.getLogger(__name__)

__all__ = [
    "SeedType", "SeedTypeOptions", "POLYMORPHIC", "DELIMITER", "is_record",
]

#: Separator between the parts of a seed identifier.
DELIMITER = u"::"


class _Polymorphic(object):
    def __repr__(self):
        return u"POLYMORPHIC"


#: Association target for references whose class varies per record. The
#: class name is written in front of the identifier of the referenced record.
POLYMORPHIC: Any = _Polymorphic()


def is_record(value: Any) -> bool:
    return isinstance(sa.inspect(value, raiseerr=False), orm.InstanceState)


def _to_text(value: Any) -> str:
    if value is None:
        return u""
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


_coercions: list[tuple[type, Any]] = [
    (bool, asbool),
    (int, int),
    (float, float),
    (decimal.Decimal, decimal.Decimal),
    (datetime.datetime, datetime.datetime.fromisoformat),
    (datetime.date, datetime.date.fromisoformat),
    (datetime.time, datetime.time.fromisoformat),
]


def coerce_for_column(value: Any, column: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    for kind, convert in _coercions:
        if issubclass(python_type, kind):
            return convert(value)
    return value


@dataclasses.dataclass()
class SeedTypeOptions:
    """Describes how the records of a model class are written to seeds.

    fields: attributes written to the seed file, in column order.

    key_fields: attributes that together identify a record when other seeds
    refer to it. Defaults to the primary key.

    associations: attributes that hold other records, mapped to the class
    of the record, or to ``POLYMORPHIC``. Many-to-one relationships of the
    model are added automatically.

    filters: ``(method, args)`` pairs applied to the query for the records
    that are written, e.g. ``("filter", [Person.active == True])`` or
    ``("order_by", [Person.name])``.

    read_transforms: functions applied to the raw value from the seed file
    before it is set on the record.

    write_transforms: functions that receive the record and return the
    value written for the attribute.
    """
    fields: list[str] = dataclasses.field(default_factory=list)
    key_fields: Optional[list[str]] = None
    associations: dict[str, Any] = dataclasses.field(default_factory=dict)
    filters: list[Filter] = dataclasses.field(default_factory=list)
    read_transforms: dict[str, ReadTransform] = dataclasses.field(
        default_factory=dict)
    write_transforms: dict[str, WriteTransform] = dataclasses.field(
        default_factory=dict)


class SeedType(object):
    """How to write the seeds for one model class to a seed file.
    """
    seed_set: "SeedSet"
    klass: type
    filename: str
    fields: list[str]
    key_fields: list[str]
    associations: dict[str, Any]
    filters: list[Filter]
    read_transforms: dict[str, ReadTransform]
    write_transforms: dict[str, WriteTransform]

    def __init__(self, seed_set: "SeedSet", klass: type, filename: str,
                 options: Optional[SeedTypeOptions] = None) -> None:
        options = options or SeedTypeOptions()
        self.seed_set = seed_set
        self.klass = klass
        self.filename = filename
        self._mapper = sa.inspect(klass)

        self.fields = list(options.fields)
        self.filters = list(options.filters)
        self.read_transforms = dict(options.read_transforms)
        self.write_transforms = dict(options.write_transforms)

        self.associations = {
            rel.key: rel.mapper.class_
            for rel in self._mapper.relationships
            if rel.direction is MANYTOONE
        }
        self.associations.update(options.associations)

        if options.key_fields:
            self.key_fields = list(options.key_fields)
        else:
            self.key_fields = [
                self._mapper.get_property_by_column(column).key
                for column in self._mapper.primary_key
            ]
        for field in self.key_fields:
            if field not in self.associations and \
                    field not in self._mapper.column_attrs:
                raise ConfigScriptsConfigurationException(
                    u"Key field {} of {} is neither a column nor an "
                    u"association".format(field, klass.__name__))

    def __repr__(self) -> str:
        return u"<SeedType {} {}>".format(self.klass.__name__, self.filename)

    @property
    def options(self) -> dict[str, Any]:
        """The extra data passed in when defining the seed set.
        """
        return self.seed_set.options

    @property
    def path_extension(self) -> str:
        return u"." + config.get(u"config_scripts.seeds.extension")

    def path_in(self, folder: str) -> str:
        return os.path.join(folder, self.filename + self.path_extension)

    # Fetching

    def all(self) -> Query[Any]:
        return model.Session.query(self.klass)

    def items(self) -> Query[Any]:
        """The records that are written to the seed file.

        This is the query for all records of the class with every filter
        applied, in the order they were declared.
        """
        records = self.all()
        for method, args in self.filters:
            records = getattr(records, method)(*args)
        return records

    # Reading and writing

    def write_to_folder(self, folder: str) -> None:
        """Write a header row, and a row for every item, to the seed file.

        Nothing is written when the seed type has no fields.
        """
        if not self.fields:
            return
        path = self.path_in(folder)
        with open(path, u"w", newline=u"", encoding=u"utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.fields)
            for item in self.items():
                writer.writerow([
                    _to_text(self.write_value_for_field(item, field))
                    for field in self.fields
                ])
        log.debug(u"Wrote %s", path)

    def read_from_folder(self, folder: str) -> None:
        """Create a record for every row of the seed file.

        Every record is flushed as soon as it is built, so that later rows
        can refer to it. The caller is responsible for the transaction.
        """
        if not self.fields:
            return
        path = self.path_in(folder)
        with open(path, newline=u"", encoding=u"utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                try:
                    record = self.klass()
                    for field, value in row.items():
                        setattr(record, field,
                                self.read_value_for_field(value, field))
                    model.Session.add(record)
                    model.Session.flush()
                except Exception as e:
                    log.error(u"Error saving seed from %s, line %s: %s",
                              path, reader.line_num, e)
                    raise SeedPersistenceError(path, e) from e
        log.debug(u"Read %s", path)

    def write_value_for_field(self, item: Any, field: str) -> Any:
        """The value written to the seed file for an attribute of a record.

        Records are replaced with their seed identifier. References through
        a polymorphic association get the class name in front.
        """
        if field in self.write_transforms:
            value = self.write_transforms[field](item)
        else:
            value = getattr(item, field)

        if is_record(value):
            identifier = _to_text(
                self.seed_set.seed_identifier_for_record(value))
            if self.associations.get(field) is POLYMORPHIC:
                identifier = type(value).__name__ + DELIMITER + identifier
            value = identifier
        return value

    def read_value_for_field(self, value: Any, field: str) -> Any:
        """The value set on a record for a cell of the seed file.

        Empty cells read as ``None``. Associations are looked up through the
        seed set, other columns are converted to the type of the column.
        """
        if value == u"":
            value = None

        transformed = field in self.read_transforms
        if transformed:
            value = self.read_transforms[field](value)

        target = self.associations.get(field)
        if target is not None:
            if value is None or is_record(value):
                return value
            tokens = tuple(str(value).split(DELIMITER))
            record, _rest = self._resolve(target, tokens)
            return record

        if transformed:
            return value
        return self.coerce(value, field)

    def coerce(self, value: Any, field: str) -> Any:
        """Convert a string from the seed file to the type of the column.
        """
        prop = self._mapper.column_attrs.get(field)
        if prop is None:
            return value
        return coerce_for_column(value, prop.columns[0])

    # Seed identifiers

    def seed_identifier_for_record(self, record: Any) -> str:
        """The identifier other seeds use to refer to a record of our class.
        """
        return DELIMITER.join(
            _to_text(self.write_value_for_field(record, field))
            for field in self.key_fields
        )

    def record_for_seed_identifier(self, tokens: Tokens) -> Resolution:
        """Find a record of our class from the parts of a seed identifier.

        Each key field takes the tokens it needs from the front: one for a
        plain column, as many as the associated seed type needs for an
        association. Returns the record, or ``None``, and the tokens that
        were not used.
        """
        tokens = tuple(tokens)
        if not tokens:
            return None, tokens

        records: Any = self.all()
        for field in self.key_fields:
            target = self.associations.get(field)
            if target is not None:
                value, tokens = self._resolve(target, tokens)
            elif tokens:
                value = self.coerce(tokens[0] or None, field)
                tokens = tokens[1:]
            else:
                value = None
            records = self._filter(records, field, value)

        if isinstance(records, Query):
            return records.first(), tokens
        return (records[0] if records else None), tokens

    def _resolve(self, target: Any, tokens: Tokens) -> Resolution:
        if target is POLYMORPHIC:
            if not tokens:
                return None, tokens
            target, tokens = self.seed_set.class_for_name(tokens[0]), \
                tokens[1:]
            if target is None:
                return None, tokens

        if self.seed_set.seed_type_for_class(target) is None:
            # Written as the bare primary key by seed_identifier_for_record
            if not tokens or not tokens[0]:
                return None, tokens[1:]
            primary_key = sa.inspect(target).primary_key[0]
            return model.Session.get(
                target, coerce_for_column(tokens[0], primary_key)
            ), tokens[1:]

        return self.seed_set.record_for_seed_identifier(target, tokens)

    def _filter(self, records: Any, field: str, value: Any) -> Any:
        attr = getattr(self.klass, field, None)
        if isinstance(records, Query) and \
                isinstance(attr, orm.InstrumentedAttribute):
            return records.filter(attr == value)
        return [record for record in records
                if getattr(record, field) == value]
