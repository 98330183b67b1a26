# encoding: utf-8
from __future__ import annotations

from typing import Any, Callable, Dict, Sequence, Tuple

from typing_extensions import TypeAlias
from sqlalchemy.orm.scoping import scoped_session
from sqlalchemy.orm.query import Query


__all__ = [
    "AlchemySession", "Query",
    "Config",
    "Tokens", "Resolution",
    "ReadTransform", "WriteTransform",
    "Filter",
]

AlchemySession: TypeAlias = "scoped_session[Any]"
Config: TypeAlias = Dict[str, Any]

# Seed identifiers are split into tokens. Resolving an identifier consumes
# tokens from the front and hands back the rest.
Tokens: TypeAlias = Tuple[str, ...]
Resolution: TypeAlias = "Tuple[Any, Tokens]"

ReadTransform: TypeAlias = Callable[[Any], Any]
WriteTransform: TypeAlias = Callable[[Any], Any]
Filter: TypeAlias = "Tuple[str, Sequence[Any]]"
