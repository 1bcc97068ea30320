"""Field containers holding normalised event data."""

from __future__ import annotations

from .abstract import AbstractCollection
from .array import FieldsArray
from .hash import FieldsHash, Resolver
from .tags import Tags

__all__ = ["AbstractCollection", "FieldsArray", "FieldsHash", "Resolver", "Tags"]
