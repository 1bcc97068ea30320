"""Built-in event filters and their registry.

Every filter is a callable ``filter(event) -> event | False``. Classes derived
from :class:`Filter` accept ``only_if`` / ``not_if`` predicates.
"""

from __future__ import annotations

from ..application.registry import ClassRegistry
from .anonymize_ip_mask import AnonymizeIPMask
from .base import ConditionalFilter, Event, Filter
from .default_tags import DefaultTags
from .drop import Drop, DropIf
from .fields import DefaultFields, Remove, Rename, Replace, Select, Update
from .message import ClearColor, TruncateMessage


def filter_registry() -> ClassRegistry[Filter]:
    """Return a new registry holding the built-in filters under their short names.

    Examples
    --------
    >>> filter_registry()['truncate_message'].__name__
    'TruncateMessage'
    """

    registry: ClassRegistry[Filter] = ClassRegistry("filter")
    registry.register(AnonymizeIPMask, "anonymize_ip_mask")
    registry.register(ClearColor, "clear_color")
    registry.register(DefaultFields, "default_fields")
    registry.register(DefaultTags, "default_tags")
    registry.register(Drop, "drop")
    registry.register(DropIf, "drop_if", "skip_event")
    registry.register(Remove, "remove", "delete")
    registry.register(Rename, "rename")
    registry.register(Replace, "replace")
    registry.register(Select, "select")
    registry.register(TruncateMessage, "truncate_message")
    registry.register(Update, "update")
    return registry


__all__ = [
    "AnonymizeIPMask",
    "ClearColor",
    "ConditionalFilter",
    "DefaultFields",
    "DefaultTags",
    "Drop",
    "DropIf",
    "Event",
    "Filter",
    "Remove",
    "Rename",
    "Replace",
    "Select",
    "TruncateMessage",
    "Update",
    "filter_registry",
]
