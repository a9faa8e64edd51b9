"""
Hand-off of finished entities to an output writer.

:func:`field_map` projects an entity onto the flat field map a content file
writer needs: the configured title and body field names, declared
properties first, bag entries only where no property of the same name
exists, ignored names removed.  A post's ``creator`` is resolved to its
:class:`~wxr_converter.entities.Author` (or ``None``); ``parent`` stays an
id for the writer to look up.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Any, Dict, List, Protocol, Tuple

from wxr_converter.entities import Author, Channel, Entity, Post

if TYPE_CHECKING:
    from wxr_converter.converter import WXRConverter


class EntitySink(Protocol):
    def write(self, kind: str, fields: Dict[str, Any], entity: Entity) -> None:
        ...


def field_map(entity: Entity, converter: "WXRConverter") -> Dict[str, Any]:
    config = converter.config
    values: Dict[str, Any] = entity.model_dump(exclude={"fields"})
    for key, value in entity.fields.items():
        values.setdefault(key, value)

    if isinstance(entity, Channel):
        values["url"] = entity.url
    if isinstance(entity, Post):
        values["creator"] = converter.resolve_creator(entity)

    if isinstance(entity, (Channel, Post)):
        values[config.title] = values.pop("title", "")
    if isinstance(entity, Post):
        values[config.text] = values.pop("content", "")

    for name in config.ignore:
        values.pop(name, None)
    return values


class ListSink:
    """Keeps ``(kind, fields, entity)`` tuples in memory."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, Dict[str, Any], Entity]] = []

    def write(self, kind: str, fields: Dict[str, Any], entity: Entity) -> None:
        self.records.append((kind, fields, entity))

    def of_kind(self, kind: str) -> List[Dict[str, Any]]:
        return [fields for k, fields, _ in self.records if k == kind]


def _json_default(value: Any) -> Any:
    if isinstance(value, Author):
        return value.username
    if isinstance(value, Entity):
        return getattr(value, "id", None)
    return str(value)


class JsonLinesSink:
    """Writes one JSON object per entity to ``path``, truncated when the
    sink is created; authors referenced by posts are written as their
    username."""

    def __init__(self, path: str) -> None:
        self.path = path
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        # one export per file
        open(path, "w", encoding="utf-8").close()

    def write(self, kind: str, fields: Dict[str, Any], entity: Entity) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            json.dump({"kind": kind, "fields": fields}, f, ensure_ascii=False, default=_json_default)
            f.write("\n")
