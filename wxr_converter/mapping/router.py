"""
Routing of WXR elements to entity fields.

Every child element of a ``<channel>``, ``<wp:author>`` or ``<item>`` is
mapped to exactly one field of the entity being built:

1. the :class:`~wxr_converter.mapping.transforms.Transform` registered for
   the element's qualified name is applied;
2. the element name is normalized (``content:encoded`` becomes
   ``content``, the ``_wp_`` prefix and the entity type's own prefix such as
   ``post_`` or ``attachment_`` are removed);
3. a handler declared with :func:`handles` for that name receives the
   element, otherwise a declared ``str`` field gets the element text,
   otherwise the text is stored in one of the entity's bags.

Handler tables are built once per entity type.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Pattern, get_origin

from wxr_converter.extractors.xml_element import WXRElement
from wxr_converter.mapping.transforms import TransformRegistry

HANDLER_ATTR = "_wxr_fields"

# _wp_attached_file = attached_file, _wp_page_template = page_template
INTERNAL_PREFIX = re.compile(r"^_wp_?")


def handles(*names: str) -> Callable:
    """Declare the normalized element names a method handles."""

    def decorator(fn: Callable) -> Callable:
        setattr(fn, HANDLER_ATTR, names)
        return fn

    return decorator


def _is_dict_field(annotation: Any) -> bool:
    return annotation is dict or get_origin(annotation) is dict


@dataclass(frozen=True)
class HandlerTable:
    entity_type: type
    prefix_filter: Optional[Pattern]
    default_bag: str
    handlers: Mapping[str, str]
    text_fields: FrozenSet[str]
    declared: FrozenSet[str]
    bags: FrozenSet[str]

    @classmethod
    def build(cls, entity_type: type) -> "HandlerTable":
        handlers: Dict[str, str] = {}
        # walk base classes first so subclasses override their handlers
        for klass in reversed(entity_type.__mro__):
            claimed: Dict[str, str] = {}
            for attr, value in vars(klass).items():
                names = getattr(value, HANDLER_ATTR, None)
                if not names:
                    continue
                for name in names:
                    if not name.isidentifier():
                        raise TypeError(f"{klass.__name__}.{attr}: invalid field name {name!r}")
                    if claimed.get(name, attr) != attr:
                        raise TypeError(
                            f"{klass.__name__}: field {name!r} is handled by both "
                            f"{claimed[name]}() and {attr}()"
                        )
                    claimed[name] = attr
            handlers.update(claimed)

        model_fields = getattr(entity_type, "model_fields", {})
        text_fields = frozenset(n for n, f in model_fields.items() if f.annotation is str)
        bags = frozenset(n for n, f in model_fields.items() if _is_dict_field(f.annotation))

        default_bag = getattr(entity_type, "default_bag", "fields")
        if default_bag not in bags:
            raise TypeError(f"{entity_type.__name__}: default bag {default_bag!r} is not a dict field")

        prefix_filter = getattr(entity_type, "prefix_filter", None)
        return cls(
            entity_type=entity_type,
            prefix_filter=re.compile(prefix_filter) if prefix_filter else None,
            default_bag=default_bag,
            handlers=handlers,
            text_fields=text_fields,
            declared=frozenset(model_fields),
            bags=bags,
        )


class FieldRouter:
    def __init__(
        self,
        transforms: Optional[TransformRegistry] = None,
        *,
        ignore: Iterable[str] = (),
        entity_types: Iterable[type] = (),
    ) -> None:
        self.transforms = transforms if transforms is not None else TransformRegistry()
        self.ignore = frozenset(ignore)
        self._tables: Dict[type, HandlerTable] = {t: HandlerTable.build(t) for t in entity_types}

    def table_for(self, entity_type: type) -> HandlerTable:
        table = self._tables.get(entity_type)
        if table is None:
            table = self._tables[entity_type] = HandlerTable.build(entity_type)
        return table

    @staticmethod
    def normalize(element: WXRElement, prefix_filter: Optional[Pattern] = None) -> str:
        name = element.local_name
        # <content:encoded> = content, <excerpt:encoded> = excerpt
        if name == "encoded" and element.prefix:
            name = element.prefix
        name = INTERNAL_PREFIX.sub("", name) or name
        if prefix_filter is not None:
            name = prefix_filter.sub("", name, count=1) or name
        return name

    def route(self, element: WXRElement, entity: Any, context: Any, bag: Optional[str] = None) -> Optional[str]:
        """Map ``element`` onto ``entity``; returns the normalized name or
        ``None`` when the element was skipped.

        ``context`` is the :class:`~wxr_converter.mapping.context.ParseContext`
        handed to handlers; it is required since most handlers resolve URLs
        or convert HTML through it.
        """
        if not element.has_content():
            return None

        self.transforms.get(element.qname).apply(element, entity)

        table = self.table_for(type(entity))
        name = self.normalize(element, table.prefix_filter)
        if name in self.ignore:
            return None

        method = table.handlers.get(name)
        if method is not None:
            getattr(entity, method)(element, context)
            return name

        # vanilla assignment
        if name in table.text_fields:
            setattr(entity, name, element.text)
            return name
        if name in table.declared:
            return None

        target = bag or table.default_bag
        if target not in table.bags:
            raise ValueError(f"{table.entity_type.__name__} has no bag named {target!r}")
        entity.add_to_bag(target, name, element.text)
        return name
