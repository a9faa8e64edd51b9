from __future__ import annotations

from typing import Dict

from pydantic import Field

from wxr_converter.entities.base import BagValue, Entity
from wxr_converter.extractors.xml_element import WXRElement
from wxr_converter.mapping.router import handles
from wxr_converter.utils.text import normalize_label


class Item(Entity):
    id: int = 0
    title: str = ""
    link: str = ""
    type: str = ""
    description: str = ""

    # misc. text nodes
    data: Dict[str, BagValue] = Field(default_factory=dict)

    @handles("type")
    def set_type(self, element: WXRElement, context) -> "Item":
        self.type = element.text.strip()
        return self

    @handles("title")
    def set_title(self, element: WXRElement, context) -> "Item":
        self.title = normalize_label(element.text)
        return self

    @handles("link")
    def set_link(self, element: WXRElement, context) -> "Item":
        """Applies to ``<link>`` of the channel and of items."""
        self.link = context.canonicalize(element.text.strip(), self)
        return self
