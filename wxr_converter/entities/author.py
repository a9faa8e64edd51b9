from __future__ import annotations

from typing import ClassVar

from wxr_converter.entities.base import Entity
from wxr_converter.extractors.xml_element import WXRElement
from wxr_converter.mapping.router import handles
from wxr_converter.utils.text import normalize_label


class Author(Entity):
    """
    A WordPress user from ``<wp:author>``.

    The ``<dc:creator>`` of an item refers to the login name, so
    :attr:`username` is the key authors are registered and looked up by.
    """

    prefix_filter: ClassVar[str] = r"^author_?"

    id: int = 0
    username: str = ""
    email: str = ""
    display_name: str = ""
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""

    @handles("id")
    def set_id(self, element: WXRElement, context) -> "Author":
        self.id = self._int_value(element, context, self.id)
        return self

    @handles("login")
    def set_login(self, element: WXRElement, context) -> "Author":
        self.username = element.text.strip()
        return self

    @handles("display_name")
    def set_display_name(self, element: WXRElement, context) -> "Author":
        self.display_name = normalize_label(element.text)
        return self

    @handles("first_name")
    def set_first_name(self, element: WXRElement, context) -> "Author":
        self.first_name = normalize_label(element.text)
        self._assemble_full_name()
        return self

    @handles("last_name")
    def set_last_name(self, element: WXRElement, context) -> "Author":
        self.last_name = normalize_label(element.text)
        self._assemble_full_name()
        return self

    def _assemble_full_name(self) -> None:
        self.full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
