from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional
import xml.etree.ElementTree as ET

# Namespaces of a WXR 1.2 export, by URI.
WXR_NAMESPACES: Dict[str, str] = {
    "http://wordpress.org/export/1.2/": "wp",
    "http://wordpress.org/export/1.2/excerpt/": "excerpt",
    "http://wordpress.org/export/1.1/": "wp",
    "http://wordpress.org/export/1.1/excerpt/": "excerpt",
    "http://wordpress.org/export/1.0/": "wp",
    "http://wordpress.org/export/1.0/excerpt/": "excerpt",
    "http://purl.org/rss/1.0/modules/content/": "content",
    "http://purl.org/dc/elements/1.1/": "dc",
    "http://wellformedweb.org/CommentAPI/": "wfw",
}


@dataclass
class WXRElement:
    """
    One element of a WXR export.

    ``qname`` is the prefixed name as written in the export
    (``wp:post_id``, ``content:encoded``, ``title``); ``text`` is the
    concatenated text of the element and all its descendants.
    """

    local_name: str
    prefix: Optional[str] = None
    text: str = ""
    attrib: Dict[str, str] = field(default_factory=dict)
    children: List["WXRElement"] = field(default_factory=list)

    @property
    def qname(self) -> str:
        return f"{self.prefix}:{self.local_name}" if self.prefix else self.local_name

    def has_content(self) -> bool:
        """Empty elements and empty CDATA sections have no content."""
        return bool(self.children) or bool(self.text.strip())

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrib.get(name, default)

    def find(self, local_name: str) -> Optional["WXRElement"]:
        for child in self.children:
            if child.local_name == local_name:
                return child
        return None

    def findall(self, local_name: str) -> Iterator["WXRElement"]:
        return (child for child in self.children if child.local_name == local_name)

    def findtext(self, local_name: str, default: str = "") -> str:
        child = self.find(local_name)
        return child.text if child is not None else default

    @classmethod
    def make(cls, qname: str, text: str = "") -> "WXRElement":
        """Build a detached element, e.g. from a ``wp:meta_key`` value."""
        prefix, _, local_name = qname.rpartition(":")
        return cls(local_name=local_name, prefix=prefix or None, text=text)

    @classmethod
    def from_etree(cls, elem: ET.Element, prefixes: Dict[str, str]) -> "WXRElement":
        tag = elem.tag if isinstance(elem.tag, str) else ""
        prefix = None
        local_name = tag
        if tag.startswith("{"):
            uri, _, local_name = tag[1:].partition("}")
            prefix = prefixes.get(uri)
        return cls(
            local_name=local_name,
            prefix=prefix,
            text="".join(elem.itertext()),
            attrib=dict(elem.attrib),
            children=[cls.from_etree(child, prefixes) for child in elem if isinstance(child.tag, str)],
        )
