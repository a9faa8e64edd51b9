"""
Parse a "WordPress eXtended RSS" (WXR) export and walk it once.

The walk builds the :class:`~wxr_converter.entities.Channel` first (its
host is needed to canonicalize every other URL), then every
``<wp:author>`` (posts resolve their creator against them), then every
``<item>`` in document order.  The ``<wp:post_type>`` of an item selects
the entity type; delegated and discarded post types are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import io
from typing import TYPE_CHECKING, Dict, List, Optional, Type, Union
import xml.etree.ElementTree as ET

from wxr_converter.entities import Attachment, Author, Channel, Post
from wxr_converter.extractors.xml_element import WXR_NAMESPACES, WXRElement
from wxr_converter.mapping.context import ParseContext
from wxr_converter.utils.errors import Diagnostic

if TYPE_CHECKING:
    from wxr_converter.converter import WXRConverter

SUPPORTED_WXR_VERSIONS = ("1.0", "1.1", "1.2")

ITEM_TYPES: Dict[str, Type[Post]] = {
    "page": Post,
    "post": Post,
    "attachment": Attachment,
}


class WXRParseError(ValueError):
    """The export is not well-formed XML or has no ``<channel>``."""


class WXRDocument:
    def __init__(self, root: WXRElement, source: str = "<string>") -> None:
        channel = root if root.local_name == "channel" else root.find("channel")
        if channel is None:
            raise WXRParseError(f"No <channel> element found in {source}")
        self.root = root
        self.channel = channel
        self.source = source

    @classmethod
    def load(cls, xml_path: str) -> "WXRDocument":
        with open(xml_path, "rb") as f:
            return cls._parse(f, xml_path)

    @classmethod
    def from_string(cls, xml: Union[str, bytes]) -> "WXRDocument":
        data = xml.encode("utf-8") if isinstance(xml, str) else xml
        return cls._parse(io.BytesIO(data), "<string>")

    @classmethod
    def _parse(cls, source, name: str) -> "WXRDocument":
        prefixes: Dict[str, str] = {}
        root: Optional[ET.Element] = None
        try:
            for event, payload in ET.iterparse(source, events=("start-ns", "end")):
                if event == "start-ns":
                    prefix, uri = payload
                    if prefix:
                        prefixes.setdefault(uri, prefix)
                else:
                    root = payload
        except ET.ParseError as e:
            raise WXRParseError(f"Malformed WXR document {name}: {e}") from e
        if root is None:
            raise WXRParseError(f"Empty WXR document {name}")
        for uri, prefix in WXR_NAMESPACES.items():
            prefixes.setdefault(uri, prefix)
        return cls(WXRElement.from_etree(root, prefixes), name)

    @property
    def wxr_version(self) -> str:
        return self.channel.findtext("wxr_version").strip()

    @property
    def authors(self) -> List[WXRElement]:
        return list(self.channel.findall("author"))

    @property
    def items(self) -> List[WXRElement]:
        return list(self.channel.findall("item"))


@dataclass
class ConversionSummary:
    pages: int = 0
    files: int = 0
    authors: int = 0
    unknown: int = 0
    delegated: int = 0
    discarded: int = 0
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def converted(self) -> int:
        return self.pages + self.files + self.authors

    @property
    def skipped(self) -> int:
        return self.unknown + self.delegated + self.discarded

    def describe(self) -> str:
        return (
            f"{self.converted} entities converted ({self.pages} pages, {self.files} files, "
            f"{self.authors} authors), {self.skipped} items skipped "
            f"({self.delegated} delegated, {self.discarded} discarded, {self.unknown} unknown), "
            f"{len(self.diagnostics)} diagnostics"
        )


class WXRWalker:
    """Builds all entities of one document into ``converter``."""

    def __init__(self, converter: "WXRConverter") -> None:
        self.converter = converter
        self.config = converter.config

    def walk(self, document: WXRDocument) -> ConversionSummary:
        summary = ConversionSummary()
        first_diagnostic = len(self.converter.diagnostics.errors)
        context = ParseContext(self.converter)

        self.parse_channel(document.channel, context)

        for element in document.authors:
            if self.parse_author(element, context) is not None:
                summary.authors += 1

        for element in document.items:
            self.parse_item(element, context, summary)

        summary.diagnostics = self.converter.diagnostics.errors[first_diagnostic:]
        return summary

    def parse_channel(self, element: WXRElement, context: ParseContext) -> Channel:
        channel = Channel()
        # needed early on by URL canonicalization
        context.channel = channel
        for child in element.children:
            if child.local_name in Channel.elements:
                context.route(child, channel)
        if channel.wxr_version and channel.wxr_version not in SUPPORTED_WXR_VERSIONS:
            context.report("WXR_VERSION", channel, version=channel.wxr_version)
        self.converter.set_site(channel)
        return channel

    def parse_author(self, element: WXRElement, context: ParseContext) -> Optional[Author]:
        author = Author()
        for child in element.children:
            context.route(child, author)
        if not author.username:
            context.report("MISSING_USERNAME", author)
            return None
        self.converter.set_author(author)
        return author

    def parse_item(self, element: WXRElement, context: ParseContext, summary: ConversionSummary) -> Optional[Post]:
        post_type = element.findtext("post_type").strip()
        entity_type = ITEM_TYPES.get(post_type)

        if entity_type is None:
            if post_type in self.config.delegate:
                # e.g. nav_menu_item: rebuilding the menu tree needs all items' postmeta
                summary.delegated += 1
                self.converter.log_message(f"Delegated {post_type} item '{element.findtext('title')}'", level="DEBUG")
            elif post_type in self.config.discard:
                summary.discarded += 1
            else:
                summary.unknown += 1
                context.report(
                    "UNKNOWN_POST_TYPE",
                    None,
                    post_type=post_type,
                    title=element.findtext("title"),
                    post_id=element.findtext("post_id"),
                )
            return None

        entity = entity_type()
        for child in element.children:
            context.route(child, entity)

        if isinstance(entity, Attachment):
            self.converter.set_file(entity)
            summary.files += 1
        else:
            self.converter.set_page(entity)
            summary.pages += 1
        self.converter.diagnostics.report_ok("CONVERTED", entity)
        return entity
