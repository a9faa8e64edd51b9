from __future__ import annotations

import threading
from typing import Any, ClassVar, Dict, FrozenSet
from urllib.parse import urlsplit

from pydantic import Field, PrivateAttr

from wxr_converter.entities.item import Item
from wxr_converter.extractors.xml_element import WXRElement
from wxr_converter.mapping.router import handles
from wxr_converter.utils.text import normalize_label


class Channel(Item):
    """
    Site level data of the export: title, URLs, language and the term
    directory.  Authors and items are handled by the walker.

    ``blueprints`` maps output paths to blueprint names and is the only
    part written after the channel is built (by posts with a page template).
    """

    prefix_filter: ClassVar[str] = r"^base_"

    # children of <channel> mapped onto the channel itself
    elements: ClassVar[FrozenSet[str]] = frozenset({
        "title", "link", "description", "language", "pubDate", "generator",
        "wxr_version", "base_site_url", "base_blog_url", "image", "category", "tag",
    })

    type: str = "channel"
    site_url: str = ""
    blog_url: str = ""
    # hostname of <channel><link>, incl. subdomain
    host: str = ""
    language: str = ""
    wxr_version: str = ""
    terms: Dict[str, Dict[str, str]] = Field(default_factory=lambda: {"category": {}, "post_tag": {}})
    blueprints: Dict[str, str] = Field(default_factory=lambda: {"/": "default"})

    _lock: Any = PrivateAttr(default_factory=threading.Lock)

    @property
    def url(self) -> str:
        return self.link

    @handles("link")
    def set_link(self, element: WXRElement, context) -> "Channel":
        try:
            self.host = urlsplit(element.text.strip()).hostname or ""
        except ValueError:
            self.host = ""
        super().set_link(element, context)
        return self

    @handles("site_url")
    def set_site_url(self, element: WXRElement, context) -> "Channel":
        self.site_url = context.canonicalize(element.text.strip(), self)
        return self

    @handles("blog_url")
    def set_blog_url(self, element: WXRElement, context) -> "Channel":
        self.blog_url = context.canonicalize(element.text.strip(), self)
        return self

    @handles("image")
    def set_image(self, element: WXRElement, context) -> "Channel":
        url = element.findtext("url").strip()
        if url:
            self.data["favicon"] = url
        return self

    @handles("category")
    def set_category(self, element: WXRElement, context) -> "Channel":
        nicename = element.findtext("category_nicename").strip()
        if nicename:
            self.terms["category"][nicename] = normalize_label(element.findtext("cat_name")) or nicename
        return self

    @handles("tag")
    def set_tag(self, element: WXRElement, context) -> "Channel":
        slug = element.findtext("tag_slug").strip()
        if slug:
            self.terms["post_tag"][slug] = normalize_label(element.findtext("tag_name")) or slug
        return self

    def set_blueprint(self, path: str, blueprint: str) -> "Channel":
        with self._lock:
            self.blueprints[path] = blueprint
        return self

    def get_blueprint(self, path: str) -> str:
        return self.blueprints.get(path, self.blueprints.get("/", "default"))
