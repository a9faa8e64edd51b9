from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from wxr_converter.extractors.xml_element import WXRElement
from wxr_converter.utils.urls import UrlCanonicalizer

if TYPE_CHECKING:
    from wxr_converter.converter import WXRConverter
    from wxr_converter.entities import Author, Channel


class ParseContext:
    """
    Shared, read-mostly state handed to entity handlers during one walk:
    the converter (authors, configuration, diagnostics), the channel and
    the router for re-entrant routing of derived elements.
    """

    def __init__(self, converter: "WXRConverter", channel: Optional["Channel"] = None) -> None:
        self.converter = converter
        self.router = converter.router
        self.channel = channel
        self._canonicalizer: Optional[UrlCanonicalizer] = None
        self._host_reported = False

    @property
    def config(self):
        return self.converter.config

    def route(self, element: WXRElement, entity: Any, bag: Optional[str] = None) -> Optional[str]:
        return self.router.route(element, entity, self, bag)

    def report(self, code: str, entity: Any = None, exc: Optional[BaseException] = None, **extra: Any):
        return self.converter.diagnostics.report_error(code, entity, exc, **extra)

    @property
    def canonicalizer(self) -> Optional[UrlCanonicalizer]:
        host = self.channel.host if self.channel is not None else ""
        if not host:
            return None
        if self._canonicalizer is None or self._canonicalizer.host != host:
            self._canonicalizer = UrlCanonicalizer(host, self.config.resolve_urls)
        return self._canonicalizer

    def canonicalize(self, url: str, entity: Any = None) -> str:
        if url == "#":
            return ""
        canonicalizer = self.canonicalizer
        if canonicalizer is None:
            if not self._host_reported:
                self._host_reported = True
                self.report("SITE_HOST_MISSING", entity or self.channel, url=url)
            return url
        return canonicalizer.canonicalize(url)

    def html_to_text(self, html: str) -> str:
        return self.converter.html_converter(html)

    def author(self, username: str) -> Optional["Author"]:
        return self.converter.get_author(username)
