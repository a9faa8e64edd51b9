"""
Pages and posts, i.e. ``<item>`` elements with ``<wp:post_type>`` ``page``
or ``post``.

Content and excerpt are kept twice: the original markup in
``content_html``/``excerpt_html`` and a converted text variant in
``content``/``excerpt``.  ``hints`` records which of the HTML fields carried
markup and whether links, images or ``srcset`` candidates were found, so
later stages can decide what else to extract.
"""

from __future__ import annotations

from datetime import datetime
import posixpath
from typing import ClassVar, Dict, List

from pydantic import Field

from wxr_converter.entities.base import BagValue
from wxr_converter.entities.item import Item
from wxr_converter.extractors.xml_element import WXRElement
from wxr_converter.mapping.router import handles
from wxr_converter.parsers.html import collect_inline_urls, has_markup
from wxr_converter.utils.text import append_unique, normalize_label
from wxr_converter.utils.urls import url_path

# postmeta keys routed to the post's own handlers or its meta bag
ROUTED_META_KEYS = (
    "_wp_page_template",
    "_wp_attachment_image_alt",
    "_wp_attached_file",
    "_wp_attachment_metadata",
    "_wp_attachment_backup_sizes",
)

_WP_DATE = "%Y-%m-%d %H:%M:%S"


def _is_date(value: str) -> bool:
    value = value.strip()
    if not value or value.startswith("0000-00-00"):
        return False
    try:
        datetime.strptime(value, _WP_DATE)
    except ValueError:
        return False
    return True


class Post(Item):
    prefix_filter: ClassVar[str] = r"^(post|page)_?"
    default_bag: ClassVar[str] = "fields"

    # source fields being hinted
    PARSE_DESCRIPTION: ClassVar[int] = 16
    PARSE_CONTENT: ClassVar[int] = 32
    PARSE_EXCERPT: ClassVar[int] = 64
    # a[href], img[src], srcset attributes
    HINT_LINK: ClassVar[int] = 1
    HINT_IMG: ClassVar[int] = 2
    HINT_SRCSET: ClassVar[int] = 4

    type: str = "post"
    parent: int = 0
    # username of <dc:creator>, see WXRConverter.resolve_creator()
    creator: str = ""
    content: str = ""
    content_html: str = ""
    excerpt: str = ""
    excerpt_html: str = ""
    # GMT date unless zero, else the local post date
    created: str = ""
    # wp:post_name, the slug
    name: str = ""
    filepath: str = ""
    template: str = "default"
    status: str = "publish"
    meta: Dict[str, BagValue] = Field(default_factory=dict)
    tags: Dict[str, List[str]] = Field(default_factory=dict)
    categories: Dict[str, List[str]] = Field(default_factory=dict)
    hints: int = 0

    @handles("id")
    def set_id(self, element: WXRElement, context) -> "Post":
        self.id = self._int_value(element, context, self.id)
        return self

    @handles("parent")
    def set_parent(self, element: WXRElement, context) -> "Post":
        self.parent = self._int_value(element, context, self.parent)
        return self

    def hint_html(self, html: str, source: int) -> int:
        """Flags for ``html``: ``source`` plus HINT_* bits, 0 without markup.

        The result is also merged into :attr:`hints`.
        """
        if not has_markup(html):
            return 0
        flags = source
        if "href=" in html:
            flags |= self.HINT_LINK
        if "<img" in html:
            flags |= self.HINT_IMG
        if "srcset=" in html:
            flags |= self.HINT_SRCSET
        self.hints |= flags
        return flags

    def has_flag(self, flag: int) -> bool:
        return bool(self.hints & flag)

    @handles("content")
    def set_content(self, element: WXRElement, context) -> "Post":
        self.content_html = element.text
        if self.hint_html(self.content_html, self.PARSE_CONTENT):
            self.extract_inline_urls(self.content_html, context)
            self.content = context.html_to_text(self.content_html)
        else:
            self.content = self.content_html
        return self

    @handles("excerpt")
    def set_excerpt(self, element: WXRElement, context) -> "Post":
        self.excerpt_html = element.text
        if self.hint_html(self.excerpt_html, self.PARSE_EXCERPT):
            self.excerpt = context.html_to_text(self.excerpt_html)
        else:
            self.excerpt = self.excerpt_html
        return self

    @handles("description")
    def set_description(self, element: WXRElement, context) -> "Post":
        self.description = element.text
        if self.hint_html(self.description, self.PARSE_DESCRIPTION):
            self.description = context.html_to_text(self.description)
        return self

    def set_intro(self, text: str, context) -> "Post":
        """Adds an ``intro`` field, e.g. from a Transform using parts of the
        content or excerpt."""
        if text:
            self.add_field("intro", context.html_to_text(text))
        return self

    @handles("date_gmt")
    def set_date_gmt(self, element: WXRElement, context) -> "Post":
        if not _is_date(element.text):
            return self
        self.created = element.text.strip()
        self.fields.pop("pubDate", None)
        self.fields.pop("date", None)
        return self

    @handles("date")
    def set_date(self, element: WXRElement, context) -> "Post":
        if not self.created:
            self.created = element.text.strip()
        return self

    @handles("link")
    def set_link(self, element: WXRElement, context) -> "Post":
        super().set_link(element, context)
        self.set_filepath(self.link)
        return self

    def set_filepath(self, url: str) -> "Post":
        self.filepath = url_path(url)
        return self

    @handles("creator")
    def set_creator(self, element: WXRElement, context) -> "Post":
        username = element.text.strip()
        self.creator = username
        if context is not None and context.author(username) is None:
            context.report("AUTHOR_UNRESOLVED", self, creator=username)
        return self

    @handles("category")
    def set_category(self, element: WXRElement, context) -> "Post":
        """
        ``<category domain="category" nicename="news"><![CDATA[News]]></category>``
        and ``domain="post_tag"``.  Other taxonomies (post_format, nav_menu)
        are kept in ``data["terms"]``.
        """
        value = normalize_label(element.text)
        domain = element.get("domain", "category")
        nicename = element.get("nicename") or value

        if domain == "post_tag":
            append_unique(self.tags.setdefault(nicename, []), value)
        elif domain == "category":
            append_unique(self.categories.setdefault(nicename, []), value)
        else:
            terms = self.data.setdefault("terms", {})
            append_unique(terms.setdefault(domain, []), value)
        return self

    @handles("meta")
    def set_meta(self, element: WXRElement, context) -> "Post":
        """
        ``<wp:postmeta>`` with ``<wp:meta_key>`` and ``<wp:meta_value>``.

        Known WordPress keys are routed again as if they were elements of
        the item, into the ``meta`` bag unless a handler exists (page
        template, attached file, attachment metadata).  Custom fields are
        kept as they are; other internal keys (``_edit_last``, ...) are
        dropped.  Plugin data is left to a Transform for ``wp:postmeta``.
        """
        key = element.findtext("meta_key").strip()
        value = element.findtext("meta_value")
        if not key:
            return self
        if key in ROUTED_META_KEYS:
            context.route(WXRElement.make(key, value), self, bag="meta")
        elif not key.startswith("_") and value.strip():
            self.add_to_bag("meta", key, value)
        return self

    @handles("template")
    def set_template(self, element: WXRElement, context) -> "Post":
        """
        ``_wp_page_template``: the ``template-`` prefix and ``.php`` suffix
        are removed and what's left becomes the page's blueprint name.
        """
        value = posixpath.basename(element.text.strip())
        if value.endswith(".php"):
            value = value[: -len(".php")]
        self.template = value.replace("template-", "") or "default"
        if context is not None and context.channel is not None:
            context.channel.set_blueprint(self.filepath, self.template)
        return self

    def extract_inline_urls(self, html: str, context) -> "Post":
        """Collect canonical link, image and srcset URLs into ``data``."""
        found = collect_inline_urls(html, srcset=self.has_flag(self.HINT_SRCSET))
        for store, urls in found.items():
            collected = self.data.setdefault(store, [])
            for url in urls:
                url = context.canonicalize(url, self)
                if url:
                    collected.append(url)
        return self
