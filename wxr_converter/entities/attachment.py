from __future__ import annotations

from typing import Any, ClassVar, Optional
from urllib.parse import parse_qs, urlsplit

from pydantic import PrivateAttr

from wxr_converter.entities.post import Post
from wxr_converter.extractors.xml_element import WXRElement
from wxr_converter.mapping.router import handles
from wxr_converter.models.attachment import AttachmentMetadata
from wxr_converter.utils.text import normalize_label
from wxr_converter.utils.urls import strip_site_url


class Attachment(Post):
    """
    An upload, ``<wp:post_type>attachment``.

    ``url`` is ``<wp:attachment_url>`` without the site URL, i.e. the path
    below ``wp-content/uploads/``.  The relative upload path is also given
    in the ``_wp_attached_file`` postmeta, which becomes the filepath.
    """

    prefix_filter: ClassVar[str] = r"^(post|attachment)_?"

    type: str = "attachment"
    url: str = ""
    alt: str = ""
    metadata: Optional[AttachmentMetadata] = None

    # legacy "?attachment_id=" links identify the upload by query parameter
    _id_from_link: Any = PrivateAttr(default=False)

    @handles("id")
    def set_id(self, element: WXRElement, context) -> "Attachment":
        if not self._id_from_link:
            super().set_id(element, context)
        return self

    @handles("url")
    def set_url(self, element: WXRElement, context) -> "Attachment":
        url = context.canonicalize(element.text.strip(), self)
        site_url = context.channel.url if context.channel is not None else ""
        self.url = strip_site_url(url, site_url)
        return self

    def set_filepath(self, url: str) -> "Attachment":
        """Find an ``attachment_id`` or delegate to Post."""
        try:
            parts = urlsplit(url)
        except ValueError:
            return super().set_filepath(url)
        attachment_id = parse_qs(parts.query).get("attachment_id", [""])[0].strip()
        if attachment_id.isdigit():
            self.id = int(attachment_id)
            self._id_from_link = True
            self.filepath = "" if parts.path == "/" else parts.path
            return self
        return super().set_filepath(url)

    @handles("attached_file")
    def set_attached_file(self, element: WXRElement, context) -> "Attachment":
        self.set_filepath(element.text.strip())
        return self

    @handles("metadata")
    def set_metadata(self, element: WXRElement, context) -> "Attachment":
        """``_wp_attachment_metadata``: sizes and dimensions, PHP-serialized."""
        try:
            self.metadata = AttachmentMetadata.from_serialized(element.text)
        except ValueError as e:
            self.metadata = None
            if context is not None:
                context.report("METADATA_DECODE", self, e)
        return self

    @handles("image_alt")
    def set_image_alt(self, element: WXRElement, context) -> "Attachment":
        self.alt = normalize_label(element.text)
        return self
