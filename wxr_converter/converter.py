"""
High-level orchestration of the WordPress → flat-file CMS conversion.

This module defines a :class:`WXRConverter` class that ties together the
document walker, the field router, the transforms and the diagnostics into
a complete pipeline.  It owns every entity built from one export: the site
channel, the authors keyed by username, pages and posts keyed by id and the
attachments (files) keyed by id.  Finished entities are handed to an
:class:`~wxr_converter.sinks.EntitySink` one by one; writing the target
content files is the sink's business.

Configuration is supplied via a JSON file path or directly as a
dictionary and validated by :class:`~wxr_converter.models.config.ConverterConfig`.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from wxr_converter.entities import ENTITY_TYPES, Attachment, Author, Channel, Entity, Post
from wxr_converter.extractors.wxr_document import ConversionSummary, WXRDocument, WXRWalker
from wxr_converter.mapping.router import FieldRouter
from wxr_converter.mapping.transforms import Transform, TransformLoadError, TransformRegistry
from wxr_converter.models.config import ConverterConfig
from wxr_converter.parsers.html import HtmlConverter, make_html_converter
from wxr_converter.sinks import EntitySink, field_map
from wxr_converter.utils.errors import DiagnosticLog


def load_config(config_file: str) -> Dict[str, Any]:
    """Read a JSON configuration file; a missing file yields ``{}``."""
    if not config_file or not os.path.exists(config_file):
        return {}
    with open(config_file, "r", encoding="utf-8") as f:
        return json.load(f)


class WXRConverter:
    """
    Encapsulates all state required to convert one WordPress export.
    Call :meth:`convert` with the path of the export, then :meth:`export`
    with a sink.  Recoverable problems are recorded in :attr:`diagnostics`.
    """

    def __init__(
        self,
        config: Optional[Union[Dict[str, Any], ConverterConfig]] = None,
        *,
        config_file: Optional[str] = None,
        transforms: Optional[Mapping[str, Transform]] = None,
        html_converter: Optional[HtmlConverter] = None,
    ) -> None:
        if config_file and os.path.exists(config_file):
            config = load_config(config_file)
        elif config is None:
            # Default configuration
            config = {}
        if not isinstance(config, ConverterConfig):
            config = ConverterConfig.model_validate(config)
        self.config = config

        self.diagnostics = DiagnosticLog(self.config.report_dir)
        try:
            self.transforms = TransformRegistry.from_config(self.config.transforms)
            for qname, transform in (transforms or {}).items():
                self.transforms.register(qname, transform)
        except TransformLoadError as e:
            self.diagnostics.report_error("TRANSFORM_LOAD", None, e)
            raise

        self.router = FieldRouter(self.transforms, ignore=self.config.ignore, entity_types=ENTITY_TYPES)
        self.html_converter: HtmlConverter = html_converter or make_html_converter(self.config.html2md)

        self.site: Optional[Channel] = None
        self.pages: Dict[int, Post] = {}
        self.files: Dict[int, Attachment] = {}
        self.authors: Dict[str, Author] = {}
        self.summary: Optional[ConversionSummary] = None

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        if self.config.report_dir:
            os.makedirs(self.config.report_dir, exist_ok=True)
            with open(os.path.join(self.config.report_dir, "conversion.log"), "a", encoding="utf-8") as f:
                f.write(f"{level}: {message}\n")

    def convert(self, xml_path: Optional[str] = None, *, xml_string: Optional[Union[str, bytes]] = None) -> ConversionSummary:
        """
        Parse the export and build all entities.

        :raises WXRParseError: if the document is malformed; nothing is
            built in that case.
        """
        if xml_string is not None:
            document = WXRDocument.from_string(xml_string)
        elif xml_path:
            self.log_message(f"Reading WXR export {xml_path}")
            document = WXRDocument.load(xml_path)
        else:
            raise ValueError("Either xml_path or xml_string is required")

        if document.wxr_version:
            self.log_message(f"WXR version {document.wxr_version}", level="DEBUG")

        self.summary = WXRWalker(self).walk(document)
        self.log_message(f"Conversion finished: {self.summary.describe()}")
        return self.summary

    def get_transform(self, qname: str) -> Transform:
        return self.transforms.get(qname)

    def get_site(self) -> Optional[Channel]:
        return self.site

    def set_site(self, channel: Channel) -> "WXRConverter":
        self.site = channel
        return self

    def get_pages(self) -> Dict[int, Post]:
        return self.pages

    def set_page(self, post: Post) -> "WXRConverter":
        """Store a page or post by its id; a duplicate id replaces the earlier one."""
        self.pages[post.id] = post
        return self

    def get_files(self) -> Dict[int, Attachment]:
        return self.files

    def set_file(self, attachment: Attachment) -> "WXRConverter":
        self.files[attachment.id] = attachment
        return self

    def set_image(self, attachment: Attachment) -> "WXRConverter":
        return self.set_file(attachment)

    def get_authors(self) -> Dict[str, Author]:
        return self.authors

    def set_author(self, author: Author) -> "WXRConverter":
        # <dc:creator> of an <item> refers to the username
        self.authors[author.username] = author
        return self

    def get_author(self, username: str) -> Optional[Author]:
        return self.authors.get(username)

    def resolve_creator(self, post: Post) -> Optional[Author]:
        if not post.creator:
            return None
        return self.get_author(post.creator)

    def get_parent(self, post: Post) -> Optional[Post]:
        if not post.parent:
            return None
        return self.pages.get(post.parent) or self.files.get(post.parent)

    def entities(self) -> Iterator[Tuple[str, Entity]]:
        """All entities in output order: site, authors, pages, files."""
        if self.site is not None:
            yield "site", self.site
        for author in self.authors.values():
            yield "author", author
        for page in self.pages.values():
            yield "page", page
        for attachment in self.files.values():
            yield "file", attachment

    def export(self, sink: EntitySink) -> int:
        """Hand every entity to ``sink`` as a field map; returns the count."""
        count = 0
        for kind, entity in self.entities():
            sink.write(kind, field_map(entity, self), entity)
            count += 1
        self.log_message(f"Exported {count} entities")
        return count

    def __str__(self) -> str:
        return json.dumps(
            {
                "pages": list(self.pages),
                "files": list(self.files),
                "authors": list(self.authors),
            }
        )
