"""
Top-level package for the WordPress WXR → flat-file CMS converter.

This package bundles all components required to read a WordPress
eXtended RSS export and turn its channel, authors, pages, posts and
attachments into entities ready to be written as content files.
Modules are split into subpackages:

* :mod:`wxr_converter.extractors` – WXR parsing and the document walk
* :mod:`wxr_converter.mapping` – element to field routing and transforms
* :mod:`wxr_converter.entities` – channel, author, post and attachment models
* :mod:`wxr_converter.parsers` – HTML to Markdown and inline URL extraction
* :mod:`wxr_converter.utils` – diagnostics, URL canonicalization, redirect maps

Orchestration is handled in :mod:`wxr_converter.converter`.
"""

from .converter import WXRConverter
from .extractors.wxr_document import ConversionSummary, WXRParseError

__all__ = ["ConversionSummary", "WXRConverter", "WXRParseError"]
