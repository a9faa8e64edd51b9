"""
Parsers and converters used by the conversion pipeline.

Currently this subpackage exposes ``convert_html_to_markdown`` and
``collect_inline_urls`` from :mod:`wxr_converter.parsers.html`.
"""

from .html import collect_inline_urls, convert_html_to_markdown

__all__ = ["collect_inline_urls", "convert_html_to_markdown"]
