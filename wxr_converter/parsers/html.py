from __future__ import annotations

import re
from typing import Any, Callable, Dict, List

from bs4 import BeautifulSoup
from markdownify import markdownify

HtmlConverter = Callable[[str], str]

_MARKUP = re.compile(r"<[a-z]+\s?", re.IGNORECASE)
_CAPTION = re.compile(r"\[/?caption[^\]]*\]", re.IGNORECASE)


def has_markup(text: str) -> bool:
    """True if ``text`` contains at least one opening HTML tag."""
    return bool(_MARKUP.search(text or ""))


def convert_html_to_markdown(html: str, **options: Any) -> str:
    """
    Convert WordPress HTML to Markdown with markdownify.

    WordPress ``[caption]`` shortcodes are removed before conversion; the
    image and caption text inside them are kept.
    """
    if not html or not html.strip():
        return ""
    cleaned_html = _CAPTION.sub("", html)
    return markdownify(cleaned_html, **options).strip()


def make_html_converter(options: Dict[str, Any]) -> HtmlConverter:
    def convert(html: str) -> str:
        return convert_html_to_markdown(html, **options)

    return convert


def parse_srcset(value: str) -> List[str]:
    """Return the URLs of a ``srcset`` attribute, descriptors removed."""
    urls: List[str] = []
    for candidate in (value or "").split(","):
        candidate = candidate.strip()
        if not candidate:
            continue
        urls.append(candidate.split()[0])
    return urls


def collect_inline_urls(html: str, *, srcset: bool = True) -> Dict[str, List[str]]:
    """
    Collect link targets and image sources from an HTML fragment.

    Returns a mapping with ``links`` (``a[href]``), ``images`` (``img[src]``
    plus ``img[srcset]`` candidates) and ``sources`` (``source[srcset]``
    candidates).  Keys without any match are omitted.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    found: Dict[str, List[str]] = {}

    links = [a.get("href") for a in soup.find_all("a") if a.get("href")]
    if links:
        found["links"] = links

    images: List[str] = []
    for img in soup.find_all("img"):
        if img.get("src"):
            images.append(img.get("src"))
        if srcset and img.get("srcset"):
            images.extend(parse_srcset(img.get("srcset")))
    if images:
        found["images"] = images

    if srcset:
        sources: List[str] = []
        for source in soup.find_all("source"):
            sources.extend(parse_srcset(source.get("srcset") or ""))
        if sources:
            found["sources"] = sources
    return found
