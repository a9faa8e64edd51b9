from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Plugin data or WP internals without a useful counterpart in the content tree.
DEFAULT_DISCARD = [
    "display_type",
    "wooframework",
    "ngg_pictures",
    "ngg_gallery",
    "gal_display_source",
    "slide",
    "lightbox_library",
]


class UrlPolicy(BaseModel):
    """How links pointing at the migrated site are rewritten.

    ``https``: True forces https, False forces http, None leaves the scheme.
    ``www``: False drops the subdomain, True forces the site host, None
    leaves the host.
    """

    model_config = ConfigDict(extra="forbid")

    https: Optional[bool] = True
    www: Optional[bool] = False


class ConverterConfig(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: str = Field("Title", min_length=1)
    text: str = Field("Text", min_length=1)
    ignore: List[str] = Field(default_factory=lambda: ["comment", "password", "is_sticky", "ping_status"])
    resolve_urls: UrlPolicy = Field(default_factory=UrlPolicy)
    delegate: List[str] = Field(default_factory=lambda: ["nav_menu_item"])
    discard: List[str] = Field(default_factory=lambda: list(DEFAULT_DISCARD))
    html2md: Dict[str, Any] = Field(default_factory=lambda: {"heading_style": "atx"})
    transforms: Dict[str, str] = Field(default_factory=dict)
    report_dir: Optional[str] = None

    @field_validator("ignore", "delegate", "discard", mode="before")
    @classmethod
    def _dedup_names(cls, v: Optional[List[str]]):
        if not v:
            return []
        seen = set()
        deduped = []
        for item in v:
            item = str(item).strip()
            if item and item not in seen:
                seen.add(item)
                deduped.append(item)
        return deduped
