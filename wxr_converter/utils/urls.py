"""
Canonical form of links found in a WordPress export.

Links pointing at the migrated site are rewritten according to a
:class:`~wxr_converter.models.config.UrlPolicy` so that the new site does
not keep mixed ``http``/``https`` or ``www``/bare-domain URLs.  Links to
other hosts, non-web schemes and relative references are returned exactly
as they were given.
"""

from __future__ import annotations

import ipaddress
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

from wxr_converter.models.config import UrlPolicy


def base_domain(host: str) -> str:
    """Return ``host`` without its leftmost label.

    Hosts with only two labels (``example.com``), single labels
    (``localhost``) and IP addresses are their own base domain.
    """
    host = (host or "").strip().lower().rstrip(".")
    if not host:
        return ""
    try:
        ipaddress.ip_address(host)
        return host
    except ValueError:
        pass
    labels = host.split(".")
    if len(labels) <= 2:
        return host
    return ".".join(labels[1:])


class UrlCanonicalizer:
    """Rewrite scheme and host of the site's own links.

    :param host: the site host taken from ``<channel><link>`` (incl. subdomain).
    :param policy: the rewrite policy.
    """

    def __init__(self, host: str, policy: Optional[UrlPolicy] = None) -> None:
        self.host = (host or "").strip().lower()
        self.domain = base_domain(self.host)
        self.policy = policy or UrlPolicy()

    def owns(self, hostname: Optional[str]) -> bool:
        if not hostname or not self.domain:
            return False
        hostname = hostname.lower().rstrip(".")
        return hostname == self.domain or hostname.endswith("." + self.domain)

    def canonicalize(self, url: str) -> str:
        if url is None:
            return ""
        if url == "#":
            return ""
        try:
            parts = urlsplit(url)
        except ValueError:
            return url
        # skip ftp, mailto, javascript, relative references etc.
        if parts.scheme.lower() not in ("http", "https"):
            return url
        try:
            hostname = parts.hostname
            # out of range or non-numeric ports raise here
            parts.port
        except ValueError:
            return url
        if not self.owns(hostname):
            return url
        return urlunsplit(self._rewrite(parts))

    __call__ = canonicalize

    def _rewrite(self, parts: SplitResult) -> SplitResult:
        scheme = parts.scheme.lower()
        if self.policy.https is True:
            scheme = "https"
        elif self.policy.https is False:
            scheme = "http"

        hostname = parts.hostname or ""
        if self.policy.www is False:
            hostname = self.domain
        elif self.policy.www is True:
            hostname = self.host

        netloc = f"[{hostname}]" if ":" in hostname else hostname
        if parts.port is not None:
            netloc = f"{netloc}:{parts.port}"
        if parts.username is not None:
            userinfo = parts.username
            if parts.password is not None:
                userinfo = f"{userinfo}:{parts.password}"
            netloc = f"{userinfo}@{netloc}"
        return parts._replace(scheme=scheme, netloc=netloc)


def url_path(url: str) -> str:
    """Path component of ``url`` (empty string when there is none)."""
    try:
        return urlsplit(url or "").path
    except ValueError:
        return ""


def strip_site_url(url: str, site_url: str) -> str:
    """Turn an absolute link below ``site_url`` into a root-relative one."""
    site_url = (site_url or "").rstrip("/")
    if site_url and url.startswith(site_url):
        rest = url[len(site_url):]
        if not rest or rest[0] in "/?#":
            return rest or "/"
    return url
