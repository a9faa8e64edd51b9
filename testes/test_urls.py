import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from wxr_converter.mapping.context import ParseContext
from wxr_converter.models.config import UrlPolicy
from wxr_converter.utils.urls import UrlCanonicalizer, base_domain, strip_site_url, url_path


@pytest.mark.parametrize(
    "host, expected",
    [
        ("www.example.com", "example.com"),
        ("a.b.example.com", "b.example.com"),
        ("example.com", "example.com"),
        ("localhost", "localhost"),
        ("127.0.0.1", "127.0.0.1"),
        ("", ""),
    ],
)
def test_base_domain(host, expected):
    assert base_domain(host) == expected


def test_site_links_get_https_and_bare_domain():
    canon = UrlCanonicalizer("www.example.com")
    assert canon("http://www.example.com/about/?a=1#top") == "https://example.com/about/?a=1#top"
    assert canon("http://example.com/") == "https://example.com/"
    assert canon("http://blog.example.com/x") == "https://example.com/x"


@pytest.mark.parametrize("https", [True, False, None])
@pytest.mark.parametrize("www", [True, False, None])
def test_canonicalization_is_idempotent(https, www):
    canon = UrlCanonicalizer("www.example.com", UrlPolicy(https=https, www=www))
    for url in (
        "http://example.com/a",
        "https://www.example.com/b?c=d",
        "http://blog.example.com:8080/c#d",
        "http://www.example.com:99999/x",
        "http://other.org/",
        "mailto:x@example.com",
        "#",
    ):
        once = canon(url)
        assert canon(once) == once


def test_hash_becomes_empty():
    assert UrlCanonicalizer("example.com")("#") == ""
    assert UrlCanonicalizer("example.com")(" # ") == " # "


@pytest.mark.parametrize(
    "url",
    ["http://www.example.com:99999/x", "http://www.example.com:abc/x", "https://example.com:-1/"],
)
def test_invalid_port_leaves_url_unchanged(url):
    assert UrlCanonicalizer("www.example.com")(url) == url


@pytest.mark.parametrize(
    "url",
    [
        "mailto:someone@example.com",
        "ftp://example.com/file.zip",
        "javascript:void(0)",
        "/relative/path",
        "https://other.org/page",
        "http://notexample.com/",
        "",
    ],
)
def test_foreign_and_non_web_urls_are_unchanged(url):
    assert UrlCanonicalizer("www.example.com")(url) == url


def test_policy_none_leaves_scheme_and_host():
    canon = UrlCanonicalizer("www.example.com", UrlPolicy(https=None, www=None))
    assert canon("http://www.example.com/x") == "http://www.example.com/x"


def test_policy_http_and_www():
    canon = UrlCanonicalizer("www.example.com", UrlPolicy(https=False, www=True))
    assert canon("https://example.com/x") == "http://www.example.com/x"


def test_port_and_userinfo_are_kept():
    canon = UrlCanonicalizer("www.example.com")
    assert canon("http://user:pw@www.example.com:8080/x") == "https://user:pw@example.com:8080/x"


def test_strip_site_url():
    assert strip_site_url("https://example.com/wp-content/uploads/a.jpg", "https://example.com") == "/wp-content/uploads/a.jpg"
    assert strip_site_url("https://example.com", "https://example.com/") == "/"
    assert strip_site_url("https://example.community/x", "https://example.com") == "https://example.community/x"
    assert strip_site_url("https://example.com/x", "") == "https://example.com/x"


def test_url_path():
    assert url_path("https://example.com/2020/01/post/?p=1") == "/2020/01/post/"
    assert url_path("") == ""


def test_missing_site_host_passes_urls_through_with_one_diagnostic(converter):
    context = ParseContext(converter)
    assert context.canonicalize("http://www.example.com/a") == "http://www.example.com/a"
    assert context.canonicalize("http://www.example.com/b") == "http://www.example.com/b"
    assert converter.diagnostics.codes() == ["SITE_HOST_MISSING"]
