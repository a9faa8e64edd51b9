import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

WXR_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
    xmlns:excerpt="http://wordpress.org/export/1.2/excerpt/"
    xmlns:content="http://purl.org/rss/1.0/modules/content/"
    xmlns:wfw="http://wellformedweb.org/CommentAPI/"
    xmlns:dc="http://purl.org/dc/elements/1.1/"
    xmlns:wp="http://wordpress.org/export/1.2/">
<channel>
    <title>{title}</title>
    <link>{link}</link>
    <description>Just another WordPress site</description>
    <language>en-US</language>
    <wp:wxr_version>{version}</wp:wxr_version>
    <wp:base_site_url>{link}</wp:base_site_url>
    <wp:base_blog_url>{link}</wp:base_blog_url>
{channel_extra}
{authors}
{items}
</channel>
</rss>
"""


def author_xml(login="admin", author_id=1, first="", last="", display=""):
    return f"""
    <wp:author>
        <wp:author_id>{author_id}</wp:author_id>
        <wp:author_login><![CDATA[{login}]]></wp:author_login>
        <wp:author_email><![CDATA[{login}@example.com]]></wp:author_email>
        <wp:author_display_name><![CDATA[{display or login}]]></wp:author_display_name>
        <wp:author_first_name><![CDATA[{first}]]></wp:author_first_name>
        <wp:author_last_name><![CDATA[{last}]]></wp:author_last_name>
    </wp:author>"""


def item_xml(post_id=1, post_type="post", title="Hello", link="http://www.example.com/hello/",
             content="", creator="admin", extra=""):
    post_type_xml = f"<wp:post_type><![CDATA[{post_type}]]></wp:post_type>" if post_type is not None else ""
    return f"""
    <item>
        <title>{title}</title>
        <link>{link}</link>
        <dc:creator><![CDATA[{creator}]]></dc:creator>
        <content:encoded><![CDATA[{content}]]></content:encoded>
        <excerpt:encoded><![CDATA[]]></excerpt:encoded>
        <wp:post_id>{post_id}</wp:post_id>
        {post_type_xml}
        {extra}
    </item>"""


def postmeta_xml(key, value):
    return f"""
        <wp:postmeta>
            <wp:meta_key><![CDATA[{key}]]></wp:meta_key>
            <wp:meta_value><![CDATA[{value}]]></wp:meta_value>
        </wp:postmeta>"""


def build_wxr(items=(), authors=(), channel_extra="", link="http://www.example.com", title="Example", version="1.2"):
    return WXR_TEMPLATE.format(
        title=title,
        link=link,
        version=version,
        channel_extra=channel_extra,
        authors="".join(authors),
        items="".join(items),
    )


@pytest.fixture
def wxr():
    """Builder for a minimal WXR 1.2 document."""
    return build_wxr


@pytest.fixture
def item():
    return item_xml


@pytest.fixture
def author():
    return author_xml


@pytest.fixture
def postmeta():
    return postmeta_xml


@pytest.fixture
def converter():
    """A converter without report directory and with silenced diagnostics."""
    from wxr_converter.converter import WXRConverter

    conv = WXRConverter()
    conv.diagnostics.echo = False
    return conv
