import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")
pytest.importorskip("phpserialize")

from wxr_converter.entities import Post
from wxr_converter.models.attachment import AttachmentMetadata

THUMBNAIL = 'a:4:{s:4:"file";s:13:"a-150x150.jpg";s:5:"width";i:150;s:6:"height";i:150;s:9:"mime-type";s:10:"image/jpeg";}'
METADATA = (
    'a:4:{s:5:"width";i:800;s:6:"height";i:600;s:4:"file";s:13:"2020/01/a.jpg";'
    's:5:"sizes";a:1:{s:9:"thumbnail";' + THUMBNAIL + "}}"
)


def only_page(converter):
    pages = list(converter.get_pages().values())
    assert len(pages) == 1
    return pages[0]


def only_file(converter):
    files = list(converter.get_files().values())
    assert len(files) == 1
    return files[0]


def test_content_markup_is_hinted_converted_and_urls_collected(converter, wxr, item, author):
    html = (
        '<h2>Intro</h2><p>See <a href="http://www.example.com/about/">about</a> '
        'and <a href="https://other.org/">other</a>.</p>'
        '<img src="http://www.example.com/wp-content/uploads/a.jpg" '
        'srcset="http://www.example.com/a-300.jpg 300w, http://www.example.com/a-600.jpg 600w">'
    )
    converter.convert(xml_string=wxr(items=[item(content=html)], authors=[author()]))
    post = only_page(converter)

    assert post.content_html == html
    assert "## Intro" in post.content
    assert "[about](http://www.example.com/about/)" in post.content
    for flag in (Post.PARSE_CONTENT, Post.HINT_LINK, Post.HINT_IMG, Post.HINT_SRCSET):
        assert post.has_flag(flag)
    assert not post.has_flag(Post.PARSE_EXCERPT)
    assert post.data["links"] == ["https://example.com/about/", "https://other.org/"]
    assert post.data["images"] == [
        "https://example.com/wp-content/uploads/a.jpg",
        "https://example.com/a-300.jpg",
        "https://example.com/a-600.jpg",
    ]


def test_plain_text_content_is_kept_as_is(converter, wxr, item, author):
    converter.convert(xml_string=wxr(items=[item(content="Just words.")], authors=[author()]))
    post = only_page(converter)
    assert post.content == "Just words."
    assert post.hints == 0
    assert "links" not in post.data


def test_link_sets_canonical_link_and_filepath(converter, wxr, item, author):
    converter.convert(xml_string=wxr(items=[item(link="http://www.example.com/2020/01/hello/")], authors=[author()]))
    post = only_page(converter)
    assert post.link == "https://example.com/2020/01/hello/"
    assert post.filepath == "/2020/01/hello/"


def test_categories_tags_and_other_terms(converter, wxr, item, author):
    extra = """
        <category domain="category" nicename="news"><![CDATA[News]]></category>
        <category domain="category" nicename="news"><![CDATA[News]]></category>
        <category domain="post_tag" nicename="tips"><![CDATA[Tips &amp; Tricks]]></category>
        <category domain="post_format" nicename="post-format-aside"><![CDATA[Aside]]></category>
    """
    converter.convert(xml_string=wxr(items=[item(extra=extra)], authors=[author()]))
    post = only_page(converter)
    assert post.categories == {"news": ["News"]}
    assert post.tags == {"tips": ["Tips & Tricks"]}
    assert post.data["terms"] == {"post_format": ["Aside"]}


def test_gmt_date_wins_and_drops_pubdate(converter, wxr, item, author):
    extra = """
        <pubDate>Thu, 02 Jan 2020 09:00:00 +0000</pubDate>
        <wp:post_date><![CDATA[2020-01-02 10:00:00]]></wp:post_date>
        <wp:post_date_gmt><![CDATA[2020-01-02 09:00:00]]></wp:post_date_gmt>
    """
    converter.convert(xml_string=wxr(items=[item(extra=extra)], authors=[author()]))
    post = only_page(converter)
    assert post.created == "2020-01-02 09:00:00"
    assert "pubDate" not in post.fields


def test_zero_gmt_date_falls_back_to_local_date(converter, wxr, item, author):
    extra = """
        <pubDate>Thu, 02 Jan 2020 09:00:00 +0000</pubDate>
        <wp:post_date_gmt><![CDATA[0000-00-00 00:00:00]]></wp:post_date_gmt>
        <wp:post_date><![CDATA[2020-01-02 10:00:00]]></wp:post_date>
    """
    converter.convert(xml_string=wxr(items=[item(extra=extra)], authors=[author()]))
    post = only_page(converter)
    assert post.created == "2020-01-02 10:00:00"
    assert post.fields["pubDate"] == "Thu, 02 Jan 2020 09:00:00 +0000"


def test_page_template_becomes_blueprint(converter, wxr, item, author, postmeta):
    extra = postmeta("_wp_page_template", "templates/template-contact.php")
    xml = wxr(
        items=[item(post_type="page", link="http://www.example.com/contact/", extra=extra)],
        authors=[author()],
    )
    converter.convert(xml_string=xml)
    page = only_page(converter)
    assert page.template == "contact"
    assert converter.get_site().get_blueprint("/contact/") == "contact"
    assert converter.get_site().get_blueprint("/elsewhere/") == "default"


def test_postmeta_custom_internal_and_routed_keys(converter, wxr, item, author, postmeta):
    extra = (
        postmeta("subtitle", "A subtitle")
        + postmeta("_edit_last", "1")
        + postmeta("_wp_attached_file", "2020/01/a.jpg")
        + postmeta("empty_key", "")
    )
    converter.convert(xml_string=wxr(items=[item(extra=extra)], authors=[author()]))
    post = only_page(converter)
    assert post.meta == {"subtitle": "A subtitle", "attached_file": "2020/01/a.jpg"}
    assert "postmeta" not in post.fields


def test_unresolved_creator_is_reported(converter, wxr, item, author):
    converter.convert(xml_string=wxr(items=[item(creator="ghost")], authors=[author("admin")]))
    post = only_page(converter)
    assert post.creator == "ghost"
    assert converter.resolve_creator(post) is None
    assert "AUTHOR_UNRESOLVED" in converter.diagnostics.codes()


def test_creator_resolves_to_author(converter, wxr, item, author):
    converter.convert(xml_string=wxr(items=[item(creator="admin")], authors=[author("admin")]))
    post = only_page(converter)
    assert converter.resolve_creator(post) is converter.get_author("admin")
    # lookup is case-sensitive
    assert converter.get_author("Admin") is None


def test_attachment_with_attached_file_and_metadata(converter, wxr, item, author, postmeta):
    extra = (
        "<wp:attachment_url><![CDATA[http://www.example.com/wp-content/uploads/2020/01/a.jpg]]></wp:attachment_url>"
        + postmeta("_wp_attached_file", "2020/01/a.jpg")
        + postmeta("_wp_attachment_metadata", METADATA)
        + postmeta("_wp_attachment_image_alt", "  A  picture ")
    )
    xml = wxr(
        items=[item(post_id=5, post_type="attachment", link="http://www.example.com/hello/a/", extra=extra)],
        authors=[author()],
    )
    converter.convert(xml_string=xml)
    attachment = only_file(converter)

    assert attachment.id == 5
    assert attachment.type == "attachment"
    assert attachment.url == "/wp-content/uploads/2020/01/a.jpg"
    assert attachment.filepath == "2020/01/a.jpg"
    assert attachment.alt == "A picture"
    assert attachment.metadata is not None
    assert attachment.metadata.width == 800
    assert attachment.metadata.sizes["thumbnail"].mime_type == "image/jpeg"
    assert converter.get_pages() == {}


def test_attachment_id_link_wins_over_post_id(converter, wxr, item, author):
    xml = wxr(
        items=[item(post_id=5, post_type="attachment", link="http://www.example.com/?attachment_id=42")],
        authors=[author()],
    )
    converter.convert(xml_string=xml)
    attachment = only_file(converter)
    assert attachment.id == 42
    assert attachment.filepath == ""
    assert list(converter.get_files()) == [42]


def test_malformed_metadata_is_reported_and_left_unset(converter, wxr, item, author, postmeta):
    extra = postmeta("_wp_attachment_metadata", 'a:2:{s:5:"width";i:800;')
    xml = wxr(items=[item(post_id=6, post_type="attachment", extra=extra)], authors=[author()])
    converter.convert(xml_string=xml)
    attachment = only_file(converter)
    assert attachment.metadata is None
    assert "METADATA_DECODE" in converter.diagnostics.codes()


def test_metadata_from_serialized():
    metadata = AttachmentMetadata.from_serialized(METADATA)
    assert (metadata.width, metadata.height, metadata.file) == (800, 600, "2020/01/a.jpg")
    assert metadata.sizes["thumbnail"].file == "a-150x150.jpg"
    assert metadata.image_meta == {}


@pytest.mark.parametrize("blob", ["", "not serialized", 's:3:"abc";', 'a:1:{s:5:"sizes";s:3:"abc";}'])
def test_metadata_from_serialized_rejects_bad_input(blob):
    with pytest.raises(ValueError):
        AttachmentMetadata.from_serialized(blob)


def test_author_full_name(converter, wxr, author):
    converter.convert(
        xml_string=wxr(authors=[author("ada", 1, "Ada", "Lovelace"), author("grace", 2, "Grace", ""), author("anon", 3)])
    )
    assert converter.get_author("ada").full_name == "Ada Lovelace"
    assert converter.get_author("grace").full_name == "Grace"
    assert converter.get_author("anon").full_name == ""
    assert converter.get_author("ada").id == 1
    assert converter.get_author("ada").email == "ada@example.com"


def test_set_intro_converts_markup(converter):
    post = Post()

    class Context:
        def html_to_text(self, html):
            return converter.html_converter(html)

    post.set_intro("<p><strong>Hi</strong></p>", Context())
    assert post.get_field("intro") == "**Hi**"
