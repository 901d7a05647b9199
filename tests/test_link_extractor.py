# File: tests/test_link_extractor.py
import pytest

from site_mirror.crawler.link_extractor import LinkExtractor, site_prefix

SEED = "http://example.test/"


def links_in(body, start_url, is_known=None):
    return LinkExtractor(start_url).extract(body, is_known)


def test_same_site_scenario():
    body = b'<a href="/about.html">About</a><a href="http://other.test/x">X</a>'
    assert links_in(body, SEED) == ["http://example.test/about.html"]


def test_absolute_same_site_is_normalized():
    body = b'<a href="http://example.test/blog">Blog</a><a href="/blog">Blog again</a>'
    assert links_in(body, SEED) == ["http://example.test/blog"]


@pytest.mark.parametrize(
    "href",
    [
        "#popup:newsletter",
        "/x?style=font-family:serif",
        "/it's",
        "http://other.test/page",
        "http://example.test.evil/page",
        "https://example.test/page",
        "mailto:me@example.test",
        "#top",
        "relative/page.html",
        "//cdn.example.test/lib.js",
    ],
)
def test_rejected_values(href):
    body = f'<a href="{href}">x</a>'.encode()
    assert links_in(body, SEED) == []


def test_only_exact_pattern_is_seen():
    body = b"<a class=\"nav\" href=\"/a\">A</a><A HREF=\"/b\">B</A><a href='/c'>C</a>"
    assert links_in(body, SEED) == []


def test_known_urls_are_skipped():
    body = b'<a href="/a">A</a><a href="/b">B</a>'
    known = {"http://example.test/a"}
    assert links_in(body, SEED, known.__contains__) == ["http://example.test/b"]


def test_order_and_dedup():
    body = b'<a href="/b">B</a><a href="/a">A</a><a href="/b">B</a>'
    assert links_in(body, SEED) == ["http://example.test/b", "http://example.test/a"]


def test_root_link_maps_to_slashless_seed():
    extractor = LinkExtractor("http://example.test")
    assert extractor.extract(b'<a href="/">Home</a>') == ["http://example.test"]
    assert extractor.extract(b'<a href="http://example.test">Home</a>') == ["http://example.test"]


def test_seed_with_path_prefix():
    extractor = LinkExtractor("http://example.test/docs/")
    assert extractor.prefix == "http://example.test/docs"
    assert extractor.extract(b'<a href="http://example.test/docs/intro">I</a>') == [
        "http://example.test/docs/intro"
    ]
    assert extractor.extract(b'<a href="http://example.test/blog">B</a>') == []


def test_site_prefix():
    assert site_prefix("http://example.test/") == "http://example.test"
    assert site_prefix("http://example.test") == "http://example.test"


def test_non_utf8_body():
    body = b'\xff\xfe<a href="/ok">ok</a>'
    assert links_in(body, SEED) == ["http://example.test/ok"]
