# File: tests/test_link_extractor.py
import pytest
from speed_scout.crawler.link_extractor import extract_links
from speed_scout.utils import normalize_url


def anchors(*hrefs: str) -> str:
    return "<html><body>" + "".join(f'<a href="{h}">x</a>' for h in hrefs) + "</body></html>"


def test_only_internal_relative_links_are_kept():
    html = anchors("/a", "#top", "https://other.com/x", "/")
    links = list(extract_links(html, "https://example.com/", "https://example.com/"))
    assert links == ["https://example.com/a"]


def test_result_is_lazy():
    gen = extract_links(anchors("/a"), "https://example.com/", "https://example.com/")
    assert iter(gen) is gen


@pytest.mark.parametrize(
    "href",
    [
        "",
        "   ",
        "#",
        "#section",
        "/",
        "http://example.com/page",
        "https://example.com/page",
        "HTTPS://example.com/page",
        "mailto:team@example.com",
        "javascript:void(0)",
        "tel:+100000",
        "//cdn.example.com/lib.js",
    ],
)
def test_skipped_hrefs(href):
    assert list(extract_links(anchors(href), "https://example.com/blog", "https://example.com/")) == []


def test_root_relative_resolves_against_seed_origin():
    links = list(extract_links(anchors("/about"), "https://example.com:8443/deep/page", "https://example.com:8443/"))
    assert links == ["https://example.com:8443/about"]


def test_word_href_is_sibling_of_current_page():
    links = list(extract_links(anchors("post", "draft/"), "https://example.com/blog/", "https://example.com/"))
    assert links == ["https://example.com/blog/post", "https://example.com/blog/draft"]


def test_fragments_are_dropped_from_results():
    links = list(extract_links(anchors("/a#b", "page#c", "/#top"), "https://example.com/", "https://example.com/"))
    assert links == ["https://example.com/a", "https://example.com/page"]
    assert all("#" not in link for link in links)


def test_dot_relative_links_stay_on_origin():
    html = anchors("./x", "../y", "?page=2")
    links = list(extract_links(html, "https://example.com/docs/guide", "https://example.com/"))
    assert links == [
        "https://example.com/docs/x",
        "https://example.com/y",
        "https://example.com/docs/guide?page=2",
    ]


def test_no_deduplication():
    links = list(extract_links(anchors("/a", "/a", "/a/"), "https://example.com/", "https://example.com/"))
    assert links == ["https://example.com/a"] * 3


def test_anchor_without_href_is_ignored():
    html = '<a name="top">x</a><a href="/ok">ok</a>'
    assert list(extract_links(html, "https://example.com/", "https://example.com/")) == ["https://example.com/ok"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("HTTPS://Example.COM/", "https://example.com/"),
        ("https://example.com", "https://example.com/"),
        ("https://example.com:443/a/", "https://example.com/a"),
        ("http://example.com:8080/a#frag", "http://example.com:8080/a"),
        ("https://example.com/a/?q=1", "https://example.com/a?q=1"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected
