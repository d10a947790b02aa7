"""Shared fixtures for pagekeep tests."""

from datetime import datetime, timezone

import pytest

SENTENCE = (
    "Community gardens give crowded neighbourhoods shade, fresh food and a quiet place to meet, "
    "and they slowly improve the air for everyone who lives on the surrounding streets. "
)

FIXED_NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


def article_page(paragraphs: int = 5) -> str:
    """A typical blog article with navigation, scripts and a footer."""
    body = "".join(f"<p>{SENTENCE * 3}</p>" for _ in range(paragraphs))
    return (
        "<!DOCTYPE html>"
        '<html lang="en">'
        "<head>"
        "<title>Why Gardens Matter | Green Streets</title>"
        '<meta name="description" content="A short look at urban gardens.">'
        '<meta property="og:title" content="Why Gardens Matter">'
        '<meta property="og:site_name" content="Green Streets">'
        '<meta property="article:published_time" content="2024-03-05T10:00:00Z">'
        "<script>window.tracker = {page: 'article'};</script>"
        "<style>body { color: red; }</style>"
        "</head>"
        "<body>"
        '<nav class="menu"><a href="/">Home</a> <a href="/about">About</a></nav>'
        f"<article><h1>Why Gardens Matter</h1>{body}</article>"
        "<!-- rendered by the footer partial -->"
        "<footer>Copyright Green Streets</footer>"
        "</body>"
        "</html>"
    )


def link_page() -> str:
    """A navigation-heavy page with no article-like paragraphs."""
    links = "".join(f'<li><a href="/p/{i}">Product {i}</a></li>' for i in range(20))
    return (
        "<html><head><title>Shop</title></head>"
        f"<body><header>Shop header</header><ul>{links}</ul><footer>Shop footer</footer></body>"
        "</html>"
    )


@pytest.fixture
def article_html() -> str:
    return article_page()


@pytest.fixture
def link_html() -> str:
    return link_page()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sentence() -> str:
    return SENTENCE


@pytest.fixture
def make_article():
    return article_page
