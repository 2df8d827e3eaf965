# File: tests/test_urls.py
import pytest

from style_scraper.utils.urls import hostname_of, is_http_url, resolve_url

BASE = "https://example.com/shop/index.html"


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/img/logo.png",
        "http://cdn.other.net/a/b.jpg?x=1",
        "https://example.com/",
    ],
)
def test_absolute_urls_are_returned_unchanged(url):
    assert resolve_url(BASE, url) == url


def test_relative_paths_resolve_against_base_origin():
    assert resolve_url(BASE, "/img/logo.png") == "https://example.com/img/logo.png"
    assert resolve_url(BASE, "img/a.png") == "https://example.com/shop/img/a.png"
    assert resolve_url(BASE, "../b.png") == "https://example.com/b.png"


def test_protocol_relative_uses_base_scheme():
    assert resolve_url(BASE, "//cdn.other.net/x.png") == "https://cdn.other.net/x.png"
    assert resolve_url("http://example.com/", "//cdn.other.net/x.png") == "http://cdn.other.net/x.png"


def test_data_uri_depends_on_call_site():
    data = "data:image/png;base64,iVBORw0KGgo="
    assert resolve_url(BASE, data) == ""
    assert resolve_url(BASE, data, allow_data=True) == data


@pytest.mark.parametrize("candidate", ["", "   ", None])
def test_empty_input_yields_empty_string(candidate):
    assert resolve_url(BASE, candidate) == ""


@pytest.mark.parametrize(
    "base, candidate",
    [
        (BASE, "http://[::1"),
        (BASE, "javascript:void(0)"),
        (BASE, "mailto:team@example.com"),
        ("not a url", "/img/a.png"),
        ("", "img/a.png"),
    ],
)
def test_malformed_input_never_raises(base, candidate):
    assert resolve_url(base, candidate) == ""


def test_hostname_of_strips_www():
    assert hostname_of("https://WWW.Example.com/a") == "example.com"
    assert hostname_of("https://cdn.example.com/a") == "cdn.example.com"
    assert hostname_of("") == ""


def test_is_http_url():
    assert is_http_url("https://example.com")
    assert not is_http_url("ftp://example.com/file")
    assert not is_http_url("/relative/path")
