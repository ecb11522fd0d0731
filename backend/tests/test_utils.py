"""
Tests for image URL and datetime helpers
"""
from datetime import date, datetime

import pytest

from reflect.services.journal_service import html_to_preview
from reflect.utils.datetime_utils import day_bounds, period_start, utc_now
from reflect.utils.images import is_allowed_image_url


@pytest.mark.parametrize("url,allowed", [
    ("https://cdn.pixabay.com/photo/2020/a.jpg", True),
    ("https://example.com/a.png", True),
    ("http://example.com/a.png", False),
    ("ftp://example.com/a.png", False),
    ("not a url", False),
    ("", False),
    (None, False),
])
def test_default_pattern_allows_any_https_host(url, allowed):
    assert is_allowed_image_url(url) is allowed


def test_single_label_wildcard():
    patterns = ["https://*.pixabay.com"]
    assert is_allowed_image_url("https://cdn.pixabay.com/a.jpg", patterns)
    assert not is_allowed_image_url("https://a.b.pixabay.com/a.jpg", patterns)
    assert not is_allowed_image_url("https://pixabay.com/a.jpg", patterns)


def test_multi_label_wildcard_and_scheme():
    patterns = ["https://**.example.org", "http://localhost"]
    assert is_allowed_image_url("https://a.b.example.org/x.jpg", patterns)
    assert is_allowed_image_url("http://localhost:8000/x.jpg", patterns)
    assert not is_allowed_image_url("https://localhost/x.jpg", patterns)
    assert not is_allowed_image_url("https://example.org.evil.com/x.jpg", patterns)


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None


def test_day_bounds():
    start, end = day_bounds(date(2025, 2, 28))
    assert start == datetime(2025, 2, 28)
    assert end == datetime(2025, 3, 1)


def test_period_start_counts_today():
    assert period_start(1, datetime(2025, 1, 10, 15, 30)) == datetime(2025, 1, 10)
    assert period_start(7, datetime(2025, 1, 10, 15, 30)) == datetime(2025, 1, 4)


def test_html_to_preview():
    assert html_to_preview(None) == ""
    assert html_to_preview("<h1>Title</h1><p>Fish &amp; chips</p>") == "Title Fish & chips"
    long_text = "<p>" + "word " * 100 + "</p>"
    preview = html_to_preview(long_text)
    assert preview.endswith("...")
    assert len(preview) <= 153
