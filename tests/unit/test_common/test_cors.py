"""
CORS Options Unit Tests
"""

import re

from kvdb.common.cors import build_cors_options, wildcard_to_regex


def test_any_origin():
    options = build_cors_options(["https://a.example.com", "*"])

    assert options["allow_origins"] == ["*"]
    assert "allow_origin_regex" not in options


def test_exact_origins():
    options = build_cors_options(["https://a.example.com", "http://localhost:3000"])

    assert options["allow_origins"] == ["https://a.example.com", "http://localhost:3000"]
    assert "allow_origin_regex" not in options
    assert options["allow_methods"] == ["GET", "POST", "PATCH", "DELETE"]


def test_wildcard_origin():
    options = build_cors_options(["https://*.example.org", "https://exact.com"])
    pattern = re.compile(options["allow_origin_regex"])

    assert options["allow_origins"] == ["https://exact.com"]
    assert pattern.fullmatch("https://app.example.org")
    assert not pattern.fullmatch("https://example.org.evil.com")
    assert not pattern.fullmatch("http://app.example.org")


def test_wildcard_escapes_dots():
    assert not re.fullmatch(wildcard_to_regex("https://*.example.org"), "https://appXexampleXorg")


def test_no_origins():
    options = build_cors_options([])

    assert options["allow_origins"] == []
