"""Tests for description sanitizing."""

from __future__ import annotations

import html

from gamescout.utils.sanitize import sanitize, to_telegram_html


def test_sanitize_keeps_allowed_markup():
    html = '<p>Hello <b>brave</b> <a href="https://example.com" target="_blank" rel="noopener">world</a></p>'
    cleaned = sanitize(html)

    assert "<p>" in cleaned
    assert "<b>brave</b>" in cleaned
    assert 'href="https://example.com"' in cleaned
    assert 'target="_blank"' in cleaned
    assert 'rel="noopener"' in cleaned


def test_sanitize_strips_disallowed_tags_and_attributes():
    html = '<div onclick="evil()"><script>alert(1)</script><p style="color:red">Text</p><img src="x"></div>'
    cleaned = sanitize(html)

    assert "script" not in cleaned
    assert "alert" not in cleaned
    assert "onclick" not in cleaned
    assert "style" not in cleaned
    assert "<img" not in cleaned
    assert "<div" not in cleaned
    assert "<p>Text</p>" in cleaned


def test_sanitize_handles_empty_input():
    assert sanitize(None) == ""
    assert sanitize("") == ""


def test_to_telegram_html_flattens_block_tags():
    html = "<p>First</p><p>Second<br>line</p><ul><li>One</li><li>Two</li></ul>"
    rendered = to_telegram_html(html)

    assert "<p>" not in rendered
    assert "<li>" not in rendered
    assert "<br" not in rendered
    assert "First\n\nSecond\nline" in rendered
    assert "• One" in rendered
    assert "• Two" in rendered


def test_to_telegram_html_keeps_inline_formatting():
    rendered = to_telegram_html('<p><strong>Bold</strong> and <a href="https://x.example" target="_blank">link</a></p>')

    assert "<strong>Bold</strong>" in rendered
    assert '<a href="https://x.example">link</a>' in rendered


def test_to_telegram_html_truncates_to_plain_text():
    html_text = "<p>" + ("word &amp; " * 100) + "</p>"
    rendered = to_telegram_html(html_text, limit=50)

    assert rendered.endswith("...")
    assert "<" not in rendered
    assert "&amp;" in rendered
    assert len(html.unescape(rendered)) <= 50
