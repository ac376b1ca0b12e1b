from __future__ import annotations

import logging

import pytest

from pdf_handouts.styles import (
    FOOTER_DEFAULT,
    HEADER_DEFAULT,
    StyleSpec,
    parse_font_spec,
    parse_hex_color,
    parse_size,
)


def test_parse_size_only() -> None:
    spec = parse_font_spec("14pt")
    assert spec.size == 14.0
    assert not spec.bold
    assert not spec.italic
    assert spec.family is None
    assert spec.color is None


def test_parse_size_without_unit_and_fraction() -> None:
    assert parse_font_spec("14").size == 14.0
    assert parse_font_spec("10.5pt").size == 10.5


def test_parse_bold_and_size() -> None:
    spec = parse_font_spec("bold 14pt")
    assert spec.bold
    assert not spec.italic
    assert spec.size == 14.0


def test_parse_full_spec() -> None:
    spec = parse_font_spec("bold italic 16pt Times_New_Roman #ff0000")
    assert spec.bold
    assert spec.italic
    assert spec.size == 16.0
    assert spec.family == "Times New Roman"
    assert spec.color == (1.0, 0.0, 0.0)


def test_parse_is_case_insensitive() -> None:
    spec = parse_font_spec("BOLD Italic 12PT")
    assert spec.bold
    assert spec.italic
    assert spec.size == 12.0


def test_parse_short_hex_colour() -> None:
    spec = parse_font_spec("#f00")
    assert spec.color == (1.0, 0.0, 0.0)


def test_parse_grey_colour() -> None:
    r, g, b = parse_font_spec("#333333").color
    assert r == pytest.approx(0.2, abs=0.01)
    assert r == g == b


def test_invalid_colour_is_ignored_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="pdf_handouts.styles"):
        spec = parse_font_spec("12pt #zzzzzz")
    assert spec.color is None
    assert spec.size == 12.0
    assert "Ignoring invalid colour" in caplog.text


def test_empty_spec_is_plain() -> None:
    assert parse_font_spec("") == StyleSpec()


@pytest.mark.parametrize(
    "token, expected",
    [("#ffffff", (1.0, 1.0, 1.0)), ("#000", (0.0, 0.0, 0.0)), ("#12345", None), ("#gg0000", None)],
)
def test_parse_hex_color(token: str, expected: tuple | None) -> None:
    assert parse_hex_color(token) == expected


def test_parse_size_rejects_words_and_zero() -> None:
    assert parse_size("Garamond") is None
    assert parse_size("0pt") is None


def test_inherit_fills_unset_fields_only() -> None:
    parent = StyleSpec(size=14.0, family="Vera", color=(0.0, 0.0, 1.0))
    child = StyleSpec(italic=True, size=10.0)
    resolved = child.inherit(parent)
    assert resolved == StyleSpec(italic=True, size=10.0, family="Vera", color=(0.0, 0.0, 1.0))


def test_merged_keeps_parent_flags() -> None:
    base = StyleSpec(bold=True, size=12.0)
    resolved = base.merged(StyleSpec(italic=True))
    assert resolved.bold
    assert resolved.italic
    assert resolved.size == 12.0
    assert base.merged(None) is base


def test_role_defaults() -> None:
    assert HEADER_DEFAULT.size == 24.0
    assert FOOTER_DEFAULT.size == 14.0
    assert HEADER_DEFAULT.color == FOOTER_DEFAULT.color == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("color", [(255, 0, 0), (0.5, -0.1, 0.0), (1.0, 1.0), (0.0, 0.0, 0.0, 1.0)])
def test_colour_outside_unit_interval_is_rejected(color: tuple) -> None:
    with pytest.raises(ValueError):
        StyleSpec(color=color)


def test_integer_colour_channels_become_floats() -> None:
    spec = StyleSpec(color=(1, 0, 0))
    assert spec.color == (1.0, 0.0, 0.0)
    assert all(isinstance(channel, float) for channel in spec.color)
