"""Unit tests for color normalization."""

from __future__ import annotations

import pytest

from layoutplanner.domain.colors import (
    colors_match,
    is_black_stroke,
    is_paint_server,
    to_canonical_hex,
)


class TestToCanonicalHex:
    """Tests for to_canonical_hex."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("#ABC", "#aabbcc"),
            ("#abcd", "#aabbcc"),
            ("#008181", "#008181"),
            ("#00818180", "#008181"),
            ("  #FFFFFF ", "#ffffff"),
            ("rgb(0, 129, 129)", "#008181"),
            ("rgba(255,0,0,0.5)", "#ff0000"),
            ("black", "#000000"),
            ("WHITE", "#ffffff"),
        ],
    )
    def test_supported_notations(self, value: str, expected: str) -> None:
        assert to_canonical_hex(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "none", "url(#gradient)", "red", "#12", "rgb(300, 0, 0)", None, 42],
    )
    def test_unsupported_values(self, value: object) -> None:
        assert to_canonical_hex(value) is None


class TestColorsMatch:
    """Tests for colors_match."""

    def test_different_notations_match(self) -> None:
        assert colors_match("#0a0", "rgb(0, 170, 0)")

    def test_case_insensitive(self) -> None:
        assert colors_match("#ABCDEF", "#abcdef")

    def test_named_colors_without_canonical_form(self) -> None:
        assert colors_match("Red", "red")

    def test_empty_never_matches(self) -> None:
        assert not colors_match("", "")
        assert not colors_match(None, "#000")

    def test_different_colors(self) -> None:
        assert not colors_match("#000000", "#000001")


class TestIsBlackStroke:
    """Tests for is_black_stroke."""

    @pytest.mark.parametrize(
        "value",
        ["#000", "#000000", "black", "BLACK", "rgb(0,0,0)", "rgba(0, 0, 0, 1)", "#000f"],
    )
    def test_black_values(self, value: str) -> None:
        assert is_black_stroke(value)

    @pytest.mark.parametrize(
        "value",
        ["rgba(0,0,0,0)", "#0000", "#00000000", "#010101", "none", "", None, "url(#a)"],
    )
    def test_not_black(self, value: object) -> None:
        assert not is_black_stroke(value)


class TestIsPaintServer:
    """Tests for is_paint_server."""

    def test_url_reference(self) -> None:
        assert is_paint_server("url(#pattern-1)")
        assert is_paint_server("  URL(#g) ")

    def test_plain_color(self) -> None:
        assert not is_paint_server("#ffffff")
