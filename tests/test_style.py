"""Tests for the resolved style and its overrides."""

import pytest

from formflow.engine.geometry import Margins, Size
from formflow.exceptions import GeometryError, StyleError
from formflow.style import ResolvedStyle, Spacing, default_style


class TestDefaultStyle:
    """Test suite for the built-in style."""

    def test_page(self, style):
        assert style.page_size == Size(612, 792)
        assert style.margins == Margins.uniform(72)

    @pytest.mark.parametrize("block_type,expected", [
        ("heading", Spacing(16, 8)),
        ("paragraph", Spacing(0, 12)),
        ("admonition", Spacing(12, 12)),
        ("rule", Spacing(10, 10)),
        ("table", Spacing(12, 12)),
        ("spacer", Spacing(0, 0)),
        ("field", Spacing(8, 12)),
        ("unknown", Spacing(0, 0)),
    ])
    def test_flow_spacing(self, style, block_type, expected):
        assert style.spacing_for(block_type) == expected

    def test_heading_levels_clamped(self, style):
        assert style.heading(1).font_size == 20
        assert style.heading(0) is style.heading(1)
        assert style.heading(12) is style.heading(6)

    def test_unknown_admonition_variant(self, style, caplog):
        assert style.admonition("shout") is style.admonition("note")
        assert "shout" in caplog.text

    def test_field_style_fallback(self, style):
        assert style.field_style("slider") is style.fields["text"]
        assert style.field_style("signature").height == 50


class TestFromDict:
    """Test suite for ResolvedStyle.from_dict."""

    def test_no_overrides(self):
        assert ResolvedStyle.from_dict(None) == default_style()

    def test_nested_override(self):
        style = ResolvedStyle.from_dict({
            "page": {"size": "a4", "margins": {"top": 50}},
            "paragraph": {"font_size": 10},
        })

        assert style.page_size.width == pytest.approx(595.28)
        assert style.margins == Margins(top=50, bottom=72, left=72, right=72)
        assert style.paragraph.font_size == 10.0
        assert style.paragraph.line_height == 1.5

    def test_heading_keys_from_json(self):
        style = ResolvedStyle.from_dict({"headings": {"1": {"font_size": 24}}})

        assert style.heading(1).font_size == 24.0
        assert style.heading(1).font_family == "Helvetica-Bold"

    def test_spacing_override(self):
        style = ResolvedStyle.from_dict({"spacing": {"paragraph": {"bottom": 6}}})

        assert style.spacing_for("paragraph") == Spacing(0, 6)

    def test_defaults_untouched(self):
        ResolvedStyle.from_dict({"rule": {"thickness": 4}})

        assert default_style().rule.thickness == 1.0

    @pytest.mark.parametrize("overrides", [
        {"colour": "red"},
        {"paragraph": {"weight": 3}},
        {"paragraph": "big"},
        {"paragraph": {"font_size": "large"}},
        {"headings": {"one": {"font_size": 3}}},
        {"admonitions": {"custom": {"padding": 3}}},
    ])
    def test_invalid_overrides(self, overrides):
        with pytest.raises(StyleError):
            ResolvedStyle.from_dict(overrides)

    def test_unknown_page_size(self):
        with pytest.raises(GeometryError):
            ResolvedStyle.from_dict({"page": {"size": "folio"}})
