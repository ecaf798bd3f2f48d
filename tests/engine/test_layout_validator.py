"""Tests for the drawn element registry and geometry checks."""

import pytest

from formflow.engine.geometry import Margins, Rect, Size
from formflow.engine.layout_validator import (
    DrawnElement,
    DrawnElementRegistry,
    LayoutValidator,
    bounding_box,
    check_boundaries,
    detect_overlaps,
    find_zero_area_elements,
    validate_dimensions,
    verify_alignment,
)

PAGE = Size(612, 792)
MARGINS = Margins.uniform(72)


def _element(element_type="field", page=1, x=100, y=100, width=100, height=20):
    return DrawnElement(type=element_type, page=page, bounds=Rect(x, y, width, height))


class TestRegistry:
    """Test suite for DrawnElementRegistry."""

    def test_append_and_filter(self):
        registry = DrawnElementRegistry()
        heading = _element("heading", page=1)
        field = _element("field", page=2)
        registry.append(heading)
        registry.append(field)

        assert len(registry) == 2
        assert list(registry) == [heading, field]
        assert registry.by_page(2) == [field]
        assert registry.of_type("heading") == [heading]

    def test_to_list_is_a_copy(self):
        registry = DrawnElementRegistry()
        registry.append(_element())

        snapshot = registry.to_list()
        snapshot.clear()

        assert len(registry) == 1


class TestDetectOverlaps:
    """Test suite for detect_overlaps."""

    def test_identical_boxes(self):
        overlaps = detect_overlaps([_element(), _element()])

        assert len(overlaps) == 1
        assert overlaps[0].overlap_area == 2000
        assert overlaps[0].overlap_percentage == 1.0

    def test_percentage_of_smaller_element(self):
        large = _element(x=0, y=0, width=100, height=100)
        small = _element(x=90, y=0, width=20, height=10)

        overlap = detect_overlaps([large, small])[0]

        assert overlap.overlap_area == 100
        assert overlap.overlap_percentage == pytest.approx(0.5)

    def test_different_pages_never_overlap(self):
        assert detect_overlaps([_element(page=1), _element(page=2)]) == []

    def test_touching_boxes_do_not_overlap(self):
        assert detect_overlaps([_element(y=100), _element(y=120)]) == []

    def test_zero_area_element(self):
        overlaps = detect_overlaps([_element(width=0), _element()])

        assert overlaps == []


class TestCheckBoundaries:
    """Test suite for check_boundaries."""

    def test_inside_content_area(self):
        assert check_boundaries([_element()], PAGE, MARGINS) == []

    def test_overflow_per_side(self):
        element = _element(x=60, y=700, width=500, height=40)

        violations = {v.side: v.overflow for v in check_boundaries([element], PAGE, MARGINS)}

        assert violations == {"left": 12, "right": 20, "top": 20}

    def test_bottom_overflow(self):
        violations = check_boundaries([_element(y=50)], PAGE, MARGINS)

        assert [(v.side, v.overflow) for v in violations] == [("bottom", 22)]


class TestOtherChecks:
    """Alignment, dimensions and bounding boxes."""

    def test_near_miss_alignment(self):
        issues = verify_alignment([_element(x=72), _element(x=73, y=300)], tolerance=2)

        assert len(issues) == 1
        assert issues[0].reference_x == 72

    def test_exact_alignment_is_fine(self):
        assert verify_alignment([_element(x=72), _element(x=72, y=300)]) == []

    def test_far_apart_is_fine(self):
        assert verify_alignment([_element(x=72), _element(x=200)]) == []

    def test_validate_dimensions(self):
        problems = validate_dimensions([_element(width=0), _element(height=-5)])

        assert [dimension for _, dimension in problems] == ["width", "height"]

    def test_zero_area(self):
        flat = _element(height=0)

        assert find_zero_area_elements([flat, _element()]) == [flat]

    def test_bounding_box(self):
        elements = [_element(x=100, y=100), _element(x=300, y=400, page=2)]

        assert bounding_box(elements) == Rect(100, 100, 300, 320)
        assert bounding_box(elements, page=2) == Rect(300, 400, 100, 20)
        assert bounding_box([]) is None


class TestLayoutValidator:
    """Test suite for LayoutValidator."""

    def test_clean_layout(self):
        validator = LayoutValidator([_element(y=100), _element(y=200)], PAGE, MARGINS)

        is_valid, errors, warnings = validator.validate()

        assert is_valid
        assert errors == []
        assert warnings == []

    def test_field_overlap_is_error(self):
        validator = LayoutValidator([_element(), _element()], PAGE, MARGINS)

        is_valid, errors, _ = validator.validate()

        assert not is_valid
        assert "overlap" in errors[0]

    def test_other_overlap_is_warning(self):
        validator = LayoutValidator([_element("heading"), _element()], PAGE, MARGINS)

        is_valid, errors, warnings = validator.validate()

        assert is_valid
        assert errors == []
        assert any("overlap" in warning for warning in warnings)

    def test_margin_overflow_is_warning(self):
        validator = LayoutValidator([_element(y=10)], PAGE, MARGINS)

        is_valid, _, warnings = validator.validate()

        assert is_valid
        assert "bottom margin" in warnings[0]

    @pytest.mark.parametrize("element_type", ["paragraph", "spacer"])
    def test_collapsed_block_is_warning(self, element_type):
        validator = LayoutValidator([_element(element_type, height=0)], PAGE, MARGINS)

        is_valid, errors, warnings = validator.validate()

        assert is_valid
        assert errors == []
        assert f"Empty {element_type} on page 1 (zero height)" in warnings

    def test_negative_height_is_error(self):
        validator = LayoutValidator([_element("spacer", height=-4)], PAGE, MARGINS)

        is_valid, errors, _ = validator.validate()

        assert not is_valid
        assert "spacer on page 1 has non-positive height" in errors

    def test_zero_height_field_is_error(self):
        validator = LayoutValidator([_element(height=0)], PAGE, MARGINS)

        is_valid, errors, _ = validator.validate()

        assert not is_valid
        assert "field on page 1 has non-positive height" in errors

    def test_summary(self):
        validator = LayoutValidator([_element(), _element(), _element(page=2, x=0)], PAGE, MARGINS)

        summary = validator.get_summary()

        assert summary["elements"] == 3
        assert summary["pages"] == 2
        assert summary["overlaps"] == 1
        assert summary["boundary_violations"] == 1
