"""Drawn element registry and geometry checks.

Every block placed by the layout is recorded as a :class:`DrawnElement`.
The checks in this module only read that record: they never feed back into
layout, and exist so that output can be verified from geometry alone
("no two fields overlap", "nothing bleeds past the margins").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .geometry import Margins, Rect, Size, content_rect

# Blocks that legitimately collapse to nothing: an empty paragraph, a
# zero-height spacer.
COLLAPSIBLE_TYPES = ("paragraph", "spacer")


@dataclass(slots=True)
class DrawnElement:
    type: str
    page: int
    bounds: Rect
    content: Optional[str] = None


class DrawnElementRegistry:
    """Append-only list of drawn elements in placement order."""

    def __init__(self) -> None:
        self._elements: List[DrawnElement] = []

    def append(self, element: DrawnElement) -> None:
        self._elements.append(element)

    def __iter__(self) -> Iterator[DrawnElement]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, index: int) -> DrawnElement:
        return self._elements[index]

    def by_page(self, page: int) -> List[DrawnElement]:
        return [element for element in self._elements if element.page == page]

    def of_type(self, element_type: str) -> List[DrawnElement]:
        return [element for element in self._elements if element.type == element_type]

    def to_list(self) -> List[DrawnElement]:
        return list(self._elements)


@dataclass(slots=True)
class Overlap:
    first: DrawnElement
    second: DrawnElement
    overlap_area: float
    overlap_percentage: float


@dataclass(slots=True)
class BoundaryViolation:
    element: DrawnElement
    side: str
    overflow: float


@dataclass(slots=True)
class AlignmentIssue:
    """Elements whose left edges almost, but not exactly, line up."""

    page: int
    reference_x: float
    elements: List[DrawnElement] = field(default_factory=list)


def detect_overlaps(elements: Iterable[DrawnElement]) -> List[Overlap]:
    """Find pairs of elements on the same page whose bounds intersect.

    ``overlap_percentage`` is the intersection area relative to the smaller
    of the two elements (1.0 means the smaller one is fully covered).
    """
    overlaps: List[Overlap] = []
    for first, second in combinations(list(elements), 2):
        if first.page != second.page:
            continue
        region = first.bounds.intersection(second.bounds)
        if region is None:
            continue
        smaller = min(first.bounds.area, second.bounds.area)
        overlaps.append(
            Overlap(
                first=first,
                second=second,
                overlap_area=region.area,
                overlap_percentage=region.area / smaller if smaller > 0 else 0.0,
            )
        )
    return overlaps


def check_boundaries(
    elements: Iterable[DrawnElement], page_size: Size, margins: Margins
) -> List[BoundaryViolation]:
    """Report, per element and side, how far it extends past the content area."""
    area = content_rect(page_size, margins)
    violations: List[BoundaryViolation] = []
    for element in elements:
        bounds = element.bounds
        overflows = (
            ("left", area.left - bounds.left),
            ("right", bounds.right - area.right),
            ("top", bounds.top - area.top),
            ("bottom", area.bottom - bounds.bottom),
        )
        for side, overflow in overflows:
            if overflow > 0:
                violations.append(BoundaryViolation(element=element, side=side, overflow=overflow))
    return violations


def verify_alignment(elements: Iterable[DrawnElement], tolerance: float = 2.0) -> List[AlignmentIssue]:
    """Group elements by left edge and report near misses.

    Elements whose ``x`` lies within ``tolerance`` of another element's
    ``x`` on the same page without being equal are reported together.
    """
    issues: List[AlignmentIssue] = []
    by_page: Dict[int, List[DrawnElement]] = {}
    for element in elements:
        by_page.setdefault(element.page, []).append(element)

    for page, page_elements in sorted(by_page.items()):
        ordered = sorted(page_elements, key=lambda element: element.bounds.x)
        group: List[DrawnElement] = []
        for element in ordered:
            if group and element.bounds.x - group[0].bounds.x > tolerance:
                _flush_alignment_group(page, group, issues)
                group = []
            group.append(element)
        _flush_alignment_group(page, group, issues)
    return issues


def _flush_alignment_group(page: int, group: Sequence[DrawnElement], issues: List[AlignmentIssue]) -> None:
    if len({element.bounds.x for element in group}) > 1:
        issues.append(AlignmentIssue(page=page, reference_x=group[0].bounds.x, elements=list(group)))


def validate_dimensions(elements: Iterable[DrawnElement]) -> List[Tuple[DrawnElement, str]]:
    """Elements with a non-positive width or height, with the offending dimension."""
    problems: List[Tuple[DrawnElement, str]] = []
    for element in elements:
        if element.bounds.width <= 0:
            problems.append((element, "width"))
        if element.bounds.height <= 0:
            problems.append((element, "height"))
    return problems


def find_zero_area_elements(elements: Iterable[DrawnElement]) -> List[DrawnElement]:
    return [element for element in elements if element.bounds.area == 0]


def bounding_box(elements: Iterable[DrawnElement], page: Optional[int] = None) -> Optional[Rect]:
    """Union of the bounds of all elements, optionally restricted to one page."""
    box: Optional[Rect] = None
    for element in elements:
        if page is not None and element.page != page:
            continue
        box = element.bounds if box is None else box.union(element.bounds)
    return box


class LayoutValidator:
    """Runs the geometry checks over a finished layout."""

    def __init__(self, elements: Iterable[DrawnElement], page_size: Size, margins: Margins,
                 alignment_tolerance: float = 2.0):
        """
        Args:
            elements: Drawn elements of one render
            page_size: Page size the render used
            margins: Page margins the render used
            alignment_tolerance: Maximum x distance treated as a near miss
        """
        self.elements = list(elements)
        self.page_size = page_size
        self.margins = margins
        self.alignment_tolerance = alignment_tolerance
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self) -> tuple[bool, List[str], List[str]]:
        """
        Run every check.

        Overlaps between fields and non-positive dimensions are errors;
        other overlaps, margin overflows, alignment near misses and
        collapsed paragraphs or spacers (zero size) are warnings.

        Returns:
            Tuple (is_valid, errors, warnings)
        """
        self.errors.clear()
        self.warnings.clear()

        for overlap in detect_overlaps(self.elements):
            message = (
                f"{overlap.first.type} and {overlap.second.type} overlap on page "
                f"{overlap.first.page} ({overlap.overlap_percentage:.0%} of the smaller element)"
            )
            if overlap.first.type == "field" and overlap.second.type == "field":
                self.errors.append(message)
            else:
                self.warnings.append(message)

        for violation in check_boundaries(self.elements, self.page_size, self.margins):
            self.warnings.append(
                f"{violation.element.type} on page {violation.element.page} extends "
                f"{violation.overflow:.2f}pt past the {violation.side} margin"
            )

        for element, dimension in validate_dimensions(self.elements):
            size = getattr(element.bounds, dimension)
            if size == 0 and element.type in COLLAPSIBLE_TYPES:
                self.warnings.append(f"Empty {element.type} on page {element.page} (zero {dimension})")
            else:
                self.errors.append(
                    f"{element.type} on page {element.page} has non-positive {dimension}"
                )

        for issue in verify_alignment(self.elements, self.alignment_tolerance):
            positions = ", ".join(f"{element.bounds.x:.2f}" for element in issue.elements)
            self.warnings.append(f"Near miss alignment on page {issue.page}: x = {positions}")

        return not self.errors, self.errors.copy(), self.warnings.copy()

    def get_summary(self) -> Dict[str, object]:
        """Counts of everything the checks found."""
        pages = {element.page for element in self.elements}
        return {
            "elements": len(self.elements),
            "pages": len(pages),
            "overlaps": len(detect_overlaps(self.elements)),
            "boundary_violations": len(check_boundaries(self.elements, self.page_size, self.margins)),
            "alignment_issues": len(verify_alignment(self.elements, self.alignment_tolerance)),
            "zero_area": len(find_zero_area_elements(self.elements)),
            "bounding_box": bounding_box(self.elements),
        }
