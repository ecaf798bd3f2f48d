"""
Pytest configuration for formflow
"""

import pytest
import logging
import sys
from pathlib import Path

from formflow.backends.html_backend import HtmlBackend
from formflow.engine.page_engine import LayoutContext
from formflow.style import default_style


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    # Clear all existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Set up console-only logging for tests
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests

    formatter = logging.Formatter(
        '%(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    # Cleanup after test
    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def style():
    """Built-in default style (letter, 72pt margins)."""
    return default_style()


@pytest.fixture
def html_backend():
    return HtmlBackend()


@pytest.fixture
def ctx(html_backend, style):
    """Fresh single-page layout context drawing into an HTML backend."""
    return LayoutContext.initialize(html_backend, style)


@pytest.fixture
def sample_document():
    """Small document touching every block type, as decoded JSON."""
    return {
        "form": {"title": "Equipment Request", "version": "2.1", "author": "Facilities"},
        "content": [
            {"type": "heading", "level": 1, "text": "Equipment Request"},
            {"type": "paragraph", "text": "Fill in one row per item. Requests are reviewed weekly."},
            {"type": "admonition", "variant": "warning", "title": "Deadline",
             "text": "Requests submitted after Friday are processed the following week."},
            {"type": "rule"},
            {"type": "field", "label": "Requester", "fieldType": "text", "fieldName": "requester",
             "required": True},
            {"type": "field", "label": "Department", "fieldType": "dropdown", "fieldName": "department",
             "options": ["Sales", "Support", {"value": "eng", "label": "Engineering"}], "default": "Support"},
            {"type": "spacer", "height": 10},
            {
                "type": "table",
                "label": "Items",
                "columns": [
                    {"label": "Item", "width": 200},
                    {"label": "Qty", "width": 60, "cellType": "text", "fieldSuffix": "qty"},
                    {"label": "Urgent", "width": 60, "cellType": "checkbox", "fieldSuffix": "urgent"},
                ],
                "rowCount": 3,
                "fieldPrefix": "item",
            },
            {"type": "field", "label": "I agree to the terms", "fieldType": "checkbox", "fieldName": "agree"},
        ],
    }
