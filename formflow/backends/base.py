"""Drawing primitive protocol implemented by every output backend.

The layout engine decides where things go and how large they are. A backend
only turns those decisions into marks: text runs, rectangles, lines and
interactive fields. Coordinates are PDF points with the origin at the
bottom-left of the page; ``y`` of a text run is its baseline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from ..models import FieldOption
from ..style import FieldStyle


@dataclass(frozen=True)
class DocumentInfo:
    """Metadata handed to :meth:`Backend.finalize`."""

    title: str = "Document"
    author: Optional[str] = None
    version: Optional[str] = None


class Backend(ABC):
    """Abstract output backend.

    A backend instance belongs to exactly one render. Page handles returned
    by :meth:`new_page` are opaque to the engine and are only passed back
    into the drawing calls.
    """

    name: str = "abstract"

    @abstractmethod
    def new_page(self, width: float, height: float) -> Any:
        """Append a page and return its handle."""

    @abstractmethod
    def draw_text(
        self,
        page: Any,
        text: str,
        x: float,
        y: float,
        *,
        font_family: str,
        font_size: float,
        color: str,
    ) -> None:
        ...

    @abstractmethod
    def draw_rectangle(
        self,
        page: Any,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill_color: Optional[str] = None,
        border_color: Optional[str] = None,
        border_width: float = 0.0,
    ) -> None:
        ...

    @abstractmethod
    def draw_line(
        self,
        page: Any,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        *,
        color: str,
        thickness: float,
    ) -> None:
        ...

    @abstractmethod
    def add_text_field(
        self,
        page: Any,
        name: str,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        style: FieldStyle,
        font_size: float,
        value: str = "",
        multiline: bool = False,
        max_length: Optional[int] = None,
        read_only: bool = False,
        border_color: Optional[str] = None,
        border_width: Optional[float] = None,
        placeholder: Optional[str] = None,
    ) -> None:
        ...

    @abstractmethod
    def add_dropdown(
        self,
        page: Any,
        name: str,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        style: FieldStyle,
        font_size: float,
        options: Sequence[FieldOption],
        selected: Optional[FieldOption] = None,
        read_only: bool = False,
        draw_border: bool = False,
    ) -> None:
        """Add a dropdown.

        With ``draw_border`` the widget is created borderless and its border
        is drawn as a separate rectangle.
        """

    @abstractmethod
    def add_checkbox(
        self,
        page: Any,
        name: str,
        x: float,
        y: float,
        size: float,
        *,
        style: FieldStyle,
        checked: bool = False,
        read_only: bool = False,
    ) -> None:
        ...

    @abstractmethod
    def add_radio(
        self,
        page: Any,
        group: str,
        value: str,
        x: float,
        y: float,
        size: float,
        *,
        style: FieldStyle,
        selected: bool = False,
        read_only: bool = False,
    ) -> None:
        """Add one button of the radio group ``group``."""

    @abstractmethod
    def text_width(self, text: str, font_family: str, font_size: float) -> float:
        """Rendered width of ``text`` used for alignment of single runs."""

    @abstractmethod
    def finalize(self, info: DocumentInfo) -> Union[bytes, str]:
        """Serialize all pages and return the document."""
