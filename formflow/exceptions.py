"""Custom exceptions for formflow."""

from typing import Optional


class FormflowError(Exception):
    """Base exception for formflow errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class SchemaError(FormflowError):
    """Exception raised when a document description cannot be read."""

    pass


class LayoutError(FormflowError):
    """Exception raised during flow layout and pagination."""

    pass


class RenderingError(FormflowError):
    """Exception raised by a backend while drawing or finalizing output."""

    pass


class StyleError(FormflowError):
    """Exception raised during style resolution."""

    pass


class GeometryError(FormflowError):
    """Exception raised during geometry calculations."""

    pass
