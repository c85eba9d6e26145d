"""
Centralized exception classes for the treemarshal library.

All treemarshal-specific exceptions inherit from TreeMarshalError for easy catching.
"""


class TreeMarshalError(Exception):
    """Base exception for all treemarshal errors."""


class ConversionError(TreeMarshalError):
    """Raised when a document or an object cannot be converted."""


class TypeResolutionError(ConversionError):
    """Raised when an element name cannot be resolved to a type."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"Cannot resolve type for element name '{name}'")
        self.name = name


class UnresolvedReferenceError(ConversionError):
    """Raised when a document references an object id that was never defined."""


class ConverterNotFoundError(TreeMarshalError):
    """Raised when no converter claims a type that is being converted."""


class MalformedConverterDefinitionError(TreeMarshalError):
    """Raised when a discovered converter class cannot be constructed by the engine."""


class ConverterInstantiationError(TreeMarshalError):
    """Raised when constructing a discovered converter fails."""
