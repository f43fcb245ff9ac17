"""
Custom exceptions for PDF Builder.

This module defines all custom exceptions used throughout the library.
Load file and configuration errors are fatal to a build run; document
errors are recovered per document and recorded in the build log.
"""


class PDFBuilderException(Exception):
    """Base exception for all PDF Builder errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF builder error occurred."


class LoadFileError(PDFBuilderException):
    """Raised when a load file is missing, unreadable or malformed."""

    @property
    def default_message(self) -> str:
        return "Unable to import the load file."


class UnsupportedLoadFileError(LoadFileError):
    """Raised when the load file extension is not a supported format."""

    @property
    def default_message(self) -> str:
        return "Unsupported file type."


class ConfigurationError(PDFBuilderException):
    """Raised when build settings such as the parallelism limit are invalid."""

    @property
    def default_message(self) -> str:
        return "Invalid build configuration."


class DocumentBuildError(PDFBuilderException):
    """Raised when a single document cannot be converted to PDF."""

    @property
    def default_message(self) -> str:
        return "Failed to build PDF for document."


class PathResolutionError(DocumentBuildError):
    """Raised when an output path cannot be derived for a document."""

    @property
    def default_message(self) -> str:
        return "Unable to resolve output path for document."


class ImageReadError(DocumentBuildError):
    """Raised when an image file is missing or cannot be decoded."""

    @property
    def default_message(self) -> str:
        return "Missing or unreadable image file."


class EncodingError(DocumentBuildError):
    """Raised when the page encoder fails to produce or write PDF bytes."""

    @property
    def default_message(self) -> str:
        return "Failed to encode PDF pages."
