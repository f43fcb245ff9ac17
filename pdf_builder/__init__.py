"""
PDF Builder - Convert scanned-document image sets into PDF files.

Each document listed in an Opticon (``.opt``) or IPRO (``.lfp``) load file
becomes one PDF with one page per image, sized to the image's physical
dimensions. Documents are built concurrently under a parallelism limit and
the run is summarised in an immutable :class:`BuildLog`.

Quick Start:
    >>> from pdf_builder import BuildCoordinator, load_collection
    >>> docs = load_collection('export.opt')
    >>> log = BuildCoordinator().run(docs, 'export_dir', 'pdfs', parallelism=4)
    >>> log.errors
    ()

Main Classes:
    - BuildCoordinator: Build a whole collection with bounded parallelism
    - DocumentBuilder: Build a single document
    - Img2PdfEncoder: Default page encoder

Data Classes:
    - Document, DocumentCollection: Imported load file contents
    - PageDescriptor: Page geometry computed for one image
    - BuildLog: Result of a build run

Exceptions:
    - PDFBuilderException: Base exception
    - LoadFileError, UnsupportedLoadFileError: Import failures
    - ConfigurationError: Invalid build settings
    - DocumentBuildError: Per-document failures

For CLI usage, use the 'pdf-builder' command after installation.
"""

# Core classes
from pdf_builder.builder import BuildCoordinator, build_collection
from pdf_builder.document import DocumentBuilder
from pdf_builder.backends import Img2PdfEncoder, PageEncoder, page_size

# Data types
from pdf_builder.types import (
    BuildLog,
    BuildTask,
    Document,
    DocumentCollection,
    DocumentResult,
    PageDescriptor,
)

# Exceptions
from pdf_builder.exceptions import (
    PDFBuilderException,
    LoadFileError,
    UnsupportedLoadFileError,
    ConfigurationError,
    DocumentBuildError,
    PathResolutionError,
    ImageReadError,
    EncodingError,
)

# Functions
from pdf_builder.importers import load_collection
from pdf_builder.paths import resolve_image_path, resolve_output_path
from pdf_builder.report import format_build_report, write_build_report

__version__ = "1.0.0"
__author__ = "PDF Builder CLI Contributors"
__license__ = "MIT"

__all__ = [
    # Main classes
    "BuildCoordinator",
    "DocumentBuilder",
    "Img2PdfEncoder",
    "PageEncoder",
    # Data types
    "BuildLog",
    "BuildTask",
    "Document",
    "DocumentCollection",
    "DocumentResult",
    "PageDescriptor",
    # Exceptions
    "PDFBuilderException",
    "LoadFileError",
    "UnsupportedLoadFileError",
    "ConfigurationError",
    "DocumentBuildError",
    "PathResolutionError",
    "ImageReadError",
    "EncodingError",
    # Functions
    "build_collection",
    "load_collection",
    "page_size",
    "resolve_image_path",
    "resolve_output_path",
    "format_build_report",
    "write_build_report",
    # Version info
    "__version__",
]
