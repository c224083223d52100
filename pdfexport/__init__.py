"""
Headless browser PDF export

Renders web pages to PDF by driving a headless Chromium through the
DevTools protocol, with one lazily started browser shared by all exports.
"""

__version__ = "1.0.0"
__description__ = "Render web pages to PDF through a headless browser"

from .core import (  # noqa: E402
    PDFExporter,
    ExporterConfig,
    ExportRequest,
    ExportResult,
    ExportStatus,
    RenderOutcome,
    PDFExportError,
    InvalidRequestError,
    BrowserStartupError,
    ExportFailedError,
)

__all__ = [
    'PDFExporter',
    'ExporterConfig',
    'ExportRequest',
    'ExportResult',
    'ExportStatus',
    'RenderOutcome',
    'PDFExportError',
    'InvalidRequestError',
    'BrowserStartupError',
    'ExportFailedError',
]
