"""
Domain-Specific Exceptions

Defines the error taxonomy for the PDF export system. Input errors are raised
before any resource is touched, startup errors surface when the browser never
becomes reachable, and session errors describe a single failed export.
"""

import asyncio
from typing import Any, Dict, Optional


# Base domain exception hierarchy
class PDFExportError(Exception):
    """Base exception for all PDF export errors"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class InvalidRequestError(PDFExportError, ValueError):
    """Raised when an export request is missing required fields or is malformed"""

    def __init__(self, message: str, field: Optional[str] = None, **context):
        super().__init__(message, context)
        self.field = field


class InvalidConfigurationError(PDFExportError):
    """Raised when exporter configuration validation fails"""

    def __init__(self, validation_result):
        self.validation_result = validation_result
        super().__init__(validation_result.get_error_summary())


# Browser process errors
class BrowserStartupError(PDFExportError):
    """Raised when the browser process cannot be started or never becomes ready"""

    def __init__(self, message: str, endpoint: Optional[str] = None, **context):
        super().__init__(message, context)
        self.endpoint = endpoint


class BrowserNotFoundError(BrowserStartupError):
    """Raised when no usable browser binary can be located"""


# Per-export session errors
class SessionError(PDFExportError):
    """Base exception for failures inside a single debugging session"""

    def __init__(self, message: str, target_id: Optional[str] = None, **context):
        super().__init__(message, context)
        self.target_id = target_id


class ProtocolError(SessionError):
    """Raised when the browser answers a protocol command with an error"""

    def __init__(self, method: str, message: str, code: Optional[int] = None, **context):
        super().__init__(f"{method} failed: {message}", **context)
        self.method = method
        self.code = code


class SessionClosedError(SessionError):
    """Raised when a command is sent on a session that is no longer connected"""


class NavigationError(SessionError):
    """Raised when the browser reports that navigation to the URL failed"""

    def __init__(self, url: str, error_text: str, **context):
        super().__init__(f"Navigation to {url} failed: {error_text}", **context)
        self.url = url
        self.error_text = error_text


class CaptureError(SessionError):
    """Raised when the PDF capture returns no usable payload"""


class ExportFailedError(PDFExportError):
    """Raised when a caller asks for the bytes of an export that failed"""

    def __init__(self, message: str, url: Optional[str] = None, error_type: Optional[str] = None):
        super().__init__(message, {'url': url, 'error_type': error_type})
        self.url = url
        self.error_type = error_type


# Error translation utilities
class ErrorTranslator:
    """Utility for translating infrastructure exceptions to domain exceptions"""

    @staticmethod
    def translate_session_error(error: BaseException, target_id: Optional[str] = None) -> PDFExportError:
        """Translate transport-level failures raised during an export"""
        if isinstance(error, PDFExportError):
            return error
        if isinstance(error, asyncio.TimeoutError):
            return SessionError("Timed out waiting for the browser", target_id=target_id,
                                original_error=error)
        if isinstance(error, (ConnectionError, OSError)):
            return SessionClosedError(f"Connection to the browser failed: {error}", target_id=target_id,
                                      original_error=error)
        return SessionError(f"Session failed: {error}", target_id=target_id, original_error=error)

