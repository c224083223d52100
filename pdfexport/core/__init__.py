"""
Core domain layer

Contains the export lifecycle logic, domain models, and port interfaces.
Browser and DevTools infrastructure lives in the adapters package.
"""

from .domain import (
    ExporterConfig,
    ExportRequest,
    ExportResult,
    ExportStatus,
    RenderOutcome,
    BrowserProcess,
    DebuggingTarget
)

from .supervisor import BrowserSupervisor
from .orchestrator import SessionOrchestrator
from .exporter import PDFExporter

from .ports import (
    ProcessLauncherPort,
    BinaryResolverPort,
    DevToolsReadinessPort,
    DevToolsSessionPort,
    TargetPort
)

from .exceptions import (
    PDFExportError,
    InvalidRequestError,
    InvalidConfigurationError,
    BrowserStartupError,
    BrowserNotFoundError,
    SessionError,
    ProtocolError,
    SessionClosedError,
    NavigationError,
    CaptureError,
    ExportFailedError
)

__all__ = [
    # Domain models
    'ExporterConfig',
    'ExportRequest',
    'ExportResult',
    'ExportStatus',
    'RenderOutcome',
    'BrowserProcess',
    'DebuggingTarget',

    # Services
    'BrowserSupervisor',
    'SessionOrchestrator',
    'PDFExporter',

    # Ports
    'ProcessLauncherPort',
    'BinaryResolverPort',
    'DevToolsReadinessPort',
    'DevToolsSessionPort',
    'TargetPort',

    # Exceptions
    'PDFExportError',
    'InvalidRequestError',
    'InvalidConfigurationError',
    'BrowserStartupError',
    'BrowserNotFoundError',
    'SessionError',
    'ProtocolError',
    'SessionClosedError',
    'NavigationError',
    'CaptureError',
    'ExportFailedError'
]
