"""
Exporter component factory

Infrastructure layer factory that wires the DevTools and browser adapters into
the core supervisor and orchestrator. This lets the core layer build its
collaborators without importing concrete implementations itself.
"""

from ..core.domain import ExporterConfig
from ..core.orchestrator import SessionOrchestrator
from ..core.supervisor import BrowserSupervisor
from .browser.binary import BrowserBinaryResolver
from .browser.process import SubprocessLauncher
from .devtools.http import DevToolsHttpClient
from .devtools.targets import TargetManager


def create_http_client(config: ExporterConfig) -> DevToolsHttpClient:
    return DevToolsHttpClient(config.host, config.port, timeout_ms=config.request_timeout_ms)


def create_supervisor(config: ExporterConfig, use_playwright: bool = True) -> BrowserSupervisor:
    """
    Create a supervisor that launches a real browser subprocess.

    Args:
        config: Exporter configuration
        use_playwright: Fall back to Playwright's bundled Chromium when no
            system browser is found
    """
    return BrowserSupervisor(
        config,
        launcher=SubprocessLauncher(),
        resolver=BrowserBinaryResolver(use_playwright=use_playwright),
        readiness=create_http_client(config),
    )


def create_orchestrator(config: ExporterConfig) -> SessionOrchestrator:
    """Create an orchestrator talking to the configured DevTools endpoint"""
    targets = TargetManager(
        config.endpoint,
        connect_timeout_ms=config.request_timeout_ms,
        ignore_https_errors=config.ignore_certificate_errors,
    )
    return SessionOrchestrator(config, targets)
