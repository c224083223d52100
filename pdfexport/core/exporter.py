"""
PDF exporter facade.

Public entry point: validates requests, makes sure the shared browser is
running, and hands each request to the session orchestrator.
"""

import logging
from typing import Any, Mapping, Optional, Union

from ..adapters.factories import create_orchestrator, create_supervisor
from .domain import ExporterConfig, ExportRequest, ExportResult
from .exceptions import BrowserStartupError, InvalidConfigurationError, InvalidRequestError
from .orchestrator import SessionOrchestrator
from .supervisor import BrowserSupervisor
from .validation import ConfigurationValidator, RequestValidator

logger = logging.getLogger(__name__)

RequestLike = Union[ExportRequest, Mapping[str, Any], str, None]


class PDFExporter:
    """
    Renders web pages to PDF through one shared headless browser.

    Concurrent export() calls are independent: each gets its own target and
    session, only the browser process is shared.

    Usage:
        async with PDFExporter(ExporterConfig(port=9333)) as exporter:
            result = await exporter.export({'url': 'https://example.com',
                                            'pdfOptions': {'printBackground': True}})
            if result.success:
                Path('page.pdf').write_bytes(result.data)
    """

    def __init__(
        self,
        config: Union[ExporterConfig, Mapping[str, Any], None] = None,
        supervisor: Optional[BrowserSupervisor] = None,
        orchestrator: Optional[SessionOrchestrator] = None,
        validate_config: bool = True,
    ):
        """
        Initialize exporter.

        Args:
            config: ExporterConfig or an options mapping (chromeBin, port, ...)
            supervisor: Shared supervisor; pass the same one to several
                exporters to share a single browser across them. An injected
                supervisor is left running when an ``async with`` block exits
            orchestrator: Custom orchestrator (mainly for tests)
            validate_config: Validate the configuration up front

        Raises:
            InvalidConfigurationError: If the configuration is invalid
        """
        if config is None:
            config = ExporterConfig()
        elif not isinstance(config, ExporterConfig):
            config = ExporterConfig.from_dict(config)

        if validate_config:
            result = ConfigurationValidator().validate(config)
            if not result.valid:
                raise InvalidConfigurationError(result)
            for warning in result.warnings:
                logger.warning("Exporter configuration: %s", warning)

        self.config = config
        # Only collaborators built here are torn down on context exit
        self._owns_supervisor = supervisor is None
        self._owns_orchestrator = orchestrator is None
        self.supervisor = supervisor or create_supervisor(config)
        self.orchestrator = orchestrator or create_orchestrator(config)
        self.request_validator = RequestValidator()

    async def export(self, request: RequestLike = None, **options: Any) -> ExportResult:
        """
        Export a page to PDF.

        Args:
            request: ExportRequest, {url, cookies, pdfOptions} mapping, or a URL
            **options: Request fields given as keywords (url, cookies, pdf_options)

        Returns:
            Tagged ExportResult; check result.success / result.status

        Raises:
            InvalidRequestError: If the URL is missing or the request is
                malformed. Raised before any browser work is started.
        """
        export_request = self._coerce_request(request, options)

        try:
            process = await self.supervisor.ensure_started()
        except BrowserStartupError as e:
            logger.error("Cannot export %s, browser did not start: %s", export_request.url, e)
            return ExportResult.failed(export_request.url, e)

        return await self.orchestrator.run_export(process, export_request)

    async def export_pdf(self, request: RequestLike = None, **options: Any) -> bytes:
        """
        Export a page and return the PDF bytes.

        Raises:
            InvalidRequestError: If the request is invalid
            ExportFailedError: If the export failed
        """
        result = await self.export(request, **options)
        return result.raise_for_status().data

    async def dispose(self) -> None:
        """Drop the browser connection and terminate the browser process.

        This kills the browser even when the supervisor is shared with other
        exporters; leaving an ``async with`` block only disposes what this
        exporter created itself.
        """
        await self.orchestrator.close()
        await self.supervisor.dispose()

    async def __aenter__(self) -> 'PDFExporter':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_orchestrator:
            await self.orchestrator.close()
        if self._owns_supervisor and self.supervisor.started:
            await self.supervisor.dispose()

    def _coerce_request(self, request: RequestLike, options: Mapping[str, Any]) -> ExportRequest:
        if isinstance(request, ExportRequest):
            if options:
                raise InvalidRequestError("Pass either an ExportRequest or keyword options, not both")
            export_request = request
        elif isinstance(request, str):
            export_request = ExportRequest.from_dict({**options, 'url': request})
        elif isinstance(request, Mapping):
            export_request = ExportRequest.from_dict({**request, **options})
        elif request is None:
            export_request = ExportRequest.from_dict(options)
        else:
            raise InvalidRequestError(f"Unsupported request type: {type(request).__name__}")

        return self.request_validator.ensure_valid(export_request)
