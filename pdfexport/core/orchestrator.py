"""
Session orchestrator.

Runs the protocol sequence for one export: open an isolated target, prepare
the session, navigate, wait for the page's render-finished signal (bounded by
the render timeout), print to PDF, and always tear the target down.
"""

import asyncio
import base64
import binascii
import logging
import time
from typing import Any, Dict, Optional

from .domain import BrowserProcess, DebuggingTarget, ExporterConfig, ExportRequest, ExportResult, RenderOutcome
from .exceptions import CaptureError, ErrorTranslator, NavigationError, ProtocolError
from .ports import DevToolsSessionPort, TargetPort
from .timing import ms_to_seconds, race

logger = logging.getLogger(__name__)


# Installed on every document load, before any page script runs
RENDER_SIGNAL_SCRIPT = """
window.__pageRenderFinishedPromise__ = new Promise(function (resolve) {
  window.__notifyPageRenderFinished__ = resolve;
});
"""

# Starts observing only after the current task queue drains, so the promise
# installed for the current document is the one awaited
WAIT_FOR_RENDER_EXPRESSION = """
new Promise(function (resolve) {
  setTimeout(function () {
    window.__pageRenderFinishedPromise__.then(resolve);
  });
})
"""


class SessionOrchestrator:
    """Drives a single page-to-PDF export over a fresh debugging target"""

    def __init__(self, config: ExporterConfig, targets: TargetPort):
        """
        Initialize orchestrator.

        Args:
            config: Exporter configuration (render timeout, certificate policy)
            targets: Creates targets and opens sessions on them
        """
        self.config = config
        self.targets = targets

    async def run_export(self, process: BrowserProcess, request: ExportRequest) -> ExportResult:
        """
        Export one page.

        Args:
            process: The running browser
            request: Validated export request

        Returns:
            RENDERED / RENDERED_AT_TIMEOUT result with PDF bytes, or a FAILED
            result describing the error. Session errors are never raised.
        """
        started = time.monotonic()
        target: Optional[DebuggingTarget] = None
        session: Optional[DevToolsSessionPort] = None
        outcome: Optional[RenderOutcome] = None

        try:
            target = await self.targets.create_target()
            session = await self.targets.open_session(target)
            logger.debug("Opened %s on browser pid %s for %s", target.target_id, process.pid, request.url)

            await self._prepare_session(session, request)
            await self._navigate(session, request.url)
            outcome = await self._wait_for_render(session)
            data = await self._capture(session, request.pdf_options)

            result = ExportResult.rendered(request.url, data, outcome, time.monotonic() - started)
            logger.info("Exported %s (%d bytes, %s, %.2fs)",
                        request.url, result.byte_count, outcome.value, result.duration)
            return result

        except Exception as e:
            error = ErrorTranslator.translate_session_error(e, target.target_id if target else None)
            logger.error("Export of %s failed: %s", request.url, error)
            return ExportResult.failed(request.url, error, time.monotonic() - started, outcome)

        finally:
            await self._cleanup(session, target)

    async def _prepare_session(self, session: DevToolsSessionPort, request: ExportRequest) -> None:
        domains = [
            session.send('Page.enable'),
            session.send('Network.enable'),
            session.send('Runtime.enable'),
        ]
        if self.config.ignore_certificate_errors:
            domains.append(session.send('Security.enable'))
        await asyncio.gather(*domains)

        if self.config.ignore_certificate_errors:
            await self._ignore_certificate_errors(session)

        await self._apply_cookies(session, request)

        await session.send('Page.addScriptToEvaluateOnNewDocument', {'source': RENDER_SIGNAL_SCRIPT})

    async def _ignore_certificate_errors(self, session: DevToolsSessionPort) -> None:
        """Let navigation proceed past TLS failures, for this session only"""
        try:
            await session.send('Security.setOverrideCertificateErrors', {'override': True})
        except ProtocolError as e:
            # Newer browsers dropped the override; the context's own HTTPS policy still applies
            logger.warning("Certificate error override unavailable: %s", e)
            return

        def on_certificate_error(params: Dict[str, Any]):
            logger.debug("Ignoring certificate error %s on %s", params.get('errorType'), params.get('requestURL'))
            return session.send('Security.handleCertificateError', {
                'eventId': params['eventId'],
                'action': 'continue',
            })

        session.on('Security.certificateError', on_certificate_error)

    async def _apply_cookies(self, session: DevToolsSessionPort, request: ExportRequest) -> None:
        """Replace, never merge: whatever the context held before is dropped"""
        await session.send('Network.clearBrowserCookies')
        if request.cookies:
            await asyncio.gather(*(session.send('Network.setCookie', cookie) for cookie in request.cookies))
            logger.debug("Set %d cookie(s) for %s", len(request.cookies), request.url)

    async def _navigate(self, session: DevToolsSessionPort, url: str) -> None:
        try:
            await asyncio.wait_for(self._load(session, url),
                                   ms_to_seconds(self.config.navigation_timeout_ms))
        except asyncio.TimeoutError:
            raise NavigationError(
                url, f"page did not finish loading within {self.config.navigation_timeout_ms}ms"
            ) from None

    async def _load(self, session: DevToolsSessionPort, url: str) -> None:
        # Registered before navigating so a fast load is not missed
        load_event = session.wait_for_event('Page.loadEventFired')
        try:
            response = await session.send('Page.navigate', {'url': url})
            if response.get('errorText'):
                raise NavigationError(url, response['errorText'])
            await load_event
        finally:
            if not load_event.done():
                load_event.cancel()

    async def _wait_for_render(self, session: DevToolsSessionPort) -> RenderOutcome:
        """Race the page's render-finished signal against the render timeout"""
        signal = session.send('Runtime.evaluate', {
            'expression': WAIT_FOR_RENDER_EXPRESSION,
            'awaitPromise': True,
        })
        signalled, response = await race(signal, self.config.timeout_ms)

        if signalled:
            details = (response or {}).get('exceptionDetails')
            if details:
                # Page replaced the injected promise or never got it; nothing more to wait for
                logger.warning("Render signal evaluation threw: %s", details.get('text'))
            else:
                logger.debug("Page render finished callback received")
            return RenderOutcome.SIGNALLED

        logger.warning("Timed out after %dms waiting for page render, capturing current state",
                       self.config.timeout_ms)
        return RenderOutcome.TIMED_OUT

    async def _capture(self, session: DevToolsSessionPort, pdf_options: Dict[str, Any]) -> bytes:
        try:
            response = await asyncio.wait_for(session.send('Page.printToPDF', pdf_options or {}),
                                              ms_to_seconds(self.config.capture_timeout_ms))
        except asyncio.TimeoutError:
            raise CaptureError(
                f"Page.printToPDF did not answer within {self.config.capture_timeout_ms}ms"
            ) from None
        payload = response.get('data')
        if not payload:
            raise CaptureError("Page.printToPDF returned no data")
        try:
            return base64.b64decode(payload)
        except (binascii.Error, ValueError) as e:
            raise CaptureError(f"Page.printToPDF returned undecodable data: {e}") from e

    async def _cleanup(self, session: Optional[DevToolsSessionPort], target: Optional[DebuggingTarget]) -> None:
        """Close the session and the target; failures are logged, never raised"""
        limit = ms_to_seconds(self.config.request_timeout_ms)

        if session is not None:
            try:
                await asyncio.wait_for(session.close(), limit)
            except Exception as e:
                logger.warning("Failed to close session cleanly: %r", e)

        if target is not None:
            try:
                await asyncio.wait_for(self.targets.close_target(target), limit)
            except Exception as e:
                logger.warning("Failed to close target %s cleanly: %r", target.target_id, e)

    async def close(self) -> None:
        """Release the connection to the browser held by the target manager"""
        await self.targets.close()
