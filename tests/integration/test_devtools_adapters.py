"""
Integration tests for the DevTools HTTP client.

Runs the real aiohttp client against a local server that imitates a
browser's /json/version discovery endpoint.
"""

import pytest

from pdfexport.adapters.devtools import DevToolsHttpClient
from pdfexport.adapters.factories import create_supervisor
from pdfexport.core.domain import ExporterConfig


@pytest.fixture
def http_client(devtools_endpoint):
    return DevToolsHttpClient('127.0.0.1', devtools_endpoint.port, timeout_ms=2000)


class TestDevToolsHttpClient:

    @pytest.mark.asyncio
    async def test_version(self, http_client):
        version = await http_client.get_version()

        assert version['Browser'].startswith('HeadlessChrome')

    @pytest.mark.asyncio
    async def test_ready_when_debugger_url_reported(self, http_client, devtools_endpoint):
        assert await http_client.is_ready() is True
        assert devtools_endpoint.requests == 1

    @pytest.mark.asyncio
    async def test_not_ready_without_debugger_url(self, http_client, devtools_endpoint):
        devtools_endpoint.ready = False

        assert await http_client.is_ready() is False

    @pytest.mark.asyncio
    async def test_not_ready_when_nothing_listens(self):
        assert await DevToolsHttpClient('127.0.0.1', 1, timeout_ms=500).is_ready() is False

    def test_base_url(self):
        assert DevToolsHttpClient('localhost', 9333).base_url == 'http://localhost:9333'


class TestSupervisorReadiness:

    @pytest.mark.asyncio
    async def test_default_supervisor_checks_configured_endpoint(self, devtools_endpoint):
        config = ExporterConfig(host='127.0.0.1', port=devtools_endpoint.port, request_timeout_ms=2000)
        supervisor = create_supervisor(config)

        assert supervisor.readiness.base_url == f"http://127.0.0.1:{devtools_endpoint.port}"
        assert await supervisor.readiness.is_ready()
