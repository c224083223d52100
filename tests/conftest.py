"""
Shared pytest configuration and fixtures for the PDF export tests.

This file provides common fixtures and configuration used across all test types
in the hexagonal architecture test suite.
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pdfexport.core.domain import ExporterConfig, ExportRequest
from pdfexport.core.orchestrator import SessionOrchestrator
from pdfexport.core.supervisor import BrowserSupervisor
from tests.fixtures.fakes import (
    FakeDevToolsEndpoint, FakeLauncher, FakeTargetManager, ScriptedReadiness, StaticResolver,
)


# Domain Model Fixtures
@pytest.fixture
def fast_config():
    """Configuration with timings short enough for unit tests."""
    return ExporterConfig(
        chrome_bin='/opt/chrome/chrome',
        chrome_bin_options=('--no-sandbox',),
        host='localhost',
        port=9333,
        timeout_ms=50,
        startup_timeout_ms=200,
        poll_interval_ms=1,
    )


@pytest.fixture
def sample_request():
    """Export request with one cookie and print options."""
    return ExportRequest(
        url='https://example.com/report',
        cookies=[{'name': 'session', 'value': 'abc123', 'domain': 'example.com'}],
        pdf_options={'printBackground': True},
    )


# Port Fakes
@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def fake_targets():
    return FakeTargetManager()


@pytest.fixture
def supervisor(fast_config, fake_launcher):
    """Supervisor wired to fakes; the browser is 'ready' on the first check."""
    return BrowserSupervisor(fast_config, fake_launcher, StaticResolver(), ScriptedReadiness(ready_after=1))


@pytest.fixture
def orchestrator(fast_config, fake_targets):
    return SessionOrchestrator(fast_config, fake_targets)


# Fake DevTools endpoint
@pytest_asyncio.fixture
async def devtools_endpoint():
    """A FakeDevToolsEndpoint served on a local port."""
    endpoint = FakeDevToolsEndpoint()
    server = TestServer(endpoint.make_app(), host='127.0.0.1')
    await server.start_server()
    endpoint.port = server.port
    try:
        yield endpoint
    finally:
        await server.close()


# Pytest Configuration Hooks
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "contract" in path:
            item.add_marker(pytest.mark.contract)
