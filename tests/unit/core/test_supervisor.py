"""
Unit tests for BrowserSupervisor.

Covers single-flight startup, bounded readiness polling, retry after a failed
start, restart after an unexpected exit, and disposal.
"""

import asyncio
import logging

import pytest

from pdfexport.core.exceptions import BrowserStartupError
from pdfexport.core.supervisor import BrowserSupervisor
from tests.fixtures.fakes import FakeLauncher, ProcessBoundReadiness, ScriptedReadiness, StaticResolver


class TestStartup:

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_spawn(self, supervisor, fake_launcher):
        processes = await asyncio.gather(*(supervisor.ensure_started() for _ in range(5)))

        assert supervisor.spawn_count == 1
        assert len(fake_launcher.launches) == 1
        assert all(process is processes[0] for process in processes)
        assert supervisor.is_running

    @pytest.mark.asyncio
    async def test_later_calls_reuse_running_process(self, supervisor):
        first = await supervisor.ensure_started()
        second = await supervisor.ensure_started()

        assert first is second
        assert supervisor.spawn_count == 1

    @pytest.mark.asyncio
    async def test_launch_binary_and_args(self, supervisor, fake_launcher):
        process = await supervisor.ensure_started()

        launch = fake_launcher.launches[0]
        assert launch['binary'] == '/opt/chrome/chrome'
        assert launch['args'] == [
            '--remote-debugging-port=9333',
            '--disable-extensions',
            '--headless',
            '--no-sandbox',
        ]
        assert process.endpoint == 'http://localhost:9333'
        assert process.pid == fake_launcher.last_process.pid

    @pytest.mark.asyncio
    async def test_polls_until_ready(self, fast_config, fake_launcher):
        readiness = ScriptedReadiness(ready_after=4)
        supervisor = BrowserSupervisor(fast_config, fake_launcher, StaticResolver(), readiness)

        await supervisor.ensure_started()

        assert readiness.calls == 4


class TestStartupFailures:

    @pytest.mark.asyncio
    async def test_unreachable_browser_times_out_and_is_killed(self, fast_config, fake_launcher):
        supervisor = BrowserSupervisor(fast_config, fake_launcher, StaticResolver(), ScriptedReadiness(ready_after=None))

        with pytest.raises(BrowserStartupError, match="not reachable") as excinfo:
            await supervisor.ensure_started()

        assert excinfo.value.endpoint == 'http://localhost:9333'
        assert fake_launcher.last_process.kill_calls == 1
        assert not supervisor.is_running
        assert not supervisor.started

    @pytest.mark.asyncio
    async def test_process_exit_fails_fast(self, fast_config):
        launcher = FakeLauncher(exit_code=1)
        readiness = ScriptedReadiness(ready_after=None)
        supervisor = BrowserSupervisor(fast_config, launcher, StaticResolver(), readiness)

        with pytest.raises(BrowserStartupError, match=r"exited during startup \(code 1\)"):
            await supervisor.ensure_started()

        assert readiness.calls == 0
        assert launcher.last_process.kill_calls == 0

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_the_failure(self, fast_config, fake_launcher):
        supervisor = BrowserSupervisor(fast_config, fake_launcher, StaticResolver(), ScriptedReadiness(ready_after=None))

        results = await asyncio.gather(
            supervisor.ensure_started(), supervisor.ensure_started(), return_exceptions=True,
        )

        assert all(isinstance(result, BrowserStartupError) for result in results)
        assert supervisor.spawn_count == 1

    @pytest.mark.asyncio
    async def test_next_call_after_failure_starts_over(self, fast_config, fake_launcher):
        readiness = ScriptedReadiness(ready_after=None)
        supervisor = BrowserSupervisor(fast_config, fake_launcher, StaticResolver(), readiness)

        with pytest.raises(BrowserStartupError):
            await supervisor.ensure_started()

        readiness.ready_after = 1
        process = await supervisor.ensure_started()

        assert supervisor.spawn_count == 2
        assert process.handle is fake_launcher.last_process
        assert process.is_alive

    @pytest.mark.asyncio
    async def test_resolver_failure_propagates_without_spawn(self, fast_config, fake_launcher):
        class MissingResolver:
            async def resolve(self, configured=None):
                raise BrowserStartupError("no browser here")

        supervisor = BrowserSupervisor(fast_config, fake_launcher, MissingResolver(), ScriptedReadiness())

        with pytest.raises(BrowserStartupError, match="no browser here"):
            await supervisor.ensure_started()

        assert fake_launcher.launches == []
        assert not supervisor.started


class TestRestartAndDispose:

    @pytest.mark.asyncio
    async def test_dead_process_is_replaced(self, supervisor, fake_launcher, caplog):
        first = await supervisor.ensure_started()
        first.handle.returncode = 0

        with caplog.at_level(logging.WARNING):
            second = await supervisor.ensure_started()

        assert second is not first
        assert supervisor.spawn_count == 2
        assert "exited unexpectedly" in caplog.text

    @pytest.mark.asyncio
    async def test_dispose_kills_process(self, fast_config, fake_launcher):
        readiness = ProcessBoundReadiness(fake_launcher)
        supervisor = BrowserSupervisor(fast_config, fake_launcher, StaticResolver(), readiness)
        process = await supervisor.ensure_started()
        assert await readiness.is_ready()

        await supervisor.dispose()

        assert process.handle.returncode == -9
        assert not supervisor.is_running
        assert not supervisor.started
        assert not await readiness.is_ready()

    @pytest.mark.asyncio
    async def test_dispose_before_start_is_a_noop(self, supervisor, fake_launcher, caplog):
        with caplog.at_level(logging.WARNING):
            await supervisor.dispose()

        assert fake_launcher.launches == []
        assert "no browser was started" in caplog.text

    @pytest.mark.asyncio
    async def test_second_dispose_is_a_noop(self, supervisor, fake_launcher):
        await supervisor.ensure_started()

        await supervisor.dispose()
        await supervisor.dispose()

        assert fake_launcher.last_process.kill_calls == 1

    @pytest.mark.asyncio
    async def test_dispose_waits_for_inflight_start(self, supervisor, fake_launcher):
        starting = asyncio.ensure_future(supervisor.ensure_started())
        await asyncio.sleep(0)

        await supervisor.dispose()
        process = await starting

        assert process.handle.returncode == -9
        assert supervisor.spawn_count == 1

    @pytest.mark.asyncio
    async def test_start_after_dispose_spawns_again(self, supervisor):
        await supervisor.ensure_started()
        await supervisor.dispose()

        process = await supervisor.ensure_started()

        assert process.is_alive
        assert supervisor.spawn_count == 2
