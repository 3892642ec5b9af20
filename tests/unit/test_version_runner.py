"""Tests for per-version fan-out."""

import asyncio

import pytest

from neo_uploads import PipelineStage, VersionTimeoutError
from neo_uploads.application.services.version_runner import VersionRunner


class TestVersionRunner:
    """Test sequential and concurrent version execution."""

    @pytest.mark.asyncio
    async def test_results_keep_declaration_order(self):
        async def work(version):
            await asyncio.sleep({"a": 0.05, "b": 0.0, "c": 0.02}[version])
            return version.upper()

        runner = VersionRunner(concurrent=True, timeout_ms=1_000)
        results = await runner.run_all(("a", "b", "c"), work, PipelineStage.PROCESSING)
        assert results == [("a", "A"), ("b", "B"), ("c", "C")]

    @pytest.mark.asyncio
    async def test_sequential_runs_one_at_a_time(self):
        events = []

        async def work(version):
            events.append(f"start {version}")
            await asyncio.sleep(0)
            events.append(f"end {version}")
            return version

        runner = VersionRunner(concurrent=False, timeout_ms=1)
        await runner.run_all(("a", "b"), work, PipelineStage.PROCESSING)
        assert events == ["start a", "end a", "start b", "end b"]

    @pytest.mark.asyncio
    async def test_timeout_cancels_siblings_and_discards_finished(self):
        cancelled = []
        discarded = []

        async def work(version):
            if version == "fast":
                return "fast-result"
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(version)
                raise

        runner = VersionRunner(concurrent=True, timeout_ms=100)
        with pytest.raises(VersionTimeoutError) as exc_info:
            await runner.run_all(
                ("fast", "slow"),
                work,
                PipelineStage.PROCESSING,
                discard=lambda version, result: discarded.append((version, result)),
            )

        assert exc_info.value.version == "slow"
        assert exc_info.value.stage == "processing"
        assert cancelled == ["slow"]
        assert discarded == [("fast", "fast-result")]
