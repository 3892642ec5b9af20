"""Version runner.

ONLY fan-out/fan-in - runs one coroutine per declared version, either one
after another or as concurrent tasks bounded by the version timeout, and
returns the per-version results in declaration order.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from ...core.exceptions import VersionTimeoutError
from ...core.value_objects.pipeline_stage import PipelineStage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VersionRunner:
    """Applies the concurrency policy of a definition.

    In concurrent mode a version exceeding the timeout raises
    VersionTimeoutError out of ``run_all`` and the remaining tasks are
    cancelled. Whenever a run is abandoned, results that had already been
    produced are handed to ``discard`` so the caller can release them.
    """

    def __init__(self, concurrent: bool, timeout_ms: int):
        self._concurrent = concurrent
        self._timeout_ms = timeout_ms

    @property
    def concurrent(self) -> bool:
        return self._concurrent

    async def run_all(
        self,
        versions: Sequence[str],
        fn: Callable[[str], Awaitable[T]],
        stage: PipelineStage,
        discard: Optional[Callable[[str, T], Any]] = None,
    ) -> List[Tuple[str, T]]:
        """Run ``fn(version)`` for every version.

        Args:
            versions: Declared versions, in order
            fn: Per-version coroutine function
            stage: Stage name reported on timeout
            discard: Called with (version, result) for results already
                produced when the run is abandoned

        Returns:
            (version, result) pairs in declaration order
        """
        if not self._concurrent:
            results = []
            try:
                for version in versions:
                    results.append((version, await fn(version)))
            except BaseException:
                if discard is not None:
                    for version, result in results:
                        discard(version, result)
                raise
            return results

        tasks = [
            asyncio.ensure_future(self._bounded(version, fn, stage))
            for version in versions
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if discard is not None:
                for version, task in zip(versions, tasks):
                    if not task.cancelled() and task.exception() is None:
                        discard(version, task.result())
            raise

        return list(zip(versions, results))

    async def _bounded(
        self,
        version: str,
        fn: Callable[[str], Awaitable[T]],
        stage: PipelineStage,
    ) -> T:
        try:
            return await asyncio.wait_for(fn(version), timeout=self._timeout_ms / 1000)
        except asyncio.TimeoutError as e:
            logger.error(
                f"Version {version!r} exceeded {self._timeout_ms}ms during {stage.value}"
            )
            raise VersionTimeoutError(version, self._timeout_ms, stage.value) from e


def create_version_runner(concurrent: bool, timeout_ms: int) -> VersionRunner:
    """Create version runner."""
    return VersionRunner(concurrent, timeout_ms)
