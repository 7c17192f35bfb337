import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from translation_status_client.adaptive_strategy import AdaptivePollingStrategy
from translation_status_client.models import PollAttempt, StatusSnapshot
from translation_status_client.status_source import StatusSource


class StatusChecker:
    """Polls a status source until the job reports ``completed`` or ``error``.

    Fetches are strictly sequential: each wait starts only after the previous
    snapshot has arrived. There is no attempt limit and no deadline; callers
    that need one should wrap :meth:`run`, e.g. with ``asyncio.wait_for``.
    """

    def __init__(
        self,
        source: StatusSource,
        strategy: Optional[AdaptivePollingStrategy] = None,
        on_attempt: Optional[Callable[[PollAttempt], Any]] = None,
        on_status_change: Optional[Callable[[StatusSnapshot], Any]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.source = source
        self.strategy = strategy or AdaptivePollingStrategy()
        self.on_attempt = on_attempt
        self.on_status_change = on_status_change
        self.sleep = sleep
        self.logger = logger

    async def _notify(self, callback: Optional[Callable[..., Any]], *args) -> None:
        if callback is None:
            return
        result = callback(*args)
        if inspect.isawaitable(result):
            await result

    async def _handle_status_change(
        self, snapshot: StatusSnapshot, last_status: Optional[str]
    ) -> None:
        """Invoke the status change callback if the status has changed"""
        if last_status != snapshot.status:
            self.logger.debug(f"Job status changed to {snapshot.status}")
            await self._notify(self.on_status_change, snapshot)

    async def run(self) -> str:
        """Poll until a terminal status is observed and return it"""
        loop = asyncio.get_running_loop()
        attempt = 0
        last_status = None

        while True:
            start_time = loop.time()
            snapshot = await self.source.fetch_status()
            elapsed_time = loop.time() - start_time

            self.logger.info(
                f"Attempt {attempt + 1}: status={snapshot.status}, "
                f"progress={snapshot.progress:.0f}%, "
                f"expected_time={snapshot.expected_time:.0f}ms"
            )
            await self._handle_status_change(snapshot, last_status)
            last_status = snapshot.status

            if snapshot.is_terminal:
                await self._notify(
                    self.on_attempt,
                    PollAttempt(
                        attempt_index=attempt,
                        snapshot=snapshot,
                        elapsed_time=elapsed_time,
                    ),
                )
                return snapshot.status

            wait = self.strategy.compute_interval(
                attempt, snapshot.progress, snapshot.expected_time
            )
            await self._notify(
                self.on_attempt,
                PollAttempt(
                    attempt_index=attempt,
                    snapshot=snapshot,
                    wait_duration=wait,
                    elapsed_time=elapsed_time,
                ),
            )
            self.logger.debug(
                f"Job still {snapshot.status}, waiting {wait / 1000:.2f}s before next attempt"
            )
            await self.sleep(wait / 1000)
            attempt += 1
