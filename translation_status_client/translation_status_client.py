import asyncio
from typing import Any, Callable, Optional

import aiohttp
from loguru import logger

from translation_status_client.adaptive_strategy import AdaptivePollingStrategy
from translation_status_client.models import (
    ClientConfig,
    PollAttempt,
    StatusSnapshot,
)
from translation_status_client.status_checker import StatusChecker
from translation_status_client.status_source import HttpStatusSource


class TranslationStatusClient:
    def __init__(
        self,
        base_url: str,
        config: Optional[ClientConfig] = None,
        on_attempt: Optional[Callable[[PollAttempt], Any]] = None,
        on_status_change: Optional[Callable[[StatusSnapshot], Any]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.config = config or ClientConfig()
        self.strategy = AdaptivePollingStrategy(self.config.polling)
        self.on_attempt = on_attempt
        self.on_status_change = on_status_change
        self.logger = logger

    @property
    def status_url(self) -> str:
        return f"{self.base_url}/{self.config.status_path.lstrip('/')}"

    async def poll_until_complete(self) -> str:
        """Poll the status endpoint until the job completes or fails, using adaptive intervals"""
        async with aiohttp.ClientSession() as session:
            source = HttpStatusSource(
                session, self.status_url, request_timeout=self.config.request_timeout
            )
            checker = StatusChecker(
                source,
                strategy=self.strategy,
                on_attempt=self.on_attempt,
                on_status_change=self.on_status_change,
            )

            if self.config.timeout is None:
                return await checker.run()

            try:
                return await asyncio.wait_for(checker.run(), self.config.timeout)
            except asyncio.TimeoutError:
                self.logger.error(
                    f"Job at {self.status_url} did not finish within {self.config.timeout} seconds"
                )
                raise TimeoutError(
                    f"Job did not complete within {self.config.timeout} seconds"
                ) from None
