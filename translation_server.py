import math
import random
from datetime import datetime
from typing import Callable, Optional

from aiohttp import web
from loguru import logger

OutcomePicker = Callable[[], str]


def random_outcome(error_rate: float = 0.5) -> OutcomePicker:
    """Picks ``error`` with probability ``error_rate``, else ``completed``"""

    def pick() -> str:
        return "error" if random.random() < error_rate else "completed"

    return pick


def fixed_outcome(status: str) -> OutcomePicker:
    def pick() -> str:
        return status

    return pick


class TranslationServer:
    def __init__(
        self,
        completion_time: float = 10.0,
        outcome_picker: Optional[OutcomePicker] = None,
    ):
        self.start_time = None
        self.completion_time = completion_time
        self.outcome_picker = outcome_picker or random_outcome()
        self.outcome = None
        self.requests = 0
        self.runner = None
        self.app = web.Application()
        self.app.router.add_get("/status", self.handle_status)
        self.logger = logger

    @property
    def expected_time(self) -> float:
        """Expected job duration in milliseconds"""
        return self.completion_time * 1000

    def current_status(self) -> dict:
        if self.start_time is None:
            self.start_time = datetime.now()

        elapsed = (datetime.now() - self.start_time).total_seconds()
        if self.completion_time > 0:
            progress = min(100, math.floor(elapsed / self.completion_time * 100))
        else:
            progress = 100

        if elapsed < self.completion_time:
            status = "pending"
        else:
            # The outcome is decided once and then reported on every request
            if self.outcome is None:
                self.outcome = self.outcome_picker()
            status = self.outcome

        return {
            "status": status,
            "progress": progress,
            "expectedTime": self.expected_time,
        }

    async def handle_status(self, request):
        self.requests += 1
        body = self.current_status()
        self.logger.info(
            f"Returning {body['status']} status (progress: {body['progress']}%)"
        )
        return web.json_response(body)

    async def start(self, port: int = 8080):
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, "localhost", port)
        await site.start()
        self.logger.info(f"Server started on port {port}")
        return site

    async def stop(self) -> None:
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
            self.logger.info("Server stopped")
