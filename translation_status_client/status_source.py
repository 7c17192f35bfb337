import asyncio
from typing import Protocol

import aiohttp
from loguru import logger
from pydantic import ValidationError

from translation_status_client.models import StatusSnapshot


class StatusSource(Protocol):
    async def fetch_status(self) -> StatusSnapshot:
        """Returns the job's current status, degrading to an error snapshot on failure"""
        ...


class HttpStatusSource:
    def __init__(
        self,
        session: aiohttp.ClientSession,
        url: str,
        request_timeout: float = 10.0,
    ):
        self.session = session
        self.url = url
        self.request_timeout = aiohttp.ClientTimeout(total=request_timeout)
        self.logger = logger

    async def fetch_status(self) -> StatusSnapshot:
        """Fetches the status of a job from the server"""
        try:
            async with self.session.get(
                self.url, timeout=self.request_timeout
            ) as response:
                response.raise_for_status()
                data = await response.json(content_type=None)
                return StatusSnapshot.model_validate(data)
        except aiohttp.ClientResponseError as e:
            self.logger.error(f"HTTP error {e.status} at {self.url}: {e.message}")
        except aiohttp.ClientError as e:
            self.logger.error(f"Error fetching status from {self.url}: {e}")
        except asyncio.TimeoutError:
            self.logger.error(f"Timed out fetching status from {self.url}")
        except ValidationError as e:
            self.logger.error(f"Malformed status from {self.url}: {e}")
        except ValueError as e:
            self.logger.error(f"Invalid JSON from {self.url}: {e}")
        return StatusSnapshot.error_snapshot()
