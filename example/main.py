import asyncio
import random

from translation_server import TranslationServer, random_outcome
from translation_status_client.models import AdaptivePollingConfig, ClientConfig
from translation_status_client.translation_status_client import (
    TranslationStatusClient,
)


async def status_changed(snapshot):
    print(f"Status changed to: {snapshot.status}")
    print(f"Progress: {snapshot.progress:.0f}%")


def attempt_made(attempt):
    if attempt.wait_duration is not None:
        print(
            f"Attempt {attempt.attempt_index + 1}: next poll in "
            f"{attempt.wait_duration / 1000:.2f}s"
        )


async def main():
    PORT = 8000
    # A job that takes between one and three minutes
    completion_time = float(random.randint(60, 180))
    server = TranslationServer(
        completion_time=completion_time, outcome_picker=random_outcome(0.5)
    )
    await server.start(port=PORT)
    print(f"Server started on http://localhost:{PORT}")

    config = ClientConfig(polling=AdaptivePollingConfig(transition_progress=60))

    client = TranslationStatusClient(
        f"http://localhost:{PORT}",
        config,
        on_attempt=attempt_made,
        on_status_change=status_changed,
    )

    try:
        final_status = await client.poll_until_complete()
        print(f"Final status: {final_status}")
        print(f"Status requests served: {server.requests}")
    except TimeoutError as e:
        print(f"Polling timed out: {e}")
    finally:
        await server.stop()


if __name__ == "__main__":
    asyncio.run(main())
