"""Time-bounded HTTP access to upstream JSON feeds."""

import asyncio
import logging
import threading
from typing import Any

import requests

from .config import DEFAULT_TIMEOUT_SECONDS
from .exceptions import (
    UpstreamPayloadError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "korea-transit-mcp/1.0",
}


def new_session() -> requests.Session:
    """Create a session carrying the feed request headers."""
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    return session


def _deliver(
    loop: asyncio.AbstractEventLoop,
    outcome: "asyncio.Future[Any]",
    payload: Any = None,
    error: BaseException | None = None,
) -> None:
    """Hand a worker thread's result back to the waiting coroutine."""

    def settle() -> None:
        # Already cancelled when the budget expired
        if outcome.done():
            return
        if error is not None:
            outcome.set_exception(error)
        else:
            outcome.set_result(payload)

    try:
        loop.call_soon_threadsafe(settle)
    except RuntimeError:
        logger.debug("Event loop closed before an abandoned fetch finished")


class FeedGateway:
    """Issues single fetches against upstream feeds.

    Each fetch either returns the decoded JSON body or raises one of the
    upstream errors. Nothing is retried here.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        """Initialize the gateway.

        Args:
            timeout: Default per-fetch budget in seconds
            session: Session used by blocking ``fetch`` calls; async fetches
                always get a session of their own
        """
        self.timeout = timeout
        self.session = session or new_session()

    def fetch(
        self,
        url: str,
        timeout: float | None = None,
        label: str = "feed",
        session: requests.Session | None = None,
    ) -> Any:
        """Fetch a feed URL and decode its JSON body.

        The response is closed before returning on every path.

        Args:
            url: Fully built feed URL
            timeout: Budget in seconds, defaults to the gateway's
            label: Feed name used in logs and error messages (URLs carry keys)
            session: Session to issue the request on, defaults to the gateway's

        Returns:
            Decoded JSON payload

        Raises:
            UpstreamTimeoutError: If connecting or reading exceeds the budget
            UpstreamTransportError: If the request fails or returns an HTTP error
            UpstreamPayloadError: If the body is not JSON
        """
        budget = timeout or self.timeout
        http = session or self.session
        logger.debug(f"Fetching {label} (budget {budget}s)")
        try:
            with http.get(url, timeout=budget) as response:
                response.raise_for_status()
                return response.json()
        except requests.exceptions.JSONDecodeError as e:
            raise UpstreamPayloadError(f"{label} returned a non-JSON body") from e
        except requests.exceptions.Timeout as e:
            logger.warning(f"{label} timed out after {budget}s")
            raise UpstreamTimeoutError(f"{label} timed out after {budget}s") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"{label} request failed: {e.__class__.__name__}")
            raise UpstreamTransportError(
                f"Failed to fetch {label}: {e.__class__.__name__}"
            ) from e

    async def fetch_json(
        self, url: str, timeout: float | None = None, label: str = "feed"
    ) -> Any:
        """Fetch without blocking the event loop, under a hard wall-clock budget.

        The request runs on a daemon thread with its own session. When the
        budget expires the session is closed and the coroutine returns at
        once; the abandoned thread never holds up loop or interpreter
        shutdown.

        Raises:
            UpstreamTimeoutError: If the whole fetch does not settle in time
        """
        budget = timeout or self.timeout
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[Any] = loop.create_future()
        session = new_session()

        def run() -> None:
            try:
                payload = self.fetch(url, budget, label, session=session)
            except Exception as e:
                _deliver(loop, outcome, error=e)
            else:
                _deliver(loop, outcome, payload=payload)
            finally:
                session.close()

        threading.Thread(target=run, name=f"fetch {label}", daemon=True).start()
        try:
            return await asyncio.wait_for(outcome, timeout=budget)
        except asyncio.TimeoutError as e:
            logger.warning(f"{label} exceeded its {budget}s budget")
            raise UpstreamTimeoutError(f"{label} timed out after {budget}s") from e
        finally:
            session.close()

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()
