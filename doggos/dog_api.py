"""Client for the dog.ceo random image endpoint.

The photo is strictly best-effort: ``fetch_random_image`` raises
``FetchError`` on any failure, and ``RandomImageTask`` turns that into an
absent image instead of an error.
"""

from __future__ import annotations

import concurrent.futures
import logging
import os
import threading
from typing import Callable, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_DOG_API_BASE = "https://dog.ceo/api"
RANDOM_IMAGE_PATH = "/breeds/image/random"
DEFAULT_TIMEOUT_SECONDS = 10.0
USER_AGENT = "doggos/0.1 (+personal dog list)"

LOADING = "loading"
READY = "ready"
CANCELLED = "cancelled"


class FetchError(RuntimeError):
    """Raised when a random dog image could not be obtained."""


def dog_api_base() -> str:
    """Return the dog.ceo API base URL from env, with a sensible default."""
    return (os.environ.get("DOG_API_BASE") or DEFAULT_DOG_API_BASE).rstrip("/")


def dog_api_timeout() -> float:
    """Return the request timeout in seconds from env."""
    raw = os.environ.get("DOG_API_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid DOG_API_TIMEOUT_SECONDS={raw!r}")
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def random_image_url() -> str:
    return f"{dog_api_base()}{RANDOM_IMAGE_PATH}"


def parse_random_image(payload) -> str:
    """Validate a random-image response body and return the image URL.

    Args:
        payload: Decoded JSON body, expected as ``{"message": url, "status": str}``.

    Returns:
        The image URL.

    Raises:
        FetchError: If the body is malformed or reports a non-success status.
    """
    if not isinstance(payload, dict):
        raise FetchError("Response body is not a JSON object.")
    status = payload.get("status")
    message = payload.get("message")
    if not isinstance(status, str):
        raise FetchError("Response is missing a string 'status'.")
    if status != "success":
        raise FetchError(f"Dog API reported status={status!r}.")
    if not isinstance(message, str) or not message.strip():
        raise FetchError("Response is missing an image URL in 'message'.")
    return message.strip()


def fetch_random_image(
    timeout: float | None = None,
    session: requests.Session | None = None,
) -> str:
    """Fetch one random dog photo URL.

    Args:
        timeout: Request timeout in seconds; defaults to ``dog_api_timeout()``.
        session: Optional requests session to issue the call with.

    Returns:
        The photo URL.

    Raises:
        FetchError: On network errors, HTTP errors, or a malformed body.
    """
    url = random_image_url()
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    http = session or requests
    try:
        r = http.get(url, headers=headers, timeout=timeout or dog_api_timeout())
        r.raise_for_status()
        payload = r.json()
    except requests.RequestException as e:
        raise FetchError(f"Request to {url} failed: {e}") from e
    except ValueError as e:
        raise FetchError(f"Response from {url} is not valid JSON.") from e
    return parse_random_image(payload)


class RandomImageTask:
    """Background best-effort image fetch that can be abandoned.

    The fetch runs on ``executor``. Once ``cancel()`` is called, a result
    that arrives later is dropped. Failures are logged and leave
    ``image_url`` as ``None``.
    """

    def __init__(
        self,
        executor: concurrent.futures.Executor,
        fetch: Callable[[], str] = fetch_random_image,
    ) -> None:
        self._executor = executor
        self._fetch = fetch
        self._lock = threading.Lock()
        self._future: Optional[concurrent.futures.Future] = None
        self._image_url: Optional[str] = None
        self._finished = False
        self._cancelled = False
        self._settled = threading.Event()

    def start(self) -> RandomImageTask:
        """Submit the fetch once; later calls are ignored."""
        with self._lock:
            if self._future is not None or self._cancelled:
                return self
            self._future = self._executor.submit(self._fetch)
            future = self._future
        future.add_done_callback(self._on_done)
        return self

    def _on_done(self, future: concurrent.futures.Future) -> None:
        image_url = None
        if not future.cancelled():
            try:
                image_url = future.result()
            except FetchError as exc:
                logger.warning(f"Random dog image unavailable: {exc}")
            except Exception as exc:
                logger.warning(f"Random dog image fetch crashed: {exc}")
        with self._lock:
            if self._cancelled:
                logger.debug("Discarding image fetched for an abandoned task.")
            else:
                self._image_url = image_url
                self._finished = True
        self._settled.set()

    def cancel(self) -> None:
        """Abandon the task; any in-flight result will be discarded."""
        with self._lock:
            self._cancelled = True
            self._image_url = None
            future = self._future
        if future is not None:
            future.cancel()
        self._settled.set()

    @property
    def state(self) -> str:
        with self._lock:
            if self._cancelled:
                return CANCELLED
            return READY if self._finished else LOADING

    @property
    def image_url(self) -> Optional[str]:
        with self._lock:
            return None if self._cancelled else self._image_url

    def wait(self, timeout: float | None = None) -> Optional[str]:
        """Block until the fetch settles and return the image URL, if any."""
        if self._future is not None:
            self._settled.wait(timeout)
        return self.image_url
