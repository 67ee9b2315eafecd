"""
Shared helpers for talking to third-party feeds.

Mandatory feeds go through `fetch_json` and let `UpstreamDataError` propagate.
Optional feeds are wrapped in `best_effort`, which turns any failure into an
unavailable `Outcome` so the caller can merge results without try/except.
"""

import httpx
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Generic, Optional, TypeVar

from app.core.config import settings
from app.core.errors import UpstreamDataError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    reason: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.reason is None

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def unavailable(cls, reason: str) -> "Outcome[T]":
        return cls(reason=reason)


def build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.UPSTREAM_TIMEOUT_SECONDS),
        headers={"Accept": "application/json"},
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, str]] = None,
) -> Any:
    """GET a JSON document, raising UpstreamDataError on any HTTP or decode failure."""
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        return resp.json()
    except httpx.TimeoutException as e:
        raise UpstreamDataError(f"Timed out fetching {url}") from e
    except httpx.HTTPStatusError as e:
        raise UpstreamDataError(f"{url} returned {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise UpstreamDataError(f"Failed to fetch {url}: {e}") from e
    except ValueError as e:
        raise UpstreamDataError(f"Invalid JSON from {url}") from e


async def best_effort(label: str, pending: Awaitable[T]) -> Outcome[T]:
    try:
        return Outcome.ok(await pending)
    except Exception as e:
        logger.warning(f"{label} unavailable: {e}")
        return Outcome.unavailable(str(e))
