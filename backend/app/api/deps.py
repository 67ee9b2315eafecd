from typing import AsyncIterator

import httpx

from app.services.upstream import build_client


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One upstream client per request, closed once the response is built."""
    client = build_client()
    try:
        yield client
    finally:
        await client.aclose()
