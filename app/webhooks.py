from typing import AsyncIterator

import httpx

from app.config import settings


def build_client(**kwargs) -> httpx.AsyncClient:
    kwargs.setdefault("timeout", settings.webhook_timeout_seconds)
    kwargs.setdefault("headers", {"Accept": "application/json"})
    return httpx.AsyncClient(**kwargs)


async def get_client() -> AsyncIterator[httpx.AsyncClient]:
    async with build_client() as client:
        yield client
