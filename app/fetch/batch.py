import asyncio
from typing import Callable, List, Optional
from app.core.config import settings
from app.fetch import http_client
from app.fetch.base import FetchResult
from app.fetch.json_fetcher import fetch_json

ResultCallback = Callable[[FetchResult, int], None]

async def fetch_all_with_concurrency(
    urls: List[str],
    timeout_ms: float,
    concurrency: int,
    cancel: Optional[asyncio.Event] = None,
    on_result: Optional[ResultCallback] = None
) -> List[Optional[FetchResult]]:
    """
    Fetch every URL with at most `concurrency` requests in flight.

    Workers claim indexes from a shared counter and store each result at its
    claimed index, so the returned list lines up with `urls` whatever the
    completion order. `on_result` fires in completion order. Once `cancel` is
    set no new index is claimed; unclaimed slots stay None.
    """
    results: List[Optional[FetchResult]] = [None] * len(urls)
    next_index = 0
    worker_count = max(1, min(concurrency, len(urls)))

    async def worker(client):
        nonlocal next_index
        while True:
            # Claim and bounds check happen without an await in between
            i = next_index
            next_index += 1
            if i >= len(urls):
                break
            if cancel is not None and cancel.is_set():
                break

            result = await fetch_json(client, urls[i], timeout_ms, cancel)
            results[i] = result
            if on_result is not None:
                on_result(result, i)

    async with http_client.create_client(
        timeout=max(timeout_ms / 1000, 1.0),
        headers={"User-Agent": settings.FETCH_USER_AGENT},
        max_connections=worker_count
    ) as client:
        await asyncio.gather(*(worker(client) for _ in range(worker_count)))

    return results
