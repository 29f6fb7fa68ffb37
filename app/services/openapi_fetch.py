"""
Batch JSON fetch proxy behind POST /api/openapi-fetch.

The request body is validated and clamped into a FetchRequest, then the batch
runner either completes and returns one JSON envelope (buffered mode) or its
results are relayed as server-sent events while they arrive (streaming mode).
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Set, Union
from app.core.config import settings
from app.fetch import batch
from app.fetch.base import FetchResult
from app.fetch.utils import clamp_int, clamp_number
from app.schemas import FetchBatchResponse

INVALID_BODY_ERROR = "Invalid JSON body. Expected: { urls: string[] }"
MISSING_URLS_ERROR = "Missing urls. Expected: { urls: string[] }"

STREAM_COMMENT = ": openapi-fetch stream\n\n"

STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

# Strong references to detached batch tasks until they finish
_stream_tasks: Set[asyncio.Task] = set()

class InvalidFetchRequest(ValueError):
    """Request body cannot be turned into a FetchRequest"""

@dataclass
class FetchRequest:
    urls: List[str]
    timeout_ms: Union[int, float]
    concurrency: int

def wants_stream(stream_param: Optional[str], accept: Optional[str]) -> bool:
    return stream_param == "1" or "text/event-stream" in (accept or "")

def parse_fetch_request(body: Any) -> FetchRequest:
    """
    Build a FetchRequest from a decoded JSON body.

    Non-string entries in `urls` are dropped; an empty list is rejected.
    timeoutMs and concurrency fall back to defaults when not numbers and are
    clamped to the configured bounds. Concurrency never exceeds the URL count.
    """
    options: Dict[str, Any] = body if isinstance(body, dict) else {}

    urls_raw = options.get("urls")
    urls = [u for u in urls_raw if isinstance(u, str)] if isinstance(urls_raw, list) else []
    if not urls:
        raise InvalidFetchRequest(MISSING_URLS_ERROR)

    timeout_ms = clamp_number(
        options.get("timeoutMs"),
        settings.OPENAPI_FETCH_DEFAULT_TIMEOUT_MS,
        settings.OPENAPI_FETCH_MIN_TIMEOUT_MS,
        settings.OPENAPI_FETCH_MAX_TIMEOUT_MS
    )
    concurrency = clamp_int(
        options.get("concurrency"),
        settings.OPENAPI_FETCH_DEFAULT_CONCURRENCY,
        1,
        settings.OPENAPI_FETCH_MAX_CONCURRENCY
    )

    return FetchRequest(urls=urls, timeout_ms=timeout_ms, concurrency=min(concurrency, len(urls)))

async def run_buffered(request: FetchRequest) -> Dict[str, Any]:
    results = await batch.fetch_all_with_concurrency(
        request.urls,
        request.timeout_ms,
        request.concurrency
    )
    ok_count = sum(1 for r in results if r is not None and r.ok)
    print(f"OPENAPI-FETCH DONE: {ok_count}/{len(results)} ok")

    response = FetchBatchResponse(
        results=[r.to_dict() for r in results if r is not None],
        count=len(results),
        timeoutMs=request.timeout_ms,
        concurrency=request.concurrency
    )
    return response.model_dump()

def sse_event(event: str, data: Any) -> str:
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"

async def stream_events(request: FetchRequest) -> AsyncIterator[str]:
    """
    Yield SSE frames: a keep-alive comment, `meta`, one `result` per URL in
    completion order, then `done` (or `error` if the batch runner raised).

    Closing the generator early (client went away) sets the shared cancel
    event so workers stop claiming URLs and in-flight requests abort.
    """
    cancel = asyncio.Event()
    queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()

    def on_result(result: FetchResult, index: int):
        queue.put_nowait(sse_event("result", result.to_dict()))

    async def run():
        try:
            await batch.fetch_all_with_concurrency(
                request.urls,
                request.timeout_ms,
                request.concurrency,
                cancel=cancel,
                on_result=on_result
            )
            queue.put_nowait(sse_event("done", {}))
        except Exception as e:
            print(f"OPENAPI-FETCH STREAM ERROR: {e}")
            queue.put_nowait(sse_event("error", {"error": str(e) or type(e).__name__}))
        finally:
            queue.put_nowait(None)

    yield STREAM_COMMENT
    yield sse_event("meta", {
        "total": len(request.urls),
        "timeoutMs": request.timeout_ms,
        "concurrency": request.concurrency
    })

    task = asyncio.ensure_future(run())
    _stream_tasks.add(task)
    task.add_done_callback(_stream_tasks.discard)

    try:
        while True:
            frame = await queue.get()
            if frame is None:
                break
            yield frame
    finally:
        if not task.done():
            print("OPENAPI-FETCH STREAM CANCELLED by client")
            cancel.set()
