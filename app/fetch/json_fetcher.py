"""
Fetch a single URL and classify the outcome as a FetchResult.

fetch_json never raises: invalid input, HTTP errors, non-JSON bodies, timeouts
and transport failures all come back as failure results.
"""

import asyncio
import json
from typing import Optional, Tuple
import httpx
from app.core.config import settings
from app.fetch.base import FetchResult
from app.fetch.utils import extract_html_title

TIMEOUT_ERROR = "Timeout"
NOT_JSON_ERROR = "Response is not valid JSON"

JSON_ACCEPT = "application/json, text/json, */*"

def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")

def parse_json_body(text: str):
    """
    Strict JSON parse of a response body after dropping a leading BOM.

    Raises ValueError for invalid JSON and RecursionError for pathologically
    deep nesting.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    return json.loads(text.strip(), parse_constant=_reject_constant)

def validate_url(url: str) -> Tuple[Optional[httpx.URL], Optional[str]]:
    """Return (parsed_url, None) for a usable http(s) URL, else (None, error)."""
    candidate = url.strip()
    if not candidate:
        return None, "Empty url"

    try:
        parsed = httpx.URL(candidate)
    except (httpx.InvalidURL, ValueError, TypeError):
        return None, "Invalid url"

    if not parsed.scheme:
        return None, "Invalid url"
    if parsed.scheme not in ("http", "https"):
        return None, "Only http/https are supported"
    if not parsed.host:
        return None, "Invalid url"

    return parsed, None

async def _get_text(client: httpx.AsyncClient, url: httpx.URL) -> Tuple[int, bool, str]:
    response = await client.get(
        url,
        headers={"Accept": JSON_ACCEPT, "User-Agent": settings.FETCH_USER_AGENT},
        follow_redirects=True
    )
    return response.status_code, response.is_success, response.text

async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    timeout_ms: float,
    cancel: Optional[asyncio.Event] = None
) -> FetchResult:
    """
    Fetch `url` and parse it as JSON.

    The request is raced against `timeout_ms` and, when given, the shared
    `cancel` event; whichever fires first aborts the request and yields a
    "Timeout" failure without a status.
    """
    parsed, error = validate_url(url)
    if error:
        return FetchResult.failure(url, error)

    if cancel is not None and cancel.is_set():
        return FetchResult.failure(url, TIMEOUT_ERROR)

    request_task = asyncio.ensure_future(_get_text(client, parsed))
    cancel_task = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
    waiters = {request_task} if cancel_task is None else {request_task, cancel_task}

    try:
        await asyncio.wait(
            waiters,
            timeout=timeout_ms / 1000,
            return_when=asyncio.FIRST_COMPLETED
        )

        if not request_task.done():
            request_task.cancel()
            await asyncio.gather(request_task, return_exceptions=True)
            return FetchResult.failure(url, TIMEOUT_ERROR)

        status, is_success, text = request_task.result()
    except httpx.TimeoutException:
        return FetchResult.failure(url, TIMEOUT_ERROR)
    except Exception as e:
        return FetchResult.failure(url, str(e) or type(e).__name__)
    finally:
        if not request_task.done():
            request_task.cancel()
        if cancel_task is not None and not cancel_task.done():
            cancel_task.cancel()

    if not is_success:
        return FetchResult.failure(
            url,
            f"HTTP {status}",
            status=status,
            title=extract_html_title(text)
        )

    try:
        return FetchResult.success(url, status, parse_json_body(text))
    except (ValueError, RecursionError):
        return FetchResult.failure(
            url,
            NOT_JSON_ERROR,
            status=status,
            title=extract_html_title(text)
        )
