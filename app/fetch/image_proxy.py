from dataclasses import dataclass
from app.core.config import settings
from app.fetch import http_client

DEFAULT_IMAGE_TYPE = "image/jpeg"

@dataclass
class ProxiedImage:
    status_code: int
    content: bytes
    content_type: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

def is_proxyable_url(url: str) -> bool:
    return bool(url) and url.startswith(("http://", "https://"))

async def fetch_image(url: str) -> ProxiedImage:
    """
    Fetch an image server-side so the browser can embed it without CORS issues.
    Transport errors propagate to the caller.
    """
    async with http_client.create_client(
        timeout=settings.REQUEST_TIMEOUT,
        headers={"User-Agent": settings.IMAGE_PROXY_USER_AGENT}
    ) as client:
        response = await client.get(url)
        content_type = response.headers.get("content-type") or DEFAULT_IMAGE_TYPE
        return ProxiedImage(
            status_code=response.status_code,
            content=response.content,
            content_type=content_type
        )
