import httpx
from typing import Dict, Optional

def create_client(
    timeout: Optional[float] = None,
    headers: Optional[Dict[str, str]] = None,
    max_connections: Optional[int] = None
) -> httpx.AsyncClient:
    """
    Build the async HTTP client used for every outbound request.
    Tests patch this function to plug in an httpx.MockTransport.
    """
    limits = httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=max_connections
    )
    return httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        follow_redirects=True,
        limits=limits
    )
