import logging
from typing import Optional

import httpx

log = logging.getLogger("mapweather.http")

# Global HTTP client instance
client: Optional[httpx.AsyncClient] = None

async def init_http(transport: Optional[httpx.AsyncBaseTransport] = None):
    """Initialize the global HTTP client.

    ``transport`` replaces the network layer (tests pass an ``httpx.MockTransport``).
    """
    global client

    try:
        import h2  # noqa: F401
        http2_available = True
    except ImportError:
        http2_available = False
        log.debug("HTTP/2 not available. Install with: pip install httpx[http2]")

    # Single attempt per call; these are the only timeouts applied
    timeout_config = httpx.Timeout(
        connect=10.0,
        read=20.0,
        write=10.0,
        pool=30.0
    )

    client = httpx.AsyncClient(
        timeout=timeout_config,
        http2=http2_available,
        transport=transport,
        limits=httpx.Limits(
            max_keepalive_connections=10,
            max_connections=20,
            keepalive_expiry=30
        ),
        headers={
            "Accept": "application/json",
            "User-Agent": "MapWeather/1.0"
        },
    )

async def close_http():
    """Close the global HTTP client."""
    global client
    if client:
        await client.aclose()
        client = None

def get_http_client() -> httpx.AsyncClient:
    """Get the global HTTP client instance."""
    if client is None:
        raise RuntimeError("HTTP client not initialized. Call init_http() first.")
    return client
