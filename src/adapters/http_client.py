"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y base URL para ambos transportes.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que ambos protocolos se comporten igual.
    - Un único pool de conexiones por cliente T-Soft.
    """

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def join_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + (path if path.startswith("/") else "/" + path)


def truncate_body(body: str, limit: int = 500) -> str:
    if len(body) <= limit:
        return body
    return body[:limit] + "..."
