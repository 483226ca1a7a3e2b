"""Sub-fetch masivo con concurrencia acotada.

Contrato:
- como mucho `max_concurrency` fetches en vuelo (semáforo; cola sin límite);
- el hueco del semáforo se libera en toda salida (`async with`);
- un fallo por clave se traga y la clave se omite del resultado, sin
  reintentos ni abortar el lote;
- se devuelve solo cuando todas las claves terminaron.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Hashable, Iterable, TypeVar

from core.domain.results import ResultEnvelope

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


async def bulk_fetch(
    keys: Iterable[K],
    fetch_one: Callable[[K], Awaitable[ResultEnvelope[V]]],
    *,
    max_concurrency: int = 5,
) -> dict[K, V]:
    sem = asyncio.Semaphore(max(1, max_concurrency))
    lock = asyncio.Lock()
    result: dict[K, V] = {}

    async def fetch_into(key: K) -> None:
        async with sem:
            try:
                envelope = await fetch_one(key)
            except Exception as exc:
                logger.debug("Bulk fetch failed for %r: %s", key, exc)
                return
        if not envelope.success or envelope.data is None:
            logger.debug("Bulk fetch returned no data for %r: %s", key, envelope.first_message)
            return
        async with lock:
            result[key] = envelope.data

    # Claves repetidas se piden una sola vez.
    await asyncio.gather(*(fetch_into(key) for key in dict.fromkeys(keys)))
    return result
