"""Contrato de transportes HTTP.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el resolver se pruebe con transportes falsos en memoria, sin
  acoplar el Core a httpx.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from core.domain.endpoints import EndpointCandidate


@dataclass(frozen=True)
class TransportResult:
    """Resultado de un único intento HTTP.

    `success` exige ausencia de excepción y status 2xx. Un fallo de red se
    representa como `(False, "", 0)`.
    """

    success: bool
    body: str
    status_code: int

    @classmethod
    def failed(cls) -> "TransportResult":
        return cls(success=False, body="", status_code=0)


@runtime_checkable
class Transport(Protocol):
    """Contrato mínimo de un adaptador de protocolo.

    Reglas de diseño:
    - `send` es asíncrono porque hace I/O.
    - Nunca lanza por errores de red: los convierte en `TransportResult.failed()`.
    """

    async def send(
        self,
        candidate: EndpointCandidate,
        payload: Any = None,
        *,
        path_params: dict[str, Any] | None = None,
    ) -> TransportResult:
        ...
