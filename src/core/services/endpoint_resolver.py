"""Resolución de endpoints en cascada.

Cada operación lógica tiene una lista fija y ordenada de candidatos
(protocolo + path). Se prueban estrictamente en secuencia y gana el primero
cuyo transporte reporta éxito; los siguientes no se invocan. Si todos fallan
se devuelve un único envelope de fallo con un mensaje sintético.

No hay reintentos dentro de un candidato ni memoria entre llamadas: cada
invocación empieza otra vez por el candidato 1.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core.domain.endpoints import EndpointCandidate, Operation, WireProtocol
from core.domain.results import FailureKind, ResultEnvelope, exhausted_message
from core.interfaces.transport import Transport, TransportResult
from core.services.normalizer import normalize, recover_nested_data

logger = logging.getLogger(__name__)


async def resolve(
    operation: Operation,
    target: Any,
    transports: Mapping[WireProtocol, Transport],
    *,
    payloads: Mapping[WireProtocol, Any] | None = None,
    path_params: dict[str, Any] | None = None,
) -> ResultEnvelope[Any]:
    """Ejecuta la cascada de `operation` y normaliza el cuerpo ganador a `target`.

    `payloads` se indexa por protocolo porque cada generación del backend
    espera una forma distinta (campos de formulario, query string o cuerpo
    JSON).
    """

    payloads = payloads or {}

    for index, candidate in enumerate(operation.candidates, start=1):
        transport = transports.get(candidate.protocol)
        if transport is None:
            logger.debug("No transport for %s, skipping %s", candidate.protocol.value, candidate.path)
            continue

        result = await transport.send(
            candidate,
            payloads.get(candidate.protocol),
            path_params=path_params,
        )
        if not result.success:
            logger.debug(
                "Endpoint %d/%d failed for %s: %s (status %s)",
                index,
                len(operation.candidates),
                operation.name,
                candidate.describe(),
                result.status_code,
            )
            continue

        envelope = normalize(result.body, target)
        if not envelope.success and operation.recover_nested_data:
            recovered = recover_nested_data(result.body, target)
            if recovered is not None:
                envelope = recovered

        if (
            operation.require_data
            and candidate.protocol is WireProtocol.FORM_ENCODED
            and (not envelope.success or envelope.data is None)
        ):
            logger.debug(
                "Endpoint %s answered for %s without usable data; trying next",
                candidate.describe(),
                operation.name,
            )
            continue

        logger.info("Endpoint succeeded for %s: %s", operation.name, candidate.describe())
        return envelope

    logger.error("All endpoints failed for %s", operation.name)
    return ResultEnvelope[target].fail(exhausted_message(operation.name), FailureKind.EXHAUSTED)


class EndpointResolver:
    """Envuelve `resolve` con un mapa fijo de transportes por protocolo."""

    def __init__(self, transports: Mapping[WireProtocol, Transport]) -> None:
        self._transports = dict(transports)

    async def execute(
        self,
        operation: Operation,
        target: Any,
        *,
        payloads: Mapping[WireProtocol, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> ResultEnvelope[Any]:
        return await resolve(
            operation,
            target,
            self._transports,
            payloads=payloads,
            path_params=path_params,
        )

    async def probe(
        self,
        operation: Operation,
        *,
        payloads: Mapping[WireProtocol, Any] | None = None,
        path_params: dict[str, Any] | None = None,
    ) -> list[tuple[EndpointCandidate, TransportResult]]:
        """Intenta *todos* los candidatos y devuelve cada resultado (diagnóstico)."""

        payloads = payloads or {}
        out: list[tuple[EndpointCandidate, TransportResult]] = []
        for candidate in operation.candidates:
            transport = self._transports.get(candidate.protocol)
            if transport is None:
                out.append((candidate, TransportResult.failed()))
                continue
            result = await transport.send(
                candidate,
                payloads.get(candidate.protocol),
                path_params=path_params,
            )
            out.append((candidate, result))
        return out
