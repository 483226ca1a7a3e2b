"""Candidatos de endpoint y operaciones lógicas.

Un `Operation` es una lista ordenada e inmutable de `EndpointCandidate`
(protocolo + path + método). Se configuran una vez al importar y no se mutan.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class WireProtocol(str, Enum):
    """Generación de protocolo del backend."""

    FORM_ENCODED = "form"  # legacy (REST1): POST x-www-form-urlencoded
    JSON = "json"  # actual (V3): GET con query string o POST con JSON


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class EndpointCandidate:
    protocol: WireProtocol
    path: str
    method: HttpMethod = HttpMethod.POST

    def render_path(self, path_params: dict[str, Any] | None = None) -> str:
        path = self.path.format(**path_params) if path_params else self.path
        return path if path.startswith("/") else "/" + path

    def describe(self) -> str:
        return f"{self.protocol.value}:{self.method.value} {self.path}"


@dataclass(frozen=True)
class Operation:
    """Operación lógica con su cascada de candidatos.

    - `require_data`: un candidato legacy (formulario) solo gana si su cuerpo
      normaliza a un envelope exitoso con datos; si no, sigue con el
      siguiente. Los candidatos JSON se devuelven tal cual.
    - `recover_nested_data`: ante fallo de parseo, busca una propiedad `data`
      anidada en el JSON crudo (operaciones que devuelven listas).
    """

    name: str
    candidates: tuple[EndpointCandidate, ...]
    require_data: bool = False
    recover_nested_data: bool = False


def form(*paths: str) -> tuple[EndpointCandidate, ...]:
    return tuple(EndpointCandidate(WireProtocol.FORM_ENCODED, p, HttpMethod.POST) for p in paths)


def json_get(*paths: str) -> tuple[EndpointCandidate, ...]:
    return tuple(EndpointCandidate(WireProtocol.JSON, p, HttpMethod.GET) for p in paths)


def json_post(*paths: str) -> tuple[EndpointCandidate, ...]:
    return tuple(EndpointCandidate(WireProtocol.JSON, p, HttpMethod.POST) for p in paths)
