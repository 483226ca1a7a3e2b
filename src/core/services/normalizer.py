"""Normalización de cuerpos de respuesta.

Los endpoints del backend devuelven, según versión y humor, un envelope
`{success, data, message}` o directamente el valor (lista u objeto). Este
módulo convierte cualquiera de las dos formas en un `ResultEnvelope[T]`.

Cascada:
1. cuerpo vacío/blanco -> fallo "empty response";
2. objeto con clave `success` (sin importar mayúsculas) que valida como
   envelope -> se devuelve tal cual;
3. valor que valida directamente como `T` -> éxito sin mensajes;
4. si no -> fallo "failed to parse response".

`recover_nested_data` es una vía de rescate aparte (best-effort) para
operaciones de listas.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Iterator

from pydantic import TypeAdapter, ValidationError

from core.domain.results import (
    EMPTY_RESPONSE,
    PARSE_FAILED,
    FailureKind,
    ResultEnvelope,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _looks_wrapped(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    return any(isinstance(k, str) and k.lower() == "success" for k in value)


def normalize(raw: str | None, target: Any) -> ResultEnvelope[Any]:
    """Convierte `raw` en `ResultEnvelope[target]`. Nunca lanza."""

    envelope_type = ResultEnvelope[target]

    if raw is None or not raw.strip():
        return envelope_type.fail(EMPTY_RESPONSE, FailureKind.PARSE)

    try:
        value = json.loads(raw)
    except ValueError:
        logger.debug("Response body is not JSON (%d chars)", len(raw))
        return envelope_type.fail(PARSE_FAILED, FailureKind.PARSE)

    if _looks_wrapped(value):
        try:
            return envelope_type.model_validate(value)
        except ValidationError as exc:
            logger.debug("Wrapped shape rejected: %s", exc.error_count())

    try:
        data = _adapter(target).validate_python(value)
    except ValidationError:
        return envelope_type.fail(PARSE_FAILED, FailureKind.PARSE)

    return envelope_type.ok(data)


def _iter_data_properties(node: Any) -> Iterator[Any]:
    """Recorre el árbol JSON en profundidad y produce cada valor bajo `data`."""

    if isinstance(node, dict):
        for key, value in node.items():
            if isinstance(key, str) and key.lower() == "data":
                yield value
            yield from _iter_data_properties(value)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_data_properties(item)


def recover_nested_data(raw: str | None, target: Any) -> ResultEnvelope[Any] | None:
    """Busca una propiedad `data` anidada que valide como `target` (lista).

    Devuelve `None` si no encuentra nada utilizable; solo acepta listas no
    vacías para no confundir un `data: []` accesorio con el resultado.
    """

    if raw is None or not raw.strip():
        return None
    try:
        tree = json.loads(raw)
    except ValueError:
        return None

    adapter = _adapter(target)
    for candidate in _iter_data_properties(tree):
        try:
            data = adapter.validate_python(candidate)
        except ValidationError:
            continue
        if data:
            logger.info("Recovered %d item(s) from nested 'data' property", len(data))
            return ResultEnvelope[target].ok(data)
    return None
