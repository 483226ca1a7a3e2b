"""Adaptadores de protocolo (un intento HTTP por llamada).

- `FormEncodedTransport`: generación legacy (REST1). POST
  `application/x-www-form-urlencoded`, token inyectado en el formulario y
  también en `Authorization: Bearer` y `X-Auth-Token` (el backend no es
  consistente en cuál mira).
- `JsonTransport`: generación actual (V3). GET con query string o POST con
  cuerpo JSON (camelCase, sin nulos). Solo `Authorization: Bearer`.

Ambos convierten cualquier excepción de transporte en `(False, "", 0)`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from adapters.http_client import join_url, truncate_body
from core.domain.endpoints import EndpointCandidate, HttpMethod
from core.interfaces.transport import TransportResult

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"


def to_camel_payload(value: Any) -> Any:
    """Claves a camelCase y sin `None`, recursivo sobre dicts/listas/modelos."""

    if isinstance(value, BaseModel):
        value = value.model_dump(exclude_none=True)
    if isinstance(value, Mapping):
        return {
            to_camel(str(k)): to_camel_payload(v)
            for k, v in value.items()
            if v is not None
        }
    if isinstance(value, (list, tuple)):
        return [to_camel_payload(v) for v in value if v is not None]
    return value


def _stringify(params: Mapping[str, Any] | None) -> dict[str, str]:
    if not params:
        return {}
    return {str(k): str(v) for k, v in params.items() if v is not None}


def _result_from(response: httpx.Response) -> TransportResult:
    return TransportResult(
        success=response.is_success,
        body=response.text,
        status_code=response.status_code,
    )


class FormEncodedTransport:
    """Transporte legacy (REST1)."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        token: str,
        debug: bool = False,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._token = token
        self._debug = debug

    async def send(
        self,
        candidate: EndpointCandidate,
        payload: Any = None,
        *,
        path_params: dict[str, Any] | None = None,
    ) -> TransportResult:
        url = join_url(self._base_url, candidate.render_path(path_params))
        form = _stringify(payload)
        form["token"] = self._token
        headers = {
            "Authorization": f"Bearer {self._token}",
            "X-Auth-Token": self._token,
            "Accept": "application/json, text/plain, */*",
            "Content-Type": FORM_CONTENT_TYPE,
        }

        if self._debug:
            shown = {k: ("***" if k == "token" else v) for k, v in form.items()}
            logger.debug("POST %s form=%s", url, shown)

        try:
            response = await self._client.post(url, data=form, headers=headers)
        except Exception as exc:
            logger.warning("Form POST failed: %s (%s)", candidate.path, exc)
            return TransportResult.failed()

        if self._debug:
            logger.debug("Response %s %s", response.status_code, truncate_body(response.text))
        return _result_from(response)


class JsonTransport:
    """Transporte actual (V3)."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        token: str,
        debug: bool = False,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._token = token
        self._debug = debug

    async def send(
        self,
        candidate: EndpointCandidate,
        payload: Any = None,
        *,
        path_params: dict[str, Any] | None = None,
    ) -> TransportResult:
        url = join_url(self._base_url, candidate.render_path(path_params))
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }

        try:
            if candidate.method is HttpMethod.GET:
                params = _stringify(payload)
                if self._debug:
                    logger.debug("GET %s params=%s", url, params)
                response = await self._client.get(url, params=params or None, headers=headers)
            else:
                body = json.dumps(to_camel_payload(payload or {}), ensure_ascii=False)
                if self._debug:
                    logger.debug("POST %s json=%s", url, body)
                response = await self._client.post(
                    url,
                    content=body.encode("utf-8"),
                    headers={**headers, "Content-Type": "application/json; charset=utf-8"},
                )
        except Exception as exc:
            logger.warning("JSON %s failed: %s (%s)", candidate.method.value, candidate.path, exc)
            return TransportResult.failed()

        if self._debug:
            logger.debug("Response %s %s", response.status_code, truncate_body(response.text))
        return _result_from(response)
