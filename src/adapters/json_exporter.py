"""Exportación JSON de envelopes.

Por qué JSON:
- Interoperabilidad con otras herramientas (hojas de cálculo, jq, scripts).
- Permite guardar lo que devolvió el backend sin depender de la vista.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.results import ResultEnvelope


def export_envelope_json(*, envelope: ResultEnvelope, output_path: Path) -> Path:
    """Exporta un `ResultEnvelope` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = envelope.model_dump(mode="json", exclude_none=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
