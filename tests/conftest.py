"""Configuración de pytest para tsoft-client."""

import sys
from pathlib import Path

# Añade src/ al PYTHONPATH para permitir imports absolutos sin instalar.
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
