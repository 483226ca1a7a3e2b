"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2 y
  dataclasses inmutables para la configuración de endpoints).
- El dominio no conoce HTTP ni CLI: solo conceptos del problema.
"""
