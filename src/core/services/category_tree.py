"""Reconciliación del árbol de categorías.

El backend a veces expone un endpoint de árbol y a veces solo la lista plana
con `ParentCategoryCode`. Este módulo arma el bosque a partir de la lista
plana y etiqueta cada nodo con su breadcrumb ("A > B > C").

Construcción en dos fases: primero el índice código->nodo completo, después
un único pase que cuelga cada nodo de su padre. Nunca se resuelven padres de
forma recursiva. Si los datos traen un ciclo, los nodos del ciclo quedan
fuera de cualquier raíz y sin etiquetar (no se detecta explícitamente).
"""

from __future__ import annotations

from typing import Iterable

from core.domain.models import CategoryNode

PATH_SEPARATOR = " > "


def build_tree_from_flat(categories: Iterable[CategoryNode]) -> list[CategoryNode]:
    """Convierte una lista plana en bosque. No descarta ningún nodo.

    - padre vacío, inexistente o el propio nodo -> raíz adicional;
    - códigos duplicados: el índice se queda con la última aparición, pero
      cada nodo se coloca exactamente una vez.
    """

    nodes = list(categories)
    for node in nodes:
        node.children = []

    index: dict[str, CategoryNode] = {}
    for node in nodes:
        if node.code:
            index[node.code] = node

    roots: list[CategoryNode] = []
    for node in nodes:
        parent = index.get(node.parent_code) if node.parent_code else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
    return roots


def label_paths(forest: Iterable[CategoryNode]) -> None:
    """Asigna `path` en profundidad. Iterativo para no depender del límite de recursión."""

    stack: list[tuple[CategoryNode, str | None]] = [(root, None) for root in reversed(list(forest))]
    while stack:
        node, parent_path = stack.pop()
        node.path = node.display_name if parent_path is None else f"{parent_path}{PATH_SEPARATOR}{node.display_name}"
        for child in reversed(node.children):
            stack.append((child, node.path))


def flatten_tree(forest: Iterable[CategoryNode]) -> dict[str, CategoryNode]:
    """Índice código->nodo de todo el bosque (para búsquedas rápidas)."""

    out: dict[str, CategoryNode] = {}
    stack = list(forest)
    while stack:
        node = stack.pop()
        if node.code:
            out[node.code] = node
        stack.extend(node.children)
    return out


def count_nodes(forest: Iterable[CategoryNode]) -> int:
    total = 0
    stack = list(forest)
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(node.children)
    return total


def split_path(path: str | None) -> list[str]:
    if not path:
        return []
    return path.split(PATH_SEPARATOR)
