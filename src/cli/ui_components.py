"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from core.domain.models import CategoryNode, Order, Product, ProductImage
from core.domain.results import ResultEnvelope
from core.services.category_tree import count_nodes


def print_banner(console: Console) -> None:
    title = Text("tsoft-client", style="bold cyan")
    subtitle = Text("Catálogo • Pedidos • Categorías", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_failure_panel(envelope: ResultEnvelope) -> Panel:
    """Panel rojo con los mensajes de un envelope fallido."""

    body = Text()
    for message in envelope.messages:
        body.append(f"- {message}\n")
    kind = envelope.failure.value if envelope.failure else "unknown"
    return Panel(body, title=Text(f"Request failed ({kind})", style="bold red"), border_style="red")


def build_products_table(products: Iterable[Product]) -> Table:
    table = Table(title="Products")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Stock", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Image", style="dim")
    for p in products:
        category = " > ".join(p.category_path) if p.category_path else (p.default_category_code or "")
        table.add_row(
            p.product_code or "",
            p.product_name or "",
            p.selling_price or p.price or "",
            p.stock or "",
            category,
            p.thumbnail_url or "",
        )
    return table


def build_orders_table(orders: Iterable[Order]) -> Table:
    table = Table(title="Orders")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Date")
    table.add_column("Customer", style="white")
    table.add_column("Status", style="yellow")
    table.add_column("Total", style="green", justify="right")
    for o in orders:
        table.add_row(
            o.effective_id or "",
            o.order_date or "",
            o.customer_name or o.effective_email or "",
            o.effective_status or "",
            " ".join(x for x in (o.effective_total, o.currency) if x),
        )
    return table


def build_images_table(images: dict[str, list[ProductImage]]) -> Table:
    table = Table(title="Product images")
    table.add_column("Product", style="cyan", no_wrap=True)
    table.add_column("Primary", style="green")
    table.add_column("URL", style="magenta")
    for code, refs in images.items():
        for ref in refs:
            table.add_row(code, "yes" if ref.is_primary_image() else "", ref.preferred_url or "")
    return table


def build_category_tree(forest: Iterable[CategoryNode]) -> Tree:
    """Árbol Rich del bosque de categorías (recorrido iterativo)."""

    forest = list(forest)
    root = Tree(f"Categories [dim]({count_nodes(forest)})[/dim]", guide_style="dim")
    stack: list[tuple[Tree, CategoryNode]] = [(root, node) for node in reversed(forest)]
    while stack:
        parent_branch, node = stack.pop()
        branch = parent_branch.add(f"[bold]{node.display_name}[/bold] [dim]({node.code or '?'})[/dim]")
        for child in reversed(node.children):
            stack.append((branch, child))
    return root
