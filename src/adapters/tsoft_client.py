"""Cliente T-Soft (fachada pública).

Responsabilidad:
- Construir los transportes (form legacy + JSON actual) sobre un único
  `httpx.AsyncClient`.
- Exponer una operación asíncrona por objeto de negocio, independiente de qué
  endpoint del backend terminó contestando.
- Componer operaciones: árbol de categorías con fallback y consulta de
  productos enriquecida (categoría + imagen principal).

Ninguna operación lanza por fallos del backend: todo vuelve como
`ResultEnvelope`. La única excepción pública es `ConfigurationError` al
construir el cliente sin base URL o token.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping

import httpx

from adapters import tsoft_endpoints as ops
from adapters.http_client import build_async_client
from adapters.transports import FormEncodedTransport, JsonTransport
from core.config import AppSettings
from core.domain.endpoints import WireProtocol
from core.domain.models import (
    BatchCreateSummary,
    CargoCompany,
    CategoryNode,
    CreateFailure,
    Customer,
    Order,
    OrderDetail,
    OrderStatusInfo,
    PaymentType,
    Product,
    ProductImage,
)
from core.domain.results import FailureKind, ResultEnvelope
from core.interfaces.transport import Transport
from core.services.bulk_fetch import bulk_fetch
from core.services.category_tree import (
    build_tree_from_flat,
    flatten_tree,
    label_paths,
    split_path,
)
from core.services.endpoint_resolver import EndpointResolver

logger = logging.getLogger(__name__)

CATEGORY_TREE_FAILED = "category tree failed"
DEFAULT_VAT = 18
DEFAULT_CATEGORY_ID = 1


def _category_id(category_code: str) -> int:
    """`T12` -> 12. Códigos no numéricos caen en la categoría 1."""

    stripped = category_code.lstrip("Tt")
    return int(stripped) if stripped.isdigit() else DEFAULT_CATEGORY_ID


def _vat(extra_fields: Mapping[str, str] | None) -> int:
    raw = (extra_fields or {}).get("Vat")
    if raw is None:
        return DEFAULT_VAT
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_VAT


def _with_filters(base: dict[str, Any], filters: Mapping[str, str] | None) -> dict[str, Any]:
    out = dict(base)
    if filters:
        out.update(filters)
    return out


def _apply_primary_image(product: Product, images: list[ProductImage]) -> None:
    if not images:
        return
    product.images = images
    primary = next((img for img in images if img.is_primary_image()), images[0])
    product.thumbnail_url = primary.preferred_thumbnail
    product.image_url = primary.preferred_url


class TSoftClient:
    """Implementación de `core.interfaces.catalog.CatalogGateway`.

    Uso:

        async with TSoftClient(settings) as client:
            result = await client.get_products(limit=100)

    `transports` permite inyectar transportes falsos (tests); en ese caso no
    se crea cliente HTTP.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transports: Mapping[WireProtocol, Transport] | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._http: httpx.AsyncClient | None = None
        self._owns_http = False

        if transports is None:
            base_url, token = self._settings.require_connection()
            self._http = http_client or build_async_client(self._settings)
            self._owns_http = http_client is None
            common = {"base_url": base_url, "token": token, "debug": self._settings.debug}
            transports = {
                WireProtocol.FORM_ENCODED: FormEncodedTransport(self._http, **common),
                WireProtocol.JSON: JsonTransport(self._http, **common),
            }

        self._resolver = EndpointResolver(transports)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def resolver(self) -> EndpointResolver:
        return self._resolver

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "TSoftClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---------- productos ----------

    async def get_products(
        self,
        limit: int = 50,
        page: int = 1,
        search: str | None = None,
        filters: dict[str, str] | None = None,
    ) -> ResultEnvelope[list[Product]]:
        form = _with_filters({"limit": limit}, filters)
        query: dict[str, Any] = {"page": page, "limit": limit}
        if search and search.strip():
            query["search"] = search
        query = _with_filters(query, filters)

        return await self._resolver.execute(
            ops.GET_PRODUCTS,
            list[Product],
            payloads={WireProtocol.FORM_ENCODED: form, WireProtocol.JSON: query},
        )

    async def add_product(
        self,
        code: str,
        name: str,
        category_code: str,
        price: float,
        stock: int = 0,
        extra_fields: dict[str, str] | None = None,
    ) -> ResultEnvelope[Product]:
        # API actual: cuerpo JSON (el transporte lo pasa a camelCase).
        body = {
            "name": name,
            "ws_product_code": code,
            "price_sale": float(price),
            "stock": stock,
            "vat": _vat(extra_fields),
            "visibility": True,
            "relation_hierarchy": [{"id": _category_id(category_code), "type": "category"}],
        }

        # API legacy: array JSON dentro del campo de formulario `data`.
        legacy_product = {
            "ProductCode": code,
            "ProductName": name,
            "DefaultCategoryCode": category_code,
            "SellingPrice": f"{float(price):.2f}",
            "Stock": str(stock),
            "IsActive": "1",
            **(extra_fields or {}),
        }
        form = {"data": json.dumps([legacy_product], ensure_ascii=False)}

        return await self._resolver.execute(
            ops.ADD_PRODUCT,
            Product,
            payloads={WireProtocol.JSON: body, WireProtocol.FORM_ENCODED: form},
        )

    async def create_products(self, products: list[Product]) -> ResultEnvelope[BatchCreateSummary]:
        """Da de alta varios productos, uno a uno y en orden.

        El envelope es exitoso si el lote se ejecutó; los fallos individuales
        van en `data.failures` y se repiten en `messages`.
        """

        summary = BatchCreateSummary()
        messages: list[str] = []
        for product in products:
            result = await self.add_product(
                product.product_code or "",
                product.product_name or "",
                product.default_category_code or "T1",
                _parse_float(product.selling_price or product.price),
                _parse_int(product.stock),
            )
            if result.success and result.data is not None:
                summary.created.append(result.data)
            else:
                summary.failures.append(
                    CreateFailure(product_code=product.product_code, messages=result.messages)
                )
                messages.append(f"{product.product_code}: {result.first_message}")

        summary.succeeded = len(summary.created)
        summary.failed = len(summary.failures)
        return ResultEnvelope[BatchCreateSummary].ok(summary, messages)

    async def get_product_images(self, product_code: str) -> ResultEnvelope[list[ProductImage]]:
        """Imágenes de un producto. Si ningún endpoint contesta, lista vacía."""

        result = await self._resolver.execute(
            ops.GET_PRODUCT_IMAGES,
            list[ProductImage],
            payloads={WireProtocol.FORM_ENCODED: {"ProductCode": product_code}},
        )
        if result.failure is FailureKind.EXHAUSTED:
            logger.debug("Product images not available for %s", product_code)
            return ResultEnvelope[list[ProductImage]].ok([])
        return result

    async def get_bulk_product_images(
        self,
        product_codes: list[str],
        max_concurrency: int | None = None,
    ) -> dict[str, list[ProductImage]]:
        return await bulk_fetch(
            product_codes,
            self.get_product_images,
            max_concurrency=max_concurrency or self._settings.bulk_max_concurrency,
        )

    async def get_enhanced_products(
        self,
        limit: int = 50,
        page: int = 1,
        include_images: bool = True,
    ) -> ResultEnvelope[list[Product]]:
        """Productos con nombre/ruta de categoría y, en la página 1, imagen principal.

        Las imágenes se limitan a los primeros `enhanced_image_limit`
        productos para no saturar el backend.
        """

        products_result, tree_result = await asyncio.gather(
            self.get_products(limit=limit, page=page),
            self.get_category_tree(),
        )
        if not products_result.success or products_result.data is None:
            return products_result

        products = products_result.data
        index = flatten_tree(tree_result.data) if tree_result.success and tree_result.data else {}
        for product in products:
            node = index.get(product.default_category_code or "")
            if node is not None:
                product.category_name = node.name
                product.category_path = split_path(node.path)

        if include_images and page == 1 and products:
            head = products[: self._settings.enhanced_image_limit]
            codes = [p.product_code for p in head if p.product_code]
            logger.info("Fetching images for %d products", len(codes))
            images = await self.get_bulk_product_images(
                codes,
                max_concurrency=self._settings.enhanced_image_concurrency,
            )
            for product in head:
                if product.product_code:
                    _apply_primary_image(product, images.get(product.product_code, []))

        return ResultEnvelope[list[Product]].ok(products, products_result.messages)

    # ---------- categorías ----------

    async def get_categories(self) -> ResultEnvelope[list[CategoryNode]]:
        return await self._resolver.execute(ops.GET_CATEGORIES, list[CategoryNode])

    async def get_category_tree(self) -> ResultEnvelope[list[CategoryNode]]:
        """Bosque de categorías con breadcrumbs.

        Primero el endpoint de árbol; si no da datos, se arma desde la lista
        plana. En ambos casos corre un único pase de etiquetado.
        """

        direct = await self._resolver.execute(ops.GET_CATEGORY_TREE, list[CategoryNode])
        if direct.success and direct.data is not None:
            label_paths(direct.data)
            return direct

        logger.info("Category tree not available, building from flat list")
        flat = await self.get_categories()
        if flat.success and flat.data is not None:
            forest = build_tree_from_flat(flat.data)
            label_paths(forest)
            return ResultEnvelope[list[CategoryNode]].ok(forest)

        return ResultEnvelope[list[CategoryNode]].fail(CATEGORY_TREE_FAILED, FailureKind.EXHAUSTED)

    # ---------- clientes ----------

    async def get_customers(
        self,
        limit: int = 50,
        filters: dict[str, str] | None = None,
    ) -> ResultEnvelope[list[Customer]]:
        params = _with_filters({"limit": limit}, filters)
        return await self._resolver.execute(
            ops.GET_CUSTOMERS,
            list[Customer],
            payloads={WireProtocol.FORM_ENCODED: params, WireProtocol.JSON: params},
        )

    async def get_customer_by_id(self, customer_id: int) -> ResultEnvelope[Customer]:
        form = {"CustomerId": customer_id, "customerId": customer_id, "Id": customer_id}
        return await self._resolver.execute(
            ops.GET_CUSTOMER_BY_ID,
            Customer,
            payloads={WireProtocol.FORM_ENCODED: form},
            path_params={"customer_id": customer_id},
        )

    # ---------- pedidos ----------

    async def get_orders(
        self,
        limit: int = 50,
        filters: dict[str, str] | None = None,
    ) -> ResultEnvelope[list[Order]]:
        params = _with_filters({"limit": limit}, filters)
        return await self._resolver.execute(
            ops.GET_ORDERS,
            list[Order],
            payloads={WireProtocol.FORM_ENCODED: params, WireProtocol.JSON: params},
        )

    async def get_order_details(self, order_id: int) -> ResultEnvelope[list[OrderDetail]]:
        form = {"OrderId": order_id, "orderId": order_id}
        result = await self._resolver.execute(
            ops.GET_ORDER_DETAILS,
            list[OrderDetail],
            payloads={WireProtocol.FORM_ENCODED: form},
            path_params={"order_id": order_id},
        )
        if not result.success:
            logger.warning(
                "Order detail endpoints failed for order %s; the token may lack 'order/details' permission",
                order_id,
            )
        return result

    async def get_payment_types(self) -> ResultEnvelope[list[PaymentType]]:
        return await self._resolver.execute(ops.GET_PAYMENT_TYPES, list[PaymentType])

    async def get_cargo_companies(self) -> ResultEnvelope[list[CargoCompany]]:
        return await self._resolver.execute(ops.GET_CARGO_COMPANIES, list[CargoCompany])

    async def get_order_statuses(self) -> ResultEnvelope[list[OrderStatusInfo]]:
        return await self._resolver.execute(ops.GET_ORDER_STATUSES, list[OrderStatusInfo])


def _parse_float(value: str | None) -> float:
    try:
        return float(value) if value else 0.0
    except ValueError:
        return 0.0


def _parse_int(value: str | None) -> int:
    try:
        return int(value) if value else 0
    except ValueError:
        return 0
