"""Contrato que consumen las capas de presentación (dashboard, CLI).

Cada operación devuelve un `ResultEnvelope`; ninguna lanza por fallos del
backend. La cancelación es la nativa de asyncio (cancelar la task).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import (
    BatchCreateSummary,
    CargoCompany,
    CategoryNode,
    Customer,
    Order,
    OrderDetail,
    OrderStatusInfo,
    PaymentType,
    Product,
    ProductImage,
)
from core.domain.results import ResultEnvelope


@runtime_checkable
class CatalogGateway(Protocol):
    async def get_products(
        self,
        limit: int = 50,
        page: int = 1,
        search: str | None = None,
        filters: dict[str, str] | None = None,
    ) -> ResultEnvelope[list[Product]]: ...

    async def get_enhanced_products(
        self,
        limit: int = 50,
        page: int = 1,
        include_images: bool = True,
    ) -> ResultEnvelope[list[Product]]: ...

    async def add_product(
        self,
        code: str,
        name: str,
        category_code: str,
        price: float,
        stock: int = 0,
        extra_fields: dict[str, str] | None = None,
    ) -> ResultEnvelope[Product]: ...

    async def create_products(self, products: list[Product]) -> ResultEnvelope[BatchCreateSummary]: ...

    async def get_categories(self) -> ResultEnvelope[list[CategoryNode]]: ...

    async def get_category_tree(self) -> ResultEnvelope[list[CategoryNode]]: ...

    async def get_customers(
        self, limit: int = 50, filters: dict[str, str] | None = None
    ) -> ResultEnvelope[list[Customer]]: ...

    async def get_customer_by_id(self, customer_id: int) -> ResultEnvelope[Customer]: ...

    async def get_orders(
        self, limit: int = 50, filters: dict[str, str] | None = None
    ) -> ResultEnvelope[list[Order]]: ...

    async def get_order_details(self, order_id: int) -> ResultEnvelope[list[OrderDetail]]: ...

    async def get_payment_types(self) -> ResultEnvelope[list[PaymentType]]: ...

    async def get_cargo_companies(self) -> ResultEnvelope[list[CargoCompany]]: ...

    async def get_order_statuses(self) -> ResultEnvelope[list[OrderStatusInfo]]: ...

    async def get_product_images(self, product_code: str) -> ResultEnvelope[list[ProductImage]]: ...

    async def get_bulk_product_images(
        self, product_codes: list[str], max_concurrency: int | None = None
    ) -> dict[str, list[ProductImage]]: ...
