"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Facilita la normalización de respuestas heterogéneas: el backend devuelve
  los mismos objetos con `ProductCode`, `productCode` o `productcode` según el
  endpoint que contesta.

Nota:
- El backend devuelve casi todo como strings (precios, stock, ids). Los
  modelos conservan strings y convierten números entrantes a texto.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_pascal
from pydantic.config import ConfigDict

_TRUTHY_FLAGS = {"1", "true", "yes"}


class BackendModel(BaseModel):
    """Base de los objetos de negocio.

    - Alias en PascalCase (forma legacy del backend).
    - Nombres de campo entrantes tolerantes a mayúsculas/minúsculas.
    - Campos desconocidos se ignoran.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        lookup: dict[str, str] = {}
        list_fields: set[str] = set()
        for name, field in cls.model_fields.items():
            lookup[name.lower()] = name
            if field.default_factory is list:
                list_fields.add(name)
            if field.alias:
                lookup[field.alias.lower()] = name

        out: dict[str, Any] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            target = lookup.get(key.lower())
            if target is None:
                continue
            # Listas en null (hijos, detalles de pedido) quedan vacías.
            if value is None and target in list_fields:
                continue
            # Ante claves duplicadas en distinto case, gana la primera con valor.
            if out.get(target) is None:
                out[target] = value
        return out


class ProductImage(BackendModel):
    """Imagen de producto; se asocia al producto por código, no por referencia."""

    id: str | None = None
    image_url: str | None = None
    thumbnail_url: str | None = None
    image: str | None = None
    thumbnail: str | None = None
    is_primary: str | None = None
    is_main: str | None = None

    def is_primary_image(self) -> bool:
        flags = (self.is_primary, self.is_main)
        return any(isinstance(f, str) and f.strip().lower() in _TRUTHY_FLAGS for f in flags)

    @property
    def preferred_url(self) -> str | None:
        return self.image_url or self.image

    @property
    def preferred_thumbnail(self) -> str | None:
        return self.thumbnail_url or self.thumbnail or self.image_url


class Product(BackendModel):
    product_code: str | None = None
    product_name: str | None = None
    default_category_code: str | None = None
    stock: str | None = None
    selling_price: str | None = None
    is_active: str | None = None
    stock_unit: str | None = None
    brand: str | None = None
    vat: str | None = None
    currency: str | None = None
    buying_price: str | None = None
    short_description: str | None = None
    price: str | None = None

    # Enriquecimiento (consulta enriquecida); el backend no los envía.
    category_name: str | None = None
    category_path: list[str] = Field(default_factory=list)
    images: list[ProductImage] = Field(default_factory=list)
    image_url: str | None = None
    thumbnail_url: str | None = None


class CategoryNode(BackendModel):
    """Nodo del árbol de categorías.

    `path` queda en `None` hasta que corre el etiquetado (breadcrumb
    "Padre > Hijo > Nieto").
    """

    code: str | None = Field(default=None, alias="CategoryCode")
    name: str | None = Field(default=None, alias="CategoryName")
    parent_code: str | None = Field(default=None, alias="ParentCategoryCode")
    is_active: str | None = Field(default=None, alias="IsActive")
    children: list[CategoryNode] = Field(default_factory=list, alias="Children")
    path: str | None = Field(default=None, alias="Path")

    @property
    def display_name(self) -> str:
        return self.name or self.code or "Unknown"


class Customer(BackendModel):
    customer_id: str | None = None
    customer_code: str | None = None
    customer_name: str | None = None
    email: str | None = None
    phone: str | None = None
    is_active: str | None = None


class OrderDetail(BackendModel):
    id: str | None = None
    order_id: str | None = None
    product_id: str | None = None
    product_code: str | None = None
    product_name: str | None = None
    quantity: str | None = None
    price: str | None = None
    total: str | None = None
    city: str | None = None
    shipping_city: str | None = None
    supply_status: str | None = None


class Order(BackendModel):
    """Pedido.

    Distintos endpoints usan distintos nombres para el mismo dato (p.ej.
    `OrderTotalPrice`, `Total`, `TotalAmount`); se conservan todos y las
    propiedades `effective_*` resuelven el primero presente.
    """

    id: str | None = None
    order_id: str | None = None
    order_code: str | None = None
    status: str | None = None
    order_status: str | None = None
    order_status_id: str | None = None
    supply_status: str | None = None

    customer_id: str | None = None
    customer_code: str | None = None
    customer_name: str | None = None
    customer_username: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None

    order_date: str | None = None
    order_date_time_stamp: str | None = None
    created_date: str | None = None
    update_date: str | None = None

    shipping_city: str | None = None
    billing_city: str | None = None

    total: str | None = None
    total_amount: str | None = None
    order_total_price: str | None = None
    order_subtotal: str | None = None
    currency: str | None = None

    payment_type_id: str | None = None
    payment_type: str | None = None
    payment_type_name: str | None = None

    cargo_id: str | None = None
    cargo: str | None = None
    cargo_company_name: str | None = None
    cargo_tracking_code: str | None = None

    invoice_number: str | None = None
    waybill_number: str | None = None

    order_details: list[OrderDetail] = Field(default_factory=list)
    items: list[OrderDetail] = Field(default_factory=list)

    @property
    def effective_id(self) -> str | None:
        return self.order_id or self.id

    @property
    def effective_total(self) -> str | None:
        return self.order_total_price or self.total or self.total_amount

    @property
    def effective_status(self) -> str | None:
        return self.order_status or self.status

    @property
    def effective_email(self) -> str | None:
        return self.customer_email or self.customer_username


class OrderStatusInfo(BackendModel):
    id: str | None = None
    order_status_id: str | None = None
    name: str | None = None
    order_status_name: str | None = None
    code: str | None = None


class PaymentType(BackendModel):
    id: str | None = None
    payment_type_id: str | None = None
    name: str | None = None
    payment_type_name: str | None = None
    code: str | None = None


class CargoCompany(BackendModel):
    id: str | None = None
    cargo_company_id: str | None = None
    name: str | None = None
    cargo_company_name: str | None = None
    code: str | None = None


class CreateFailure(BaseModel):
    product_code: str | None = None
    messages: list[str] = Field(default_factory=list)


class BatchCreateSummary(BaseModel):
    """Resultado de crear varios productos uno a uno."""

    succeeded: int = 0
    failed: int = 0
    created: list[Product] = Field(default_factory=list)
    failures: list[CreateFailure] = Field(default_factory=list)
