"""Registro estático de cascadas por operación.

El orden importa: en general los endpoints legacy (form) van antes que los
actuales (JSON) porque son los más maduros en el backend. La excepción es el
alta de productos, donde la API actual se prueba primero.
"""

from __future__ import annotations

from core.domain.endpoints import Operation, form, json_get, json_post

GET_PRODUCTS = Operation(
    name="products",
    candidates=(
        *form("/product/getProducts", "/product/get", "/products/get"),
        *json_get("/catalog/products", "/api/v3/catalog/products"),
    ),
    recover_nested_data=True,
)

ADD_PRODUCT = Operation(
    name="product creation",
    candidates=(
        *json_post("/catalog/products", "/api/v3/catalog/products"),
        *form("/product/createProducts", "/product/create", "/product/add"),
    ),
)

GET_CATEGORIES = Operation(
    name="categories",
    candidates=(
        *form("/category/getCategories", "/category/get", "/categories/get"),
        *json_get("/catalog/categories", "/api/v3/catalog/categories"),
    ),
    recover_nested_data=True,
)

GET_CATEGORY_TREE = Operation(
    name="category tree",
    candidates=form("/category/getCategoryTree"),
)

GET_CUSTOMERS = Operation(
    name="customers",
    candidates=(
        *form("/customer/getCustomers", "/customer/get", "/customers/get"),
        *json_get("/customers", "/api/v3/customers"),
    ),
    recover_nested_data=True,
)

GET_CUSTOMER_BY_ID = Operation(
    name="customer",
    candidates=(
        *form("/customer/getCustomerById", "/customer/get", "/customers/get"),
        *json_get("/customers/{customer_id}", "/api/v3/customers/{customer_id}"),
    ),
)

GET_ORDERS = Operation(
    name="orders",
    candidates=(
        *form("/order/getOrders", "/order/get", "/orders/get"),
        *json_get("/orders", "/api/v3/orders"),
    ),
    recover_nested_data=True,
)

# Requiere permiso "order/details" en el token; sin él los endpoints legacy
# contestan 200 con success=false, por eso se exige data en ellos.
GET_ORDER_DETAILS = Operation(
    name="order details",
    candidates=(
        *form(
            "/order/getOrderDetailsByOrderId",
            "/order/getOrderDetails",
            "/order/details",
            "/orders/details",
        ),
        *json_get("/orders/{order_id}/details", "/api/v3/orders/{order_id}/details"),
    ),
    require_data=True,
    recover_nested_data=True,
)

GET_PAYMENT_TYPES = Operation(
    name="payment types",
    candidates=(
        *form("/order/getPaymentTypeList", "/payment/getTypes", "/paymenttype/get"),
        *json_get("/payment-types", "/api/v3/payment-types"),
    ),
    recover_nested_data=True,
)

GET_CARGO_COMPANIES = Operation(
    name="cargo companies",
    candidates=(
        *form("/order/getCargoCompanyList", "/cargo/getCompanies", "/cargocompany/get"),
        *json_get("/cargo-companies", "/api/v3/cargo-companies"),
    ),
    recover_nested_data=True,
)

GET_ORDER_STATUSES = Operation(
    name="order statuses",
    candidates=(
        *form("/order/getOrderStatusList", "/orderstatus/get", "/order/statuses"),
        *json_get("/order-statuses", "/api/v3/order-statuses"),
    ),
    recover_nested_data=True,
)

GET_PRODUCT_IMAGES = Operation(
    name="product images",
    candidates=form("/product/getProductImages"),
    recover_nested_data=True,
)

ALL_OPERATIONS: tuple[Operation, ...] = (
    GET_PRODUCTS,
    ADD_PRODUCT,
    GET_CATEGORIES,
    GET_CATEGORY_TREE,
    GET_CUSTOMERS,
    GET_CUSTOMER_BY_ID,
    GET_ORDERS,
    GET_ORDER_DETAILS,
    GET_PAYMENT_TYPES,
    GET_CARGO_COMPANIES,
    GET_ORDER_STATUSES,
    GET_PRODUCT_IMAGES,
)
