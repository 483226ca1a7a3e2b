"""Tests de la cascada de endpoints con transportes falsos."""

import pytest

from core.domain.endpoints import Operation, WireProtocol, form, json_get
from core.domain.models import OrderDetail, Product
from core.domain.results import FailureKind
from core.services.endpoint_resolver import EndpointResolver, resolve
from fakes import FakeTransport, http_error, ok

OPERATION = Operation(
    name="products",
    candidates=(
        *form("/product/getProducts", "/product/get"),
        *json_get("/catalog/products", "/api/v3/catalog/products"),
    ),
)


def _transports(legacy: FakeTransport, current: FakeTransport) -> dict:
    return {WireProtocol.FORM_ENCODED: legacy, WireProtocol.JSON: current}


class TestResolve:
    @pytest.mark.asyncio
    async def test_all_candidates_failing_yields_single_message(self) -> None:
        legacy, current = FakeTransport(), FakeTransport()

        result = await resolve(OPERATION, list[Product], _transports(legacy, current))

        assert result.success is False
        assert result.data is None
        assert result.messages == ["all endpoints failed for products"]
        assert result.failure is FailureKind.EXHAUSTED
        assert legacy.paths == ["/product/getProducts", "/product/get"]
        assert current.paths == ["/catalog/products", "/api/v3/catalog/products"]

    @pytest.mark.asyncio
    async def test_first_success_wins_and_later_candidates_are_skipped(self) -> None:
        legacy = FakeTransport({"/product/get": http_error(500)})
        current = FakeTransport(
            {
                "/catalog/products": ok([{"productCode": "V3"}]),
                "/api/v3/catalog/products": ok([{"productCode": "never"}]),
            }
        )

        result = await resolve(OPERATION, list[Product], _transports(legacy, current))

        assert result.success is True
        assert [p.product_code for p in result.data] == ["V3"]
        assert current.paths == ["/catalog/products"]

    @pytest.mark.asyncio
    async def test_result_equals_what_the_winning_candidate_alone_produces(self) -> None:
        body = ok({"success": True, "data": [{"ProductCode": "P1"}], "message": [{"text": ["ok"]}]})
        cascade = await resolve(
            OPERATION,
            list[Product],
            _transports(FakeTransport({"/product/get": body}), FakeTransport()),
        )
        alone = await resolve(
            Operation("products", form("/product/get")),
            list[Product],
            _transports(FakeTransport({"/product/get": body}), FakeTransport()),
        )

        assert cascade == alone

    @pytest.mark.asyncio
    async def test_transport_success_with_unparseable_body_still_stops_cascade(self) -> None:
        legacy = FakeTransport({"/product/getProducts": ok("<html></html>")})
        current = FakeTransport({"/catalog/products": ok([])})

        result = await resolve(OPERATION, list[Product], _transports(legacy, current))

        assert result.success is False
        assert result.messages == ["failed to parse response"]
        assert current.calls == []

    @pytest.mark.asyncio
    async def test_payloads_are_selected_by_protocol(self) -> None:
        legacy = FakeTransport()
        current = FakeTransport({"/catalog/products": ok([])})

        await resolve(
            OPERATION,
            list[Product],
            _transports(legacy, current),
            payloads={WireProtocol.FORM_ENCODED: {"limit": 5}, WireProtocol.JSON: {"page": 2}},
        )

        assert all(payload == {"limit": 5} for _, payload in legacy.calls)
        assert current.calls == [("/catalog/products", {"page": 2})]

    @pytest.mark.asyncio
    async def test_missing_transport_is_skipped(self) -> None:
        current = FakeTransport({"/catalog/products": ok([{"ProductCode": "P"}])})

        result = await resolve(OPERATION, list[Product], {WireProtocol.JSON: current})

        assert result.success is True

    @pytest.mark.asyncio
    async def test_every_call_restarts_from_first_candidate(self) -> None:
        legacy = FakeTransport()
        current = FakeTransport({"/catalog/products": ok([])})
        resolver = EndpointResolver(_transports(legacy, current))

        await resolver.execute(OPERATION, list[Product])
        await resolver.execute(OPERATION, list[Product])

        assert legacy.paths == ["/product/getProducts", "/product/get"] * 2


class TestResolveFlags:
    @pytest.mark.asyncio
    async def test_require_data_moves_past_remote_failures(self) -> None:
        operation = Operation(
            name="order details",
            candidates=(
                *form("/order/details"),
                *json_get("/orders/{order_id}/details"),
            ),
            require_data=True,
        )
        legacy = FakeTransport(
            {"/order/details": ok({"success": False, "message": [{"text": ["no permission"]}]})}
        )
        current = FakeTransport({"/orders/42/details": ok([{"ProductCode": "P1", "Quantity": 2}])})

        result = await resolve(
            operation,
            list[OrderDetail],
            _transports(legacy, current),
            path_params={"order_id": 42},
        )

        assert result.success is True
        assert result.data[0].quantity == "2"
        assert current.paths == ["/orders/42/details"]

    @pytest.mark.asyncio
    async def test_require_data_returns_json_answer_as_is(self) -> None:
        operation = Operation(
            name="order details",
            candidates=(
                *form("/order/details"),
                *json_get("/orders/{order_id}/details", "/api/v3/orders/{order_id}/details"),
            ),
            require_data=True,
        )
        denied = ok({"success": False, "message": [{"text": ["no permission"]}]})
        legacy = FakeTransport({"/order/details": denied})
        current = FakeTransport({"/orders/7/details": denied, "/api/v3/orders/7/details": ok([])})

        result = await resolve(
            operation,
            list[OrderDetail],
            _transports(legacy, current),
            path_params={"order_id": 7},
        )

        assert result.success is False
        assert result.messages == ["no permission"]
        assert result.failure is FailureKind.REMOTE
        assert current.paths == ["/orders/7/details"]

    @pytest.mark.asyncio
    async def test_nested_data_recovery_applies_when_enabled(self) -> None:
        body = ok({"response": {"data": [{"ProductCode": "deep"}]}})
        operation = Operation("products", form("/product/get"), recover_nested_data=True)

        recovered = await resolve(operation, list[Product], {WireProtocol.FORM_ENCODED: FakeTransport({"/product/get": body})})
        plain = await resolve(
            Operation("products", form("/product/get")),
            list[Product],
            {WireProtocol.FORM_ENCODED: FakeTransport({"/product/get": body})},
        )

        assert recovered.success is True
        assert recovered.data[0].product_code == "deep"
        assert plain.success is False


class TestProbe:
    @pytest.mark.asyncio
    async def test_probe_tries_every_candidate(self) -> None:
        legacy = FakeTransport({"/product/getProducts": ok([])})
        current = FakeTransport({"/api/v3/catalog/products": ok([])})
        resolver = EndpointResolver(_transports(legacy, current))

        attempts = await resolver.probe(OPERATION)

        assert [(c.path, r.success) for c, r in attempts] == [
            ("/product/getProducts", True),
            ("/product/get", False),
            ("/catalog/products", False),
            ("/api/v3/catalog/products", True),
        ]
