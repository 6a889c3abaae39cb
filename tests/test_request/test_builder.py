"""Tests for specrun.request.builder using the product catalog fixture."""

from __future__ import annotations

import pytest

from specrun.exceptions import (
    AuthError,
    CastError,
    PathArityError,
    UnsupportedFormatError,
    ValidationError,
)
from specrun.models import AuthConfig, Operations
from specrun.request import build_request, parse_request_values, request_url
from specrun.request.builder import USER_AGENT, validate

SERVER = "https://api.catalog.test/v1/"


# ---------------------------------------------------------------------------
# request_url
# ---------------------------------------------------------------------------


class TestRequestUrl:
    def test_path_values_are_substituted(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-order")
        values = parse_request_values(path_values=["test-user", "123456"])
        assert request_url(op, SERVER, values) == (
            "https://api.catalog.test/v1/users/test-user/orders/123456"
        )

    def test_query_is_encoded_and_sorted(self, products_ops: Operations) -> None:
        op = products_ops.by_id("list-products")
        values = parse_request_values(query="sort=-name&page[size]=10")
        assert request_url(op, "https://api.catalog.test", values) == (
            "https://api.catalog.test/products?page%5Bsize%5D=10&sort=-name"
        )

    def test_only_one_trailing_slash_is_trimmed(self, products_ops: Operations) -> None:
        op = products_ops.by_id("list-products")
        values = parse_request_values()
        assert request_url(op, "https://api.catalog.test//", values) == (
            "https://api.catalog.test//products"
        )

    def test_values_are_not_escaped(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-product")
        values = parse_request_values(path_values=["a b/c"])
        assert request_url(op, SERVER, values).endswith("/products/a b/c")

    def test_substituted_values_are_not_rescanned(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-order")
        values = parse_request_values(path_values=["{orderId}", "1"])
        assert request_url(op, SERVER, values).endswith("/users/{orderId}/orders/1")

    def test_extra_path_values_are_ignored(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-product")
        values = parse_request_values(path_values=["p-1", "extra"])
        assert request_url(op, SERVER, values).endswith("/products/p-1")


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_too_few_path_values(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-order")
        with pytest.raises(PathArityError, match="^too few path parameters: got 1, want 2$"):
            validate(op, parse_request_values(path_values=["test-user"]))

    def test_arity_is_checked_before_headers(self, products_ops: Operations) -> None:
        with pytest.raises(PathArityError):
            validate(products_ops.by_id("get-product"), parse_request_values())

    def test_missing_required_header(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-product")
        with pytest.raises(
            ValidationError, match='^missing required header parameter "X-Vendor"$'
        ):
            validate(op, parse_request_values(path_values=["p-1"]))

    def test_header_is_checked_before_query(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-product")
        values = parse_request_values(path_values=["p-1"], query="unused=1")
        with pytest.raises(ValidationError, match="header"):
            validate(op, values)

    def test_missing_required_query(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-order")
        values = parse_request_values(path_values=["test-user", "123456"])
        with pytest.raises(
            ValidationError, match='^missing required query parameter "billing_country"$'
        ):
            validate(op, values)

    def test_invalid_enum_value(self, products_ops: Operations) -> None:
        op = products_ops.by_id("list-products")
        with pytest.raises(ValidationError, match="allowed values: active, archived"):
            validate(op, parse_request_values(query="filter[status]=deleted"))

    def test_missing_required_body(self, products_ops: Operations) -> None:
        op = products_ops.by_id("create-product")
        with pytest.raises(
            ValidationError, match='^missing required body parameter "currency_code"$'
        ):
            validate(op, parse_request_values(body="name=Lamp"))


# ---------------------------------------------------------------------------
# build_request
# ---------------------------------------------------------------------------


class TestBuildRequest:
    def test_get_request(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-order")
        values = parse_request_values(
            ["Accept: application/json"], ["test-user", "123456"], "billing_country=DE"
        )
        request = build_request(op, SERVER, values)

        assert request.method == "GET"
        assert str(request.url) == (
            "https://api.catalog.test/v1/users/test-user/orders/123456?billing_country=DE"
        )
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == USER_AGENT
        assert "Content-Type" not in request.headers
        assert request.content == b""

    def test_json_body_request(self, products_ops: Operations) -> None:
        op = products_ops.by_id("create-product")
        values = parse_request_values(
            body="name=Lamp&price=1099&currency_code=USD&meta.published=true&lucky_numbers=4,8"
        )
        request = build_request(op, SERVER, values)

        assert request.method == "POST"
        assert str(request.url) == "https://api.catalog.test/v1/products"
        assert request.headers["Content-Type"] == "application/json"
        assert request.content == (
            b'{"currency_code":"USD","lucky_numbers":[4,8],'
            b'"meta":{"published":true},"name":"Lamp","price":1099}'
        )

    def test_form_body_request(self, products_ops: Operations) -> None:
        op = products_ops.by_id("a2360b4b")
        values = parse_request_values(path_values=["p-1"], body="warehouse=north&quantity=12")
        request = build_request(op, SERVER, values)

        assert request.method == "PUT"
        assert request.url.path == "/v1/products/p-1/stock"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.content == b"quantity=12&warehouse=north"

    def test_cast_error(self, products_ops: Operations) -> None:
        op = products_ops.by_id("create-product")
        values = parse_request_values(
            body="name=Lamp&price=cheap&currency_code=USD&meta.published=true"
        )
        with pytest.raises(CastError, match='could not process price: "cheap" is not a valid integer'):
            build_request(op, SERVER, values)

    @pytest.mark.parametrize(
        "body, query",
        [("", ""), ("period=2024-Q1", ""), ("period=x&unknown=1", "a=1")],
    )
    def test_unsupported_format_regardless_of_input(
        self, products_ops: Operations, body: str, query: str
    ) -> None:
        op = products_ops.by_id("export-report")
        values = parse_request_values(query=query, body=body)
        with pytest.raises(UnsupportedFormatError, match="^unsupported body format application/xml$"):
            build_request(op, SERVER, values)

    def test_unsupported_format_before_arity(self, products_ops: Operations) -> None:
        op = products_ops.by_id("get-order").model_copy(
            update={"body_format": "application/xml"}
        )
        with pytest.raises(UnsupportedFormatError):
            build_request(op, SERVER, parse_request_values())


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class TestBuildRequestAuth:
    def test_api_key_default_header(self, products_ops: Operations) -> None:
        op = products_ops.by_id("list-products")
        auth = AuthConfig(type="api-key", credentials="s3cret")
        request = build_request(op, SERVER, parse_request_values(), auth)
        assert request.headers["X-API-Key"] == "s3cret"

    def test_api_key_header_override(self, products_ops: Operations) -> None:
        op = products_ops.by_id("list-products")
        auth = AuthConfig(type="api-key", credentials="s3cret", api_key_header="X-MyApp-Key")
        request = build_request(op, SERVER, parse_request_values(), auth)
        assert request.headers["X-MyApp-Key"] == "s3cret"
        assert "X-API-Key" not in request.headers

    def test_auth_replaces_user_header(self, products_ops: Operations) -> None:
        op = products_ops.by_id("list-products")
        values = parse_request_values(["Authorization: Bearer mine"])
        auth = AuthConfig(type="bearer", credentials="theirs")
        request = build_request(op, SERVER, values, auth)
        assert request.headers.get_list("Authorization") == ["Bearer theirs"]

    def test_command_runner_is_used(self, products_ops: Operations, fake_runner) -> None:
        op = products_ops.by_id("list-products")
        auth = AuthConfig(type="bearer", command="pass show catalog/token")
        request = build_request(op, SERVER, parse_request_values(), auth, fake_runner)
        assert request.headers["Authorization"] == "Bearer s3cret"
        assert fake_runner.commands == ["pass show catalog/token"]

    def test_validation_runs_before_auth(self, products_ops: Operations, fake_runner) -> None:
        op = products_ops.by_id("get-product")
        auth = AuthConfig(type="bearer", command="pass show catalog/token")
        with pytest.raises(PathArityError):
            build_request(op, SERVER, parse_request_values(), auth, fake_runner)
        assert fake_runner.commands == []

    def test_auth_error(self, products_ops: Operations) -> None:
        op = products_ops.by_id("list-products")
        auth = AuthConfig(type="digest", credentials="x")
        with pytest.raises(AuthError, match='unrecognized auth type "digest"'):
            build_request(op, SERVER, parse_request_values(), auth)

    def test_json_body_with_auth(self, products_ops: Operations) -> None:
        op = products_ops.by_id("update-product")
        values = parse_request_values(path_values=["p-1"], body="price=10")
        auth = AuthConfig(type="basic", credentials="user:pass")
        request = build_request(op, SERVER, values, auth)
        assert request.headers["Authorization"] == "Basic dXNlcjpwYXNz"
        assert request.headers["Content-Type"] == "application/merge-patch+json"
        assert request.content == b'{"price":10}'
