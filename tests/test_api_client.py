"""Tests for the operator UI's HTTP client and chart data helpers."""

from unittest.mock import patch

import httpx
import pytest

import api_client
from charts import discounts_frame


def response(status: int, body, method: str = "GET", path: str = "/") -> httpx.Response:
    return httpx.Response(
        status, json=body, request=httpx.Request(method, f"http://test{path}")
    )


# ---------------------------------------------------------------------------
# api_client
# ---------------------------------------------------------------------------


class TestApiClient:
    def test_list_products(self):
        with patch("api_client.httpx.get", return_value=response(200, [{"id": "p"}])) as get:
            assert api_client.list_products() == [{"id": "p"}]
        assert get.call_args.args[0].endswith("/api/products")

    def test_get_product_not_found_raises_api_error(self):
        body = {"error": "Product not found", "details": {"productId": "ghost"}}
        with patch("api_client.httpx.get", return_value=response(404, body)):
            with pytest.raises(api_client.APIError) as exc_info:
                api_client.get_product("ghost")
        err = exc_info.value
        assert err.status_code == 404
        assert err.error == "Product not found"
        assert err.details == {"productId": "ghost"}

    def test_server_error_raises_http_error(self):
        with patch("api_client.httpx.get", return_value=response(500, {})):
            with pytest.raises(httpx.HTTPStatusError):
                api_client.get_health()

    def test_validate_configuration_payload(self):
        with patch(
            "api_client.httpx.post", return_value=response(200, {"isValid": True}, "POST")
        ) as post:
            result = api_client.validate_configuration("cloud-server-basic", ["ram-8gb"])
        assert result == {"isValid": True}
        assert post.call_args.kwargs["json"] == {
            "productId": "cloud-server-basic",
            "selectedOptions": ["ram-8gb"],
        }

    def test_generate_quote_omits_unset_fields(self):
        configs = [{"productId": "cloud-server-basic", "selectedOptions": [], "quantity": 1}]
        with patch(
            "api_client.httpx.post", return_value=response(200, {"total": 50}, "POST")
        ) as post:
            api_client.generate_quote(configs)
        assert post.call_args.kwargs["json"] == {"configurations": configs}

    def test_generate_quote_sends_optional_fields(self):
        configs = [{"productId": "cloud-server-basic"}]
        with patch(
            "api_client.httpx.post", return_value=response(200, {"total": 50}, "POST")
        ) as post:
            api_client.generate_quote(
                configs,
                customer_tier="enterprise",
                region="eu-west",
                custom_fields={"earlyBird": True},
                tax_rate=0,
            )
        payload = post.call_args.kwargs["json"]
        assert payload["customerTier"] == "enterprise"
        assert payload["region"] == "eu-west"
        assert payload["customFields"] == {"earlyBird": True}
        assert payload["taxRate"] == 0

    def test_quote_rejection_surfaces_validation_message(self):
        body = {
            "error": "Configuration validation failed: cloud-server-basic: bad",
            "details": {"code": "CONFIGURATION_INVALID", "errors": {}},
        }
        with patch("api_client.httpx.post", return_value=response(400, body, "POST")):
            with pytest.raises(api_client.APIError, match="Configuration validation failed"):
                api_client.generate_quote([{"productId": "cloud-server-basic"}])


# ---------------------------------------------------------------------------
# charts.discounts_frame
# ---------------------------------------------------------------------------


class TestDiscountsFrame:
    def test_one_row_per_discount(self):
        quote = {
            "lineItems": [
                {
                    "productName": "Cloud Server - Basic",
                    "discounts": [
                        {"ruleId": "a", "ruleName": "Volume", "amount": 25},
                        {"ruleId": "b", "ruleName": "EU Premium", "amount": -18},
                    ],
                },
                {"productName": "Managed MySQL Database", "discounts": []},
            ]
        }
        df = discounts_frame(quote)
        assert list(df.columns) == ["Product", "Rule", "Amount"]
        assert len(df) == 2
        assert df["Amount"].tolist() == [25, -18]

    def test_empty_quote(self):
        df = discounts_frame({"lineItems": []})
        assert df.empty
        assert list(df.columns) == ["Product", "Rule", "Amount"]
