"""Tests for the report API HTTP client."""

import httpx
import pytest

from hotel_ledger_reports.api_client import APIError, ReportsAPIClient
from hotel_ledger_reports.config import get_settings


class TestReportsAPIClient:
    async def test_jwt_authorization_header(self, make_client) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json=[])

        async with make_client(handler, token="secret") as client:
            await client.fetch_balady({})

        assert seen["authorization"] == "JWT secret"
        assert seen["accept"] == "application/json"

    async def test_no_token_no_authorization(self, make_client) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json=[])

        async with make_client(handler, token=None) as client:
            await client.fetch_balady({})

        assert "authorization" not in seen

    async def test_empty_params_are_dropped(self, make_client) -> None:
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": {"legs": []}})

        async with make_client(handler) as client:
            await client.fetch_statement_account(
                {"account": "11", "currency": "", "created_by": None, "start": 0}
            )

        assert dict(requests[0].url.params) == {"account": "11", "start": "0"}

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("fetch_statement_account", "/ar/report/api/statement-account/"),
            ("fetch_balady", "/ar/report/api/balady/"),
            (
                "fetch_daily_reservations_movements",
                "/ar/report/api/daily_reservations_movements/",
            ),
            (
                "fetch_all_reservations_movements",
                "/ar/report/api/daily_reservations_movements/get-all-reservation/",
            ),
        ],
    )
    async def test_report_paths(self, make_client, method, path) -> None:
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=[])

        async with make_client(handler) as client:
            await getattr(client, method)({})

        assert requests[0].method == "GET"
        assert requests[0].url.path == path

    async def test_list_endpoints_unwrap_data(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/ar/currency/api/currencies/":
                return httpx.Response(200, json={"data": [{"id": "SAR"}]})
            if request.url.path == "/ar/user/api/users/":
                return httpx.Response(200, json=[{"id": 4, "username": "nora"}])
            return httpx.Response(200, json={"detail": "unexpected"})

        async with make_client(handler) as client:
            currencies = await client.list_currencies()
            users = await client.list_users()
            tree = await client.fetch_account_tree()

        assert currencies == [{"id": "SAR"}]
        assert users == [{"id": 4, "username": "nora"}]
        assert tree == []

    async def test_error_detail_from_json(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"detail": "Account not found"})

        async with make_client(handler) as client:
            with pytest.raises(APIError) as exc_info:
                await client.fetch_statement_account({"account": "404"})

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Account not found"
        assert str(exc_info.value) == "APIError(404): Account not found"

    async def test_error_detail_from_text(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        async with make_client(handler) as client:
            with pytest.raises(APIError) as exc_info:
                await client.fetch_balady({})

        assert exc_info.value.detail == "Bad Gateway"

    async def test_invalid_json_on_success(self, make_client) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        async with make_client(handler) as client:
            with pytest.raises(APIError) as exc_info:
                await client.fetch_balady({})

        assert exc_info.value.status_code == 200
        assert "not valid JSON" in exc_info.value.detail

    async def test_no_content(self, make_client) -> None:
        async with make_client(lambda request: httpx.Response(204)) as client:
            assert await client.fetch_balady({}) is None

    async def test_from_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("HLR_API_BASE_URL", "https://hotel.example")
        monkeypatch.setenv("HLR_API_TOKEN", "abc")
        get_settings.cache_clear()

        client = ReportsAPIClient.from_settings()
        try:
            assert client.base_url == "https://hotel.example"
            assert client._headers()["Authorization"] == "JWT abc"
        finally:
            await client.aclose()
