"""Async HTTP client for the hotel back-office report API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from hotel_ledger_reports.config import Settings, get_settings

STATEMENT_ACCOUNT_PATH = "/ar/report/api/statement-account/"
BALADY_PATH = "/ar/report/api/balady/"
DAILY_MOVEMENTS_PATH = "/ar/report/api/daily_reservations_movements/"
ALL_RESERVATIONS_PATH = DAILY_MOVEMENTS_PATH + "get-all-reservation/"
CURRENCIES_PATH = "/ar/currency/api/currencies/"
USERS_PATH = "/ar/user/api/users/"


@dataclass(frozen=True, slots=True)
class APIError(Exception):
    status_code: int
    detail: str

    def __str__(self) -> str:
        return f"APIError({self.status_code}): {self.detail}"


def _clean_params(params: dict[str, Any] | None) -> dict[str, str]:
    if not params:
        return {}
    return {
        key: str(value)
        for key, value in params.items()
        if value is not None and value != ""
    }


class ReportsAPIClient:
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        account_tree_path: str | None = None,
    ) -> None:
        settings: Settings | None = None
        if base_url is None or timeout is None or account_tree_path is None:
            settings = get_settings()
        self._base_url = base_url if base_url is not None else settings.api_base_url
        self._token = token
        self._account_tree_path = (
            account_tree_path
            if account_tree_path is not None
            else settings.account_tree_path
        )
        self._client = (
            client
            if client is not None
            else httpx.AsyncClient(
                base_url=self._base_url,
                timeout=timeout if timeout is not None else settings.api_timeout,
            )
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ReportsAPIClient:
        settings = settings or get_settings()
        return cls(
            base_url=settings.api_base_url,
            token=settings.api_token,
            timeout=settings.api_timeout,
            account_tree_path=settings.account_tree_path,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ReportsAPIClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"JWT {self._token}"
        return headers

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        r = await self._client.request(
            method, path, params=_clean_params(params), headers=self._headers()
        )
        if 200 <= r.status_code < 300:
            if r.status_code == 204:
                return None
            try:
                return r.json()
            except ValueError as e:
                raise APIError(
                    status_code=r.status_code,
                    detail=f"Response is not valid JSON: {e}",
                ) from e

        detail = ""
        try:
            payload = r.json()
            raw_detail = payload.get("detail") if isinstance(payload, dict) else None
            detail = raw_detail if isinstance(raw_detail, str) else str(payload)
        except ValueError:
            detail = r.text or f"Request failed with status: {r.status_code}"

        raise APIError(status_code=r.status_code, detail=detail)

    async def fetch_statement_account(self, params: dict[str, Any]) -> Any:
        """Ledger legs for the account statement and fund movement screens."""
        return await self._request_json("GET", STATEMENT_ACCOUNT_PATH, params=params)

    async def fetch_balady(self, params: dict[str, Any]) -> Any:
        return await self._request_json("GET", BALADY_PATH, params=params)

    async def fetch_daily_reservations_movements(self, params: dict[str, Any]) -> Any:
        return await self._request_json("GET", DAILY_MOVEMENTS_PATH, params=params)

    async def fetch_all_reservations_movements(self, params: dict[str, Any]) -> Any:
        """Unpaginated counterpart of fetch_daily_reservations_movements."""
        return await self._request_json("GET", ALL_RESERVATIONS_PATH, params=params)

    async def fetch_account_tree(self) -> list[dict[str, Any]]:
        data = await self._request_json("GET", self._account_tree_path)
        return _unwrap_list(data)

    async def list_currencies(self) -> list[dict[str, Any]]:
        data = await self._request_json("GET", CURRENCIES_PATH)
        return _unwrap_list(data)

    async def list_users(self) -> list[dict[str, Any]]:
        data = await self._request_json("GET", USERS_PATH)
        return _unwrap_list(data)


def _unwrap_list(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]
    return []
