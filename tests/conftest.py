from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from hotel_ledger_reports.api_client import ReportsAPIClient
from hotel_ledger_reports.config import get_settings
from hotel_ledger_reports.domain.reports import LedgerRow, ReportFilter


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Fresh settings per test, never read from a developer's .env or HLR_* vars."""
    import os

    for key in list(os.environ):
        if key.startswith("HLR_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HLR_ENVIRONMENT", "testing")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def statement_payload() -> dict[str, Any]:
    """Account statement answer with legs nested next to summary fields."""
    return {
        "data": {
            "legs": [
                {
                    "id": 101,
                    "date": "2025-03-01",
                    "type": "Receipt",
                    "number": "RV-0001",
                    "description": "Room 204, two nights",
                    "debit": "450.00",
                    "credit": "0",
                    "balance": "450.00",
                    "category": "Cash",
                },
                {
                    "id": 102,
                    "date": "2025-03-02",
                    "type": "Payment",
                    "number": "PV-0007",
                    "description": 'Laundry, "express"',
                    "debit": "0",
                    "credit": "120.5",
                    "balance": "329.50",
                    "category": "Card",
                },
            ],
            "debit": "450.00",
            "credit": "120.50",
            "balance": "329.50",
        }
    }


@pytest.fixture
def ledger_rows() -> list[LedgerRow]:
    return [
        LedgerRow(
            id="1",
            date="2025-03-01",
            type="Receipt",
            number="RV-0001",
            description="Deposit",
            debit=450.0,
            credit=0.0,
            balance=450.0,
            payment_method="Cash",
        ),
        LedgerRow(
            id="2",
            date="2025-03-02",
            type="Payment",
            number="PV-0007",
            description="Refund, partial",
            debit=0.0,
            credit=120.5,
            balance=329.5,
            payment_method="Card",
        ),
    ]


@pytest.fixture
def statement_filter() -> ReportFilter:
    return ReportFilter(
        account="11",
        currency="SAR",
        start_date="2025-03-01",
        end_date="2025-03-31",
    )


@pytest.fixture
def make_client() -> Callable[..., ReportsAPIClient]:
    """Build a ReportsAPIClient whose HTTP traffic goes to `handler`."""

    def factory(handler: Callable[[httpx.Request], Any], token: str | None = "tok"):
        transport = httpx.MockTransport(handler)
        http = httpx.AsyncClient(transport=transport, base_url="http://test")
        return ReportsAPIClient(
            base_url="http://test",
            token=token,
            client=http,
            timeout=5.0,
            account_tree_path="/ar/report/api/account-tree/",
        )

    return factory
