"""
Pytest configuration and shared fixtures
"""

import copy
from datetime import date

import pytest
import requests

from smartmed.data_handler import (
    ChatHistoryRepository,
    InventoryRepository,
    TableAdapter,
)
from smartmed.schemas import InventoryItem
from smartmed.state import AppStore, initial_state


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.text is not None:
            raise requests.exceptions.JSONDecodeError("Expecting value", self.text, 0)
        return self._payload


class FakeSession:
    """
    Stands in for requests.Session against an in-memory table that honours
    'eq.' filters, so delete/insert/select behave like the REST backend.
    """

    def __init__(self, fail_methods=(), html_body=None):
        self.rows = []
        self.html_body = html_body
        self.calls = []
        self.fail_methods = set(fail_methods)
        self._next_id = 1

    def _matches(self, row, params):
        for key, value in (params or {}).items():
            if key == "select":
                continue
            if str(row.get(key)) != value.removeprefix("eq."):
                return False
        return True

    def request(self, method, url, headers=None, timeout=None, params=None, json=None):
        self.calls.append(
            {"method": method, "url": url, "headers": headers, "params": params, "json": json}
        )
        if method in self.fail_methods:
            return FakeResponse(500)

        if method == "GET" and self.html_body is not None:
            return FakeResponse(200, text=self.html_body)
        if method == "GET":
            return FakeResponse(200, [copy.deepcopy(r) for r in self.rows if self._matches(r, params)])
        if method == "DELETE":
            self.rows = [r for r in self.rows if not self._matches(r, params)]
            return FakeResponse(204)
        if method == "POST":
            for row in json:
                self.rows.append({"id": self._next_id, **row})
                self._next_id += 1
            return FakeResponse(201)
        if method == "PATCH":
            for row in self.rows:
                if self._matches(row, params):
                    row.update(json)
            return FakeResponse(204)
        raise AssertionError(f"Unexpected method {method}")


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def inventory_repository(fake_session):
    adapter = TableAdapter(
        "inventory_data", "https://db.example.test", "secret", session=fake_session
    )
    return InventoryRepository(adapter)


@pytest.fixture
def chat_repository(fake_session):
    adapter = TableAdapter(
        "chat_history", "https://db.example.test", "secret", session=fake_session
    )
    return ChatHistoryRepository(adapter)


@pytest.fixture
def empty_store():
    return AppStore(initial_state(sample=False))


@pytest.fixture
def today():
    return date(2024, 12, 1)


@pytest.fixture
def make_item():
    def _make(item_id="MED001", **overrides):
        fields = {
            "id": item_id,
            "name": "Paracetamol 500mg",
            "category": "Pain Relief",
            "current_stock": 120,
            "minimum_stock": 50,
            "unit_price": 0.15,
            "expiry_date": "2025-06-30",
        }
        fields.update(overrides)
        return InventoryItem(**fields)

    return _make


@pytest.fixture
def sample_csv_text():
    """Three rows in camelCase headers; the second has a blank stock value."""
    return (
        "id,name,category,currentStock,minimumStock,expiryDate,unitPrice\n"
        "MED001,Paracetamol 500mg,Pain Relief,120,50,2025-12-31,0.15\n"
        "MED002,Amoxicillin 250mg,Antibiotics,,60,31-10-2025,0.45\n"
        "MED003,Ibuprofen 200mg,Anti-inflammatory,85,40,01/20/2026,0.20\n"
        "\n"
    )


@pytest.fixture
def sample_csv_file(tmp_path, sample_csv_text):
    path = tmp_path / "inventory.csv"
    path.write_text(sample_csv_text, encoding="utf-8")
    return path
