"""Integration tests for ``/stores/{id}/metrics/``."""

from __future__ import annotations

import pytest

from modules.stores.constants import MemberRole

pytestmark = pytest.mark.integration


def metrics_url(store, suffix=""):
    return f"/api/v1/stores/{store.id}/metrics/{suffix}"


def test_empty_store_reports_zeros(owner_client, store):
    data = owner_client.get(metrics_url(store)).json()["data"]
    assert data["total_orders"] == 0
    assert data["revenue"] == "0.00"
    assert data["top_products"] == []


def test_today_counts_new_orders(owner_client, store, place_order):
    place_order()
    data = owner_client.get(metrics_url(store, "today/")).json()["data"]
    assert data["total_orders"] == 1
    assert data["cancelled_orders"] == 0


def test_inverted_range_is_400(owner_client, store):
    response = owner_client.get(metrics_url(store), {"from": "2026-03-10", "to": "2026-03-01"})
    assert response.status_code == 400
    assert "from" in response.json()["errors"]


def test_cashier_is_forbidden(auth_client_for, make_member, store):
    cashier, _ = make_member(MemberRole.CASHIER)
    assert auth_client_for(cashier).get(metrics_url(store)).status_code == 403
