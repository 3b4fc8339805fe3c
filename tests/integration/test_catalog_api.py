"""Integration tests for categories and products."""

from __future__ import annotations

import pytest

from modules.stores.constants import MemberRole

pytestmark = pytest.mark.integration


def catalog_url(store, suffix):
    return f"/api/v1/stores/{store.id}/{suffix}"


class TestProducts:
    def test_create_and_list(self, owner_client, store, category):
        response = owner_client.post(
            catalog_url(store, "products/"),
            {"name": "Diavola", "price": "7.50", "category_id": str(category.id)},
            format="json",
        )
        assert response.status_code == 201
        assert response.json()["data"]["category_name"] == "Pizzas"

        listing = owner_client.get(catalog_url(store, "products/")).json()["data"]
        assert listing["pagination"]["total"] == 1

    def test_filters(self, owner_client, store, pizza, calzone):
        data = owner_client.get(
            catalog_url(store, "products/"), {"search": "calz"}
        ).json()["data"]
        assert [p["name"] for p in data["results"]] == ["Calzone"]

        data = owner_client.get(
            catalog_url(store, "products/"), {"min_price": "5"}
        ).json()["data"]
        assert [p["name"] for p in data["results"]] == ["Calzone"]

    def test_toggle_availability(self, owner_client, store, pizza):
        response = owner_client.patch(
            catalog_url(store, f"products/{pizza.id}/toggle-availability/")
        )
        assert response.json()["data"]["is_available"] is False

    def test_category_from_other_store_is_rejected(self, owner_client, store, owner):
        from modules.products.models import Category
        from modules.stores.models import Store

        other = Store.objects.create(
            name="Other", slug="other", address="Plaza 2", latitude=0, longitude=0, owner=owner
        )
        foreign = Category.objects.create(store=other, name="Foreign")
        response = owner_client.post(
            catalog_url(store, "products/"),
            {"name": "Diavola", "price": "7.50", "category_id": str(foreign.id)},
            format="json",
        )
        assert response.status_code == 400

    def test_cashier_reads_but_cannot_write(self, auth_client_for, make_member, store, pizza):
        cashier, _ = make_member(MemberRole.CASHIER)
        client = auth_client_for(cashier)
        assert client.get(catalog_url(store, "products/")).status_code == 200
        response = client.post(
            catalog_url(store, "products/"), {"name": "X", "price": "1.00"}, format="json"
        )
        assert response.status_code == 403


class TestCategories:
    def test_delete_detaches_products(self, owner_client, store, category, pizza):
        response = owner_client.delete(catalog_url(store, f"categories/{category.id}/"))
        assert response.status_code == 200
        assert response.json()["data"]["products_affected"] == 1
        pizza.refresh_from_db()
        assert pizza.category_id is None
