import uuid

import pytest

from conftest import auth_headers


@pytest.fixture
async def buyer(seed):
    return await seed.user()


@pytest.fixture
async def product(seed):
    return await seed.product(await seed.category(), price="25.00", stock_quantity=5)


class TestCartApi:
    async def test_add_and_view(self, client, buyer, product):
        headers = auth_headers(buyer)

        await client.post("/api/v1/cart", json={"product_id": str(product.id), "quantity": 2}, headers=headers)
        added = await client.post("/api/v1/cart", json={"product_id": str(product.id)}, headers=headers)
        cart = await client.get("/api/v1/cart", headers=headers)

        assert added.status_code == 200
        assert added.json()["quantity"] == 3
        body = cart.json()
        assert body["total_items"] == 1
        assert body["total_quantity"] == 3
        assert float(body["total"]) == 75.0

    async def test_add_beyond_stock(self, client, buyer, product):
        response = await client.post(
            "/api/v1/cart",
            json={"product_id": str(product.id), "quantity": 6},
            headers=auth_headers(buyer),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INSUFFICIENT_STOCK"

    async def test_add_unknown_product(self, client, buyer):
        response = await client.post(
            "/api/v1/cart", json={"product_id": str(uuid.uuid4())}, headers=auth_headers(buyer)
        )

        assert response.status_code == 404

    async def test_quantity_must_be_positive(self, client, buyer, product):
        response = await client.post(
            "/api/v1/cart",
            json={"product_id": str(product.id), "quantity": 0},
            headers=auth_headers(buyer),
        )

        assert response.status_code == 422

    async def test_update_remove_and_clear(self, client, seed, buyer, product):
        headers = auth_headers(buyer)
        item = await seed.cart_item(buyer, product, 1)
        other = await seed.cart_item(buyer, await seed.product(await seed.category("Other")), 1)

        updated = await client.put(f"/api/v1/cart/{item.id}", json={"quantity": 4}, headers=headers)
        removed = await client.delete(f"/api/v1/cart/{other.id}", headers=headers)

        assert updated.json()["quantity"] == 4
        assert removed.status_code == 204
        assert (await client.get("/api/v1/cart", headers=headers)).json()["total_items"] == 1

        cleared = await client.delete("/api/v1/cart", headers=headers)

        assert cleared.status_code == 204
        assert (await client.get("/api/v1/cart", headers=headers)).json()["items"] == []

    async def test_cannot_touch_another_users_line(self, client, seed, buyer, product):
        item = await seed.cart_item(buyer, product, 1)
        intruder = await seed.user()

        response = await client.put(
            f"/api/v1/cart/{item.id}", json={"quantity": 2}, headers=auth_headers(intruder)
        )

        assert response.status_code == 404

    async def test_requires_authentication(self, client):
        response = await client.get("/api/v1/cart")

        assert response.status_code == 401
