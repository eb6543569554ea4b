import uuid

import pytest

from conftest import auth_headers


@pytest.fixture
async def shop(seed):
    """A buyer with an address and a two-line cart"""
    buyer = await seed.user()
    address = await seed.address(buyer, is_default=True)
    category = await seed.category()
    a = await seed.product(category, price="100.00", stock_quantity=10)
    b = await seed.product(category, price="50.00", sale_price="40.00", is_on_sale=True, stock_quantity=5)
    await seed.cart_item(buyer, a, 2)
    await seed.cart_item(buyer, b, 1)
    return {"buyer": buyer, "address": address, "category": category, "products": (a, b)}


async def _place(client, user, address, **extra):
    body = {"shipping_address_id": str(address.id), "payment_method": "card", **extra}
    return await client.post("/api/v1/orders", json=body, headers=auth_headers(user))


class TestCreateOrder:
    async def test_places_order_from_cart(self, client, shop):
        response = await _place(client, shop["buyer"], shop["address"])

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == 0
        assert body["is_paid"] is False
        assert float(body["total_amount"]) == 240.0
        assert len(body["items"]) == 2

        cart = await client.get("/api/v1/cart", headers=auth_headers(shop["buyer"]))
        assert cart.json()["items"] == []

    async def test_payment_id_marks_order_paid(self, client, shop):
        response = await _place(client, shop["buyer"], shop["address"], payment_id="pay_1")

        assert response.status_code == 201
        assert response.json()["is_paid"] is True
        assert response.json()["paid_date"] is not None

    async def test_requires_authentication(self, client, shop):
        response = await client.post(
            "/api/v1/orders",
            json={"shipping_address_id": str(shop["address"].id), "payment_method": "card"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_empty_cart(self, client, seed):
        user = await seed.user()
        address = await seed.address(user)

        response = await _place(client, user, address)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EMPTY_CART"

    async def test_foreign_address(self, client, seed, shop):
        stranger = await seed.user()
        foreign = await seed.address(stranger)

        response = await _place(client, shop["buyer"], foreign)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ADDRESS"

    async def test_insufficient_stock(self, client, seed):
        user = await seed.user()
        address = await seed.address(user)
        product = await seed.product(await seed.category(), name="Lamp", stock_quantity=3)
        await seed.cart_item(user, product, 5)

        response = await _place(client, user, address)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_STOCK"
        assert "Lamp" in error["message"]
        assert error["request_id"]

    async def test_missing_fields_fail_validation(self, client, shop):
        response = await client.post(
            "/api/v1/orders", json={"payment_method": "card"}, headers=auth_headers(shop["buyer"])
        )

        assert response.status_code == 422


class TestReadOrders:
    async def test_owner_can_read_order(self, client, shop):
        order_id = (await _place(client, shop["buyer"], shop["address"])).json()["id"]

        response = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(shop["buyer"]))

        assert response.status_code == 200
        assert response.json()["id"] == order_id

    async def test_lines_come_back_in_product_order(self, client, seed, shop):
        buyer = shop["buyer"]
        extra = [await seed.product(shop["category"]) for _ in range(3)]
        for product in extra:
            await seed.cart_item(buyer, product, 1)
        order_id = (await _place(client, buyer, shop["address"])).json()["id"]

        first = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(buyer))
        second = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(buyer))

        product_ids = [item["product_id"] for item in first.json()["items"]]
        assert len(product_ids) == 5
        assert product_ids == sorted(product_ids, key=uuid.UUID)
        assert [item["id"] for item in second.json()["items"]] == [item["id"] for item in first.json()["items"]]

    async def test_other_customer_is_forbidden(self, client, seed, shop):
        order_id = (await _place(client, shop["buyer"], shop["address"])).json()["id"]
        stranger = await seed.user()

        response = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(stranger))

        assert response.status_code == 403

    async def test_admin_can_read_any_order(self, client, seed, shop):
        order_id = (await _place(client, shop["buyer"], shop["address"])).json()["id"]
        admin = await seed.admin()

        response = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(admin))

        assert response.status_code == 200

    async def test_unknown_order(self, client, shop):
        response = await client.get(f"/api/v1/orders/{uuid.uuid4()}", headers=auth_headers(shop["buyer"]))

        assert response.status_code == 404

    async def test_my_orders_newest_first(self, client, seed, shop):
        first = (await _place(client, shop["buyer"], shop["address"])).json()["id"]
        await seed.cart_item(shop["buyer"], shop["products"][0], 1)
        second = (await _place(client, shop["buyer"], shop["address"])).json()["id"]

        response = await client.get("/api/v1/orders/my-orders", headers=auth_headers(shop["buyer"]))

        assert [order["id"] for order in response.json()] == [second, first]

    async def test_list_all_orders_is_admin_only(self, client, seed, shop):
        await _place(client, shop["buyer"], shop["address"])
        admin = await seed.admin()

        forbidden = await client.get("/api/v1/orders", headers=auth_headers(shop["buyer"]))
        allowed = await client.get("/api/v1/orders", headers=auth_headers(admin))
        pending = await client.get("/api/v1/orders", params={"status": 0}, headers=auth_headers(admin))
        shipped = await client.get("/api/v1/orders", params={"status": 2}, headers=auth_headers(admin))

        assert forbidden.status_code == 403
        assert len(allowed.json()) == 1
        assert len(pending.json()) == 1
        assert shipped.json() == []


class TestOrderAdministration:
    async def test_status_update_sets_dates(self, client, seed, shop):
        order_id = (await _place(client, shop["buyer"], shop["address"])).json()["id"]
        admin = await seed.admin()

        shipped = await client.put(
            f"/api/v1/orders/{order_id}/status",
            json=2,
            params={"tracking_number": "TRK-1"},
            headers=auth_headers(admin),
        )
        after_shipping = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(admin))
        delivered = await client.put(
            f"/api/v1/orders/{order_id}/status", json=3, headers=auth_headers(admin)
        )

        assert shipped.status_code == 200
        assert shipped.json()["status"] == 2
        assert shipped.json()["shipped_date"] is not None
        assert shipped.json()["tracking_number"] == "TRK-1"
        assert delivered.json()["status"] == 3
        assert delivered.json()["delivered_date"] is not None
        assert delivered.json()["shipped_date"] == after_shipping.json()["shipped_date"]

    async def test_unknown_status_value(self, client, seed, shop):
        order_id = (await _place(client, shop["buyer"], shop["address"])).json()["id"]
        admin = await seed.admin()

        response = await client.put(
            f"/api/v1/orders/{order_id}/status", json=42, headers=auth_headers(admin)
        )

        assert response.status_code == 422

    async def test_customer_cannot_change_status(self, client, shop):
        order_id = (await _place(client, shop["buyer"], shop["address"])).json()["id"]

        response = await client.put(
            f"/api/v1/orders/{order_id}/status", json=4, headers=auth_headers(shop["buyer"])
        )

        assert response.status_code == 403

    async def test_delete_order(self, client, seed, shop):
        order_id = (await _place(client, shop["buyer"], shop["address"])).json()["id"]
        admin = await seed.admin()

        deleted = await client.delete(f"/api/v1/orders/{order_id}", headers=auth_headers(admin))
        missing = await client.get(f"/api/v1/orders/{order_id}", headers=auth_headers(admin))

        assert deleted.status_code == 204
        assert missing.status_code == 404
