import uuid

from conftest import auth_headers

ADDRESS = {
    "full_name": "Jane Doe",
    "address_line1": "5 Harbour Road",
    "city": "Izmir",
    "state": "Izmir",
    "postal_code": "35000",
    "country": "Turkey",
    "phone_number": "+905551112244",
}


class TestProfile:
    async def test_get_and_update_profile(self, client, seed):
        user = await seed.user()
        headers = auth_headers(user)

        updated = await client.put(
            "/api/v1/users/profile", json={"first_name": "Janet", "phone_number": "+905550000000"}, headers=headers
        )
        profile = await client.get("/api/v1/users/profile", headers=headers)

        assert updated.status_code == 200
        assert profile.json()["first_name"] == "Janet"
        assert profile.json()["last_name"] == user.last_name
        assert profile.json()["phone_number"] == "+905550000000"

    async def test_user_list_is_admin_only(self, client, seed):
        customer = await seed.user()
        admin = await seed.admin()

        forbidden = await client.get("/api/v1/users", headers=auth_headers(customer))
        allowed = await client.get("/api/v1/users", headers=auth_headers(admin))

        assert forbidden.status_code == 403
        assert forbidden.json()["error"]["code"] == "FORBIDDEN"
        assert {u["id"] for u in allowed.json()} == {str(customer.id), str(admin.id)}


class TestAddresses:
    async def test_address_crud(self, client, seed):
        user = await seed.user()
        headers = auth_headers(user)

        created = await client.post("/api/v1/users/addresses", json=ADDRESS, headers=headers)
        address_id = created.json()["id"]
        updated = await client.put(
            f"/api/v1/users/addresses/{address_id}", json={"city": "Bodrum"}, headers=headers
        )
        listed = await client.get("/api/v1/users/addresses", headers=headers)
        deleted = await client.delete(f"/api/v1/users/addresses/{address_id}", headers=headers)
        missing = await client.get(f"/api/v1/users/addresses/{address_id}", headers=headers)

        assert created.status_code == 201
        assert updated.json()["city"] == "Bodrum"
        assert [a["id"] for a in listed.json()] == [address_id]
        assert deleted.status_code == 204
        assert missing.status_code == 404

    async def test_only_one_default(self, client, seed):
        user = await seed.user()
        headers = auth_headers(user)

        await client.post("/api/v1/users/addresses", json={**ADDRESS, "is_default": True}, headers=headers)
        second = await client.post(
            "/api/v1/users/addresses", json={**ADDRESS, "city": "Ankara", "is_default": True}, headers=headers
        )
        listed = (await client.get("/api/v1/users/addresses", headers=headers)).json()

        assert [a["id"] for a in listed if a["is_default"]] == [second.json()["id"]]

    async def test_foreign_address_is_not_found(self, client, seed):
        owner = await seed.user()
        intruder = await seed.user()
        address = await seed.address(owner)

        read = await client.get(f"/api/v1/users/addresses/{address.id}", headers=auth_headers(intruder))
        update = await client.put(
            f"/api/v1/users/addresses/{address.id}", json={"city": "Elsewhere"}, headers=auth_headers(intruder)
        )

        assert read.status_code == 404
        assert update.status_code == 404

    async def test_address_an_order_ships_to_cannot_be_deleted(self, client, seed):
        user = await seed.user()
        headers = auth_headers(user)
        address = await seed.address(user)
        await seed.cart_item(user, await seed.product(await seed.category()), 1)
        placed = await client.post(
            "/api/v1/orders",
            json={"shipping_address_id": str(address.id), "payment_method": "card"},
            headers=headers,
        )

        deleted = await client.delete(f"/api/v1/users/addresses/{address.id}", headers=headers)
        still_there = await client.get(f"/api/v1/users/addresses/{address.id}", headers=headers)

        assert placed.status_code == 201
        assert deleted.status_code == 409
        assert deleted.json()["error"]["code"] == "ADDRESS_IN_USE"
        assert still_there.status_code == 200

    async def test_missing_required_field(self, client, seed):
        user = await seed.user()
        body = {k: v for k, v in ADDRESS.items() if k != "city"}

        response = await client.post("/api/v1/users/addresses", json=body, headers=auth_headers(user))

        assert response.status_code == 422


class TestWishlist:
    async def test_add_check_list_and_remove(self, client, seed):
        user = await seed.user()
        headers = auth_headers(user)
        product = await seed.product(await seed.category(), price="30.00", sale_price="20.00", is_on_sale=True)
        url = f"/api/v1/products/{product.id}/wishlist"

        before = await client.get(url, headers=headers)
        await client.post(url, headers=headers)
        again = await client.post(url, headers=headers)
        after = await client.get(url, headers=headers)
        wishlist = await client.get("/api/v1/users/wishlist", headers=headers)

        assert before.json() == {"is_in_wishlist": False}
        assert again.json() == {"is_in_wishlist": True}
        assert after.json() == {"is_in_wishlist": True}
        assert len(wishlist.json()) == 1
        assert float(wishlist.json()[0]["effective_price"]) == 20.0

        removed = await client.delete(url, headers=headers)
        removed_again = await client.delete(url, headers=headers)

        assert removed.status_code == 204
        assert removed_again.status_code == 404
        assert (await client.get("/api/v1/users/wishlist", headers=headers)).json() == []

    async def test_unknown_product(self, client, seed):
        user = await seed.user()

        response = await client.post(f"/api/v1/products/{uuid.uuid4()}/wishlist", headers=auth_headers(user))

        assert response.status_code == 404
