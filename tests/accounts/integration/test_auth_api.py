import pytest

from conftest import PASSWORD, auth_headers


def _registration(**overrides):
    data = {
        "email": "Jane@Example.com",
        "password": "Secret123",
        "first_name": "Jane",
        "last_name": "Doe",
    }
    data.update(overrides)
    return data


class TestRegister:
    async def test_register_returns_token_and_customer(self, client):
        response = await client.post("/api/v1/auth/register", json=_registration())

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["expires_in"] > 0
        assert body["user"]["email"] == "jane@example.com"
        assert body["user"]["role"] == "customer"

    async def test_token_from_register_authenticates(self, client):
        token = (await client.post("/api/v1/auth/register", json=_registration())).json()["access_token"]

        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["first_name"] == "Jane"

    async def test_duplicate_email_is_case_insensitive(self, client):
        await client.post("/api/v1/auth/register", json=_registration())

        response = await client.post("/api/v1/auth/register", json=_registration(email="jane@example.com"))

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"

    @pytest.mark.parametrize("password", ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
    async def test_weak_password(self, client, password):
        response = await client.post("/api/v1/auth/register", json=_registration(password=password))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "WEAK_PASSWORD"

    async def test_invalid_email(self, client):
        response = await client.post("/api/v1/auth/register", json=_registration(email="not-an-email"))

        assert response.status_code == 422


class TestLogin:
    async def test_login(self, client, seed):
        user = await seed.user(email="login@example.com")

        response = await client.post(
            "/api/v1/auth/login", json={"email": "LOGIN@example.com", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(user.id)
        assert response.json()["user"]["last_login"] is not None

    async def test_wrong_password(self, client, seed):
        await seed.user(email="login@example.com")

        response = await client.post(
            "/api/v1/auth/login", json={"email": "login@example.com", "password": "Wrong1234"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"

    async def test_unknown_email_looks_like_wrong_password(self, client):
        response = await client.post(
            "/api/v1/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"


class TestCurrentUser:
    async def test_me_without_token(self, client):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_me_with_garbage_token(self, client):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401

    async def test_change_password(self, client, seed):
        user = await seed.user(email="change@example.com")

        changed = await client.post(
            "/api/v1/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "Fresh4567"},
            headers=auth_headers(user),
        )
        old = await client.post("/api/v1/auth/login", json={"email": user.email, "password": PASSWORD})
        new = await client.post("/api/v1/auth/login", json={"email": user.email, "password": "Fresh4567"})

        assert changed.status_code == 200
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_change_password_requires_current_password(self, client, seed):
        user = await seed.user()

        response = await client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "Wrong1234", "new_password": "Fresh4567"},
            headers=auth_headers(user),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PASSWORD"
