import pytest
from httpx import AsyncClient
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.auth import UserRegister
from app.services.auth_service import AuthService
from app.tests.test_utils import register_and_login

class TestUserRegistration:

    @pytest.mark.asyncio
    async def test_register_user_success(self, async_client: AsyncClient, test_user_data):
        response = await async_client.post("/api/auth/register", json=test_user_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == test_user_data["email"]
        assert data["is_admin"] is False
        assert "password" not in data
        assert "password_hash" not in data
        assert "id" in data

    @pytest.mark.asyncio
    async def test_register_creates_profile(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.get("/api/profiles/me", headers=user["headers"])

        assert response.status_code == status.HTTP_200_OK
        profile = response.json()
        assert profile["id"] == user["id"]
        assert profile["username"] == test_user_data["username"]
        assert profile["location"] == "Elm St"
        assert profile["trust_level"] == 0
        assert profile["verified"] is False

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, async_client: AsyncClient, test_user_data, second_user_data):
        response1 = await async_client.post("/api/auth/register", json=test_user_data)
        assert response1.status_code == status.HTTP_201_CREATED

        duplicate_data = second_user_data.copy()
        duplicate_data["email"] = test_user_data["email"]

        response2 = await async_client.post("/api/auth/register", json=duplicate_data)

        assert response2.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, async_client: AsyncClient, test_user_data, second_user_data):
        response1 = await async_client.post("/api/auth/register", json=test_user_data)
        assert response1.status_code == status.HTTP_201_CREATED

        duplicate_data = second_user_data.copy()
        duplicate_data["username"] = test_user_data["username"]

        response2 = await async_client.post("/api/auth/register", json=duplicate_data)

        assert response2.status_code == status.HTTP_400_BAD_REQUEST
        assert "username" in response2.json()["detail"].lower()

    @pytest.mark.asyncio
    async def test_register_invalid_password(self, async_client: AsyncClient):
        user_data = {
            "username": "testuser_invalid",
            "email": "invalid@example.com",
            "password": "weak"
        }

        response = await async_client.post("/api/auth/register", json=user_data)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

class TestUserLogin:

    @pytest.mark.asyncio
    async def test_login_success(self, async_client: AsyncClient, test_user_data):
        reg_response = await async_client.post("/api/auth/register", json=test_user_data)
        assert reg_response.status_code == status.HTTP_201_CREATED

        response = await async_client.post("/api/auth/login", json={
            "email": test_user_data["email"],
            "password": test_user_data["password"]
        })

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert "access_token" in response.cookies

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, async_client: AsyncClient, test_user_data):
        await async_client.post("/api/auth/register", json=test_user_data)

        response = await async_client.post("/api/auth/login", json={
            "email": test_user_data["email"],
            "password": "WrongPass123!"
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, async_client: AsyncClient):
        response = await async_client.post("/api/auth/login", json={
            "email": "nobody@example.com",
            "password": "TestPass123!"
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

class TestCurrentAccount:

    @pytest.mark.asyncio
    async def test_me_requires_auth(self, async_client: AsyncClient):
        response = await async_client.get("/api/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_me_rejects_garbage_token(self, async_client: AsyncClient):
        response = await async_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_me_with_token(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.get("/api/auth/me", headers=user["headers"])

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == user["id"]


class TestRegistrationRace:

    @pytest.mark.asyncio
    async def test_email_claimed_between_check_and_insert(self, async_client: AsyncClient, async_session: AsyncSession, monkeypatch, test_user_data):
        await register_and_login(async_client, test_user_data)

        original_execute = async_session.execute
        lookups = {"count": 0}

        class NoMatch:
            def first(self):
                return None

        # The duplicate lookups miss, as they would for a request racing the first one.
        async def racing_execute(statement, *args, **kwargs):
            if lookups["count"] < 2:
                lookups["count"] += 1
                return NoMatch()
            return await original_execute(statement, *args, **kwargs)

        monkeypatch.setattr(async_session, "execute", racing_execute)

        service = AuthService(async_session)
        with pytest.raises(HTTPException) as exc_info:
            await service.register_user(UserRegister(**{
                **test_user_data,
                "username": "someone_else",
            }))

        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
