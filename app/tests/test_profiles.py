import pytest
from httpx import AsyncClient
from fastapi import status

from app.schemas.profile import normalize_skills
from app.tests.test_utils import register_and_login

class TestSkillNormalisation:

    def test_trims_and_dedupes(self):
        assert normalize_skills(" plumbing, Carpentry ,plumbing,, carpentry ") == "plumbing, Carpentry"

    def test_accepts_lists(self):
        assert normalize_skills(["first aid", " cooking "]) == "first aid, cooking"

    def test_empty(self):
        assert normalize_skills(None) == ""
        assert normalize_skills("") == ""

class TestOwnProfile:

    @pytest.mark.asyncio
    async def test_update_profile(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.put("/api/profiles/me", json={
            "username": test_user_data["username"],
            "location": "Maple Rd",
            "bio": "  Retired electrician  ",
            "skills": "wiring, wiring, gardening",
            "phone": "555-0199",
            "emergency_contact": "Sam, 555-0123",
            "availability": "",
        }, headers=user["headers"])

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["location"] == "Maple Rd"
        assert data["bio"] == "Retired electrician"
        assert data["skills"] == "wiring, gardening"
        assert data["phone"] == "555-0199"
        assert data["availability"] is None
        assert data["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_update_is_full_replacement(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        await async_client.put("/api/profiles/me", json={
            "username": test_user_data["username"],
            "bio": "Hello",
        }, headers=user["headers"])
        response = await async_client.put("/api/profiles/me", json={
            "username": test_user_data["username"],
        }, headers=user["headers"])

        assert response.json()["bio"] is None
        assert response.json()["location"] is None

    @pytest.mark.asyncio
    async def test_trust_and_verified_not_writable(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.put("/api/profiles/me", json={
            "username": test_user_data["username"],
            "trust_level": 99,
            "verified": True,
        }, headers=user["headers"])

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["trust_level"] == 0
        assert response.json()["verified"] is False

    @pytest.mark.asyncio
    async def test_rename(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.put("/api/profiles/me", json={
            "username": "renamed_neighbour",
        }, headers=user["headers"])

        assert response.json()["username"] == "renamed_neighbour"

    @pytest.mark.asyncio
    async def test_username_taken(self, async_client: AsyncClient, test_user_data, second_user_data):
        await register_and_login(async_client, test_user_data)
        bob = await register_and_login(async_client, second_user_data)

        response = await async_client.put("/api/profiles/me", json={
            "username": test_user_data["username"],
        }, headers=bob["headers"])

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_username_required(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.put("/api/profiles/me", json={"bio": "no name"}, headers=user["headers"])

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

class TestPublicProfile:

    @pytest.mark.asyncio
    async def test_public_view_hides_contact_details(self, async_client: AsyncClient, test_user_data, second_user_data):
        alice = await register_and_login(async_client, test_user_data)
        bob = await register_and_login(async_client, second_user_data)

        await async_client.put("/api/profiles/me", json={
            "username": test_user_data["username"],
            "phone": "555-0100",
            "emergency_contact": "Mum",
            "skills": "baking",
        }, headers=alice["headers"])

        response = await async_client.get(f"/api/profiles/{alice['id']}", headers=bob["headers"])

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["username"] == test_user_data["username"]
        assert data["skills"] == "baking"
        assert "phone" not in data
        assert "emergency_contact" not in data

    @pytest.mark.asyncio
    async def test_unknown_profile(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.get("/api/profiles/999", headers=user["headers"])

        assert response.status_code == status.HTTP_404_NOT_FOUND
