import asyncio

import pytest
from httpx import AsyncClient
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.verification_request import VerificationMethod
from app.schemas.verification import VerificationCreate
from app.services.verification_service import VerificationService
from app.tests.test_utils import make_admin, register_and_login

class TestVerificationRequests:

    @pytest.mark.asyncio
    async def test_submit_and_list(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.post("/api/verification", json={
            "method": "phone",
            "details": "555-0100",
        }, headers=user["headers"])

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["status"] == "pending"
        assert response.json()["user_id"] == user["id"]

        listing = await async_client.get("/api/verification/me", headers=user["headers"])
        assert [r["id"] for r in listing.json()] == [response.json()["id"]]

    @pytest.mark.asyncio
    async def test_one_pending_at_a_time(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        await async_client.post("/api/verification", json={"method": "phone"}, headers=user["headers"])
        response = await async_client.post("/api/verification", json={"method": "id_document"}, headers=user["headers"])

        assert response.status_code == status.HTTP_409_CONFLICT

    @pytest.mark.asyncio
    async def test_invalid_method(self, async_client: AsyncClient, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        response = await async_client.post("/api/verification", json={"method": "carrier_pigeon"}, headers=user["headers"])

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

class TestVerificationReview:

    @pytest.mark.asyncio
    async def test_review_requires_admin(self, async_client: AsyncClient, test_user_data, second_user_data):
        user = await register_and_login(async_client, test_user_data)
        other = await register_and_login(async_client, second_user_data)
        request = (await async_client.post("/api/verification", json={"method": "phone"}, headers=user["headers"])).json()

        response = await async_client.post(
            f"/api/verification/{request['id']}/review", json={"approve": True}, headers=other["headers"]
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_approve_marks_profile_verified(self, async_client: AsyncClient, async_session: AsyncSession, test_user_data, admin_user_data):
        user = await register_and_login(async_client, test_user_data)
        admin = await register_and_login(async_client, admin_user_data)
        await make_admin(async_session, admin["id"])

        request = (await async_client.post("/api/verification", json={
            "method": "community_reference",
            "details": "Vouched for by the tenants' association",
        }, headers=user["headers"])).json()

        response = await async_client.post(
            f"/api/verification/{request['id']}/review",
            json={"approve": True, "note": "Checked in person"},
            headers=admin["headers"],
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "approved"
        assert response.json()["reviewed_at"] is not None

        profile = await async_client.get("/api/profiles/me", headers=user["headers"])
        assert profile.json()["verified"] is True

        again = await async_client.post("/api/verification", json={"method": "phone"}, headers=user["headers"])
        assert again.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_reject_and_resubmit(self, async_client: AsyncClient, async_session: AsyncSession, test_user_data, admin_user_data):
        user = await register_and_login(async_client, test_user_data)
        admin = await register_and_login(async_client, admin_user_data)
        await make_admin(async_session, admin["id"])

        request = (await async_client.post("/api/verification", json={"method": "phone"}, headers=user["headers"])).json()

        rejected = await async_client.post(
            f"/api/verification/{request['id']}/review", json={"approve": False}, headers=admin["headers"]
        )
        assert rejected.json()["status"] == "rejected"

        twice = await async_client.post(
            f"/api/verification/{request['id']}/review", json={"approve": True}, headers=admin["headers"]
        )
        assert twice.status_code == status.HTTP_409_CONFLICT

        profile = await async_client.get("/api/profiles/me", headers=user["headers"])
        assert profile.json()["verified"] is False

        resubmitted = await async_client.post("/api/verification", json={"method": "id_document"}, headers=user["headers"])
        assert resubmitted.status_code == status.HTTP_201_CREATED

    @pytest.mark.asyncio
    async def test_review_unknown_request(self, async_client: AsyncClient, async_session: AsyncSession, admin_user_data):
        admin = await register_and_login(async_client, admin_user_data)
        await make_admin(async_session, admin["id"])

        response = await async_client.post(
            "/api/verification/999/review", json={"approve": True}, headers=admin["headers"]
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_overlapping_submissions_keep_one_pending(self, async_client: AsyncClient, async_engine, test_user_data):
        user = await register_and_login(async_client, test_user_data)

        session_maker = async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)
        first_session, second_session = session_maker(), session_maker()
        try:
            results = await asyncio.gather(
                VerificationService(first_session).submit_request(
                    user["id"], VerificationCreate(method=VerificationMethod.PHONE)
                ),
                VerificationService(second_session).submit_request(
                    user["id"], VerificationCreate(method=VerificationMethod.ID_DOCUMENT)
                ),
                return_exceptions=True,
            )
        finally:
            await first_session.close()
            await second_session.close()

        rejected = [r for r in results if isinstance(r, HTTPException)]
        assert [r.status_code for r in rejected] == [status.HTTP_409_CONFLICT]

        listing = await async_client.get("/api/verification/me", headers=user["headers"])
        assert [r["status"] for r in listing.json()] == ["pending"]
