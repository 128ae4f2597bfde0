"""
Tests for user profile endpoints.
"""

import pytest


async def _signed_in(client, email: str = "voter@example.com") -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "correct-horse-battery"},
    )
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.mark.unit
class TestUserProfile:
    """Test GET /users/me."""

    async def test_requires_credential(self, make_app_client) -> None:
        _, client = await make_app_client()

        response = await client.get("/api/v1/users/me")

        assert response.status_code == 401

    async def test_garbage_credential_is_unauthenticated(self, make_app_client) -> None:
        _, client = await make_app_client()

        response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401

    async def test_lists_own_proposals_only(self, make_app_client) -> None:
        _, client = await make_app_client()
        alice = await _signed_in(client, "alice@example.com")
        bob = await _signed_in(client, "bob@example.com")
        await client.post("/api/v1/proposals", json={"content": "Alice's idea"}, headers=alice)
        await client.post("/api/v1/proposals", json={"content": "Bob's idea"}, headers=bob)

        response = await client.get("/api/v1/users/me", headers=alice)

        assert response.status_code == 200
        assert [p["content"] for p in response.json()["proposals"]] == ["Alice's idea"]


@pytest.mark.unit
class TestDeleteAccount:
    """Test DELETE /users/me."""

    async def test_delete_requires_credential(self, make_app_client) -> None:
        _, client = await make_app_client()

        response = await client.delete("/api/v1/users/me")

        assert response.status_code == 401

    async def test_deleted_account_keeps_proposals_unowned(self, make_app_client) -> None:
        _, client = await make_app_client()
        headers = await _signed_in(client)
        created = await client.post("/api/v1/proposals", json={"content": "Outlives me"}, headers=headers)
        proposal_id = created.json()["id"]

        response = await client.delete("/api/v1/users/me", headers=headers)

        assert response.status_code == 200
        proposal = await client.get(f"/api/v1/proposals/{proposal_id}")
        assert proposal.status_code == 200
        assert proposal.json()["owner_id"] is None

    async def test_signed_token_of_deleted_user_finds_nothing(self, make_app_client) -> None:
        _, client = await make_app_client()
        headers = await _signed_in(client)
        await client.delete("/api/v1/users/me", headers=headers)

        assert (await client.get("/api/v1/users/me", headers=headers)).status_code == 404
        assert (await client.delete("/api/v1/users/me", headers=headers)).status_code == 404
