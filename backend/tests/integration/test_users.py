"""
Integration tests for user management
"""
import pytest
from httpx import AsyncClient

from conftest import TEST_PASSWORD


def _new_user(roles, hierarchy, **overrides):
    payload = {
        "first_name": "Ravi",
        "last_name": "Kumar",
        "email": "Ravi.Kumar@bsap.gov.in",
        "password": "secret123",
        "mobile_no": "9876543210",
        "role_id": roles.battalion_user.id,
        "battalion_id": hierarchy.battalion.id,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_user(client: AsyncClient, roles, hierarchy, admin_headers):
    response = await client.post("/api/v1/users", json=_new_user(roles, hierarchy), headers=admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "ravi.kumar@bsap.gov.in"
    assert data["full_name"] == "Ravi Kumar"
    assert data["role"]["role_name"] == "Battalion User"
    assert "password" not in data


@pytest.mark.asyncio
async def test_create_user_duplicate_email(client: AsyncClient, roles, hierarchy, admin_headers):
    await client.post("/api/v1/users", json=_new_user(roles, hierarchy), headers=admin_headers)

    response = await client.post(
        "/api/v1/users", json=_new_user(roles, hierarchy, email="ravi.kumar@bsap.gov.in"), headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "User with this email already exists"


@pytest.mark.asyncio
async def test_create_user_unknown_role(client: AsyncClient, roles, hierarchy, admin_headers):
    response = await client.post(
        "/api/v1/users", json=_new_user(roles, hierarchy, role_id=999), headers=admin_headers
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Role not found"


@pytest.mark.asyncio
async def test_create_user_invalid_mobile(client: AsyncClient, roles, hierarchy, admin_headers):
    response = await client.post(
        "/api/v1/users", json=_new_user(roles, hierarchy, mobile_no="12345"), headers=admin_headers
    )

    assert response.status_code == 400
    assert "mobile_no" in response.json()["details"]["errors"]


@pytest.mark.asyncio
async def test_filter_users_by_battalion(client: AsyncClient, make_user, roles, hierarchy, admin_headers):
    await make_user(roles.battalion_user, battalion=hierarchy.other_battalion)

    response = await client.get(
        "/api/v1/users", params={"battalion_id": hierarchy.other_battalion.id}, headers=admin_headers
    )

    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["battalion_id"] == hierarchy.other_battalion.id


@pytest.mark.asyncio
async def test_self(client: AsyncClient, battalion_user, user_headers):
    response = await client.get("/api/v1/users/self", headers=user_headers)

    assert response.json()["data"]["id"] == battalion_user.id


@pytest.mark.asyncio
async def test_profile_update_ignores_role(client: AsyncClient, battalion_user, roles, user_headers):
    response = await client.put(
        "/api/v1/users/profile",
        json={"first_name": "Sunil", "role_id": roles.system_admin.id},
        headers=user_headers,
    )

    data = response.json()["data"]
    assert data["first_name"] == "Sunil"
    assert data["role_id"] == roles.battalion_user.id


@pytest.mark.asyncio
async def test_verify_user(client: AsyncClient, make_user, roles, admin_headers):
    pending = await make_user(roles.battalion_user, verified=False)

    response = await client.patch(f"/api/v1/users/{pending.id}/verify", headers=admin_headers)

    assert response.json()["data"]["verified"] is True


@pytest.mark.asyncio
async def test_verify_requires_admin(client: AsyncClient, battalion_user, user_headers):
    response = await client.patch(f"/api/v1/users/{battalion_user.id}/verify", headers=user_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_password_reset(client: AsyncClient, battalion_user, admin_headers):
    response = await client.post(
        f"/api/v1/users/{battalion_user.id}/change-password",
        json={"new_password": "fresh-pass"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    old = await client.post(
        "/api/v1/auth/login", json={"email": battalion_user.email, "password": TEST_PASSWORD}
    )
    assert old.status_code == 401

    new = await client.post(
        "/api/v1/auth/login", json={"email": battalion_user.email, "password": "fresh-pass"}
    )
    assert new.status_code == 200
    assert new.json()["data"]["user"]["is_first"] is True


@pytest.mark.asyncio
async def test_get_unknown_user(client: AsyncClient, admin_headers):
    response = await client.get("/api/v1/users/999", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"
