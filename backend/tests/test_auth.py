import pytest
from httpx import AsyncClient

from conftest import TEST_PASSWORD


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, battalion_user):
    """Test successful login"""
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": battalion_user.email, "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "SUCCESS"
    data = body["data"]
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == battalion_user.email
    assert "password" not in data["user"]
    assert "otp" not in data["user"]


@pytest.mark.asyncio
async def test_login_invalid_password(client: AsyncClient, battalion_user):
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": battalion_user.email, "password": "wrongpassword"}
    )

    assert response.status_code == 401
    body = response.json()
    assert body["status"] == "ERROR"
    assert body["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient, battalion_user):
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, make_user, roles):
    """Inactive accounts get the same answer as a bad password"""
    user = await make_user(roles.battalion_user, active=False)

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": user.email, "password": TEST_PASSWORD}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_validation_error(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "email" in body["details"]["errors"]
    assert "password" in body["details"]["errors"]


@pytest.mark.asyncio
async def test_refresh_token(client: AsyncClient, battalion_user):
    login = await client.post(
        "/api/v1/auth/login",
        json={"email": battalion_user.email, "password": TEST_PASSWORD}
    )
    refresh_token = login.json()["data"]["refresh_token"]

    response = await client.post("/api/v1/auth/refresh-token", json={"refresh_token": refresh_token})

    assert response.status_code == 200
    assert "access_token" in response.json()["data"]


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, battalion_user):
    login = await client.post(
        "/api/v1/auth/login",
        json={"email": battalion_user.email, "password": TEST_PASSWORD}
    )
    access_token = login.json()["data"]["access_token"]

    response = await client.post("/api/v1/auth/refresh-token", json={"refresh_token": access_token})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_current_user(client: AsyncClient, battalion_user, user_headers, hierarchy):
    """Test getting current user info with hierarchy names"""
    response = await client.get("/api/v1/auth/me", headers=user_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == battalion_user.email
    assert data["role"]["role_name"] == "Battalion User"
    assert data["battalion_name"] == "BSAP-1"
    assert data["range_name"] == "Central Range"
    assert data["state_name"] == "Bihar"


@pytest.mark.asyncio
async def test_unauthorized_access(client: AsyncClient):
    """Test accessing protected route without auth"""
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["status"] == "ERROR"


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, make_user, roles):
    user = await make_user(roles.battalion_user, is_first=True)
    headers = {"Authorization": f"Bearer {(await _login(client, user.email))['access_token']}"}

    response = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": TEST_PASSWORD, "new_password": "newpassword456"},
        headers=headers,
    )
    assert response.status_code == 200

    me = await client.get("/api/v1/auth/me", headers=headers)
    assert me.json()["data"]["is_first"] is False

    relogin = await client.post(
        "/api/v1/auth/login",
        json={"email": user.email, "password": "newpassword456"}
    )
    assert relogin.status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_current(client: AsyncClient, user_headers):
    response = await client.post(
        "/api/v1/auth/change-password",
        json={"current_password": "wrongpassword", "new_password": "newpassword456"},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Current password is incorrect"


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, user_headers):
    response = await client.post("/api/v1/auth/logout", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"


async def _login(client: AsyncClient, email: str) -> dict:
    response = await client.post("/api/v1/auth/login", json={"email": email, "password": TEST_PASSWORD})
    return response.json()["data"]
