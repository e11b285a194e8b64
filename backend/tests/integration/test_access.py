"""
Integration tests for roles, permissions, role assignments and menus
"""
import pytest
from httpx import AsyncClient

from app.models import Menu, Permission, RoleMenu, RolePermission, RoleSubMenu, SubMenu


@pytest.fixture
async def roles_permission(db_session):
    permission = Permission(
        permission_name="Manage roles", permission_code="ROLE_WRITE",
        permission_url="/api/v1/roles", active=True,
    )
    db_session.add(permission)
    await db_session.commit()
    return permission


@pytest.mark.asyncio
async def test_admin_creates_role(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/roles", json={"role_name": "District Admin"}, headers=admin_headers
    )

    assert response.status_code == 201
    assert response.json()["message"] == "Role created successfully"


@pytest.mark.asyncio
async def test_role_write_requires_permission(client: AsyncClient, user_headers):
    response = await client.post(
        "/api/v1/roles", json={"role_name": "District Admin"}, headers=user_headers
    )

    assert response.status_code == 403
    assert response.json()["status"] == "ERROR"


@pytest.mark.asyncio
async def test_granted_permission_allows_write(
    client: AsyncClient, db_session, roles, roles_permission, user_headers
):
    db_session.add(RolePermission(role_id=roles.battalion_user.id, permission_id=roles_permission.id, active=True))
    await db_session.commit()

    response = await client.post(
        "/api/v1/roles", json={"role_name": "District Admin"}, headers=user_headers
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_role_search(client: AsyncClient, roles, admin_headers):
    response = await client.get("/api/v1/roles/search", params={"q": "admin"}, headers=admin_headers)

    names = [r["role_name"] for r in response.json()["data"]]
    assert names == ["Range Admin", "System Admin"]


@pytest.mark.asyncio
async def test_delete_role_with_users_blocked(client: AsyncClient, roles, admin_headers):
    response = await client.delete(f"/api/v1/roles/{roles.system_admin.id}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete role with associated users"


@pytest.mark.asyncio
async def test_permission_code_is_uppercased(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/permissions",
        json={"permission_name": "View reports", "permission_code": "report_view", "permission_url": "/api/v1/reports"},
        headers=admin_headers,
    )
    assert response.json()["data"]["permission_code"] == "REPORT_VIEW"

    by_code = await client.get("/api/v1/permissions/by-code/report_view", headers=admin_headers)
    assert by_code.json()["data"]["permission_name"] == "View reports"


@pytest.mark.asyncio
async def test_assignments_replace_and_list(client: AsyncClient, db_session, roles, roles_permission, admin_headers):
    menu = Menu(menu_name="Masters", priority=1, active=True)
    db_session.add(menu)
    await db_session.commit()
    role_id = roles.range_admin.id

    response = await client.post(
        f"/api/v1/permission-handle/{role_id}",
        json={"permission_ids": [roles_permission.id], "menu_ids": [menu.id]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["menu_ids"] == [menu.id]
    assert [p["assigned"] for p in data["permissions"]] == [True]

    response = await client.post(
        f"/api/v1/permission-handle/{role_id}", json={"permission_ids": []}, headers=admin_headers
    )
    data = response.json()["data"]
    assert [p["assigned"] for p in data["permissions"]] == [False]
    assert data["menu_ids"] == [menu.id]


@pytest.mark.asyncio
async def test_assignment_unknown_target(client: AsyncClient, roles, admin_headers):
    response = await client.post(
        f"/api/v1/permission-handle/{roles.range_admin.id}",
        json={"menu_ids": [999]},
        headers=admin_headers,
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Menu not found"


@pytest.mark.asyncio
async def test_permission_check_matches_url_pattern(client: AsyncClient, db_session, roles, admin_headers):
    permission = Permission(
        permission_name="View user", permission_code="USER_VIEW",
        permission_url="/api/v1/users/:id", active=True,
    )
    db_session.add(permission)
    await db_session.flush()
    db_session.add(RolePermission(role_id=roles.range_admin.id, permission_id=permission.id, active=True))
    await db_session.commit()

    response = await client.get(
        f"/api/v1/permission-handle/{roles.range_admin.id}/check",
        params={"url": "/api/v1/users/42"},
        headers=admin_headers,
    )
    data = response.json()["data"]
    assert data["has_permission"] is True
    assert data["permission"]["permission_code"] == "USER_VIEW"

    response = await client.get(
        f"/api/v1/permission-handle/{roles.battalion_user.id}/check",
        params={"url": "/api/v1/users/42"},
        headers=admin_headers,
    )
    assert response.json()["data"]["has_permission"] is False


@pytest.mark.asyncio
async def test_user_menu_tree(client: AsyncClient, db_session, roles, battalion_user, user_headers):
    menu = Menu(menu_name="Statistics", priority=1, active=True)
    hidden = Menu(menu_name="Masters", priority=2, active=True)
    db_session.add_all([menu, hidden])
    await db_session.flush()
    visible_sub = SubMenu(menu_id=menu.id, menu_name="Monthly entry", priority=1, active=True)
    hidden_sub = SubMenu(menu_id=menu.id, menu_name="Approvals", priority=2, active=True)
    db_session.add_all([visible_sub, hidden_sub])
    await db_session.flush()
    role_id = roles.battalion_user.id
    db_session.add_all([
        RoleMenu(role_id=role_id, menu_id=menu.id, active=True),
        RoleSubMenu(role_id=role_id, sub_menu_id=visible_sub.id, active=True),
    ])
    await db_session.commit()

    response = await client.get("/api/v1/menus/user", headers=user_headers)

    tree = response.json()["data"]
    assert [m["menu_name"] for m in tree] == ["Statistics"]
    assert [s["menu_name"] for s in tree[0]["sub_menus"]] == ["Monthly entry"]

    other = await client.get(f"/api/v1/menus/user/{battalion_user.id}", headers=user_headers)
    assert other.json()["data"] == tree


@pytest.mark.asyncio
async def test_sub_menus_by_menu(client: AsyncClient, db_session, admin_headers):
    menu = Menu(menu_name="Reports", priority=1, active=True)
    db_session.add(menu)
    await db_session.commit()

    await client.post(
        "/api/v1/sub-menus",
        json={"menu_id": menu.id, "menu_name": "Monthly report", "menu_url": "/reports/monthly"},
        headers=admin_headers,
    )
    response = await client.get(f"/api/v1/sub-menus/by-menu/{menu.id}", headers=admin_headers)

    assert [s["menu_name"] for s in response.json()["data"]] == ["Monthly report"]

    blocked = await client.delete(f"/api/v1/menus/{menu.id}", headers=admin_headers)
    assert blocked.json()["message"] == "Cannot delete menu with associated sub-menus"
