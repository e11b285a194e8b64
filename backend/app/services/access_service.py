"""
Access services - menus, sub-menus, roles, permissions and role assignments

Handles:
- CRUD for the navigation and permission tables
- Role menu tree (menus with their role-visible sub-menus)
- Replacing a role's permission/menu/topic/question assignments
- Matching a request path against permission URL patterns
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Any, Dict, List, Optional, Sequence, Type
import re

from app.core.database import Base
from app.core.exceptions import ResourceNotFoundError
from app.models import (
    Menu, SubMenu, Role, Permission, User, Module, Topic, Question,
    RolePermission, RoleMenu, RoleSubMenu, RoleTopic, RoleQuestion,
)
from app.services.crud_service import CRUDService

_URL_PARAM = re.compile(r':[A-Za-z_]\w*|\{[A-Za-z_]\w*\}')


def permission_pattern(permission_url: str) -> re.Pattern:
    """
    /api/v1/users/:id -> ^/api/v1/users/[^/]+$
    Both :param and {param} placeholders are accepted.
    """
    parts = _URL_PARAM.split(permission_url.rstrip('/'))
    return re.compile('^' + '[^/]+'.join(re.escape(part) for part in parts) + '/?$')


class MenuService(CRUDService[Menu]):
    model = Menu
    label = "Menu"
    plural = "menus"
    name_column = "menu_name"
    search_columns = ("menu_name", "menu_url")
    sort_columns = ("menu_name", "priority")
    default_order = ("priority", "menu_name")
    children = (
        (SubMenu, "menu_id", "sub-menus"),
        (RoleMenu, "menu_id", "role assignments"),
    )

    async def menus_for_role(self, db: AsyncSession, role_id: Optional[int]) -> List[Dict[str, Any]]:
        """Active menus assigned to the role, each with its role-visible sub-menus"""
        if role_id is None:
            return []

        result = await db.execute(
            select(Menu)
            .join(RoleMenu, RoleMenu.menu_id == Menu.id)
            .where(RoleMenu.role_id == role_id, RoleMenu.active.is_(True), Menu.active.is_(True))
            .order_by(Menu.priority, Menu.menu_name)
        )
        menus = list(result.scalars().all())

        result = await db.execute(
            select(SubMenu)
            .join(RoleSubMenu, RoleSubMenu.sub_menu_id == SubMenu.id)
            .where(RoleSubMenu.role_id == role_id, RoleSubMenu.active.is_(True), SubMenu.active.is_(True))
            .order_by(SubMenu.priority, SubMenu.menu_name)
        )
        sub_menus_by_menu: Dict[int, list] = {}
        for sub_menu in result.scalars().all():
            sub_menus_by_menu.setdefault(sub_menu.menu_id, []).append(sub_menu)

        return [{"menu": menu, "sub_menus": sub_menus_by_menu.get(menu.id, [])} for menu in menus]

    async def menus_for_user(self, db: AsyncSession, user_id: int) -> List[Dict[str, Any]]:
        user = await db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return await self.menus_for_role(db, user.role_id)


class SubMenuService(CRUDService[SubMenu]):
    model = SubMenu
    label = "Sub-menu"
    plural = "sub-menus"
    name_column = "menu_name"
    search_columns = ("menu_name", "menu_url")
    sort_columns = ("menu_name", "priority", "menu_id")
    filter_columns = ("menu_id",)
    default_order = ("priority", "menu_name")
    parents = {"menu_id": (Menu, "Menu")}
    children = (
        (RoleSubMenu, "sub_menu_id", "role assignments"),
        (Module, "submenu_id", "modules"),
        (Topic, "submenu_id", "topics"),
    )

    async def by_menu(self, db: AsyncSession, menu_id: int) -> List[SubMenu]:
        return await self.list_active(db, menu_id=menu_id)


class RoleService(CRUDService[Role]):
    model = Role
    label = "Role"
    plural = "roles"
    name_column = "role_name"
    search_columns = ("role_name", "role_description")
    sort_columns = ("role_name",)
    default_order = ("role_name",)
    children = ((User, "role_id", "users"),)

    async def quick_search(self, db: AsyncSession, term: str, limit: int = 20) -> List[Role]:
        result = await db.execute(
            select(Role)
            .where(Role.role_name.ilike(f"%{term.strip()}%"))
            .order_by(Role.role_name)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def delete(self, db: AsyncSession, item_id: int) -> None:
        """Roles take their assignment rows with them"""
        await self.get(db, item_id)
        await self.check_children(db, item_id)
        for link_model in (RolePermission, RoleMenu, RoleSubMenu, RoleTopic, RoleQuestion):
            result = await db.execute(select(link_model).where(link_model.role_id == item_id))
            for link in result.scalars().all():
                await db.delete(link)
        await super().delete(db, item_id)


class PermissionService(CRUDService[Permission]):
    model = Permission
    label = "Permission"
    plural = "permissions"
    name_column = "permission_code"
    search_columns = ("permission_name", "permission_code", "permission_url")
    sort_columns = ("permission_name", "permission_code")
    default_order = ("permission_name",)
    children = ((RolePermission, "permission_id", "role permissions"),)

    async def by_code(self, db: AsyncSession, code: str) -> Permission:
        result = await db.execute(select(Permission).where(Permission.permission_code == code.upper()))
        permission = result.scalar_one_or_none()
        if permission is None:
            raise ResourceNotFoundError("Permission", code)
        return permission

    async def match_url(self, db: AsyncSession, path: str) -> Optional[Permission]:
        """Active permission whose URL (exact first, then pattern) matches the path"""
        path = path.split('?')[0].rstrip('/') or '/'
        permissions = await self.list_active(db)

        for permission in permissions:
            if permission.permission_url and permission.permission_url.rstrip('/') == path:
                return permission
        for permission in permissions:
            if permission.permission_url and permission_pattern(permission.permission_url).match(path):
                return permission
        return None


class PermissionHandleService:
    """Role assignment management (permissions, menus, sub-menus, topics, questions)"""

    # payload key -> (link model, target column, target model, target label)
    ASSIGNMENTS = {
        "permission_ids": (RolePermission, "permission_id", Permission, "Permission"),
        "menu_ids": (RoleMenu, "menu_id", Menu, "Menu"),
        "sub_menu_ids": (RoleSubMenu, "sub_menu_id", SubMenu, "Sub-menu"),
        "topic_ids": (RoleTopic, "topic_id", Topic, "Topic"),
        "question_ids": (RoleQuestion, "question_id", Question, "Question"),
    }

    async def _active_ids(self, db: AsyncSession, link_model: Type[Base], column: str, role_id: int) -> List[int]:
        result = await db.execute(
            select(getattr(link_model, column))
            .where(link_model.role_id == role_id, link_model.active.is_(True))
            .order_by(getattr(link_model, column))
        )
        return list(result.scalars().all())

    async def get_assignments(self, db: AsyncSession, role_id: int) -> Dict[str, Any]:
        role = await role_service.get(db, role_id)
        assigned = set(await self._active_ids(db, RolePermission, "permission_id", role_id))
        permissions = await permission_service.list_active(db)

        return {
            "role": role,
            "permissions": [(permission, permission.id in assigned) for permission in permissions],
            "menu_ids": await self._active_ids(db, RoleMenu, "menu_id", role_id),
            "sub_menu_ids": await self._active_ids(db, RoleSubMenu, "sub_menu_id", role_id),
            "topic_ids": await self._active_ids(db, RoleTopic, "topic_id", role_id),
            "question_ids": await self._active_ids(db, RoleQuestion, "question_id", role_id),
        }

    async def _replace(
        self,
        db: AsyncSession,
        role_id: int,
        key: str,
        target_ids: Sequence[int],
        user_id: Optional[int]
    ) -> None:
        link_model, column, target_model, target_label = self.ASSIGNMENTS[key]
        wanted = set(target_ids)

        if wanted:
            result = await db.execute(select(target_model.id).where(target_model.id.in_(wanted)))
            missing = wanted - set(result.scalars().all())
            if missing:
                raise ResourceNotFoundError(target_label, sorted(missing)[0])

        result = await db.execute(select(link_model).where(link_model.role_id == role_id))
        existing = {getattr(link, column): link for link in result.scalars().all()}

        for target_id, link in existing.items():
            should_be_active = target_id in wanted
            if link.active != should_be_active:
                link.active = should_be_active
                link.updated_by = user_id

        for target_id in wanted - set(existing):
            db.add(link_model(
                role_id=role_id,
                active=True,
                created_by=user_id,
                updated_by=user_id,
                **{column: target_id},
            ))

    async def update_assignments(
        self,
        db: AsyncSession,
        role_id: int,
        payload: Dict[str, Optional[List[int]]],
        user_id: Optional[int] = None
    ) -> Dict[str, Any]:
        await role_service.get(db, role_id)
        for key in self.ASSIGNMENTS:
            ids = payload.get(key)
            if ids is not None:
                await self._replace(db, role_id, key, ids, user_id)
        await db.flush()
        return await self.get_assignments(db, role_id)

    async def has_permission(self, db: AsyncSession, role_id: Optional[int], path: str) -> Dict[str, Any]:
        permission = await permission_service.match_url(db, path)
        if permission is None or role_id is None:
            return {"has_permission": False, "permission": permission}

        result = await db.execute(
            select(RolePermission.id).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission.id,
                RolePermission.active.is_(True),
            )
        )
        return {"has_permission": result.first() is not None, "permission": permission}


menu_service = MenuService()
sub_menu_service = SubMenuService()
role_service = RoleService()
permission_service = PermissionService()
permission_handle_service = PermissionHandleService()
