"""
Menu / SubMenu / Role / Permission Schemas and permission-handle payloads
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any

from app.schemas.common import AuditedResponse


# ============== Menus ==============

class MenuCreate(BaseModel):
    menu_name: str = Field(..., min_length=2, max_length=250)
    menu_url: Optional[str] = Field(None, max_length=500)
    priority: int = Field(0, ge=0)
    active: bool = True


class MenuUpdate(BaseModel):
    menu_name: Optional[str] = Field(None, min_length=2, max_length=250)
    menu_url: Optional[str] = Field(None, max_length=500)
    priority: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None


class MenuResponse(AuditedResponse):
    menu_name: str
    menu_url: Optional[str] = None
    priority: int


class SubMenuCreate(BaseModel):
    menu_id: int
    menu_name: str = Field(..., min_length=2, max_length=250)
    menu_url: Optional[str] = Field(None, max_length=500)
    priority: int = Field(0, ge=0)
    active: bool = True


class SubMenuUpdate(BaseModel):
    menu_id: Optional[int] = None
    menu_name: Optional[str] = Field(None, min_length=2, max_length=250)
    menu_url: Optional[str] = Field(None, max_length=500)
    priority: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None


class SubMenuResponse(AuditedResponse):
    menu_id: int
    menu_name: str
    menu_url: Optional[str] = None
    priority: int


class UserMenuResponse(MenuResponse):
    """Menu with the sub-menus visible to a role"""
    sub_menus: List[SubMenuResponse] = []


# ============== Roles ==============

class RoleCreate(BaseModel):
    role_name: str = Field(..., min_length=2, max_length=100)
    role_description: Optional[str] = Field(None, max_length=1000)
    active: bool = True


class RoleUpdate(BaseModel):
    role_name: Optional[str] = Field(None, min_length=2, max_length=100)
    role_description: Optional[str] = Field(None, max_length=1000)
    active: Optional[bool] = None


class RoleResponse(AuditedResponse):
    role_name: str
    role_description: Optional[str] = None


# ============== Permissions ==============

class PermissionCreate(BaseModel):
    permission_name: str = Field(..., min_length=2, max_length=250)
    permission_code: str = Field(..., min_length=2, max_length=100)
    permission_url: Optional[str] = Field(None, max_length=500)
    active: bool = True

    @field_validator('permission_code')
    @classmethod
    def uppercase_code(cls, v):
        return v.upper().strip()


class PermissionUpdate(BaseModel):
    permission_name: Optional[str] = Field(None, min_length=2, max_length=250)
    permission_code: Optional[str] = Field(None, min_length=2, max_length=100)
    permission_url: Optional[str] = Field(None, max_length=500)
    active: Optional[bool] = None

    @field_validator('permission_code')
    @classmethod
    def uppercase_code(cls, v):
        return v.upper().strip() if v else v


class PermissionResponse(AuditedResponse):
    permission_name: str
    permission_code: str
    permission_url: Optional[str] = None


# ============== Permission handling ==============

class RoleAssignmentUpdate(BaseModel):
    """Each list, when given, replaces the role's active assignments of that kind"""
    permission_ids: Optional[List[int]] = None
    menu_ids: Optional[List[int]] = None
    sub_menu_ids: Optional[List[int]] = None
    topic_ids: Optional[List[int]] = None
    question_ids: Optional[List[int]] = None


class AssignedPermission(PermissionResponse):
    assigned: bool = False


class RoleAssignments(BaseModel):
    role: RoleResponse
    permissions: List[AssignedPermission]
    menu_ids: List[int]
    sub_menu_ids: List[int]
    topic_ids: List[int]
    question_ids: List[int]


class PermissionCheck(BaseModel):
    has_permission: bool
    permission: Optional[Dict[str, Any]] = None
