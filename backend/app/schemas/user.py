"""
User and Auth Schemas
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import date, datetime

from app.schemas.common import AuditedResponse

PHONE_PATTERN = r'^[6-9]\d{9}$'


class UserBase(BaseModel):
    last_name: Optional[str] = Field(None, max_length=100)
    mobile_no: Optional[str] = Field(None, pattern=PHONE_PATTERN, description="10-digit mobile number")
    contact_no: Optional[str] = Field(None, max_length=20)
    user_image: Optional[str] = Field(None, max_length=500)
    role_id: Optional[int] = None
    state_id: Optional[int] = None
    district_id: Optional[int] = None
    range_id: Optional[int] = None
    battalion_id: Optional[int] = None
    joining_date: Optional[date] = None
    end_date: Optional[date] = None
    number_subdivision: Optional[int] = Field(None, ge=0)
    number_circle: Optional[int] = Field(None, ge=0)
    number_ps: Optional[int] = Field(None, ge=0)
    number_op: Optional[int] = Field(None, ge=0)


class UserCreate(UserBase):
    first_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role_id: int
    verified: bool = False
    active: bool = True


class UserUpdate(UserBase):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    verified: Optional[bool] = None
    active: Optional[bool] = None


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own record"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    mobile_no: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    contact_no: Optional[str] = Field(None, max_length=20)
    user_image: Optional[str] = Field(None, max_length=500)


class AdminPasswordReset(BaseModel):
    new_password: str = Field(..., min_length=6, max_length=128)


class RoleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role_name: str


class UserResponse(AuditedResponse):
    first_name: str
    last_name: Optional[str] = None
    full_name: str
    email: str
    mobile_no: Optional[str] = None
    contact_no: Optional[str] = None
    user_image: Optional[str] = None
    role_id: Optional[int] = None
    role: Optional[RoleSummary] = None
    state_id: Optional[int] = None
    district_id: Optional[int] = None
    range_id: Optional[int] = None
    battalion_id: Optional[int] = None
    verified: bool
    is_first: bool
    joining_date: Optional[date] = None
    end_date: Optional[date] = None
    number_subdivision: int
    number_circle: int
    number_ps: int
    number_op: int
    last_login: Optional[datetime] = None


# ============== Auth ==============

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
