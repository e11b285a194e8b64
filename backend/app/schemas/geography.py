"""
State / District / Range / Battalion Schemas
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from app.schemas.common import AuditedResponse


# ============== States ==============

class StateCreate(BaseModel):
    state_name: str = Field(..., min_length=2, max_length=250)
    state_description: Optional[str] = Field(None, max_length=1000)
    active: bool = True


class StateUpdate(BaseModel):
    state_name: Optional[str] = Field(None, min_length=2, max_length=250)
    state_description: Optional[str] = Field(None, max_length=1000)
    active: Optional[bool] = None


class StateResponse(AuditedResponse):
    state_name: str
    state_description: Optional[str] = None


# ============== Districts ==============

class DistrictCreate(BaseModel):
    state_id: int
    district_name: str = Field(..., min_length=2, max_length=250)
    district_description: Optional[str] = Field(None, max_length=1000)
    active: bool = True


class DistrictUpdate(BaseModel):
    state_id: Optional[int] = None
    district_name: Optional[str] = Field(None, min_length=2, max_length=250)
    district_description: Optional[str] = Field(None, max_length=1000)
    active: Optional[bool] = None


class DistrictResponse(AuditedResponse):
    state_id: int
    district_name: str
    district_description: Optional[str] = None


# ============== Ranges ==============

class RangeBase(BaseModel):
    range_head: Optional[str] = Field(None, max_length=250)
    range_contact_no: Optional[str] = Field(None, max_length=20)
    range_mobile_no: Optional[str] = Field(None, pattern=r'^\d{10}$')
    range_email: Optional[EmailStr] = None
    range_description: Optional[str] = Field(None, max_length=1000)
    range_image: Optional[str] = Field(None, max_length=500)
    range_person_image: Optional[str] = Field(None, max_length=500)


class RangeCreate(RangeBase):
    district_id: int
    range_name: str = Field(..., min_length=2, max_length=250)
    active: bool = True


class RangeUpdate(RangeBase):
    district_id: Optional[int] = None
    range_name: Optional[str] = Field(None, min_length=2, max_length=250)
    active: Optional[bool] = None


class RangeResponse(AuditedResponse):
    district_id: int
    range_name: str
    range_head: Optional[str] = None
    range_contact_no: Optional[str] = None
    range_mobile_no: Optional[str] = None
    range_email: Optional[str] = None
    range_description: Optional[str] = None
    range_image: Optional[str] = None
    range_person_image: Optional[str] = None


# ============== Battalions ==============

class BattalionBase(BaseModel):
    district_id: Optional[int] = None
    battalion_head: Optional[str] = Field(None, max_length=250)
    battalion_contact_no: Optional[str] = Field(None, max_length=20)
    battalion_mobile_no: Optional[str] = Field(None, pattern=r'^\d{10}$')
    battalion_email: Optional[EmailStr] = None
    battalion_image: Optional[str] = Field(None, max_length=500)
    battalion_person_image: Optional[str] = Field(None, max_length=500)
    battalion_area: Optional[str] = Field(None, max_length=250)


class BattalionCreate(BattalionBase):
    range_id: int
    battalion_name: str = Field(..., min_length=2, max_length=250)
    active: bool = True


class BattalionUpdate(BattalionBase):
    range_id: Optional[int] = None
    battalion_name: Optional[str] = Field(None, min_length=2, max_length=250)
    active: Optional[bool] = None


class BattalionResponse(AuditedResponse):
    range_id: int
    district_id: Optional[int] = None
    battalion_name: str
    battalion_head: Optional[str] = None
    battalion_contact_no: Optional[str] = None
    battalion_mobile_no: Optional[str] = None
    battalion_email: Optional[str] = None
    battalion_image: Optional[str] = None
    battalion_person_image: Optional[str] = None
    battalion_area: Optional[str] = None
