"""
Shared schema pieces - audit fields, ordering and cloning payloads
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class AuditedResponse(BaseModel):
    """Columns every row carries"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    active: bool
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_date: datetime
    updated_date: datetime


class OrderUpdate(BaseModel):
    priority: int = Field(..., ge=0)


class ReorderItem(BaseModel):
    id: int
    priority: int = Field(..., ge=0)


class CloneRequest(BaseModel):
    """Optional new name for the copy"""
    name: Optional[str] = Field(None, min_length=2, max_length=250)
