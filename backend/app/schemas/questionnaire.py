"""
Module / Topic / SubTopic / Question Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.models.questionnaire import FormType, QuestionType
from app.schemas.common import AuditedResponse


# ============== Modules ==============

class ModuleCreate(BaseModel):
    module_name: str = Field(..., min_length=2, max_length=250)
    priority: int = Field(0, ge=0)
    submenu_id: Optional[int] = None
    active: bool = True


class ModuleUpdate(BaseModel):
    module_name: Optional[str] = Field(None, min_length=2, max_length=250)
    priority: Optional[int] = Field(None, ge=0)
    submenu_id: Optional[int] = None
    active: Optional[bool] = None


class ModuleResponse(AuditedResponse):
    module_name: str
    priority: int
    submenu_id: Optional[int] = None


# ============== Topics ==============

class TopicBase(BaseModel):
    sub_name: Optional[str] = Field(None, max_length=250)
    form_type: Optional[FormType] = None
    submenu_id: Optional[int] = None
    is_show_cumulative: Optional[bool] = None
    is_show_previous: Optional[bool] = None
    is_start_jan: Optional[bool] = None
    start_month: Optional[int] = Field(None, ge=1, le=12)
    end_month: Optional[int] = Field(None, ge=1, le=12)


class TopicCreate(TopicBase):
    module_id: int
    topic_name: str = Field(..., min_length=2, max_length=250)
    priority: int = Field(0, ge=0)
    form_type: FormType = FormType.NORMAL
    active: bool = True


class TopicUpdate(TopicBase):
    module_id: Optional[int] = None
    topic_name: Optional[str] = Field(None, min_length=2, max_length=250)
    priority: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None


class TopicResponse(AuditedResponse):
    module_id: int
    topic_name: str
    sub_name: Optional[str] = None
    priority: int
    form_type: str
    submenu_id: Optional[int] = None
    is_show_cumulative: bool
    is_show_previous: bool
    is_start_jan: bool
    start_month: Optional[int] = None
    end_month: Optional[int] = None


# ============== Sub-topics ==============

class SubTopicCreate(BaseModel):
    topic_id: int
    sub_topic_name: str = Field(..., min_length=1, max_length=250)
    priority: int = Field(0, ge=0)
    active: bool = True


class SubTopicUpdate(BaseModel):
    topic_id: Optional[int] = None
    sub_topic_name: Optional[str] = Field(None, min_length=1, max_length=250)
    priority: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None


class SubTopicResponse(AuditedResponse):
    topic_id: int
    sub_topic_name: str
    priority: int


# ============== Questions ==============

class QuestionBase(BaseModel):
    sub_topic_id: Optional[int] = None
    default_val: Optional[str] = Field(None, max_length=250)
    default_que: Optional[int] = None
    default_sub: Optional[int] = None
    default_to: Optional[str] = Field(None, max_length=50)
    default_formula: Optional[str] = None
    que_formula: Optional[str] = None
    is_previous: Optional[bool] = None
    is_cumulative: Optional[bool] = None


class QuestionCreate(QuestionBase):
    topic_id: int
    question: str = Field(..., min_length=1, max_length=1000)
    priority: int = Field(0, ge=0)
    type: QuestionType = QuestionType.NUMBER
    active: bool = True

    @field_validator('question')
    @classmethod
    def strip_question(cls, v):
        return v.strip()


class QuestionUpdate(QuestionBase):
    topic_id: Optional[int] = None
    question: Optional[str] = Field(None, min_length=1, max_length=1000)
    priority: Optional[int] = Field(None, ge=0)
    type: Optional[QuestionType] = None
    active: Optional[bool] = None


class QuestionResponse(AuditedResponse):
    topic_id: int
    sub_topic_id: Optional[int] = None
    question: str
    priority: int
    type: str
    default_val: Optional[str] = None
    default_que: Optional[int] = None
    default_sub: Optional[int] = None
    default_to: Optional[str] = None
    default_formula: Optional[str] = None
    que_formula: Optional[str] = None
    is_previous: bool
    is_cumulative: bool
