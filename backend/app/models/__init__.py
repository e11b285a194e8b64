# Re-export all models for convenient imports
from app.models.geography import State, District, Range, Battalion
from app.models.questionnaire import Module, Topic, SubTopic, Question, FormType, QuestionType
from app.models.access import (
    Menu, SubMenu, Role, Permission,
    RolePermission, RoleMenu, RoleSubMenu, RoleTopic, RoleQuestion,
)
from app.models.user import User
from app.models.communication import (
    Communication, CommunicationUser, CommunicationMessage,
    CommunicationMessageUser, CommunicationAttachment, MessageStatus,
)
from app.models.performance import PerformanceStatistic, ReportCache, StatisticStatus

__all__ = [
    # Geography
    "State",
    "District",
    "Range",
    "Battalion",
    # Questionnaire
    "Module",
    "Topic",
    "SubTopic",
    "Question",
    "FormType",
    "QuestionType",
    # Navigation / access
    "Menu",
    "SubMenu",
    "Role",
    "Permission",
    "RolePermission",
    "RoleMenu",
    "RoleSubMenu",
    "RoleTopic",
    "RoleQuestion",
    # Users
    "User",
    # Communications
    "Communication",
    "CommunicationUser",
    "CommunicationMessage",
    "CommunicationMessageUser",
    "CommunicationAttachment",
    "MessageStatus",
    # Statistics / reports
    "PerformanceStatistic",
    "ReportCache",
    "StatisticStatus",
]
