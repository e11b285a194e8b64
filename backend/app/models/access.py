from sqlalchemy import Column, String, Integer, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.mixins import AuditMixin


class Menu(AuditMixin, Base):
    """Sidebar menu entry"""
    __tablename__ = "menus"

    menu_name = Column(String(250), unique=True, nullable=False)
    menu_url = Column(String(500), nullable=True)
    priority = Column(Integer, default=0, nullable=False)

    sub_menus = relationship("SubMenu", back_populates="menu")

    def __repr__(self):
        return f"<Menu {self.menu_name}>"


class SubMenu(AuditMixin, Base):
    __tablename__ = "sub_menus"
    __table_args__ = (
        UniqueConstraint("menu_id", "menu_name", name="uq_sub_menu_menu_name"),
    )

    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False, index=True)
    menu_name = Column(String(250), nullable=False)
    menu_url = Column(String(500), nullable=True)
    priority = Column(Integer, default=0, nullable=False)

    menu = relationship("Menu", back_populates="sub_menus")

    def __repr__(self):
        return f"<SubMenu {self.menu_name}>"


class Role(AuditMixin, Base):
    __tablename__ = "roles"

    role_name = Column(String(100), unique=True, nullable=False)
    role_description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Role {self.role_name}>"


class Permission(AuditMixin, Base):
    """An API route a role may call; permission_url may contain :param segments"""
    __tablename__ = "permissions"

    permission_name = Column(String(250), nullable=False)
    permission_code = Column(String(100), unique=True, nullable=False)
    permission_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Permission {self.permission_code}>"


class RolePermission(AuditMixin, Base):
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
    )

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    permission_id = Column(Integer, ForeignKey("permissions.id"), nullable=False, index=True)


class RoleMenu(AuditMixin, Base):
    __tablename__ = "role_menus"
    __table_args__ = (
        UniqueConstraint("role_id", "menu_id", name="uq_role_menu"),
    )

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id"), nullable=False)


class RoleSubMenu(AuditMixin, Base):
    __tablename__ = "role_sub_menus"
    __table_args__ = (
        UniqueConstraint("role_id", "sub_menu_id", name="uq_role_sub_menu"),
    )

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    sub_menu_id = Column(Integer, ForeignKey("sub_menus.id"), nullable=False)


class RoleTopic(AuditMixin, Base):
    """Topics a role may fill in"""
    __tablename__ = "role_topics"
    __table_args__ = (
        UniqueConstraint("role_id", "topic_id", name="uq_role_topic"),
    )

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=False)


class RoleQuestion(AuditMixin, Base):
    """Optional per-question narrowing of RoleTopic"""
    __tablename__ = "role_questions"
    __table_args__ = (
        UniqueConstraint("role_id", "question_id", name="uq_role_question"),
    )

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
