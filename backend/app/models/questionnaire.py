from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.models.mixins import AuditMixin


class FormType(str, enum.Enum):
    """How a topic's entry form is laid out"""
    NORMAL = "NORMAL"
    STQ = "STQ"  # sub-topic rows x question columns
    QST = "QST"  # question rows x sub-topic columns


class QuestionType(str, enum.Enum):
    NUMBER = "Number"
    TEXT = "Text"
    DATE = "Date"
    YES_NO = "YesNo"
    FORMULA = "Formula"


class Module(AuditMixin, Base):
    __tablename__ = "modules"

    module_name = Column(String(250), unique=True, nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    submenu_id = Column(Integer, ForeignKey("sub_menus.id"), nullable=True)

    topics = relationship("Topic", back_populates="module")

    def __repr__(self):
        return f"<Module {self.module_name}>"


class Topic(AuditMixin, Base):
    __tablename__ = "topics"
    __table_args__ = (
        UniqueConstraint("module_id", "topic_name", name="uq_topic_module_name"),
    )

    module_id = Column(Integer, ForeignKey("modules.id"), nullable=False, index=True)
    topic_name = Column(String(250), nullable=False)
    sub_name = Column(String(250), nullable=True)
    priority = Column(Integer, default=0, nullable=False)
    form_type = Column(String(20), default=FormType.NORMAL.value, nullable=False)
    submenu_id = Column(Integer, ForeignKey("sub_menus.id"), nullable=True)
    is_show_cumulative = Column(Boolean, default=False, nullable=False)
    is_show_previous = Column(Boolean, default=True, nullable=False)
    is_start_jan = Column(Boolean, default=False, nullable=False)
    start_month = Column(Integer, nullable=True)
    end_month = Column(Integer, nullable=True)

    module = relationship("Module", back_populates="topics")
    sub_topics = relationship("SubTopic", back_populates="topic")
    questions = relationship("Question", back_populates="topic")

    def __repr__(self):
        return f"<Topic {self.topic_name}>"


class SubTopic(AuditMixin, Base):
    __tablename__ = "sub_topics"
    __table_args__ = (
        UniqueConstraint("topic_id", "sub_topic_name", name="uq_sub_topic_topic_name"),
    )

    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=False, index=True)
    sub_topic_name = Column(String(250), nullable=False)
    priority = Column(Integer, default=0, nullable=False)

    topic = relationship("Topic", back_populates="sub_topics")

    def __repr__(self):
        return f"<SubTopic {self.sub_topic_name}>"


class Question(AuditMixin, Base):
    __tablename__ = "questions"
    __table_args__ = (
        UniqueConstraint("topic_id", "sub_topic_id", "question", name="uq_question_topic_text"),
    )

    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=False, index=True)
    sub_topic_id = Column(Integer, ForeignKey("sub_topics.id"), nullable=True, index=True)
    question = Column(String(1000), nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    type = Column(String(20), default=QuestionType.NUMBER.value, nullable=False)

    # Default-value wiring: copy another question's value (default_que / default_sub)
    # from a relative month (default_to) or evaluate default_formula
    default_val = Column(String(250), nullable=True)
    default_que = Column(Integer, nullable=True)
    default_sub = Column(Integer, nullable=True)
    default_to = Column(String(50), nullable=True)
    default_formula = Column(Text, nullable=True)
    que_formula = Column(Text, nullable=True)
    is_previous = Column(Boolean, default=False, nullable=False)
    is_cumulative = Column(Boolean, default=False, nullable=False)

    topic = relationship("Topic", back_populates="questions")

    def __repr__(self):
        return f"<Question {self.id} topic={self.topic_id}>"
