from sqlalchemy import Column, String, Integer, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.mixins import AuditMixin


class State(AuditMixin, Base):
    """Top of the geography hierarchy"""
    __tablename__ = "states"

    state_name = Column(String(250), unique=True, nullable=False, index=True)
    state_description = Column(Text, nullable=True)

    districts = relationship("District", back_populates="state")

    def __repr__(self):
        return f"<State {self.state_name}>"


class District(AuditMixin, Base):
    __tablename__ = "districts"
    __table_args__ = (
        UniqueConstraint("state_id", "district_name", name="uq_district_state_name"),
    )

    state_id = Column(Integer, ForeignKey("states.id"), nullable=False, index=True)
    district_name = Column(String(250), nullable=False)
    district_description = Column(Text, nullable=True)

    state = relationship("State", back_populates="districts")
    ranges = relationship("Range", back_populates="district")

    def __repr__(self):
        return f"<District {self.district_name}>"


class Range(AuditMixin, Base):
    """A range groups battalions within a district"""
    __tablename__ = "ranges"
    __table_args__ = (
        UniqueConstraint("district_id", "range_name", name="uq_range_district_name"),
    )

    district_id = Column(Integer, ForeignKey("districts.id"), nullable=False, index=True)
    range_name = Column(String(250), nullable=False)
    range_head = Column(String(250), nullable=True)
    range_contact_no = Column(String(20), nullable=True)
    range_mobile_no = Column(String(20), nullable=True)
    range_email = Column(String(255), nullable=True)
    range_description = Column(Text, nullable=True)
    range_image = Column(String(500), nullable=True)
    range_person_image = Column(String(500), nullable=True)

    district = relationship("District", back_populates="ranges")
    battalions = relationship("Battalion", back_populates="range")

    def __repr__(self):
        return f"<Range {self.range_name}>"


class Battalion(AuditMixin, Base):
    __tablename__ = "battalions"
    __table_args__ = (
        UniqueConstraint("range_id", "battalion_name", name="uq_battalion_range_name"),
    )

    range_id = Column(Integer, ForeignKey("ranges.id"), nullable=False, index=True)
    district_id = Column(Integer, ForeignKey("districts.id"), nullable=True, index=True)
    battalion_name = Column(String(250), nullable=False)
    battalion_head = Column(String(250), nullable=True)
    battalion_contact_no = Column(String(20), nullable=True)
    battalion_mobile_no = Column(String(20), nullable=True)
    battalion_email = Column(String(255), nullable=True)
    battalion_image = Column(String(500), nullable=True)
    battalion_person_image = Column(String(500), nullable=True)
    battalion_area = Column(String(250), nullable=True)

    range = relationship("Range", back_populates="battalions")

    def __repr__(self):
        return f"<Battalion {self.battalion_name}>"
