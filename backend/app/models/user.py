from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, ForeignKey
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.mixins import AuditMixin


class User(AuditMixin, Base):
    """User model - placed in the hierarchy by its state/district/range/battalion"""
    __tablename__ = "users"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    mobile_no = Column(String(20), nullable=True)
    contact_no = Column(String(20), nullable=True)
    user_image = Column(String(500), nullable=True)

    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True, index=True)
    state_id = Column(Integer, ForeignKey("states.id"), nullable=True, index=True)
    district_id = Column(Integer, ForeignKey("districts.id"), nullable=True, index=True)
    range_id = Column(Integer, ForeignKey("ranges.id"), nullable=True, index=True)
    battalion_id = Column(Integer, ForeignKey("battalions.id"), nullable=True, index=True)

    verified = Column(Boolean, default=False, nullable=False)
    is_first = Column(Boolean, default=True, nullable=False)
    joining_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # Unit counts used by the statistics forms
    number_subdivision = Column(Integer, default=0, nullable=False)
    number_circle = Column(Integer, default=0, nullable=False)
    number_ps = Column(Integer, default=0, nullable=False)
    number_op = Column(Integer, default=0, nullable=False)

    # OTP for confirming a statistics submission
    otp = Column(String(10), nullable=True)
    otp_validity = Column(DateTime, nullable=True)

    last_login = Column(DateTime, nullable=True)

    role = relationship("Role", lazy="joined")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f"<User {self.email}>"
