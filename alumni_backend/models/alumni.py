"""Alumni model.

Profiles are owned by the profile collaborator; surveys only read the
demographic fields below and fan notifications out to every row.
"""
import uuid

from sqlalchemy import Column, Date, DateTime, Integer, String

from alumni_backend.database import Base
from alumni_backend.models.base import get_uuid_column, get_current_utc


class Alumni(Base):
    """Registered alumni."""

    __tablename__ = "alumni"

    alumni_id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    gender = Column(String(20), nullable=True)
    graduation_year = Column(Integer, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    major = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_current_utc, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<Alumni(alumni_id={self.alumni_id}, email={self.email})>"
