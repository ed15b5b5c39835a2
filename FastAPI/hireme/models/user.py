from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hireme.database import Base, JSONType

ROLE_JOBSEEKER = "jobseeker"
ROLE_EMPLOYER = "employer"
USER_ROLES = (ROLE_JOBSEEKER, ROLE_EMPLOYER)


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_JOBSEEKER)  # jobseeker | employer; fixed at creation
    # Employer-only
    company = Column(String(100))
    website = Column(String)
    # Profile
    phone = Column(String(30))
    location = Column(String(100))
    bio = Column(Text)
    skills = Column(JSONType, default=list)
    resume = Column(String)  # URL of the seeker's stored resume, copied onto applications
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    jobs = relationship("Job", back_populates="employer")
    applications = relationship(
        "Application",
        back_populates="applicant",
        foreign_keys="Application.applicant_id",
    )

    @property
    def is_employer(self) -> bool:
        return self.role == ROLE_EMPLOYER
