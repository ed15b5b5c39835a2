import math

from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, ForeignKey, Text, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hireme.database import Base
from hireme.models.job import as_utc, utcnow

APPLICATION_STATUSES = (
    "pending",
    "reviewed",
    "shortlisted",
    "interview-scheduled",
    "rejected",
    "hired",
)
WITHDRAWABLE_STATUSES = ("pending", "reviewed")


class Application(Base):
    """A seeker's application to a job. One row per (job, applicant), ever."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
        Index("ix_applications_job_status", "job_id", "status"),
        Index("ix_applications_applicant_created", "applicant_id", "created_at"),
        Index("ix_applications_employer_created", "employer_id", "created_at"),
    )

    id = Column(String, primary_key=True, index=True)
    job_id = Column(String, ForeignKey("jobs.id"), nullable=False)
    applicant_id = Column(String, ForeignKey("users.id"), nullable=False)
    employer_id = Column(String, ForeignKey("users.id"), nullable=False)  # copied from the job at creation
    cover_letter = Column(Text, nullable=False)
    resume = Column(String)
    expected_salary_amount = Column(Integer)
    expected_salary_currency = Column(String(3))
    expected_salary_period = Column(String(10))
    available_from = Column(Date)
    status = Column(String(30), nullable=False, default="pending", index=True)
    notes = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    reviewed_at = Column(DateTime(timezone=True))
    reviewed_by = Column(String, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    job = relationship("Job", back_populates="applications")
    applicant = relationship("User", back_populates="applications", foreign_keys=[applicant_id])
    employer = relationship("User", foreign_keys=[employer_id])

    def can_be_withdrawn(self) -> bool:
        return self.status in WITHDRAWABLE_STATUSES

    @property
    def application_age(self) -> str:
        created = as_utc(self.created_at)
        if created is None:
            return ""
        days = math.ceil(abs((utcnow() - created).total_seconds()) / 86400)
        if days == 1:
            return "1 day ago"
        if days < 7:
            return f"{days} days ago"
        if days < 30:
            weeks = days // 7
            return "1 week ago" if weeks == 1 else f"{weeks} weeks ago"
        months = days // 30
        return "1 month ago" if months == 1 else f"{months} months ago"

    @property
    def expected_salary_display(self) -> str:
        if not self.expected_salary_amount:
            return "Not specified"
        currency = self.expected_salary_currency or "USD"
        period = self.expected_salary_period or "yearly"
        return f"{currency} {self.expected_salary_amount:,} / {period}"
