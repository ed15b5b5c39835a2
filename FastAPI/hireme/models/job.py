from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hireme.database import Base, JSONType

JOB_TYPES = ("full-time", "part-time", "contract", "internship", "temporary")
WORK_MODES = ("remote", "on-site", "hybrid")
CURRENCIES = ("USD", "EUR", "GBP", "INR", "CAD", "AUD")
SALARY_PERIODS = ("hourly", "monthly", "yearly")
EDUCATION_LEVELS = ("high-school", "bachelor", "master", "phd", "not-specified")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Job(Base):
    """A posting owned by one employer. Never hard-deleted; is_active=False hides it."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, index=True)
    employer_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    company = Column(String(100), nullable=False)
    location = Column(String(100), nullable=False, index=True)
    job_type = Column(String(20), nullable=False, default="full-time", index=True)
    work_mode = Column(String(20), nullable=False, default="on-site", index=True)
    salary_min = Column(Integer, index=True)
    salary_max = Column(Integer, index=True)
    salary_currency = Column(String(3))
    salary_period = Column(String(10))
    experience_min = Column(Integer, nullable=False, default=0)
    experience_max = Column(Integer)
    education = Column(String(20), nullable=False, default="not-specified")
    skills = Column(JSONType, default=list)
    benefits = Column(JSONType, default=list)
    application_deadline = Column(DateTime(timezone=True))
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    applications_count = Column(Integer, nullable=False, default=0)
    views_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employer = relationship("User", back_populates="jobs")
    tag_rows = relationship(
        "JobTag",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobTag.position",
        lazy="selectin",
    )
    applications = relationship("Application", back_populates="job")

    @property
    def tags(self) -> list[str]:
        return [t.tag for t in self.tag_rows]

    def set_tags(self, tags: list[str]) -> None:
        self.tag_rows = [JobTag(tag=tag, position=i) for i, tag in enumerate(tags)]

    def is_expired(self, now: datetime | None = None) -> bool:
        deadline = as_utc(self.application_deadline)
        if deadline is None:
            return False
        return deadline < (now or utcnow())

    @property
    def salary_display(self) -> str:
        if self.salary_min is None and self.salary_max is None:
            return "Not specified"
        currency = self.salary_currency or "USD"
        period = self.salary_period or "yearly"
        if self.salary_min is not None and self.salary_max is not None:
            return f"{currency} {self.salary_min:,} - {self.salary_max:,} / {period}"
        if self.salary_min is not None:
            return f"From {currency} {self.salary_min:,} / {period}"
        return f"Up to {currency} {self.salary_max:,} / {period}"

    @property
    def experience_display(self) -> str:
        low, high = self.experience_min, self.experience_max
        if low is not None and high is not None:
            return f"{low}-{high} years"
        if low is not None:
            return f"{low}+ years"
        if high is not None:
            return f"Up to {high} years"
        return "Not specified"


class JobTag(Base):
    """Lowercased tag on a job. Duplicates are allowed; position keeps input order."""

    __tablename__ = "job_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    tag = Column(String(30), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    job = relationship("Job", back_populates="tag_rows")
