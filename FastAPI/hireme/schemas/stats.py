from datetime import datetime

from hireme.schemas.auth import UserResponse
from hireme.schemas.common import CamelModel


class EmployerOverview(CamelModel):
    total_jobs: int
    active_jobs: int
    total_applications: int


class SeekerOverview(CamelModel):
    total_applications: int
    pending_applications: int
    interview_scheduled_applications: int


class UserStats(CamelModel):
    profile: UserResponse
    joined_date: datetime | None = None
    last_login: datetime | None = None
    employer: EmployerOverview | None = None
    jobseeker: SeekerOverview | None = None
