from hireme.models.user import User
from hireme.models.job import Job, JobTag
from hireme.models.application import Application

__all__ = [
    "User",
    "Job",
    "JobTag",
    "Application",
]
