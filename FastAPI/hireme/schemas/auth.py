from datetime import datetime
from typing import Annotated, Literal

from pydantic import EmailStr, Field, StringConstraints, field_validator, model_validator

from hireme.schemas.common import CamelModel

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Bio = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
SkillName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


def _check_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters long")
    if not any(c.isalpha() for c in v) or not any(c.isdigit() for c in v):
        raise ValueError("Password must contain at least one letter and one number")
    return v


class UserRegister(CamelModel):
    name: Name
    email: EmailStr
    password: str
    role: Literal["jobseeker", "employer"]
    company: str | None = None
    website: str | None = None
    phone: str | None = None
    location: str | None = None
    bio: Bio | None = None
    skills: list[SkillName] = Field(default_factory=list)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)

    @model_validator(mode="after")
    def employer_needs_company(self):
        if self.role == "employer" and not (self.company or "").strip():
            raise ValueError("Company name is required for employers")
        return self


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(CamelModel):
    """Public profile. The password hash is never part of it."""

    id: str
    name: str
    email: str
    role: str
    company: str | None = None
    website: str | None = None
    phone: str | None = None
    location: str | None = None
    bio: str | None = None
    skills: list[str] = []
    resume: str | None = None
    is_active: bool = True
    last_login: datetime | None = None
    created_at: datetime | None = None


class UserProfileUpdate(CamelModel):
    name: Name | None = None
    phone: str | None = None
    location: str | None = None
    company: str | None = None
    website: str | None = None
    bio: Bio | None = None
    skills: list[SkillName] | None = None
    resume: str | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)

    @model_validator(mode="after")
    def password_changes(self):
        if self.current_password == self.new_password:
            raise ValueError("New password must be different from the current password")
        return self


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
