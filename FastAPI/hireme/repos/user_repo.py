import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hireme.core.errors import ConflictError, ValidationError
from hireme.core.security import hash_password, generate_id
from hireme.models.user import User, ROLE_EMPLOYER, USER_ROLES

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str,
    company: str | None = None,
    website: str | None = None,
    phone: str | None = None,
    location: str | None = None,
    bio: str | None = None,
    skills: list[str] | None = None,
) -> User:
    if role not in USER_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(USER_ROLES)}")
    company = _clean(company)
    if role == ROLE_EMPLOYER and not company:
        raise ValidationError("Company name is required for employers")
    email = normalize_email(email)
    if get_by_email(db, email):
        raise ConflictError("User with this email already exists")

    user = User(
        id=generate_id(),
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
        phone=_clean(phone),
        location=_clean(location),
        bio=_clean(bio),
        skills=[s.strip() for s in (skills or []) if s and s.strip()],
    )
    # Employer-only fields are dropped for seekers.
    if role == ROLE_EMPLOYER:
        user.company = company
        user.website = _clean(website)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Email already exists") from e
    db.refresh(user)
    return user


def update_profile(
    db: Session,
    user_id: str,
    *,
    name: str | None = None,
    phone: str | None = None,
    location: str | None = None,
    bio: str | None = None,
    skills: list[str] | None = None,
    resume: str | None = None,
    company: str | None = None,
    website: str | None = None,
) -> User | None:
    """Apply only the provided fields. Role is never changed here."""
    user = get_by_id(db, user_id)
    if not user:
        return None
    if name is not None:
        user.name = name.strip()
    if phone is not None:
        user.phone = phone.strip()
    if location is not None:
        user.location = location.strip()
    if bio is not None:
        user.bio = bio.strip()
    if skills is not None:
        user.skills = [s.strip() for s in skills if s and s.strip()]
    if resume is not None:
        user.resume = resume.strip() or None
    if user.role == ROLE_EMPLOYER:
        if company is not None:
            if not company.strip():
                raise ValidationError("Company name is required for employers")
            user.company = company.strip()
        if website is not None:
            user.website = website.strip()
    db.commit()
    db.refresh(user)
    return user


def set_password(db: Session, user_id: str, new_password: str) -> User | None:
    user = get_by_id(db, user_id)
    if not user:
        return None
    user.password_hash = hash_password(new_password)
    db.commit()
    db.refresh(user)
    return user


def touch_last_login(db: Session, user: User) -> User:
    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user


def deactivate(db: Session, user_id: str) -> User | None:
    user = get_by_id(db, user_id)
    if not user:
        return None
    user.is_active = False
    db.commit()
    db.refresh(user)
    logger.info("User deactivated: %s", user.email)
    return user
