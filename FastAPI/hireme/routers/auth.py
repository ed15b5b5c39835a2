import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hireme.database import get_db
from hireme.dependencies import get_current_user
from hireme.core.errors import HireMeError, ValidationError
from hireme.core.security import verify_password, create_access_token
from hireme.repos.user_repo import (
    get_by_email,
    get_by_id,
    create as create_user,
    update_profile as update_user_profile,
    set_password,
    touch_last_login,
    deactivate,
)
from hireme.schemas.auth import (
    UserRegister,
    UserLogin,
    Token,
    UserResponse,
    UserProfileUpdate,
    ChangePasswordRequest,
)
from hireme.schemas.common import envelope
from hireme.schemas.stats import UserStats
from hireme.services.statistics import user_stats
from hireme.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _user_to_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user)


def _token_for(user: User) -> Token:
    return Token(access_token=create_access_token(user.id, user.role), user=_user_to_response(user))


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, db: Session = Depends(get_db)):
    try:
        user = create_user(
            db,
            name=data.name,
            email=data.email,
            password=data.password,
            role=data.role,
            company=data.company,
            website=data.website,
            phone=data.phone,
            location=data.location,
            bio=data.bio,
            skills=data.skills,
        )
        user = touch_last_login(db, user)
        logger.info("User registered: %s (%s)", user.email, user.role)
        return envelope("User registered successfully", _token_for(user).model_dump(by_alias=True, mode="json"))
    except (HTTPException, HireMeError):
        raise
    except Exception as e:
        logger.exception("Register failed for email=%s: %s", data.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed") from e


@router.post("/login")
def login(data: UserLogin, db: Session = Depends(get_db)):
    try:
        user = get_by_email(db, data.email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account is deactivated. Please contact support.",
            )
        if not verify_password(data.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        user = touch_last_login(db, user)
        logger.info("User logged in: %s", user.email)
        return envelope("Login successful", _token_for(user).model_dump(by_alias=True, mode="json"))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Login failed for email=%s: %s", data.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed") from e


@router.get("/me")
def get_me(user: User = Depends(get_current_user)):
    return envelope("Profile retrieved successfully", {"user": _user_to_response(user)})


@router.put("/profile")
def update_profile(
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        changes = data.model_dump(exclude_unset=True)
        updated = update_user_profile(db, user.id, **changes)
        if not updated:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return envelope("Profile updated successfully", {"user": _user_to_response(updated)})
    except (HTTPException, HireMeError):
        raise
    except Exception as e:
        logger.exception("Profile update failed for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update profile") from e


@router.put("/change-password")
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        if not verify_password(data.current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        set_password(db, user.id, data.new_password)
        logger.info("Password changed: %s", user.email)
        return envelope("Password changed successfully")
    except (HTTPException, HireMeError):
        raise
    except Exception as e:
        logger.exception("Change-password failed for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to change password") from e


@router.put("/deactivate")
def deactivate_account(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        deactivate(db, user.id)
        return envelope("Account deactivated successfully")
    except Exception as e:
        logger.exception("Account deactivation failed for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to deactivate account") from e


@router.get("/stats")
def get_user_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    fresh = get_by_id(db, user.id) or user
    stats = UserStats(profile=_user_to_response(fresh), **user_stats(db, fresh))
    return envelope("User statistics retrieved successfully", stats.model_dump(by_alias=True, mode="json"))
