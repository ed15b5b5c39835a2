import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from hireme.database import get_db
from hireme.core.security import decode_access_token
from hireme.models.user import ROLE_EMPLOYER, ROLE_JOBSEEKER
from hireme.repos.user_repo import get_by_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> "User":
    from hireme.models.user import User

    if not credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
        )
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        logger.info("Auth failed: invalid or expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user = get_by_id(db, user_id)
    if not user:
        logger.info("Auth failed: user from token not found")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. User not found.",
        )
    if not user.is_active:
        logger.info("Auth failed: account %s is deactivated", user.id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. Account is deactivated.",
        )
    return user


def get_optional_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
):
    """Caller identity when a valid token is present, else None. Never rejects."""
    if not credentials:
        return None
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        return None
    user = get_by_id(db, user_id)
    if not user or not user.is_active:
        return None
    return user


def get_current_employer(
    user=Depends(get_current_user),
):
    """Require authenticated user with role=employer."""
    if user.role != ROLE_EMPLOYER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Required role: employer",
        )
    return user


def get_current_jobseeker(
    user=Depends(get_current_user),
):
    """Require authenticated user with role=jobseeker."""
    if user.role != ROLE_JOBSEEKER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Required role: jobseeker",
        )
    return user
