from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationRequiredError, PermissionDeniedError
from app.core.security import decode_token
from app.db.session import get_db
from app.models.user import User

# auto_error=False so a missing token reaches us and becomes AuthenticationRequiredError
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False
)


def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the bearer token to an active user, or None when absent/invalid."""
    if not token:
        return None
    subject = decode_token(token)
    if not subject:
        return None
    try:
        user_id = UUID(subject)
    except ValueError:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        return None
    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationRequiredError()
    return user


def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise PermissionDeniedError("Administrator access required")
    return current_user
