from typing import Any, Dict, List, Optional

from fastapi import Depends, HTTPException, Request, status
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from utils.exceptions import FarmAccessError

# Password hashing context, shared by login, user management and the admin bootstrap script
bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ADMIN_ROLE = "admin"
SESSION_USER_KEY = "user"


def hash_password(password: str) -> str:
    return bcrypt_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt_context.verify(password, hashed_password)


def session_projection(user) -> Dict[str, Any]:
    """The minimal user view kept in the session cookie and returned by /auth/me."""
    role = user.role.value if hasattr(user.role, "value") else user.role
    return {
        "id": user.id,
        "username": user.username,
        "fullName": user.full_name,
        "role": role,
        "assignedFarmId": user.assigned_farm_id,
    }


def get_current_user(request: Request, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    FastAPI dependency that returns the logged-in user.

    Only the user id is trusted from the session cookie. Role, farm and active
    flag are re-read from the database on every request, so admin changes take
    effect immediately. A session whose user is gone or disabled is cleared.

    Usage:
        @router.get("/secure-data")
        def secure_endpoint(user: dict = Depends(get_current_user)):
            ...
    """
    session_user = request.session.get(SESSION_USER_KEY)
    if not session_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    user = db.query(User).filter(User.id == session_user.get("id")).first()
    if user is None or not user.is_active:
        request.session.clear()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session is no longer valid",
        )

    projection = session_projection(user)
    request.session[SESSION_USER_KEY] = projection
    return projection


def get_user_identifier(user: Optional[Dict[str, Any]]) -> Optional[str]:
    if not user:
        return None
    return user.get("username") or str(user.get("id"))


def is_admin(user: Dict[str, Any]) -> bool:
    return user.get("role") == ADMIN_ROLE


def require_role(allowed_roles: List[str]):
    """Dependency factory: the session user must hold one of ``allowed_roles``."""
    def _dependency(user: dict = Depends(get_current_user)) -> Dict[str, Any]:
        if user.get("role") not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user
    return _dependency


def can_access_farm(user: Dict[str, Any], farm_id: Optional[int]) -> bool:
    return is_admin(user) or (farm_id is not None and farm_id == user.get("assignedFarmId"))


def check_farm_scope(user: Dict[str, Any], farm_id: Optional[int]) -> None:
    if not can_access_farm(user, farm_id):
        raise FarmAccessError("You can only access data of your assigned farm")


def ensure_farm_access(user: Dict[str, Any], farm_id: Optional[int]) -> None:
    """Route-level variant of check_farm_scope that answers 403 directly."""
    if not can_access_farm(user, farm_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access data of your assigned farm",
        )


def scoped_farm_id(user: Dict[str, Any], requested_farm_id: Optional[int]) -> Optional[int]:
    """
    Resolve the farm filter for a list endpoint.

    Admins get whatever they asked for (None means all farms). Everybody else is
    pinned to their assigned farm, and asking for a different one is a 403.
    """
    if is_admin(user):
        return requested_farm_id
    assigned_farm_id = user.get("assignedFarmId")
    if assigned_farm_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No farm is assigned to this user",
        )
    if requested_farm_id is not None:
        ensure_farm_access(user, requested_farm_id)
    return assigned_farm_id
