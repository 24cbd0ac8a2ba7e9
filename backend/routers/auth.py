from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
import logging

from database import get_db
from crud import users as crud_users
from schemas.common import Message
from schemas.users import LoginRequest, SessionUser, User
from utils.auth_utils import SESSION_USER_KEY, get_current_user, session_projection

router = APIRouter(prefix="/api/auth", tags=["Auth"])
logger = logging.getLogger("auth")

@router.post("/login", response_model=User)
def login(credentials: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Verify username and password and open a session."""
    user = crud_users.authenticate_user(db, credentials.username, credentials.password)
    if not user:
        logger.warning(f"Failed login attempt for username '{credentials.username}'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is disabled")

    request.session[SESSION_USER_KEY] = session_projection(user)
    logger.info(f"User '{user.username}' logged in")
    return user

@router.post("/logout", response_model=Message)
def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}

@router.get("/me", response_model=SessionUser)
def read_current_user(user: dict = Depends(get_current_user)):
    return user
