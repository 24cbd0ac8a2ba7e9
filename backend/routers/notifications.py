from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from crud import notifications as crud_notifications
from crud import users as crud_users
from schemas.common import Message
from schemas.notifications import Notification, NotificationCreate
from utils.auth_utils import get_current_user, get_user_identifier, is_admin, require_role

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])
logger = logging.getLogger("notifications")

@router.post("", response_model=Notification, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification: NotificationCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    if crud_users.get_user(db, notification.user_id) is None:
        raise HTTPException(status_code=400, detail=f"User with ID {notification.user_id} not found")

    db_notification = crud_notifications.create_notification(db, notification)
    logger.info(f"Notification {db_notification.id} sent to user {notification.user_id} by user {get_user_identifier(user)}")
    return db_notification

@router.get("/unread", response_model=List[Notification])
def read_unread_notifications(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return crud_notifications.get_unread_notifications(db, user["id"])

@router.get("/{user_id}", response_model=List[Notification])
def read_user_notifications(user_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    if user_id != user.get("id") and not is_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only read your own notifications")
    return crud_notifications.get_notifications_by_user(db, user_id)

@router.patch("/{notification_id}/read", response_model=Message)
def mark_notification_as_read(notification_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_notification = crud_notifications.get_notification(db, notification_id)
    if db_notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    if db_notification.user_id != user.get("id") and not is_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only update your own notifications")

    if not crud_notifications.mark_notification_as_read(db, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification marked as read"}
