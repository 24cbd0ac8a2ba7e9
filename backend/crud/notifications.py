from sqlalchemy.orm import Session
from models.notifications import Notification
from models.users import User, UserRole
from schemas.notifications import NotificationCreate

def create_notification(db: Session, notification: NotificationCreate):
    db_notification = Notification(**notification.model_dump())
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification

def notify_role(db: Session, role: UserRole, title: str, message: str, type: str, farm_id: int = None):
    """Queue one notification per user holding ``role``. The caller commits."""
    recipients = db.query(User.id).filter(User.role == role).all()
    for (user_id,) in recipients:
        db.add(Notification(user_id=user_id, title=title, message=message, type=type, farm_id=farm_id))
    return len(recipients)

def get_notification(db: Session, notification_id: int):
    return db.query(Notification).filter(Notification.id == notification_id).first()

def get_notifications_by_user(db: Session, user_id: int):
    return db.query(Notification).filter(Notification.user_id == user_id).order_by(Notification.created_at.desc(), Notification.id.desc()).all()

def get_unread_notifications(db: Session, user_id: int):
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()

def mark_notification_as_read(db: Session, notification_id: int) -> bool:
    updated = db.query(Notification).filter(Notification.id == notification_id).update(
        {Notification.is_read: True}, synchronize_session=False
    )
    db.commit()
    return updated > 0
