from typing import Optional
from sqlalchemy.orm import Session
from models.users import User, UserRole
from schemas.users import UserCreate, UserUpdate
from utils.auth_utils import get_user_identifier, hash_password, verify_password

def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()

def get_users(db: Session):
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

def get_users_by_role(db: Session, role: UserRole):
    return db.query(User).filter(User.role == role).all()

def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = get_user_by_username(db, username)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user

def create_user(db: Session, user: UserCreate, acting_user: Optional[dict] = None):
    user_data = user.model_dump(exclude={"password"})
    user_identifier = get_user_identifier(acting_user)
    db_user = User(
        **user_data,
        hashed_password=hash_password(user.password),
        created_by=user_identifier,
        updated_by=user_identifier,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def update_user(db: Session, user_id: int, user: UserUpdate, acting_user: Optional[dict] = None):
    db_user = get_user(db, user_id)
    if db_user:
        update_data = user.model_dump(exclude_unset=True)
        password = update_data.pop("password", None)
        if password:
            db_user.hashed_password = hash_password(password)
        for key, value in update_data.items():
            if value is None and key != "assigned_farm_id":
                continue
            setattr(db_user, key, value)
        db_user.updated_by = get_user_identifier(acting_user)
        db.commit()
        db.refresh(db_user)
    return db_user

def delete_user(db: Session, user_id: int) -> bool:
    db_user = get_user(db, user_id)
    if not db_user:
        return False
    db.delete(db_user)
    db.commit()
    return True
