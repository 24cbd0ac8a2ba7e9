from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import farms as crud_farms
from crud import users as crud_users
from models.users import FARM_BOUND_ROLES, UserRole
from schemas.users import User, UserCreate, UserUpdate
from utils.auth_utils import get_user_identifier, require_role

router = APIRouter(prefix="/api/users", tags=["Users"])
logger = logging.getLogger("users")

def _validate_farm_assignment(db: Session, role: UserRole, assigned_farm_id: Optional[int]):
    if role in FARM_BOUND_ROLES and not assigned_farm_id:
        raise HTTPException(status_code=400, detail="A farm must be assigned for this role")
    if assigned_farm_id is not None and crud_farms.get_farm(db, assigned_farm_id) is None:
        raise HTTPException(status_code=400, detail=f"Farm with ID {assigned_farm_id} not found")

@router.get("", response_model=List[User])
def read_users(db: Session = Depends(get_db), user: dict = Depends(require_role(["admin"]))):
    return crud_users.get_users(db)

@router.get("/{user_id}", response_model=User)
def read_user(user_id: int, db: Session = Depends(get_db), user: dict = Depends(require_role(["admin"]))):
    db_user = crud_users.get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user

@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    new_user: UserCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    if crud_users.get_user_by_username(db, new_user.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    _validate_farm_assignment(db, new_user.role, new_user.assigned_farm_id)

    db_user = crud_users.create_user(db, new_user, acting_user=user)
    logger.info(f"User '{db_user.username}' ({db_user.role.value}) created by user {get_user_identifier(user)}")
    return db_user

@router.put("/{user_id}", response_model=User)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    db_user = crud_users.get_user(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    if user_update.username is not None and user_update.username != db_user.username:
        if crud_users.get_user_by_username(db, user_update.username):
            raise HTTPException(status_code=400, detail="Username already exists")

    # The role/farm rule applies to the user as it will look after the update
    update_data = user_update.model_dump(exclude_unset=True)
    final_role = update_data.get("role") or db_user.role
    final_farm_id = update_data["assigned_farm_id"] if "assigned_farm_id" in update_data else db_user.assigned_farm_id
    _validate_farm_assignment(db, final_role, final_farm_id)

    updated_user = crud_users.update_user(db, user_id, user_update, acting_user=user)
    logger.info(f"User '{updated_user.username}' (ID: {user_id}) updated by user {get_user_identifier(user)}")
    return updated_user

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    if user_id == user.get("id"):
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    if not crud_users.delete_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"User {user_id} deleted by user {get_user_identifier(user)}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
