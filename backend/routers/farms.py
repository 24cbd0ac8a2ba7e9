from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from crud import farms as crud_farms
from schemas.farm import Farm, FarmCreate, FarmUpdate
from utils.auth_utils import get_current_user, get_user_identifier, require_role

router = APIRouter(prefix="/api/farms", tags=["Farms"])
logger = logging.getLogger("farms")

@router.get("", response_model=List[Farm])
def read_farms(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return crud_farms.get_farms(db)

@router.get("/active", response_model=List[Farm])
def read_active_farms(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return crud_farms.get_active_farms(db)

@router.get("/{farm_id}", response_model=Farm)
def read_farm(farm_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_farm = crud_farms.get_farm(db, farm_id)
    if db_farm is None:
        raise HTTPException(status_code=404, detail="Farm not found")
    return db_farm

@router.post("", response_model=Farm, status_code=status.HTTP_201_CREATED)
def create_farm(
    farm: FarmCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    """Create a new farm."""
    if crud_farms.get_farm_by_name(db, farm.name):
        raise HTTPException(status_code=400, detail="Farm with this name already exists")

    new_farm = crud_farms.create_farm(db, farm, user)
    logger.info(f"Farm '{new_farm.name}' created by user {get_user_identifier(user)}")
    return new_farm

@router.put("/{farm_id}", response_model=Farm)
def update_farm(
    farm_id: int,
    farm: FarmUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    """Partially update a farm."""
    db_farm = crud_farms.get_farm(db, farm_id)
    if db_farm is None:
        raise HTTPException(status_code=404, detail="Farm not found")

    if farm.name is not None and farm.name != db_farm.name:
        if crud_farms.get_farm_by_name(db, farm.name):
            raise HTTPException(status_code=400, detail="Farm with this name already exists")

    updated_farm = crud_farms.update_farm(db, farm_id, farm, user)
    logger.info(f"Farm '{updated_farm.name}' (ID: {farm_id}) updated by user {get_user_identifier(user)}")
    return updated_farm

@router.delete("/{farm_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_farm(
    farm_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    if crud_farms.get_farm(db, farm_id) is None:
        raise HTTPException(status_code=404, detail="Farm not found")

    success, message = crud_farms.delete_farm(db, farm_id)
    if not success:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=message)
    logger.info(f"Farm {farm_id} deleted by user {get_user_identifier(user)}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
