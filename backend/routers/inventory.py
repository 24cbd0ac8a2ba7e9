from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from database import get_db
from crud import farms as crud_farms
from crud import inventory as crud_inventory
from schemas.inventory import Inventory
from utils.auth_utils import ensure_farm_access, get_current_user

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])
logger = logging.getLogger("inventory")

@router.get("/{farm_id}", response_model=Inventory)
def read_inventory(farm_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    """Current egg stock of a farm. A farm with no movements yet reports zero."""
    ensure_farm_access(user, farm_id)
    if crud_farms.get_farm(db, farm_id) is None:
        raise HTTPException(status_code=404, detail="Farm not found")

    inv = crud_inventory.get_inventory(db, farm_id)
    if inv is None:
        return Inventory(farm_id=farm_id, current_egg_stock=0)
    return inv
