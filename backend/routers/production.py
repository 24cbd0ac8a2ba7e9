from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from crud import production_records as crud_production
from schemas.production_records import ProductionRecord, ProductionRecordCreate, ProductionRecordUpdate
from utils.auth_utils import ensure_farm_access, get_current_user, get_user_identifier, require_role, scoped_farm_id
from utils.exceptions import FarmAccessError, FarmInactiveError
from utils.jalali import normalize_jalali

router = APIRouter(prefix="/api/production", tags=["Production"])
logger = logging.getLogger("production")

WRITE_ROLES = ["admin", "recording_officer"]

def parse_date_filter(date: Optional[str]) -> Optional[str]:
    if not date:
        return None
    try:
        return normalize_jalali(date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("", response_model=List[ProductionRecord])
def read_production_records(
    farm_id: Optional[int] = Query(None, alias="farmId"),
    date: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user)
):
    """List production records, newest first. Non-admin users only see their own farm."""
    farm_filter = scoped_farm_id(user, farm_id)
    return crud_production.get_production_records(db, farm_id=farm_filter, date=parse_date_filter(date))

@router.get("/{record_id}", response_model=ProductionRecord)
def read_production_record(record_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_record = crud_production.get_production_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Production record not found")
    ensure_farm_access(user, db_record.farm_id)
    return db_record

@router.post("", response_model=ProductionRecord, status_code=status.HTTP_201_CREATED)
def create_production_record(
    record: ProductionRecordCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES))
):
    try:
        return crud_production.create_production_record(db, record, user)
    except FarmAccessError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except FarmInactiveError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put("/{record_id}", response_model=ProductionRecord)
def update_production_record(
    record_id: int,
    record: ProductionRecordUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES))
):
    db_record = crud_production.get_production_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Production record not found")
    ensure_farm_access(user, db_record.farm_id)

    try:
        return crud_production.update_production_record(db, record_id, record, user)
    except FarmAccessError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except FarmInactiveError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_production_record(
    record_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(WRITE_ROLES))
):
    db_record = crud_production.get_production_record(db, record_id)
    if db_record is None:
        raise HTTPException(status_code=404, detail="Production record not found")
    ensure_farm_access(user, db_record.farm_id)

    if not crud_production.delete_production_record(db, record_id):
        raise HTTPException(status_code=404, detail="Production record not found")
    logger.info(f"Production record {record_id} deleted by user {get_user_identifier(user)}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
