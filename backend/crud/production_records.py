import logging
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from models.farm import Farm
from models.production_records import ProductionRecord
from models.users import UserRole
from schemas.production_records import ProductionRecordCreate, ProductionRecordUpdate
from crud.farms import get_farm
from crud.inventory import adjust_inventory
from crud.notifications import notify_role
from utils.auth_utils import check_farm_scope, get_user_identifier
from utils.exceptions import FarmInactiveError
from utils.jalali import local_time_string

logger = logging.getLogger("production")

# Columns that may legitimately be cleared with an explicit null
NULLABLE_FIELDS = {"notes"}


def get_active_farm(db: Session, farm_id: int) -> Farm:
    farm = get_farm(db, farm_id)
    if not farm or not farm.is_active:
        raise FarmInactiveError("The selected farm does not exist or is not active")
    return farm


def get_production_record(db: Session, record_id: int):
    return db.query(ProductionRecord).filter(ProductionRecord.id == record_id).first()


def get_production_records(db: Session, farm_id: Optional[int] = None, date: Optional[str] = None):
    query = db.query(ProductionRecord)
    if farm_id is not None:
        query = query.filter(ProductionRecord.farm_id == farm_id)
    if date:
        query = query.filter(ProductionRecord.date == date)
    return query.order_by(ProductionRecord.date.desc(), ProductionRecord.id.desc()).all()


def create_production_record(db: Session, record: ProductionRecordCreate, user: dict) -> ProductionRecord:
    """
    Store a daily production record and book its net eggs into the farm's stock.

    Raises:
        FarmAccessError: a non-admin user targets a farm other than their own.
        FarmInactiveError: the farm is missing or deactivated.
    """
    check_farm_scope(user, record.farm_id)
    farm = get_active_farm(db, record.farm_id)

    record_data = record.model_dump(exclude={"created_time"})
    db_record = ProductionRecord(
        **record_data,
        user_id=user.get("id"),
        created_time=record.created_time or local_time_string(),
        created_by=get_user_identifier(user),
    )
    try:
        db.add(db_record)
        db.flush()
        adjust_inventory(db, farm.id, db_record.net_eggs)
        notify_role(
            db,
            UserRole.SALES_OFFICER,
            title="New statistics recorded",
            message=f"Farm {farm.name} recorded its statistics for {db_record.date}",
            type="statistics",
            farm_id=farm.id,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_record)
    logger.info(f"Production record {db_record.id} for farm '{farm.name}' on {db_record.date} created by user {get_user_identifier(user)}")
    return db_record


def update_production_record(db: Session, record_id: int, record: ProductionRecordUpdate, user: dict):
    db_record = get_production_record(db, record_id)
    if not db_record:
        return None

    update_data = {
        key: value for key, value in record.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    old_farm_id = db_record.farm_id
    old_net = db_record.net_eggs
    new_farm_id = update_data.get("farm_id", old_farm_id)
    if new_farm_id != old_farm_id:
        check_farm_scope(user, new_farm_id)
        get_active_farm(db, new_farm_id)

    try:
        for key, value in update_data.items():
            setattr(db_record, key, value)
        db_record.updated_by = get_user_identifier(user)

        new_net = db_record.net_eggs
        if new_farm_id != old_farm_id:
            adjust_inventory(db, old_farm_id, -old_net)
            adjust_inventory(db, new_farm_id, new_net)
        elif new_net != old_net:
            adjust_inventory(db, old_farm_id, new_net - old_net)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_record)
    logger.info(f"Production record {record_id} updated by user {get_user_identifier(user)}")
    return db_record


def delete_production_record(db: Session, record_id: int) -> bool:
    """Delete a record and take its net eggs back out of stock. False when nothing was deleted."""
    db_record = get_production_record(db, record_id)
    if not db_record:
        return False

    try:
        adjust_inventory(db, db_record.farm_id, -db_record.net_eggs)
        deleted = db.query(ProductionRecord).filter(ProductionRecord.id == record_id).delete(synchronize_session=False)
        if not deleted:
            db.rollback()
            return False
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True
