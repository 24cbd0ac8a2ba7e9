from sqlalchemy.orm import Session
from models.farm import Farm
from models.production_records import ProductionRecord
from models.sales_invoices import SalesInvoice
from models.users import User
from schemas.farm import FarmCreate, FarmUpdate
from utils.auth_utils import get_user_identifier

def get_farm(db: Session, farm_id: int):
    return db.query(Farm).filter(Farm.id == farm_id).first()

def get_farm_by_name(db: Session, name: str):
    return db.query(Farm).filter(Farm.name == name).first()

def get_farms(db: Session):
    return db.query(Farm).order_by(Farm.created_at.desc(), Farm.id.desc()).all()

def get_active_farms(db: Session):
    return db.query(Farm).filter(Farm.is_active == True).order_by(Farm.created_at.desc(), Farm.id.desc()).all()

def create_farm(db: Session, farm: FarmCreate, user: dict):
    user_identifier = get_user_identifier(user)
    db_farm = Farm(**farm.model_dump(), created_by=user_identifier, updated_by=user_identifier)
    db.add(db_farm)
    db.commit()
    db.refresh(db_farm)
    return db_farm

def update_farm(db: Session, farm_id: int, farm: FarmUpdate, user: dict):
    db_farm = get_farm(db, farm_id)
    if db_farm:
        update_data = farm.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            # name, total_birds and is_active are NOT NULL; an explicit null means "leave it"
            if value is None and key != "description":
                continue
            setattr(db_farm, key, value)
        db_farm.updated_by = get_user_identifier(user)
        db.commit()
        db.refresh(db_farm)
    return db_farm

def delete_farm(db: Session, farm_id: int):
    """Hard delete a farm. Farms that still own records, invoices or users are kept."""
    has_records = db.query(ProductionRecord.id).filter(ProductionRecord.farm_id == farm_id).first()
    has_invoices = db.query(SalesInvoice.id).filter(SalesInvoice.farm_id == farm_id).first()
    if has_records or has_invoices:
        return False, "Farm has production records or invoices and cannot be deleted."

    has_users = db.query(User.id).filter(User.assigned_farm_id == farm_id).first()
    if has_users:
        return False, "Farm is assigned to users and cannot be deleted."

    db_farm = get_farm(db, farm_id)
    if db_farm:
        db.delete(db_farm)
        db.commit()
        return True, "Farm deleted successfully."
    return False, "Farm not found."
