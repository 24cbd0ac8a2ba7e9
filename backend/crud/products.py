from sqlalchemy.orm import Session
from models.product import Product
from models.sales_invoices import SalesInvoice
from schemas.product import ProductCreate, ProductUpdate
from utils.auth_utils import get_user_identifier

def get_product(db: Session, product_id: int):
    return db.query(Product).filter(Product.id == product_id).first()

def get_product_by_name(db: Session, name: str):
    return db.query(Product).filter(Product.name == name).first()

def get_products(db: Session):
    return db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()

def create_product(db: Session, product: ProductCreate, user: dict):
    user_identifier = get_user_identifier(user)
    db_product = Product(**product.model_dump(), created_by=user_identifier, updated_by=user_identifier)
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product

def update_product(db: Session, product_id: int, product: ProductUpdate, user: dict):
    db_product = get_product(db, product_id)
    if db_product:
        update_data = product.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key != "description":
                continue
            setattr(db_product, key, value)
        db_product.updated_by = get_user_identifier(user)
        db.commit()
        db.refresh(db_product)
    return db_product

def delete_product(db: Session, product_id: int):
    in_use = db.query(SalesInvoice.id).filter(SalesInvoice.product_id == product_id).first()
    if in_use:
        return False, "Product is referenced by sales invoices and cannot be deleted."

    db_product = get_product(db, product_id)
    if db_product:
        db.delete(db_product)
        db.commit()
        return True, "Product deleted successfully."
    return False, "Product not found."
