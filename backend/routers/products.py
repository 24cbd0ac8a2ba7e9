from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
import logging

from database import get_db
from crud import products as crud_products
from schemas.product import Product, ProductCreate, ProductUpdate
from utils.auth_utils import get_current_user, get_user_identifier, require_role

router = APIRouter(prefix="/api/products", tags=["Products"])
logger = logging.getLogger("products")

@router.get("", response_model=List[Product])
def read_products(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    return crud_products.get_products(db)

@router.get("/{product_id}", response_model=Product)
def read_product(product_id: int, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    db_product = crud_products.get_product(db, product_id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product

@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    if crud_products.get_product_by_name(db, product.name):
        raise HTTPException(status_code=400, detail="Product with this name already exists")

    new_product = crud_products.create_product(db, product, user)
    logger.info(f"Product '{new_product.name}' created by user {get_user_identifier(user)}")
    return new_product

@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: int,
    product: ProductUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    db_product = crud_products.get_product(db, product_id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    if product.name is not None and product.name != db_product.name:
        if crud_products.get_product_by_name(db, product.name):
            raise HTTPException(status_code=400, detail="Product with this name already exists")

    updated_product = crud_products.update_product(db, product_id, product, user)
    logger.info(f"Product '{updated_product.name}' (ID: {product_id}) updated by user {get_user_identifier(user)}")
    return updated_product

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(["admin"]))
):
    if crud_products.get_product(db, product_id) is None:
        raise HTTPException(status_code=404, detail="Product not found")

    success, message = crud_products.delete_product(db, product_id)
    if not success:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=message)
    logger.info(f"Product {product_id} deleted by user {get_user_identifier(user)}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
