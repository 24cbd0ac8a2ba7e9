import logging
import time
from typing import Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from models.sales_invoices import SalesInvoice
from models.users import UserRole
from schemas.sales_invoices import SalesInvoiceCreate, SalesInvoiceUpdate
from crud.inventory import adjust_inventory
from crud.notifications import notify_role
from crud.production_records import get_active_farm
from crud.products import get_product
from utils.auth_utils import check_farm_scope, get_user_identifier
from utils.exceptions import InvoiceNumberConflictError, ProductNotFoundError
from utils.formatting import format_toman
from utils.jalali import local_time_string

logger = logging.getLogger("invoices")

INVOICE_SEQ_START = 1000
NULLABLE_FIELDS = {"notes", "customer_phone", "weight", "product_id"}


def next_invoice_seq(db: Session) -> int:
    last_seq = db.query(func.max(SalesInvoice.invoice_seq)).scalar()
    return last_seq + 1 if last_seq is not None else INVOICE_SEQ_START


def generate_invoice_number(db: Session) -> Tuple[str, int]:
    """Next ``INV-<epoch millis>-<seq>`` number, derived from the persisted sequence."""
    seq = next_invoice_seq(db)
    return f"INV-{int(time.time() * 1000)}-{seq}", seq


# Constraint and column names that identify an invoice number collision, for both
# Postgres ("sales_invoices_invoice_seq_key") and SQLite ("sales_invoices.invoice_seq")
INVOICE_NUMBER_KEYS = ("invoice_seq", "invoice_number")


def is_invoice_number_conflict(error: IntegrityError) -> bool:
    diag = getattr(error.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) or ""
    text = f"{constraint_name} {error.orig}"
    return any(key in text for key in INVOICE_NUMBER_KEYS)


def _check_product(db: Session, product_id: Optional[int]):
    if product_id is not None and not get_product(db, product_id):
        raise ProductNotFoundError(f"Product with ID {product_id} not found")


def get_invoice(db: Session, invoice_id: int):
    return db.query(SalesInvoice).filter(SalesInvoice.id == invoice_id).first()


def get_invoices(db: Session, farm_id: Optional[int] = None, date: Optional[str] = None, limit: Optional[int] = None):
    query = db.query(SalesInvoice)
    if farm_id is not None:
        query = query.filter(SalesInvoice.farm_id == farm_id)
    if date:
        query = query.filter(SalesInvoice.date == date)
    query = query.order_by(SalesInvoice.date.desc(), SalesInvoice.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def create_invoice(db: Session, invoice: SalesInvoiceCreate, user: dict) -> SalesInvoice:
    """
    Store a sales invoice and take the sold eggs out of the farm's stock.

    Raises:
        FarmAccessError: a non-admin user targets a farm other than their own.
        FarmInactiveError: the farm is missing or deactivated.
        ProductNotFoundError: ``product_id`` does not exist.
        InvoiceNumberConflictError: a concurrent invoice took the same number.
    """
    check_farm_scope(user, invoice.farm_id)
    farm = get_active_farm(db, invoice.farm_id)
    _check_product(db, invoice.product_id)

    invoice_number, invoice_seq = generate_invoice_number(db)
    invoice_data = invoice.model_dump(exclude={"created_time"})
    db_invoice = SalesInvoice(
        **invoice_data,
        invoice_number=invoice_number,
        invoice_seq=invoice_seq,
        total_price=invoice.quantity * invoice.price_per_unit,
        user_id=user.get("id"),
        created_time=invoice.created_time or local_time_string(),
        created_by=get_user_identifier(user),
    )
    try:
        db.add(db_invoice)
        db.flush()
        adjust_inventory(db, farm.id, -invoice.quantity)
        notify_role(
            db,
            UserRole.SALES_OFFICER,
            title="New sales invoice",
            message=f"Farm {farm.name} registered sales invoice {invoice_number} ({format_toman(db_invoice.total_price)})",
            type="invoice",
            farm_id=farm.id,
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_invoice_number_conflict(e):
            raise
        logger.warning(f"Invoice number {invoice_number} collided: {e.orig}")
        raise InvoiceNumberConflictError("Invoice number already taken, please retry") from e
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_invoice)
    logger.info(f"Invoice {invoice_number} for farm '{farm.name}' ({invoice.quantity} eggs) created by user {get_user_identifier(user)}")
    return db_invoice


def update_invoice(db: Session, invoice_id: int, invoice: SalesInvoiceUpdate, user: dict):
    db_invoice = get_invoice(db, invoice_id)
    if not db_invoice:
        return None

    update_data = {
        key: value for key, value in invoice.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_FIELDS
    }
    old_farm_id = db_invoice.farm_id
    old_quantity = db_invoice.quantity
    new_farm_id = update_data.get("farm_id", old_farm_id)
    if new_farm_id != old_farm_id:
        check_farm_scope(user, new_farm_id)
        get_active_farm(db, new_farm_id)
    if "product_id" in update_data:
        _check_product(db, update_data["product_id"])

    try:
        for key, value in update_data.items():
            setattr(db_invoice, key, value)
        db_invoice.total_price = db_invoice.quantity * db_invoice.price_per_unit
        db_invoice.updated_by = get_user_identifier(user)

        new_quantity = db_invoice.quantity
        if new_farm_id != old_farm_id:
            adjust_inventory(db, old_farm_id, old_quantity)
            adjust_inventory(db, new_farm_id, -new_quantity)
        elif new_quantity != old_quantity:
            adjust_inventory(db, old_farm_id, old_quantity - new_quantity)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_invoice)
    logger.info(f"Invoice {db_invoice.invoice_number} updated by user {get_user_identifier(user)}")
    return db_invoice


def delete_invoice(db: Session, invoice_id: int) -> bool:
    """Delete an invoice and put its eggs back into stock. False when nothing was deleted."""
    db_invoice = get_invoice(db, invoice_id)
    if not db_invoice:
        return False

    try:
        adjust_inventory(db, db_invoice.farm_id, db_invoice.quantity)
        deleted = db.query(SalesInvoice).filter(SalesInvoice.id == invoice_id).delete(synchronize_session=False)
        if not deleted:
            db.rollback()
            return False
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return True
