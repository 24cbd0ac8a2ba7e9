import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from models.inventory import Inventory
from utils.jalali import now_local

logger = logging.getLogger("inventory")

def get_inventory(db: Session, farm_id: int):
    return db.query(Inventory).filter(Inventory.farm_id == farm_id).first()

def get_all_inventory(db: Session) -> dict:
    return {inv.farm_id: inv for inv in db.query(Inventory).all()}

def _locked_inventory(db: Session, farm_id: int):
    return db.query(Inventory).filter(Inventory.farm_id == farm_id).with_for_update().first()

def _get_or_create_locked_inventory(db: Session, farm_id: int) -> Inventory:
    """
    Return the farm's inventory row under a row lock, creating it at zero stock.

    The insert runs in a savepoint: when a concurrent transaction creates the
    row first, the unique farm_id constraint fires, the savepoint is rolled
    back and the winner's row is locked instead.
    """
    inv = _locked_inventory(db, farm_id)
    if inv is not None:
        return inv

    try:
        with db.begin_nested():
            db.add(Inventory(farm_id=farm_id, current_egg_stock=0, last_updated=now_local()))
    except IntegrityError:
        logger.info(f"Inventory row for farm {farm_id} was created concurrently; using the existing row")
    return _locked_inventory(db, farm_id)

def adjust_inventory(db: Session, farm_id: int, egg_delta: int) -> Inventory:
    """
    Apply a signed egg delta to a farm's stock and return the updated row.

    The row is read with a row lock and written back in the caller's
    transaction; the caller commits. A missing row counts as zero stock and is
    created on the spot. Stock is clamped at zero, so reversing a delta that was
    clamped does not restore the earlier value.
    """
    inv = _get_or_create_locked_inventory(db, farm_id)
    current = inv.current_egg_stock
    new_stock = current + egg_delta
    if new_stock < 0:
        logger.warning(f"Egg stock for farm {farm_id} would drop to {new_stock}; clamping to 0")
        new_stock = 0

    inv.current_egg_stock = new_stock
    inv.last_updated = now_local()
    db.flush()
    logger.info(f"Egg stock for farm {farm_id}: {current} -> {new_stock} (delta {egg_delta})")
    return inv
