from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from utils.jalali import now_local

class Inventory(Base):
    """Running egg stock per farm, derived from production records and invoices."""
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    farm_id = Column(Integer, ForeignKey("farms.id", ondelete="CASCADE"), unique=True, nullable=False)
    current_egg_stock = Column(Integer, default=0, nullable=False)
    last_updated = Column(DateTime(timezone=True), default=now_local, onupdate=now_local)

    farm = relationship("Farm", back_populates="inventory")
