from sqlalchemy import Column, Integer, String, Boolean, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class Farm(Base, TimestampMixin):
    __tablename__ = "farms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    total_birds = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    inventory = relationship("Inventory", back_populates="farm", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Farm(id={self.id}, name={self.name}, is_active={self.is_active})>"
