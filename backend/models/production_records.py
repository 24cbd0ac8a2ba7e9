from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey, func
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from database import Base
from models.audit_mixin import TimestampMixin

class ProductionRecord(Base, TimestampMixin):
    __tablename__ = "production_records"

    id = Column(Integer, primary_key=True, index=True)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    date = Column(String(10), nullable=False, index=True)  # Jalali YYYY/MM/DD
    egg_count = Column(Integer, default=0, nullable=False)
    broken_eggs = Column(Integer, default=0, nullable=False)
    mortality = Column(Integer, default=0, nullable=False)
    feed_consumption = Column(Float, default=0, nullable=False)  # kg
    water_consumption = Column(Float, default=0, nullable=False)  # litres
    notes = Column(Text, nullable=True)
    created_time = Column(String(20), nullable=True)

    farm = relationship("Farm")

    @hybrid_property
    def net_eggs(self):
        return (self.egg_count or 0) - (self.broken_eggs or 0)

    @net_eggs.expression
    def net_eggs(cls):
        return func.coalesce(cls.egg_count, 0) - func.coalesce(cls.broken_eggs, 0)
