from sqlalchemy import Column, Integer, String, Float, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class SalesInvoice(Base, TimestampMixin):
    __tablename__ = "sales_invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String, unique=True, index=True, nullable=False)  # INV-<epoch millis>-<seq>
    invoice_seq = Column(Integer, unique=True, nullable=False)
    farm_id = Column(Integer, ForeignKey("farms.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    date = Column(String(10), nullable=False, index=True)  # Jalali YYYY/MM/DD
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    weight = Column(Float, nullable=True)
    price_per_unit = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    created_time = Column(String(20), nullable=True)

    farm = relationship("Farm")
    product = relationship("Product")
