import enum
from database import Base
from sqlalchemy import Column, Integer, String, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from models.audit_mixin import TimestampMixin

class UserRole(str, enum.Enum):
    ADMIN = "admin"
    RECORDING_OFFICER = "recording_officer"
    SALES_OFFICER = "sales_officer"

# Every role except admin works on exactly one farm
FARM_BOUND_ROLES = (UserRole.RECORDING_OFFICER, UserRole.SALES_OFFICER)

class User(Base, TimestampMixin):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    role = Column(Enum(UserRole, name="user_role"), default=UserRole.RECORDING_OFFICER, nullable=False)
    assigned_farm_id = Column(Integer, ForeignKey("farms.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    assigned_farm = relationship("Farm")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role}, is_active={self.is_active})>"
