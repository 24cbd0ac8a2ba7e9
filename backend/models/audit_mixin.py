from sqlalchemy import Column, DateTime, String
from utils.jalali import now_local


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    All rows are hard-deleted, so there are no soft-delete columns here.
    """
    # Timestamps are timezone-aware and stamped in the farm's local zone (Asia/Tehran by default).
    created_at = Column(DateTime(timezone=True), default=now_local)
    updated_at = Column(DateTime(timezone=True), onupdate=now_local)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
