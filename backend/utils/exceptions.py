class FarmInactiveError(ValueError):
    """Raised when a record or invoice targets a missing or deactivated farm."""


class FarmAccessError(PermissionError):
    """Raised when a non-admin user touches a farm other than their assigned one."""


class ProductNotFoundError(ValueError):
    pass


class InvoiceNumberConflictError(RuntimeError):
    """Two invoices raced for the same sequence number."""
