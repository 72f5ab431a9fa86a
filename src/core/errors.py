"""
Error taxonomy for the dashboard backend.

Each error carries the HTTP status the endpoint boundary maps it to.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors"""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DashboardError):
    """Required fields missing or request body has the wrong shape"""

    status_code = 400


class NotFoundError(DashboardError):
    """Unknown record id or export file"""

    status_code = 404


class StorageError(DashboardError):
    """Base class for persistence failures"""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class StorageReadError(StorageError):
    """File unreadable or content is not valid JSON"""


class StorageWriteError(StorageError):
    """File could not be written (disk full, permission denied, ...)"""


class InvalidCollectionError(StorageError):
    """Collection is not array-shaped or cannot be serialized"""


class VerificationError(StorageError):
    """Re-read after a write did not match what was written"""


class BootstrapError(DashboardError):
    """Data files could not be prepared at startup"""
