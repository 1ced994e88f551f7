"""Service-layer error taxonomy.

Routers translate these into HTTP responses; services never raise
HTTPException directly.
"""


class FindThemError(Exception):
    """Base exception for service errors."""

    pass


class ValidationError(FindThemError):
    """Caller input missing or malformed."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        self.message = message or f"Missing required field: {field}"
        super().__init__(self.message)


class UnauthenticatedError(FindThemError):
    """No valid session where one is required."""

    pass


class UnauthorizedError(FindThemError):
    """Valid session, insufficient role or ownership."""

    pass


class DuplicateEmailError(FindThemError):
    """Unique-constraint violation on a user or organization email."""

    def __init__(self, email: str | None = None):
        self.email = email
        super().__init__("Email already exists")


class StorageError(FindThemError):
    """Persistence failure on a write path."""

    def __init__(self, operation: str, message: str | None = None):
        self.operation = operation
        super().__init__(message or f"Storage failure during {operation}")
