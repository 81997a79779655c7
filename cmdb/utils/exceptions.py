"""
Custom Error Classes for Better Error Handling
"""


class CMDBError(Exception):
    """Base exception for the CMDB service"""

    pass


class AuthenticationError(CMDBError):
    """Authentication related errors"""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password do not match.

    Unknown email and wrong password share this error so callers cannot
    tell them apart.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class PendingApprovalError(AuthenticationError):
    """Raised when a correct login belongs to an account not yet approved"""

    def __init__(self, message: str = "Your account is pending approval"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised for any bearer token that fails verification"""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class InvalidAPIKeyError(AuthenticationError):
    """Raised for unknown, inactive or expired API keys"""

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message)


class PermissionDeniedError(CMDBError):
    """Raised when an authenticated user lacks a role or grant"""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFoundError(CMDBError):
    """Raised when an entity lookup fails"""

    pass


class ConflictError(CMDBError):
    """Raised when a unique constraint is violated"""

    pass


class StorageError(CMDBError):
    """Raised for any other persistence failure"""

    pass


class AlertDeliveryError(CMDBError):
    """Raised when Alertmanager cannot be reached or rejects a batch"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
