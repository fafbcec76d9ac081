"""Custom exceptions for the API layer."""


class APIException(Exception):
    """Base exception for all API errors."""

    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize API exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundException(APIException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} not found",
            details={"resource": resource.lower(), "id": resource_id},
        )


class ConflictError(APIException):
    """Raised when a write would duplicate a unique key."""

    status_code = 409


class DuplicateAssetTagError(ConflictError):
    """Raised when an asset tag is already registered for the tenant."""

    def __init__(self, tenant_id: str, asset_tag: str):
        super().__init__(
            message=f"Asset tag '{asset_tag}' already exists",
            details={"tenant_id": tenant_id, "asset_tag": asset_tag},
        )


class RequestValidationFailed(APIException):
    """Raised when a request is well-formed JSON but not acceptable."""

    status_code = 400


class DatabaseError(APIException):
    """Raised for database-related errors."""

    pass
