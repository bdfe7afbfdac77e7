from typing import Any


class PawHavenError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = "server_error"

    def __init__(self, message: str = "Something went wrong", context: dict[str, Any] | None = None):
        self.message = message
        # logged, never sent to the client
        self.context = context or {}
        super().__init__(message)


class UnauthorizedError(PawHavenError):
    status_code = 401
    code = "unauthorized"

    def __init__(self, message: str = "Unauthorized access", context: dict[str, Any] | None = None):
        super().__init__(message, context)


class ForbiddenError(PawHavenError):
    status_code = 403
    code = "forbidden"

    def __init__(self, message: str = "Forbidden access", context: dict[str, Any] | None = None):
        super().__init__(message, context)


class NotFoundError(PawHavenError):
    status_code = 404
    code = "not_found"

    def __init__(self, resource: str = "resource", resource_id: str | None = None):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' was not found"
        super().__init__(message, {"resource": resource, "resource_id": resource_id})


class InvalidInputError(PawHavenError):
    status_code = 400
    code = "invalid_input"

    def __init__(self, message: str = "Invalid input", field: str | None = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class ConflictError(PawHavenError):
    status_code = 409
    code = "conflict"

    def __init__(self, message: str = "The resource was modified concurrently, try again"):
        super().__init__(message)


class UpstreamError(PawHavenError):
    """Database or payment provider failure."""

    status_code = 502
    code = "upstream_failure"

    def __init__(self, message: str = "An upstream service failed", context: dict[str, Any] | None = None):
        super().__init__(message, context)
