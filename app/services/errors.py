class BaseServiceError(Exception):
    detail: str = "Invalid request"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.detail
        super().__init__(self.detail)


class NotAuthenticatedError(BaseServiceError):
    detail = "You are not authenticated. Please log in to continue"


class PermissionDeniedError(BaseServiceError):
    detail = "You don't have permission to access this resource"


class NotFoundError(BaseServiceError):
    detail = "The requested resource was not found"


class ConflictError(BaseServiceError):
    detail = "This resource already exists"


class ServiceUnavailableError(BaseServiceError):
    detail = "Service is unavailable"

    def __init__(self, detail: str | None = None, errors: list | None = None) -> None:
        super().__init__(detail)
        self.errors = errors
