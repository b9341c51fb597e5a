from app.services.errors import ConflictError, NotFoundError


class UserNotFound(NotFoundError):
    def __init__(self, user_id=None) -> None:
        super().__init__(f"User with ID {user_id} not found" if user_id else None)


class UserAlreadyExists(ConflictError):
    detail = "Email already exists"


class UserModifiedConcurrently(ConflictError):
    detail = "User was modified by another request, reload and try again"
