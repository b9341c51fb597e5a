from app.services.errors import NotAuthenticatedError


class AuthenticationError(NotAuthenticatedError):
    detail = "You are not authenticated. Please log in to continue"


class WrongPasswordError(NotAuthenticatedError):
    detail = "Invalid credentials"


class InactiveUserError(NotAuthenticatedError):
    detail = "Account is deactivated"
