from fastapi.params import Depends

from app.models.enums import UserRole
from app.deps.auth import CurrentUser
from app.services.errors import PermissionDeniedError


class PermissionRequired:
    def __init__(self, *roles: UserRole):
        self.roles = frozenset(roles)

    async def __call__(self, current_user: CurrentUser):
        if self.roles and current_user.role not in self.roles:
            required = ", ".join(sorted(self.roles))
            raise PermissionDeniedError(f"Access denied. Required roles: {required}")


def permission_required(*roles: UserRole):
    return Depends(PermissionRequired(*roles))
