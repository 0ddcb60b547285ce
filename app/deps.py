# app/deps.py

from fastapi import Depends

from app.auth import get_current_user
from app.errors import ForbiddenError
from app.models import User


def require_role(user: User, *roles: str):
    if user.role not in roles:
        raise ForbiddenError("Forbidden")


def allow_roles(*roles: str):
    """Dependency that resolves the caller and rejects any role outside ``roles``."""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        require_role(current_user, *roles)
        return current_user

    return dependency


admin_only = allow_roles("admin")
tech_only = allow_roles("tech")
client_only = allow_roles("client")
