"""
Permission checks driven by the token's permission map, e.g.

    {"imports": {"create": true, "read": true}}

School administrators and platform roles hold every permission.
"""

from fastapi import Depends, HTTPException, status

from app.auth.dependencies import ADMIN_ROLES, get_current_user
from app.auth.schemas import CurrentUser

SCHOOL_ADMIN_ROLE = "ADMIN"


def has_permission(user: CurrentUser, module: str, action: str) -> bool:
    if user.role in ADMIN_ROLES or user.role == SCHOOL_ADMIN_ROLE:
        return True
    return bool((user.permissions or {}).get(module, {}).get(action, False))


def check_permission(module: str, action: str):
    """Dependency factory; resolves to the caller when ``module.action`` is granted."""

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not has_permission(current_user, module, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {module}.{action}",
            )
        return current_user

    return _checker
