from fastapi import Depends, HTTPException
from backoffice.api.auth import get_current_active_user
from backoffice.guardrails.permissions import has_access_to_menu
from backoffice.models.user import ActorRole, User

def require_menu(menu_item: str):
    """
    Dependency gating a whole section of the panel by role.
    """
    def check(user: User = Depends(get_current_active_user)):
        if not has_access_to_menu(user.role, menu_item):
            raise HTTPException(
                status_code=403,
                detail=f"Permission denied: no access to {menu_item}"
            )
        return user
    return check

def require_roles(*roles: ActorRole):
    """
    Dependency to check the actor's role against an allow-list.
    """
    allowed = frozenset(roles)

    def check(user: User = Depends(get_current_active_user)):
        if user.role not in allowed:
            raise HTTPException(
                status_code=403,
                detail="not permitted"
            )
        return user
    return check
