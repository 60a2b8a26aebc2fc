# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, plus the admin gate.
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.post("/batch-enrich")
#   async def batch_enrich(user: AuthUser = Depends(require_admin)):
#       ...
# =============================================================================

from app.auth.dependencies import get_current_user, require_admin, require_api_key
from app.auth.models import AdminStatusResponse, AuthUser

__all__ = [
    "get_current_user",
    "require_admin",
    "require_api_key",
    "AdminStatusResponse",
    "AuthUser",
]
