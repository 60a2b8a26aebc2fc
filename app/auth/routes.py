# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes only check what the current token is allowed to do.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import check_admin, get_current_user
from app.auth.models import AdminStatusResponse, AuthUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }


@router.get("/admin", response_model=AdminStatusResponse)
async def get_admin_status(
    user: AuthUser = Depends(get_current_user)
) -> AdminStatusResponse:
    """
    Report whether the current user is an admin.

    "Not an admin" is a normal answer here (200, is_admin=false); only a
    failed lookup is an error.

    Raises:
        401: If token is invalid or expired
        500: If admin status cannot be determined
    """
    return AdminStatusResponse(user_id=user.id, is_admin=check_admin(user))
