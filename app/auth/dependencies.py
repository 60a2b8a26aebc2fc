# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and the admin gate.
#
# Token verification supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.post("/admin-only")
#   async def admin_only(user: AuthUser = Depends(require_admin)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import secrets
import time
from typing import Optional
from uuid import UUID

import httpx
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser
from app.exceptions import AdminCheckError, AdminRequiredError, AuthenticationError
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor. auto_error is off so a missing header
# produces our own 401 body instead of FastAPI's default.
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Return cached even if expired, as fallback
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        # Let jwt.decode report the malformed token
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    # For ES256 or other asymmetric algorithms, use JWKS
    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return the user it belongs to.

    Raises:
        AuthenticationError: If the token is invalid, expired or has no usable `sub`
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise AuthenticationError(details="Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthenticationError(details=f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise AuthenticationError(details="Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise AuthenticationError(details="Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate user from the Supabase JWT in the Authorization header.

    Raises:
        AuthenticationError: 401 if the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        logger.warning("Missing authorization header")
        raise AuthenticationError(message="Missing authorization")

    user = decode_access_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


def check_admin(user: AuthUser) -> bool:
    """
    Ask the database whether `user` is an admin.

    Raises:
        AdminCheckError: If admin status cannot be determined
    """
    try:
        return SupabaseClient.check_is_admin(user.id)
    except SupabaseClientError as e:
        logger.error(f"Admin check failed for {user.id}: {e}")
        raise AdminCheckError(str(user.id), e.message, error_code=e.code)


async def require_admin(
    user: AuthUser = Depends(get_current_user)
) -> AuthUser:
    """
    Admin gate for privileged endpoints.

    Only an explicit `true` from is_admin() lets the request through.

    Raises:
        AdminCheckError: 500 if the admin lookup itself failed
        AdminRequiredError: 403 if the user is verified but not an admin
    """
    if not check_admin(user):
        logger.info(f"Access denied for non-admin user: {user.id}")
        raise AdminRequiredError(str(user.id))

    logger.info(f"Admin verified: {user.id}")
    return user


async def require_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[AuthUser]:
    """
    Gate for service endpoints such as POST /vivino/fetch.

    Accepts the project's anon key, which is what VivinoFunctionClient sends,
    or any valid user access token.

    Returns:
        The AuthUser for a user token, None for the anon key

    Raises:
        AuthenticationError: 401 if the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        logger.warning("Missing authorization header")
        raise AuthenticationError(message="Missing authorization")

    if secrets.compare_digest(
        credentials.credentials.encode(), settings.SUPABASE_ANON_KEY.encode()
    ):
        return None

    return decode_access_token(credentials.credentials)
