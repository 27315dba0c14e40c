"""JWT validation, user mirroring and identity loading dependencies.

This module provides:
- JWT validation against the identity provider's JWKS
- User record auto-creation on first authenticated call
- The request-scoped Identity consumed by the access guard
"""

import logging
import time
import uuid as uuid_pkg
from typing import Annotated, Any

import httpx
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.access import Identity
from app.core.database import get_db
from app.core.exceptions import UnauthorizedError
from app.domain.user_operations import user_ops
from app.models.user import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Cache for JWKS with TTL to handle key rotation
_jwks_cache: dict[str, Any] = {}
_jwks_cache_timestamp: float = 0.0
_JWKS_CACHE_TTL_SECONDS: float = 3600.0  # 1 hour


async def _fetch_jwks() -> dict[str, Any]:
    """Fetch JWKS from the identity provider and update the cache."""
    global _jwks_cache_timestamp
    async with httpx.AsyncClient() as client:
        response = await client.get(settings.auth_jwks_url)
        response.raise_for_status()
        jwks = response.json()
        _jwks_cache.clear()
        _jwks_cache.update(jwks)
        _jwks_cache_timestamp = time.monotonic()
        return jwks


async def get_jwks(force_refresh: bool = False) -> dict[str, Any]:
    """Fetch and cache the provider's JWKS with a 1-hour TTL."""
    cache_age = time.monotonic() - _jwks_cache_timestamp
    if _jwks_cache and not force_refresh and cache_age < _JWKS_CACHE_TTL_SECONDS:
        return _jwks_cache

    return await _fetch_jwks()


def get_signing_key(jwks: dict[str, Any], token: str) -> dict[str, Any]:
    """Get the JWK from the key set that matches the token's kid."""
    unverified_header = jwt.get_unverified_header(token)
    kid = unverified_header.get("kid")

    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key

    raise ValueError("Unable to find matching key in JWKS")


def _decode_subject(token: str, jwks: dict[str, Any]) -> tuple[uuid_pkg.UUID, dict[str, Any]]:
    """Validate the token against the key set and return (subject id, claims)."""
    signing_key = get_signing_key(jwks, token)
    payload = jwt.decode(
        token,
        signing_key,
        algorithms=settings.auth_algorithms,
        audience=settings.auth_audience,
    )
    subject: str | None = payload.get("sub")
    if subject is None:
        raise ValueError("Token has no subject")
    return uuid_pkg.UUID(subject), payload


async def validate_token(token: str) -> tuple[uuid_pkg.UUID, dict[str, Any]]:
    """
    Validate a bearer token and return its subject and claims.

    Retries once with a freshly fetched key set, since the provider may
    have rotated keys since the cache was filled.

    Raises UnauthorizedError when the token cannot be validated.
    """
    try:
        jwks = await get_jwks()
        return _decode_subject(token, jwks)
    except (JWTError, ValueError) as first_error:
        try:
            logger.info("JWT validation failed with cached JWKS, forcing refresh")
            jwks = await get_jwks(force_refresh=True)
            return _decode_subject(token, jwks)
        except (JWTError, ValueError, httpx.HTTPError):
            raise UnauthorizedError("Could not validate credentials") from first_error
    except httpx.HTTPError:
        logger.warning("Could not fetch JWKS from identity provider")
        raise UnauthorizedError("Could not validate credentials") from None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Validate the bearer token and return the current user.

    Creates the local user mirror on first API call. A freshly mirrored
    user has no organization and no role until one is assigned.
    """
    if not credentials:
        raise UnauthorizedError()

    user_id, payload = await validate_token(credentials.credentials)

    user = await user_ops.get_by_id(db, user_id)
    if not user:
        user_metadata = payload.get("user_metadata", {})
        app_metadata = payload.get("app_metadata", {})
        user = User(
            id=user_id,
            email=payload.get("email"),
            display_name=user_metadata.get("full_name"),
            avatar_url=user_metadata.get("avatar_url"),
            auth_provider=app_metadata.get("provider", "email"),
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)
        logger.info(f"Mirrored new user {user_id} from identity provider")

    return user


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Get current user if authenticated, None otherwise."""
    if not credentials:
        return None
    try:
        return await get_current_user(credentials, db)
    except HTTPException:
        return None


async def get_current_identity_optional(
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
) -> Identity | None:
    """
    Load the caller's Identity, or None when unauthenticated.

    Reloaded from the database on every request; never cached.
    """
    if user is None:
        return None
    return await user_ops.get_identity(db, user.id)


async def get_current_identity(
    identity: Identity | None = Depends(get_current_identity_optional),
) -> Identity:
    """Load the caller's Identity, raising 401 when unauthenticated."""
    if identity is None:
        raise UnauthorizedError()
    return identity


# Type alias for cleaner dependency injection
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
