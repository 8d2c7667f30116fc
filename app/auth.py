"""Bearer token validation for tokens issued by the identity provider."""
from typing import Optional
import logging

import httpx
from fastapi import HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError, jwt

from app.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Cached JSON Web Key Set of the identity provider
_jwks_cache: Optional[dict] = None


def _extract_token_from_request(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    scheme, param = get_authorization_scheme_param(auth_header)
    if scheme.lower() != "bearer":
        return None
    return param


async def get_jwks(refresh: bool = False) -> dict:
    """Fetch (and cache) the identity provider's signing keys."""
    global _jwks_cache

    if _jwks_cache is not None and not refresh:
        return _jwks_cache

    async with httpx.AsyncClient(timeout=5.0) as client:
        response = await client.get(settings.auth_jwks_url)
        response.raise_for_status()
        _jwks_cache = response.json()
        logger.info(f"Loaded {len(_jwks_cache.get('keys', []))} signing keys from {settings.auth_jwks_url}")
        return _jwks_cache


def clear_jwks_cache() -> None:
    global _jwks_cache
    _jwks_cache = None


def _has_key(jwks: dict, kid: Optional[str]) -> bool:
    return any(key.get("kid") == kid for key in jwks.get("keys", []))


async def _signing_key(token: str):
    """Key material for ``token``: the JWKS, or the shared secret.

    A ``kid`` missing from the cached JWKS triggers one refetch, which picks
    up keys rotated by the identity provider.
    """
    if settings.auth_jwks_url:
        kid = jwt.get_unverified_header(token).get("kid")
        try:
            jwks = await get_jwks()
            if kid and not _has_key(jwks, kid):
                logger.info(f"Signing key {kid} not cached, refreshing keys")
                jwks = await get_jwks(refresh=True)
            return jwks
        except httpx.HTTPError as e:
            logger.error(f"Failed to load signing keys: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Identity provider unavailable",
            )
    return settings.auth_secret_key


def decode_token(token: str, key) -> dict:
    """Verify a token's signature and standard claims and return its payload."""
    options = {"verify_aud": bool(settings.auth_audience)}
    kwargs = {}
    if settings.auth_audience:
        kwargs["audience"] = settings.auth_audience
    if settings.auth_issuer:
        kwargs["issuer"] = settings.auth_issuer
    return jwt.decode(token, key, algorithms=settings.jwt_algorithms, options=options, **kwargs)


async def get_current_user(request: Request) -> dict:
    """Get the caller's identifier and display name from the bearer token."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _extract_token_from_request(request)
    if not token:
        raise credentials_exception

    try:
        payload = decode_token(token, await _signing_key(token))
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise credentials_exception

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    name: Optional[str] = payload.get(settings.auth_name_claim)
    if not name:
        raise HTTPException(status_code=400, detail="Cannot get user details")

    return {"id": str(user_id), "name": name}
