"""Unit tests for bearer token validation."""
import base64
import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, Mock, patch

import httpx
from fastapi import HTTPException
from jose import jwt

from app import auth
from app.auth import get_current_user, get_jwks, clear_jwks_cache


def _token(claims: dict, key: str = None, algorithm: str = "HS256") -> str:
    payload = {"exp": datetime.utcnow() + timedelta(minutes=5), **claims}
    return jwt.encode(payload, key or auth.settings.auth_secret_key, algorithm=algorithm)


def _request(authorization: str = None):
    request = Mock()
    request.headers = {"Authorization": authorization} if authorization else {}
    return request


class TestGetCurrentUser:
    """Test cases for get_current_user."""

    @pytest.mark.asyncio
    async def test_valid_token_returns_id_and_name(self):
        token = _token({"sub": "kc-123", "name": "Alice Asker"})

        user = await get_current_user(_request(f"Bearer {token}"))

        assert user == {"id": "kc-123", "name": "Alice Asker"}

    @pytest.mark.asyncio
    async def test_missing_header_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request())

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request("Basic dXNlcjpwYXNz"))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_signature_is_401(self):
        token = _token({"sub": "kc-123", "name": "Alice"}, key="some-other-secret")

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request(f"Bearer {token}"))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token_is_401(self):
        token = jwt.encode(
            {"sub": "kc-123", "name": "Alice", "exp": datetime.utcnow() - timedelta(minutes=1)},
            auth.settings.auth_secret_key,
            algorithm="HS256",
        )

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request(f"Bearer {token}"))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_subject_is_401(self):
        token = _token({"name": "Alice"})

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request(f"Bearer {token}"))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_display_name_is_400(self):
        token = _token({"sub": "kc-123"})

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request(f"Bearer {token}"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Cannot get user details"

    @pytest.mark.asyncio
    async def test_audience_mismatch_is_401(self):
        token = _token({"sub": "kc-123", "name": "Alice", "aud": "another-client"})

        with patch.object(auth.settings, "auth_audience", "overflow"):
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(_request(f"Bearer {token}"))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_identity_provider_down_is_503(self):
        token = _token({"sub": "kc-123", "name": "Alice"})

        with patch.object(auth.settings, "auth_jwks_url", "http://keycloak.test/certs"), \
                patch("app.auth.get_jwks", new=AsyncMock(side_effect=httpx.ConnectError("down"))):
            with pytest.raises(HTTPException) as exc_info:
                await get_current_user(_request(f"Bearer {token}"))

        assert exc_info.value.status_code == 503


class TestJwks:
    """Signing key retrieval."""

    def teardown_method(self):
        clear_jwks_cache()

    @pytest.mark.asyncio
    async def test_jwks_is_fetched_once_and_cached(self):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(200, json={"keys": [{"kid": "k1", "kty": "RSA"}]})

        real_client = httpx.AsyncClient

        def client_factory(**kwargs):
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        with patch.object(auth.settings, "auth_jwks_url", "http://keycloak.test/certs"), \
                patch("app.auth.httpx.AsyncClient", side_effect=client_factory):
            first = await get_jwks()
            second = await get_jwks()

        assert first == second == {"keys": [{"kid": "k1", "kty": "RSA"}]}
        assert len(calls) == 1


def _oct_key(kid: str, secret: str) -> dict:
    k = base64.urlsafe_b64encode(secret.encode()).rstrip(b"=").decode()
    return {"kty": "oct", "kid": kid, "k": k}


class TestKeyRotation:
    """A token signed with a key the cache does not know triggers one refetch."""

    def teardown_method(self):
        clear_jwks_cache()

    async def _authenticate(self, token, key_sets):
        calls = []

        def handler(request):
            calls.append(request.url)
            return httpx.Response(200, json=key_sets[min(len(calls), len(key_sets)) - 1])

        real_client = httpx.AsyncClient

        def client_factory(**kwargs):
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        with patch.object(auth.settings, "auth_jwks_url", "http://keycloak.test/certs"), \
                patch("app.auth.httpx.AsyncClient", side_effect=client_factory):
            await get_jwks()
            try:
                return await get_current_user(_request(f"Bearer {token}")), calls
            except HTTPException as e:
                return e, calls

    @pytest.mark.asyncio
    async def test_rotated_key_is_fetched_and_accepted(self):
        old = {"keys": [_oct_key("old", "old-secret")]}
        rotated = {"keys": [_oct_key("old", "old-secret"), _oct_key("new", "rotated-secret")]}
        token = jwt.encode(
            {"sub": "kc-123", "name": "Alice", "exp": datetime.utcnow() + timedelta(minutes=5)},
            "rotated-secret",
            algorithm="HS256",
            headers={"kid": "new"},
        )

        user, calls = await self._authenticate(token, [old, rotated])

        assert user == {"id": "kc-123", "name": "Alice"}
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_known_key_uses_cache(self):
        keys = {"keys": [_oct_key("old", "old-secret")]}
        token = jwt.encode(
            {"sub": "kc-123", "name": "Alice", "exp": datetime.utcnow() + timedelta(minutes=5)},
            "old-secret",
            algorithm="HS256",
            headers={"kid": "old"},
        )

        user, calls = await self._authenticate(token, [keys])

        assert user == {"id": "kc-123", "name": "Alice"}
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unknown_key_after_refresh_is_401(self):
        keys = {"keys": [_oct_key("old", "old-secret")]}
        token = jwt.encode(
            {"sub": "kc-123", "name": "Alice", "exp": datetime.utcnow() + timedelta(minutes=5)},
            "forged-secret",
            algorithm="HS256",
            headers={"kid": "forged"},
        )

        error, calls = await self._authenticate(token, [keys])

        assert isinstance(error, HTTPException)
        assert error.status_code == 401
        assert len(calls) == 2
