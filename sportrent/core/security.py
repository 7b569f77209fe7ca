"""
Security and Authentication
Maps a bearer credential to the identity provider's user id.

Two verifiers are available: local verification of the provider's signed
JWTs (python-jose) and remote verification through the Supabase auth API.
Both fail closed with UnauthenticatedError.
"""
from functools import lru_cache
from typing import Any, Optional, Sequence
import logging

from fastapi import Depends
from jose import JWTError, jwt
from starlette.requests import Request

from sportrent.core.config import settings
from sportrent.core.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)


class JWTIdentityVerifier:
    """Verify access tokens signed with the provider's shared JWT secret."""

    def __init__(
        self,
        secret: str,
        algorithms: Sequence[str] = ("HS256",),
        audience: Optional[str] = "authenticated",
    ):
        if not secret:
            raise ValueError("JWT secret is required for token verification")
        self.secret = secret
        self.algorithms = list(algorithms)
        self.audience = audience

    def verify(self, token: Optional[str]) -> str:
        if not token:
            raise UnauthenticatedError()
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise UnauthenticatedError("Unauthorized - Invalid token") from e

        user_id = payload.get("sub")
        if not user_id:
            logger.warning("Token missing 'sub' field")
            raise UnauthenticatedError("Unauthorized - Invalid token")
        return str(user_id)


class SupabaseIdentityVerifier:
    """Verify tokens by asking the Supabase auth API who they belong to."""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_settings(cls) -> "SupabaseIdentityVerifier":
        from supabase import create_client

        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("Supabase client initialized successfully")
        return cls(client)

    def verify(self, token: Optional[str]) -> str:
        if not token:
            raise UnauthenticatedError()
        try:
            response = self.client.auth.get_user(token)
        except Exception as e:
            # the SDK raises its own error types for bad and expired tokens
            logger.warning(f"Token verification failed: {e}")
            raise UnauthenticatedError("Unauthorized - Invalid token") from e

        user = getattr(response, "user", None)
        user_id = getattr(user, "id", None)
        if not user_id:
            raise UnauthenticatedError("Unauthorized - Invalid token")
        return str(user_id)


@lru_cache
def get_identity_verifier():
    """Verifier selected by AUTH_PROVIDER; built once per process."""
    provider = settings.AUTH_PROVIDER.lower()
    if provider == "supabase":
        return SupabaseIdentityVerifier.from_settings()
    if provider == "jwt":
        return JWTIdentityVerifier(
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE or None,
        )
    raise ValueError(f"Unknown AUTH_PROVIDER: {settings.AUTH_PROVIDER}")


def extract_bearer_token(request: Request) -> str:
    """Token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise UnauthenticatedError()
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthenticatedError()
    return token.strip()


def get_current_user_id(
    request: Request,
    verifier=Depends(get_identity_verifier),
) -> str:
    """FastAPI dependency returning the caller's user id."""
    return verifier.verify(extract_bearer_token(request))
