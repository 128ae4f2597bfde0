"""
Identity resolution.

Maps the credential presented on a request to a local user identity.
Three credential schemes exist and a deployment runs exactly one of them,
chosen by AUTH_STRATEGY:

- stored_token: opaque bearer token whose hash is kept on the user row
- signed_token: stateless JWT signed with the server secret
- external: ID token from a third-party identity provider, verified
  against the provider's published keys on every request

resolve() never raises for a bad credential; it returns None and the
caller treats the request as anonymous.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

import httpx
import structlog
from jose import jwt
from jose.exceptions import JOSEError

from core.config import AuthStrategy, Settings
from core.exceptions import UpstreamVerificationFailure
from core.security import (
    DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    create_access_token,
    decode_token,
    generate_secure_token,
    hash_token,
)
from models.user import User
from repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """A resolved, non-anonymous caller."""

    user_id: str
    email: Optional[str] = None


class CredentialVerifier(ABC):
    """Common contract for every credential scheme."""

    strategy: AuthStrategy

    @abstractmethod
    async def resolve(self, credential: Optional[str], users: UserRepository) -> Optional[Identity]:
        """Return the identity behind a credential, or None."""

    @abstractmethod
    async def issue(self, user: User, users: UserRepository) -> Optional[str]:
        """Hand out a credential after a successful sign-in (None if the scheme has none)."""

    async def revoke(self, identity: Identity, users: UserRepository) -> None:
        """Invalidate the caller's credential. Stateless schemes do nothing."""
        return None


class StoredTokenVerifier(CredentialVerifier):
    """Opaque session token; the user row keeps its SHA-256."""

    strategy = AuthStrategy.STORED_TOKEN

    async def resolve(self, credential: Optional[str], users: UserRepository) -> Optional[Identity]:
        if not credential:
            return None
        user = await users.get_by_session_token_hash(hash_token(credential))
        if user is None:
            return None
        return Identity(user_id=user.id, email=user.email)

    async def issue(self, user: User, users: UserRepository) -> Optional[str]:
        # A new sign-in replaces any previous session
        token = generate_secure_token()
        await users.set_session_token_hash(user.id, hash_token(token))
        return token

    async def revoke(self, identity: Identity, users: UserRepository) -> None:
        await users.set_session_token_hash(identity.user_id, None)
        logger.info("session_token_cleared", user_id=identity.user_id)


class SignedTokenVerifier(CredentialVerifier):
    """Stateless JWT; the user id comes straight from the `sub` claim."""

    strategy = AuthStrategy.SIGNED_TOKEN

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    async def resolve(self, credential: Optional[str], users: UserRepository) -> Optional[Identity]:
        if not credential:
            return None
        payload = decode_token(credential, self.secret_key, self.algorithm)
        if payload is None:
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return Identity(user_id=str(user_id), email=payload.get("email"))

    async def issue(self, user: User, users: UserRepository) -> Optional[str]:
        token_data: dict[str, Any] = {"sub": user.id}
        if user.email:
            token_data["email"] = user.email
        return create_access_token(
            token_data,
            self.secret_key,
            algorithm=self.algorithm,
            expires_delta=timedelta(minutes=self.expire_minutes),
        )


class ExternalProviderVerifier(CredentialVerifier):
    """
    Third-party ID token (Google by default).

    The provider's JWKS is fetched over HTTPS and cached. Local users are
    keyed by the token's `sub` and created on first sight. No credential
    is ever stored server-side.
    """

    strategy = AuthStrategy.EXTERNAL
    algorithms = ["RS256"]

    def __init__(
        self,
        client_id: str,
        jwks_url: str,
        issuers: list[str],
        timeout_seconds: float = 5.0,
        cache_seconds: int = 3600,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.jwks_url = jwks_url
        self.issuers = issuers
        self.timeout_seconds = timeout_seconds
        self.cache_seconds = cache_seconds
        self._transport = transport
        self._jwks: Optional[dict[str, Any]] = None
        self._jwks_fetched_at = 0.0

    async def _fetch_jwks(self) -> dict[str, Any]:
        now = time.monotonic()
        if self._jwks is not None and now - self._jwks_fetched_at < self.cache_seconds:
            return self._jwks

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.get(self.jwks_url)
            response.raise_for_status()
            jwks = response.json()

        if not isinstance(jwks, dict) or not jwks.get("keys"):
            raise ValueError("JWKS document has no keys")
        self._jwks = jwks
        self._jwks_fetched_at = now
        return jwks

    async def verify_claims(self, token: str, audience: Optional[str] = None) -> dict[str, Any]:
        """
        Verify an ID token and return its claims.

        Raises:
            UpstreamVerificationFailure: provider unreachable, or the token
                is malformed, expired, for another audience or issuer.
        """
        try:
            jwks = await self._fetch_jwks()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamVerificationFailure("Identity provider keys unavailable") from e

        try:
            claims = jwt.decode(
                token,
                jwks,
                algorithms=self.algorithms,
                audience=audience or self.client_id,
                options={"verify_at_hash": False},
            )
        except JOSEError as e:
            raise UpstreamVerificationFailure("Identity token rejected") from e

        if claims.get("iss") not in self.issuers:
            raise UpstreamVerificationFailure("Identity token has an unexpected issuer")
        if not claims.get("sub"):
            raise UpstreamVerificationFailure("Identity token has no subject")
        return claims

    async def verify(self, token: str, audience: Optional[str] = None) -> str:
        """Verify an ID token and return the provider's subject id."""
        claims = await self.verify_claims(token, audience)
        return str(claims["sub"])

    async def resolve(self, credential: Optional[str], users: UserRepository) -> Optional[Identity]:
        if not credential:
            return None
        try:
            claims = await asyncio.wait_for(self.verify_claims(credential), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("identity_verification_timeout", timeout_seconds=self.timeout_seconds)
            return None
        except UpstreamVerificationFailure as e:
            logger.warning("identity_verification_failed", reason=e.detail, cause=repr(e.__cause__))
            return None

        user = await users.get_or_create_by_external_subject(
            str(claims["sub"]),
            email=claims.get("email") if claims.get("email_verified") is True else None,
        )
        return Identity(user_id=user.id, email=user.email)

    async def issue(self, user: User, users: UserRepository) -> Optional[str]:
        return None


def build_verifier(settings: Settings) -> CredentialVerifier:
    """Build the verifier for the configured strategy."""
    if settings.AUTH_STRATEGY == AuthStrategy.STORED_TOKEN:
        return StoredTokenVerifier()
    if settings.AUTH_STRATEGY == AuthStrategy.SIGNED_TOKEN:
        return SignedTokenVerifier(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )
    if settings.AUTH_STRATEGY == AuthStrategy.EXTERNAL:
        if not settings.OAUTH_CLIENT_ID:
            raise ValueError("OAUTH_CLIENT_ID must be set for the external auth strategy")
        return ExternalProviderVerifier(
            client_id=settings.OAUTH_CLIENT_ID,
            jwks_url=settings.OAUTH_JWKS_URL,
            issuers=settings.oauth_issuers_list,
            timeout_seconds=settings.OAUTH_VERIFY_TIMEOUT_SECONDS,
            cache_seconds=settings.OAUTH_JWKS_CACHE_SECONDS,
        )
    raise ValueError(f"Unknown AUTH_STRATEGY: {settings.AUTH_STRATEGY}")
