"""
Authentication endpoints.

The active credential scheme is fixed per deployment (AUTH_STRATEGY):
- stored_token / signed_token: email + password, server issues a token
- external: the client signs in with its identity provider ID token and
  keeps presenting that token; nothing is issued or stored here
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError

from api.deps import (
    _user_model_to_schema,
    get_current_identity,
    get_user_repository,
    get_verifier,
)
from core.config import AuthStrategy
from core.exceptions import InvalidInput, Unauthenticated
from core.security import hash_password, verify_password
from repositories.user_repository import UserRepository
from schemas.auth import RegisterRequest, SignInRequest, SignInResponse
from services.identity import CredentialVerifier, Identity

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/register", response_model=SignInResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    verifier: Annotated[CredentialVerifier, Depends(get_verifier)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> SignInResponse:
    """
    Register a new account with email and password and sign it in.

    Not available with the external strategy: accounts there are created
    on the first verified sign-in.
    """
    if verifier.strategy == AuthStrategy.EXTERNAL:
        raise InvalidInput("Accounts are created by signing in with the identity provider")

    if await users.email_exists(user_data.email):
        raise InvalidInput("Email already registered")

    try:
        password_hash = hash_password(user_data.password)
    except ValueError as e:
        raise InvalidInput(str(e)) from e

    try:
        user = await users.create(email=user_data.email, password_hash=password_hash)
    except IntegrityError as e:
        # A concurrent registration took the address after the check above
        await users.db.rollback()
        raise InvalidInput("Email already registered") from e

    access_token = await verifier.issue(user, users)
    await users.db.commit()

    logger.info("user_registered", user_id=user.id, strategy=verifier.strategy.value)
    return SignInResponse(access_token=access_token, user=_user_model_to_schema(user))


@router.post("/signin", response_model=SignInResponse)
async def sign_in(
    body: SignInRequest,
    verifier: Annotated[CredentialVerifier, Depends(get_verifier)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> SignInResponse:
    """Exchange a credential for a session (or just the user, for external)."""
    if verifier.strategy == AuthStrategy.EXTERNAL:
        if not body.credential:
            raise InvalidInput("credential is required")
        identity = await verifier.resolve(body.credential, users)
        if identity is None:
            raise Unauthenticated("Identity token could not be verified")
        user = await users.get_by_id(identity.user_id)
        if user is None:
            raise Unauthenticated("Identity token could not be verified")
        await users.db.commit()
        logger.info("user_signed_in", user_id=user.id, strategy=verifier.strategy.value)
        return SignInResponse(access_token=None, user=_user_model_to_schema(user))

    if not body.email or not body.password:
        raise InvalidInput("email and password are required")

    user = await users.get_by_email(body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("sign_in_failed", reason="bad_credentials")
        raise Unauthenticated("Invalid email or password")

    access_token = await verifier.issue(user, users)
    await users.db.commit()

    logger.info("user_signed_in", user_id=user.id, strategy=verifier.strategy.value)
    return SignInResponse(access_token=access_token, user=_user_model_to_schema(user))


@router.post("/signout")
async def sign_out(
    identity: Annotated[Identity, Depends(get_current_identity)],
    verifier: Annotated[CredentialVerifier, Depends(get_verifier)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> dict[str, str]:
    """
    Sign out.

    Clears the stored session token for stored_token; signed and external
    credentials are simply discarded by the client.
    """
    await verifier.revoke(identity, users)
    await users.db.commit()
    logger.info("user_signed_out", user_id=identity.user_id)
    return {"message": "Successfully signed out"}
