"""
Domain errors raised by services and translated to HTTP responses.

Every error here is recovered at the request boundary by the handler
registered in main.py; none of them aborts the process.
"""

from fastapi import status


class ProposalsError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_type: str = "ProposalsError"
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(ProposalsError):
    """No credential, or one that did not resolve to a user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "Unauthenticated"
    default_detail = "Authentication required"


class Unauthorized(ProposalsError):
    """Caller is not permitted to perform the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    error_type = "Unauthorized"
    default_detail = "Not permitted"


class NotFound(ProposalsError):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "NotFound"
    default_detail = "Not found"


class InvalidInput(ProposalsError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "InvalidInput"
    default_detail = "Invalid input"


class UpstreamVerificationFailure(ProposalsError):
    """The identity provider was unreachable or rejected the token."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_type = "UpstreamVerificationFailure"
    default_detail = "Identity provider verification failed"


class RankingConflict(ProposalsError):
    """Concurrent ranking writes kept winning over this one."""

    status_code = status.HTTP_409_CONFLICT
    error_type = "RankingConflict"
    default_detail = "Ranking was modified concurrently, please retry"
