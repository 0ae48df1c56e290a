# artifact_dao/dao_runtime/errors.py
"""
Governance error taxonomy.

Every engine operation either completes or raises one of these before any
state is touched. `code` is a stable machine string (used as the HTTP
`detail`), `status_code` is what the API layer answers with.
"""

from __future__ import annotations


class GovernanceError(Exception):
    """Base governance exception."""

    code: str = "governance_error"
    status_code: int = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class InvalidArgument(GovernanceError):
    code = "invalid_argument"
    status_code = 400


class Unauthorized(GovernanceError):
    """Caller does not hold the role (owner / assignee) the operation needs."""

    code = "unauthorized"
    status_code = 403


class Forbidden(GovernanceError):
    """Caller has no snapshot weight for the proposal and no admin role."""

    code = "forbidden"
    status_code = 403


class NotFound(GovernanceError):
    code = "not_found"
    status_code = 404


class AlreadyExecuted(GovernanceError):
    code = "already_executed"
    status_code = 409


class AlreadyVoted(GovernanceError):
    code = "already_voted"
    status_code = 409


class NotVotedYet(GovernanceError):
    code = "not_voted_yet"
    status_code = 409


class SameSuggestion(GovernanceError):
    code = "same_suggestion"
    status_code = 409


class TooEarly(GovernanceError):
    """Execution attempted before the debate period ended."""

    code = "too_early"
    status_code = 425


__all__ = [
    "GovernanceError",
    "InvalidArgument",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "AlreadyExecuted",
    "AlreadyVoted",
    "NotVotedYet",
    "SameSuggestion",
    "TooEarly",
]
