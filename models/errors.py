# models/errors.py
"""
Error taxonomy shared by the identity client, the task store and the
reminder engine.
"""


class PlannerError(Exception):
    """Base error carrying a user-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class AuthError(PlannerError):
    """Credential rejected or network failure while talking to the identity service."""


class StoreError(PlannerError):
    """Task query/insert/update rejected, or the store is unreachable."""


class ParseError(PlannerError):
    """Malformed due date-time string. Never shown to the user."""
