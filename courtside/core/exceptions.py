"""Error taxonomy shared by the stores, services and HTTP layer.

``ValidationError`` and ``PermissionDeniedError`` also derive from the
builtin ``ValueError`` / ``PermissionError`` so callers that only know
the builtins keep working.
"""


class CourtsideError(Exception):
    pass


class ValidationError(CourtsideError, ValueError):
    """A precondition or invariant was violated; the caller can correct it."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NotFoundError(CourtsideError, LookupError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class PermissionDeniedError(CourtsideError, PermissionError):
    pass


class CollaboratorError(CourtsideError):
    """The storage, auth or email backend failed (timeout, 5xx, I/O)."""


class AuthenticationError(CourtsideError):
    """The caller's credentials (Google ID token or bearer JWT) were rejected."""
