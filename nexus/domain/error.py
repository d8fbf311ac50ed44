"""Domain layer errors."""

from enum import Enum


class DomainError(Exception):
    """Base domain error."""

    pass


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by the invite engine.

    Every kind means the attempted state transition did not happen.
    """

    QUOTA_EXHAUSTED = "quota_exhausted"
    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"
    CONTENTION = "contention"
    UNAVAILABLE = "unavailable"

    @property
    def retryable(self) -> bool:
        """Whether the caller may safely retry after a backoff."""
        return self in (ErrorKind.CONTENTION, ErrorKind.UNAVAILABLE)


class InviteEngineError(DomainError):
    """Base error for issuance and redemption failures."""

    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class QuotaExhaustedError(InviteEngineError):
    """Raised when an ordinary issuer has no invite credits left."""

    kind = ErrorKind.QUOTA_EXHAUSTED

    def __init__(self, issuer_id: str):
        self.issuer_id = issuer_id
        super().__init__(f"Issuer {issuer_id} has no invites available")


class InviteNotFoundError(InviteEngineError):
    """Raised when no invite exists for a code."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Invite not found: {code}")


class InviteAlreadyUsedError(InviteEngineError):
    """Raised when a code has already been redeemed."""

    kind = ErrorKind.ALREADY_USED

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Invite {code} has already been used")


class InviteExpiredError(InviteEngineError):
    """Raised when a code is past its validity horizon."""

    kind = ErrorKind.EXPIRED

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Invite {code} has expired")


class ContentionError(InviteEngineError):
    """Raised when the retry budget is spent on conflicting transactions."""

    kind = ErrorKind.CONTENTION

    def __init__(self, operation: str, attempts: int):
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"Gave up on {operation} after {attempts} conflicting attempts"
        )


class StoreUnavailableError(InviteEngineError):
    """Raised when the invite store cannot be reached."""

    kind = ErrorKind.UNAVAILABLE

    def __init__(self, detail: str):
        super().__init__(f"Invite store unavailable: {detail}")


class WriteConflictError(DomainError):
    """A concurrent transaction changed data this unit of work depended on.

    Internal retry signal, never surfaced to callers.
    """

    pass


class CodeCollisionError(DomainError):
    """A freshly generated code is already taken.

    Internal retry signal, never surfaced to callers.
    """

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Invite code already exists: {code}")
