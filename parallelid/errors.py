"""
ParallelID error kinds.

Every rejected operation raises one of these with a machine-checkable
ErrorCode. Malformed arguments (bad addresses, bad trait names, out of
range codes) raise ValueError instead.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Reason an operation was refused."""
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    SIGNATURE_EXPIRED = "SIGNATURE_EXPIRED"
    INSUFFICIENT_PAYMENT = "INSUFFICIENT_PAYMENT"


class ParallelIDError(Exception):
    """Base class for refused operations. State is unchanged when raised."""

    code: ErrorCode

    def __init__(self, message: str = ""):
        super().__init__(message or self.code.value)
        self.message = message or self.code.value


class UnauthorizedError(ParallelIDError):
    """Caller lacks the authority or ownership role the operation needs."""
    code = ErrorCode.UNAUTHORIZED


class NotFoundError(ParallelIDError):
    """Operation targets a credential id that does not exist."""
    code = ErrorCode.NOT_FOUND


class InvalidSignatureError(ParallelIDError):
    """Authorization does not verify against the current authority and sequence."""
    code = ErrorCode.INVALID_SIGNATURE


class SignatureExpiredError(ParallelIDError):
    """Authorization presented after its not_after timestamp."""
    code = ErrorCode.SIGNATURE_EXPIRED


class InsufficientPaymentError(ParallelIDError):
    """Value attached to a self-mint is below the current mint cost."""
    code = ErrorCode.INSUFFICIENT_PAYMENT
