from __future__ import annotations


class DdbjsonError(Exception):
    pass


class ValidationError(DdbjsonError):
    pass


class MarshalError(DdbjsonError):
    pass


class DecodeError(DdbjsonError):
    pass


class NotFoundError(DdbjsonError):
    pass


class WaitTimeoutError(DdbjsonError):
    pass


class TransportError(DdbjsonError):
    def __init__(self, message: str, *, transient: bool) -> None:
        super().__init__(message)
        self.transient = transient


class UnexpectedResponseError(DdbjsonError):
    """A response body that could not be decoded.

    Raised for a 200 body that does not match the operation's result shape and
    for a non-200 body that is not a service error document. ``body`` holds the
    raw bytes exactly as received.
    """

    def __init__(self, *, body: bytes, cause: Exception | None = None, status_code: int = 200) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"unexpected response (status={status_code}) {body[:200]!r}{detail}")
        self.body = body
        self.cause = cause
        self.status_code = status_code


class ServiceError(DdbjsonError):
    def __init__(self, *, status_code: int, status: str, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.status_code = status_code
        self.status = status
        self.code = code
        self.message = message

    @property
    def retryable(self) -> bool:
        from .aws_errors import is_retryable

        return is_retryable(self)


class ConditionFailedError(ServiceError):
    pass


class ResourceNotFoundError(ServiceError):
    pass


class ResourceInUseError(ServiceError):
    pass


class ServiceValidationError(ServiceError):
    pass


class RetryCancelledError(DdbjsonError):
    def __init__(self, *, reason: str, attempts: int, last_error: Exception | None = None) -> None:
        super().__init__(f"retry cancelled ({reason}) after {attempts} attempt(s)")
        self.reason = reason
        self.attempts = attempts
        self.last_error = last_error
