from __future__ import annotations

import json

import requests

from .errors import (
    ConditionFailedError,
    ResourceInUseError,
    ResourceNotFoundError,
    ServiceError,
    ServiceValidationError,
    TransportError,
    UnexpectedResponseError,
)

TRANSIENT_ERROR_CODES = frozenset(
    {
        "InternalError",
        "InternalServerError",
        "ProvisionedThroughputExceededException",
        "ThrottlingException",
        "RequestLimitExceeded",
    }
)
TRANSIENT_STATUS_CODES = frozenset({500, 503})

_ERROR_CLASSES: dict[str, type[ServiceError]] = {
    "ConditionalCheckFailedException": ConditionFailedError,
    "ResourceNotFoundException": ResourceNotFoundError,
    "ResourceInUseException": ResourceInUseError,
    "ValidationException": ServiceValidationError,
}


def parse_service_error(status_code: int, reason: str, body: bytes) -> Exception:
    status = f"{status_code} {reason}".strip()
    try:
        doc = json.loads(body)
    except ValueError as err:
        return UnexpectedResponseError(body=body, cause=err, status_code=status_code)

    if not isinstance(doc, dict) or not isinstance(doc.get("__type"), str):
        return UnexpectedResponseError(
            body=body,
            cause=ValueError("error body has no __type"),
            status_code=status_code,
        )

    code = doc["__type"].rsplit("#", 1)[-1]
    message = doc.get("message", doc.get("Message", ""))
    if not isinstance(message, str):
        message = str(message)

    cls = _ERROR_CLASSES.get(code, ServiceError)
    return cls(status_code=status_code, status=status, code=code, message=message)


def map_transport_error(err: requests.RequestException) -> TransportError:
    # TLS and proxy failures subclass ConnectionError but do not heal on retry.
    if isinstance(err, (requests.exceptions.SSLError, requests.exceptions.ProxyError)):
        return TransportError(f"{type(err).__name__}: {err}", transient=False)
    # ConnectionError covers DNS resolution failures and connection resets.
    transient = isinstance(
        err,
        (
            requests.ConnectionError,
            requests.Timeout,
            requests.exceptions.ChunkedEncodingError,
        ),
    )
    return TransportError(f"{type(err).__name__}: {err}", transient=transient)


def is_retryable(err: BaseException | None) -> bool:
    if err is None:
        return False
    if isinstance(err, TransportError):
        return err.transient
    if isinstance(err, ServiceError):
        return err.code in TRANSIENT_ERROR_CODES or err.status_code in TRANSIENT_STATUS_CODES
    if isinstance(err, UnexpectedResponseError):
        return err.status_code in TRANSIENT_STATUS_CODES
    return False
