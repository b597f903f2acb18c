from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from botocore.awsrequest import AWSRequest


class _AnySentinel:
    def __repr__(self) -> str:  # pragma: no cover
        return "ANY"


ANY: Any = _AnySentinel()


def _assert_match(expected: Any, actual: Any, *, path: str) -> None:
    if expected is ANY:
        return

    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            raise AssertionError(f"{path}: expected dict, got {type(actual).__name__}")
        for k, v in expected.items():
            if k not in actual:
                raise AssertionError(f"{path}: missing key {k!r}")
            _assert_match(v, actual[k], path=f"{path}.{k}")
        return

    if isinstance(expected, list):
        if not isinstance(actual, list):
            raise AssertionError(f"{path}: expected list, got {type(actual).__name__}")
        if len(expected) != len(actual):
            raise AssertionError(f"{path}: expected {len(expected)} items, got {len(actual)}")
        for i, (e, a) in enumerate(zip(expected, actual, strict=True)):
            _assert_match(e, a, path=f"{path}[{i}]")
        return

    if expected != actual:
        raise AssertionError(f"{path}: expected {expected!r}, got {actual!r}")


@dataclass(frozen=True)
class FakeResponse:
    status_code: int
    content: bytes
    reason: str = ""


@dataclass(frozen=True)
class RecordedCall:
    operation: str
    url: str
    headers: dict[str, str]
    body: dict[str, Any]
    timeout: float | None


@dataclass(frozen=True)
class ExpectedCall:
    operation: str
    expected: Mapping[str, Any] | Callable[[Mapping[str, Any]], None] | None = None
    status: int = 200
    body: Mapping[str, Any] | bytes | None = None
    error: Exception | None = None


def _encode_body(body: Mapping[str, Any] | bytes | None) -> bytes:
    if body is None:
        return b"{}"
    if isinstance(body, bytes):
        return body
    return json.dumps(dict(body)).encode("utf-8")


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


class FakeHTTPSession:
    """Stands in for ``requests.Session`` and replays canned responses.

    Each ``expect`` queues one response; calls must arrive in order and target
    the expected operation. ``body`` may be a JSON-able mapping or raw bytes,
    ``error`` is raised instead of responding.
    """

    def __init__(self) -> None:
        self._expected: list[ExpectedCall] = []
        self.calls: list[RecordedCall] = []
        self.closed = False

    def expect(
        self,
        operation: str,
        expected: Mapping[str, Any] | Callable[[Mapping[str, Any]], None] | None = None,
        *,
        status: int = 200,
        body: Mapping[str, Any] | bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        self._expected.append(
            ExpectedCall(operation=operation, expected=expected, status=status, body=body, error=error)
        )

    def expect_service_error(self, operation: str, code: str, message: str = "", *, status: int = 400) -> None:
        self.expect(
            operation,
            status=status,
            body={"__type": f"com.amazonaws.dynamodb.v20120810#{code}", "message": message},
        )

    def assert_no_pending(self) -> None:
        if self._expected:
            raise AssertionError(f"pending expected calls: {self._expected!r}")

    def close(self) -> None:
        self.closed = True

    def post(
        self,
        url: str,
        data: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> FakeResponse:
        hdrs = dict(headers or {})
        target = hdrs.get("X-Amz-Target", "")
        operation = target.rsplit(".", 1)[-1]
        req = json.loads(data or b"{}")
        self.calls.append(RecordedCall(operation=operation, url=url, headers=hdrs, body=req, timeout=timeout))

        if not self._expected:
            raise AssertionError(f"unexpected call: {operation}")

        call = self._expected.pop(0)
        if call.operation != operation:
            raise AssertionError(f"expected {call.operation}, got {operation}")

        if callable(call.expected):
            call.expected(req)
        elif call.expected is not None:
            _assert_match(dict(call.expected), req, path=operation)

        if call.error is not None:
            raise call.error

        return FakeResponse(status_code=call.status, content=_encode_body(call.body), reason=_reason(call.status))


class FakeSigner:
    def __init__(self, authorization: str = "AWS4-HMAC-SHA256 Credential=fake") -> None:
        self.authorization = authorization
        self.signed: list[dict[str, str]] = []

    def sign(self, request: AWSRequest) -> None:
        request.headers["Authorization"] = self.authorization
        self.signed.append(dict(request.headers.items()))
