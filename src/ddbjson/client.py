from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Protocol

import requests
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from .aws_errors import is_retryable, map_transport_error, parse_service_error
from .errors import DdbjsonError, DecodeError, RetryCancelledError, UnexpectedResponseError, ValidationError
from .operations import (
    BatchGetItemRequest,
    BatchWriteItemRequest,
    CreateTableRequest,
    DeleteItemRequest,
    DeleteTableRequest,
    DescribeTableRequest,
    GetItemRequest,
    ListTablesRequest,
    PutItemRequest,
    QueryRequest,
    ScanRequest,
    UpdateItemRequest,
    UpdateTableRequest,
)
from .results import (
    BatchGetItemResult,
    BatchWriteItemResult,
    CreateTableResult,
    DeleteItemResult,
    DeleteTableResult,
    DescribeTableResult,
    GetItemResult,
    ListTablesResult,
    PutItemResult,
    QueryResult,
    ScanResult,
    UpdateItemResult,
    UpdateTableResult,
)
from .retry import Attempt
from .runtime import AwsCallMetric, ClientConfig, Signer, SigV4Signer, default_credentials

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/x-amz-json-1.0"
AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"


class WireRequest(Protocol):
    def to_wire(self) -> dict[str, Any]: ...


class WireResult[R](Protocol):
    def from_wire(self, data: Any) -> R: ...


class Client:
    def __init__(
        self,
        config: ClientConfig,
        *,
        credentials: Credentials | None = None,
        signer: Signer | None = None,
        session: Any | None = None,
        metrics: Callable[[AwsCallMetric], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if signer is None:
            if credentials is None:
                credentials = default_credentials()
            signer = SigV4Signer(credentials, config.region)

        self._config = config
        self._credentials = credentials
        self._signer = signer
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._metrics = metrics
        self._sleep = sleep
        self._clock = clock

    @property
    def config(self) -> ClientConfig:
        return self._config

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def do[R](
        self,
        operation: str,
        request: WireRequest,
        result_type: WireResult[R],
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> R:
        body = json.dumps(request.to_wire(), separators=(",", ":")).encode("utf-8")
        start = self._clock()
        attempt = self._config.retry.start(clock=self._clock, sleep=self._sleep)
        try:
            result = self._do_with_retry(operation, body, result_type, attempt, deadline, cancel)
        except Exception:
            self._record(operation, start, ok=False, attempts=attempt.count)
            raise
        self._record(operation, start, ok=True, attempts=attempt.count)
        return result

    def _do_with_retry[R](
        self,
        operation: str,
        body: bytes,
        result_type: WireResult[R],
        attempt: Attempt,
        deadline: float | None,
        cancel: threading.Event | None,
    ) -> R:
        last_err: DdbjsonError | None = None
        while attempt.next():
            self._check_cancelled(operation, deadline, cancel, attempt.count - 1, last_err)
            try:
                return self._send_once(operation, body, result_type, attempt.count)
            except DdbjsonError as err:
                if not is_retryable(err):
                    raise
                last_err = err
                if not attempt.has_next():
                    logger.debug("%s: giving up after %d attempt(s): %s", operation, attempt.count, err)
                    raise
                logger.debug("%s: retrying after attempt %d: %s", operation, attempt.count, err)

        if last_err is None:
            raise DdbjsonError(f"{operation}: retry policy allowed no attempts")
        raise last_err

    def _check_cancelled(
        self,
        operation: str,
        deadline: float | None,
        cancel: threading.Event | None,
        attempts: int,
        last_err: DdbjsonError | None,
    ) -> None:
        reason = None
        if cancel is not None and cancel.is_set():
            reason = "cancelled"
        elif deadline is not None and self._clock() >= deadline:
            reason = "deadline exceeded"
        if reason is None:
            return
        logger.debug("%s: %s after %d attempt(s)", operation, reason, attempts)
        raise RetryCancelledError(reason=reason, attempts=attempts, last_error=last_err) from last_err

    def _headers(self, operation: str) -> dict[str, str]:
        headers = {
            "Content-Type": CONTENT_TYPE,
            "X-Amz-Target": self._config.target(operation),
            "X-Amz-Date": datetime.now(UTC).strftime(AMZ_DATE_FORMAT),
        }
        if self._credentials is not None:
            token = self._credentials.get_frozen_credentials().token
            if token:
                headers["X-Amz-Security-Token"] = token
        return headers

    def _send_once[R](self, operation: str, body: bytes, result_type: WireResult[R], attempt: int) -> R:
        url = self._config.url
        signed = AWSRequest(method="POST", url=url, data=body, headers=self._headers(operation))
        self._signer.sign(signed)

        logger.debug("%s: sending attempt %d to %s", operation, attempt, url)
        try:
            resp = self._session.post(
                url,
                data=body,
                headers=dict(signed.headers.items()),
                timeout=self._config.timeout,
            )
        except requests.RequestException as err:
            raise map_transport_error(err) from err

        raw = resp.content
        if resp.status_code != 200:
            raise parse_service_error(resp.status_code, resp.reason or "", raw)

        try:
            return result_type.from_wire(json.loads(raw))
        except (ValueError, DecodeError, ValidationError) as err:
            raise UnexpectedResponseError(body=raw, cause=err) from err

    def _record(self, operation: str, start: float, *, ok: bool, attempts: int) -> None:
        if self._metrics is None:
            return
        self._metrics(
            AwsCallMetric(
                operation=operation,
                seconds=self._clock() - start,
                ok=ok,
                attempts=attempts,
            )
        )

    def list_tables(
        self,
        request: ListTablesRequest | None = None,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> ListTablesResult:
        request = request or ListTablesRequest()
        return self.do(request.operation, request, ListTablesResult, deadline=deadline, cancel=cancel)

    def create_table(
        self,
        request: CreateTableRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> CreateTableResult:
        return self.do(request.operation, request, CreateTableResult, deadline=deadline, cancel=cancel)

    def delete_table(
        self,
        request: DeleteTableRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> DeleteTableResult:
        return self.do(request.operation, request, DeleteTableResult, deadline=deadline, cancel=cancel)

    def describe_table(
        self,
        request: DescribeTableRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> DescribeTableResult:
        return self.do(request.operation, request, DescribeTableResult, deadline=deadline, cancel=cancel)

    def update_table(
        self,
        request: UpdateTableRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> UpdateTableResult:
        return self.do(request.operation, request, UpdateTableResult, deadline=deadline, cancel=cancel)

    def get_item(
        self,
        request: GetItemRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> GetItemResult:
        return self.do(request.operation, request, GetItemResult, deadline=deadline, cancel=cancel)

    def put_item(
        self,
        request: PutItemRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> PutItemResult:
        return self.do(request.operation, request, PutItemResult, deadline=deadline, cancel=cancel)

    def update_item(
        self,
        request: UpdateItemRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> UpdateItemResult:
        return self.do(request.operation, request, UpdateItemResult, deadline=deadline, cancel=cancel)

    def delete_item(
        self,
        request: DeleteItemRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> DeleteItemResult:
        return self.do(request.operation, request, DeleteItemResult, deadline=deadline, cancel=cancel)

    def query(
        self,
        request: QueryRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> QueryResult:
        return self.do(request.operation, request, QueryResult, deadline=deadline, cancel=cancel)

    def scan(
        self,
        request: ScanRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> ScanResult:
        return self.do(request.operation, request, ScanResult, deadline=deadline, cancel=cancel)

    def batch_get_item(
        self,
        request: BatchGetItemRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> BatchGetItemResult:
        return self.do(request.operation, request, BatchGetItemResult, deadline=deadline, cancel=cancel)

    def batch_write_item(
        self,
        request: BatchWriteItemRequest,
        *,
        deadline: float | None = None,
        cancel: threading.Event | None = None,
    ) -> BatchWriteItemResult:
        return self.do(request.operation, request, BatchWriteItemResult, deadline=deadline, cancel=cancel)
