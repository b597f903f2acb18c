from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import boto3
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from .errors import ValidationError
from .retry import RetryPolicy

DEFAULT_API_VERSION = "20120810"
DEFAULT_TIMEOUT_SECONDS = 30.0
SIGNING_SERVICE = "dynamodb"


@dataclass(frozen=True)
class AwsCallMetric:
    operation: str
    seconds: float
    ok: bool
    attempts: int


@dataclass(frozen=True)
class ClientConfig:
    region: str
    endpoint: str | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    api_version: str = DEFAULT_API_VERSION

    def __post_init__(self) -> None:
        if not self.region:
            raise ValidationError("region is required")
        if self.timeout <= 0:
            raise ValidationError("timeout must be > 0")
        if self.endpoint is None:
            object.__setattr__(self, "endpoint", f"https://dynamodb.{self.region}.amazonaws.com")
        else:
            object.__setattr__(self, "endpoint", self.endpoint.rstrip("/"))

    @property
    def url(self) -> str:
        return f"{self.endpoint}/"

    def target(self, operation: str) -> str:
        return f"DynamoDB_{self.api_version}.{operation}"

    @staticmethod
    def from_env(environ: Mapping[str, str] = os.environ, **overrides: Any) -> ClientConfig:
        region = environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION") or ""
        endpoint = environ.get("DYNAMODB_ENDPOINT") or None
        values: dict[str, Any] = {"region": region, "endpoint": endpoint}
        values.update(overrides)
        return ClientConfig(**values)


def default_credentials(session: Any | None = None) -> Credentials:
    sess = session or boto3.session.Session()
    creds = sess.get_credentials()
    if creds is None:
        raise ValidationError("no AWS credentials found")
    return creds


class Signer(Protocol):
    def sign(self, request: AWSRequest) -> None: ...


class SigV4Signer:
    def __init__(self, credentials: Credentials, region: str, *, service: str = SIGNING_SERVICE) -> None:
        self._credentials = credentials
        self._region = region
        self._service = service

    @property
    def session_token(self) -> str | None:
        return self._credentials.get_frozen_credentials().token

    def sign(self, request: AWSRequest) -> None:
        # Refreshable credentials may rotate between calls.
        frozen = self._credentials.get_frozen_credentials()
        SigV4Auth(frozen, self._service, self._region).add_auth(request)
