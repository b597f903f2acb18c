from __future__ import annotations

from botocore.credentials import Credentials

from .mocks import ANY, FakeHTTPSession, FakeResponse, FakeSigner


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


def no_sleep(_: float) -> None:
    return None


def static_credentials(
    access_key: str = "AKIDEXAMPLE",
    secret_key: str = "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
    token: str | None = None,
) -> Credentials:
    return Credentials(access_key, secret_key, token)


__all__ = [
    "ANY",
    "FakeClock",
    "FakeHTTPSession",
    "FakeResponse",
    "FakeSigner",
    "no_sleep",
    "static_credentials",
]
