from __future__ import annotations

import pytest

from ddbjson.client import Client
from ddbjson.errors import ServiceValidationError, ValidationError, WaitTimeoutError
from ddbjson.mocks import FakeHTTPSession, FakeSigner
from ddbjson.retry import RetryPolicy
from ddbjson.runtime import ClientConfig
from ddbjson.schema import (
    GlobalSecondaryIndex,
    KeySchemaElement,
    Projection,
    ProvisionedThroughput,
    TableDescription,
    wait_for_table_active,
    wait_for_table_deleted,
)
from ddbjson.testkit import FakeClock


def _client(session: FakeHTTPSession, clock: FakeClock) -> Client:
    config = ClientConfig(region="us-east-1", endpoint="http://localhost:8000", retry=RetryPolicy.no_retry())
    return Client(config, signer=FakeSigner(), session=session, sleep=clock.sleep, clock=clock)


def _table(status: str) -> dict[str, object]:
    return {"Table": {"TableName": "tbl", "TableStatus": status}}


def test_wait_for_table_active_polls_until_active() -> None:
    clock = FakeClock()
    session = FakeHTTPSession()
    session.expect_service_error("DescribeTable", "ResourceNotFoundException", "Requested resource not found")
    session.expect("DescribeTable", {"TableName": "tbl"}, body=_table("CREATING"))
    session.expect("DescribeTable", {"TableName": "tbl"}, body=_table("ACTIVE"))

    table = wait_for_table_active(_client(session, clock), "tbl", sleep=clock.sleep, clock=clock)

    assert table.table_name == "tbl"
    assert table.is_active
    assert clock.sleeps == [0.25, 0.25]
    session.assert_no_pending()


def test_wait_for_table_active_times_out() -> None:
    clock = FakeClock()
    session = FakeHTTPSession()
    for _ in range(4):
        session.expect("DescribeTable", body=_table("CREATING"))

    with pytest.raises(WaitTimeoutError, match="tbl"):
        wait_for_table_active(
            _client(session, clock),
            "tbl",
            timeout_seconds=1.0,
            sleep=clock.sleep,
            clock=clock,
        )
    assert len(session.calls) == 4


def test_wait_for_table_active_propagates_other_errors() -> None:
    clock = FakeClock()
    session = FakeHTTPSession()
    session.expect_service_error("DescribeTable", "ValidationException", "bad")

    with pytest.raises(ServiceValidationError):
        wait_for_table_active(_client(session, clock), "tbl", sleep=clock.sleep, clock=clock)


def test_wait_for_table_deleted() -> None:
    clock = FakeClock()
    session = FakeHTTPSession()
    session.expect("DescribeTable", body=_table("DELETING"))
    session.expect_service_error("DescribeTable", "ResourceNotFoundException")

    wait_for_table_deleted(_client(session, clock), "tbl", sleep=clock.sleep, clock=clock)

    assert len(session.calls) == 2


def test_wait_for_table_deleted_times_out() -> None:
    clock = FakeClock()
    session = FakeHTTPSession()
    session.expect("DescribeTable", body=_table("DELETING"))
    session.expect("DescribeTable", body=_table("DELETING"))

    with pytest.raises(WaitTimeoutError):
        wait_for_table_deleted(
            _client(session, clock),
            "tbl",
            timeout_seconds=0.5,
            sleep=clock.sleep,
            clock=clock,
        )


def test_schema_value_validation() -> None:
    with pytest.raises(ValidationError):
        ProvisionedThroughput(0, 5)
    assert Projection().to_wire() == {"ProjectionType": "ALL"}
    assert Projection.include("a", "b").non_key_attributes == ("a", "b")


def test_global_secondary_index_without_throughput() -> None:
    gsi = GlobalSecondaryIndex("by-email", [KeySchemaElement.hash("email")])
    assert gsi.to_wire() == {
        "IndexName": "by-email",
        "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
        "Projection": {"ProjectionType": "ALL"},
    }


def test_table_description_defaults() -> None:
    table = TableDescription.from_wire({"TableName": "t1"})
    assert table.table_status is None
    assert table.key_schema == ()
    assert table.billing_mode is None
    assert not table.is_active
