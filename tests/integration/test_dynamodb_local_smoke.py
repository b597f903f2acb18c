from __future__ import annotations

import os
import uuid

import pytest

from ddbjson import (
    AttributeDefinition,
    AttributeUpdates,
    Client,
    ClientConfig,
    Condition,
    ConditionFailedError,
    CreateTableRequest,
    DeleteItemRequest,
    DeleteTableRequest,
    DeprecatedCondition,
    GetItemRequest,
    KeySchemaElement,
    Number,
    PutItemRequest,
    QueryRequest,
    String,
    UpdateItemRequest,
    wait_for_table_active,
    wait_for_table_deleted,
)
from ddbjson.testkit import static_credentials

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not os.environ.get("DYNAMODB_ENDPOINT"), reason="DYNAMODB_ENDPOINT not set"),
]


def _client() -> Client:
    config = ClientConfig(
        region=os.environ.get("AWS_REGION", "us-east-1"),
        endpoint=os.environ["DYNAMODB_ENDPOINT"],
    )
    creds = static_credentials(
        os.environ.get("AWS_ACCESS_KEY_ID", "dummy"),
        os.environ.get("AWS_SECRET_ACCESS_KEY", "dummy"),
    )
    return Client(config, credentials=creds)


def test_dynamodb_local_smoke_put_get_update_delete() -> None:
    table_name = f"ddbjson_smoke_{uuid.uuid4().hex[:12]}"
    client = _client()
    client.create_table(
        CreateTableRequest(
            table_name=table_name,
            attribute_definitions=[AttributeDefinition("pk", "S"), AttributeDefinition("sk", "S")],
            key_schema=[KeySchemaElement.hash("pk"), KeySchemaElement.range("sk")],
            billing_mode="PAY_PER_REQUEST",
        )
    )
    wait_for_table_active(client, table_name, timeout_seconds=60)
    key = {"pk": String("A"), "sk": String("B")}
    try:
        client.put_item(PutItemRequest(table_name, {**key, "value": Number("1")}))
        assert client.get_item(GetItemRequest(table_name, key, consistent_read=True)).item == {
            **key,
            "value": Number("1"),
        }

        with pytest.raises(ConditionFailedError):
            client.put_item(
                PutItemRequest(table_name, key, expected={"pk": DeprecatedCondition(exists=False)})
            )

        updated = client.update_item(
            UpdateItemRequest(
                table_name,
                key,
                attribute_updates=AttributeUpdates().add("value", Number("2")),  # type: ignore[arg-type]
                return_values="ALL_NEW",
            )
        )
        assert updated.attributes is not None
        assert updated.attributes["value"] == Number("3")

        page = client.query(QueryRequest(table_name, key_conditions={"pk": Condition.eq(String("A"))}))
        assert page.count == 1

        client.delete_item(DeleteItemRequest(table_name, key))
        assert client.get_item(GetItemRequest(table_name, key, consistent_read=True)).found is False
    finally:
        client.delete_table(DeleteTableRequest(table_name))
        wait_for_table_deleted(client, table_name, timeout_seconds=60)
        client.close()
