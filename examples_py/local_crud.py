from __future__ import annotations

import logging
import os
import uuid

import boto3

from ddbjson import (
    AttributeDefinition,
    BatchWriteItemRequest,
    Client,
    ClientConfig,
    Condition,
    CreateTableRequest,
    DeleteTableRequest,
    GetItemRequest,
    KeySchemaElement,
    QueryRequest,
    String,
    WriteRequest,
    default_credentials,
    from_item,
    to_item,
    wait_for_table_active,
)


def _client() -> Client:
    session = boto3.session.Session(
        aws_access_key_id=os.environ.get("AWS_ACCESS_KEY_ID", "dummy"),
        aws_secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY", "dummy"),
        region_name=os.environ.get("AWS_REGION", "us-east-1"),
    )
    config = ClientConfig(
        region=session.region_name,
        endpoint=os.environ.get("DYNAMODB_ENDPOINT", "http://localhost:8000"),
    )
    return Client(config, credentials=default_credentials(session))


def main() -> None:
    logging.basicConfig(level=logging.DEBUG if os.environ.get("DEBUG") else logging.INFO)
    client = _client()
    table_name = f"ddbjson_example_{uuid.uuid4().hex[:12]}"

    client.create_table(
        CreateTableRequest(
            table_name=table_name,
            attribute_definitions=[AttributeDefinition("pk", "S"), AttributeDefinition("sk", "S")],
            key_schema=[KeySchemaElement.hash("pk"), KeySchemaElement.range("sk")],
            billing_mode="PAY_PER_REQUEST",
        )
    )
    wait_for_table_active(client, table_name)

    try:
        client.batch_write_item(
            BatchWriteItemRequest(
                {
                    table_name: [
                        WriteRequest.put_item(to_item({"pk": "A", "sk": sk, "value": value}))
                        for sk, value in (("001", 1), ("010", 10), ("100", 100))
                    ]
                }
            )
        )

        got = client.get_item(GetItemRequest(table_name, {"pk": String("A"), "sk": String("010")}))
        print("get:", from_item(got.require_item()))

        request: QueryRequest | None = QueryRequest(
            table_name,
            key_conditions={"pk": Condition.eq(String("A")), "sk": Condition.begins_with(String("0"))},
            limit=1,
        )
        while request is not None:
            page = client.query(request)
            print("query begins_with('0'):", [from_item(i) for i in page.items])
            request = request.next_page(page)
    finally:
        client.delete_table(DeleteTableRequest(table_name))
        client.close()


if __name__ == "__main__":
    main()
