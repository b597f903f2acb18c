from __future__ import annotations

import json
import re
from importlib.resources import files
from typing import TYPE_CHECKING, Any

from .attribute import (
    AttributeValue,
    Binary,
    BinarySet,
    Number,
    NumberSet,
    String,
    StringSet,
    decode_attribute_value,
    decode_item,
    encode_attribute_value,
    encode_item,
    from_attribute_value,
    from_item,
    to_attribute_value,
    to_item,
)
from .batch import DeleteRequest, KeysAndAttributes, PutRequest, WriteRequest
from .errors import (
    ConditionFailedError,
    DdbjsonError,
    DecodeError,
    MarshalError,
    NotFoundError,
    ResourceInUseError,
    ResourceNotFoundError,
    RetryCancelledError,
    ServiceError,
    ServiceValidationError,
    TransportError,
    UnexpectedResponseError,
    ValidationError,
    WaitTimeoutError,
)
from .query import Condition, DeprecatedCondition
from .retry import RetryPolicy
from .update_builder import AttributeUpdate, AttributeUpdates

if TYPE_CHECKING:
    from .client import Client
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
        Capacity,
        ConsumedCapacity,
        CreateTableResult,
        DeleteItemResult,
        DeleteTableResult,
        DescribeTableResult,
        GetItemResult,
        ItemCollectionMetrics,
        ListTablesResult,
        PutItemResult,
        QueryResult,
        ScanResult,
        UpdateItemResult,
        UpdateTableResult,
    )
    from .runtime import AwsCallMetric, ClientConfig, SigV4Signer, default_credentials
    from .schema import (
        AttributeDefinition,
        GlobalSecondaryIndex,
        GlobalSecondaryIndexUpdate,
        KeySchemaElement,
        LocalSecondaryIndex,
        Projection,
        ProvisionedThroughput,
        TableDescription,
        wait_for_table_active,
        wait_for_table_deleted,
    )


def _read_repo_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


def _normalize_repo_version(repo_version: str) -> str:
    match = re.match(r"^(\d+\.\d+\.\d+)-rc\.?([0-9]+)$", repo_version)
    if match:
        return f"{match.group(1)}rc{match.group(2)}"
    return repo_version


__repo_version__ = _read_repo_version()
__version__ = _normalize_repo_version(__repo_version__)

_OPERATION_NAMES = {
    "BatchGetItemRequest",
    "BatchWriteItemRequest",
    "CreateTableRequest",
    "DeleteItemRequest",
    "DeleteTableRequest",
    "DescribeTableRequest",
    "GetItemRequest",
    "ListTablesRequest",
    "PutItemRequest",
    "QueryRequest",
    "ScanRequest",
    "UpdateItemRequest",
    "UpdateTableRequest",
}

_RESULT_NAMES = {
    "BatchGetItemResult",
    "BatchWriteItemResult",
    "Capacity",
    "ConsumedCapacity",
    "CreateTableResult",
    "DeleteItemResult",
    "DeleteTableResult",
    "DescribeTableResult",
    "GetItemResult",
    "ItemCollectionMetrics",
    "ListTablesResult",
    "PutItemResult",
    "QueryResult",
    "ScanResult",
    "UpdateItemResult",
    "UpdateTableResult",
}

_SCHEMA_NAMES = {
    "AttributeDefinition",
    "GlobalSecondaryIndex",
    "GlobalSecondaryIndexUpdate",
    "KeySchemaElement",
    "LocalSecondaryIndex",
    "Projection",
    "ProvisionedThroughput",
    "TableDescription",
    "wait_for_table_active",
    "wait_for_table_deleted",
}


def __getattr__(name: str) -> Any:
    if name == "Client":
        from .client import Client

        return Client
    if name in _OPERATION_NAMES:
        from . import operations

        return getattr(operations, name)
    if name in _RESULT_NAMES:
        from . import results

        return getattr(results, name)
    if name in _SCHEMA_NAMES:
        from . import schema

        return getattr(schema, name)
    if name in {"AwsCallMetric", "ClientConfig", "SigV4Signer", "default_credentials"}:
        from . import runtime

        return getattr(runtime, name)
    raise AttributeError(name)


__all__ = [
    "AttributeDefinition",
    "AttributeUpdate",
    "AttributeUpdates",
    "AttributeValue",
    "AwsCallMetric",
    "BatchGetItemRequest",
    "BatchGetItemResult",
    "BatchWriteItemRequest",
    "BatchWriteItemResult",
    "Binary",
    "BinarySet",
    "Capacity",
    "Client",
    "ClientConfig",
    "Condition",
    "ConditionFailedError",
    "ConsumedCapacity",
    "CreateTableRequest",
    "CreateTableResult",
    "DdbjsonError",
    "DecodeError",
    "DeleteItemRequest",
    "DeleteItemResult",
    "DeleteRequest",
    "DeleteTableRequest",
    "DeleteTableResult",
    "DeprecatedCondition",
    "DescribeTableRequest",
    "DescribeTableResult",
    "GetItemRequest",
    "GetItemResult",
    "GlobalSecondaryIndex",
    "GlobalSecondaryIndexUpdate",
    "ItemCollectionMetrics",
    "KeySchemaElement",
    "KeysAndAttributes",
    "ListTablesRequest",
    "ListTablesResult",
    "LocalSecondaryIndex",
    "MarshalError",
    "NotFoundError",
    "Number",
    "NumberSet",
    "Projection",
    "ProvisionedThroughput",
    "PutItemRequest",
    "PutItemResult",
    "PutRequest",
    "QueryRequest",
    "QueryResult",
    "ResourceInUseError",
    "ResourceNotFoundError",
    "RetryCancelledError",
    "RetryPolicy",
    "ScanRequest",
    "ScanResult",
    "ServiceError",
    "ServiceValidationError",
    "SigV4Signer",
    "String",
    "StringSet",
    "TableDescription",
    "TransportError",
    "UnexpectedResponseError",
    "UpdateItemRequest",
    "UpdateItemResult",
    "UpdateTableRequest",
    "UpdateTableResult",
    "ValidationError",
    "WaitTimeoutError",
    "WriteRequest",
    "__repo_version__",
    "__version__",
    "decode_attribute_value",
    "decode_item",
    "default_credentials",
    "encode_attribute_value",
    "encode_item",
    "from_attribute_value",
    "from_item",
    "to_attribute_value",
    "to_item",
    "wait_for_table_active",
    "wait_for_table_deleted",
]
