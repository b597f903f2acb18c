from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, ClassVar, Literal

from .attribute import AttributeValue, encode_item
from .batch import MAX_BATCH_GET_KEYS, MAX_BATCH_WRITE_REQUESTS, KeysAndAttributes, WriteRequest
from .errors import ValidationError
from .query import Condition, ConditionalOperator, DeprecatedCondition, conditions_to_wire, expected_to_wire
from .schema import (
    AttributeDefinition,
    BillingMode,
    GlobalSecondaryIndex,
    GlobalSecondaryIndexUpdate,
    KeySchemaElement,
    LocalSecondaryIndex,
    ProvisionedThroughput,
)
from .update_builder import AttributeUpdate, AttributeUpdates, UpdateAction, updates_to_wire
from .validation import (
    MaxListTablesLimit,
    validate_index_name,
    validate_limit,
    validate_segments,
    validate_table_name,
)
from .wire import put_optional

if TYPE_CHECKING:
    from .results import QueryResult, ScanResult

type ReturnConsumedCapacity = Literal["INDEXES", "TOTAL", "NONE"]
type ReturnItemCollectionMetrics = Literal["SIZE", "NONE"]
type ReturnValues = Literal["NONE", "ALL_OLD", "UPDATED_OLD", "ALL_NEW", "UPDATED_NEW"]
type Select = Literal["ALL_ATTRIBUTES", "ALL_PROJECTED_ATTRIBUTES", "SPECIFIC_ATTRIBUTES", "COUNT"]

type Key = Mapping[str, AttributeValue]


def _put_expressions(
    out: dict[str, Any],
    names: Mapping[str, str],
    values: Mapping[str, AttributeValue],
) -> None:
    put_optional(out, "ExpressionAttributeNames", dict(names))
    if values:
        out["ExpressionAttributeValues"] = encode_item(values)


def _require_key(what: str, key: Mapping[str, AttributeValue]) -> None:
    if not key:
        raise ValidationError(f"{what} must have at least one attribute")


@dataclass(frozen=True)
class ListTablesRequest:
    operation: ClassVar[str] = "ListTables"

    exclusive_start_table_name: str | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        validate_limit(self.limit, maximum=MaxListTablesLimit)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        put_optional(out, "ExclusiveStartTableName", self.exclusive_start_table_name)
        put_optional(out, "Limit", self.limit)
        return out


@dataclass(frozen=True)
class CreateTableRequest:
    operation: ClassVar[str] = "CreateTable"

    table_name: str
    attribute_definitions: Sequence[AttributeDefinition]
    key_schema: Sequence[KeySchemaElement]
    provisioned_throughput: ProvisionedThroughput | None = None
    global_secondary_indexes: Sequence[GlobalSecondaryIndex] = ()
    local_secondary_indexes: Sequence[LocalSecondaryIndex] = ()
    billing_mode: BillingMode | None = None

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        if not self.attribute_definitions:
            raise ValidationError("attribute_definitions must be non-empty")
        if not self.key_schema or self.key_schema[0].key_type != "HASH":
            raise ValidationError("key_schema must start with a HASH key")
        if self.billing_mode not in {None, "PROVISIONED", "PAY_PER_REQUEST"}:
            raise ValidationError(f"unsupported billing_mode: {self.billing_mode}")
        if self.billing_mode != "PAY_PER_REQUEST" and self.provisioned_throughput is None:
            raise ValidationError("provisioned_throughput is required unless billing_mode=PAY_PER_REQUEST")
        for idx in (*self.global_secondary_indexes, *self.local_secondary_indexes):
            validate_index_name(idx.index_name)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "TableName": self.table_name,
            "AttributeDefinitions": [a.to_wire() for a in self.attribute_definitions],
            "KeySchema": [k.to_wire() for k in self.key_schema],
        }
        if self.provisioned_throughput is not None:
            out["ProvisionedThroughput"] = self.provisioned_throughput.to_wire()
        put_optional(out, "GlobalSecondaryIndexes", [i.to_wire() for i in self.global_secondary_indexes])
        put_optional(out, "LocalSecondaryIndexes", [i.to_wire() for i in self.local_secondary_indexes])
        put_optional(out, "BillingMode", self.billing_mode)
        return out


@dataclass(frozen=True)
class DeleteTableRequest:
    operation: ClassVar[str] = "DeleteTable"

    table_name: str

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)

    def to_wire(self) -> dict[str, Any]:
        return {"TableName": self.table_name}


@dataclass(frozen=True)
class DescribeTableRequest:
    operation: ClassVar[str] = "DescribeTable"

    table_name: str

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)

    def to_wire(self) -> dict[str, Any]:
        return {"TableName": self.table_name}


@dataclass(frozen=True)
class UpdateTableRequest:
    operation: ClassVar[str] = "UpdateTable"

    table_name: str
    provisioned_throughput: ProvisionedThroughput | None = None
    global_secondary_index_updates: Sequence[GlobalSecondaryIndexUpdate] = ()
    attribute_definitions: Sequence[AttributeDefinition] = ()
    billing_mode: BillingMode | None = None

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        for upd in self.global_secondary_index_updates:
            validate_index_name(upd.index_name)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TableName": self.table_name}
        if self.provisioned_throughput is not None:
            out["ProvisionedThroughput"] = self.provisioned_throughput.to_wire()
        put_optional(
            out,
            "GlobalSecondaryIndexUpdates",
            [u.to_wire() for u in self.global_secondary_index_updates],
        )
        put_optional(out, "AttributeDefinitions", [a.to_wire() for a in self.attribute_definitions])
        put_optional(out, "BillingMode", self.billing_mode)
        return out


@dataclass(frozen=True)
class GetItemRequest:
    operation: ClassVar[str] = "GetItem"

    table_name: str
    key: Key
    attributes_to_get: Sequence[str] = ()
    consistent_read: bool | None = None
    return_consumed_capacity: ReturnConsumedCapacity | None = None
    projection_expression: str | None = None
    expression_attribute_names: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        _require_key("key", self.key)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TableName": self.table_name, "Key": encode_item(self.key)}
        put_optional(out, "AttributesToGet", list(self.attributes_to_get))
        put_optional(out, "ConsistentRead", self.consistent_read)
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        put_optional(out, "ProjectionExpression", self.projection_expression)
        put_optional(out, "ExpressionAttributeNames", dict(self.expression_attribute_names))
        return out


@dataclass(frozen=True)
class PutItemRequest:
    operation: ClassVar[str] = "PutItem"

    table_name: str
    item: Mapping[str, AttributeValue]
    expected: Mapping[str, DeprecatedCondition] = field(default_factory=dict)
    conditional_operator: ConditionalOperator | None = None
    return_consumed_capacity: ReturnConsumedCapacity | None = None
    return_item_collection_metrics: ReturnItemCollectionMetrics | None = None
    return_values: ReturnValues | None = None
    condition_expression: str | None = None
    expression_attribute_names: Mapping[str, str] = field(default_factory=dict)
    expression_attribute_values: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        _require_key("item", self.item)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TableName": self.table_name, "Item": encode_item(self.item)}
        put_optional(out, "Expected", expected_to_wire(self.expected))
        put_optional(out, "ConditionalOperator", self.conditional_operator)
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        put_optional(out, "ReturnItemCollectionMetrics", self.return_item_collection_metrics)
        put_optional(out, "ReturnValues", self.return_values)
        put_optional(out, "ConditionExpression", self.condition_expression)
        _put_expressions(out, self.expression_attribute_names, self.expression_attribute_values)
        return out


@dataclass(frozen=True)
class UpdateItemRequest:
    operation: ClassVar[str] = "UpdateItem"

    table_name: str
    key: Key
    attribute_updates: Mapping[str, AttributeUpdate] = field(default_factory=dict)
    expected: Mapping[str, DeprecatedCondition] = field(default_factory=dict)
    conditional_operator: ConditionalOperator | None = None
    return_consumed_capacity: ReturnConsumedCapacity | None = None
    return_item_collection_metrics: ReturnItemCollectionMetrics | None = None
    return_values: ReturnValues | None = None
    update_expression: str | None = None
    condition_expression: str | None = None
    expression_attribute_names: Mapping[str, str] = field(default_factory=dict)
    expression_attribute_values: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        _require_key("key", self.key)
        if isinstance(self.attribute_updates, AttributeUpdates):
            object.__setattr__(self, "attribute_updates", self.attribute_updates.build())
        if self.attribute_updates and self.update_expression:
            raise ValidationError("attribute_updates and update_expression cannot be combined")

    @staticmethod
    def for_action(
        table_name: str,
        key: Key,
        action: UpdateAction,
        attributes: Mapping[str, AttributeValue],
        *,
        expected: Mapping[str, DeprecatedCondition] | None = None,
        return_values: ReturnValues | None = None,
    ) -> UpdateItemRequest:
        if not attributes:
            raise ValidationError("at least one attribute is required")
        return UpdateItemRequest(
            table_name=table_name,
            key=key,
            attribute_updates={name: AttributeUpdate(action, value) for name, value in attributes.items()},
            expected=dict(expected or {}),
            return_values=return_values,
        )

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TableName": self.table_name, "Key": encode_item(self.key)}
        put_optional(out, "AttributeUpdates", updates_to_wire(self.attribute_updates))
        put_optional(out, "Expected", expected_to_wire(self.expected))
        put_optional(out, "ConditionalOperator", self.conditional_operator)
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        put_optional(out, "ReturnItemCollectionMetrics", self.return_item_collection_metrics)
        put_optional(out, "ReturnValues", self.return_values)
        put_optional(out, "UpdateExpression", self.update_expression)
        put_optional(out, "ConditionExpression", self.condition_expression)
        _put_expressions(out, self.expression_attribute_names, self.expression_attribute_values)
        return out


@dataclass(frozen=True)
class DeleteItemRequest:
    operation: ClassVar[str] = "DeleteItem"

    table_name: str
    key: Key
    expected: Mapping[str, DeprecatedCondition] = field(default_factory=dict)
    conditional_operator: ConditionalOperator | None = None
    return_consumed_capacity: ReturnConsumedCapacity | None = None
    return_item_collection_metrics: ReturnItemCollectionMetrics | None = None
    return_values: ReturnValues | None = None
    condition_expression: str | None = None
    expression_attribute_names: Mapping[str, str] = field(default_factory=dict)
    expression_attribute_values: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        _require_key("key", self.key)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TableName": self.table_name, "Key": encode_item(self.key)}
        put_optional(out, "Expected", expected_to_wire(self.expected))
        put_optional(out, "ConditionalOperator", self.conditional_operator)
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        put_optional(out, "ReturnItemCollectionMetrics", self.return_item_collection_metrics)
        put_optional(out, "ReturnValues", self.return_values)
        put_optional(out, "ConditionExpression", self.condition_expression)
        _put_expressions(out, self.expression_attribute_names, self.expression_attribute_values)
        return out


@dataclass(frozen=True)
class QueryRequest:
    operation: ClassVar[str] = "Query"

    table_name: str
    key_conditions: Mapping[str, Condition] = field(default_factory=dict)
    index_name: str | None = None
    attributes_to_get: Sequence[str] = ()
    conditional_operator: ConditionalOperator | None = None
    consistent_read: bool | None = None
    exclusive_start_key: Key | None = None
    limit: int | None = None
    query_filter: Mapping[str, Condition] = field(default_factory=dict)
    return_consumed_capacity: ReturnConsumedCapacity | None = None
    scan_index_forward: bool | None = None
    select: Select | None = None
    key_condition_expression: str | None = None
    filter_expression: str | None = None
    projection_expression: str | None = None
    expression_attribute_names: Mapping[str, str] = field(default_factory=dict)
    expression_attribute_values: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        validate_index_name(self.index_name)
        validate_limit(self.limit)
        if not self.key_conditions and not self.key_condition_expression:
            raise ValidationError("query needs key_conditions or key_condition_expression")

    def next_page(self, result: QueryResult) -> QueryRequest | None:
        if not result.last_evaluated_key:
            return None
        return replace(self, exclusive_start_key=dict(result.last_evaluated_key))

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TableName": self.table_name}
        put_optional(out, "KeyConditions", conditions_to_wire(self.key_conditions))
        put_optional(out, "IndexName", self.index_name)
        put_optional(out, "AttributesToGet", list(self.attributes_to_get))
        put_optional(out, "ConditionalOperator", self.conditional_operator)
        put_optional(out, "ConsistentRead", self.consistent_read)
        if self.exclusive_start_key:
            out["ExclusiveStartKey"] = encode_item(self.exclusive_start_key)
        put_optional(out, "Limit", self.limit)
        put_optional(out, "QueryFilter", conditions_to_wire(self.query_filter))
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        put_optional(out, "ScanIndexForward", self.scan_index_forward)
        put_optional(out, "Select", self.select)
        put_optional(out, "KeyConditionExpression", self.key_condition_expression)
        put_optional(out, "FilterExpression", self.filter_expression)
        put_optional(out, "ProjectionExpression", self.projection_expression)
        _put_expressions(out, self.expression_attribute_names, self.expression_attribute_values)
        return out


@dataclass(frozen=True)
class ScanRequest:
    operation: ClassVar[str] = "Scan"

    table_name: str
    index_name: str | None = None
    attributes_to_get: Sequence[str] = ()
    conditional_operator: ConditionalOperator | None = None
    consistent_read: bool | None = None
    exclusive_start_key: Key | None = None
    limit: int | None = None
    scan_filter: Mapping[str, Condition] = field(default_factory=dict)
    return_consumed_capacity: ReturnConsumedCapacity | None = None
    segment: int | None = None
    total_segments: int | None = None
    select: Select | None = None
    filter_expression: str | None = None
    projection_expression: str | None = None
    expression_attribute_names: Mapping[str, str] = field(default_factory=dict)
    expression_attribute_values: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        validate_index_name(self.index_name)
        validate_limit(self.limit)
        validate_segments(self.segment, self.total_segments)

    def next_page(self, result: ScanResult) -> ScanRequest | None:
        if not result.last_evaluated_key:
            return None
        return replace(self, exclusive_start_key=dict(result.last_evaluated_key))

    def segments(self, total: int) -> list[ScanRequest]:
        if isinstance(total, bool) or not isinstance(total, int) or total <= 0:
            raise ValidationError("total must be > 0")
        return [replace(self, segment=i, total_segments=total) for i in range(total)]

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"TableName": self.table_name}
        put_optional(out, "IndexName", self.index_name)
        put_optional(out, "AttributesToGet", list(self.attributes_to_get))
        put_optional(out, "ConditionalOperator", self.conditional_operator)
        put_optional(out, "ConsistentRead", self.consistent_read)
        if self.exclusive_start_key:
            out["ExclusiveStartKey"] = encode_item(self.exclusive_start_key)
        put_optional(out, "Limit", self.limit)
        put_optional(out, "ScanFilter", conditions_to_wire(self.scan_filter))
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        put_optional(out, "Segment", self.segment)
        put_optional(out, "TotalSegments", self.total_segments)
        put_optional(out, "Select", self.select)
        put_optional(out, "FilterExpression", self.filter_expression)
        put_optional(out, "ProjectionExpression", self.projection_expression)
        _put_expressions(out, self.expression_attribute_names, self.expression_attribute_values)
        return out


@dataclass(frozen=True)
class BatchGetItemRequest:
    operation: ClassVar[str] = "BatchGetItem"

    request_items: Mapping[str, KeysAndAttributes]
    return_consumed_capacity: ReturnConsumedCapacity | None = None

    def __post_init__(self) -> None:
        if not self.request_items:
            raise ValidationError("request_items must name at least one table")
        total = 0
        for table_name, keys in self.request_items.items():
            validate_table_name(table_name)
            total += len(keys.keys)
        if total > MAX_BATCH_GET_KEYS:
            raise ValidationError(f"batch get accepts at most {MAX_BATCH_GET_KEYS} keys, got {total}")

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "RequestItems": {name: keys.to_wire() for name, keys in self.request_items.items()},
        }
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        return out


@dataclass(frozen=True)
class BatchWriteItemRequest:
    operation: ClassVar[str] = "BatchWriteItem"

    request_items: Mapping[str, Sequence[WriteRequest]]
    return_consumed_capacity: ReturnConsumedCapacity | None = None
    return_item_collection_metrics: ReturnItemCollectionMetrics | None = None

    def __post_init__(self) -> None:
        if not self.request_items:
            raise ValidationError("request_items must name at least one table")
        total = 0
        for table_name, writes in self.request_items.items():
            validate_table_name(table_name)
            if not writes:
                raise ValidationError(f"no write requests for table {table_name}")
            total += len(writes)
        if total > MAX_BATCH_WRITE_REQUESTS:
            raise ValidationError(
                f"batch write accepts at most {MAX_BATCH_WRITE_REQUESTS} requests, got {total}"
            )

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "RequestItems": {
                name: [w.to_wire() for w in writes] for name, writes in self.request_items.items()
            },
        }
        put_optional(out, "ReturnConsumedCapacity", self.return_consumed_capacity)
        put_optional(out, "ReturnItemCollectionMetrics", self.return_item_collection_metrics)
        return out


type OperationRequest = (
    ListTablesRequest
    | CreateTableRequest
    | DeleteTableRequest
    | DescribeTableRequest
    | UpdateTableRequest
    | GetItemRequest
    | PutItemRequest
    | UpdateItemRequest
    | DeleteItemRequest
    | QueryRequest
    | ScanRequest
    | BatchGetItemRequest
    | BatchWriteItemRequest
)
