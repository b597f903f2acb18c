from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .attribute import AttributeValue, decode_item
from .batch import KeysAndAttributes, WriteRequest
from .errors import DecodeError, NotFoundError
from .schema import TableDescription
from .wire import expect_object, opt_float, opt_int, opt_list, opt_object, opt_str, str_list

type Item = dict[str, AttributeValue]


@dataclass(frozen=True)
class Capacity:
    capacity_units: float = 0.0
    read_capacity_units: float | None = None
    write_capacity_units: float | None = None

    @staticmethod
    def from_wire(data: Any) -> Capacity:
        obj = expect_object(data, "Capacity")
        return Capacity(
            capacity_units=opt_float(obj, "CapacityUnits") or 0.0,
            read_capacity_units=opt_float(obj, "ReadCapacityUnits"),
            write_capacity_units=opt_float(obj, "WriteCapacityUnits"),
        )


def _capacity_map(obj: dict[str, Any], key: str) -> dict[str, Capacity]:
    raw = opt_object(obj, key) or {}
    return {name: Capacity.from_wire(c) for name, c in raw.items()}


@dataclass(frozen=True)
class ConsumedCapacity:
    table_name: str | None = None
    capacity_units: float = 0.0
    read_capacity_units: float | None = None
    write_capacity_units: float | None = None
    table: Capacity | None = None
    global_secondary_indexes: dict[str, Capacity] = field(default_factory=dict)
    local_secondary_indexes: dict[str, Capacity] = field(default_factory=dict)

    @staticmethod
    def from_wire(data: Any) -> ConsumedCapacity:
        obj = expect_object(data, "ConsumedCapacity")
        table = opt_object(obj, "Table")
        return ConsumedCapacity(
            table_name=opt_str(obj, "TableName"),
            capacity_units=opt_float(obj, "CapacityUnits") or 0.0,
            read_capacity_units=opt_float(obj, "ReadCapacityUnits"),
            write_capacity_units=opt_float(obj, "WriteCapacityUnits"),
            table=Capacity.from_wire(table) if table is not None else None,
            global_secondary_indexes=_capacity_map(obj, "GlobalSecondaryIndexes"),
            local_secondary_indexes=_capacity_map(obj, "LocalSecondaryIndexes"),
        )


@dataclass(frozen=True)
class ItemCollectionMetrics:
    item_collection_key: Item = field(default_factory=dict)
    size_estimate_range_gb: tuple[float, ...] = ()

    @staticmethod
    def from_wire(data: Any) -> ItemCollectionMetrics:
        obj = expect_object(data, "ItemCollectionMetrics")
        raw_range = obj.get("SizeEstimateRangeGB")
        if raw_range is None:
            size_range: tuple[float, ...] = ()
        elif isinstance(raw_range, list):
            if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in raw_range):
                raise DecodeError("SizeEstimateRangeGB must be a list of numbers")
            size_range = tuple(float(v) for v in raw_range)
        else:
            size_range = (opt_float(obj, "SizeEstimateRangeGB") or 0.0,)
        return ItemCollectionMetrics(
            item_collection_key=decode_item(obj.get("ItemCollectionKey") or {}),
            size_estimate_range_gb=size_range,
        )


def _consumed(obj: dict[str, Any]) -> ConsumedCapacity | None:
    raw = opt_object(obj, "ConsumedCapacity")
    return ConsumedCapacity.from_wire(raw) if raw is not None else None


def _consumed_list(obj: dict[str, Any]) -> tuple[ConsumedCapacity, ...]:
    return tuple(ConsumedCapacity.from_wire(c) for c in opt_list(obj, "ConsumedCapacity") or [])


def _opt_item(obj: dict[str, Any], key: str) -> Item | None:
    raw = opt_object(obj, key)
    return decode_item(raw) if raw is not None else None


def _items(obj: dict[str, Any], key: str) -> tuple[Item, ...]:
    return tuple(decode_item(i) for i in opt_list(obj, key) or [])


def _metrics(obj: dict[str, Any]) -> ItemCollectionMetrics | None:
    raw = opt_object(obj, "ItemCollectionMetrics")
    return ItemCollectionMetrics.from_wire(raw) if raw is not None else None


def _table(obj: dict[str, Any], key: str) -> TableDescription | None:
    raw = opt_object(obj, key)
    return TableDescription.from_wire(raw) if raw is not None else None


@dataclass(frozen=True)
class ListTablesResult:
    table_names: tuple[str, ...] = ()
    last_evaluated_table_name: str | None = None

    @staticmethod
    def from_wire(data: Any) -> ListTablesResult:
        obj = expect_object(data, "ListTables response", {"TableNames", "LastEvaluatedTableName"})
        return ListTablesResult(
            table_names=str_list(obj, "TableNames"),
            last_evaluated_table_name=opt_str(obj, "LastEvaluatedTableName"),
        )


@dataclass(frozen=True)
class CreateTableResult:
    table_description: TableDescription | None = None

    @staticmethod
    def from_wire(data: Any) -> CreateTableResult:
        obj = expect_object(data, "CreateTable response", {"TableDescription"})
        return CreateTableResult(_table(obj, "TableDescription"))


@dataclass(frozen=True)
class DeleteTableResult:
    table_description: TableDescription | None = None

    @staticmethod
    def from_wire(data: Any) -> DeleteTableResult:
        obj = expect_object(data, "DeleteTable response", {"TableDescription"})
        return DeleteTableResult(_table(obj, "TableDescription"))


@dataclass(frozen=True)
class UpdateTableResult:
    table_description: TableDescription | None = None

    @staticmethod
    def from_wire(data: Any) -> UpdateTableResult:
        obj = expect_object(data, "UpdateTable response", {"TableDescription"})
        return UpdateTableResult(_table(obj, "TableDescription"))


@dataclass(frozen=True)
class DescribeTableResult:
    table: TableDescription | None = None

    @staticmethod
    def from_wire(data: Any) -> DescribeTableResult:
        obj = expect_object(data, "DescribeTable response", {"Table"})
        return DescribeTableResult(_table(obj, "Table"))


@dataclass(frozen=True)
class GetItemResult:
    item: Item | None = None
    consumed_capacity: ConsumedCapacity | None = None

    @property
    def found(self) -> bool:
        return self.item is not None

    def require_item(self) -> Item:
        if self.item is None:
            raise NotFoundError("item not found")
        return self.item

    @staticmethod
    def from_wire(data: Any) -> GetItemResult:
        obj = expect_object(data, "GetItem response", {"Item", "ConsumedCapacity"})
        return GetItemResult(item=_opt_item(obj, "Item"), consumed_capacity=_consumed(obj))


_WRITE_RESULT_FIELDS = {"Attributes", "ConsumedCapacity", "ItemCollectionMetrics"}


@dataclass(frozen=True)
class PutItemResult:
    attributes: Item | None = None
    consumed_capacity: ConsumedCapacity | None = None
    item_collection_metrics: ItemCollectionMetrics | None = None

    @staticmethod
    def from_wire(data: Any) -> PutItemResult:
        obj = expect_object(data, "PutItem response", _WRITE_RESULT_FIELDS)
        return PutItemResult(_opt_item(obj, "Attributes"), _consumed(obj), _metrics(obj))


@dataclass(frozen=True)
class UpdateItemResult:
    attributes: Item | None = None
    consumed_capacity: ConsumedCapacity | None = None
    item_collection_metrics: ItemCollectionMetrics | None = None

    @staticmethod
    def from_wire(data: Any) -> UpdateItemResult:
        obj = expect_object(data, "UpdateItem response", _WRITE_RESULT_FIELDS)
        return UpdateItemResult(_opt_item(obj, "Attributes"), _consumed(obj), _metrics(obj))


@dataclass(frozen=True)
class DeleteItemResult:
    attributes: Item | None = None
    consumed_capacity: ConsumedCapacity | None = None
    item_collection_metrics: ItemCollectionMetrics | None = None

    @staticmethod
    def from_wire(data: Any) -> DeleteItemResult:
        obj = expect_object(data, "DeleteItem response", _WRITE_RESULT_FIELDS)
        return DeleteItemResult(_opt_item(obj, "Attributes"), _consumed(obj), _metrics(obj))


_PAGE_FIELDS = {"Items", "Count", "ScannedCount", "LastEvaluatedKey", "ConsumedCapacity"}


@dataclass(frozen=True)
class QueryResult:
    items: tuple[Item, ...] = ()
    count: int = 0
    scanned_count: int = 0
    last_evaluated_key: Item | None = None
    consumed_capacity: ConsumedCapacity | None = None

    @staticmethod
    def from_wire(data: Any) -> QueryResult:
        obj = expect_object(data, "Query response", _PAGE_FIELDS)
        return QueryResult(
            items=_items(obj, "Items"),
            count=opt_int(obj, "Count") or 0,
            scanned_count=opt_int(obj, "ScannedCount") or 0,
            last_evaluated_key=_opt_item(obj, "LastEvaluatedKey"),
            consumed_capacity=_consumed(obj),
        )


@dataclass(frozen=True)
class ScanResult:
    items: tuple[Item, ...] = ()
    count: int = 0
    scanned_count: int = 0
    last_evaluated_key: Item | None = None
    consumed_capacity: ConsumedCapacity | None = None

    @staticmethod
    def from_wire(data: Any) -> ScanResult:
        obj = expect_object(data, "Scan response", _PAGE_FIELDS)
        return ScanResult(
            items=_items(obj, "Items"),
            count=opt_int(obj, "Count") or 0,
            scanned_count=opt_int(obj, "ScannedCount") or 0,
            last_evaluated_key=_opt_item(obj, "LastEvaluatedKey"),
            consumed_capacity=_consumed(obj),
        )


@dataclass(frozen=True)
class BatchGetItemResult:
    responses: dict[str, tuple[Item, ...]] = field(default_factory=dict)
    unprocessed_keys: dict[str, KeysAndAttributes] = field(default_factory=dict)
    consumed_capacity: tuple[ConsumedCapacity, ...] = ()

    @staticmethod
    def from_wire(data: Any) -> BatchGetItemResult:
        obj = expect_object(
            data, "BatchGetItem response", {"Responses", "UnprocessedKeys", "ConsumedCapacity"}
        )
        responses = opt_object(obj, "Responses") or {}
        unprocessed = opt_object(obj, "UnprocessedKeys") or {}
        return BatchGetItemResult(
            responses={name: _items(responses, name) for name in responses},
            unprocessed_keys={name: KeysAndAttributes.from_wire(v) for name, v in unprocessed.items()},
            consumed_capacity=_consumed_list(obj),
        )


@dataclass(frozen=True)
class BatchWriteItemResult:
    unprocessed_items: dict[str, tuple[WriteRequest, ...]] = field(default_factory=dict)
    item_collection_metrics: dict[str, tuple[ItemCollectionMetrics, ...]] = field(default_factory=dict)
    consumed_capacity: tuple[ConsumedCapacity, ...] = ()

    @staticmethod
    def from_wire(data: Any) -> BatchWriteItemResult:
        obj = expect_object(
            data,
            "BatchWriteItem response",
            {"UnprocessedItems", "ItemCollectionMetrics", "ConsumedCapacity"},
        )
        unprocessed = opt_object(obj, "UnprocessedItems") or {}
        metrics = opt_object(obj, "ItemCollectionMetrics") or {}
        for name, value in (*unprocessed.items(), *metrics.items()):
            if not isinstance(value, list):
                raise DecodeError(f"{name} must be a list")
        return BatchWriteItemResult(
            unprocessed_items={
                name: tuple(WriteRequest.from_wire(w) for w in writes) for name, writes in unprocessed.items()
            },
            item_collection_metrics={
                name: tuple(ItemCollectionMetrics.from_wire(m) for m in values) for name, values in metrics.items()
            },
            consumed_capacity=_consumed_list(obj),
        )

    @property
    def has_unprocessed(self) -> bool:
        return any(self.unprocessed_items.values())


type OperationResult = (
    ListTablesResult
    | CreateTableResult
    | DeleteTableResult
    | DescribeTableResult
    | UpdateTableResult
    | GetItemResult
    | PutItemResult
    | UpdateItemResult
    | DeleteItemResult
    | QueryResult
    | ScanResult
    | BatchGetItemResult
    | BatchWriteItemResult
)
