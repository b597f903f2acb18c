from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from .attribute import AttributeType
from .errors import DecodeError, ResourceNotFoundError, ValidationError, WaitTimeoutError
from .wire import expect_object, opt_float, opt_int, opt_list, opt_object, opt_str, put_optional, str_list

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

type KeyType = Literal["HASH", "RANGE"]
type ProjectionType = Literal["KEYS_ONLY", "INCLUDE", "ALL"]
type BillingMode = Literal["PROVISIONED", "PAY_PER_REQUEST"]
type TableStatus = Literal["CREATING", "UPDATING", "DELETING", "ACTIVE"]
type IndexStatus = Literal["CREATING", "UPDATING", "DELETING", "ACTIVE"]


@dataclass(frozen=True)
class AttributeDefinition:
    name: str
    type: AttributeType

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or self.type not in {"S", "N", "B"}:
            raise ValidationError(f"key attribute must be S/N/B: {self.name} (got {self.type})")

    def to_wire(self) -> dict[str, Any]:
        return {"AttributeName": self.name, "AttributeType": self.type}

    @staticmethod
    def from_wire(data: Any) -> AttributeDefinition:
        obj = expect_object(data, "AttributeDefinition")
        name = opt_str(obj, "AttributeName")
        attr_type = opt_str(obj, "AttributeType")
        if name is None or attr_type is None:
            raise DecodeError(f"invalid AttributeDefinition: {obj!r}")
        try:
            return AttributeDefinition(name, attr_type)  # type: ignore[arg-type]
        except ValidationError as err:
            raise DecodeError(f"invalid AttributeDefinition: {obj!r}") from err


@dataclass(frozen=True)
class KeySchemaElement:
    attribute_name: str
    key_type: KeyType

    @staticmethod
    def hash(attribute_name: str) -> KeySchemaElement:
        return KeySchemaElement(attribute_name, "HASH")

    @staticmethod
    def range(attribute_name: str) -> KeySchemaElement:
        return KeySchemaElement(attribute_name, "RANGE")

    def to_wire(self) -> dict[str, Any]:
        return {"AttributeName": self.attribute_name, "KeyType": self.key_type}

    @staticmethod
    def from_wire(data: Any) -> KeySchemaElement:
        obj = expect_object(data, "KeySchemaElement")
        name = opt_str(obj, "AttributeName")
        key_type = opt_str(obj, "KeyType")
        if name is None or key_type not in {"HASH", "RANGE"}:
            raise DecodeError(f"invalid KeySchemaElement: {obj!r}")
        return KeySchemaElement(name, key_type)  # type: ignore[arg-type]


def _key_schema_to_wire(key_schema: Sequence[KeySchemaElement]) -> list[dict[str, Any]]:
    return [k.to_wire() for k in key_schema]


def _key_schema_from_wire(data: dict[str, Any]) -> tuple[KeySchemaElement, ...]:
    return tuple(KeySchemaElement.from_wire(k) for k in opt_list(data, "KeySchema") or [])


@dataclass(frozen=True)
class Projection:
    projection_type: ProjectionType = "ALL"
    non_key_attributes: Sequence[str] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "non_key_attributes", tuple(self.non_key_attributes))

    @staticmethod
    def keys_only() -> Projection:
        return Projection("KEYS_ONLY")

    @staticmethod
    def include(*attributes: str) -> Projection:
        return Projection("INCLUDE", attributes)

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {"ProjectionType": self.projection_type}
        put_optional(out, "NonKeyAttributes", list(self.non_key_attributes))
        return out

    @staticmethod
    def from_wire(data: Any) -> Projection:
        obj = expect_object(data, "Projection")
        return Projection(
            opt_str(obj, "ProjectionType") or "ALL",  # type: ignore[arg-type]
            str_list(obj, "NonKeyAttributes"),
        )


@dataclass(frozen=True)
class ProvisionedThroughput:
    read_capacity_units: int
    write_capacity_units: int

    def __post_init__(self) -> None:
        if self.read_capacity_units <= 0 or self.write_capacity_units <= 0:
            raise ValidationError("provisioned throughput units must be > 0")

    def to_wire(self) -> dict[str, Any]:
        return {
            "ReadCapacityUnits": self.read_capacity_units,
            "WriteCapacityUnits": self.write_capacity_units,
        }


@dataclass(frozen=True)
class ProvisionedThroughputDescription:
    read_capacity_units: int = 0
    write_capacity_units: int = 0
    number_of_decreases_today: int = 0
    last_increase_date_time: float | None = None
    last_decrease_date_time: float | None = None

    @staticmethod
    def from_wire(data: Any) -> ProvisionedThroughputDescription:
        obj = expect_object(data, "ProvisionedThroughput")
        return ProvisionedThroughputDescription(
            read_capacity_units=opt_int(obj, "ReadCapacityUnits") or 0,
            write_capacity_units=opt_int(obj, "WriteCapacityUnits") or 0,
            number_of_decreases_today=opt_int(obj, "NumberOfDecreasesToday") or 0,
            last_increase_date_time=opt_float(obj, "LastIncreaseDateTime"),
            last_decrease_date_time=opt_float(obj, "LastDecreaseDateTime"),
        )


@dataclass(frozen=True)
class GlobalSecondaryIndex:
    index_name: str
    key_schema: Sequence[KeySchemaElement]
    projection: Projection = field(default_factory=Projection)
    provisioned_throughput: ProvisionedThroughput | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "key_schema", tuple(self.key_schema))

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "IndexName": self.index_name,
            "KeySchema": _key_schema_to_wire(self.key_schema),
            "Projection": self.projection.to_wire(),
        }
        if self.provisioned_throughput is not None:
            out["ProvisionedThroughput"] = self.provisioned_throughput.to_wire()
        return out


@dataclass(frozen=True)
class LocalSecondaryIndex:
    index_name: str
    key_schema: Sequence[KeySchemaElement]
    projection: Projection = field(default_factory=Projection)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key_schema", tuple(self.key_schema))

    def to_wire(self) -> dict[str, Any]:
        return {
            "IndexName": self.index_name,
            "KeySchema": _key_schema_to_wire(self.key_schema),
            "Projection": self.projection.to_wire(),
        }


@dataclass(frozen=True)
class GlobalSecondaryIndexDescription:
    index_name: str
    key_schema: tuple[KeySchemaElement, ...] = ()
    projection: Projection | None = None
    index_status: IndexStatus | None = None
    index_size_bytes: int = 0
    item_count: int = 0
    provisioned_throughput: ProvisionedThroughputDescription | None = None
    index_arn: str | None = None

    @staticmethod
    def from_wire(data: Any) -> GlobalSecondaryIndexDescription:
        obj = expect_object(data, "GlobalSecondaryIndexDescription")
        projection = opt_object(obj, "Projection")
        throughput = opt_object(obj, "ProvisionedThroughput")
        return GlobalSecondaryIndexDescription(
            index_name=opt_str(obj, "IndexName") or "",
            key_schema=_key_schema_from_wire(obj),
            projection=Projection.from_wire(projection) if projection is not None else None,
            index_status=opt_str(obj, "IndexStatus"),  # type: ignore[arg-type]
            index_size_bytes=opt_int(obj, "IndexSizeBytes") or 0,
            item_count=opt_int(obj, "ItemCount") or 0,
            provisioned_throughput=(
                ProvisionedThroughputDescription.from_wire(throughput) if throughput is not None else None
            ),
            index_arn=opt_str(obj, "IndexArn"),
        )


@dataclass(frozen=True)
class LocalSecondaryIndexDescription:
    index_name: str
    key_schema: tuple[KeySchemaElement, ...] = ()
    projection: Projection | None = None
    index_size_bytes: int = 0
    item_count: int = 0
    index_arn: str | None = None

    @staticmethod
    def from_wire(data: Any) -> LocalSecondaryIndexDescription:
        obj = expect_object(data, "LocalSecondaryIndexDescription")
        projection = opt_object(obj, "Projection")
        return LocalSecondaryIndexDescription(
            index_name=opt_str(obj, "IndexName") or "",
            key_schema=_key_schema_from_wire(obj),
            projection=Projection.from_wire(projection) if projection is not None else None,
            index_size_bytes=opt_int(obj, "IndexSizeBytes") or 0,
            item_count=opt_int(obj, "ItemCount") or 0,
            index_arn=opt_str(obj, "IndexArn"),
        )


@dataclass(frozen=True)
class GlobalSecondaryIndexUpdate:
    """One entry of ``UpdateTable.GlobalSecondaryIndexUpdates``.

    Exactly one of ``update``, ``create`` or ``delete`` is set. ``update``
    changes an existing index's throughput, ``create`` adds a new index and
    ``delete`` names the index to drop.
    """

    index_name: str
    update: ProvisionedThroughput | None = None
    create: GlobalSecondaryIndex | None = None
    delete: bool = False

    def __post_init__(self) -> None:
        actions = sum([self.update is not None, self.create is not None, self.delete])
        if actions != 1:
            raise ValidationError("index update needs exactly one of update, create or delete")
        if self.create is not None and self.create.index_name != self.index_name:
            raise ValidationError("created index name does not match index_name")

    @staticmethod
    def update_throughput(index_name: str, throughput: ProvisionedThroughput) -> GlobalSecondaryIndexUpdate:
        return GlobalSecondaryIndexUpdate(index_name, update=throughput)

    @staticmethod
    def create_index(index: GlobalSecondaryIndex) -> GlobalSecondaryIndexUpdate:
        return GlobalSecondaryIndexUpdate(index.index_name, create=index)

    @staticmethod
    def delete_index(index_name: str) -> GlobalSecondaryIndexUpdate:
        return GlobalSecondaryIndexUpdate(index_name, delete=True)

    def to_wire(self) -> dict[str, Any]:
        if self.update is not None:
            return {"Update": {"IndexName": self.index_name, "ProvisionedThroughput": self.update.to_wire()}}
        if self.create is not None:
            return {"Create": self.create.to_wire()}
        return {"Delete": {"IndexName": self.index_name}}


@dataclass(frozen=True)
class TableDescription:
    table_name: str
    table_status: TableStatus | None = None
    attribute_definitions: tuple[AttributeDefinition, ...] = ()
    key_schema: tuple[KeySchemaElement, ...] = ()
    global_secondary_indexes: tuple[GlobalSecondaryIndexDescription, ...] = ()
    local_secondary_indexes: tuple[LocalSecondaryIndexDescription, ...] = ()
    provisioned_throughput: ProvisionedThroughputDescription | None = None
    item_count: int = 0
    table_size_bytes: int = 0
    creation_date_time: float | None = None
    table_arn: str | None = None
    table_id: str | None = None
    billing_mode: BillingMode | None = None

    @property
    def is_active(self) -> bool:
        return self.table_status == "ACTIVE"

    @staticmethod
    def from_wire(data: Any) -> TableDescription:
        obj = expect_object(data, "TableDescription")
        throughput = opt_object(obj, "ProvisionedThroughput")
        billing = opt_object(obj, "BillingModeSummary") or {}
        return TableDescription(
            table_name=opt_str(obj, "TableName") or "",
            table_status=opt_str(obj, "TableStatus"),  # type: ignore[arg-type]
            attribute_definitions=tuple(
                AttributeDefinition.from_wire(a) for a in opt_list(obj, "AttributeDefinitions") or []
            ),
            key_schema=_key_schema_from_wire(obj),
            global_secondary_indexes=tuple(
                GlobalSecondaryIndexDescription.from_wire(i)
                for i in opt_list(obj, "GlobalSecondaryIndexes") or []
            ),
            local_secondary_indexes=tuple(
                LocalSecondaryIndexDescription.from_wire(i) for i in opt_list(obj, "LocalSecondaryIndexes") or []
            ),
            provisioned_throughput=(
                ProvisionedThroughputDescription.from_wire(throughput) if throughput is not None else None
            ),
            item_count=opt_int(obj, "ItemCount") or 0,
            table_size_bytes=opt_int(obj, "TableSizeBytes") or 0,
            creation_date_time=opt_float(obj, "CreationDateTime"),
            table_arn=opt_str(obj, "TableArn"),
            table_id=opt_str(obj, "TableId"),
            billing_mode=opt_str(billing, "BillingMode"),  # type: ignore[arg-type]
        )


def wait_for_table_active(
    client: Client,
    table_name: str,
    *,
    timeout_seconds: float = 300.0,
    poll_interval_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> TableDescription:
    from .operations import DescribeTableRequest

    deadline = clock() + timeout_seconds
    while clock() < deadline:
        try:
            table = client.describe_table(DescribeTableRequest(table_name)).table
        except ResourceNotFoundError:
            table = None

        if table is not None and table.is_active:
            return table
        logger.debug(
            "waiting for table %s to become ACTIVE (status=%s)",
            table_name,
            table.table_status if table is not None else "MISSING",
        )
        sleep(poll_interval_seconds)

    raise WaitTimeoutError(f"timed out waiting for table ACTIVE: {table_name}")


def wait_for_table_deleted(
    client: Client,
    table_name: str,
    *,
    timeout_seconds: float = 300.0,
    poll_interval_seconds: float = 0.25,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    from .operations import DescribeTableRequest

    deadline = clock() + timeout_seconds
    while clock() < deadline:
        try:
            client.describe_table(DescribeTableRequest(table_name))
        except ResourceNotFoundError:
            return
        logger.debug("waiting for table %s to be deleted", table_name)
        sleep(poll_interval_seconds)

    raise WaitTimeoutError(f"timed out waiting for table deletion: {table_name}")
