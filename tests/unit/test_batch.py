from __future__ import annotations

import pytest

from ddbjson.attribute import String
from ddbjson.batch import DeleteRequest, KeysAndAttributes, PutRequest, WriteRequest
from ddbjson.errors import DecodeError, ValidationError


def test_write_request_requires_exactly_one_action() -> None:
    with pytest.raises(ValidationError):
        WriteRequest()
    with pytest.raises(ValidationError):
        WriteRequest(put=PutRequest({"pk": String("A")}), delete=DeleteRequest({"pk": String("A")}))
    with pytest.raises(ValidationError):
        WriteRequest.put_item({})
    with pytest.raises(ValidationError):
        WriteRequest.delete_item({})


def test_write_request_wire() -> None:
    assert WriteRequest.put_item({"pk": String("A")}).to_wire() == {"PutRequest": {"Item": {"pk": {"S": "A"}}}}
    assert WriteRequest.delete_item({"pk": String("B")}).to_wire() == {"DeleteRequest": {"Key": {"pk": {"S": "B"}}}}


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"PutRequest": {"Item": {"pk": {"S": "A"}}}, "DeleteRequest": {"Key": {"pk": {"S": "A"}}}},
        {"PutRequest": {"Item": {}}},
        {"PutRequest": {"Item": {"pk": {"S": "A"}}, "Extra": 1}},
        {"UpdateRequest": {}},
    ],
)
def test_write_request_from_wire_rejects_bad_shapes(payload: dict[str, object]) -> None:
    with pytest.raises(DecodeError):
        WriteRequest.from_wire(payload)


def test_keys_and_attributes() -> None:
    kaa = KeysAndAttributes(
        keys=[{"pk": String("A")}],
        attributes_to_get=["pk", "name"],
        consistent_read=False,
    )
    assert kaa.to_wire() == {
        "Keys": [{"pk": {"S": "A"}}],
        "AttributesToGet": ["pk", "name"],
        "ConsistentRead": False,
    }
    assert KeysAndAttributes.from_wire(kaa.to_wire()) == kaa

    with pytest.raises(ValidationError):
        KeysAndAttributes(keys=[])


def test_keys_and_attributes_with_projection() -> None:
    kaa = KeysAndAttributes(
        keys=[{"pk": String("A")}],
        projection_expression="#n",
        expression_attribute_names={"#n": "name"},
    )
    assert kaa.to_wire() == {
        "Keys": [{"pk": {"S": "A"}}],
        "ProjectionExpression": "#n",
        "ExpressionAttributeNames": {"#n": "name"},
    }


def test_keys_and_attributes_from_wire_rejects_bad_shapes() -> None:
    with pytest.raises(DecodeError):
        KeysAndAttributes.from_wire({"Keys": []})
    with pytest.raises(DecodeError):
        KeysAndAttributes.from_wire({"Keys": [{"pk": {"S": "A"}}], "ConsistentRead": "yes"})
    with pytest.raises(DecodeError):
        KeysAndAttributes.from_wire({"Keys": [{"pk": {"S": "A"}}], "Unknown": 1})


def test_write_request_to_wire_without_action_raises() -> None:
    request = WriteRequest.put_item({"pk": String("A")})
    object.__setattr__(request, "put", None)
    with pytest.raises(ValidationError):
        request.to_wire()
