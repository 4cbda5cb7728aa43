"""
Encode named event records into the sink's positional arrays and back.

Encoding walks the registry's slots in ordinal order, so the output never
depends on the insertion order of the record's keys. Decoding zips the
same ordinal-ordered field list against the positional input.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from pydantic import BaseModel

from shortlink_app.telemetry.schema import Channel, DEFAULT_REGISTRY, SchemaRegistry

Record = Union[Mapping[str, Any], BaseModel]


def _as_mapping(record: Record) -> Mapping[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json")
    return record


def _to_blob(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value)


def _to_double(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def encode_blobs(record: Record, registry: SchemaRegistry = DEFAULT_REGISTRY) -> List[str]:
    """
    Encode the text fields of a record as the blob array.

    Missing or None values become "" since the sink has no null type;
    keys without a blob slot are ignored.
    """
    values = _as_mapping(record)
    return [_to_blob(values.get(field)) for field in registry.fields(Channel.BLOB)]


def encode_doubles(record: Record, registry: SchemaRegistry = DEFAULT_REGISTRY) -> List[float]:
    """Encode the numeric fields of a record; missing values become 0.0"""
    values = _as_mapping(record)
    return [_to_double(values.get(field)) for field in registry.fields(Channel.DOUBLE)]


def decode_blobs(blobs: Sequence[str], registry: SchemaRegistry = DEFAULT_REGISTRY) -> Dict[str, str]:
    """
    Rebuild the named text fields from a blob array.

    A shorter array (written under an older layout) yields only the fields
    it covers. Positions past the known slots are dropped.
    """
    return dict(zip(registry.fields(Channel.BLOB), blobs))


def decode_doubles(doubles: Sequence[float], registry: SchemaRegistry = DEFAULT_REGISTRY) -> Dict[str, float]:
    return dict(zip(registry.fields(Channel.DOUBLE), doubles))


def encode(record: Record, registry: SchemaRegistry = DEFAULT_REGISTRY) -> Tuple[List[str], List[float]]:
    values = _as_mapping(record)
    return encode_blobs(values, registry), encode_doubles(values, registry)


def decode(
    blobs: Sequence[str],
    doubles: Sequence[float],
    registry: SchemaRegistry = DEFAULT_REGISTRY,
) -> Dict[str, Any]:
    """Decode both channels into one partial record"""
    return {**decode_blobs(blobs, registry), **decode_doubles(doubles, registry)}
