"""
Positional slot schema for the analytics sink.

The sink stores every data point as two positional arrays: text "blobs"
and numeric "doubles". Columns are addressed as blob1..blobN and
double1..doubleM, never by name, so this module owns the mapping between
the named event fields and their slots.

Slot positions are append-only. Renumbering or removing a slot corrupts
every record already written under the old layout; new fields get the next
ordinal at the end of their table.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from shortlink_app.exceptions import SchemaError, UnknownFieldError


class Channel(str, Enum):
    """The two independently positioned arrays of a data point"""
    BLOB = "blob"
    DOUBLE = "double"


BLOB_SLOTS: Tuple[Tuple[str, str], ...] = (
    ("blob1", "slug"),
    ("blob2", "url"),
    ("blob3", "ua"),
    ("blob4", "ip"),
    ("blob5", "referer"),
    ("blob6", "country"),
    ("blob7", "region"),
    ("blob8", "city"),
    ("blob9", "timezone"),
    ("blob10", "language"),
    ("blob11", "os"),
    ("blob12", "browser"),
    ("blob13", "browser_type"),
    ("blob14", "device"),
    ("blob15", "device_type"),
    ("blob16", "colo"),
    ("blob17", "event_type"),
)

DOUBLE_SLOTS: Tuple[Tuple[str, str], ...] = (
    ("double1", "latitude"),
    ("double2", "longitude"),
)

_NON_DIGITS = re.compile(r"\D")


def slot_ordinal(slot_id: str) -> int:
    """
    Extract the numeric ordinal of a slot id ("blob7" -> 7).

    Used as the sort key for every ordering decision in the pipeline.
    """
    digits = _NON_DIGITS.sub("", slot_id)
    if not digits:
        raise SchemaError("Slot id has no ordinal", slot=slot_id)
    return int(digits)


@dataclass(frozen=True)
class _ChannelTable:
    """Bidirectional slot/field mapping for one channel"""
    channel: Channel
    slots: Tuple[str, ...]
    fields: Tuple[str, ...]
    field_to_slot: Mapping[str, str]
    slot_to_field: Mapping[str, str]

    @classmethod
    def build(cls, channel: Channel, table: Iterable[Tuple[str, str]]) -> "_ChannelTable":
        entries = list(table)
        field_to_slot = {}
        slot_to_field = {}
        ordinals = set()

        for slot, field in entries:
            if not slot.startswith(channel.value):
                raise SchemaError(
                    f"Slot does not belong to the {channel.value} channel",
                    slot=slot,
                    field=field,
                )
            ordinal = slot_ordinal(slot)
            if slot in slot_to_field or ordinal in ordinals:
                raise SchemaError("Slot assigned twice", slot=slot, field=field)
            if field in field_to_slot:
                raise SchemaError("Field mapped to two slots", slot=slot, field=field)
            ordinals.add(ordinal)
            slot_to_field[slot] = field
            field_to_slot[field] = slot

        # Decoding zips positions against this order, so the table must
        # already be declared in ordinal order.
        declared = [slot for slot, _ in entries]
        by_ordinal = sorted(declared, key=slot_ordinal)
        if declared != by_ordinal:
            raise SchemaError(
                f"{channel.value} slots must be declared in ordinal order: "
                f"got {declared}, expected {by_ordinal}"
            )

        return cls(
            channel=channel,
            slots=tuple(by_ordinal),
            fields=tuple(slot_to_field[slot] for slot in by_ordinal),
            field_to_slot=MappingProxyType(field_to_slot),
            slot_to_field=MappingProxyType(slot_to_field),
        )


@dataclass(frozen=True)
class SchemaRegistry:
    """
    Immutable field <-> slot registry for both channels.

    Built once at import time (see DEFAULT_REGISTRY) and shared by
    reference between the encoder, decoder and sinks. Each channel is a
    bijection: no two fields share a slot and no two slots share a field.
    """
    blobs: _ChannelTable
    doubles: _ChannelTable

    @classmethod
    def build(
        cls,
        blobs: Iterable[Tuple[str, str]] = BLOB_SLOTS,
        doubles: Iterable[Tuple[str, str]] = DOUBLE_SLOTS,
    ) -> "SchemaRegistry":
        """
        Build a registry from two ordered (slot_id, field) tables.

        Raises:
            SchemaError: if a table is not a bijection, mixes channels,
                reuses an ordinal or is not declared in ordinal order
        """
        return cls(
            blobs=_ChannelTable.build(Channel.BLOB, blobs),
            doubles=_ChannelTable.build(Channel.DOUBLE, doubles),
        )

    def _table(self, channel: Channel) -> _ChannelTable:
        return self.blobs if Channel(channel) == Channel.BLOB else self.doubles

    def field_to_slot(self, channel: Channel, field: str) -> str:
        table = self._table(channel)
        try:
            return table.field_to_slot[field]
        except KeyError:
            raise UnknownFieldError(table.channel.value, field) from None

    def slot_to_field(self, channel: Channel, slot: str) -> str:
        table = self._table(channel)
        try:
            return table.slot_to_field[slot]
        except KeyError:
            raise UnknownFieldError(table.channel.value, slot) from None

    def slots(self, channel: Channel) -> Tuple[str, ...]:
        """Slot ids in ascending ordinal order"""
        return self._table(channel).slots

    def fields(self, channel: Channel) -> Tuple[str, ...]:
        """Field names in ascending slot-ordinal order"""
        return self._table(channel).fields

    def has_field(self, channel: Channel, field: str) -> bool:
        return field in self._table(channel).field_to_slot


DEFAULT_REGISTRY = SchemaRegistry.build()
