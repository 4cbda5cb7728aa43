"""
Tests for the positional slot schema.
"""
import pytest

from shortlink_app.exceptions import SchemaError, UnknownFieldError
from shortlink_app.telemetry.schema import (
    BLOB_SLOTS,
    DOUBLE_SLOTS,
    DEFAULT_REGISTRY,
    Channel,
    SchemaRegistry,
    slot_ordinal,
)


class TestDefaultRegistry:
    """Test the wire layout shipped with the app"""

    def test_blob_layout(self):
        """Test that every blob field sits in its fixed slot"""
        assert DEFAULT_REGISTRY.slots(Channel.BLOB) == tuple(f"blob{n}" for n in range(1, 18))
        assert DEFAULT_REGISTRY.fields(Channel.BLOB) == (
            "slug", "url", "ua", "ip", "referer", "country", "region", "city",
            "timezone", "language", "os", "browser", "browser_type", "device",
            "device_type", "colo", "event_type",
        )

    def test_double_layout(self):
        """Test the numeric slots"""
        assert DEFAULT_REGISTRY.slots(Channel.DOUBLE) == ("double1", "double2")
        assert DEFAULT_REGISTRY.fields(Channel.DOUBLE) == ("latitude", "longitude")

    def test_lookups_are_inverse(self):
        """Test field -> slot -> field for every entry of both channels"""
        for channel in Channel:
            for field in DEFAULT_REGISTRY.fields(channel):
                slot = DEFAULT_REGISTRY.field_to_slot(channel, field)
                assert DEFAULT_REGISTRY.slot_to_field(channel, slot) == field

    def test_two_digit_ordinals_sort_numerically(self):
        """Test that blob10 comes after blob9, not after blob1"""
        slots = DEFAULT_REGISTRY.slots(Channel.BLOB)
        assert slots.index("blob10") == slots.index("blob9") + 1
        assert DEFAULT_REGISTRY.field_to_slot(Channel.BLOB, "language") == "blob10"

    def test_unknown_field(self):
        """Test that unknown lookups raise a KeyError subtype"""
        with pytest.raises(UnknownFieldError):
            DEFAULT_REGISTRY.field_to_slot(Channel.BLOB, "latitude")

        with pytest.raises(KeyError):
            DEFAULT_REGISTRY.slot_to_field(Channel.DOUBLE, "double3")

    def test_has_field(self):
        assert DEFAULT_REGISTRY.has_field(Channel.BLOB, "country")
        assert not DEFAULT_REGISTRY.has_field(Channel.BLOB, "latitude")
        assert DEFAULT_REGISTRY.has_field("double", "longitude")

    def test_registry_is_read_only(self):
        """Test that the shared maps cannot be mutated"""
        with pytest.raises(TypeError):
            DEFAULT_REGISTRY.blobs.field_to_slot["slug"] = "blob2"


class TestSlotOrdinal:
    """Test ordinal extraction"""

    def test_ordinal(self):
        assert slot_ordinal("blob7") == 7
        assert slot_ordinal("blob17") == 17
        assert slot_ordinal("double2") == 2

    def test_missing_ordinal(self):
        with pytest.raises(SchemaError):
            slot_ordinal("blob")


class TestRegistryValidation:
    """Test that broken slot tables are rejected at build time"""

    def test_appending_a_slot_is_allowed(self):
        """Test that a new field can take the next ordinal"""
        registry = SchemaRegistry.build(blobs=BLOB_SLOTS + (("blob18", "campaign"),))

        assert registry.field_to_slot(Channel.BLOB, "campaign") == "blob18"
        assert registry.fields(Channel.BLOB)[:17] == DEFAULT_REGISTRY.fields(Channel.BLOB)

    def test_duplicate_slot(self):
        """Test that two fields cannot share a slot"""
        with pytest.raises(SchemaError) as exc:
            SchemaRegistry.build(blobs=(("blob1", "slug"), ("blob1", "url")))

        assert exc.value.slot == "blob1"

    def test_duplicate_field(self):
        """Test that one field cannot take two slots"""
        with pytest.raises(SchemaError) as exc:
            SchemaRegistry.build(blobs=(("blob1", "slug"), ("blob2", "slug")))

        assert exc.value.field == "slug"

    def test_reused_ordinal(self):
        """Test that slot ids with the same number collide"""
        with pytest.raises(SchemaError):
            SchemaRegistry.build(blobs=(("blob1", "slug"), ("blob01", "url")))

    def test_declaration_must_follow_ordinal_order(self):
        """Test that swapped declarations are rejected"""
        with pytest.raises(SchemaError):
            SchemaRegistry.build(blobs=(("blob2", "url"), ("blob1", "slug")))

    def test_wrong_channel_prefix(self):
        with pytest.raises(SchemaError):
            SchemaRegistry.build(doubles=(("blob1", "latitude"),))

    def test_double_table_validated_too(self):
        with pytest.raises(SchemaError):
            SchemaRegistry.build(doubles=DOUBLE_SLOTS + (("double2", "altitude"),))
