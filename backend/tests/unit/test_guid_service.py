"""
Unit tests for GuidService and the GUIDs carried by stored rows.

Every id the API accepts or returns is a prefixed GUID; these tests pin
the format, the prefix checks and the rejection of undecodable ids.
"""

import uuid

import pytest

from backend.src.models import Entry, Event, Judge, Performance
from backend.src.services.guid import GuidService, ENTITY_PREFIXES, GUID_PATTERN


class TestGenerateAndEncode:
    """Tests for UUID generation and GUID encoding."""

    def test_generates_unique_uuid7(self):
        """Test generated values are distinct version 7 UUIDs."""
        values = [GuidService.generate_uuid() for _ in range(50)]

        assert all(isinstance(v, uuid.UUID) and v.version == 7 for v in values)
        assert len(set(values)) == 50

    @pytest.mark.parametrize("prefix", sorted(ENTITY_PREFIXES))
    def test_encode_every_prefix(self, prefix):
        """Test each entity prefix yields a 30-character lowercase GUID."""
        guid = GuidService.encode_uuid(GuidService.generate_uuid(), prefix)

        assert guid.startswith(f"{prefix}_")
        assert len(guid) == 30
        assert guid == guid.lower()

    def test_encode_accepts_bytes(self):
        """Test raw UUID bytes encode like the UUID itself."""
        value = GuidService.generate_uuid()

        assert GuidService.encode_uuid(value.bytes, "prf") == GuidService.encode_uuid(value, "prf")

    def test_encode_unknown_prefix(self):
        """Test prefixes outside the engine's entities are refused."""
        with pytest.raises(ValueError, match="Invalid prefix"):
            GuidService.encode_uuid(GuidService.generate_uuid(), "col")


class TestDecodeAndParse:
    """Tests for decode_guid and parse_guid."""

    def test_decode_ignores_case(self):
        """Test upper-case GUIDs decode to the same judge UUID."""
        value = GuidService.generate_uuid()
        guid = GuidService.encode_uuid(value, "jdg")

        assert GuidService.decode_guid(guid.upper()) == ("jdg", value)

    @pytest.mark.parametrize("bad", [
        "invalid",
        "ent_123",
        "ent_" + "a" * 27,
        "ent-" + "a" * 26,
        "col_" + "a" * 26,
    ])
    def test_decode_rejects_malformed(self, bad):
        """Test malformed ids raise ValueError."""
        with pytest.raises(ValueError):
            GuidService.decode_guid(bad)

    def test_parse_checks_prefix(self):
        """Test an entry GUID is not accepted where a performance is expected."""
        guid = GuidService.encode_uuid(GuidService.generate_uuid(), "ent")

        with pytest.raises(ValueError, match="prefix mismatch"):
            GuidService.parse_guid(guid, "prf")

    def test_parse_rejects_numeric_ids(self):
        """Test internal integer keys are never accepted."""
        with pytest.raises(ValueError, match="Invalid identifier format"):
            GuidService.parse_guid("123", "ent")

    def test_parse_rejects_empty(self):
        """Test empty ids are refused."""
        with pytest.raises(ValueError, match="cannot be empty"):
            GuidService.parse_guid("", "evt")

    def test_parse_rejects_overflowing_value(self):
        """Test a well-formed id beyond 128 bits raises ValueError."""
        overflowing = "ent_" + "z" * 26

        assert GuidService.validate_guid(overflowing) is True
        with pytest.raises(ValueError, match="Invalid GUID encoding"):
            GuidService.parse_guid(overflowing, "ent")


class TestValidateAndInspect:
    """Tests for validation, prefix and entity type helpers."""

    def test_validate_expected_prefix(self):
        """Test validation optionally pins the prefix."""
        guid = GuidService.encode_uuid(GuidService.generate_uuid(), "asg")

        assert GuidService.validate_guid(guid) is True
        assert GuidService.validate_guid(guid, "asg") is True
        assert GuidService.validate_guid(guid, "evt") is False

    @pytest.mark.parametrize("bad", ["", None, "asg_123", "ent_IIIIIIIIIIIIIIIIIIIIIIIIII"])
    def test_validate_rejects(self, bad):
        """Test malformed ids and non-Crockford characters fail validation."""
        assert GuidService.validate_guid(bad) is False

    def test_get_prefix_only_for_well_formed(self):
        """Test get_prefix returns None for malformed ids."""
        guid = GuidService.encode_uuid(GuidService.generate_uuid(), "prf")

        assert GuidService.get_prefix(guid.upper()) == "prf"
        assert GuidService.get_prefix("prf_123") is None

    def test_entity_types(self):
        """Test each prefix maps back to its model name."""
        value = GuidService.generate_uuid()

        for prefix, entity_type in ENTITY_PREFIXES.items():
            assert GuidService.get_entity_type(GuidService.encode_uuid(value, prefix)) == entity_type
        assert GuidService.get_entity_type("xy") is None

    def test_pattern_is_case_insensitive(self):
        """Test the pattern accepts either case of Crockford characters."""
        assert GUID_PATTERN.match("scr_01HG02BBG00000000000000003")
        assert GUID_PATTERN.match("scr_01hg02bbg00000000000000003")


class TestModelGuids:
    """Tests for the guid property of stored rows."""

    def test_stored_rows_round_trip(self, sample_judge, sample_performance):
        """Test each row's GUID parses back to its uuid column."""
        performance = sample_performance()
        rows = [performance, performance.entry, performance.event, sample_judge()]

        for row in rows:
            assert GuidService.get_entity_type(row.guid) == type(row).__name__
            assert GuidService.parse_guid(row.guid, row.GUID_PREFIX) == row.uuid

    def test_prefixes_match_registry(self):
        """Test the model prefixes are the registered ones."""
        assert (Event.GUID_PREFIX, Entry.GUID_PREFIX, Performance.GUID_PREFIX, Judge.GUID_PREFIX) == (
            "evt", "ent", "prf", "jdg"
        )
