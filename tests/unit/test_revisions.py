"""Unit tests for revision models and history parsing."""

import pytest

from helmhistory.adapters.helm_adapter import parse_history_output
from helmhistory.errors import HelmOutputError
from helmhistory.models.revisions import RevisionRecord, revision_ids


class TestRevisionRecord:
    """Test cases for RevisionRecord model."""

    def test_record_from_history_entry(self):
        """Test building a record from a helm history object."""
        record = RevisionRecord.from_history_entry({
            "revision": 4,
            "status": "deployed",
            "chart": "web-1.2.0",
            "description": "Upgrade complete",
        })

        assert record.revision == "4"
        assert record.status == "deployed"
        assert record.description == "Upgrade complete"
        assert record.extra["chart"] == "web-1.2.0"
        assert "revision" not in record.extra

    def test_record_requires_revision(self):
        """Test that entries without a revision are rejected."""
        with pytest.raises(KeyError):
            RevisionRecord.from_history_entry({"status": "deployed"})

    def test_record_rejects_null_revision(self):
        """Test that a null revision counts as missing."""
        with pytest.raises(KeyError):
            RevisionRecord.from_history_entry({"revision": None})

    @pytest.mark.parametrize("value", [{"number": 1}, [1]])
    def test_record_rejects_non_scalar_values(self, value):
        """Test that object and array revisions are rejected."""
        with pytest.raises(TypeError):
            RevisionRecord.from_history_entry({"revision": value})

    @pytest.mark.parametrize("value, expected", [
        ("", ""),
        (1.5, "1.5"),
        (True, "true"),
        ("v2", "v2"),
    ])
    def test_record_encodes_scalars_as_text(self, value, expected):
        """Test that every scalar revision becomes a string."""
        assert RevisionRecord.from_history_entry({"revision": value}).revision == expected

    def test_record_allows_empty_revision(self):
        """Test that an empty revision string is kept as is."""
        assert RevisionRecord(revision="").revision == ""

    def test_missing_optional_fields(self):
        """Test properties when helm omits status and description."""
        record = RevisionRecord(revision="1")

        assert record.status == ""
        assert record.description == ""


class TestParseHistoryOutput:
    """Test cases for parse_history_output."""

    def test_revisions_in_input_order(self):
        """Test that revisions keep the order helm printed them in."""
        records = parse_history_output('[{"revision":"1"},{"revision":"2"}]')

        assert revision_ids(records) == ["1", "2"]

    def test_duplicates_pass_through(self):
        """Test that duplicate revisions are not collapsed."""
        records = parse_history_output('[{"revision":"2"},{"revision":"1"},{"revision":"2"}]')

        assert revision_ids(records) == ["2", "1", "2"]

    def test_integer_revisions(self):
        """Test helm's native integer revisions."""
        stdout = (
            '[{"revision":1,"updated":"2024-01-15T10:30:00Z","status":"superseded"},'
            '{"revision":2,"updated":"2024-01-16T08:00:00Z","status":"deployed"}]'
        )

        assert revision_ids(parse_history_output(stdout)) == ["1", "2"]

    def test_empty_and_float_revisions(self):
        """Test that empty and float revisions are kept, not rejected."""
        records = parse_history_output('[{"revision":"1"},{"revision":""},{"revision":1.5}]')

        assert revision_ids(records) == ["1", "", "1.5"]

    def test_empty_array(self):
        """Test a release with no history entries."""
        assert parse_history_output("[]") == []

    @pytest.mark.parametrize("stdout", [
        "not json",
        '[{"revision":"1"}',
        '{"revision":"1"}',
        '["1", "2"]',
        '[{"revision":"1"},{"status":"failed"}]',
    ])
    def test_malformed_output(self, stdout):
        """Test that anything but an array of revision objects is rejected."""
        with pytest.raises(HelmOutputError):
            parse_history_output(stdout, "web")

    def test_error_carries_release_name(self):
        """Test that parse errors name the release."""
        with pytest.raises(HelmOutputError) as excinfo:
            parse_history_output("oops", "web")

        assert excinfo.value.release_name == "web"
