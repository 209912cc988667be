"""Revision data models for helmhistory."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from dataclasses_json import DataClassJsonMixin

# Ordered revision identifiers exactly as helm reported them
RevisionList = List[str]


@dataclass(slots=True)
class RevisionRecord(DataClassJsonMixin):
    """One entry of `helm history -o json` output."""

    revision: str
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_history_entry(cls, entry: Dict[str, Any]) -> RevisionRecord:
        """Create a record from a decoded helm history object.

        Any scalar revision is encoded as a string, the empty string
        included. Every other key is kept untouched in ``extra``.
        """
        if entry.get("revision") is None:
            raise KeyError("revision")

        value = entry["revision"]
        if isinstance(value, (dict, list)):
            raise TypeError(f"Unsupported revision value: {value!r}")

        extra = {key: item for key, item in entry.items() if key != "revision"}
        return cls(revision=_scalar_text(value), extra=extra)

    @property
    def status(self) -> str:
        """Get the status helm reported for this revision, if any."""
        return str(self.extra.get("status", ""))

    @property
    def description(self) -> str:
        """Get the description helm reported for this revision, if any."""
        return str(self.extra.get("description", ""))


def _scalar_text(value: Any) -> str:
    # JSON spelling for booleans: true, not True
    if isinstance(value, bool):
        return json.dumps(value)
    return str(value)


def revision_ids(records: List[RevisionRecord]) -> RevisionList:
    """Extract the revision identifiers, preserving order and duplicates."""
    return [record.revision for record in records]
