"""Form field validation models for helmhistory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from dataclasses_json import DataClassJsonMixin

# Type aliases
ValidationKind = Literal['ok', 'error']


@dataclass(slots=True, frozen=True)
class FieldValidation(DataClassJsonMixin):
    """Outcome of validating a single build step field."""

    kind: ValidationKind
    message: Optional[str] = field(default=None)

    @classmethod
    def ok(cls) -> FieldValidation:
        return cls(kind='ok')

    @classmethod
    def error(cls, message: str) -> FieldValidation:
        if not message:
            raise ValueError("Error message cannot be empty")
        return cls(kind='error', message=message)

    @property
    def is_ok(self) -> bool:
        """Check if the field passed validation."""
        return self.kind == 'ok'
