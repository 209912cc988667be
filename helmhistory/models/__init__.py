"""Data models for helmhistory."""

from .revisions import RevisionList, RevisionRecord
from .validations import FieldValidation, ValidationKind

__all__ = [
    "RevisionList",
    "RevisionRecord",
    "FieldValidation",
    "ValidationKind",
]
