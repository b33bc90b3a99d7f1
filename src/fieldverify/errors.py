"""Error types raised by fieldverify.

Two categories exist. Structural errors mean a rule was declared wrongly
(bad syntax, keyword on the wrong kind of field) and abort validation at
once. Violation errors mean the data failed well-formed rules; one is raised
per failing field with every failed clause of that field.
"""

from enum import Enum

VIOLATION_PREFIX = "verify found the following errors"


class StructuralErrorKind(str, Enum):
    """Closed enumeration of rule declaration faults."""
    MISSING_VALUE = "missing_value"
    NOT_A_NUMBER = "not_a_number"
    UNSUPPORTED_KIND = "unsupported_kind"
    LITERAL_MISMATCH = "literal_mismatch"
    UNKNOWN_KEYWORD = "unknown_keyword"


class VerifyError(Exception):
    """Base class for every error raised while verifying a record."""

    category = "error"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "category": self.category,
            "field": self.field,
            "message": self.message,
        }


class InvalidKindError(VerifyError):
    """Raised when the value handed to the verifier is not a record."""

    category = "invalid_kind"

    def __init__(self, message: str = "value provided must be a record, an interface wrapping one, or a reference to one"):
        super().__init__(message)


class StructuralError(VerifyError):
    """Raised when a rule clause is malformed or does not fit its field."""

    category = "structural"

    def __init__(self, kind: StructuralErrorKind, keyword: str, message: str, field: str | None = None):
        self.kind = kind
        self.keyword = keyword
        super().__init__(message, field)

    @classmethod
    def missing_value(cls, keyword: str, field: str | None = None) -> "StructuralError":
        return cls(StructuralErrorKind.MISSING_VALUE, keyword, f"{keyword} must specify a size", field)

    @classmethod
    def not_a_number(cls, keyword: str, field: str | None = None) -> "StructuralError":
        return cls(StructuralErrorKind.NOT_A_NUMBER, keyword, f"{keyword} value must be a number", field)

    @classmethod
    def unsupported_kind(cls, keyword: str, allowed: str, field: str | None = None) -> "StructuralError":
        return cls(
            StructuralErrorKind.UNSUPPORTED_KIND,
            keyword,
            f"{keyword} can only be used with types: {allowed}",
            field,
        )

    @classmethod
    def literal_mismatch(cls, keyword: str, field: str, field_type: str, literal_type: str) -> "StructuralError":
        return cls(
            StructuralErrorKind.LITERAL_MISMATCH,
            keyword,
            f"{field} type is {field_type} while {keyword} is {literal_type}",
            field,
        )

    @classmethod
    def unknown_keyword(cls, keyword: str, field: str) -> "StructuralError":
        return cls(
            StructuralErrorKind.UNKNOWN_KEYWORD,
            keyword,
            f"{field} has unrecognized rule keyword '{keyword}'",
            field,
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["kind"] = self.kind.value
        data["keyword"] = self.keyword
        return data


class ViolationError(VerifyError):
    """All failed clauses of one field, joined into a single message."""

    category = "violation"

    def __init__(self, field: str, violations: list[str]):
        self.violations = tuple(violations)
        super().__init__(f"{VIOLATION_PREFIX}: [{', '.join(self.violations)}]", field)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["violations"] = list(self.violations)
        return data
