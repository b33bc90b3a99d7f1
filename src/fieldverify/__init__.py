"""fieldverify - declarative field-level validation for flat records.

Rules are attached to dataclass or pydantic fields as compact expressions
such as ``"required,min=3,max=7"`` and checked in one pass by ``validate``.
"""

__version__ = "0.1.0"
__author__ = "fieldverify contributors"
__description__ = "Declarative field-level validation for flat records"

from fieldverify.config import VerifyConfig, load_config
from fieldverify.errors import (
    InvalidKindError,
    StructuralError,
    StructuralErrorKind,
    VerifyError,
    ViolationError,
)
from fieldverify.evaluator import RuleEvaluator, evaluate_field
from fieldverify.expression import Clause, parse_expression
from fieldverify.kinds import FieldDescriptor, Ref, ValueKind
from fieldverify.metadata import rules
from fieldverify.walker import RecordVerifier, check, validate

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "VerifyConfig",
    "load_config",
    "VerifyError",
    "InvalidKindError",
    "StructuralError",
    "StructuralErrorKind",
    "ViolationError",
    "RuleEvaluator",
    "evaluate_field",
    "Clause",
    "parse_expression",
    "FieldDescriptor",
    "Ref",
    "ValueKind",
    "rules",
    "RecordVerifier",
    "check",
    "validate",
]
