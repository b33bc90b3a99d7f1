"""Record walking: resolve the input, then verify its annotated fields.

Only flat records are supported. A field holding another record is not
descended into; ``required`` on it always passes.
"""

import logging
import weakref
from typing import Any

from .config import VerifyConfig, create_default_config
from .errors import InvalidKindError, VerifyError
from .evaluator import RuleEvaluator
from .kinds import Ref, is_record
from .metadata import iter_rule_fields

logger = logging.getLogger(__name__)


def resolve(value: Any) -> Any:
    """Follow ``Ref`` boxes and weak references down to the underlying value.

    Raises:
        InvalidKindError: If the references form a cycle
    """
    seen: set[int] = set()
    while isinstance(value, (Ref, weakref.ReferenceType)):
        if id(value) in seen:
            raise InvalidKindError()
        seen.add(id(value))
        value = value.value if isinstance(value, Ref) else value()
    return value


class RecordVerifier:
    """Verifies records against the rule expressions on their fields."""

    def __init__(self, config: VerifyConfig | None = None):
        self.config = config or create_default_config()
        self.evaluator = RuleEvaluator(strict_keywords=self.config.verifier.strict_keywords)

    def validate(self, record: Any) -> None:
        """Verify a record, raising on the first failing field.

        Args:
            record: Dataclass or pydantic model instance, optionally wrapped
                in any number of ``Ref`` boxes or weak references

        Raises:
            InvalidKindError: If ``record`` does not resolve to a record instance
            StructuralError: If a rule expression is malformed or does not fit its field
            ViolationError: If a field fails its rules
        """
        resolved = resolve(record)
        if not is_record(resolved):
            raise InvalidKindError()

        tag_key = self.config.verifier.tag_key
        record_name = resolved.__class__.__name__
        for field in iter_rule_fields(resolved, tag_key):
            logger.debug(f"Verifying {record_name}.{field.name} ({field.kind.value}) against {field.expression!r}")
            self.evaluator.evaluate(field)

    def check(self, record: Any) -> VerifyError | None:
        """Verify a record, returning the error instead of raising it."""
        try:
            self.validate(record)
        except VerifyError as e:
            return e
        return None


def validate(record: Any, *, config: VerifyConfig | None = None) -> None:
    """Verify ``record``; see ``RecordVerifier.validate``."""
    RecordVerifier(config).validate(record)


def check(record: Any, *, config: VerifyConfig | None = None) -> VerifyError | None:
    """Verify ``record`` and return the error, or None if it passed."""
    return RecordVerifier(config).check(record)
