"""Rule evaluation for a single record field.

Each recognized keyword has one ``KeywordRule``. The evaluator walks the
clauses of a field's expression in order, lets the matching rule append
violations, and raises once the whole expression has been seen.
"""

import logging
import math
import operator
from abc import ABC, abstractmethod
from collections.abc import Callable

from .errors import StructuralError, ViolationError
from .expression import (
    KEYWORD_MAX,
    KEYWORD_MAX_SIZE,
    KEYWORD_MIN,
    KEYWORD_MIN_SIZE,
    KEYWORD_REQUIRED,
    Clause,
    parse_expression,
    parse_integer,
    parse_number,
)
from .kinds import NUMERIC_KINDS, SIZED_KINDS, FieldDescriptor, ValueKind

logger = logging.getLogger(__name__)

SIZED_TYPES_TEXT = "str, bytes, list, tuple, set, dict, or queue"
NUMERIC_TYPES_TEXT = "int or float"


def format_decimal(value: float) -> str:
    """Render a decimal bound with six fraction digits, or as +Inf, -Inf, NaN."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


class KeywordRule(ABC):
    """Base class for the rule behind one keyword."""

    @property
    @abstractmethod
    def keyword(self) -> str:
        """Keyword as written in rule expressions."""
        pass

    @abstractmethod
    def evaluate(self, clause: Clause, field: FieldDescriptor, violations: list[str]) -> None:
        """Check one clause against a field.

        Args:
            clause: Parsed clause whose keyword matches this rule
            field: Field being verified
            violations: Violations of this field so far, appended to on failure

        Raises:
            StructuralError: If the clause cannot apply to this field
        """
        pass


class SizeRule(KeywordRule):
    """Length bound for strings, containers and queues."""

    def __init__(self, keyword: str, fails: Callable[[int, int], bool], description: str):
        self._keyword = keyword
        self._fails = fails
        self._description = description

    @property
    def keyword(self) -> str:
        return self._keyword

    def evaluate(self, clause: Clause, field: FieldDescriptor, violations: list[str]) -> None:
        if clause.is_bare:
            raise StructuralError.missing_value(self.keyword, field.name)

        size = parse_integer(clause.raw_value)
        if size is None:
            raise StructuralError.not_a_number(self.keyword, field.name)

        if field.kind not in SIZED_KINDS:
            raise StructuralError.unsupported_kind(self.keyword, SIZED_TYPES_TEXT, field.name)

        if self._fails(field.length, size):
            violations.append(f"{field.name} has a length {self._description} {size}")


class BoundRule(KeywordRule):
    """Numeric bound for int and float fields.

    The literal decides the comparison mode: an integer literal only fits an
    int field and a decimal literal only fits a float field.
    """

    def __init__(self, keyword: str, fails: Callable[[float, float], bool], description: str):
        self._keyword = keyword
        self._fails = fails
        self._description = description

    @property
    def keyword(self) -> str:
        return self._keyword

    def evaluate(self, clause: Clause, field: FieldDescriptor, violations: list[str]) -> None:
        if clause.is_bare:
            raise StructuralError.missing_value(self.keyword, field.name)

        bound = parse_number(clause.raw_value)
        if bound is None:
            raise StructuralError.not_a_number(self.keyword, field.name)
        is_decimal = isinstance(bound, float)

        if field.kind not in NUMERIC_KINDS:
            raise StructuralError.unsupported_kind(self.keyword, NUMERIC_TYPES_TEXT, field.name)

        if field.kind == ValueKind.INT:
            if is_decimal:
                raise StructuralError.literal_mismatch(self.keyword, field.name, "int", "float")
            if self._fails(field.value, bound):
                violations.append(f"{field.name} has value {self._description} {bound:d}")
        else:
            if not is_decimal:
                raise StructuralError.literal_mismatch(self.keyword, field.name, "float", "int")
            if self._fails(field.value, bound):
                violations.append(f"{field.name} has value {self._description} {format_decimal(bound)}")


class RequiredRule(KeywordRule):
    """Field must not hold the zero value of its kind."""

    @property
    def keyword(self) -> str:
        return KEYWORD_REQUIRED

    def evaluate(self, clause: Clause, field: FieldDescriptor, violations: list[str]) -> None:
        # any value after '=' is ignored
        if field.is_zero:
            violations.append(f"{field.name} is required but is set to zero value")


def create_default_rules() -> dict[str, KeywordRule]:
    """Build the keyword table."""
    rules = [
        SizeRule(KEYWORD_MIN_SIZE, operator.lt, "less than"),
        SizeRule(KEYWORD_MAX_SIZE, operator.gt, "greater than"),
        BoundRule(KEYWORD_MIN, operator.lt, "less than min"),
        BoundRule(KEYWORD_MAX, operator.gt, "greater than max"),
        RequiredRule(),
    ]
    return {rule.keyword: rule for rule in rules}


class RuleEvaluator:
    """Evaluates the rule expression of one field at a time."""

    def __init__(self, strict_keywords: bool = False):
        self.strict_keywords = strict_keywords
        self.rules = create_default_rules()

    def evaluate(self, field: FieldDescriptor) -> None:
        """Verify a field against its expression.

        Raises:
            StructuralError: On the first malformed clause; violations found
                before it are discarded
            ViolationError: If any clause failed, after every clause ran
        """
        violations: list[str] = []

        for clause in parse_expression(field.expression):
            rule = self.rules.get(clause.keyword)
            if rule is None:
                if self.strict_keywords:
                    raise StructuralError.unknown_keyword(clause.keyword, field.name)
                logger.debug(f"Ignoring unrecognized keyword {clause.keyword!r} on field {field.name}")
                continue
            rule.evaluate(clause, field, violations)

        if violations:
            raise ViolationError(field.name, violations)


def evaluate_field(field: FieldDescriptor, *, strict_keywords: bool = False) -> None:
    """Verify a single field descriptor. See ``RuleEvaluator.evaluate``."""
    RuleEvaluator(strict_keywords=strict_keywords).evaluate(field)
