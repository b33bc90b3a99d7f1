"""Value kinds for inspectable record fields.

Every field handed to the rule evaluator is classified into exactly one
``ValueKind``. Rules never look at Python types directly; they only ask which
capability set the kind belongs to.
"""

import asyncio
import collections.abc
import dataclasses
import queue
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel


class ValueKind(str, Enum):
    """Closed set of field value kinds."""
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    ARRAY = "array"
    SET = "set"
    MAPPING = "mapping"
    CHANNEL = "channel"
    FUNCTION = "function"
    RECORD = "record"
    REFERENCE = "reference"
    INTERFACE = "interface"


SIZED_KINDS = frozenset({
    ValueKind.STRING,
    ValueKind.SEQUENCE,
    ValueKind.ARRAY,
    ValueKind.SET,
    ValueKind.MAPPING,
    ValueKind.CHANNEL,
})

NUMERIC_KINDS = frozenset({ValueKind.INT, ValueKind.FLOAT})

# required compares these against None only; an empty container is set
NIL_CHECKED_KINDS = frozenset({
    ValueKind.SEQUENCE,
    ValueKind.SET,
    ValueKind.MAPPING,
    ValueKind.FUNCTION,
})

# required always passes for these
REQUIRED_NOOP_KINDS = frozenset({ValueKind.ARRAY, ValueKind.RECORD})

_SCALAR_KINDS = frozenset({ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT, ValueKind.STRING})

_DYNAMIC_ANNOTATIONS = (Any, object, None)


class Ref:
    """Mutable box holding a single value.

    ``Ref`` is the explicit reference type of the package: the record walker
    follows chains of them transparently, and a field annotated as ``Ref``
    (or holding one) is a REFERENCE kind.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


@dataclass(frozen=True)
class FieldDescriptor:
    """One annotated field of a record, ready for evaluation."""
    name: str
    kind: ValueKind
    value: Any
    expression: str

    @property
    def length(self) -> int:
        """Length of a sized value; ``None`` has length 0."""
        if self.value is None:
            return 0
        if self.kind == ValueKind.CHANNEL:
            return self.value.qsize()
        return len(self.value)

    @property
    def is_zero(self) -> bool:
        """Whether the value equals the zero value of its kind."""
        if self.kind in REQUIRED_NOOP_KINDS:
            return False
        if self.kind in NIL_CHECKED_KINDS or self.value is None:
            return self.value is None
        if self.kind == ValueKind.BOOL:
            return not self.value
        if self.kind in NUMERIC_KINDS:
            return self.value == 0
        if self.kind == ValueKind.STRING:
            return len(self.value) == 0
        return False


def is_record(value: Any) -> bool:
    """Whether ``value`` is a record instance (not a record class)."""
    if isinstance(value, type):
        return False
    # __class__ rather than type() so weakref proxies resolve to the referent
    return is_record_type(value.__class__)


def is_record_type(tp: Any) -> bool:
    """Whether ``tp`` is a record class."""
    if not isinstance(tp, type):
        return False
    return issubclass(tp, BaseModel) or dataclasses.is_dataclass(tp)


def classify(annotation: Any, value: Any) -> ValueKind:
    """Classify a field from its declared annotation and current value.

    The annotation wins when it names a concrete kind. Dynamic annotations
    (missing, ``Any``, ``object``, plain unions) fall back to the runtime
    value. A scalar-declared field holding ``None`` is a REFERENCE.
    """
    kind = _kind_of_annotation(annotation)
    if kind is None:
        kind = _kind_of_value(value)
    if value is None and kind in _SCALAR_KINDS:
        return ValueKind.REFERENCE
    return kind


def _kind_of_value(value: Any) -> ValueKind:
    if value is None:
        return ValueKind.INTERFACE
    if isinstance(value, tuple) and not hasattr(value, "_fields"):
        return ValueKind.ARRAY
    if callable(value) and not isinstance(value, type) and not is_record(value):
        return ValueKind.FUNCTION
    return _kind_of_type(type(value)) or ValueKind.REFERENCE


def _kind_of_annotation(annotation: Any) -> ValueKind | None:
    if annotation in _DYNAMIC_ANNOTATIONS:
        return None

    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)

    if origin is typing.Annotated or origin is typing.Final:
        return _kind_of_annotation(args[0]) if args else None

    if origin is typing.Union or origin is types.UnionType:
        non_none = [arg for arg in args if arg is not type(None)]
        if len(non_none) < len(args):
            return ValueKind.REFERENCE
        return None

    if origin is typing.Literal:
        return None

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return ValueKind.SEQUENCE
        return ValueKind.ARRAY

    if origin is collections.abc.Callable:
        return ValueKind.FUNCTION

    if origin is not None:
        # special forms such as ClassVar are not classes
        return _kind_of_type(origin) if isinstance(origin, type) else None

    if isinstance(annotation, type):
        return _kind_of_type(annotation) or ValueKind.REFERENCE

    return None


def _kind_of_type(tp: type) -> ValueKind | None:
    if issubclass(tp, bool):
        return ValueKind.BOOL
    if issubclass(tp, int):
        return ValueKind.INT
    if issubclass(tp, float):
        return ValueKind.FLOAT
    if issubclass(tp, (str, bytes, bytearray)):
        return ValueKind.STRING
    if tp is tuple:
        return ValueKind.ARRAY
    if issubclass(tp, (queue.Queue, asyncio.Queue)):
        return ValueKind.CHANNEL
    if issubclass(tp, Ref):
        return ValueKind.REFERENCE
    if is_record_type(tp):
        return ValueKind.RECORD
    if issubclass(tp, collections.abc.Mapping):
        return ValueKind.MAPPING
    if issubclass(tp, collections.abc.Set):
        return ValueKind.SET
    if issubclass(tp, collections.abc.Sequence):
        return ValueKind.SEQUENCE
    if tp is collections.abc.Callable:
        return ValueKind.FUNCTION
    return None
