"""Field metadata access for dataclasses and pydantic models.

Rule expressions live in per-field metadata under a string key:

- dataclasses: ``field(metadata={"verify": "min=3"})``, or ``rules("min=3")``
- pydantic: ``Field(json_schema_extra={"verify": "min=3"})``

Fields whose names start with an underscore are private and never yielded,
so they are never verified.
"""

import dataclasses
import logging
import typing
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel

from .kinds import FieldDescriptor, classify

logger = logging.getLogger(__name__)

DEFAULT_TAG_KEY = "verify"


def rules(expression: str, *, tag_key: str = DEFAULT_TAG_KEY, **field_kwargs: Any) -> Any:
    """Declare a dataclass field carrying a rule expression.

    Extra keyword arguments go to ``dataclasses.field``; existing
    ``metadata`` entries are kept.

    Example:
        @dataclass
        class Order:
            quantity: int = rules("min=1,max=100", default=1)
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[tag_key] = expression
    return dataclasses.field(metadata=metadata, **field_kwargs)


def iter_rule_fields(record: Any, tag_key: str = DEFAULT_TAG_KEY) -> Iterator[FieldDescriptor]:
    """Yield a descriptor for every visible field of ``record`` that has rules.

    Args:
        record: Dataclass or pydantic model instance
        tag_key: Metadata key holding the rule expression

    Yields:
        FieldDescriptor in field declaration order
    """
    record_type = record.__class__
    if issubclass(record_type, BaseModel):
        entries = _model_entries(record, record_type, tag_key)
    else:
        entries = _dataclass_entries(record, record_type, tag_key)

    for name, annotation, expression in entries:
        if name.startswith("_"):
            logger.debug(f"Skipping private field {name}")
            continue
        if expression is None:
            continue
        if not isinstance(expression, str):
            raise TypeError(f"rule expression for field {name} must be a string, got {type(expression).__name__}")

        value = getattr(record, name)
        yield FieldDescriptor(name, classify(annotation, value), value, expression)


def _dataclass_entries(record: Any, record_type: type, tag_key: str) -> Iterator[tuple[str, Any, Any]]:
    hints = _type_hints(record_type)
    for field in dataclasses.fields(record):
        annotation = hints.get(field.name, field.type)
        if isinstance(annotation, str):
            # unresolved forward reference
            annotation = None
        yield field.name, annotation, field.metadata.get(tag_key)


def _model_entries(record: BaseModel, record_type: type[BaseModel], tag_key: str) -> Iterator[tuple[str, Any, Any]]:
    for name, field_info in record_type.model_fields.items():
        extra = field_info.json_schema_extra
        expression = extra.get(tag_key) if isinstance(extra, dict) else None
        yield name, field_info.annotation, expression


def _type_hints(record_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError) as e:
        logger.debug(f"Could not resolve annotations of {record_type.__name__}: {e}")
        return {}
