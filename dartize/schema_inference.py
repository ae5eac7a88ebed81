"""Sample-driven schema inference for JSON documents.

This module provides the inference primitives shared by:
- JsonToDart: the value-object class renderer
- JsonToDartModel: the mutable model class renderer

A single sample document (or the first element of a sample array) is the
structural template. Each top-level key becomes a field descriptor carrying
the original key, the legalized identifier, the inferred type and the sample
value.
"""

import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dartize.identifiers import capitalize, legalize

logger = logging.getLogger(__name__)

JsonNode = Dict[str, 'JsonNode'] | List['JsonNode'] | str | bool | int | float | None


class DartizeError(Exception):
    """
    Base exception for conversion failures.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
    """

    def __init__(self, message: str, context: Optional[str] = None) -> None:
        self.message = message
        self.context = context
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class ParseError(DartizeError):
    """Raised when the input text is not well-formed JSON."""


class EmptyTemplateError(DartizeError):
    """Raised when an array sample has no element to use as template."""

    def __init__(self, context: Optional[str] = None) -> None:
        super().__init__('Cannot generate class from empty array', context)


class InvalidJsonError(DartizeError):
    """Raised when the sample cannot be inferred into fields."""


class InvalidClassNameError(DartizeError):
    """Raised when the requested class name is not a usable identifier."""


class TypeKind(enum.Enum):
    """The closed set of inferred types."""
    STRING = 'string'
    BOOL = 'bool'
    INTEGER = 'integer'
    FLOAT = 'float'
    OBJECT = 'object'
    LIST = 'list'
    DYNAMIC = 'dynamic'


@dataclass(frozen=True)
class TypeTag:
    """An inferred type. LIST carries an element type, OBJECT a synthesized type name."""
    kind: TypeKind
    element: Optional['TypeTag'] = None
    type_name: Optional[str] = None

    @property
    def is_list(self) -> bool:
        return self.kind == TypeKind.LIST

    @property
    def is_object(self) -> bool:
        return self.kind == TypeKind.OBJECT


@dataclass(frozen=True)
class FieldDescriptor:
    """A field inferred from one top-level key of the template object."""
    json_key: str
    identifier: str
    type: TypeTag
    sample_value: Any = None


def parse_json_sample(json_text: str) -> JsonNode:
    """Parses JSON text, keeping the decoder message on failure."""
    try:
        return json.loads(json_text)
    except json.JSONDecodeError as e:
        raise ParseError(str(e)) from e


def select_template(value: JsonNode) -> Dict[str, JsonNode]:
    """
    Selects the structural template of a sample.

    Args:
        value: A parsed JSON object, or an array whose first element is used.

    Returns:
        The template object.

    Raises:
        EmptyTemplateError: If the sample is an empty array.
        InvalidJsonError: If the template is not a JSON object.
    """
    if isinstance(value, list):
        if len(value) == 0:
            raise EmptyTemplateError()
        value = value[0]
    if not isinstance(value, dict):
        raise InvalidJsonError('The JSON sample must be an object or an array of objects',
                               type(value).__name__)
    return value


class SchemaInferrer:
    """Infers field descriptors from a JSON sample."""

    def python_value_to_type(self, identifier: str, python_value: Any) -> TypeTag:
        """Maps a Python value decoded from JSON to a type tag.

        Args:
            identifier: Identifier of the field the value belongs to, used to
                synthesize nested type names
            python_value: The sample value

        Returns:
            The inferred type tag
        """
        if python_value is None:
            return TypeTag(TypeKind.DYNAMIC)
        # bool is a subclass of int
        if isinstance(python_value, bool):
            return TypeTag(TypeKind.BOOL)
        if isinstance(python_value, int):
            return TypeTag(TypeKind.INTEGER)
        if isinstance(python_value, float):
            if python_value.is_integer():
                return TypeTag(TypeKind.INTEGER)
            return TypeTag(TypeKind.FLOAT)
        if isinstance(python_value, str):
            return TypeTag(TypeKind.STRING)
        if isinstance(python_value, dict):
            return TypeTag(TypeKind.OBJECT, type_name=capitalize(identifier) + 'Model')
        if isinstance(python_value, list):
            if len(python_value) == 0:
                return TypeTag(TypeKind.LIST, element=TypeTag(TypeKind.DYNAMIC))
            return TypeTag(TypeKind.LIST, element=self.python_value_to_type(identifier, python_value[0]))
        return TypeTag(TypeKind.DYNAMIC)

    def infer_fields(self, value: JsonNode) -> List[FieldDescriptor]:
        """Infers the ordered field descriptors of a JSON sample.

        Args:
            value: A parsed JSON object or a non-empty array of objects

        Returns:
            One descriptor per legal, non-keyword key, in document order
        """
        template = select_template(value)
        fields: List[FieldDescriptor] = []
        for key, sample in template.items():
            identifier = legalize(key)
            if identifier is None:
                logger.debug("Skipping key %r: not a legal Dart identifier", key)
                continue
            fields.append(FieldDescriptor(
                json_key=key,
                identifier=identifier,
                type=self.python_value_to_type(identifier, sample),
                sample_value=sample))
        return fields


def infer_fields(value: JsonNode) -> List[FieldDescriptor]:
    """Infers field descriptors from a parsed JSON sample."""
    return SchemaInferrer().infer_fields(value)
