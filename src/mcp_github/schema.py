"""
Declarative parameter schemas for MCP tools.

A schema is an ordered mapping of parameter name to a field description.
Fields are one of four kinds (primitive, enum, array, object) and are checked
by a single generic validator. The same schema objects render the JSON Schema
advertised by ``list_tools``, so the catalog can never drift from what the
handlers accept.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import ValidationError

_PRIMITIVE_TYPES = ("string", "integer", "number", "boolean")


@dataclass(frozen=True)
class Field:
    """Common attributes of every field kind."""

    description: str = ""
    required: bool = False

    def check(self, value: Any, path: str, problems: List[str]) -> Any:
        raise NotImplementedError

    def to_json_schema(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _base_json_schema(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        if self.description:
            schema["description"] = self.description
        return schema


@dataclass(frozen=True)
class Primitive(Field):
    """A scalar value: string, integer, number or boolean."""

    type: str = "string"
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def __post_init__(self):
        if self.type not in _PRIMITIVE_TYPES:
            raise ValueError(f"Unsupported primitive type '{self.type}'")

    def check(self, value: Any, path: str, problems: List[str]) -> Any:
        if not _matches_type(self.type, value):
            problems.append(f"{path}: expected {self.type}, got {_describe(value)}")
            return None
        if self.minimum is not None and value < self.minimum:
            problems.append(f"{path}: must be >= {_number(self.minimum)}")
        if self.maximum is not None and value > self.maximum:
            problems.append(f"{path}: must be <= {_number(self.maximum)}")
        return value

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type}
        if self.minimum is not None:
            schema["minimum"] = _number(self.minimum)
        if self.maximum is not None:
            schema["maximum"] = _number(self.maximum)
        return self._base_json_schema(schema)


@dataclass(frozen=True)
class Enum(Field):
    """A string restricted to a fixed set of literals."""

    values: Tuple[str, ...] = ()

    def check(self, value: Any, path: str, problems: List[str]) -> Any:
        if value not in self.values:
            allowed = ", ".join(self.values)
            problems.append(f"{path}: must be one of [{allowed}], got {value!r}")
            return None
        return value

    def to_json_schema(self) -> Dict[str, Any]:
        return self._base_json_schema({"type": "string", "enum": list(self.values)})


@dataclass(frozen=True)
class Array(Field):
    """A list whose items all match ``items``."""

    items: Field = field(default_factory=Primitive)
    min_items: int = 0

    def check(self, value: Any, path: str, problems: List[str]) -> Any:
        if not isinstance(value, (list, tuple)):
            problems.append(f"{path}: expected array, got {_describe(value)}")
            return None
        if len(value) < self.min_items:
            problems.append(f"{path}: must contain at least {self.min_items} item(s)")
        result = []
        for index, item in enumerate(value):
            item_path = f"{path}[{index}]"
            if item is None:
                problems.append(f"{item_path}: must not be null")
                continue
            result.append(self.items.check(item, item_path, problems))
        return result

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": "array", "items": self.items.to_json_schema()}
        if self.min_items:
            schema["minItems"] = self.min_items
        return self._base_json_schema(schema)


@dataclass(frozen=True)
class Object(Field):
    """A nested mapping validated against its own schema."""

    schema: "Schema" = field(default_factory=lambda: Schema())

    def check(self, value: Any, path: str, problems: List[str]) -> Any:
        if not isinstance(value, Mapping):
            problems.append(f"{path}: expected object, got {_describe(value)}")
            return None
        return self.schema._check(value, f"{path}.", problems)

    def to_json_schema(self) -> Dict[str, Any]:
        return self._base_json_schema(self.schema.to_json_schema())


class Schema:
    """Ordered, immutable mapping of parameter name to field."""

    def __init__(self, fields: Optional[Mapping[str, Field]] = None):
        self._fields: Dict[str, Field] = dict(fields or {})

    @property
    def fields(self) -> Mapping[str, Field]:
        return dict(self._fields)

    @property
    def required(self) -> List[str]:
        return [name for name, rule in self._fields.items() if rule.required]

    def extend(self, **fields: Field) -> "Schema":
        """Return a new schema with ``fields`` layered over this one."""
        merged = dict(self._fields)
        merged.update(fields)
        return Schema(merged)

    def validate(self, arguments: Any) -> Dict[str, Any]:
        """
        Validate arguments against this schema.

        Unknown keys are ignored and dropped from the result.

        Args:
            arguments: Raw arguments from the caller (None is treated as {})

        Returns:
            Dictionary containing only the declared, non-null parameters

        Raises:
            ValidationError: Listing every offending field
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ValidationError([f"arguments: expected object, got {_describe(arguments)}"])

        problems: List[str] = []
        result = self._check(arguments, "", problems)
        if problems:
            raise ValidationError(problems)
        return result

    def _check(self, value: Mapping[str, Any], prefix: str, problems: List[str]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for name, rule in self._fields.items():
            path = f"{prefix}{name}"
            raw = value.get(name)
            if raw is None:
                if rule.required:
                    problems.append(f"{path}: is required")
                continue
            result[name] = rule.check(raw, path, problems)
        return result

    def to_json_schema(self) -> Dict[str, Any]:
        """Render as a JSON Schema object for the MCP tool catalog."""
        return {
            "type": "object",
            "properties": {name: rule.to_json_schema() for name, rule in self._fields.items()},
            "required": self.required,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"Schema({', '.join(self._fields)})"


def validate(schema: Schema, arguments: Any) -> Dict[str, Any]:
    """Validate ``arguments`` against ``schema``. See :meth:`Schema.validate`."""
    return schema.validate(arguments)


def _matches_type(kind: str, value: Any) -> bool:
    # bool is a subclass of int; never accept it as a number
    if kind == "string":
        return isinstance(value, str)
    if kind == "boolean":
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if kind == "integer":
        return isinstance(value, int)
    return isinstance(value, (int, float))


def _describe(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _number(value: float) -> Any:
    return int(value) if float(value).is_integer() else value


# Shared building blocks

def string(description: str = "", required: bool = False) -> Primitive:
    return Primitive(description=description, required=required, type="string")


def integer(description: str = "", required: bool = False,
            minimum: Optional[int] = None, maximum: Optional[int] = None) -> Primitive:
    return Primitive(description=description, required=required, type="integer",
                     minimum=minimum, maximum=maximum)


def boolean(description: str = "", required: bool = False) -> Primitive:
    return Primitive(description=description, required=required, type="boolean")


def enum(*values: str, description: str = "", required: bool = False) -> Enum:
    return Enum(description=description, required=required, values=tuple(values))


EMPTY = Schema()

REPO_BASE = Schema({
    "owner": string("Repository owner (user or org)", required=True),
    "repo": string("Repository name", required=True),
})

PAGINATION = {
    "per_page": integer("Results per page (max 100, default 30)", minimum=1, maximum=100),
    "page": integer("Page number (default 1)", minimum=1),
}
