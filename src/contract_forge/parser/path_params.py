"""Parser for ``@pathParams`` declarations.

A path-parameter declaration is an inline object type whose properties are
the placeholders of the endpoint's path template::

    pathParams:
      # The user identifier
      # @example first
      # 123
      id: int32

Checks run fail-fast, in declaration order; the first violation is raised.
"""

import json
import re
from typing import Any, assert_never

from contract_forge.errors import OptionalNotAllowedError, ParserError
from contract_forge.locations import Location, LociTable, type_key
from contract_forge.parser.base import Example, PathParam
from contract_forge.parser.declarations import ParameterDeclaration, PropertySignature
from contract_forge.parser.http import is_path_param_type_safe
from contract_forge.parser.type_parser import parse_type
from contract_forge.parser.types import Type, TypeKind, TypeTable

NAME_PATTERN = re.compile(r"^[\w-]*$", re.ASCII)
INTEGER_PATTERN = re.compile(r"^-?\d+$")


def parse_path_params(
    declaration: ParameterDeclaration,
    type_table: TypeTable,
    loci_table: LociTable,
) -> list[PathParam]:
    """Convert a ``@pathParams`` declaration into path parameters sorted by name."""
    declaration.require_decorator("pathParams")
    if declaration.optional:
        raise OptionalNotAllowedError(
            "@pathParams parameter cannot be optional", declaration.question_location
        )
    if declaration.type_literal is None:
        raise ParserError(
            "@pathParams type must be an inline object type",
            Location.from_mark(declaration.type_node.start_mark),
        )

    path_params = [
        _extract_path_param(prop, type_table, loci_table)
        for prop in declaration.type_literal.properties
    ]
    # names are unique: the source front-end rejects duplicate keys
    return sorted(path_params, key=lambda param: param.name)


def _extract_path_param(
    prop: PropertySignature, type_table: TypeTable, loci_table: LociTable
) -> PathParam:
    if prop.optional:
        raise OptionalNotAllowedError(
            "@pathParams property cannot be optional", prop.question_location
        )
    name = _extract_name(prop)
    param_type = _extract_type(prop, type_table, loci_table)
    description = prop.doc.description if prop.doc else None
    examples = _extract_examples(prop, type_table.resolve(param_type))
    return PathParam(name=name, type=param_type, description=description, examples=examples)


def _extract_name(prop: PropertySignature) -> str:
    if not NAME_PATTERN.match(prop.name):
        raise ParserError(
            "@pathParams property name may only contain alphanumeric, underscore and hyphen characters",
            prop.location,
        )
    if not prop.name:
        raise ParserError("@pathParams property name must not be empty", prop.location)
    return prop.name


def _extract_type(prop: PropertySignature, type_table: TypeTable, loci_table: LociTable) -> Type:
    param_type = parse_type(prop.type_node)
    try:
        safe = is_path_param_type_safe(param_type, type_table)
    except KeyError as e:
        raise ParserError(f"unknown type '{e.args[0]}'", prop.location) from None
    except ValueError as e:
        raise ParserError(str(e), prop.location) from None

    if not safe:
        related = ()
        if param_type.kind == TypeKind.TYPE_REFERENCE:
            defined_at = loci_table.get(type_key(param_type.name))
            if defined_at is not None:
                related = ((f"'{param_type.name}' is defined here", defined_at),)
        raise ParserError(
            "path parameter type may only be a URL-safe type, or an array of URL-safe types",
            prop.location,
            related,
        )
    return param_type


def _extract_examples(prop: PropertySignature, resolved_type: Type) -> tuple[Example, ...] | None:
    tags = prop.doc.tags_named("example") if prop.doc else []
    if not tags:
        return None
    if any(tag.text is None for tag in tags):
        raise ParserError("@pathParams example must not be empty", prop.location)

    examples: list[Example] = []
    for tag in tags:
        lines = tag.text.split("\n")
        example_name = lines[0].strip()
        example_value = lines[1].strip() if len(lines) > 1 else ""
        if not example_name or not example_value:
            raise ParserError("@pathParams malformed example", prop.location)
        if any(example.name == example_name for example in examples):
            raise ParserError("@pathParams duplicate example name", prop.location)
        if resolved_type.kind == TypeKind.STRING and not (
            example_value.startswith('"') and example_value.endswith('"')
        ):
            raise ParserError("@pathParams string examples must be quoted", prop.location)
        try:
            value = json.loads(example_value, parse_constant=_reject_constant)
        except ValueError:
            raise ParserError("could not parse @pathParams example", prop.location) from None
        examples.append(Example(name=example_name, value=value))

    expected = type_category(resolved_type.kind)
    if any(example_category(example.value) != expected for example in examples):
        raise ParserError("@pathParams type of example must match type of param", prop.location)
    return tuple(examples)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def example_category(value: Any) -> str:
    """Runtime category of a parsed example value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        # integral floats print without a fraction in JavaScript: 2.0 -> "2"
        return "number"
    if INTEGER_PATTERN.match(str(value)):
        return "number"
    return "string"


def type_category(kind: TypeKind) -> str:
    """Category an example of a parameter of this kind must have."""
    match kind:
        case TypeKind.INT32 | TypeKind.INT64 | TypeKind.FLOAT | TypeKind.DOUBLE:
            return "number"
        case (
            TypeKind.NULL
            | TypeKind.BOOLEAN
            | TypeKind.BOOLEAN_CONSTANT
            | TypeKind.STRING
            | TypeKind.STRING_CONSTANT
            | TypeKind.NUMBER
            | TypeKind.INTEGER_CONSTANT
            | TypeKind.DATE
            | TypeKind.DATETIME
            | TypeKind.OBJECT
            | TypeKind.ARRAY
            | TypeKind.UNION
            | TypeKind.TYPE_REFERENCE
            | TypeKind.VOID
        ):
            return kind.value
        case _:
            assert_never(kind)
