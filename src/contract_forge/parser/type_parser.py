"""Resolve YAML type nodes into IR types.

Accepted forms:

- a type expression string: ``int32``, ``User[]``, ``string | null``,
  ``'"active"'`` (string constant), ``404`` or ``true`` (constants);
- a mapping: an inline object type, ``name?`` keys being optional;
- a sequence: a union of its members.

References are not checked here; the verifier does that once every type
definition is known.
"""

import json
import re

import yaml

from contract_forge.errors import ParserError
from contract_forge.locations import Location
from contract_forge.parser.source import SourceFile, split_optional
from contract_forge.parser.types import (
    NULL,
    PRIMITIVE_TYPES,
    ObjectProperty,
    ObjectType,
    Type,
    array_type,
    boolean_constant,
    integer_constant,
    string_constant,
    type_reference,
    union_type,
)

INTEGER_PATTERN = re.compile(r"^-?\d+$")
TYPE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

INT_TAG = "tag:yaml.org,2002:int"
BOOL_TAG = "tag:yaml.org,2002:bool"
NULL_TAG = "tag:yaml.org,2002:null"
FLOAT_TAG = "tag:yaml.org,2002:float"


def parse_type(node: yaml.Node, source: SourceFile | None = None) -> Type:
    """Parse one type node.

    ``source`` is only needed to attach doc comments to object properties.
    """
    location = Location.from_mark(node.start_mark)
    if isinstance(node, yaml.MappingNode):
        return _parse_object(node, source)
    if isinstance(node, yaml.SequenceNode):
        if not node.value:
            raise ParserError("union type must have at least one member", location)
        members = [parse_type(member, source) for member in node.value]
        return members[0] if len(members) == 1 else union_type(*members)

    if node.tag == NULL_TAG:
        if node.value == "":
            raise ParserError("missing type", location)
        return NULL
    if node.tag == INT_TAG:
        if not INTEGER_PATTERN.match(node.value):
            raise ParserError("integer constants must be written in decimal", location)
        return integer_constant(int(node.value))
    if node.tag == BOOL_TAG:
        return boolean_constant(node.value.lower() in ("true", "yes", "on"))
    if node.tag == FLOAT_TAG:
        raise ParserError("floating point constants are not supported", location)
    return parse_type_expression(node.value, location)


def parse_type_expression(text: str, location: Location) -> Type:
    members = [_parse_member(member.strip(), location) for member in _split_union(text)]
    return members[0] if len(members) == 1 else union_type(*members)


def _parse_member(text: str, location: Location) -> Type:
    if not text:
        raise ParserError("empty type expression", location)
    if text.endswith("[]"):
        return array_type(_parse_member(text[:-2].strip(), location))
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        try:
            return string_constant(json.loads(text))
        except json.JSONDecodeError:
            raise ParserError(f"invalid string constant {text}", location) from None
    if INTEGER_PATTERN.match(text):
        return integer_constant(int(text))
    if text in ("true", "false"):
        return boolean_constant(text == "true")
    if text in PRIMITIVE_TYPES:
        return PRIMITIVE_TYPES[text]
    if TYPE_NAME_PATTERN.match(text):
        return type_reference(text)
    raise ParserError(f"unknown type expression '{text}'", location)


def _split_union(text: str) -> list[str]:
    """Split on ``|`` outside of string constants."""
    members = []
    current = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "|":
            members.append("".join(current))
            current = []
            continue
        current.append(char)
    members.append("".join(current))
    return members


def _parse_object(node: yaml.MappingNode, source: SourceFile | None) -> ObjectType:
    properties = []
    seen = set()
    for key_node, value_node in node.value:
        location = Location.from_mark(key_node.start_mark)
        if not isinstance(key_node, yaml.ScalarNode):
            raise ParserError("object property names must be plain names", location)
        name, optional = split_optional(key_node.value)
        if not name:
            raise ParserError("object property name must not be empty", location)
        if name in seen:
            raise ParserError(f"duplicate property '{name}'", location)
        seen.add(name)
        doc = source.doc_comment(key_node) if source else None
        properties.append(
            ObjectProperty(
                name=name,
                type=parse_type(value_node, source),
                optional=optional,
                description=doc.description if doc else None,
            )
        )
    return ObjectType(properties=tuple(properties))
