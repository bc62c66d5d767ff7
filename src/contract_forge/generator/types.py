"""TypeScript type rendering and the generated ``types.ts`` module."""

import json

from contract_forge.generator.emit import Statement, TypeAlias
from contract_forge.generator.writer import render_source
from contract_forge.naming import IDENTIFIER_PATTERN, endpoint_property_type_name
from contract_forge.parser.base import Api, Endpoint, Header
from contract_forge.parser.types import VOID, Type, TypeKind, nested_types, union_type


def type_node(t: Type) -> str:
    """Render an IR type as a TypeScript type expression."""
    match t.kind:
        case TypeKind.NULL:
            return "null"
        case TypeKind.BOOLEAN:
            return "boolean"
        case TypeKind.BOOLEAN_CONSTANT:
            return "true" if t.value else "false"
        case TypeKind.STRING | TypeKind.DATE | TypeKind.DATETIME:
            return "string"
        case TypeKind.STRING_CONSTANT:
            return json.dumps(t.value)
        case TypeKind.NUMBER | TypeKind.INT32 | TypeKind.INT64 | TypeKind.FLOAT | TypeKind.DOUBLE:
            return "number"
        case TypeKind.INTEGER_CONSTANT:
            return str(t.value)
        case TypeKind.OBJECT:
            if not t.properties:
                return "{}"
            members = "; ".join(
                f"{property_name(p.name)}{'?' if p.optional else ''}: {type_node(p.type)}"
                for p in t.properties
            )
            return f"{{ {members} }}"
        case TypeKind.ARRAY:
            element = type_node(t.element_type)
            if t.element_type.kind == TypeKind.UNION:
                element = f"({element})"
            return f"{element}[]"
        case TypeKind.UNION:
            return " | ".join(type_node(member) for member in t.types)
        case TypeKind.TYPE_REFERENCE:
            return t.name
        case TypeKind.VOID:
            return "void"
    raise ValueError(f"unknown type kind {t.kind}")


def promise_type_node(t: Type) -> str:
    return f"Promise<{type_node(t)}>"


def property_name(name: str) -> str:
    return name if IDENTIFIER_PATTERN.match(name) else json.dumps(name)


def header_type(header: Header) -> Type:
    """Declared type of a header as the handler receives it."""
    return union_type(header.type, VOID) if header.optional else header.type


def endpoint_property_types(api: Api, endpoint_name: str, endpoint: Endpoint) -> list[tuple[str, Type]]:
    """Every aliased part of an endpoint, as ``(alias name, type)`` pairs."""
    properties = []
    if not api.is_void(endpoint.request_type):
        properties.append((endpoint_property_type_name(endpoint_name, "request"), endpoint.request_type))
    for component in endpoint.dynamic_components():
        properties.append((endpoint_property_type_name(endpoint_name, "param", component.name), component.type))
    for header_name, header in endpoint.headers.items():
        properties.append((endpoint_property_type_name(endpoint_name, "header", header_name), header_type(header)))
    properties.append((endpoint_property_type_name(endpoint_name, "response"), endpoint.response_type))
    for status_code, error_type in endpoint.custom_error_types.items():
        properties.append(
            (endpoint_property_type_name(endpoint_name, "customError", str(status_code)), error_type)
        )
    properties.append((endpoint_property_type_name(endpoint_name, "defaultError"), endpoint.default_error_type))
    return properties


def referenced_type_names(types: list[Type]) -> list[str]:
    """Distinct type-reference names used anywhere in ``types``, first use first."""
    names: list[str] = []
    for root in types:
        for t in nested_types(root):
            if t.kind == TypeKind.TYPE_REFERENCE and t.name not in names:
                names.append(t.name)
    return names


def generate_types_source(api: Api) -> str:
    statements: list[Statement] = [
        TypeAlias(definition.name, type_node(definition.type)) for definition in api.types.values()
    ]
    for endpoint_name, endpoint in api.endpoints.items():
        statements.extend(
            TypeAlias(type_name, type_node(t))
            for type_name, t in endpoint_property_types(api, endpoint_name, endpoint)
        )
    return render_source(statements)
