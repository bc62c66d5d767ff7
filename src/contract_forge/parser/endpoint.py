"""Parser for a single endpoint declaration.

::

    getUser:
      method: GET
      path: /users/:id
      request:
        pathParams:
          id: int32
        headers:
          Authorization: string
        body: UpdateUser
      response: User
      errors:
        404: NotFound
      defaultError: ApiError
"""

import yaml

from contract_forge.errors import OptionalNotAllowedError, ParserError
from contract_forge.locations import Location, LociTable
from contract_forge.naming import (
    RESERVED_IDENTIFIERS,
    endpoint_property_type_name,
    is_identifier,
    parameter_identifier,
)
from contract_forge.parser.base import (
    DynamicPathComponent,
    Endpoint,
    Header,
    PathParam,
    StaticPathComponent,
)
from contract_forge.parser.headers import parse_headers
from contract_forge.parser.http import HTTP_METHODS, split_path
from contract_forge.parser.path_params import parse_path_params
from contract_forge.parser.source import SourceFile
from contract_forge.parser.type_parser import parse_type
from contract_forge.parser.types import VOID, Type, TypeTable

ENDPOINT_KEYS = ("method", "path", "request", "response", "errors", "defaultError")


def _location(node: yaml.Node) -> Location:
    return Location.from_mark(node.start_mark)


def parse_endpoint(
    source: SourceFile,
    key_node: yaml.ScalarNode,
    value_node: yaml.Node,
    type_table: TypeTable,
    loci_table: LociTable,
) -> Endpoint:
    name = key_node.value
    location = _location(key_node)
    if not is_identifier(name):
        raise ParserError(f"endpoint name '{name}' must be a valid identifier", location)
    if name in type_table:
        raise ParserError(f"endpoint name '{name}' clashes with the type of the same name", location)

    fields: dict[str, tuple[yaml.ScalarNode, yaml.Node]] = {}
    for field_key, field_value in source.mapping_items(value_node, f"endpoint '{name}'"):
        if field_key.value not in ENDPOINT_KEYS:
            raise ParserError(f"unknown endpoint field '{field_key.value}'", _location(field_key))
        fields[field_key.value] = (field_key, field_value)

    method = _parse_method(_required(fields, "method", name, location))
    path_node = _required(fields, "path", name, location)

    path_params: list[PathParam] = []
    headers: dict[str, Header] = {}
    request_type: Type = VOID
    if "request" in fields:
        request_node = fields["request"][1]
        for param_key, param_value in source.mapping_items(request_node, "request"):
            declaration = source.parameter_declaration(param_key, param_value)
            if declaration.name == "pathParams":
                path_params = parse_path_params(declaration, type_table, loci_table)
            elif declaration.name == "headers":
                headers = parse_headers(declaration, type_table, loci_table)
            elif declaration.name == "body":
                if declaration.optional:
                    raise OptionalNotAllowedError(
                        "@body parameter cannot be optional", declaration.question_location
                    )
                request_type = parse_type(param_value, source)
            else:
                raise ParserError(f"unknown request parameter '@{declaration.name}'", declaration.location)

    path = _build_path(path_node, path_params)
    _check_parameter_identifiers(name, path_params, headers, location)

    custom_error_types: dict[int, Type] = {}
    if "errors" in fields:
        for status_key, error_node in source.mapping_items(fields["errors"][1], "errors"):
            custom_error_types[_parse_status(status_key)] = parse_type(error_node, source)

    doc = source.doc_comment(key_node)
    return Endpoint(
        method=method,
        path=tuple(path),
        headers=headers,
        request_type=request_type,
        response_type=_optional_type(fields, "response", source),
        custom_error_types=custom_error_types,
        default_error_type=_optional_type(fields, "defaultError", source),
        path_params=tuple(path_params),
        description=doc.description if doc else None,
    )


def _required(fields: dict, key: str, endpoint_name: str, location: Location) -> yaml.Node:
    if key not in fields:
        raise ParserError(f"endpoint '{endpoint_name}' is missing '{key}'", location)
    return fields[key][1]


def _optional_type(fields: dict, key: str, source: SourceFile) -> Type:
    if key not in fields:
        return VOID
    return parse_type(fields[key][1], source)


def _parse_method(node: yaml.Node) -> str:
    method = node.value.upper() if isinstance(node, yaml.ScalarNode) else ""
    if method not in HTTP_METHODS:
        raise ParserError(
            f"unsupported HTTP method, expected one of {', '.join(HTTP_METHODS)}", _location(node)
        )
    return method


def _parse_status(key_node: yaml.ScalarNode) -> int:
    if not key_node.value.isdigit() or not 100 <= int(key_node.value) <= 599:
        raise ParserError(
            f"error status '{key_node.value}' must be an HTTP status code", _location(key_node)
        )
    return int(key_node.value)


def _build_path(path_node: yaml.Node, path_params: list[PathParam]) -> list:
    location = _location(path_node)
    if not isinstance(path_node, yaml.ScalarNode) or not path_node.value.startswith("/"):
        raise ParserError("path must be a string starting with '/'", location)

    params_by_name = {param.name: param for param in path_params}
    components = []
    seen: set[str] = set()
    for kind, text in split_path(path_node.value):
        if kind == "static":
            components.append(StaticPathComponent(content=text))
            continue
        if text in seen:
            raise ParserError(f"path parameter ':{text}' appears more than once", location)
        seen.add(text)
        param = params_by_name.get(text)
        if param is None:
            raise ParserError(f"path parameter ':{text}' is not declared in @pathParams", location)
        components.append(DynamicPathComponent(name=text, type=param.type))

    for name in params_by_name:
        if name not in seen:
            raise ParserError(f"@pathParams property '{name}' does not appear in the path", location)
    return components


def _check_parameter_identifiers(
    endpoint_name: str,
    path_params: list[PathParam],
    headers: dict[str, Header],
    location: Location,
) -> None:
    """Every parameter becomes a local, a type alias and a validator in the generated code.

    Locals must be distinct and unreserved; alias names must be distinct within the endpoint.
    """
    taken: dict[str, str] = {}
    candidates = [(parameter_identifier(p.name), f"path parameter '{p.name}'") for p in path_params]
    candidates += [(ident, f"header '{h.header_field_name}'") for ident, h in headers.items()]
    for identifier, what in candidates:
        if identifier in RESERVED_IDENTIFIERS or identifier == endpoint_name:
            raise ParserError(f"{what} clashes with the reserved name '{identifier}'", location)
        if identifier in taken:
            raise ParserError(f"{what} clashes with {taken[identifier]}", location)
        taken[identifier] = what

    aliases: dict[str, str] = {}
    named = [
        (endpoint_property_type_name(endpoint_name, "param", p.name), f"path parameter '{p.name}'")
        for p in path_params
    ]
    named += [
        (endpoint_property_type_name(endpoint_name, "header", ident), f"header '{h.header_field_name}'")
        for ident, h in headers.items()
    ]
    for alias, what in named:
        if alias in aliases:
            raise ParserError(f"{what} and {aliases[alias]} both generate the type '{alias}'", location)
        aliases[alias] = what
