"""Parser for ``@headers`` declarations.

Properties are keyed by the header's wire name; the generated code binds each
header to a camelCase local (``X-Auth-Token`` -> ``xAuthToken``).
"""

import re

from contract_forge.errors import OptionalNotAllowedError, ParserError
from contract_forge.locations import Location, LociTable, type_key
from contract_forge.naming import parameter_identifier
from contract_forge.parser.base import Header
from contract_forge.parser.declarations import ParameterDeclaration, PropertySignature
from contract_forge.parser.http import is_url_safe
from contract_forge.parser.type_parser import parse_type
from contract_forge.parser.types import TypeKind, TypeTable

NAME_PATTERN = re.compile(r"^[\w-]*$", re.ASCII)


def parse_headers(
    declaration: ParameterDeclaration,
    type_table: TypeTable,
    loci_table: LociTable,
) -> dict[str, Header]:
    """Convert a ``@headers`` declaration into headers keyed by local identifier."""
    declaration.require_decorator("headers")
    if declaration.optional:
        raise OptionalNotAllowedError(
            "@headers parameter cannot be optional", declaration.question_location
        )
    if declaration.type_literal is None:
        raise ParserError(
            "@headers type must be an inline object type",
            Location.from_mark(declaration.type_node.start_mark),
        )

    headers: dict[str, Header] = {}
    for prop in declaration.type_literal.properties:
        header = _extract_header(prop, type_table, loci_table)
        identifier = parameter_identifier(header.header_field_name)
        if identifier in headers:
            raise ParserError(
                f"header '{prop.name}' clashes with header '{headers[identifier].header_field_name}'",
                prop.location,
            )
        headers[identifier] = header
    return headers


def _extract_header(prop: PropertySignature, type_table: TypeTable, loci_table: LociTable) -> Header:
    if not NAME_PATTERN.match(prop.name):
        raise ParserError(
            "@headers property name may only contain alphanumeric, underscore and hyphen characters",
            prop.location,
        )
    if not prop.name:
        raise ParserError("@headers property name must not be empty", prop.location)

    header_type = parse_type(prop.type_node)
    try:
        safe = is_url_safe(header_type, type_table)
    except KeyError as e:
        raise ParserError(f"unknown type '{e.args[0]}'", prop.location) from None
    except ValueError as e:
        raise ParserError(str(e), prop.location) from None
    if not safe:
        related = ()
        if header_type.kind == TypeKind.TYPE_REFERENCE and type_key(header_type.name) in loci_table:
            related = ((f"'{header_type.name}' is defined here", loci_table.get(type_key(header_type.name))),)
        raise ParserError("header type may only be a URL-safe type", prop.location, related)

    return Header(
        header_field_name=prop.name,
        type=header_type,
        optional=prop.optional,
        description=prop.doc.description if prop.doc else None,
    )
