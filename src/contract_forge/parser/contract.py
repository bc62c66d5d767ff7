"""Contract file parser: YAML source -> Api IR.

Type definitions are parsed first so that endpoint parameters can be checked
against a complete type table. Failures are collected per type definition and
per endpoint, so one run reports every broken declaration.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from contract_forge.errors import ParserError
from contract_forge.locations import Location, LociTable, endpoint_key, type_key
from contract_forge.parser.base import Api, Endpoint
from contract_forge.parser.endpoint import parse_endpoint
from contract_forge.parser.source import SourceFile
from contract_forge.parser.type_parser import parse_type
from contract_forge.parser.types import PRIMITIVE_TYPES, TypeDefinition, TypeTable
from contract_forge.parser.verify import verify_api

CONTRACT_KEYS = ("name", "types", "endpoints")
TYPE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class ParseResult:
    """Outcome of parsing one contract: the IR, or the errors that prevented it."""

    api: Api | None
    errors: list[ParserError] = field(default_factory=list)
    loci_table: LociTable = field(default_factory=LociTable)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_contract(file_path: Path) -> ParseResult:
    """Parse a contract file."""
    return parse_contract_source(SourceFile.read(file_path))


def parse_contract_source(source: SourceFile) -> ParseResult:
    try:
        root = source.compose()
        sections = {key.value: (key, value) for key, value in source.mapping_items(root, "contract")}
    except ParserError as e:
        return ParseResult(api=None, errors=[e])

    errors: list[ParserError] = []
    for key, _ in sections.values():
        if key.value not in CONTRACT_KEYS:
            errors.append(ParserError(f"unknown contract section '{key.value}'", Location.from_mark(key.start_mark)))

    name = Path(source.path).stem
    description = None
    if "name" in sections:
        name_key, name_node = sections["name"]
        name = str(name_node.value)
        doc = source.doc_comment(name_key)
        description = doc.description if doc else None

    definitions, type_locations = _parse_types(source, sections, errors)
    type_table = TypeTable(definitions)
    loci_table = LociTable(type_locations)

    endpoints: dict[str, Endpoint] = {}
    endpoint_locations: dict[str, Location] = {}
    if "endpoints" in sections:
        try:
            items = source.mapping_items(sections["endpoints"][1], "endpoints")
        except ParserError as e:
            errors.append(e)
            items = []
        for key, value in items:
            endpoint_locations[endpoint_key(key.value)] = Location.from_mark(key.start_mark)
            try:
                endpoints[key.value] = parse_endpoint(source, key, value, type_table, loci_table)
            except ParserError as e:
                errors.append(e)

    loci_table = loci_table.merged(endpoint_locations)
    api = Api(name=name, description=description, endpoints=endpoints, types=definitions)
    errors.extend(verify_api(api, loci_table))
    if errors:
        return ParseResult(api=None, errors=errors, loci_table=loci_table)
    return ParseResult(api=api, loci_table=loci_table)


def _parse_types(
    source: SourceFile, sections: dict, errors: list[ParserError]
) -> tuple[dict[str, TypeDefinition], dict[str, Location]]:
    definitions: dict[str, TypeDefinition] = {}
    locations: dict[str, Location] = {}
    if "types" not in sections:
        return definitions, locations
    try:
        items = source.mapping_items(sections["types"][1], "types")
    except ParserError as e:
        errors.append(e)
        return definitions, locations

    for key, value in items:
        location = Location.from_mark(key.start_mark)
        if not TYPE_NAME_PATTERN.match(key.value) or key.value in PRIMITIVE_TYPES:
            errors.append(ParserError(f"invalid type name '{key.value}'", location))
            continue
        locations[type_key(key.value)] = location
        try:
            parsed = parse_type(value, source)
        except ParserError as e:
            errors.append(e)
            continue
        doc = source.doc_comment(key)
        definitions[key.value] = TypeDefinition(
            name=key.value, type=parsed, description=doc.description if doc else None
        )
    return definitions, locations
