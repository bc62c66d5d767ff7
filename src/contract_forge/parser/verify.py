"""Whole-contract checks that need every declaration to be known."""

from contract_forge.errors import ParserError
from contract_forge.generator.types import endpoint_property_types
from contract_forge.locations import Location, LociTable, endpoint_key, type_key
from contract_forge.parser.base import Api
from contract_forge.parser.types import Type, TypeKind, TypeTable, nested_types

UNKNOWN_LOCATION = Location("<contract>", 1, 1)


def verify_api(api: Api, loci_table: LociTable) -> list[ParserError]:
    """Return every unresolved or circular type reference in ``api``.

    Once references resolve, the type names generated per endpoint are checked
    against the declared types and against each other.
    """
    type_table = api.type_table()
    errors: list[ParserError] = []

    for definition in type_table.definitions():
        location = loci_table.get(type_key(definition.name)) or UNKNOWN_LOCATION
        errors.extend(_unknown_references([definition.type], type_table, location))
        try:
            type_table.resolve(definition.type)
        except ValueError as e:
            errors.append(ParserError(str(e), location))
        except KeyError:
            pass  # reported above

    for name, endpoint in api.endpoints.items():
        location = loci_table.get(endpoint_key(name)) or UNKNOWN_LOCATION
        errors.extend(_unknown_references(endpoint.signature_types(), type_table, location))
    if not errors:
        errors.extend(_generated_name_clashes(api, loci_table))
    return errors


def _unknown_references(types: list[Type], type_table: TypeTable, location: Location) -> list[ParserError]:
    errors = []
    reported: set[str] = set()
    for root in types:
        for t in nested_types(root):
            if t.kind != TypeKind.TYPE_REFERENCE or t.name in type_table or t.name in reported:
                continue
            reported.add(t.name)
            errors.append(ParserError(f"unknown type '{t.name}'", location))
    return errors


def _generated_name_clashes(api: Api, loci_table: LociTable) -> list[ParserError]:
    """Declared types and per-endpoint aliases share one namespace in ``types.ts``."""
    errors = []
    owners: dict[str, str] = {}
    for name, endpoint in api.endpoints.items():
        location = loci_table.get(endpoint_key(name)) or UNKNOWN_LOCATION
        for alias, _ in endpoint_property_types(api, name, endpoint):
            if alias in api.types:
                errors.append(
                    ParserError(
                        f"type '{alias}' clashes with the type generated for endpoint '{name}'",
                        loci_table.get(type_key(alias)) or UNKNOWN_LOCATION,
                        ((f"endpoint '{name}' is declared here", location),),
                    )
                )
            elif owners.setdefault(alias, name) != name:
                errors.append(
                    ParserError(
                        f"endpoint '{name}' generates the type '{alias}', "
                        f"which endpoint '{owners[alias]}' also generates",
                        location,
                    )
                )
                break
    return errors
