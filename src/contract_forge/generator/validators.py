"""Runtime validators: naming scheme, validation calls and ``validators.ts``."""

from contract_forge.generator.emit import (
    ArrowFunction,
    Binary,
    ElementAccess,
    Expression,
    FunctionDeclaration,
    If,
    Import,
    NumericLiteral,
    Parameter,
    PropertyAccess,
    Return,
    Statement,
    StringLiteral,
    Unary,
    call,
    identifier,
    logical_and,
    logical_or,
    method_call,
    negate,
    prop,
    strict_equals,
    throw_error,
)
from contract_forge.generator.types import endpoint_property_types
from contract_forge.generator.writer import render_source
from contract_forge.naming import IDENTIFIER_PATTERN
from contract_forge.parser.base import Api
from contract_forge.parser.types import Type, TypeKind

VALIDATORS_NAMESPACE = "validators"


def validator_name(type_name: str) -> str:
    return f"validate{type_name}"


def validate_statement(value: Expression, validator: str, message: str) -> If:
    """``if (!validators.<validator>(value)) { throw new Error(message); }``"""
    check = call(prop(identifier(VALIDATORS_NAMESPACE), validator), value)
    return If(negate(check), (throw_error(message),))


def generate_validators_source(api: Api) -> str:
    statements: list[Statement] = [Import("./types", namespace="types")]
    for definition in api.types.values():
        statements.append(_validator_function(definition.name, definition.type))
    for endpoint_name, endpoint in api.endpoints.items():
        for type_name, t in endpoint_property_types(api, endpoint_name, endpoint):
            statements.append(_validator_function(type_name, t))
    return render_source(statements)


def _validator_function(type_name: str, t: Type) -> FunctionDeclaration:
    return FunctionDeclaration(
        name=validator_name(type_name),
        parameters=(Parameter("value", "any"),),
        body=(Return(validation_expression(t, identifier("value"))),),
        return_type=f"value is types.{type_name}",
        exported=True,
    )


def _typeof(value: Expression, expected: str) -> Expression:
    return strict_equals(Unary("typeof", value), StringLiteral(expected))


def validation_expression(t: Type, value: Expression, depth: int = 0) -> Expression:
    """Expression that is true when ``value`` conforms to ``t``.

    ``depth`` keeps the item names of nested array checks distinct.
    """
    match t.kind:
        case TypeKind.NULL:
            return strict_equals(value, identifier("null"))
        case TypeKind.VOID:
            return strict_equals(value, identifier("undefined"))
        case TypeKind.BOOLEAN:
            return _typeof(value, "boolean")
        case TypeKind.BOOLEAN_CONSTANT:
            return strict_equals(value, identifier("true" if t.value else "false"))
        case TypeKind.STRING | TypeKind.DATE | TypeKind.DATETIME:
            return _typeof(value, "string")
        case TypeKind.STRING_CONSTANT:
            return strict_equals(value, StringLiteral(t.value))
        case TypeKind.NUMBER | TypeKind.FLOAT | TypeKind.DOUBLE:
            return _typeof(value, "number")
        case TypeKind.INT32 | TypeKind.INT64:
            return logical_and(
                _typeof(value, "number"),
                method_call(identifier("Number"), "isInteger", value),
            )
        case TypeKind.INTEGER_CONSTANT:
            return strict_equals(value, NumericLiteral(t.value))
        case TypeKind.OBJECT:
            checks = [_typeof(value, "object"), Binary(value, "!==", identifier("null"))]
            for p in t.properties:
                if IDENTIFIER_PATTERN.match(p.name):
                    access = PropertyAccess(value, p.name)
                else:
                    access = ElementAccess(value, StringLiteral(p.name))
                check = validation_expression(p.type, access, depth)
                if p.optional:
                    check = logical_or(strict_equals(access, identifier("undefined")), check)
                checks.append(check)
            return logical_and(*checks)
        case TypeKind.ARRAY:
            item = f"item{depth}" if depth else "item"
            every = method_call(
                value,
                "every",
                ArrowFunction(
                    (Parameter(item),),
                    validation_expression(t.element_type, identifier(item), depth + 1),
                ),
            )
            return logical_and(method_call(identifier("Array"), "isArray", value), every)
        case TypeKind.UNION:
            return logical_or(*(validation_expression(member, value, depth) for member in t.types))
        case TypeKind.TYPE_REFERENCE:
            return call(identifier(validator_name(t.name)), value)
    raise ValueError(f"unknown type kind {t.kind}")
