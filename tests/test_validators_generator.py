from pathlib import Path

from contract_forge.generator.emit import identifier
from contract_forge.generator.validators import (
    generate_validators_source,
    validate_statement,
    validation_expression,
    validator_name,
)
from contract_forge.generator.writer import render_expression, render_statement
from contract_forge.parser.contract import parse_contract
from contract_forge.parser.types import (
    INT32,
    NULL,
    STRING,
    VOID,
    ObjectProperty,
    ObjectType,
    array_type,
    boolean_constant,
    integer_constant,
    string_constant,
    type_reference,
    union_type,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _check(t) -> str:
    return render_expression(validation_expression(t, identifier("value")))


class TestValidationExpression:
    def test_scalars(self):
        assert _check(STRING) == 'typeof value === "string"'
        assert _check(INT32) == 'typeof value === "number" && Number.isInteger(value)'
        assert _check(NULL) == "value === null"
        assert _check(VOID) == "value === undefined"

    def test_constants(self):
        assert _check(string_constant("admin")) == 'value === "admin"'
        assert _check(integer_constant(404)) == "value === 404"
        assert _check(boolean_constant(True)) == "value === true"

    def test_union(self):
        assert _check(union_type(NULL, STRING)) == 'value === null || typeof value === "string"'

    def test_reference_calls_named_validator(self):
        assert _check(type_reference("User")) == "validateUser(value)"

    def test_object_with_optional_property(self):
        t = ObjectType(
            properties=(
                ObjectProperty(name="name", type=STRING),
                ObjectProperty(name="email", type=STRING, optional=True),
            )
        )
        assert _check(t) == (
            'typeof value === "object" && value !== null && typeof value.name === "string"'
            ' && (value.email === undefined || typeof value.email === "string")'
        )

    def test_object_property_that_is_not_an_identifier(self):
        t = ObjectType(properties=(ObjectProperty(name="first-name", type=STRING),))
        assert 'typeof value["first-name"] === "string"' in _check(t)

    def test_nested_arrays_use_distinct_item_names(self):
        assert _check(array_type(array_type(STRING))) == (
            "Array.isArray(value) && value.every((item) => "
            'Array.isArray(item) && item.every((item1) => typeof item1 === "string"))'
        )


class TestValidateStatement:
    def test_throws_on_failure(self):
        stmt = validate_statement(identifier("id"), validator_name("GetUserParamId"), "Invalid path parameter id")
        assert render_statement(stmt, 0) == [
            "if (!validators.validateGetUserParamId(id)) {",
            '  throw new Error("Invalid path parameter id");',
            "}",
        ]


class TestGenerateValidatorsSource:
    def test_users_contract(self):
        source = generate_validators_source(parse_contract(FIXTURES / "users.yaml").api)
        assert source.startswith('import * as types from "./types";\n\n')
        assert "export function validateUser(value: any): value is types.User {" in source
        assert "value.roles.every((item) => validateRole(item))" in source
        assert (
            "export function validateGetUserParamId(value: any): value is types.GetUserParamId {\n"
            '  return typeof value === "number" && Number.isInteger(value);\n'
            "}\n"
        ) in source
        assert "export function validateCreateUserHeaderXAuthToken(value: any)" in source
        assert "validateGetUserRequest" not in source
