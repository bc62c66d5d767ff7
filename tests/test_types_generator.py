from pathlib import Path

from contract_forge.generator.types import (
    endpoint_property_types,
    generate_types_source,
    header_type,
    type_node,
)
from contract_forge.parser.base import Header
from contract_forge.parser.contract import parse_contract
from contract_forge.parser.types import (
    DATETIME,
    INT64,
    NULL,
    STRING,
    ObjectProperty,
    ObjectType,
    array_type,
    boolean_constant,
    integer_constant,
    string_constant,
    union_type,
)

FIXTURES = Path(__file__).parent / "fixtures"


class TestTypeNode:
    def test_primitives(self):
        assert type_node(INT64) == "number"
        assert type_node(DATETIME) == "string"
        assert type_node(NULL) == "null"

    def test_constants(self):
        assert type_node(string_constant("active")) == '"active"'
        assert type_node(integer_constant(404)) == "404"
        assert type_node(boolean_constant(False)) == "false"

    def test_array_of_union_is_parenthesized(self):
        assert type_node(array_type(union_type(STRING, NULL))) == "(string | null)[]"
        assert type_node(array_type(STRING)) == "string[]"

    def test_object(self):
        t = ObjectType(
            properties=(
                ObjectProperty(name="id", type=INT64),
                ObjectProperty(name="first-name", type=STRING, optional=True),
            )
        )
        assert type_node(t) == '{ id: number; "first-name"?: string }'
        assert type_node(ObjectType()) == "{}"

    def test_optional_header_accepts_void(self):
        header = Header(header_field_name="X-Trace", type=STRING, optional=True)
        assert type_node(header_type(header)) == "string | void"


class TestEndpointPropertyTypes:
    def test_void_request_is_skipped(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        names = [name for name, _ in endpoint_property_types(api, "getUser", api.endpoints["getUser"])]
        assert names == [
            "GetUserParamId",
            "GetUserResponse",
            "GetUserCustomError404",
            "GetUserDefaultError",
        ]

    def test_request_and_headers(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        names = [name for name, _ in endpoint_property_types(api, "createUser", api.endpoints["createUser"])]
        assert names == [
            "CreateUserRequest",
            "CreateUserHeaderXAuthToken",
            "CreateUserResponse",
            "CreateUserDefaultError",
        ]


class TestGenerateTypesSource:
    def test_users_contract(self):
        source = generate_types_source(parse_contract(FIXTURES / "users.yaml").api)
        lines = source.splitlines()
        assert lines[0] == "export type User = { id: number; name: string; email?: string; roles: Role[] };"
        assert 'export type Role = "admin" | "member";' in lines
        assert "export type GetUserParamId = number;" in lines
        assert "export type GetUserCustomError404 = NotFound;" in lines
        assert "export type CreateUserRequest = CreateUser;" in lines
        assert "export type ListUserPostsResponse = string[];" in lines
        assert "export type GetUserRequest" not in source
        assert source.endswith(";\n")
