import textwrap
from pathlib import Path

from contract_forge.errors import OptionalNotAllowedError
from contract_forge.locations import Location, endpoint_key, type_key
from contract_forge.parser.base import DynamicPathComponent, StaticPathComponent
from contract_forge.parser.contract import parse_contract, parse_contract_source
from contract_forge.parser.source import SourceFile
from contract_forge.parser.types import INT32, STRING, VOID, array_type, type_reference

FIXTURES = Path(__file__).parent / "fixtures"


def _parse(text: str):
    return parse_contract_source(SourceFile("contract.yaml", textwrap.dedent(text).lstrip("\n")))


def _messages(result) -> list[str]:
    return [error.message for error in result.errors]


class TestParseUsersContract:
    def test_parses_without_errors(self):
        result = parse_contract(FIXTURES / "users.yaml")
        assert result.ok
        assert result.api.name == "users-api"
        assert result.api.description == "Manage the users of the platform"
        assert list(result.api.endpoints) == ["getUser", "createUser", "listUserPosts"]
        assert list(result.api.types) == ["User", "Role", "CreateUser", "NotFound", "ApiError"]

    def test_type_definitions(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        user = api.types["User"]
        assert user.description == "A registered user"
        assert [p.name for p in user.type.properties] == ["id", "name", "email", "roles"]
        assert user.type.properties[1].description == "Display name"
        assert user.type.properties[2].optional
        assert user.type.properties[3].type == array_type(type_reference("Role"))

    def test_get_user_endpoint(self):
        endpoint = parse_contract(FIXTURES / "users.yaml").api.endpoints["getUser"]
        assert endpoint.method == "GET"
        assert endpoint.description == "Fetch a single user"
        assert endpoint.path == (
            StaticPathComponent(content="/users/"),
            DynamicPathComponent(name="id", type=INT32),
        )
        assert endpoint.request_type == VOID
        assert endpoint.response_type == type_reference("User")
        assert endpoint.custom_error_types == {404: type_reference("NotFound")}
        assert endpoint.default_error_type == type_reference("ApiError")
        assert endpoint.path_params[0].examples[0].value == 123

    def test_create_user_endpoint(self):
        endpoint = parse_contract(FIXTURES / "users.yaml").api.endpoints["createUser"]
        assert endpoint.method == "POST"
        assert endpoint.request_type == type_reference("CreateUser")
        assert list(endpoint.headers) == ["xAuthToken"]
        assert endpoint.headers["xAuthToken"].type == STRING

    def test_path_order_differs_from_param_order(self):
        endpoint = parse_contract(FIXTURES / "users.yaml").api.endpoints["listUserPosts"]
        assert [p.name for p in endpoint.path_params] == ["sort", "userId"]
        assert [c.name for c in endpoint.dynamic_components()] == ["userId", "sort"]
        assert endpoint.path_template() == "/users/:userId/posts/:sort"

    def test_loci_table(self):
        result = parse_contract(FIXTURES / "users.yaml")
        location = result.loci_table.get(type_key("User"))
        assert location.file.endswith("users.yaml")
        assert location.line == 6
        assert endpoint_key("getUser") in result.loci_table

    def test_name_defaults_to_file_stem(self):
        result = _parse("""
            types:
              Id: string
        """)
        assert result.api.name == "contract"
        assert result.api.endpoints == {}


class TestContractErrors:
    def test_invalid_yaml(self):
        result = _parse("""
            types: [
        """)
        assert result.api is None
        assert len(result.errors) == 1
        assert "invalid YAML" in result.errors[0].message

    def test_unknown_section(self):
        result = _parse("""
            models:
              Id: string
        """)
        assert _messages(result) == ["unknown contract section 'models'"]
        assert result.errors[0].location == Location("contract.yaml", 1, 1)

    def test_errors_are_collected_per_endpoint(self):
        result = _parse("""
            endpoints:
              first:
                method: FETCH
                path: /a
              second:
                path: /b
              third:
                method: GET
                path: /c
        """)
        assert result.api is None
        assert len(result.errors) == 2
        assert result.errors[0].location.line == 3
        assert _messages(result)[1] == "endpoint 'second' is missing 'method'"

    def test_unknown_type_reference(self):
        result = _parse("""
            endpoints:
              getUser:
                method: GET
                path: /users
                response: Missing[]
        """)
        assert _messages(result) == ["unknown type 'Missing'"]
        assert result.errors[0].location == Location("contract.yaml", 2, 3)

    def test_circular_types(self):
        result = _parse("""
            types:
              A: B
              B: A
        """)
        assert len(result.errors) == 2
        assert all("circular type reference" in message for message in _messages(result))

    def test_recursive_object_is_allowed(self):
        result = _parse("""
            types:
              Node:
                children: Node[]
        """)
        assert result.ok

    def test_invalid_type_name(self):
        result = _parse("""
            types:
              string: int32
        """)
        assert _messages(result) == ["invalid type name 'string'"]


class TestEndpointErrors:
    def _endpoint(self, body: str):
        return _parse("endpoints:\n  getUser:\n" + textwrap.indent(textwrap.dedent(body).lstrip("\n"), "    "))

    def test_undeclared_placeholder(self):
        result = self._endpoint("""
            method: GET
            path: /users/:id
        """)
        assert _messages(result) == ["path parameter ':id' is not declared in @pathParams"]

    def test_unused_path_param(self):
        result = self._endpoint("""
            method: GET
            path: /users
            request:
              pathParams:
                id: string
        """)
        assert _messages(result) == ["@pathParams property 'id' does not appear in the path"]

    def test_repeated_placeholder(self):
        result = self._endpoint("""
            method: GET
            path: /users/:id/:id
            request:
              pathParams:
                id: string
        """)
        assert _messages(result) == ["path parameter ':id' appears more than once"]

    def test_path_must_start_with_slash(self):
        result = self._endpoint("""
            method: GET
            path: users
        """)
        assert _messages(result) == ["path must be a string starting with '/'"]

    def test_unknown_field(self):
        result = self._endpoint("""
            method: GET
            path: /users
            query: string
        """)
        assert _messages(result) == ["unknown endpoint field 'query'"]

    def test_unknown_request_parameter(self):
        result = self._endpoint("""
            method: GET
            path: /users
            request:
              cookies:
                session: string
        """)
        assert _messages(result) == ["unknown request parameter '@cookies'"]

    def test_optional_body(self):
        result = self._endpoint("""
            method: POST
            path: /users
            request:
              body?: string
        """)
        assert isinstance(result.errors[0], OptionalNotAllowedError)

    def test_reserved_parameter_name(self):
        result = self._endpoint("""
            method: GET
            path: /users/:res
            request:
              pathParams:
                res: string
        """)
        assert _messages(result) == ["path parameter 'res' clashes with the reserved name 'res'"]

    def test_param_clashes_with_header(self):
        result = self._endpoint("""
            method: GET
            path: /users/:x-id
            request:
              pathParams:
                x-id: string
              headers:
                X-Id: string
        """)
        assert _messages(result) == ["header 'X-Id' clashes with path parameter 'x-id'"]

    def test_invalid_status(self):
        result = self._endpoint("""
            method: GET
            path: /users
            errors:
              999: string
        """)
        assert _messages(result) == ["error status '999' must be an HTTP status code"]

    def test_lowercase_method_accepted(self):
        result = self._endpoint("""
            method: delete
            path: /users
        """)
        assert result.api.endpoints["getUser"].method == "DELETE"
        assert result.api.endpoints["getUser"].response_type == VOID


class TestGeneratedNameClashes:
    def test_type_named_like_endpoint_alias(self):
        result = _parse("""
            types:
              GetUserResponse:
                id: int32
            endpoints:
              getUser:
                method: GET
                path: /users
                response: GetUserResponse
        """)
        assert result.api is None
        assert _messages(result) == ["type 'GetUserResponse' clashes with the type generated for endpoint 'getUser'"]
        assert result.errors[0].location == Location("contract.yaml", 2, 3)
        assert result.errors[0].related == (("endpoint 'getUser' is declared here", Location("contract.yaml", 5, 3)),)

    def test_void_request_does_not_reserve_its_alias(self):
        result = _parse("""
            types:
              GetUserRequest: string
            endpoints:
              getUser:
                method: GET
                path: /users
        """)
        assert result.ok

    def test_endpoints_generating_the_same_aliases(self):
        result = _parse("""
            endpoints:
              getUser:
                method: GET
                path: /users
              get_user:
                method: GET
                path: /people
        """)
        assert _messages(result) == [
            "endpoint 'get_user' generates the type 'GetUserResponse', which endpoint 'getUser' also generates"
        ]
        assert result.errors[0].location == Location("contract.yaml", 5, 3)


class TestEndpointNameClashes:
    def test_endpoint_named_like_a_type(self):
        result = _parse("""
            types:
              User:
                id: int32
            endpoints:
              User:
                method: GET
                path: /user
                response: User
        """)
        assert _messages(result) == ["endpoint name 'User' clashes with the type of the same name"]

    def test_path_params_generating_the_same_alias(self):
        result = _parse("""
            endpoints:
              getUser:
                method: GET
                path: /u/:user_id/:user-id
                request:
                  pathParams:
                    user_id: string
                    user-id: int32
        """)
        assert _messages(result) == [
            "path parameter 'user_id' and path parameter 'user-id' both generate the type 'GetUserParamUserId'"
        ]

    def test_headers_generating_the_same_alias(self):
        result = _parse("""
            endpoints:
              getUser:
                method: GET
                path: /users
                request:
                  headers:
                    X-Auth-Token: string
                    X_Auth_Token: string
        """)
        assert _messages(result) == [
            "header 'X_Auth_Token' and header 'X-Auth-Token' both generate the type 'GetUserHeaderXAuthToken'"
        ]
