from contract_forge.naming import endpoint_property_type_name, is_identifier, parameter_identifier, pascal_case


class TestParameterIdentifier:
    def test_hyphenated_header_name(self):
        assert parameter_identifier("X-Auth-Token") == "xAuthToken"

    def test_plain_name_unchanged(self):
        assert parameter_identifier("userId") == "userId"

    def test_leading_digit_is_prefixed(self):
        assert parameter_identifier("2fa") == "_2fa"

    def test_only_hyphens(self):
        assert parameter_identifier("--") == "_"


class TestPascalCase:
    def test_joins_segments(self):
        assert pascal_case("getUser", "param", "id") == "GetUserParamId"

    def test_splits_on_separators(self):
        assert pascal_case("getUser", "param", "user-id") == "GetUserParamUserId"

    def test_numeric_segment(self):
        assert pascal_case("getUser", "customError", "404") == "GetUserCustomError404"


class TestIsIdentifier:
    def test_valid(self):
        assert is_identifier("getUser")
        assert is_identifier("_private$")

    def test_invalid(self):
        assert not is_identifier("get-user")
        assert not is_identifier("1st")

    def test_reserved(self):
        assert not is_identifier("app")
        assert not is_identifier("typeof")


class TestEndpointPropertyTypeName:
    def test_names(self):
        assert endpoint_property_type_name("getUser", "request") == "GetUserRequest"
        assert endpoint_property_type_name("getUser", "param", "id") == "GetUserParamId"
        assert endpoint_property_type_name("getUser", "customError", "404") == "GetUserCustomError404"

    def test_separators_collapse(self):
        assert endpoint_property_type_name("getUser", "param", "user_id") == "GetUserParamUserId"
        assert endpoint_property_type_name("getUser", "param", "user-id") == "GetUserParamUserId"
