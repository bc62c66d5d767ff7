import textwrap
from pathlib import Path

from contract_forge.config import CompilerConfig
from contract_forge.generator.project import generate_server_files
from contract_forge.generator.stubs import generate_endpoint_handler_source
from contract_forge.parser.contract import parse_contract, parse_contract_source
from contract_forge.parser.source import SourceFile

FIXTURES = Path(__file__).parent / "fixtures"


class TestEndpointHandlerStub:
    def test_get_user_stub(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        source = generate_endpoint_handler_source(api, "getUser", api.endpoints["getUser"])
        assert source == (
            'import { User, NotFound, ApiError } from "../types";\n'
            "\n"
            "export async function getUser(id: number): Promise<"
            "{ status: 200; data: User } | { status: 404; data: NotFound } | { status: number; data: ApiError }"
            "> {\n"
            '  throw new Error("Endpoint getUser is not yet implemented!");\n'
            "}\n"
        )

    def test_request_then_params_then_headers(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        source = generate_endpoint_handler_source(api, "createUser", api.endpoints["createUser"])
        assert source.startswith('import { CreateUser, User, ApiError } from "../types";\n')
        assert "export async function createUser(request: CreateUser, xAuthToken: string): Promise<" in source

    def test_path_params_in_path_order(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        source = generate_endpoint_handler_source(api, "listUserPosts", api.endpoints["listUserPosts"])
        assert source.startswith('import { ApiError } from "../types";\n')
        assert "listUserPosts(userId: number, sort: string)" in source
        assert "{ status: 200; data: string[] }" in source


    def test_request_body_is_the_only_parameter(self):
        contract = textwrap.dedent("""
            types:
              Note:
                text: string
            endpoints:
              addNote:
                method: POST
                path: /notes
                request:
                  body: Note
                response: Note
        """)
        api = parse_contract_source(SourceFile("notes.yaml", contract)).api
        source = generate_endpoint_handler_source(api, "addNote", api.endpoints["addNote"])
        assert "export async function addNote(request: Note): Promise<" in source

    def test_inline_request_body_type(self):
        contract = textwrap.dedent("""
            endpoints:
              ping:
                method: POST
                path: /ping
                request:
                  body:
                    message: string
        """)
        api = parse_contract_source(SourceFile("ping.yaml", contract)).api
        source = generate_endpoint_handler_source(api, "ping", api.endpoints["ping"])
        assert source.startswith("export async function ping(request: { message: string }): Promise<")

class TestGenerateServerFiles:
    def test_file_set(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        files = generate_server_files(api, CompilerConfig(port=4000))
        assert sorted(files) == [
            "endpoints/createUser.ts",
            "endpoints/getUser.ts",
            "endpoints/listUserPosts.ts",
            "server.ts",
            "types.ts",
            "validators.ts",
        ]
        assert "const PORT = 4000;" in files["server.ts"]

    def test_default_config(self):
        api = parse_contract(FIXTURES / "users.yaml").api
        assert "const PORT = 3020;" in generate_server_files(api)["server.ts"]
