"""The complete set of generated server files."""

from contract_forge.config import CompilerConfig
from contract_forge.generator.server import generate_express_server_source
from contract_forge.generator.stubs import generate_endpoint_handler_source
from contract_forge.generator.types import generate_types_source
from contract_forge.generator.validators import generate_validators_source
from contract_forge.parser.base import Api

ENDPOINTS_DIR = "endpoints"


def generate_server_files(api: Api, config: CompilerConfig | None = None) -> dict[str, str]:
    """Generate every server file.

    Returns a dict of {relative path: source}, e.g. ``endpoints/getUser.ts``.
    """
    config = config or CompilerConfig()
    files = {
        "server.ts": generate_express_server_source(api, port=config.port),
        "types.ts": generate_types_source(api),
        "validators.ts": generate_validators_source(api),
    }
    for endpoint_name, endpoint in api.endpoints.items():
        files[f"{ENDPOINTS_DIR}/{endpoint_name}.ts"] = generate_endpoint_handler_source(
            api, endpoint_name, endpoint
        )
    return files
