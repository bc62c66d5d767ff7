"""Endpoint handler stubs, to be filled in by the API implementer."""

from contract_forge.generator.emit import FunctionDeclaration, Import, Parameter, Statement, throw_error
from contract_forge.generator.types import header_type, promise_type_node, referenced_type_names, type_node
from contract_forge.generator.writer import render_source
from contract_forge.naming import parameter_identifier
from contract_forge.parser.base import Api, Endpoint
from contract_forge.parser.types import NUMBER, Type, integer_constant, object_type, union_type

TYPES_MODULE = "../types"


def handler_parameters(api: Api, endpoint: Endpoint) -> list[Parameter]:
    """Request body (when present), path parameters, then headers."""
    parameters = []
    if not api.is_void(endpoint.request_type):
        parameters.append(Parameter("request", type_node(endpoint.request_type)))
    for component in endpoint.dynamic_components():
        parameters.append(Parameter(parameter_identifier(component.name), type_node(component.type)))
    for header_name, header in endpoint.headers.items():
        parameters.append(Parameter(header_name, type_node(header_type(header))))
    return parameters


def handler_return_type(endpoint: Endpoint) -> Type:
    return union_type(
        object_type({"status": integer_constant(200), "data": endpoint.response_type}),
        *(
            object_type({"status": integer_constant(status_code), "data": error_type})
            for status_code, error_type in endpoint.custom_error_types.items()
        ),
        object_type({"status": NUMBER, "data": endpoint.default_error_type}),
    )


def generate_endpoint_handler_source(api: Api, endpoint_name: str, endpoint: Endpoint) -> str:
    statements: list[Statement] = []
    type_names = referenced_type_names(endpoint.signature_types())
    if type_names:
        statements.append(Import(TYPES_MODULE, names=tuple(type_names)))
    statements.append(
        FunctionDeclaration(
            name=endpoint_name,
            parameters=tuple(handler_parameters(api, endpoint)),
            body=(throw_error(f"Endpoint {endpoint_name} is not yet implemented!"),),
            return_type=promise_type_node(handler_return_type(endpoint)),
            is_async=True,
            exported=True,
        )
    )
    return render_source(statements)
