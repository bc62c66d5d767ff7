"""Express server generator: app bootstrap plus one validated route per endpoint."""

from contract_forge.generator.emit import (
    ArrowFunction,
    Await,
    Binary,
    ElementAccess,
    Expression,
    If,
    Import,
    NumericLiteral,
    Parameter,
    Return,
    Statement,
    StringLiteral,
    TemplateLiteral,
    call,
    const,
    identifier,
    logical_and,
    method_call,
    prop,
    statement,
    strict_equals,
)
from contract_forge.generator.validators import VALIDATORS_NAMESPACE, validate_statement, validator_name
from contract_forge.generator.writer import render_source
from contract_forge.naming import endpoint_property_type_name, parameter_identifier
from contract_forge.parser.base import Api, Endpoint

IMPORTED_CORS_NAME = "cors"
IMPORTED_EXPRESS_NAME = "express"
EXPRESS_APP_NAME = "app"
PORT_NAME = "PORT"
DEFAULT_PORT = 3020

REQUEST_PARAMETER = "req"
RESPONSE_PARAMETER = "res"
PARSED_REQUEST_VARIABLE = "request"
RESPONSE_VARIABLE = "response"


def generate_express_server_source(api: Api, port: int = DEFAULT_PORT) -> str:
    app = identifier(EXPRESS_APP_NAME)
    express = identifier(IMPORTED_EXPRESS_NAME)
    statements: list[Statement] = [
        Import("cors", namespace=IMPORTED_CORS_NAME),
        Import("express", namespace=IMPORTED_EXPRESS_NAME),
        Import("./validators", namespace=VALIDATORS_NAMESPACE),
        *(Import(f"./endpoints/{name}", names=(name,)) for name in api.endpoints),
        const(PORT_NAME, NumericLiteral(port)),
        const(EXPRESS_APP_NAME, call(express)),
        statement(method_call(app, "use", call(identifier(IMPORTED_CORS_NAME)))),
        statement(method_call(app, "use", method_call(express, "json"))),
        *(
            generate_endpoint_route(api, endpoint_name, endpoint)
            for endpoint_name, endpoint in api.endpoints.items()
        ),
        statement(
            method_call(
                app,
                "listen",
                identifier(PORT_NAME),
                ArrowFunction(
                    (),
                    (
                        statement(
                            method_call(
                                identifier("console"),
                                "log",
                                TemplateLiteral(("Listening on port ", identifier(PORT_NAME))),
                            )
                        ),
                    ),
                ),
            )
        ),
    ]
    return render_source(statements)


def route_path(endpoint: Endpoint) -> str:
    """Express path template: static text verbatim, ``:name`` for dynamic parts."""
    return "".join(
        component.content if component.kind == "static" else f":{parameter_identifier(component.name)}"
        for component in endpoint.path
    )


def generate_endpoint_route(api: Api, endpoint_name: str, endpoint: Endpoint) -> Statement:
    """``app.<method>("<path>", async (req, res) => { ... });``"""
    handler = ArrowFunction(
        (Parameter(REQUEST_PARAMETER), Parameter(RESPONSE_PARAMETER)),
        tuple(generate_handler_body(api, endpoint_name, endpoint)),
        is_async=True,
    )
    return statement(
        method_call(
            identifier(EXPRESS_APP_NAME),
            endpoint.method.lower(),
            StringLiteral(route_path(endpoint)),
            handler,
        )
    )


def generate_handler_body(api: Api, endpoint_name: str, endpoint: Endpoint) -> list[Statement]:
    req = identifier(REQUEST_PARAMETER)
    body: list[Statement] = []
    arguments: list[Expression] = []

    if not api.is_void(endpoint.request_type):
        body.append(const(PARSED_REQUEST_VARIABLE, prop(req, "body")))
        body.append(
            validate_statement(
                identifier(PARSED_REQUEST_VARIABLE),
                validator_name(endpoint_property_type_name(endpoint_name, "request")),
                "Invalid request",
            )
        )
        arguments.append(identifier(PARSED_REQUEST_VARIABLE))

    for component in endpoint.dynamic_components():
        local = parameter_identifier(component.name)
        body.append(const(local, prop(req, "params", local)))
        body.append(
            validate_statement(
                identifier(local),
                validator_name(endpoint_property_type_name(endpoint_name, "param", component.name)),
                f"Invalid path parameter {component.name}",
            )
        )
        arguments.append(identifier(local))

    for header_name, header in endpoint.headers.items():
        # Node lower-cases incoming header names
        value = ElementAccess(prop(req, "headers"), StringLiteral(header.header_field_name.lower()))
        body.append(const(header_name, value))
        body.append(
            validate_statement(
                identifier(header_name),
                validator_name(endpoint_property_type_name(endpoint_name, "header", header_name)),
                f"Invalid header {header.header_field_name}",
            )
        )
        arguments.append(identifier(header_name))

    body.append(const(RESPONSE_VARIABLE, Await(call(identifier(endpoint_name), *arguments))))
    body.extend(generate_validate_and_send_response(endpoint_name, endpoint))
    return body


def generate_validate_and_send_response(endpoint_name: str, endpoint: Endpoint) -> list[Statement]:
    response = identifier(RESPONSE_VARIABLE)
    status = prop(response, "status")
    data = prop(response, "data")
    res = identifier(RESPONSE_PARAMETER)
    send_status_and_data = [
        statement(method_call(res, "status", status)),
        statement(method_call(res, "json", data)),
    ]

    statements: list[Statement] = [
        If(
            strict_equals(status, NumericLiteral(status_code)),
            (
                validate_statement(
                    data,
                    validator_name(endpoint_property_type_name(endpoint_name, "customError", str(status_code))),
                    f"Invalid error response for status {status_code}",
                ),
                *send_status_and_data,
                Return(),
            ),
        )
        for status_code in endpoint.custom_error_types
    ]
    statements.append(
        If(
            logical_and(
                Binary(status, ">=", NumericLiteral(200)),
                Binary(status, "<", NumericLiteral(300)),
            ),
            (
                validate_statement(
                    data,
                    validator_name(endpoint_property_type_name(endpoint_name, "response")),
                    "Invalid successful response",
                ),
            ),
            (
                validate_statement(
                    data,
                    validator_name(endpoint_property_type_name(endpoint_name, "defaultError")),
                    "Invalid error response",
                ),
            ),
        )
    )
    statements.extend(send_status_and_data)
    return statements
