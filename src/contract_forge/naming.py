"""Identifier helpers shared by the parsers and the generators."""

import re

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Names the generated server binds itself, plus TypeScript reserved words.
RESERVED_IDENTIFIERS = frozenset(
    {
        "app", "cors", "express", "req", "res", "request", "response", "validators", "PORT",
        "await", "break", "case", "catch", "class", "const", "continue", "debugger",
        "default", "delete", "do", "else", "enum", "export", "extends", "false",
        "finally", "for", "function", "if", "import", "in", "instanceof", "let",
        "new", "null", "return", "static", "super", "switch", "this", "throw",
        "true", "try", "typeof", "undefined", "var", "void", "while", "with", "yield",
    }
)


def is_identifier(name: str) -> bool:
    return bool(IDENTIFIER_PATTERN.match(name)) and name not in RESERVED_IDENTIFIERS


def parameter_identifier(name: str) -> str:
    """Local variable name for a wire name: ``X-Auth-Token`` -> ``xAuthToken``."""
    parts = [part for part in name.split("-") if part]
    if not parts:
        return "_"
    head, *rest = parts
    identifier = head[:1].lower() + head[1:] + "".join(p[:1].upper() + p[1:] for p in rest)
    if identifier[:1].isdigit():
        identifier = "_" + identifier
    return identifier


def pascal_case(*segments: str) -> str:
    """``pascal_case("getUser", "param", "user-id")`` -> ``GetUserParamUserId``."""
    words = []
    for segment in segments:
        words.extend(w for w in re.split(r"[^A-Za-z0-9]+", segment) if w)
    return "".join(w[:1].upper() + w[1:] for w in words)


def endpoint_property_type_name(endpoint_name: str, endpoint_property: str, name: str | None = None) -> str:
    """Name of the generated alias for one part of an endpoint.

    ``("getUser", "request")`` -> ``GetUserRequest``;
    ``("getUser", "param", "id")`` -> ``GetUserParamId``;
    ``("getUser", "customError", "404")`` -> ``GetUserCustomError404``.
    """
    if name is None:
        return pascal_case(endpoint_name, endpoint_property)
    return pascal_case(endpoint_name, endpoint_property, name)
