"""HTTP-specific rules: methods, path templates and URL-safe types."""

import re

from contract_forge.parser.types import Type, TypeKind, TypeTable

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

PLACEHOLDER_PATTERN = re.compile(r":([A-Za-z0-9_-]+)")

URL_SAFE_KINDS = frozenset(
    {
        TypeKind.BOOLEAN,
        TypeKind.BOOLEAN_CONSTANT,
        TypeKind.STRING,
        TypeKind.STRING_CONSTANT,
        TypeKind.NUMBER,
        TypeKind.INT32,
        TypeKind.INT64,
        TypeKind.FLOAT,
        TypeKind.DOUBLE,
        TypeKind.INTEGER_CONSTANT,
        TypeKind.DATE,
        TypeKind.DATETIME,
    }
)


def is_url_safe(t: Type, type_table: TypeTable) -> bool:
    """Whether values of ``t`` fit in a single path segment."""
    resolved = type_table.resolve(t)
    if resolved.kind == TypeKind.UNION:
        return all(is_url_safe(member, type_table) for member in resolved.types)
    return resolved.kind in URL_SAFE_KINDS


def is_path_param_type_safe(t: Type, type_table: TypeTable) -> bool:
    """A URL-safe type, or an array of URL-safe types."""
    resolved = type_table.resolve(t)
    if resolved.kind == TypeKind.ARRAY:
        return is_url_safe(resolved.element_type, type_table)
    return is_url_safe(resolved, type_table)


def split_path(path: str) -> list[tuple[str, str]]:
    """Split a path template into ``("static", text)`` / ``("dynamic", name)`` parts.

    ``/users/:id/posts`` -> ``[("static", "/users/"), ("dynamic", "id"),
    ("static", "/posts")]``
    """
    parts = []
    position = 0
    for match in PLACEHOLDER_PATTERN.finditer(path):
        if match.start() > position:
            parts.append(("static", path[position:match.start()]))
        parts.append(("dynamic", match.group(1)))
        position = match.end()
    if position < len(path):
        parts.append(("static", path[position:]))
    return parts
