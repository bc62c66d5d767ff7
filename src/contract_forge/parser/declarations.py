"""Syntax-level declarations read from a contract source.

These mirror what the author wrote (names, optional markers, raw type nodes,
doc comments) before any semantic checking happens.
"""

from dataclasses import dataclass

import yaml

from contract_forge.locations import Location
from contract_forge.parser.annotations import DocComment


@dataclass(frozen=True)
class PropertySignature:
    name: str
    type_node: yaml.Node
    location: Location
    optional: bool = False
    question_location: Location | None = None
    doc: DocComment | None = None


@dataclass(frozen=True)
class TypeLiteral:
    """An inline structural type: a literal record of named properties."""

    properties: tuple[PropertySignature, ...]
    location: Location


@dataclass(frozen=True)
class ParameterDeclaration:
    """An annotated request parameter such as ``pathParams`` or ``headers``."""

    name: str
    decorators: tuple[str, ...]
    type_node: yaml.Node
    location: Location
    type_literal: TypeLiteral | None = None
    optional: bool = False
    question_location: Location | None = None
    doc: DocComment | None = None

    def has_decorator(self, name: str) -> bool:
        return name in self.decorators

    def require_decorator(self, name: str) -> None:
        """Raise ``ValueError`` when the declaration lacks the ``@name`` tag.

        Callers only dispatch tagged declarations to a parser, so a missing tag
        is a programming error rather than a contract error.
        """
        if not self.has_decorator(name):
            raise ValueError(f"declaration '{self.name}' is not annotated with @{name}")
