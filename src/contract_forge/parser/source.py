"""YAML contract source front-end.

Contract files are composed (not loaded) with PyYAML so that every node keeps
the mark it was read from. ``#`` comment lines directly above a key are that
key's documentation comment. A trailing ``?`` on a key marks it optional.
"""

from pathlib import Path

import yaml

from contract_forge.errors import ParserError
from contract_forge.locations import Location
from contract_forge.parser.annotations import DocComment, scan_doc_comment
from contract_forge.parser.declarations import (
    ParameterDeclaration,
    PropertySignature,
    TypeLiteral,
)


def split_optional(raw_name: str) -> tuple[str, bool]:
    """Split ``"name?"`` into ``("name", True)``."""
    if raw_name.endswith("?"):
        return raw_name[:-1], True
    return raw_name, False


class SourceFile:
    """A single contract file: its text and helpers to read declarations."""

    def __init__(self, path: str, text: str):
        self.path = path
        self.text = text
        self.lines = text.splitlines()

    @classmethod
    def read(cls, file_path: Path) -> "SourceFile":
        return cls(str(file_path), file_path.read_text(encoding="utf-8"))

    def compose(self) -> yaml.Node:
        """Compose the document into a node tree whose marks name this file."""
        loader = yaml.SafeLoader(self.text)
        loader.name = self.path
        try:
            node = loader.get_single_node()
        except yaml.MarkedYAMLError as e:
            mark = e.problem_mark or e.context_mark
            location = Location.from_mark(mark) if mark else Location(self.path, 1, 1)
            raise ParserError(f"invalid YAML: {e.problem or e.context}", location) from e
        finally:
            loader.dispose()
        if node is None:
            raise ParserError("contract file is empty", Location(self.path, 1, 1))
        return node

    def doc_comment(self, node: yaml.Node) -> DocComment | None:
        """Scan the block of ``#`` lines directly above ``node``."""
        index = node.start_mark.line - 1
        block: list[str] = []
        while index >= 0:
            stripped = self.lines[index].strip()
            if not stripped.startswith("#"):
                break
            text = stripped[1:]
            block.append(text[1:] if text.startswith(" ") else text)
            index -= 1
        if not block:
            return None
        return scan_doc_comment("\n".join(reversed(block)))

    def mapping_items(self, node: yaml.Node, what: str) -> list[tuple[yaml.ScalarNode, yaml.Node]]:
        """Return the key/value pairs of a mapping, rejecting duplicate keys."""
        if not isinstance(node, yaml.MappingNode):
            raise ParserError(f"{what} must be a mapping", Location.from_mark(node.start_mark))
        seen: set[str] = set()
        items = []
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise ParserError(f"{what} keys must be plain names", Location.from_mark(key_node.start_mark))
            name = split_optional(key_node.value)[0]
            if name in seen:
                raise ParserError(f"duplicate key '{name}' in {what}", Location.from_mark(key_node.start_mark))
            seen.add(name)
            items.append((key_node, value_node))
        return items

    def question_location(self, key_node: yaml.ScalarNode) -> Location:
        """Location of the ``?`` marker at the end of an optional key."""
        end = key_node.end_mark
        # quoted keys end after the closing quote
        offset = 1 if key_node.style is None else 2
        return Location(self.path, end.line + 1, end.column + 1 - offset)

    def property_signature(self, key_node: yaml.ScalarNode, value_node: yaml.Node) -> PropertySignature:
        name, optional = split_optional(key_node.value)
        return PropertySignature(
            name=name,
            type_node=value_node,
            location=Location.from_mark(key_node.start_mark),
            optional=optional,
            question_location=self.question_location(key_node) if optional else None,
            doc=self.doc_comment(key_node),
        )

    def type_literal(self, node: yaml.Node, what: str) -> TypeLiteral:
        return TypeLiteral(
            properties=tuple(
                self.property_signature(key, value) for key, value in self.mapping_items(node, what)
            ),
            location=Location.from_mark(node.start_mark),
        )

    def parameter_declaration(self, key_node: yaml.ScalarNode, value_node: yaml.Node) -> ParameterDeclaration:
        """Read one annotated request parameter, e.g. ``pathParams:``.

        The key itself is the annotation tag. The declared type is kept as an
        inline type literal only when it is a mapping.
        """
        name, optional = split_optional(key_node.value)
        type_literal = None
        if isinstance(value_node, yaml.MappingNode):
            type_literal = self.type_literal(value_node, f"@{name}")
        return ParameterDeclaration(
            name=name,
            decorators=(name,),
            type_node=value_node,
            location=Location.from_mark(key_node.start_mark),
            type_literal=type_literal,
            optional=optional,
            question_location=self.question_location(key_node) if optional else None,
            doc=self.doc_comment(key_node),
        )
