"""Documentation comment scanning.

A documentation comment is free text followed by zero or more tags::

    The user identifier
    @example first
    "abc"

Scanning yields the trimmed description and an immutable list of
``(tag_name, raw_text)`` pairs; the comment syntax the text was lifted from
(YAML ``#`` lines for contract files) is the front-end's concern.
"""

import re
from dataclasses import dataclass

TAG_PATTERN = re.compile(r"^@(\w+)(?:\s+(.*))?$")


@dataclass(frozen=True)
class Tag:
    name: str
    text: str | None  # None when the tag carries no text at all


@dataclass(frozen=True)
class DocComment:
    description: str | None
    tags: tuple[Tag, ...] = ()

    def tags_named(self, name: str) -> list[Tag]:
        return [tag for tag in self.tags if tag.name == name]


def scan_doc_comment(text: str) -> DocComment:
    """Split comment text into its description and tags."""
    description_lines: list[str] = []
    tags: list[Tag] = []
    tag_name: str | None = None
    tag_lines: list[str] = []

    def flush() -> None:
        if tag_name is not None:
            body = "\n".join(tag_lines).strip()
            tags.append(Tag(name=tag_name, text=body or None))

    for line in text.splitlines():
        match = TAG_PATTERN.match(line.strip())
        if match:
            flush()
            tag_name = match.group(1)
            tag_lines = [match.group(2) or ""]
        elif tag_name is not None:
            tag_lines.append(line)
        else:
            description_lines.append(line)
    flush()

    description = "\n".join(description_lines).strip()
    return DocComment(description=description or None, tags=tuple(tags))
