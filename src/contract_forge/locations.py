"""Source locations and the loci table used for diagnostics."""

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A position in a contract source file (1-based line and column)."""

    file: str
    line: int
    column: int

    @classmethod
    def from_mark(cls, mark) -> "Location":
        """Build a location from a PyYAML mark (which is 0-based)."""
        return cls(file=mark.name, line=mark.line + 1, column=mark.column + 1)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


def type_key(name: str) -> str:
    return f"type:{name}"


def endpoint_key(name: str) -> str:
    return f"endpoint:{name}"


def path_param_key(endpoint_name: str, name: str) -> str:
    return f"endpoint:{endpoint_name}:param:{name}"


def header_key(endpoint_name: str, name: str) -> str:
    return f"endpoint:{endpoint_name}:header:{name}"


class LociTable:
    """Read-only lookup from IR node keys to the location they came from."""

    def __init__(self, locations: Mapping[str, Location] | None = None):
        self._locations = dict(locations or {})

    def get(self, key: str) -> Location | None:
        return self._locations.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._locations

    def __len__(self) -> int:
        return len(self._locations)

    def merged(self, locations: Mapping[str, Location]) -> "LociTable":
        """Return a new table with extra entries; this table is left untouched."""
        return LociTable({**self._locations, **locations})
