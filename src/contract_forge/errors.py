"""Error types raised while compiling a contract.

Every user-facing failure carries the file and position it originated from so
that editors can jump straight to it.
"""

from contract_forge.locations import Location


class ContractError(Exception):
    """Base class for all contract-forge errors."""


class ParserError(ContractError):
    """A contract declaration is malformed or violates a semantic rule."""

    def __init__(
        self,
        message: str,
        location: Location,
        related: tuple[tuple[str, Location], ...] = (),
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        # (note, location) pairs pointing at other relevant declarations
        self.related = related

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class OptionalNotAllowedError(ParserError):
    """A declaration that must always be present was marked optional."""


class ConfigError(ContractError):
    """The compiler configuration file or environment is invalid."""
