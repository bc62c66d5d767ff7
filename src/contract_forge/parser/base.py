"""Endpoint-level data models of the contract IR.

The contract parser converts annotated declarations into these models; every
generator consumes them read-only.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Field

from contract_forge.parser.types import IrModel, Type, TypeDefinition, TypeTable


class Example(IrModel):
    """A named example value of a parameter."""

    name: str
    value: Any  # JSON scalar


class PathParam(IrModel):
    name: str
    type: Type
    description: str | None = None
    examples: tuple[Example, ...] | None = None


class Header(IrModel):
    header_field_name: str  # wire name, as declared
    type: Type
    optional: bool = False
    description: str | None = None


class StaticPathComponent(IrModel):
    kind: Literal["static"] = "static"
    content: str


class DynamicPathComponent(IrModel):
    kind: Literal["dynamic"] = "dynamic"
    name: str
    type: Type


PathComponent = Annotated[
    Union[StaticPathComponent, DynamicPathComponent],
    Field(discriminator="kind"),
]


class Endpoint(IrModel):
    """A single HTTP endpoint with everything needed to serve it."""

    method: str  # GET / POST / PUT / PATCH / DELETE
    path: tuple[PathComponent, ...]
    headers: dict[str, Header] = {}  # keyed by local identifier
    request_type: Type
    response_type: Type
    custom_error_types: dict[int, Type] = {}  # {status_code: type}
    default_error_type: Type
    path_params: tuple[PathParam, ...] = ()
    description: str | None = None

    def dynamic_components(self) -> list[DynamicPathComponent]:
        return [c for c in self.path if c.kind == "dynamic"]

    def path_template(self) -> str:
        return "".join(c.content if c.kind == "static" else f":{c.name}" for c in self.path)

    def signature_types(self) -> list[Type]:
        """Every top-level type the endpoint's handler signature mentions."""
        return [
            self.request_type,
            *(c.type for c in self.dynamic_components()),
            *(header.type for header in self.headers.values()),
            self.response_type,
            *self.custom_error_types.values(),
            self.default_error_type,
        ]


class Api(IrModel):
    """The whole contract: named endpoints plus the types they refer to."""

    name: str
    description: str | None = None
    endpoints: dict[str, Endpoint] = {}
    types: dict[str, TypeDefinition] = {}

    def type_table(self) -> TypeTable:
        return TypeTable(self.types)

    def is_void(self, t: Type) -> bool:
        return self.type_table().is_void(t)
