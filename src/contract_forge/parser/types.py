"""Type nodes of the contract IR and the type table that names them.

Types form a discriminated union on ``kind``. All models are frozen: a type is
built once by the type parser and only read afterwards.
"""

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TypeKind(str, Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    BOOLEAN_CONSTANT = "boolean-constant"
    STRING = "string"
    STRING_CONSTANT = "string-constant"
    NUMBER = "number"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    DOUBLE = "double"
    INTEGER_CONSTANT = "integer-constant"
    DATE = "date"
    DATETIME = "date-time"
    OBJECT = "object"
    ARRAY = "array"
    UNION = "union"
    TYPE_REFERENCE = "type-reference"
    VOID = "void"


class IrModel(BaseModel):
    """Base of every IR model; instances are immutable."""

    model_config = ConfigDict(frozen=True)


class NullType(IrModel):
    kind: Literal[TypeKind.NULL] = TypeKind.NULL


class BooleanType(IrModel):
    kind: Literal[TypeKind.BOOLEAN] = TypeKind.BOOLEAN


class BooleanConstantType(IrModel):
    kind: Literal[TypeKind.BOOLEAN_CONSTANT] = TypeKind.BOOLEAN_CONSTANT
    value: bool


class StringType(IrModel):
    kind: Literal[TypeKind.STRING] = TypeKind.STRING


class StringConstantType(IrModel):
    kind: Literal[TypeKind.STRING_CONSTANT] = TypeKind.STRING_CONSTANT
    value: str


class NumberType(IrModel):
    kind: Literal[TypeKind.NUMBER] = TypeKind.NUMBER


class Int32Type(IrModel):
    kind: Literal[TypeKind.INT32] = TypeKind.INT32


class Int64Type(IrModel):
    kind: Literal[TypeKind.INT64] = TypeKind.INT64


class FloatType(IrModel):
    kind: Literal[TypeKind.FLOAT] = TypeKind.FLOAT


class DoubleType(IrModel):
    kind: Literal[TypeKind.DOUBLE] = TypeKind.DOUBLE


class IntegerConstantType(IrModel):
    kind: Literal[TypeKind.INTEGER_CONSTANT] = TypeKind.INTEGER_CONSTANT
    value: int


class DateType(IrModel):
    kind: Literal[TypeKind.DATE] = TypeKind.DATE


class DateTimeType(IrModel):
    kind: Literal[TypeKind.DATETIME] = TypeKind.DATETIME


class ObjectProperty(IrModel):
    name: str
    type: "Type"
    optional: bool = False
    description: str | None = None


class ObjectType(IrModel):
    kind: Literal[TypeKind.OBJECT] = TypeKind.OBJECT
    properties: tuple[ObjectProperty, ...] = ()


class ArrayType(IrModel):
    kind: Literal[TypeKind.ARRAY] = TypeKind.ARRAY
    element_type: "Type"


class UnionType(IrModel):
    kind: Literal[TypeKind.UNION] = TypeKind.UNION
    types: tuple["Type", ...]


class TypeReference(IrModel):
    kind: Literal[TypeKind.TYPE_REFERENCE] = TypeKind.TYPE_REFERENCE
    name: str


class VoidType(IrModel):
    kind: Literal[TypeKind.VOID] = TypeKind.VOID


Type = Annotated[
    Union[
        NullType,
        BooleanType,
        BooleanConstantType,
        StringType,
        StringConstantType,
        NumberType,
        Int32Type,
        Int64Type,
        FloatType,
        DoubleType,
        IntegerConstantType,
        DateType,
        DateTimeType,
        ObjectType,
        ArrayType,
        UnionType,
        TypeReference,
        VoidType,
    ],
    Field(discriminator="kind"),
]

ObjectProperty.model_rebuild()
ObjectType.model_rebuild()
ArrayType.model_rebuild()
UnionType.model_rebuild()

NULL = NullType()
BOOLEAN = BooleanType()
STRING = StringType()
NUMBER = NumberType()
INT32 = Int32Type()
INT64 = Int64Type()
FLOAT = FloatType()
DOUBLE = DoubleType()
DATE = DateType()
DATETIME = DateTimeType()
VOID = VoidType()

PRIMITIVE_TYPES: dict[str, Type] = {
    "null": NULL,
    "boolean": BOOLEAN,
    "string": STRING,
    "number": NUMBER,
    "int32": INT32,
    "int64": INT64,
    "float": FLOAT,
    "double": DOUBLE,
    "date": DATE,
    "date-time": DATETIME,
    "void": VOID,
}


def array_type(element_type: Type) -> ArrayType:
    return ArrayType(element_type=element_type)


def object_type(properties: Mapping[str, Type]) -> ObjectType:
    """Build an object type with mandatory properties, in mapping order."""
    return ObjectType(
        properties=tuple(ObjectProperty(name=name, type=t) for name, t in properties.items())
    )


def union_type(*types: Type) -> UnionType:
    return UnionType(types=tuple(types))


def integer_constant(value: int) -> IntegerConstantType:
    return IntegerConstantType(value=value)


def string_constant(value: str) -> StringConstantType:
    return StringConstantType(value=value)


def boolean_constant(value: bool) -> BooleanConstantType:
    return BooleanConstantType(value=value)


def type_reference(name: str) -> TypeReference:
    return TypeReference(name=name)


def nested_types(t: Type) -> Iterator[Type]:
    """Yield ``t`` and every type nested inside it, depth first.

    References are yielded but not followed.
    """
    yield t
    if t.kind == TypeKind.ARRAY:
        yield from nested_types(t.element_type)
    elif t.kind == TypeKind.OBJECT:
        for prop in t.properties:
            yield from nested_types(prop.type)
    elif t.kind == TypeKind.UNION:
        for member in t.types:
            yield from nested_types(member)


class TypeDefinition(IrModel):
    """A named type declared in the contract's ``types`` section."""

    name: str
    type: Type
    description: str | None = None


class TypeTable:
    """Read-only mapping from type name to its definition."""

    def __init__(self, definitions: Mapping[str, TypeDefinition] | None = None):
        self._definitions = dict(definitions or {})

    def get(self, name: str) -> TypeDefinition | None:
        return self._definitions.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def definitions(self) -> list[TypeDefinition]:
        return list(self._definitions.values())

    def resolve(self, t: Type) -> Type:
        """Follow type references until a concrete type is reached.

        Raises ``KeyError`` for an unknown name and ``ValueError`` when
        references form a cycle.
        """
        seen: set[str] = set()
        while t.kind == TypeKind.TYPE_REFERENCE:
            if t.name in seen:
                raise ValueError(f"circular type reference: {t.name}")
            seen.add(t.name)
            definition = self._definitions.get(t.name)
            if definition is None:
                raise KeyError(t.name)
            t = definition.type
        return t

    def is_void(self, t: Type) -> bool:
        return self.resolve(t).kind == TypeKind.VOID
