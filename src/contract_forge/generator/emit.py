"""Syntax nodes for emitted TypeScript.

Generators build trees of these nodes; ``writer.render_source`` turns them into
text. Keeping the two apart means no generator ever deals with indentation,
quoting or operator precedence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# -- expressions --------------------------------------------------------------


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class NumericLiteral:
    value: int | float


@dataclass(frozen=True)
class PropertyAccess:
    target: Expression
    name: str


@dataclass(frozen=True)
class ElementAccess:
    target: Expression
    index: Expression


@dataclass(frozen=True)
class Call:
    callee: Expression
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class New:
    callee: Expression
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Await:
    expression: Expression


@dataclass(frozen=True)
class Unary:
    operator: str  # "!" or "typeof"
    operand: Expression


@dataclass(frozen=True)
class Binary:
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str | None = None  # rendered TypeScript type


@dataclass(frozen=True)
class ArrowFunction:
    parameters: tuple[Parameter, ...]
    body: Expression | tuple[Statement, ...]
    is_async: bool = False


@dataclass(frozen=True)
class TemplateLiteral:
    """A template string; ``parts`` alternate between text (str) and expressions."""

    parts: tuple[str | Expression, ...]


Expression = Union[
    Identifier,
    StringLiteral,
    NumericLiteral,
    PropertyAccess,
    ElementAccess,
    Call,
    New,
    Await,
    Unary,
    Binary,
    ArrowFunction,
    TemplateLiteral,
]


# -- statements ---------------------------------------------------------------


@dataclass(frozen=True)
class Import:
    """``import * as namespace from "module"`` or ``import { a, b } from "module"``."""

    module: str
    namespace: str | None = None
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class VariableStatement:
    name: str
    initializer: Expression
    const: bool = True


@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expression


@dataclass(frozen=True)
class If:
    condition: Expression
    then: tuple[Statement, ...]
    otherwise: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Return:
    expression: Expression | None = None


@dataclass(frozen=True)
class Throw:
    expression: Expression


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    parameters: tuple[Parameter, ...]
    body: tuple[Statement, ...]
    return_type: str | None = None
    is_async: bool = False
    exported: bool = False


@dataclass(frozen=True)
class TypeAlias:
    name: str
    type: str
    exported: bool = True


Statement = Union[
    Import,
    VariableStatement,
    ExpressionStatement,
    If,
    Return,
    Throw,
    FunctionDeclaration,
    TypeAlias,
]


# -- shorthands ---------------------------------------------------------------


def identifier(name: str) -> Identifier:
    return Identifier(name)


def prop(target: Expression, *names: str) -> Expression:
    """``prop(x, "a", "b")`` is ``x.a.b``."""
    for name in names:
        target = PropertyAccess(target, name)
    return target


def call(callee: Expression, *arguments: Expression) -> Call:
    return Call(callee, tuple(arguments))


def method_call(target: Expression, method: str, *arguments: Expression) -> Call:
    return Call(PropertyAccess(target, method), tuple(arguments))


def const(name: str, initializer: Expression) -> VariableStatement:
    return VariableStatement(name, initializer)


def statement(expression: Expression) -> ExpressionStatement:
    return ExpressionStatement(expression)


def strict_equals(left: Expression, right: Expression) -> Binary:
    return Binary(left, "===", right)


def logical_and(*operands: Expression) -> Expression:
    result = operands[0]
    for operand in operands[1:]:
        result = Binary(result, "&&", operand)
    return result


def logical_or(*operands: Expression) -> Expression:
    result = operands[0]
    for operand in operands[1:]:
        result = Binary(result, "||", operand)
    return result


def negate(expression: Expression) -> Unary:
    return Unary("!", expression)


def throw_error(message: str) -> Throw:
    return Throw(New(Identifier("Error"), (StringLiteral(message),)))
