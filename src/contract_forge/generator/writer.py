"""Render emit nodes as TypeScript source text.

Output uses two-space indentation and double-quoted strings. Parentheses are
only added where operator precedence requires them.
"""

import json

from contract_forge.generator.emit import (
    ArrowFunction,
    Await,
    Binary,
    Call,
    ElementAccess,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    If,
    Import,
    New,
    NumericLiteral,
    Parameter,
    PropertyAccess,
    Return,
    Statement,
    StringLiteral,
    TemplateLiteral,
    Throw,
    TypeAlias,
    Unary,
    VariableStatement,
)

INDENT = "  "

ARROW_PRECEDENCE = 0
BINARY_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "===": 3,
    "!==": 3,
    "<": 4,
    ">": 4,
    "<=": 4,
    ">=": 4,
}
UNARY_PRECEDENCE = 10
POSTFIX_PRECEDENCE = 11


def render_source(statements: list[Statement]) -> str:
    """Render a module. Imports and declarations are set apart by blank lines."""
    lines: list[str] = []
    previous = None
    for stmt in statements:
        if previous is not None and _blank_line_between(previous, stmt):
            lines.append("")
        lines.extend(render_statement(stmt, 0))
        previous = stmt
    return "\n".join(lines) + "\n"


def _blank_line_between(previous: Statement, current: Statement) -> bool:
    if isinstance(previous, Import):
        return not isinstance(current, Import)
    return isinstance(previous, FunctionDeclaration) or isinstance(current, FunctionDeclaration)


def render_statement(stmt: Statement, depth: int) -> list[str]:
    pad = INDENT * depth
    match stmt:
        case Import(module=module, namespace=namespace, names=names):
            if namespace is not None:
                return [f"{pad}import * as {namespace} from {_string(module)};"]
            return [f"{pad}import {{ {', '.join(names)} }} from {_string(module)};"]
        case VariableStatement(name=name, initializer=initializer, const=is_const):
            keyword = "const" if is_const else "let"
            return [f"{pad}{keyword} {name} = {render_expression(initializer, depth)};"]
        case ExpressionStatement(expression=expression):
            return [f"{pad}{render_expression(expression, depth)};"]
        case If():
            return _if_lines(stmt, depth)
        case Return(expression=None):
            return [f"{pad}return;"]
        case Return(expression=expression):
            return [f"{pad}return {render_expression(expression, depth)};"]
        case Throw(expression=expression):
            return [f"{pad}throw {render_expression(expression, depth)};"]
        case FunctionDeclaration():
            modifiers = ("export " if stmt.exported else "") + ("async " if stmt.is_async else "")
            return_type = f": {stmt.return_type}" if stmt.return_type else ""
            return [
                f"{pad}{modifiers}function {stmt.name}({_parameters(stmt.parameters)}){return_type} {{",
                *_block(stmt.body, depth + 1),
                f"{pad}}}",
            ]
        case TypeAlias(name=name, type=type_text, exported=exported):
            return [f"{pad}{'export ' if exported else ''}type {name} = {type_text};"]
    raise TypeError(f"cannot render statement {stmt!r}")


def _if_lines(stmt: If, depth: int) -> list[str]:
    pad = INDENT * depth
    lines = [f"{pad}if ({render_expression(stmt.condition, depth)}) {{", *_block(stmt.then, depth + 1)]
    if stmt.otherwise:
        lines.append(f"{pad}}} else {{")
        lines.extend(_block(stmt.otherwise, depth + 1))
    lines.append(f"{pad}}}")
    return lines


def _block(statements, depth: int) -> list[str]:
    lines = []
    for stmt in statements:
        lines.extend(render_statement(stmt, depth))
    return lines


def render_expression(expr: Expression, depth: int = 0, parent_precedence: int = 0) -> str:
    """Render an expression whose nested blocks are indented from ``depth``."""
    match expr:
        case Identifier(name=name):
            return name
        case StringLiteral(value=value):
            return _string(value)
        case NumericLiteral(value=value):
            return str(value)
        case PropertyAccess(target=target, name=name):
            return f"{_operand(target, depth)}.{name}"
        case ElementAccess(target=target, index=index):
            return f"{_operand(target, depth)}[{render_expression(index, depth)}]"
        case Call(callee=callee, arguments=arguments):
            return f"{_operand(callee, depth)}({_arguments(arguments, depth)})"
        case New(callee=callee, arguments=arguments):
            return f"new {_operand(callee, depth)}({_arguments(arguments, depth)})"
        case Await(expression=inner):
            text = f"await {render_expression(inner, depth, UNARY_PRECEDENCE)}"
            return _parenthesize(text, UNARY_PRECEDENCE, parent_precedence)
        case Unary(operator=operator, operand=operand):
            separator = " " if operator.isalpha() else ""
            text = f"{operator}{separator}{render_expression(operand, depth, UNARY_PRECEDENCE)}"
            return _parenthesize(text, UNARY_PRECEDENCE, parent_precedence)
        case Binary(left=left, operator=operator, right=right):
            precedence = BINARY_PRECEDENCE[operator]
            text = (
                f"{render_expression(left, depth, precedence)} {operator} "
                f"{render_expression(right, depth, precedence + 1)}"
            )
            return _parenthesize(text, precedence, parent_precedence)
        case ArrowFunction(parameters=parameters, body=body, is_async=is_async):
            prefix = "async " if is_async else ""
            if isinstance(body, tuple):
                text = "\n".join(
                    [f"{prefix}({_parameters(parameters)}) => {{", *_block(body, depth + 1), f"{INDENT * depth}}}"]
                )
            else:
                text = f"{prefix}({_parameters(parameters)}) => {render_expression(body, depth, ARROW_PRECEDENCE + 1)}"
            return _parenthesize(text, ARROW_PRECEDENCE, parent_precedence)
        case TemplateLiteral(parts=parts):
            rendered = "".join(
                _template_text(part) if isinstance(part, str) else f"${{{render_expression(part, depth)}}}"
                for part in parts
            )
            return f"`{rendered}`"
    raise TypeError(f"cannot render expression {expr!r}")


def _operand(expr: Expression, depth: int) -> str:
    return render_expression(expr, depth, POSTFIX_PRECEDENCE)


def _arguments(arguments, depth: int) -> str:
    return ", ".join(render_expression(argument, depth) for argument in arguments)


def _parameters(parameters: tuple[Parameter, ...]) -> str:
    return ", ".join(f"{p.name}: {p.type}" if p.type else p.name for p in parameters)


def _parenthesize(text: str, precedence: int, parent_precedence: int) -> str:
    return f"({text})" if precedence < parent_precedence else text


def _string(value: str) -> str:
    return json.dumps(value)


def _template_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
