"""
toylang Abstract Syntax Tree (AST) Definitions
==============================================

This module defines the AST node types produced by the parser.

Node Hierarchy
--------------
ASTNode (base)
├── Expressions
│   ├── NumberLiteral - numeric constant
│   ├── VariableReference - variable name
│   ├── BinaryExpression - binary operator applied to two operands
│   └── CallExpression - function call with argument expressions
└── Declarations
    ├── Prototype - function name and parameter names
    └── FunctionDefinition - prototype plus body expression

Design Notes
------------
- All nodes are frozen dataclasses; sequences are stored as tuples, so
  a tree cannot change once the parser has built it.
- Each node owns its children exclusively. The parser never shares a
  node between two parents.
- Each node stores the location of its first token. Locations are not
  part of node equality, so trees can be compared structurally.
- A top-level expression is a FunctionDefinition whose prototype has an
  empty name and no parameters (see Prototype.is_anonymous).
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional, Union

from toylang.errors import SourceLocation


# Name used for the prototype of a top-level expression
ANONYMOUS_NAME = ""


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location of the node's first token
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Numeric literal such as 1.0.

    Attributes:
        value: The literal value
    """
    value: float


@dataclass(frozen=True)
class VariableReference(Expression):
    """
    Reference to a named variable, such as x.

    Attributes:
        name: The variable name
    """
    name: str


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation expression (left op right).

    Attributes:
        operator: The operator character, e.g. '+'
        left: Left operand expression
        right: Right operand expression
    """
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    """
    Function call expression.

    Attributes:
        callee: Name of the function being called
        arguments: Argument expressions in source order
    """
    callee: str
    arguments: tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "arguments", tuple(self.arguments))


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass(frozen=True)
class Prototype(ASTNode):
    """
    Function prototype: the name and parameter names of a function.

    Used both by extern declarations and by function definitions.
    Parameter names are kept in order; duplicates are not rejected.

    Attributes:
        name: Function name (empty for a top-level expression)
        parameters: Parameter names in order
    """
    name: str
    parameters: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "parameters", tuple(self.parameters))

    @property
    def is_anonymous(self) -> bool:
        """True for the prototype wrapping a top-level expression."""
        return self.name == ANONYMOUS_NAME and not self.parameters


@dataclass(frozen=True)
class FunctionDefinition(ASTNode):
    """
    Function definition: a prototype plus a body expression.

    Attributes:
        prototype: The function's prototype
        body: The expression computed by the function
    """
    prototype: Prototype
    body: Expression

    @property
    def is_top_level_expression(self) -> bool:
        """True if this wraps a bare top-level expression."""
        return self.prototype.is_anonymous


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; everything else falls through to generic_visit, which visits
    the children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_CallExpression(self, node):
                self.count += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode) -> Any:
        """Visit a node by dispatching to visit_<ClassName>."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes in field order."""
        for f in fields(node):
            value = getattr(node, f.name)
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(definition))

    Output for "def f(x) x*(x+1)":
        Function: f(x)
          Body: (x * (x + 1))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_FunctionDefinition(self, node: FunctionDefinition):
        if node.is_top_level_expression:
            self._emit("TopLevel:")
        else:
            self._emit(f"Function: {self._proto_str(node.prototype)}")
        self.indent_level += 1
        self._emit(f"Body: {self.expr_str(node.body)}")
        self.indent_level -= 1

    def visit_Prototype(self, node: Prototype):
        self._emit(f"Extern: {self._proto_str(node)}")

    def generic_visit(self, node: ASTNode) -> None:
        # Bare expressions print on one line
        self._emit(f"Expr: {self.expr_str(node)}")

    def _proto_str(self, node: Prototype) -> str:
        return f"{node.name}({', '.join(node.parameters)})"

    def expr_str(self, expr: Expression) -> str:
        """
        Convert an expression to a fully parenthesised string.

        Uses an explicit work stack instead of recursion, so long
        left-associative chains such as 1+1+...+1 print at any length.
        Stack items are either nodes still to render or literal text.
        """
        parts: list[str] = []
        stack: list[Union[str, Expression]] = [expr]

        while stack:
            item = stack.pop()

            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, NumberLiteral):
                parts.append(f"{item.value:g}")
            elif isinstance(item, VariableReference):
                parts.append(item.name)
            elif isinstance(item, BinaryExpression):
                # Pushed in reverse: "(" left " op " right ")"
                stack.extend([")", item.right, f" {item.operator} ", item.left, "("])
            elif isinstance(item, CallExpression):
                stack.append(")")
                for index in range(len(item.arguments) - 1, -1, -1):
                    stack.append(item.arguments[index])
                    if index:
                        stack.append(", ")
                stack.append(f"{item.callee}(")
            else:
                parts.append(f"<{type(item).__name__}>")

        return "".join(parts)
