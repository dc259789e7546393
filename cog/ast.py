"""
Cog Abstract Syntax Tree

Defines AST node classes for the Cog language.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import List, Optional, Any, Dict


# =============================================================================
# Types and Operators
# =============================================================================

class DataType(Enum):
    """Declared data types. Dropped during code generation."""
    VOID = auto()
    STRING = auto()
    I32 = auto()
    BOOL = auto()


TYPE_NAMES = {
    'void': DataType.VOID,
    'string': DataType.STRING,
    'i32': DataType.I32,
    'bool': DataType.BOOL,
}


class Operator(Enum):
    """Binary operators."""
    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    AND = auto()
    OR = auto()
    RANGE = auto()


# Operator precedence (higher = binds tighter)
PRECEDENCE = {
    Operator.MULTIPLY: 120,
    Operator.DIVIDE: 120,
    Operator.ADD: 100,
    Operator.SUBTRACT: 100,
    Operator.RANGE: 70,
    Operator.EQUAL: 50,
    Operator.NOT_EQUAL: 50,
    Operator.LESS: 50,
    Operator.LESS_EQUAL: 50,
    Operator.GREATER: 50,
    Operator.GREATER_EQUAL: 50,
    Operator.AND: 25,
    Operator.OR: 25,
}


# =============================================================================
# Base Classes
# =============================================================================

class ASTNode(ABC):
    """Base class for all AST nodes."""

    @abstractmethod
    def accept(self, visitor: 'ASTVisitor') -> Any:
        """Accept a visitor for traversal."""
        pass


class Expression(ASTNode):
    """Base class for expression nodes."""
    pass


class Statement(ASTNode):
    """Base class for statement nodes."""
    pass


# =============================================================================
# Expressions
# =============================================================================

@dataclass
class StringLiteral(Expression):
    """Single-quoted string literal, stored verbatim."""
    value: str

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_string(self)


@dataclass
class IntegerLiteral(Expression):
    """Integer literal, kept as its digit text."""
    value: str

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_integer(self)


@dataclass
class BooleanLiteral(Expression):
    value: bool

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_boolean(self)


@dataclass
class ArrayLiteral(Expression):
    """Bracketed, comma-separated list of expressions."""
    items: List[Expression] = field(default_factory=list)

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_array(self)


@dataclass
class VariableExpr(Expression):
    """Variable reference, including the implicit loop variable 'it'."""
    name: str

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_variable(self)


@dataclass
class CallExpr(Expression):
    """Function call by name."""
    name: str
    arguments: List[Expression] = field(default_factory=list)

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_call(self)


@dataclass
class BinaryExpr(Expression):
    """Binary operator expression."""
    operator: Operator
    left: Expression
    right: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_binary(self)

    @property
    def is_range(self) -> bool:
        return self.operator is Operator.RANGE


# =============================================================================
# Statements
# =============================================================================

@dataclass
class ExpressionStmt(Statement):
    """Expression as a statement."""
    expression: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_expression_stmt(self)


@dataclass
class ReturnStmt(Statement):
    value: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_return(self)


@dataclass
class VarDeclStmt(Statement):
    """Variable declaration: let name: type[] = value."""
    name: str
    type: DataType
    is_array: bool
    value: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_var_decl(self)


@dataclass
class Block(ASTNode):
    """Block of statements."""
    statements: List[Statement] = field(default_factory=list)

    @property
    def variables(self) -> List[VarDeclStmt]:
        """Variable declarations of this block, in statement order."""
        return [stmt for stmt in self.statements if isinstance(stmt, VarDeclStmt)]

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_block(self)


@dataclass
class ElifBranch:
    condition: Expression
    block: Block


@dataclass
class IfStmt(Statement):
    """If statement with elif branches and an optional else block."""
    condition: Expression
    block: Block
    elifs: List[ElifBranch] = field(default_factory=list)
    else_block: Optional[Block] = None

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_if(self)


@dataclass
class MatchCase:
    pattern: Expression
    block: Block


@dataclass
class MatchStmt(Statement):
    """Match statement over a subject expression."""
    subject: Expression
    cases: List[MatchCase] = field(default_factory=list)
    else_block: Optional[Block] = None

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_match(self)


@dataclass
class ForStmt(Statement):
    """
    For loop.

    Without an iterable the loop runs forever. A range iterable counts over
    [start, end), any other iterable is walked element by element. The loop
    variable is 'it' unless named explicitly.
    """
    item: Optional[str]
    iterable: Optional[Expression]
    block: Block

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_for(self)

    @property
    def item_name(self) -> str:
        return self.item or 'it'

    @property
    def is_infinite(self) -> bool:
        return self.iterable is None

    @property
    def is_range(self) -> bool:
        return isinstance(self.iterable, BinaryExpr) and self.iterable.is_range


@dataclass
class BreakStmt(Statement):
    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_break(self)


@dataclass
class SkipStmt(Statement):
    """Continue with the next loop iteration."""

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_skip(self)


@dataclass
class DeferStmt(Statement):
    """Expression run at the normal exit of the enclosing block."""
    expression: Expression

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_defer(self)


# =============================================================================
# Declarations
# =============================================================================

@dataclass
class Parameter:
    name: str
    type: DataType


@dataclass
class Function(ASTNode):
    """Function declaration."""
    name: str
    params: List[Parameter]
    returns: DataType
    block: Block

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_function(self)


@dataclass
class Program(ASTNode):
    """Root node of the AST."""
    functions: List[Function] = field(default_factory=list)

    def accept(self, visitor: 'ASTVisitor') -> Any:
        return visitor.visit_program(self)

    def function_names(self) -> List[str]:
        return [func.name for func in self.functions]

    def find_function(self, name: str) -> Optional[Function]:
        for func in self.functions:
            if func.name == name:
                return func
        return None


# =============================================================================
# Visitor Interface
# =============================================================================

class ASTVisitor(ABC):
    """Visitor interface for AST traversal."""

    # Expressions
    @abstractmethod
    def visit_string(self, node: StringLiteral) -> Any:
        pass

    @abstractmethod
    def visit_integer(self, node: IntegerLiteral) -> Any:
        pass

    @abstractmethod
    def visit_boolean(self, node: BooleanLiteral) -> Any:
        pass

    @abstractmethod
    def visit_array(self, node: ArrayLiteral) -> Any:
        pass

    @abstractmethod
    def visit_variable(self, node: VariableExpr) -> Any:
        pass

    @abstractmethod
    def visit_call(self, node: CallExpr) -> Any:
        pass

    @abstractmethod
    def visit_binary(self, node: BinaryExpr) -> Any:
        pass

    # Statements
    @abstractmethod
    def visit_expression_stmt(self, node: ExpressionStmt) -> Any:
        pass

    @abstractmethod
    def visit_return(self, node: ReturnStmt) -> Any:
        pass

    @abstractmethod
    def visit_var_decl(self, node: VarDeclStmt) -> Any:
        pass

    @abstractmethod
    def visit_block(self, node: Block) -> Any:
        pass

    @abstractmethod
    def visit_if(self, node: IfStmt) -> Any:
        pass

    @abstractmethod
    def visit_match(self, node: MatchStmt) -> Any:
        pass

    @abstractmethod
    def visit_for(self, node: ForStmt) -> Any:
        pass

    @abstractmethod
    def visit_break(self, node: BreakStmt) -> Any:
        pass

    @abstractmethod
    def visit_skip(self, node: SkipStmt) -> Any:
        pass

    @abstractmethod
    def visit_defer(self, node: DeferStmt) -> Any:
        pass

    # Declarations
    @abstractmethod
    def visit_function(self, node: Function) -> Any:
        pass

    @abstractmethod
    def visit_program(self, node: Program) -> Any:
        pass


# =============================================================================
# AST Printer (for debugging)
# =============================================================================

class ASTPrinter(ASTVisitor):
    """Prints AST for debugging."""

    def __init__(self):
        self.indent = 0

    def print(self, node: ASTNode) -> str:
        return node.accept(self)

    def _indent(self) -> str:
        return "  " * self.indent

    def _nested(self, *nodes: Optional[ASTNode]) -> List[str]:
        self.indent += 1
        lines = [node.accept(self) for node in nodes if node is not None]
        self.indent -= 1
        return lines

    def visit_string(self, node: StringLiteral) -> str:
        return f"{self._indent()}String({node.value!r})"

    def visit_integer(self, node: IntegerLiteral) -> str:
        return f"{self._indent()}Integer({node.value})"

    def visit_boolean(self, node: BooleanLiteral) -> str:
        return f"{self._indent()}Boolean({str(node.value).lower()})"

    def visit_array(self, node: ArrayLiteral) -> str:
        return "\n".join([f"{self._indent()}Array"] + self._nested(*node.items))

    def visit_variable(self, node: VariableExpr) -> str:
        return f"{self._indent()}Variable({node.name})"

    def visit_call(self, node: CallExpr) -> str:
        return "\n".join([f"{self._indent()}Call({node.name})"] + self._nested(*node.arguments))

    def visit_binary(self, node: BinaryExpr) -> str:
        header = f"{self._indent()}Binary({node.operator.name})"
        return "\n".join([header] + self._nested(node.left, node.right))

    def visit_expression_stmt(self, node: ExpressionStmt) -> str:
        return node.expression.accept(self)

    def visit_return(self, node: ReturnStmt) -> str:
        return "\n".join([f"{self._indent()}Return"] + self._nested(node.value))

    def visit_var_decl(self, node: VarDeclStmt) -> str:
        suffix = "[]" if node.is_array else ""
        header = f"{self._indent()}VarDecl({node.name}: {node.type.name.lower()}{suffix})"
        return "\n".join([header] + self._nested(node.value))

    def visit_block(self, node: Block) -> str:
        return "\n".join([f"{self._indent()}Block"] + self._nested(*node.statements))

    def visit_if(self, node: IfStmt) -> str:
        lines = [f"{self._indent()}If"] + self._nested(node.condition, node.block)
        for branch in node.elifs:
            lines.append(f"{self._indent()}Elif")
            lines.extend(self._nested(branch.condition, branch.block))
        if node.else_block:
            lines.append(f"{self._indent()}Else")
            lines.extend(self._nested(node.else_block))
        return "\n".join(lines)

    def visit_match(self, node: MatchStmt) -> str:
        lines = [f"{self._indent()}Match"] + self._nested(node.subject)
        for case in node.cases:
            lines.append(f"{self._indent()}Case")
            lines.extend(self._nested(case.pattern, case.block))
        if node.else_block:
            lines.append(f"{self._indent()}Default")
            lines.extend(self._nested(node.else_block))
        return "\n".join(lines)

    def visit_for(self, node: ForStmt) -> str:
        header = f"{self._indent()}For({node.item_name})"
        return "\n".join([header] + self._nested(node.iterable, node.block))

    def visit_break(self, node: BreakStmt) -> str:
        return f"{self._indent()}Break"

    def visit_skip(self, node: SkipStmt) -> str:
        return f"{self._indent()}Skip"

    def visit_defer(self, node: DeferStmt) -> str:
        return "\n".join([f"{self._indent()}Defer"] + self._nested(node.expression))

    def visit_function(self, node: Function) -> str:
        params = ", ".join(f"{p.name}: {p.type.name.lower()}" for p in node.params)
        header = f"{self._indent()}Function({node.name}({params}): {node.returns.name.lower()})"
        return "\n".join([header] + self._nested(node.block))

    def visit_program(self, node: Program) -> str:
        return "\n".join(["Program"] + self._nested(*node.functions))


def ast_to_dict(node: Any) -> Any:
    """Convert an AST into JSON-compatible data, tagging each node with its type."""
    if isinstance(node, Enum):
        return node.name
    if isinstance(node, list):
        return [ast_to_dict(item) for item in node]
    if hasattr(node, '__dataclass_fields__'):
        d: Dict[str, Any] = {"type": node.__class__.__name__}
        for f in fields(node):
            d[f.name] = ast_to_dict(getattr(node, f.name))
        return d
    return node
