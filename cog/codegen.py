"""
Cog Code Generator

Generates JavaScript source text from an AST.
"""

import logging
from typing import List, Set
from .ast import *
from .errors import CompileError

logger = logging.getLogger(__name__)


# Intrinsic functions and the JavaScript they lower to
INTRINSICS = {
    'print': 'console.log',
}

JS_OPERATORS = {
    Operator.ADD: '+',
    Operator.SUBTRACT: '-',
    Operator.MULTIPLY: '*',
    Operator.DIVIDE: '/',
    Operator.EQUAL: '===',
    Operator.NOT_EQUAL: '!==',
    Operator.LESS: '<',
    Operator.LESS_EQUAL: '<=',
    Operator.GREATER: '>',
    Operator.GREATER_EQUAL: '>=',
    Operator.AND: '&&',
    Operator.OR: '||',
    Operator.RANGE: '',    # only meaningful as for-loop bounds
}

# JavaScript binding strength of each emitted operator
JS_PRECEDENCE = {
    Operator.MULTIPLY: 12,
    Operator.DIVIDE: 12,
    Operator.ADD: 11,
    Operator.SUBTRACT: 11,
    Operator.LESS: 9,
    Operator.LESS_EQUAL: 9,
    Operator.GREATER: 9,
    Operator.GREATER_EQUAL: 9,
    Operator.EQUAL: 8,
    Operator.NOT_EQUAL: 8,
    Operator.AND: 4,
    Operator.OR: 3,
    Operator.RANGE: 0,
}


class CodeGenerator(ASTVisitor):
    """
    Generates JavaScript from a program AST.

    Statements lower to lists of indented lines, expressions to strings.
    No semantic validation is done: calls to names that are neither
    intrinsics nor functions of the program lower to nothing.
    """

    def __init__(self, indent: int = 4):
        self.indent_width = indent
        self.level = 0
        self.function_names: Set[str] = set()
        self.defers: List[List[str]] = []

    def generate(self, program: Program) -> str:
        """Generate JavaScript source from a program AST."""
        self.level = 0
        self.function_names = set(program.function_names())
        self.defers = []

        output = program.accept(self)
        logger.debug("Generated %d line(s) of JavaScript", output.count("\n") + 1)
        return output

    # =========================================================================
    # Helpers
    # =========================================================================

    def indent(self) -> str:
        return " " * (self.level * self.indent_width)

    def nested(self, block: Block, depth: int = 1) -> List[str]:
        """Lower a block `depth` levels deeper than the current one."""
        self.level += depth
        try:
            return block.accept(self)
        finally:
            self.level -= depth

    def operand(self, node: Expression, parent: Operator, right: bool) -> str:
        """Lower a binary operand, parenthesized when JavaScript would regroup it."""
        text = node.accept(self)
        if isinstance(node, BinaryExpr):
            child, outer = JS_PRECEDENCE[node.operator], JS_PRECEDENCE[parent]
            if child < outer or (right and child == outer):
                return f"({text})"
        return text

    # =========================================================================
    # Expression Visitors
    # =========================================================================

    def visit_string(self, node: StringLiteral) -> str:
        return f"'{node.value}'"

    def visit_integer(self, node: IntegerLiteral) -> str:
        # leading zeros would read as a legacy octal literal
        return str(int(node.value))

    def visit_boolean(self, node: BooleanLiteral) -> str:
        return "true" if node.value else "false"

    def visit_array(self, node: ArrayLiteral) -> str:
        return "[" + ", ".join(item.accept(self) for item in node.items) + "]"

    def visit_variable(self, node: VariableExpr) -> str:
        return node.name

    def visit_call(self, node: CallExpr) -> str:
        """Lower intrinsic and declared calls. Unknown names lower to nothing."""
        args = ", ".join(arg.accept(self) for arg in node.arguments)

        if node.name in INTRINSICS:
            return f"{INTRINSICS[node.name]}({args})"

        if node.name in self.function_names:
            return f"{node.name}({args})"

        logger.warning("Call to undeclared function '%s' generates no code", node.name)
        return ""

    def visit_binary(self, node: BinaryExpr) -> str:
        if node.operator not in JS_OPERATORS:
            raise CompileError(f"Unknown binary operator: {node.operator}")

        left = self.operand(node.left, node.operator, right=False)
        right = self.operand(node.right, node.operator, right=True)
        return f"{left} {JS_OPERATORS[node.operator]} {right}"

    # =========================================================================
    # Statement Visitors
    # =========================================================================

    def visit_expression_stmt(self, node: ExpressionStmt) -> List[str]:
        return [f"{self.indent()}{node.expression.accept(self)};"]

    def visit_return(self, node: ReturnStmt) -> List[str]:
        return [f"{self.indent()}return {node.value.accept(self)};"]

    def visit_var_decl(self, node: VarDeclStmt) -> List[str]:
        return [f"{self.indent()}const {node.name} = {node.value.accept(self)};"]

    def visit_block(self, node: Block) -> List[str]:
        """
        Lower a block's statements in order.

        Deferred closures are called in declaration order at the end of the
        block. Early exits (return, break, skip) do not run them.
        """
        self.defers.append([])
        try:
            lines = []
            for stmt in node.statements:
                lines.extend(stmt.accept(self))

            for name in self.defers[-1]:
                lines.append(f"{self.indent()}{name}();")
            return lines
        finally:
            self.defers.pop()

    def visit_if(self, node: IfStmt) -> List[str]:
        ind = self.indent()

        lines = [f"{ind}if ({node.condition.accept(self)}) {{"]
        lines.extend(self.nested(node.block))

        for branch in node.elifs:
            lines.append(f"{ind}}} else if ({branch.condition.accept(self)}) {{")
            lines.extend(self.nested(branch.block))

        if node.else_block is not None:
            lines.append(f"{ind}}} else {{")
            lines.extend(self.nested(node.else_block))

        lines.append(f"{ind}}}")
        return lines

    def visit_match(self, node: MatchStmt) -> List[str]:
        """Lower to a switch; every branch ends in break so none falls through."""
        ind = self.indent()
        case_ind = " " * ((self.level + 1) * self.indent_width)
        body_ind = " " * ((self.level + 2) * self.indent_width)

        lines = [f"{ind}switch ({node.subject.accept(self)}) {{"]
        for case in node.cases:
            lines.append(f"{case_ind}case {case.pattern.accept(self)}: {{")
            lines.extend(self.nested(case.block, depth=2))
            lines.append(f"{body_ind}break;")
            lines.append(f"{case_ind}}}")

        if node.else_block is not None:
            lines.append(f"{case_ind}default: {{")
            lines.extend(self.nested(node.else_block, depth=2))
            lines.append(f"{body_ind}break;")
            lines.append(f"{case_ind}}}")

        lines.append(f"{ind}}}")
        return lines

    def visit_for(self, node: ForStmt) -> List[str]:
        ind = self.indent()
        item = node.item_name

        if node.is_infinite:
            header = "while (true) {"
        elif node.is_range:
            start = node.iterable.left.accept(self)
            end = node.iterable.right.accept(self)
            header = f"for (let {item} = {start}; {item} < {end}; {item}++) {{"
        else:
            header = f"for (const {item} of {node.iterable.accept(self)}) {{"

        lines = [f"{ind}{header}"]
        lines.extend(self.nested(node.block))
        lines.append(f"{ind}}}")
        return lines

    def visit_break(self, node: BreakStmt) -> List[str]:
        return [f"{self.indent()}break;"]

    def visit_skip(self, node: SkipStmt) -> List[str]:
        return [f"{self.indent()}continue;"]

    def visit_defer(self, node: DeferStmt) -> List[str]:
        """Capture the expression as a closure, called when the block ends."""
        pending = self.defers[-1]
        name = f"defer_{len(pending)}"
        pending.append(name)
        return [f"{self.indent()}const {name} = () => {{ {node.expression.accept(self)}; }};"]

    # =========================================================================
    # Declaration Visitors
    # =========================================================================

    def visit_function(self, node: Function) -> List[str]:
        params = ", ".join(param.name for param in node.params)

        lines = [f"{self.indent()}function {node.name}({params}) {{"]
        lines.extend(self.nested(node.block))
        lines.append(f"{self.indent()}}}")
        return lines

    def visit_program(self, node: Program) -> str:
        lines = []
        for func in node.functions:
            lines.extend(func.accept(self))
            lines.append("")

        main = node.find_function('main')
        if main is not None and not main.params:
            lines.append("main();")

        return "\n".join(lines)
