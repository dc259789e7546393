"""
Cog Parser

Recursive descent parser that produces an AST from tokens. Expressions are
parsed with the shunting-yard algorithm over the operator precedence table.
"""

import logging
from typing import List, Optional, Sequence, Union
from .tokens import Token, TokenType, TokenList, token_name
from .ast import *
from .errors import SyntaxError

logger = logging.getLogger(__name__)


# Token types that act as binary operators inside expressions
BINARY_OPERATORS = {
    TokenType.PLUS: Operator.ADD,
    TokenType.MINUS: Operator.SUBTRACT,
    TokenType.STAR: Operator.MULTIPLY,
    TokenType.SLASH: Operator.DIVIDE,
    TokenType.EQ: Operator.EQUAL,
    TokenType.NE: Operator.NOT_EQUAL,
    TokenType.LT: Operator.LESS,
    TokenType.LE: Operator.LESS_EQUAL,
    TokenType.GT: Operator.GREATER,
    TokenType.GE: Operator.GREATER_EQUAL,
    TokenType.AND: Operator.AND,
    TokenType.OR: Operator.OR,
    TokenType.RANGE: Operator.RANGE,
}


class Parser:
    """Recursive descent parser for Cog."""

    def __init__(self, tokens: Union[TokenList, Sequence[Token]]):
        """
        Initialize the parser.

        Args:
            tokens: TokenList from the lexer, or a plain sequence of tokens
                ending in an EOF token

        Raises:
            ValueError: If the sequence is empty or lacks the EOF token
        """
        if not isinstance(tokens, TokenList):
            tokens = TokenList(list(tokens))
        self.tokens = tokens

    def parse(self) -> Program:
        """
        Parse the token stream into an AST.

        Returns:
            Program AST node

        Raises:
            SyntaxError: On the first grammar violation
        """
        functions = []

        token = self.advance()
        while token.type != TokenType.EOF:
            if token.type == TokenType.FUNC:
                functions.append(self.function_declaration())
            token = self.advance()

        logger.debug("Parsed %d function(s)", len(functions))
        return Program(functions)

    # =========================================================================
    # Declarations
    # =========================================================================

    def function_declaration(self) -> Function:
        """Parse a function declaration after the 'func' keyword."""
        name = self.consume(TokenType.IDENTIFIER, "function name").value

        self.consume(TokenType.LPAREN, "'('")
        params = self.parameters()
        self.consume(TokenType.RPAREN, "')'")

        returns = self.type_annotation()
        block = self.block()

        return Function(name, params, returns, block)

    def parameters(self) -> List[Parameter]:
        """Parse function parameters."""
        params = []

        if not self.check(TokenType.RPAREN):
            params.append(self.parameter())

            while self.match(TokenType.COMMA):
                params.append(self.parameter())

        return params

    def parameter(self) -> Parameter:
        name = self.consume(TokenType.IDENTIFIER, "parameter name").value
        return Parameter(name, self.type_annotation())

    def type_annotation(self) -> DataType:
        """Parse ': type'."""
        self.consume(TokenType.COLON, "':'")
        token = self.consume(TokenType.TYPE, "data type")
        return TYPE_NAMES[token.value]

    # =========================================================================
    # Statements
    # =========================================================================

    def block(self) -> Block:
        """Parse a brace-delimited block of statements."""
        self.consume(TokenType.LBRACE, "'{'")

        statements = []
        while not self.check(TokenType.RBRACE) and not self.check(TokenType.EOF):
            statements.append(self.statement())

        self.consume(TokenType.RBRACE, "'}'")
        return Block(statements)

    def statement(self) -> Statement:
        """Parse a statement, dispatching on its leading token."""
        token = self.peek()

        if token.type == TokenType.IDENTIFIER:
            return ExpressionStmt(self.expression())
        if token.type == TokenType.RETURN:
            self.advance()
            return ReturnStmt(self.expression())
        if token.type == TokenType.LET:
            return self.var_declaration()
        if token.type == TokenType.IF:
            return self.if_statement()
        if token.type == TokenType.MATCH:
            return self.match_statement()
        if token.type == TokenType.FOR:
            return self.for_statement()
        if token.type == TokenType.BREAK:
            self.advance()
            return BreakStmt()
        if token.type == TokenType.SKIP:
            self.advance()
            return SkipStmt()
        if token.type == TokenType.DEFER:
            self.advance()
            return DeferStmt(self.expression())

        raise self.error("statement", token)

    def var_declaration(self) -> VarDeclStmt:
        """Parse 'let name: type = value', with an optional '[]' after the type."""
        self.consume(TokenType.LET, "'let'")
        name = self.consume(TokenType.IDENTIFIER, "variable name").value
        data_type = self.type_annotation()

        is_array = False
        if self.match(TokenType.LBRACKET):
            self.consume(TokenType.RBRACKET, "']'")
            is_array = True

        self.consume(TokenType.ASSIGN, "'='")
        value = self.expression()

        return VarDeclStmt(name, data_type, is_array, value)

    def if_statement(self) -> IfStmt:
        """Parse an if statement with its elif and else branches."""
        self.consume(TokenType.IF, "'if'")
        condition = self.expression()
        block = self.block()

        elifs = []
        while self.match(TokenType.ELIF):
            elif_condition = self.expression()
            elifs.append(ElifBranch(elif_condition, self.block()))

        else_block = None
        if self.match(TokenType.ELSE):
            else_block = self.block()

        return IfStmt(condition, block, elifs, else_block)

    def match_statement(self) -> MatchStmt:
        """Parse 'match subject { pattern { ... } ... else { ... } }'."""
        self.consume(TokenType.MATCH, "'match'")
        subject = self.expression()
        self.consume(TokenType.LBRACE, "'{'")

        cases = []
        while not self.check(TokenType.RBRACE) and not self.check(TokenType.ELSE) \
                and not self.check(TokenType.EOF):
            pattern = self.expression()
            cases.append(MatchCase(pattern, self.block()))

        else_block = None
        if self.match(TokenType.ELSE):
            else_block = self.block()

        self.consume(TokenType.RBRACE, "'}'")
        return MatchStmt(subject, cases, else_block)

    def for_statement(self) -> ForStmt:
        """Parse 'for [item in] [iterable] { ... }'."""
        self.consume(TokenType.FOR, "'for'")

        item = None
        iterable = None
        if not self.check(TokenType.LBRACE):
            if self.check(TokenType.IDENTIFIER) and self.peek(2).type == TokenType.IN:
                item = self.advance().value
                self.advance()  # consume 'in'

            iterable = self.expression()

        block = self.block()
        return ForStmt(item, iterable, block)

    # =========================================================================
    # Expressions
    # =========================================================================

    def expression(self) -> Expression:
        """Parse an expression with the shunting-yard algorithm."""
        operands: List[Expression] = [self.operand()]
        operators: List[Operator] = []

        while True:
            operator = self.binary_operator()
            if operator is None:
                break

            # Equal precedence reduces first, so operators are left-associative
            while operators and PRECEDENCE[operators[-1]] >= PRECEDENCE[operator]:
                self.reduce(operands, operators)

            operators.append(operator)
            operands.append(self.operand())

        while operators:
            self.reduce(operands, operators)

        return operands[0]

    @staticmethod
    def reduce(operands: List[Expression], operators: List[Operator]) -> None:
        """Replace the top two operands with their binary expression."""
        operator = operators.pop()
        right = operands.pop()
        left = operands.pop()
        operands.append(BinaryExpr(operator, left, right))

    def binary_operator(self) -> Optional[Operator]:
        """Consume and return the next operator, or None if there is none."""
        operator = BINARY_OPERATORS.get(self.peek().type)
        if operator is not None:
            self.advance()
        return operator

    def operand(self) -> Expression:
        """Parse a single operand: literal, array, variable or call."""
        token = self.peek()

        if token.type == TokenType.STRING:
            self.advance()
            return StringLiteral(token.value)
        if token.type == TokenType.NUMBER:
            self.advance()
            return IntegerLiteral(token.value)
        if token.type == TokenType.TRUE:
            self.advance()
            return BooleanLiteral(True)
        if token.type == TokenType.FALSE:
            self.advance()
            return BooleanLiteral(False)
        if token.type == TokenType.IDENTIFIER:
            if self.peek(2).type == TokenType.LPAREN:
                return self.function_call()
            self.advance()
            return VariableExpr(token.value)
        if token.type == TokenType.IT:
            self.advance()
            return VariableExpr('it')
        if token.type == TokenType.LBRACKET:
            return self.array_literal()

        raise self.error("expression", token)

    def function_call(self) -> CallExpr:
        """Parse 'name(arg, ...)'."""
        name = self.consume(TokenType.IDENTIFIER, "function name").value
        self.consume(TokenType.LPAREN, "'('")

        arguments = []
        if not self.check(TokenType.RPAREN):
            arguments.append(self.expression())
            while self.match(TokenType.COMMA):
                arguments.append(self.expression())

        self.consume(TokenType.RPAREN, "')'")
        return CallExpr(name, arguments)

    def array_literal(self) -> ArrayLiteral:
        """Parse '[item, ...]'."""
        self.consume(TokenType.LBRACKET, "'['")

        items = []
        if not self.check(TokenType.RBRACKET):
            items.append(self.expression())
            while self.match(TokenType.COMMA):
                items.append(self.expression())

        self.consume(TokenType.RBRACKET, "']'")
        return ArrayLiteral(items)

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def advance(self) -> Token:
        """Consume and return the next token."""
        return self.tokens.advance()

    def peek(self, n: int = 1) -> Token:
        """Return the token n positions ahead without consuming it."""
        return self.tokens.lookahead(n)

    def check(self, type: TokenType) -> bool:
        """Check if the next token is of given type."""
        return self.peek().type == type

    def match(self, *types: TokenType) -> bool:
        """Consume the next token if it matches any of the given types."""
        for type in types:
            if self.check(type):
                self.advance()
                return True
        return False

    def consume(self, type: TokenType, expected: str) -> Token:
        """Consume a token of the expected type or raise an error."""
        token = self.advance()
        if token.type != type:
            raise self.error(expected, token)
        return token

    @staticmethod
    def error(expected: str, token: Token) -> SyntaxError:
        return SyntaxError(f"Expected {expected}, got '{token_name(token.type)}'",
                           token.line, token.column)
