"""
Cog Compiler Package

A Python-based compiler for the Cog scripting language.
Translates Cog source code into JavaScript.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from .tokens import Token, TokenType, TokenList
from .lexer import Lexer
from .ast import *
from .parser import Parser
from .codegen import CodeGenerator
from .errors import CogError, CompileError, SyntaxError

logger = logging.getLogger(__name__)

__version__ = "0.1.0"
__all__ = [
    "Token",
    "TokenType",
    "TokenList",
    "Lexer",
    "Parser",
    "CodeGenerator",
    "CogError",
    "CompileError",
    "SyntaxError",
    "CompilerOptions",
    "compile_source",
    "compile_file",
]


@dataclass
class CompilerOptions:
    """Switches for compile_file."""
    dump_tokens: bool = False
    dump_ast: bool = False


def compile_source(source: str) -> str:
    """
    Compile Cog source code to JavaScript.

    Args:
        source: Cog source code string

    Returns:
        JavaScript source text

    Raises:
        SyntaxError: If parsing fails
    """
    lexer = Lexer(source)
    tokens = lexer.tokenize()

    parser = Parser(tokens)
    ast = parser.parse()

    codegen = CodeGenerator()
    return codegen.generate(ast)


def compile_file(filepath: str, options: Optional[CompilerOptions] = None) -> str:
    """
    Compile a Cog source file to JavaScript.

    Read failures and compile errors are logged and produce an empty
    result. The dump options print the tokens or the AST instead of
    compiling, and also return an empty result.

    Args:
        filepath: Path to .cog source file
        options: Dump switches, defaults to a plain compile

    Returns:
        JavaScript source text, or '' when nothing was generated
    """
    options = options or CompilerOptions()

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()
    except OSError as e:
        logger.error("Could not read file %s: %s", filepath, e)
        return ''

    try:
        tokens = Lexer(source).tokenize()
        if options.dump_tokens:
            print(tokens.dump())
            return ''

        program = Parser(tokens).parse()
        if options.dump_ast:
            print(json.dumps(ast_to_dict(program), indent=2))
            return ''

        return CodeGenerator().generate(program)
    except CogError as e:
        e.filename = filepath
        logger.error("Compilation failed: %s", e)
        return ''
