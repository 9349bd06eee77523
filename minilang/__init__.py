"""
MiniLang - compiler front-end and interpreter for a tiny imperative language

Integer variables, arithmetic and comparison expressions, if/else, while and
blocks, lowered to three-address code and executed by a program-counter
interpreter.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType
from .parser import Parser
from .symbols import SymbolTable, SymbolKind
from .ir import IRGenerator, Instruction, Opcode
from .evaluator import Evaluator
from .compiler import Compiler, CompilationResult, compile_source

__all__ = [
    'Lexer',
    'Token',
    'TokenType',
    'Parser',
    'SymbolTable',
    'SymbolKind',
    'IRGenerator',
    'Instruction',
    'Opcode',
    'Evaluator',
    'Compiler',
    'CompilationResult',
    'compile_source',
]
