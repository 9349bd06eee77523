"""
Main Compiler Driver

Orchestrates the compilation pipeline: lex, parse, generate, execute.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from minilang.ast_nodes import Program
from minilang.evaluator import (
    DivisionByZeroError,
    Evaluator,
    ExecutionResult,
    UndefinedVariableError,
)
from minilang.ir import IRGenerator, Instruction, LabelError, format_instructions, validate_labels
from minilang.lexer import Lexer, LexerError, Token
from minilang.parser import Parser, ParserError
from minilang.symbols import RedeclarationError, SymbolTable, UndeclaredError, format_value


NESTING_TOO_DEEP = "program nests too deeply"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class CompilationResult:
    """Result of compilation.

    Artifacts of every phase that completed are attached, even on failure;
    phases that never ran leave theirs as None.
    """
    success: bool
    tokens: Optional[List[Token]] = None
    ast: Optional[Program] = None
    instructions: Optional[List[Instruction]] = None
    symbol_table: Optional[SymbolTable] = None
    execution: Optional[ExecutionResult] = None
    errors: List[str] = None

    def __post_init__(self):
        if self.errors is None:
            self.errors = []

    def bindings(self) -> Dict[str, int]:
        """Final values of user variables, in declaration order"""
        if self.execution is None or self.symbol_table is None:
            return {}
        return {
            sym.name: self.execution.values[sym.name]
            for sym in self.symbol_table.variables()
        }

    def report(self) -> str:
        """Human-readable summary of every artifact produced"""
        sections: List[str] = []
        if self.symbol_table is not None:
            stats = self.symbol_table.statistics()
            sections.append("SYMBOL TABLE\n" + self.symbol_table.render())
            sections.append(
                "STATISTICS\n"
                f"Total symbols: {stats.total_symbols}\n"
                f"User variables: {stats.variables}\n"
                f"Temporaries: {stats.temporaries}\n"
                f"Initialized variables: {stats.initialized_variables}"
            )
        if self.instructions is not None:
            sections.append("INTERMEDIATE CODE (three-address code)\n" + format_instructions(self.instructions))
        if self.execution is not None:
            lines = [f"  {name} = {format_value(value)}" for name, value in self.bindings().items()]
            sections.append("EXECUTION RESULT\nFinal variables:\n" + "\n".join(lines))
        for e in self.errors:
            sections.append(f"Error: {e}")
        return "\n\n".join(sections)


class Compiler:
    """Main compiler class orchestrating all compilation stages"""

    def __init__(self, *, trace: Optional[bool] = None, check_labels: Optional[bool] = None):
        self.trace = _env_flag("MINILANG_TRACE") if trace is None else trace
        self.check_labels = _env_flag("MINILANG_CHECK_LABELS") if check_labels is None else check_labels

    def compile(self, source_code: str) -> CompilationResult:
        """Compile and run source code.

        Every call starts from a fresh symbol table; no state is shared
        between calls.
        """
        # Phase 1: Lexical Analysis
        try:
            tokens = self.get_tokens(source_code)
        except LexerError as e:
            return CompilationResult(success=False, errors=[f"Lexical analysis failed: {e}"])

        # Phase 2: Syntax Analysis
        try:
            ast = self.get_ast(tokens)
        except ParserError as e:
            return CompilationResult(success=False, tokens=tokens, errors=[f"Syntax analysis failed: {e}"])
        except RecursionError:
            return CompilationResult(success=False, tokens=tokens, errors=[f"Syntax analysis failed: {NESTING_TOO_DEEP}"])

        # Phase 3: IR Generation
        symbol_table = SymbolTable()
        try:
            ir = self.get_ir(ast, symbol_table)
            if self.check_labels:
                validate_labels(ir)
        except (RedeclarationError, UndeclaredError, LabelError) as e:
            return self._generation_failure(tokens, ast, symbol_table, str(e))
        except RecursionError:
            return self._generation_failure(tokens, ast, symbol_table, NESTING_TOO_DEEP)

        # Phase 4: Execution
        try:
            execution = self.execute(ir, symbol_table)
        except (UndefinedVariableError, LabelError, DivisionByZeroError) as e:
            return CompilationResult(
                success=False,
                tokens=tokens,
                ast=ast,
                instructions=ir,
                symbol_table=symbol_table,
                errors=[f"Execution failed: {e}"],
            )

        for sym in symbol_table.variables():
            symbol_table.update(sym.name, execution.values[sym.name])

        return CompilationResult(
            success=True,
            tokens=tokens,
            ast=ast,
            instructions=ir,
            symbol_table=symbol_table,
            execution=execution,
        )

    def _generation_failure(self, tokens: List[Token], ast: Program,
                            symbol_table: SymbolTable, message: str) -> CompilationResult:
        return CompilationResult(
            success=False,
            tokens=tokens,
            ast=ast,
            symbol_table=symbol_table,
            errors=[f"Code generation failed: {message}"],
        )

    def get_tokens(self, source_code: str) -> List[Token]:
        """Get tokens from source code"""
        return Lexer(source_code).tokenize()

    def get_ast(self, tokens: List[Token]) -> Program:
        """Get AST from tokens"""
        return Parser(tokens).parse()

    def get_ir(self, ast: Program, symbol_table: SymbolTable) -> List[Instruction]:
        """Generate IR from AST, populating `symbol_table`"""
        return IRGenerator(symbol_table).generate(ast)

    def execute(self, ir: List[Instruction], symbol_table: SymbolTable) -> ExecutionResult:
        """Run IR against a store seeded from `symbol_table`"""
        return Evaluator(symbol_table, trace=self.trace).run(ir)


def compile_source(source_code: str, **options) -> CompilationResult:
    """Compile and run `source_code` with a fresh Compiler"""
    return Compiler(**options).compile(source_code)
