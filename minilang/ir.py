"""minilang.ir

Intermediate Representation (IR) for MiniLang.

The IR is a flat list of three-address `Instruction`s. Control flow is
expressed only with `LABEL`, `GOTO`, `IF_FALSE` and `IF_TRUE`.

Operands are plain strings:

- integer literals as their decimal text (`5`)
- user variables by name (`x`)
- temporaries as `%t<n>` (allocated through the symbol table)
- labels as `L<n>`, numbered by one counter per generation run
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from minilang.ast_nodes import (
    Program,
    VarDecl,
    Assign,
    If,
    While,
    Block,
    BinaryExpr,
    NumberLit,
    Identifier,
    Expression,
    Statement,
)
from minilang.symbols import SymbolKind, SymbolTable, UndeclaredError


class Opcode(Enum):
    ASSIGN = "ASSIGN"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    EQ = "EQ"
    NE = "NE"
    LT = "LT"
    GT = "GT"
    LE = "LE"
    GE = "GE"
    LABEL = "LABEL"
    GOTO = "GOTO"
    IF_FALSE = "IF_FALSE"
    IF_TRUE = "IF_TRUE"


BINARY_OPCODES: Dict[str, Opcode] = {
    "+": Opcode.ADD,
    "-": Opcode.SUB,
    "*": Opcode.MUL,
    "/": Opcode.DIV,
    "==": Opcode.EQ,
    "!=": Opcode.NE,
    "<": Opcode.LT,
    ">": Opcode.GT,
    "<=": Opcode.LE,
    ">=": Opcode.GE,
}

OPERATOR_TEXT: Dict[Opcode, str] = {op: text for text, op in BINARY_OPCODES.items()}

JUMP_OPCODES = frozenset({Opcode.GOTO, Opcode.IF_FALSE, Opcode.IF_TRUE})


class LabelError(Exception):
    """Jump to a label that no LABEL instruction defines"""
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Label not found: {label}")


def is_literal(operand: str) -> bool:
    return operand.isascii() and operand.isdigit()


@dataclass(frozen=True)
class Instruction:
    op: Opcode
    result: Optional[str] = None
    operand1: Optional[str] = None
    operand2: Optional[str] = None
    label: Optional[str] = None

    def __str__(self) -> str:
        if self.op is Opcode.ASSIGN:
            return f"{self.result} = {self.operand1}"
        if self.op in OPERATOR_TEXT:
            return f"{self.result} = {self.operand1} {OPERATOR_TEXT[self.op]} {self.operand2}"
        if self.op is Opcode.LABEL:
            return f"{self.label}:"
        if self.op is Opcode.GOTO:
            return f"goto {self.label}"
        if self.op is Opcode.IF_FALSE:
            return f"if_false {self.operand1} goto {self.label}"
        return f"if_true {self.operand1} goto {self.label}"


def format_instructions(instructions: List[Instruction]) -> str:
    """Numbered listing, one instruction per line, starting at 1."""
    return "\n".join(f"{i}.\t{ins}" for i, ins in enumerate(instructions, start=1))


def validate_labels(instructions: List[Instruction]) -> None:
    """Raise LabelError for the first jump whose target is never defined."""
    defined = {ins.label for ins in instructions if ins.op is Opcode.LABEL}
    for ins in instructions:
        if ins.op in JUMP_OPCODES and ins.label not in defined:
            raise LabelError(ins.label)


class IRGenerator:
    """Generates three-address code, registering symbols as it goes"""

    def __init__(self, symbol_table: SymbolTable):
        self.symbol_table = symbol_table
        self.instructions: List[Instruction] = []
        self.label_counter = 0

    def generate(self, ast: Program) -> List[Instruction]:
        """Generate IR from AST"""
        self.instructions = []
        self.label_counter = 0
        for stmt in ast.statements:
            self._gen_stmt(stmt)
        return self.instructions

    # -------------
    # Helpers
    # -------------

    def _emit(self, op: Opcode, **fields: Optional[str]) -> Instruction:
        ins = Instruction(op=op, **fields)
        self.instructions.append(ins)
        return ins

    def _new_temp(self) -> str:
        return self.symbol_table.fresh_temporary().name

    def _new_label(self) -> str:
        l = f"L{self.label_counter}"
        self.label_counter += 1
        return l

    # -------------
    # Statements
    # -------------

    def _gen_stmt(self, stmt: Statement) -> None:
        if isinstance(stmt, VarDecl):
            # Declared before the initializer runs: `var a = a + 1;` reads
            # the zero-seeded a.
            self.symbol_table.insert(stmt.name, SymbolKind.VARIABLE, line=stmt.line)
            v = self._gen_expr(stmt.initializer)
            self._emit(Opcode.ASSIGN, result=stmt.name, operand1=v)
            return

        if isinstance(stmt, Assign):
            if not self.symbol_table.exists(stmt.name):
                raise UndeclaredError(stmt.name, stmt.line)
            v = self._gen_expr(stmt.value)
            self._emit(Opcode.ASSIGN, result=stmt.name, operand1=v)
            return

        if isinstance(stmt, If):
            cond = self._gen_expr(stmt.condition)
            else_lbl = self._new_label()
            end_lbl = self._new_label() if stmt.else_branch is not None else None
            self._emit(Opcode.IF_FALSE, operand1=cond, label=else_lbl)
            self._gen_stmt(stmt.then_branch)
            if stmt.else_branch is None:
                self._emit(Opcode.LABEL, label=else_lbl)
                return
            self._emit(Opcode.GOTO, label=end_lbl)
            self._emit(Opcode.LABEL, label=else_lbl)
            self._gen_stmt(stmt.else_branch)
            self._emit(Opcode.LABEL, label=end_lbl)
            return

        if isinstance(stmt, While):
            start = self._new_label()
            end = self._new_label()
            self._emit(Opcode.LABEL, label=start)
            cond = self._gen_expr(stmt.condition)
            self._emit(Opcode.IF_FALSE, operand1=cond, label=end)
            self._gen_stmt(stmt.body)
            self._emit(Opcode.GOTO, label=start)
            self._emit(Opcode.LABEL, label=end)
            return

        if isinstance(stmt, Block):
            for item in stmt.statements:
                self._gen_stmt(item)
            return

        raise TypeError(f"unsupported statement node: {type(stmt).__name__}")

    # -------------
    # Expressions
    # -------------

    def _gen_expr(self, expr: Expression) -> str:
        """Lower `expr`, returning the operand that holds its value.

        Walks the tree post-order with an explicit stack: left operand,
        right operand, then the operator, so long left-folded chains such
        as `1 + 2 + ... + n` do not consume Python stack frames.
        """
        operands: List[str] = []
        pending: List[Tuple[Expression, bool]] = [(expr, False)]
        while pending:
            node, operands_ready = pending.pop()
            if not isinstance(node, BinaryExpr):
                operands.append(self._gen_leaf(node))
            elif operands_ready:
                rhs = operands.pop()
                lhs = operands.pop()
                t = self._new_temp()
                self._emit(BINARY_OPCODES[node.operator], result=t, operand1=lhs, operand2=rhs)
                operands.append(t)
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        return operands.pop()

    def _gen_leaf(self, expr: Expression) -> str:
        if isinstance(expr, NumberLit):
            return str(expr.value)

        if isinstance(expr, Identifier):
            if not self.symbol_table.exists(expr.name):
                raise UndeclaredError(expr.name, expr.line)
            return expr.name

        raise TypeError(f"unsupported expression node: {type(expr).__name__}")
