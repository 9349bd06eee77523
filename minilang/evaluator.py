"""minilang.evaluator

Program-counter interpreter for MiniLang three-address code.

The evaluator owns a value store seeded from the symbol table: variables
start at their recorded value (or 0), temporaries at 0. Execution walks the
instruction list from index 0 and halts once the program counter runs past
the end; there is no HALT instruction and no step limit, so a program that
loops forever runs forever.

Labels are mapped in one pre-scan. A jump to an unknown label is only
reported when that jump is actually taken.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from minilang.ir import Instruction, LabelError, Opcode, is_literal
from minilang.symbols import SymbolKind, SymbolTable


class EvaluatorState(Enum):
    IDLE = auto()
    RUNNING = auto()
    HALTED_OK = auto()
    HALTED_ERROR = auto()


class UndefinedVariableError(Exception):
    """Operand names nothing in the value store"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined variable: {name}")


class DivisionByZeroError(Exception):
    """DIV with a zero divisor"""
    def __init__(self, instruction: Instruction):
        self.instruction = instruction
        super().__init__(f"Division by zero in '{instruction}'")


@dataclass
class ExecutionResult:
    values: Dict[str, int]
    success: bool
    steps: int = 0
    trace: List[str] = field(default_factory=list)


BINARY_OPS: Dict[Opcode, Callable[[int, int], int]] = {
    Opcode.ADD: operator.add,
    Opcode.SUB: operator.sub,
    Opcode.MUL: operator.mul,
    Opcode.DIV: operator.floordiv,
    Opcode.EQ: lambda a, b: int(a == b),
    Opcode.NE: lambda a, b: int(a != b),
    Opcode.LT: lambda a, b: int(a < b),
    Opcode.GT: lambda a, b: int(a > b),
    Opcode.LE: lambda a, b: int(a <= b),
    Opcode.GE: lambda a, b: int(a >= b),
}


class Evaluator:
    """Executes an instruction list against a store seeded from `symbol_table`"""

    def __init__(self, symbol_table: SymbolTable, trace: bool = False):
        self.symbol_table = symbol_table
        self.trace_enabled = trace
        self.memory: Dict[str, int] = {}
        self.labels: Dict[str, int] = {}
        self.pc = 0
        self.steps = 0
        self.trace: List[str] = []
        self.state = EvaluatorState.IDLE
        self.result: Optional[ExecutionResult] = None

    def run(self, instructions: List[Instruction]) -> ExecutionResult:
        """Execute `instructions` to completion.

        Raises UndefinedVariableError, LabelError or DivisionByZeroError on
        the first failing instruction, leaving the state HALTED_ERROR and
        `result` holding the store as it stood, with success False.
        """
        self._init_memory()
        self._map_labels(instructions)
        self.pc = 0
        self.steps = 0
        self.trace = []
        self.state = EvaluatorState.RUNNING
        self.result = None

        try:
            while self.pc < len(instructions):
                ins = instructions[self.pc]
                self.steps += 1
                if self.trace_enabled and ins.op is not Opcode.LABEL:
                    self.trace.append(str(ins))
                if not self._execute(ins):
                    self.pc += 1
        except (UndefinedVariableError, LabelError, DivisionByZeroError):
            self.state = EvaluatorState.HALTED_ERROR
            self.result = self._snapshot(success=False)
            raise

        self.state = EvaluatorState.HALTED_OK
        self.result = self._snapshot(success=True)
        return self.result

    def _snapshot(self, success: bool) -> ExecutionResult:
        return ExecutionResult(
            values=dict(self.memory),
            success=success,
            steps=self.steps,
            trace=list(self.trace),
        )

    def _init_memory(self) -> None:
        self.memory = {}
        for sym in self.symbol_table:
            if sym.kind is SymbolKind.VARIABLE and sym.value is not None:
                self.memory[sym.name] = sym.value
            else:
                self.memory[sym.name] = 0

    def _map_labels(self, instructions: List[Instruction]) -> None:
        self.labels = {}
        for i, ins in enumerate(instructions):
            if ins.op is Opcode.LABEL:
                self.labels[ins.label] = i

    def _execute(self, ins: Instruction) -> bool:
        """Run one instruction; True when it moved the program counter."""
        op = ins.op

        if op is Opcode.ASSIGN:
            self.memory[ins.result] = self._value(ins.operand1)
            return False

        if op in BINARY_OPS:
            a = self._value(ins.operand1)
            b = self._value(ins.operand2)
            if op is Opcode.DIV and b == 0:
                raise DivisionByZeroError(ins)
            self.memory[ins.result] = BINARY_OPS[op](a, b)
            return False

        if op is Opcode.LABEL:
            return False

        if op is Opcode.GOTO:
            self._jump(ins.label)
            return True

        if op in (Opcode.IF_FALSE, Opcode.IF_TRUE):
            truthy = self._value(ins.operand1) != 0
            if truthy == (op is Opcode.IF_TRUE):
                self._jump(ins.label)
                return True
            return False

        raise TypeError(f"unsupported opcode: {op}")

    def _jump(self, label: str) -> None:
        if label not in self.labels:
            raise LabelError(label)
        self.pc = self.labels[label]

    def _value(self, operand: str) -> int:
        if is_literal(operand):
            return int(operand)
        if operand in self.memory:
            return self.memory[operand]
        raise UndefinedVariableError(operand)
