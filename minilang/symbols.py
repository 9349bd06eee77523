"""minilang.symbols

Flat symbol table shared by code generation and execution.

There is a single namespace: blocks do not open scopes and a name can be
declared once per program. Compiler temporaries live in the same table but
are named `%t<n>`; `%` never starts a lexer token, so a user identifier can
never collide with a temporary. Symbol kind is always read from
`Symbol.kind`, never inferred from the name.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional


TEMP_PREFIX = "%t"


def format_value(value: int) -> str:
    """Decimal text of `value`, or an approximate digit count when the
    interpreter refuses the conversion (Python 3.11+ digit limit)."""
    try:
        return str(value)
    except ValueError:
        digits = int(abs(value).bit_length() * math.log10(2)) + 1
        return f"<~{digits}-digit integer>"


class SymbolKind(Enum):
    VARIABLE = "variable"
    TEMPORARY = "temporary"


@dataclass
class Symbol:
    name: str
    kind: SymbolKind
    value: Optional[int] = None
    line: Optional[int] = None
    initialized: bool = field(init=False)

    def __post_init__(self) -> None:
        self.initialized = self.value is not None


@dataclass
class TableStatistics:
    total_symbols: int
    variables: int
    temporaries: int
    initialized_variables: int


class RedeclarationError(Exception):
    """Name declared twice in the flat namespace"""
    def __init__(self, name: str, line: Optional[int] = None):
        self.name = name
        self.line = line
        msg = f"Variable '{name}' is already declared"
        if line is not None:
            msg += f" (line {line})"
        super().__init__(msg)


class UndeclaredError(Exception):
    """Name used or assigned without a prior declaration"""
    def __init__(self, name: str, line: Optional[int] = None):
        self.name = name
        self.line = line
        msg = f"Variable '{name}' is not declared"
        if line is not None:
            msg += f" (line {line})"
        super().__init__(msg)


class SymbolTable:
    """Insertion-ordered name -> Symbol map"""

    def __init__(self):
        self._symbols: Dict[str, Symbol] = {}
        self.temp_counter = 0

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def insert(self, name: str, kind: SymbolKind, value: Optional[int] = None,
               line: Optional[int] = None) -> Symbol:
        if name in self._symbols:
            raise RedeclarationError(name, line)
        sym = Symbol(name=name, kind=kind, value=value, line=line)
        self._symbols[name] = sym
        return sym

    def exists(self, name: str) -> bool:
        return name in self._symbols

    def lookup(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def update(self, name: str, value: int) -> Symbol:
        sym = self._symbols.get(name)
        if sym is None:
            raise UndeclaredError(name)
        sym.value = value
        sym.initialized = True
        return sym

    def fresh_temporary(self) -> Symbol:
        name = f"{TEMP_PREFIX}{self.temp_counter}"
        self.temp_counter += 1
        return self.insert(name, SymbolKind.TEMPORARY)

    def variables(self) -> List[Symbol]:
        return [s for s in self if s.kind is SymbolKind.VARIABLE]

    def temporaries(self) -> List[Symbol]:
        return [s for s in self if s.kind is SymbolKind.TEMPORARY]

    def statistics(self) -> TableStatistics:
        variables = self.variables()
        return TableStatistics(
            total_symbols=len(self),
            variables=len(variables),
            temporaries=len(self.temporaries()),
            initialized_variables=sum(1 for v in variables if v.initialized),
        )

    def render(self) -> str:
        """Tabular dump of every symbol in declaration order."""
        lines = ["Name\tKind\tValue\tLine", "-" * 40]
        for sym in self:
            value = format_value(sym.value) if sym.value is not None else "undefined"
            line = sym.line if sym.line is not None else "-"
            lines.append(f"{sym.name}\t{sym.kind.value}\t{value}\t{line}")
        return "\n".join(lines)
