"""
Abstract Syntax Tree (AST) Node Definitions for MiniLang

Defines the structure of AST nodes used to represent MiniLang programs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class ASTNode:
    """Base class for all AST nodes"""
    # Location fields (line/column) are required constructor arguments
    # so subclasses' non-default fields don't follow defaults.
    line: int
    column: int


# ============== Expression Nodes ==============

@dataclass
class NumberLit(ASTNode):
    """Integer literal"""
    value: int


@dataclass
class Identifier(ASTNode):
    """Variable reference"""
    name: str


@dataclass
class BinaryExpr(ASTNode):
    """Binary operation; `operator` is the source spelling ('+', '<=', ...)"""
    operator: str
    left: 'Expression'
    right: 'Expression'


Expression = Union[BinaryExpr, NumberLit, Identifier]


# ============== Statement Nodes ==============

@dataclass
class VarDecl(ASTNode):
    """var name = initializer;"""
    name: str
    initializer: Expression


@dataclass
class Assign(ASTNode):
    """name = value;"""
    name: str
    value: Expression


@dataclass
class If(ASTNode):
    """If statement"""
    condition: Expression
    then_branch: 'Statement'
    else_branch: Optional['Statement'] = None


@dataclass
class While(ASTNode):
    """While loop"""
    condition: Expression
    body: 'Statement'


@dataclass
class Block(ASTNode):
    """Block statement { ... }; introduces no scope"""
    statements: List['Statement'] = field(default_factory=list)


Statement = Union[VarDecl, Assign, If, While, Block]


# ============== Program ==============

@dataclass
class Program(ASTNode):
    """Root node: the top-level statement list"""
    statements: List[Statement] = field(default_factory=list)
