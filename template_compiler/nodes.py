"""
Template AST

Typed tree produced by the parser. Each node kind carries only the fields
relevant to it. The tree is owned by the parser's caller and is read-only
while the SSA builder walks it.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from .tokens import AttrValue, SourceLocation


@dataclass
class Text:
    """Literal text run. Always static."""
    value: str
    loc: Optional[SourceLocation] = None
    is_static: bool = True

    def __repr__(self):
        return f"Text({self.value!r})"


@dataclass
class Expression:
    """`{expr}` interpolation. The expression text is opaque; never static."""
    expression: str
    loc: Optional[SourceLocation] = None
    is_static: bool = False

    def __repr__(self):
        return f"Expression({self.expression!r})"


@dataclass
class Element:
    """Lowercase tag, e.g. <div>."""
    tag: str
    attributes: dict[str, AttrValue] = field(default_factory=dict)
    children: list = field(default_factory=list)  # list[ASTNode]
    loc: Optional[SourceLocation] = None
    is_static: bool = True

    def __repr__(self):
        return f"Element(<{self.tag}>, attrs={len(self.attributes)}, children={len(self.children)})"


@dataclass
class Component:
    """Capitalized tag, e.g. <Button>. Rendered by calling the component."""
    tag: str
    attributes: dict[str, AttrValue] = field(default_factory=dict)
    children: list = field(default_factory=list)  # list[ASTNode]
    loc: Optional[SourceLocation] = None
    is_static: bool = True

    def __repr__(self):
        return f"Component(<{self.tag}>, attrs={len(self.attributes)}, children={len(self.children)})"


@dataclass
class Fragment:
    """Grouping node without a tag. Not produced by the parser."""
    children: list = field(default_factory=list)  # list[ASTNode]
    loc: Optional[SourceLocation] = None


@dataclass
class Program:
    """Root of a parsed template."""
    children: list = field(default_factory=list)  # list[ASTNode]


ASTNode = Union[Program, Element, Component, Text, Expression, Fragment]
