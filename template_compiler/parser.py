"""
Template Parser

Recursive-descent consumer of the token stream, producing a typed AST.

Close tags are consumed without checking that their name matches the
open tag: `<div></span>` parses as a <div>.
"""

from typing import Optional

from .nodes import ASTNode, Component, Element, Expression, Program, Text
from .tokenizer import Tokenizer
from .tokens import TagData, Token, TokenKind, is_dynamic_value


class Parser:
    """Recursive-descent template parser."""

    def __init__(self):
        self._tokens: list[Token] = []
        self._pos = 0

    def parse(self, source: str) -> Program:
        """Tokenize and parse template source into a Program node."""
        self._tokens = Tokenizer(source).tokenize()
        self._pos = 0
        return Program(children=self.parse_children())

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def parse_children(self) -> list[ASTNode]:
        """Parse sibling nodes up to (not including) a close tag or EOF."""
        children: list[ASTNode] = []
        while not self._current().is_kind(TokenKind.CLOSE, TokenKind.EOF):
            children.append(self.parse_node())
        return children

    def parse_node(self) -> ASTNode:
        token = self._current()
        if token.kind == TokenKind.TEXT:
            self._advance()
            return Text(token.value, loc=token.loc)
        if token.kind == TokenKind.EXPR:
            self._advance()
            return Expression(token.value, loc=token.loc)
        return self.parse_element()

    def parse_element(self) -> ASTNode:
        """Parse an open/self-close tag and, if open, its children."""
        token = self._advance()
        data: TagData = token.value
        node_cls = Component if data.tag[:1].isupper() else Element
        node = node_cls(data.tag, dict(data.attributes), [], loc=token.loc)

        if token.kind == TokenKind.OPEN:
            node.children = self.parse_children()
            # Close tag name is not checked against the open tag
            if self._current().kind == TokenKind.CLOSE:
                self._advance()

        node.is_static = is_static_node(node)
        return node


def parse(source: str) -> Program:
    """Parse template source into a Program node."""
    return Parser().parse(source)


def is_static_node(node: Optional[ASTNode]) -> bool:
    """Return True if the subtree has no dynamic-expression dependency."""
    if isinstance(node, Expression):
        return False
    if isinstance(node, Text):
        return True
    if isinstance(node, (Element, Component)):
        if any(is_dynamic_value(v) for v in node.attributes.values()):
            return False
    children = getattr(node, "children", None)
    if children:
        return all(is_static_node(child) for child in children)
    # Unknown node kinds default to static
    return True
