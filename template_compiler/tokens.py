"""
Template Tokens

Token kinds and source locations produced by the tokenizer. Tokens are
transient: the parser consumes them and they are discarded afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class TokenKind(Enum):
    """Token kinds."""
    OPEN = "open"
    SELF_CLOSE = "selfClose"
    CLOSE = "close"
    TEXT = "text"
    EXPR = "expr"
    EOF = "eof"


@dataclass(frozen=True)
class SourceLocation:
    """1-based line/column where a token (or node) starts."""
    line: int = 1
    column: int = 1

    def __repr__(self):
        return f"{self.line}:{self.column}"


# Attribute values: True for a bare flag, otherwise the literal text.
# Dynamic values keep their braces ("{expr}") as a marker.
AttrValue = Union[bool, str]


@dataclass(frozen=True)
class TagData:
    """Payload of open/self-close tokens."""
    tag: str
    attributes: dict[str, AttrValue] = field(default_factory=dict)


@dataclass(frozen=True)
class Token:
    """A single template token."""
    kind: TokenKind
    value: Union[str, TagData]
    loc: SourceLocation

    def is_kind(self, *kinds: TokenKind) -> bool:
        return self.kind in kinds

    def __repr__(self):
        return f"{self.kind.value}({self.value!r}) @{self.loc}"


def is_dynamic_value(value: AttrValue) -> bool:
    """True if an attribute value is a `{...}` expression marker."""
    return isinstance(value, str) and value.startswith("{") and value.endswith("}")


def unwrap_dynamic_value(value: str) -> str:
    """Strip the outer braces from a `{...}` attribute marker."""
    return value[1:-1]
