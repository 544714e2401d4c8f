"""
Template Tokenizer

Single forward pass over the (trimmed) template source. Dispatches on the
current character:

    '</'  -> close tag
    '<'   -> open / self-closing tag (with attributes)
    '{'   -> expression (brace-depth aware, inner braces kept)
    else  -> text run up to the next '<' or '{'

Whitespace between tokens is skipped, never tokenized. Reaching the end of
input before a terminator raises UnterminatedTag / UnterminatedExpression;
an empty `{}` raises TemplateSyntaxError.
"""

from .errors import TemplateSyntaxError, UnterminatedExpression, UnterminatedTag
from .tokens import AttrValue, SourceLocation, TagData, Token, TokenKind

_IDENT_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-"
)
# Bare attribute values do not allow '-'
_BARE_VALUE_CHARS = _IDENT_CHARS - {"-"}


class Tokenizer:
    """Converts template text into a flat token stream."""

    def __init__(self, source: str):
        self.source = source.strip()
        self.pos = 0
        self.line = 1
        self.column = 1

    # === Cursor ===

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return ""

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip_whitespace(self):
        while not self._at_end() and self._peek().isspace():
            self._advance()

    def _location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column)

    def _read_while(self, chars: frozenset) -> str:
        start = self.pos
        while not self._at_end() and self._peek() in chars:
            self._advance()
        return self.source[start:self.pos]

    # === Token stream ===

    def tokenize(self) -> list[Token]:
        """Tokenize the whole source. The stream always ends with EOF."""
        tokens: list[Token] = []
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            char = self._peek()
            if char == "<":
                if self._peek(1) == "/":
                    tokens.append(self._read_close_tag())
                else:
                    tokens.append(self._read_open_tag())
            elif char == "{":
                tokens.append(self._read_expression())
            else:
                tokens.append(self._read_text())
        tokens.append(Token(TokenKind.EOF, "", self._location()))
        return tokens

    def _read_open_tag(self) -> Token:
        loc = self._location()
        self._advance()  # '<'
        self._skip_whitespace()
        tag = self._read_while(_IDENT_CHARS)
        self._skip_whitespace()

        attributes: dict[str, AttrValue] = {}
        while True:
            if self._at_end():
                raise UnterminatedTag(f"Unterminated tag <{tag}", loc)
            if self._peek() in (">", "/"):
                break
            name, value = self._read_attribute(tag, loc)
            attributes[name] = value
            self._skip_whitespace()

        kind = TokenKind.OPEN
        if self._peek() == "/":
            self._advance()
            kind = TokenKind.SELF_CLOSE
        if self._at_end():
            raise UnterminatedTag(f"Unterminated tag <{tag}", loc)
        if self._peek() != ">":
            raise TemplateSyntaxError(
                f"Expected '>' to close tag <{tag}>, got {self._peek()!r}",
                self._location(),
            )
        self._advance()
        return Token(kind, TagData(tag, attributes), loc)

    def _read_attribute(self, tag: str, tag_loc: SourceLocation) -> tuple[str, AttrValue]:
        attr_loc = self._location()
        name = self._read_while(_IDENT_CHARS)
        if not name:
            raise TemplateSyntaxError(
                f"Invalid character {self._peek()!r} in tag <{tag}>", attr_loc
            )
        self._skip_whitespace()
        if self._peek() != "=":
            return name, True
        self._advance()  # '='
        self._skip_whitespace()

        char = self._peek()
        if char in ('"', "'"):
            quote = self._advance()
            start = self.pos
            while not self._at_end() and self._peek() != quote:
                self._advance()
            if self._at_end():
                raise UnterminatedTag(
                    f"Unterminated value for attribute '{name}' in tag <{tag}", tag_loc
                )
            value = self.source[start:self.pos]
            self._advance()  # closing quote
            return name, value
        if char == "{":
            return name, "{" + self._scan_braces(attr_loc) + "}"
        return name, self._read_while(_BARE_VALUE_CHARS)

    def _read_close_tag(self) -> Token:
        loc = self._location()
        self._advance()  # '<'
        self._advance()  # '/'
        start = self.pos
        while not self._at_end() and self._peek() != ">":
            self._advance()
        if self._at_end():
            raise UnterminatedTag("Unterminated closing tag", loc)
        name = self.source[start:self.pos].strip()
        self._advance()  # '>'
        return Token(TokenKind.CLOSE, name, loc)

    def _scan_braces(self, loc: SourceLocation) -> str:
        """Read a balanced `{...}` group starting at '{'; return the inner text."""
        self._advance()  # '{'
        start = self.pos
        depth = 1
        while not self._at_end():
            char = self._advance()
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    inner = self.source[start:self.pos - 1]
                    if not inner.strip():
                        raise TemplateSyntaxError("Empty expression", loc)
                    return inner
        raise UnterminatedExpression("Unterminated expression", loc)

    def _read_expression(self) -> Token:
        loc = self._location()
        expr = self._scan_braces(loc)
        return Token(TokenKind.EXPR, expr.strip(), loc)

    def _read_text(self) -> Token:
        loc = self._location()
        start = self.pos
        while not self._at_end() and self._peek() not in ("<", "{"):
            self._advance()
        return Token(TokenKind.TEXT, self.source[start:self.pos].strip(), loc)


def tokenize(source: str) -> list[Token]:
    """Tokenize template source."""
    return Tokenizer(source).tokenize()
