"""
Compiler Errors

Errors raised by the template pipeline. Syntax and structural errors abort
the compile call; generation anomalies are never raised (the code generator
records them as diagnostics instead).
"""

from typing import Optional

from .tokens import SourceLocation


class TemplateCompileError(Exception):
    """Base class for every error raised while compiling a template."""

    def __init__(self, message: str, loc: Optional[SourceLocation] = None):
        self.message = message
        self.loc = loc
        if loc is not None:
            message = f"{message} at line {loc.line}, column {loc.column}"
        super().__init__(message)


class TemplateSyntaxError(TemplateCompileError, ValueError):
    """Malformed template source."""


class UnterminatedTag(TemplateSyntaxError):
    """End of input reached inside a tag."""


class UnterminatedExpression(TemplateSyntaxError):
    """End of input reached inside a `{...}` expression."""


class StructuralError(TemplateCompileError, ValueError):
    """AST shape that code generation cannot proceed from."""
