"""
Template Compiler

Compiles a small markup+expression template language into a JavaScript
render factory that builds a UI tree through three runtime collaborators
(construct, mount, patch).

Compilation pipeline: source -> tokens -> AST -> SSA IR -> JS
SSA optimizations (always run): DCE -> constant aliasing -> CSE
"""

# Tokens and errors
from .tokens import TokenKind, Token, TagData, SourceLocation
from .errors import (
    TemplateCompileError,
    TemplateSyntaxError,
    UnterminatedTag,
    UnterminatedExpression,
    StructuralError,
)

# Frontend
from .tokenizer import Tokenizer, tokenize
from .nodes import ASTNode, Program, Element, Component, Text, Expression, Fragment
from .parser import Parser, parse, is_static_node

# SSA IR
from .ssa import (
    SSAOp,
    AllocShape,
    Alloc,
    Assign,
    Load,
    Store,
    Call,
    CreateElement,
    CreateText,
    SetProp,
    AppendChild,
    Mount,
    Patch,
    Return,
    SSAInstruction,
    SSABasicBlock,
    SSAIR,
)
from .ssa_builder import SSABuilder, build_ssa

# Pass infrastructure
from .pass_manager import (
    PassConfig,
    PassMetrics,
    CompilerPass,
    SSAPass,
    CodegenPass,
    PassManager,
    CompilerPipeline,
    count_instructions,
)

# Codegen
from .codegen import (
    Target,
    CodeGenOptions,
    CodeGenerator,
    generate_code,
    generate_optimized_code,
    generate_debug_code,
)

# Printing utilities
from .printing import IRStats, format_ir, print_ir, analyze_ir

# Main entry point
from .compile import compile_template

# Passes
from .passes import DCEPass, ConstAliasPass, CSEPass, TemplateParsePass, SSABuildPass, JSCodegenPass


# Public API
def compile(source: str) -> str:
    """Compile a template with the fully optimized configuration."""
    return compile_template(source, CodeGenOptions())


def compile_with_options(source: str, options) -> str:
    """Compile a template with explicit codegen options (dict or CodeGenOptions)."""
    return compile_template(source, CodeGenOptions.coerce(options))


__all__ = [
    # Tokens and errors
    'TokenKind', 'Token', 'TagData', 'SourceLocation',
    'TemplateCompileError', 'TemplateSyntaxError', 'UnterminatedTag',
    'UnterminatedExpression', 'StructuralError',
    # Frontend
    'Tokenizer', 'tokenize', 'ASTNode', 'Program', 'Element', 'Component',
    'Text', 'Expression', 'Fragment', 'Parser', 'parse', 'is_static_node',
    # SSA IR
    'SSAOp', 'AllocShape', 'Alloc', 'Assign', 'Load', 'Store', 'Call',
    'CreateElement', 'CreateText', 'SetProp', 'AppendChild', 'Mount', 'Patch',
    'Return', 'SSAInstruction', 'SSABasicBlock', 'SSAIR',
    'SSABuilder', 'build_ssa',
    # Pass infrastructure
    'PassConfig', 'PassMetrics', 'CompilerPass', 'SSAPass', 'CodegenPass',
    'PassManager', 'CompilerPipeline', 'count_instructions',
    # Codegen
    'Target', 'CodeGenOptions', 'CodeGenerator', 'generate_code',
    'generate_optimized_code', 'generate_debug_code',
    # Printing
    'IRStats', 'format_ir', 'print_ir', 'analyze_ir',
    # Compilation
    'compile_template',
    # Passes
    'DCEPass', 'ConstAliasPass', 'CSEPass', 'TemplateParsePass', 'SSABuildPass', 'JSCodegenPass',
    # Public API
    'compile', 'compile_with_options',
]
