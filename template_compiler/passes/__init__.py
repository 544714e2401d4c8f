"""
Compiler Passes

This module contains passes for the compilation pipeline:
- Frontend pass (source -> AST)
- Lowering pass (AST -> SSA), which runs the SSA optimizations
- SSA optimization passes (DCE, constant aliasing, CSE)
- Codegen pass (SSA -> JS)
"""

from .dce import DCEPass
from .const_alias import ConstAliasPass
from .cse import CSEPass
from .frontend import TemplateParsePass
from .lowering import SSABuildPass
from .codegen import JSCodegenPass

__all__ = [
    'DCEPass',
    'ConstAliasPass',
    'CSEPass',
    'TemplateParsePass',
    'SSABuildPass',
    'JSCodegenPass',
]
