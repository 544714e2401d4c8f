"""Shared fixtures and imports for compiler tests."""

import os
import sys

# Add parent directories to path for imports
_this_dir = os.path.dirname(os.path.abspath(__file__))
_repo_root = os.path.dirname(os.path.dirname(_this_dir))
sys.path.insert(0, _repo_root)

from template_compiler import (
    SSAIR,
    PassConfig,
    build_ssa,
    parse,
)


def _cfg(name, **opts):
    """Helper to create PassConfig."""
    return PassConfig(name=name, enabled=True, options=opts)


def build(source: str) -> SSAIR:
    """Parse and build optimized SSA IR for a template."""
    return build_ssa(parse(source))


def entry_ops(ir: SSAIR) -> list[str]:
    """Op names of the entry block, in program order."""
    return [inst.op.value for inst in ir.entry_block.instructions]


def make_ir(*instructions) -> SSAIR:
    """Build an unoptimized single-block IR from explicit instructions."""
    ir = SSAIR()
    block = ir.new_block()
    ir.entry = block.id
    block.instructions.extend(instructions)
    return ir


def defined_names(ir: SSAIR) -> set[str]:
    return {inst.dest for inst in ir.instructions() if inst.dest is not None}
