"""
IR Printing Utilities

Human-readable listings and summary statistics for SSA IR.
"""

from dataclasses import dataclass

from .ssa import SSAIR


@dataclass
class IRStats:
    """Summary counts for an SSA IR."""
    instruction_count: int = 0
    block_count: int = 0
    static_node_count: int = 0
    dynamic_node_count: int = 0


def format_ir(ir: SSAIR) -> str:
    """Per-block instruction listing, one `dest = op args [value]` per line."""
    lines: list[str] = []
    for block_id, block in ir.blocks.items():
        lines.append(f"Block {block_id}:")
        for inst in block.instructions:
            lines.append(f"  {inst!r}")
        lines.append("")
    if ir.aliases:
        lines.append("Aliases:")
        for name, target in ir.aliases.items():
            lines.append(f"  {name} -> {target}")
        lines.append("")
    return "\n".join(lines)


def print_ir(ir: SSAIR):
    """Pretty-print SSA IR."""
    print(format_ir(ir))


def analyze_ir(ir: SSAIR) -> IRStats:
    """Count instructions, blocks, and static/dynamic classified instructions.

    Instructions without a static/dynamic classification (assign, call,
    props allocs, ...) count toward neither node total.
    """
    stats = IRStats(block_count=len(ir.blocks))
    for inst in ir.instructions():
        stats.instruction_count += 1
        if inst.is_static is True:
            stats.static_node_count += 1
        elif inst.is_static is False:
            stats.dynamic_node_count += 1
    return stats
