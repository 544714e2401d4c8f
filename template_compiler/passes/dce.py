"""
Dead Code Elimination (DCE) Pass

Removes instructions whose results are never used.
"""

from ..pass_manager import SSAPass, PassConfig
from ..ssa import SSAIR, SIDE_EFFECT_OPS, SSAInstruction


class DCEPass(SSAPass):
    """
    Single-pass dead code elimination.

    Pass 1: Collect every name used as an operand anywhere in the IR.
    Pass 2: Drop instructions whose dest is not in that set, unless the op
            has side effects (call, store). Instructions without a dest are
            always kept.

    This is not run to a fixed point: an instruction that only fed a
    now-removed instruction survives until the next run. Tree-construction
    ops mutate their containers, so the leftovers are still meaningful.
    """

    def __init__(self):
        super().__init__()
        self._eliminated = 0

    @property
    def name(self) -> str:
        return "dce"

    def run(self, ir: SSAIR, config: PassConfig) -> SSAIR:
        self._init_metrics()
        self._eliminated = 0

        if not config.enabled:
            return ir

        used = self._collect_uses(ir)

        for block in ir.blocks.values():
            kept = [inst for inst in block.instructions if self._is_live(inst, used)]
            self._eliminated += len(block.instructions) - len(kept)
            block.instructions = kept

        if self._metrics:
            self._metrics.custom = {
                "instructions_eliminated": self._eliminated,
            }

        return ir

    def _collect_uses(self, ir: SSAIR) -> set[str]:
        used: set[str] = set()
        for inst in ir.instructions():
            used.update(inst.operands)
        return used

    def _is_live(self, inst: SSAInstruction, used: set[str]) -> bool:
        if inst.dest is None:
            return True
        if inst.op in SIDE_EFFECT_OPS:
            return True
        return inst.dest in used
