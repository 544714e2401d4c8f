"""
Constant Aliasing Pass

Gives every use of a static literal its own name. Destinations of static
`alloc` instructions form the constant table; each operand that refers to a
known constant is rewritten to a fresh `fold<N>` alias, defined by an
`assign` inserted right before the user. Aliases join the constant table.

This is a structural rename, not arithmetic folding: the template language
has no arithmetic.
"""

from ..pass_manager import SSAPass, PassConfig
from ..ssa import SSAIR, Alloc, Assign, SSAInstruction


class ConstAliasPass(SSAPass):
    """Rewrite constant operands to fresh aliases."""

    def __init__(self):
        super().__init__()
        self._aliases_created = 0

    @property
    def name(self) -> str:
        return "const-alias"

    def run(self, ir: SSAIR, config: PassConfig) -> SSAIR:
        self._init_metrics()
        self._aliases_created = 0

        if not config.enabled:
            return ir

        constants: set[str] = set()
        for inst in ir.instructions():
            if isinstance(inst, Alloc) and inst.is_static is True:
                constants.add(inst.dest)
        num_constants = len(constants)

        for block in ir.blocks.values():
            new_insts: list[SSAInstruction] = []
            for inst in block.instructions:
                pending: list[Assign] = []

                def alias(name: str) -> str:
                    if name not in constants:
                        return name
                    new_name = ir.new_name("fold")
                    pending.append(Assign(new_name, name, block_id=block.id))
                    constants.add(new_name)
                    return new_name

                inst.rewrite_operands(alias)
                new_insts.extend(pending)
                new_insts.append(inst)
                self._aliases_created += len(pending)
            block.instructions = new_insts

        if self._metrics:
            self._metrics.custom = {
                "constants": num_constants,
                "aliases_created": self._aliases_created,
            }

        return ir
