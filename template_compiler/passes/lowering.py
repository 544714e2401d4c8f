"""
AST to SSA Lowering Pass

Wraps the SSA builder (and its fixed optimization passes) as a pass for
the CompilerPipeline.
"""

from ..pass_manager import LoweringPass, PassConfig, count_instructions
from ..nodes import Program
from ..ssa import SSAIR
from ..ssa_builder import SSABuilder


class SSABuildPass(LoweringPass):
    """
    Pass that lowers the template AST to optimized SSA IR.

    The optimization passes (dce, const-alias, cse) always run inside the
    builder; their metrics are folded into this pass's metrics.
    """

    def __init__(self, print_after_all: bool = False, print_metrics: bool = False):
        super().__init__()
        self.print_after_all = print_after_all
        self.print_metrics = print_metrics

    @property
    def name(self) -> str:
        return "ssa-build"

    def run(self, ast: Program, config: PassConfig) -> SSAIR:
        """Lower the AST to SSA IR."""
        self._init_metrics()

        builder = SSABuilder(
            print_after_all=self.print_after_all,
            print_metrics=self.print_metrics,
        )
        ir = builder.build(ast)

        if self._metrics:
            custom = {
                "blocks": len(ir.blocks),
                "instructions": count_instructions(ir),
            }
            for p in builder.pass_manager.passes:
                metrics = p.get_metrics()
                if metrics is None:
                    continue
                for key, value in metrics.custom.items():
                    custom[f"{p.name}.{key}"] = value
                for msg in metrics.messages:
                    self._add_metric_message(f"{p.name}: {msg}")
            self._metrics.custom = custom

        return ir
