"""
SSA to JavaScript Codegen Pass

Wraps the code generator as a pass for the CompilerPipeline.
"""

from ..pass_manager import CodegenPass, PassConfig
from ..ssa import SSAIR
from ..codegen import CodeGenerator, CodeGenOptions


class JSCodegenPass(CodegenPass):
    """
    Pass that emits the render factory from SSA IR.

    Codegen options come from PassConfig.options (camelCase or snake_case
    keys); missing keys take the optimized defaults. Generation anomalies
    are reported as diagnostics, never raised.
    """

    def __init__(self, options=None):
        super().__init__()
        self.options = options

    @property
    def name(self) -> str:
        return "codegen"

    def run(self, ir: SSAIR, config: PassConfig) -> str:
        """Generate the render factory."""
        self._init_metrics()

        options = self.options
        if options is None:
            options = CodeGenOptions.from_dict(config.options)
        generator = CodeGenerator(options)
        code = generator.generate(ir)

        if self._metrics:
            self._metrics.custom = {
                "statements": generator.statement_count,
                "static_cache_hits": generator.static_cache_hits,
                "inline_cached_elements": generator.inline_cached_elements,
            }
            for msg in generator.anomalies:
                self._add_metric_message(msg)

        return code
