"""
Template Parsing Pass

Wraps the tokenizer and parser as a pass for the CompilerPipeline.
"""

from ..pass_manager import ParsePass, PassConfig, count_nodes
from ..nodes import Program
from ..parser import Parser


class TemplateParsePass(ParsePass):
    """Pass that parses template source into an AST."""

    @property
    def name(self) -> str:
        return "parse"

    def run(self, source: str, config: PassConfig) -> Program:
        """Parse template source."""
        self._init_metrics()

        program = Parser().parse(source)

        if self._metrics:
            self._metrics.custom = {
                "nodes": count_nodes(program),
            }

        return program
