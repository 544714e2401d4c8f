"""
Main Compilation Entry Point

Provides the compile_template function that orchestrates the full
compilation pipeline from template source to JavaScript using the
CompilerPipeline.
"""

import os
from typing import Optional, Union

from .codegen import CodeGenOptions
from .pass_manager import CompilerPipeline
from .passes import TemplateParsePass, SSABuildPass, JSCodegenPass

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "pass_config.json")


def compile_template(
    source: str,
    options: Union[CodeGenOptions, dict, None] = None,
    config: Optional[dict] = None,
    print_after_all: bool = False,
    print_metrics: bool = False,
) -> str:
    """
    Full compilation from template source to a JavaScript render factory.

    Args:
        source: Template source text
        options: Codegen options; overrides the codegen entry of the config
        config: Pass configuration mapping ({"passes": {...}}); defaults to
            template_compiler/pass_config.json
        print_after_all: If True, print IR after each compilation phase
        print_metrics: If True, print pass metrics and diagnostics

    Returns:
        Generated JavaScript source
    """
    pipeline = CompilerPipeline(
        print_after_all=print_after_all,
        print_metrics=print_metrics,
    )
    if config is None:
        pipeline.load_config(CONFIG_PATH)
    else:
        pipeline.set_config(config)

    if options is not None:
        options = CodeGenOptions.coerce(options)

    pipeline.add_pass(TemplateParsePass())          # source -> AST
    pipeline.add_pass(SSABuildPass(                 # AST -> SSA (dce, const-alias, cse)
        print_after_all=print_after_all,
        print_metrics=print_metrics,
    ))
    pipeline.add_pass(JSCodegenPass(options))       # SSA -> JS

    return pipeline.run(source)
