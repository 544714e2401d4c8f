"""Tests for the pass manager and the compilation pipeline."""

import io
import unittest
from contextlib import redirect_stdout

from template_compiler.tests.conftest import make_ir
from template_compiler import (
    CompilerPipeline,
    CSEPass,
    DCEPass,
    JSCodegenPass,
    Load,
    PassManager,
    SSABuildPass,
    TemplateParsePass,
    count_instructions,
)
from template_compiler.compile import CONFIG_PATH
from template_compiler.pass_manager import load_pass_configs


class TestPassManager(unittest.TestCase):
    def test_passes_run_in_order(self):
        ir = make_ir(Load("expr0", "x"))
        pm = PassManager()
        pm.add_pass(DCEPass())
        pm.add_pass(CSEPass())
        pm.run(ir)
        self.assertEqual(count_instructions(ir), 0)
        self.assertEqual(pm.passes[0].get_metrics().custom["instructions_eliminated"], 1)
        self.assertEqual(pm.passes[1].get_metrics().custom["expressions_analyzed"], 0)

    def test_print_metrics(self):
        ir = make_ir(Load("expr0", "x"), Load("expr1", "y"))
        pm = PassManager(print_metrics=True)
        pm.add_pass(DCEPass())
        out = io.StringIO()
        with redirect_stdout(out):
            pm.run(ir)
        text = out.getvalue()
        self.assertIn("=== Pass: dce ===", text)
        self.assertIn("Instructions: 2 -> 0 (-100%)", text)
        self.assertIn("'instructions_eliminated': 2", text)

    def test_disabled_pass_reported(self):
        pm = PassManager(print_metrics=True)
        pm.config.update(load_pass_configs({"passes": {"dce": {"enabled": False}}}))
        pm.add_pass(DCEPass())
        ir = make_ir(Load("expr0", "x"))
        out = io.StringIO()
        with redirect_stdout(out):
            pm.run(ir)
        self.assertIn("(SKIPPED - disabled)", out.getvalue())
        self.assertEqual(count_instructions(ir), 1)

    def test_print_after_all(self):
        pm = PassManager(print_after_all=True)
        pm.add_pass(DCEPass())
        out = io.StringIO()
        with redirect_stdout(out):
            pm.run(make_ir(Load("expr0", "x")))
        text = out.getvalue()
        self.assertIn("=== SSA (before passes) ===", text)
        self.assertIn('expr0 = load ["x"]', text)
        self.assertIn("=== SSA (after dce) ===", text)

    def test_load_pass_configs(self):
        configs = load_pass_configs({"passes": {
            "codegen": {"enabled": True, "options": {"minify": False}},
            "parse": {},
        }})
        self.assertEqual(configs["codegen"].options, {"minify": False})
        self.assertTrue(configs["parse"].enabled)
        self.assertEqual(configs["parse"].options, {})


class TestCompilerPipeline(unittest.TestCase):
    def _pipeline(self, *passes, **kwargs) -> CompilerPipeline:
        pipeline = CompilerPipeline(**kwargs)
        for p in passes:
            pipeline.add_pass(p)
        return pipeline

    def test_full_pipeline(self):
        pipeline = self._pipeline(TemplateParsePass(), SSABuildPass(), JSCodegenPass())
        code = pipeline.run("<p>hi</p>")
        self.assertTrue(code.startswith("(function(construct, mount, patch) {"))
        self.assertTrue(code.endswith("})"))

    def test_pass_metrics_collected(self):
        parse_pass = TemplateParsePass()
        build_pass = SSABuildPass()
        codegen_pass = JSCodegenPass()
        self._pipeline(parse_pass, build_pass, codegen_pass).run("<p>hi</p><p>hi</p>")

        self.assertEqual(parse_pass.get_metrics().custom, {"nodes": 4})
        build_metrics = build_pass.get_metrics().custom
        self.assertEqual(build_metrics["blocks"], 1)
        self.assertEqual(build_metrics["instructions"], 7)
        self.assertEqual(build_metrics["cse.aliases_recorded"], 1)
        self.assertEqual(build_metrics["dce.instructions_eliminated"], 0)
        self.assertIn("statements", codegen_pass.get_metrics().custom)

    def test_codegen_options_from_config(self):
        pipeline = self._pipeline(TemplateParsePass(), SSABuildPass(), JSCodegenPass())
        pipeline.set_config({"passes": {"codegen": {"options": {
            "minify": False, "inlineCache": False, "staticOptimization": False,
        }}}})
        code = pipeline.run("<p>hi</p>")
        self.assertIn("const el0 = construct('p', {});", code)

    def test_wasm_anomaly_reported(self):
        codegen_pass = JSCodegenPass({"target": "wasm"})
        self._pipeline(TemplateParsePass(), SSABuildPass(), codegen_pass).run("<p/>")
        messages = codegen_pass.get_metrics().messages
        self.assertEqual(len(messages), 1)
        self.assertIn("wasm", messages[0])

    def test_type_mismatch(self):
        pipeline = self._pipeline(TemplateParsePass(), JSCodegenPass())
        with self.assertRaises(TypeError) as ctx:
            pipeline.run("<p/>")
        self.assertIn("codegen", str(ctx.exception))

    def test_missing_codegen(self):
        pipeline = self._pipeline(TemplateParsePass(), SSABuildPass())
        with self.assertRaises(RuntimeError):
            pipeline.run("<p/>")

    def test_print_metrics(self):
        pipeline = self._pipeline(
            TemplateParsePass(), SSABuildPass(), JSCodegenPass(), print_metrics=True
        )
        out = io.StringIO()
        with redirect_stdout(out):
            pipeline.run("<p>hi</p>")
        text = out.getvalue()
        self.assertIn("=== Pass: parse (SOURCE → AST) ===", text)
        self.assertIn("Source characters: 9 -> AST nodes: 2", text)
        self.assertIn("=== Pass: ssa-build (AST → SSA) ===", text)
        self.assertIn("=== Pass: codegen (SSA → JS) ===", text)

    def test_load_config_file(self):
        pipeline = CompilerPipeline()
        pipeline.load_config(CONFIG_PATH)
        self.assertEqual(sorted(pipeline.config), ["codegen", "parse", "ssa-build"])
        self.assertEqual(pipeline.config["codegen"].options, {
            "target": "js",
            "minify": True,
            "inlineCache": True,
            "staticOptimization": True,
        })

    def test_load_config_then_run(self):
        pipeline = self._pipeline(TemplateParsePass(), SSABuildPass(), JSCodegenPass())
        pipeline.load_config(CONFIG_PATH)
        self.assertNotIn("\n", pipeline.run("<p>hi</p>"))


if __name__ == "__main__":
    unittest.main()
