"""Tests for the template compiler command line."""

import os
import sys

_this_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(os.path.dirname(_this_dir), "tools"))

import io

import template_cli


def test_compile_file(tmp_path, capsys):
    src = tmp_path / "card.tpl"
    src.write_text('<div id="main">{msg}</div>')
    assert template_cli.main([str(src)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("(function(construct, mount, patch) {")
    assert out.count("\n") == 1


def test_debug_flag(tmp_path, capsys):
    src = tmp_path / "card.tpl"
    src.write_text('<div id="main">{msg}</div>')
    assert template_cli.main([str(src), "--debug"]) == 0
    out = capsys.readouterr().out
    assert "    const el0 = construct('div', {});\n" in out
    assert "_cache" not in out


def test_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("<p>hi</p>"))
    assert template_cli.main(["--debug"]) == 0
    assert 'const txt0 = "hi";' in capsys.readouterr().out


def test_print_ir(tmp_path, capsys):
    src = tmp_path / "t.tpl"
    src.write_text("<p>hi</p><p>hi</p>")
    assert template_cli.main([str(src), "--print-ir"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Block 0:\n")
    assert "  txt1 -> txt0" in out


def test_cache_flags():
    args = template_cli.build_parser().parse_args(
        ["--no-inline-cache", "--no-static-optimization", "--target", "wasm"]
    )
    opts = template_cli.options_from_args(args)
    assert opts.minify
    assert not opts.inline_cache
    assert not opts.static_optimization
    assert opts.target.value == "wasm"


def test_compile_error(tmp_path, capsys):
    src = tmp_path / "bad.tpl"
    src.write_text("<div")
    assert template_cli.main([str(src)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: Unterminated tag <div")


def test_missing_file(tmp_path, capsys):
    assert template_cli.main([str(tmp_path / "nope.tpl")]) == 1
    assert "unable to read source" in capsys.readouterr().err
