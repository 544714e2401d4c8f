"""
SSA -> JavaScript Codegen

Emits a factory function from the entry block of the SSA IR:

    (function(construct, mount, patch) {
      "use strict";
      const _cache = new Map();
      return function render(props, state) {
        ...
      };
    })

The three collaborators are the whole boundary to the runtime; the
generator only emits calls to them. Instructions are emitted in program
order, one fixed statement template per op.
"""

import json
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional, Union

from .ssa import (
    SSAIR, Alloc, AllocShape, AppendChild, Assign, Call, CreateElement, CreateText,
    Load, Mount, Patch, Return, SetProp, Store,
)
from .tokens import is_dynamic_value, unwrap_dynamic_value

_LETTERS = "abcdefghijklmnopqrstuvwxyz"

# Short names that would not be valid (or would shadow the factory's own
# parameters) in the generated code.
_RESERVED_NAMES = {
    "do", "if", "in", "for", "let", "new", "try", "var", "case", "else",
    "enum", "eval", "null", "this", "true", "void", "with", "await", "break",
    "catch", "class", "const", "false", "super", "throw", "while", "yield",
    "props", "state", "mount", "patch",
}

# Identifier-shaped words in opaque expression text
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


class Target(Enum):
    """Emission target. Only JavaScript emission exists; WASM emits JS too."""
    JS = "js"
    WASM = "wasm"


@dataclass
class CodeGenOptions:
    """Code generation options. Defaults are the fully optimized setting."""
    target: Target = Target.JS
    minify: bool = True
    inline_cache: bool = True
    static_optimization: bool = True

    # camelCase spellings accepted by from_dict
    _ALIASES = {
        "inlineCache": "inline_cache",
        "staticOptimization": "static_optimization",
    }

    def __post_init__(self):
        if not isinstance(self.target, Target):
            self.target = Target(self.target)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CodeGenOptions":
        """Build options from a dict; missing keys keep their defaults."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = cls._ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown codegen option: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: Union["CodeGenOptions", dict, None]) -> "CodeGenOptions":
        if options is None:
            return cls()
        if isinstance(options, CodeGenOptions):
            return options
        return cls.from_dict(options)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target.value,
            "minify": self.minify,
            "inline_cache": self.inline_cache,
            "static_optimization": self.static_optimization,
        }


def short_name(index: int) -> str:
    """Base-26 letter name: 0 -> a, 25 -> z, 26 -> aa, 27 -> ab, ..."""
    name = ""
    n = index
    while True:
        name = _LETTERS[n % 26] + name
        n = n // 26 - 1
        if n < 0:
            return name


def _expression_text(expression: str) -> str:
    """Opaque expression text as emitted; blank text reads as undefined."""
    return expression.strip() or "undefined"


class CodeGenerator:
    """
    Emits target code for one SSA IR.

    All state (rename map, static-value cache, diagnostics) lives on the
    instance, so independent compilations never share anything.
    """

    def __init__(self, options: Union[CodeGenOptions, dict, None] = None):
        self.options = CodeGenOptions.coerce(options)
        self.anomalies: list[str] = []
        self.static_cache_hits = 0
        self.inline_cached_elements = 0
        self._reset()

    def _reset(self):
        self._output: list[str] = []
        self._indent = 0
        self._var_map: dict[str, str] = {}
        self._next_short = 0
        self._static_cache: dict[str, str] = {}
        self._taken: set[str] = set()
        self._ir: Optional[SSAIR] = None
        self.anomalies = []
        self.static_cache_hits = 0
        self.inline_cached_elements = 0

    @property
    def statement_count(self) -> int:
        return len(self._output)

    def generate(self, ir: SSAIR) -> str:
        """Generate the factory function source for `ir`."""
        self._reset()
        self._ir = ir
        self._taken = self._free_identifiers(ir)

        if self.options.target == Target.WASM:
            self.anomalies.append("wasm target has no separate backend; emitting JavaScript")

        self._emit_header()
        self._emit_render(ir)
        self._emit_footer()

        return ("" if self.options.minify else "\n").join(self._output)

    # === Structure ===

    def _emit_header(self):
        self._emit("(function(construct, mount, patch) {")
        self._indent += 1
        self._emit('"use strict";')
        if self.options.inline_cache:
            self._emit("const _cache = new Map();")

    def _emit_footer(self):
        self._indent = max(0, self._indent - 1)
        self._emit("})")

    def _emit_render(self, ir: SSAIR):
        self._emit("return function render(props, state) {")
        self._indent += 1

        entry = ir.entry_block
        if entry is None:
            self.anomalies.append(f"Entry block {ir.entry} missing; emitting empty render body")
        else:
            for inst in entry.instructions:
                self._emit_instruction(inst)

        self._indent -= 1
        self._emit("};")

    def _emit_instruction(self, inst):
        handler = self._HANDLERS.get(type(inst))
        if handler is None:
            self.anomalies.append(f"Skipping unknown instruction: {inst!r}")
            return
        # Aliased values are emitted once, under their canonical name
        dest = getattr(inst, "dest", None)
        if dest is not None and self._ir.resolve(dest) != dest:
            return
        handler(self, inst)

    # === Per-op templates ===

    def _emit_alloc(self, inst: Alloc):
        dest = self._name(inst.dest)

        if inst.shape == AllocShape.FRAGMENT:
            items = ", ".join(self._name(i) for i in inst.items)
            self._emit(f"const {dest} = [{items}];")
            return

        if inst.shape == AllocShape.PROPS:
            self._emit(f"const {dest} = {self._props_literal(inst.literal or {})};")
            return

        value = json.dumps(inst.literal)
        if inst.is_static and self.options.static_optimization:
            cache_key = f"alloc_{value}"
            cached = self._static_cache.get(cache_key)
            if cached is not None:
                self.static_cache_hits += 1
                self._emit(f"const {dest} = {self._name(cached)};")
                return
            self._static_cache[cache_key] = inst.dest
        self._emit(f"const {dest} = {value};")

    def _props_literal(self, attributes: dict) -> str:
        parts = []
        for key, value in attributes.items():
            if is_dynamic_value(value):
                parts.append(f"{json.dumps(key)}: ({_expression_text(unwrap_dynamic_value(value))})")
            else:
                parts.append(f"{json.dumps(key)}: {json.dumps(value)}")
        return "{" + ", ".join(parts) + "}"

    def _emit_assign(self, inst: Assign):
        self._emit(f"const {self._name(inst.dest)} = {self._name(inst.source)};")

    def _emit_load(self, inst: Load):
        self._emit(f"const {self._name(inst.dest)} = {_expression_text(inst.expression)};")

    def _emit_store(self, inst: Store):
        self._emit(f"{self._name(inst.target)} = {self._name(inst.source)};")

    def _emit_call(self, inst: Call):
        callee = inst.callee if inst.component else self._name(inst.callee)
        call = f"{callee}({self._name(inst.props)})"
        if inst.dest is None:
            self._emit(f"{call};")
        else:
            self._emit(f"const {self._name(inst.dest)} = {call};")

    def _emit_create_element(self, inst: CreateElement):
        dest = self._name(inst.dest)
        tag = inst.tag

        if inst.is_static and self.options.inline_cache:
            self.inline_cached_elements += 1
            key = f"el_{tag}"
            self._emit(
                f"const {dest} = _cache.has('{key}') ? "
                f"structuredClone(_cache.get('{key}')) : (function() {{"
            )
            self._indent += 1
            self._emit(f"const el = construct('{tag}', {{}});")
            self._emit(f"_cache.set('{key}', structuredClone(el));")
            self._emit("return el;")
            self._indent -= 1
            self._emit("})();")
        else:
            self._emit(f"const {dest} = construct('{tag}', {{}});")

    def _emit_create_text(self, inst: CreateText):
        self._emit(f"const {self._name(inst.dest)} = {json.dumps(inst.text)};")

    def _emit_set_prop(self, inst: SetProp):
        el = self._name(inst.element)
        value = self._name(inst.source)
        key = json.dumps(inst.key)
        if inst.is_static:
            self._emit(f"{el}.props = {el}.props || {{}}; {el}.props[{key}] = {value};")
        else:
            self._emit(f"if (!{el}.props) {el}.props = {{}};")
            self._emit(f"{el}.props[{key}] = {value};")

    def _emit_append_child(self, inst: AppendChild):
        parent = self._name(inst.parent)
        child = self._name(inst.child)
        self._emit(f"if (!{parent}.children) {parent}.children = [];")
        self._emit(f"{parent}.children.push({child});")

    def _emit_mount(self, inst: Mount):
        self._emit(f"mount({self._name(inst.node)}, {self._name(inst.container)});")

    def _emit_patch(self, inst: Patch):
        self._emit(
            f"patch({self._name(inst.old)}, {self._name(inst.new)}, {self._name(inst.container)});"
        )

    def _emit_return(self, inst: Return):
        if inst.source is not None:
            self._emit(f"return {self._name(inst.source)};")
        else:
            self._emit("return;")

    _HANDLERS = {
        Alloc: _emit_alloc,
        Assign: _emit_assign,
        Load: _emit_load,
        Store: _emit_store,
        Call: _emit_call,
        CreateElement: _emit_create_element,
        CreateText: _emit_create_text,
        SetProp: _emit_set_prop,
        AppendChild: _emit_append_child,
        Mount: _emit_mount,
        Patch: _emit_patch,
        Return: _emit_return,
    }

    # === Helpers ===

    def _free_identifiers(self, ir: SSAIR) -> set[str]:
        """Words in expression text that minified names must not shadow.

        A lexical scan only: property names and string contents are
        collected too, which only costs a few skipped short names.
        """
        words: set[str] = set()
        for inst in ir.instructions():
            if isinstance(inst, Load):
                words.update(_IDENT_RE.findall(inst.expression))
            elif isinstance(inst, Alloc) and inst.shape == AllocShape.PROPS:
                for value in (inst.literal or {}).values():
                    if is_dynamic_value(value):
                        words.update(_IDENT_RE.findall(value))
            elif isinstance(inst, Call) and inst.component:
                words.add(inst.callee)
        return words

    def _emit(self, code: str):
        if self.options.minify:
            self._output.append(code)
        else:
            self._output.append("  " * self._indent + code)

    def _name(self, original: str) -> str:
        """Resolve aliases, then map to the emitted variable name."""
        if self._ir is not None:
            original = self._ir.resolve(original)
        name = self._var_map.get(original)
        if name is not None:
            return name
        if not self.options.minify:
            return original
        name = short_name(self._next_short)
        self._next_short += 1
        while name in _RESERVED_NAMES or name in self._taken:
            name = short_name(self._next_short)
            self._next_short += 1
        self._var_map[original] = name
        return name


def generate_code(ir: SSAIR, options: Union[CodeGenOptions, dict, None] = None) -> str:
    """Generate code for `ir` with the given options."""
    return CodeGenerator(options).generate(ir)


def generate_optimized_code(ir: SSAIR) -> str:
    """Minified output with inline and static caching."""
    return generate_code(ir, CodeGenOptions(minify=True, inline_cache=True, static_optimization=True))


def generate_debug_code(ir: SSAIR) -> str:
    """Readable output without caching."""
    return generate_code(ir, CodeGenOptions(minify=False, inline_cache=False, static_optimization=False))
