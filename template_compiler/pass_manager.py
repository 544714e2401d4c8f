"""
Pass Manager Infrastructure

Provides the framework for running passes over the template pipeline.
PassManager runs SSA -> SSA optimization passes; CompilerPipeline runs the
full source -> AST -> SSA -> JS compilation and validates that adjacent
passes agree on IR types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Any
import json

from .nodes import Program
from .ssa import SSAIR


@dataclass
class PassConfig:
    """Configuration for a single pass."""
    name: str
    enabled: bool = True
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class PassMetrics:
    """Metrics collected by a pass during execution."""
    custom: dict[str, Any] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)


def count_instructions(ir: SSAIR) -> int:
    """Count total instructions across all blocks."""
    return sum(len(block.instructions) for block in ir.blocks.values())


def count_nodes(program: Program) -> int:
    """Count AST nodes below the program root."""
    def count_in(children: list) -> int:
        total = 0
        for node in children:
            total += 1
            total += count_in(getattr(node, "children", None) or [])
        return total
    return count_in(program.children)


def load_pass_configs(data: dict) -> dict[str, PassConfig]:
    """Build PassConfigs from a {"passes": {name: {...}}} mapping."""
    configs: dict[str, PassConfig] = {}
    for pass_name, opts in data.get("passes", {}).items():
        configs[pass_name] = PassConfig(
            name=pass_name,
            enabled=opts.get("enabled", True),
            options=opts.get("options", {})
        )
    return configs


class CompilerPass(ABC):
    """Base class for all compiler passes."""

    def __init__(self):
        self._metrics: Optional[PassMetrics] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the pass name for config matching."""
        pass

    @property
    @abstractmethod
    def input_type(self) -> str:
        """Return the input IR type: 'source', 'ast', 'ssa', or 'js'."""
        pass

    @property
    @abstractmethod
    def output_type(self) -> str:
        """Return the output IR type: 'source', 'ast', 'ssa', or 'js'."""
        pass

    def get_metrics(self) -> Optional[PassMetrics]:
        """Return metrics from the last run, if collected."""
        return self._metrics

    def _init_metrics(self):
        """Initialize metrics for a new run."""
        self._metrics = PassMetrics()

    def _add_metric_message(self, msg: str):
        """Add a diagnostic message to metrics."""
        if self._metrics:
            self._metrics.messages.append(msg)


class ParsePass(CompilerPass):
    """Base class for passes that turn source text into an AST."""

    @property
    def input_type(self) -> str:
        return "source"

    @property
    def output_type(self) -> str:
        return "ast"

    @abstractmethod
    def run(self, source: str, config: PassConfig) -> Program:
        pass


class LoweringPass(CompilerPass):
    """Base class for passes that convert the AST to SSA IR."""

    @property
    def input_type(self) -> str:
        return "ast"

    @property
    def output_type(self) -> str:
        return "ssa"

    @abstractmethod
    def run(self, ast: Program, config: PassConfig) -> SSAIR:
        pass


class SSAPass(CompilerPass):
    """Base class for SSA transformation passes."""

    @property
    def input_type(self) -> str:
        return "ssa"

    @property
    def output_type(self) -> str:
        return "ssa"

    @abstractmethod
    def run(self, ir: SSAIR, config: PassConfig) -> SSAIR:
        """Transform the IR and return it."""
        pass


class CodegenPass(CompilerPass):
    """Base class for passes that emit target code from SSA IR."""

    @property
    def input_type(self) -> str:
        return "ssa"

    @property
    def output_type(self) -> str:
        return "js"

    @abstractmethod
    def run(self, ir: SSAIR, config: PassConfig) -> str:
        """Generate target code from SSA IR."""
        pass


def _print_custom_metrics(p: CompilerPass):
    """Print pass-specific custom metrics."""
    metrics = p.get_metrics()
    if metrics:
        if metrics.custom:
            print(f"Custom metrics: {metrics.custom}")
        if metrics.messages:
            print("Diagnostics:")
            for msg in metrics.messages:
                print(f"  - {msg}")


def _print_size_change(label: str, before: int, after: int):
    if before > 0:
        pct = ((after - before) / before) * 100
        print(f"{label}: {before} -> {after} ({pct:+.0f}%)")
    else:
        print(f"{label}: {before} -> {after}")


@dataclass
class PassManager:
    """Manages and runs SSA transformation passes."""
    passes: list[SSAPass] = field(default_factory=list)
    config: dict[str, PassConfig] = field(default_factory=dict)
    print_after_all: bool = False
    print_metrics: bool = False

    def add_pass(self, p: SSAPass) -> None:
        """Register a pass."""
        self.passes.append(p)

    def run(self, ir: SSAIR) -> SSAIR:
        """Run all enabled passes in order."""
        from .printing import print_ir

        if self.print_after_all:
            print("=== SSA (before passes) ===")
            print_ir(ir)

        for p in self.passes:
            cfg = self.config.get(p.name, PassConfig(name=p.name))
            if not cfg.enabled:
                if self.print_metrics:
                    print(f"\n=== Pass: {p.name} === (SKIPPED - disabled)")
                continue

            before_size = count_instructions(ir) if self.print_metrics else 0

            ir = p.run(ir, cfg)

            if self.print_metrics:
                print(f"\n=== Pass: {p.name} ===")
                print(f"Config: {', '.join(f'{k}={v}' for k, v in cfg.options.items()) or '(default)'}")
                _print_size_change("Instructions", before_size, count_instructions(ir))
                _print_custom_metrics(p)

            if self.print_after_all:
                print(f"=== SSA (after {p.name}) ===")
                print_ir(ir)

        return ir


@dataclass
class CompilerPipeline:
    """
    Manages the full compilation pipeline from template source to JS.

    Handles passes that operate on different IR types (source, AST, SSA, JS)
    and validates type compatibility between adjacent passes.
    """
    passes: list[CompilerPass] = field(default_factory=list)
    config: dict[str, PassConfig] = field(default_factory=dict)
    print_after_all: bool = False
    print_metrics: bool = False

    def add_pass(self, p: CompilerPass) -> None:
        """Register a pass in the pipeline."""
        self.passes.append(p)

    def set_config(self, data: dict) -> None:
        """Load pass configs from an already-parsed JSON mapping."""
        self.config.update(load_pass_configs(data))

    def load_config(self, config_path: str) -> None:
        """Load pass configs from JSON file."""
        with open(config_path) as f:
            self.set_config(json.load(f))

    def _print_metrics(self, p: CompilerPass, cfg: PassConfig, before: Any, after: Any):
        arrow = f"{p.input_type.upper()} → {p.output_type.upper()}"
        print(f"\n=== Pass: {p.name} ({arrow}) ===")
        print(f"Config: {', '.join(f'{k}={v}' for k, v in cfg.options.items()) or '(default)'}")
        if p.input_type == "source":
            print(f"Source characters: {len(before)} -> AST nodes: {count_nodes(after)}")
        elif p.input_type == "ast":
            print(f"AST nodes: {count_nodes(before)} -> SSA instructions: {count_instructions(after)}")
            print(f"Blocks: {len(after.blocks)}")
        elif p.output_type == "ssa":
            _print_size_change("Instructions", before, count_instructions(after))
        elif p.output_type == "js":
            print(f"SSA instructions: {before} -> output characters: {len(after)}")
        _print_custom_metrics(p)

    def run(self, source: str) -> str:
        """
        Run the full compilation pipeline.

        Args:
            source: Template source text

        Returns:
            Generated target code
        """
        from .printing import print_ir

        if self.print_after_all:
            print("\n" + "=" * 60)
            print("COMPILATION START")
            print("=" * 60)

        state: dict[str, Any] = {"type": "source", "ir": source}

        for p in self.passes:
            cfg = self.config.get(p.name, PassConfig(name=p.name))

            if not cfg.enabled:
                if self.print_metrics:
                    print(f"\n=== Pass: {p.name} === (SKIPPED - disabled)")
                continue

            if p.input_type != state["type"]:
                raise TypeError(
                    f"Pass '{p.name}' expects input type '{p.input_type}' "
                    f"but current state is '{state['type']}'"
                )

            # Capture size BEFORE running pass (SSA passes mutate in place)
            before = state["ir"]
            if p.input_type == "ssa":
                before = count_instructions(state["ir"])

            result = p.run(state["ir"], cfg)

            if self.print_metrics:
                self._print_metrics(p, cfg, before, result)

            if self.print_after_all:
                print("-" * 60)
                print(f"After {p.name}:")
                print("-" * 60)
                if p.output_type == "ssa":
                    print_ir(result)
                elif p.output_type == "js":
                    print(result)
                elif p.output_type == "ast":
                    print(result)

            state = {"type": p.output_type, "ir": result}

        if self.print_after_all:
            print("=" * 60)
            print("COMPILATION END")
            print("=" * 60 + "\n")

        if state["type"] != "js":
            raise RuntimeError(
                f"Pipeline did not produce JS output, got '{state['type']}' instead"
            )

        return state["ir"]
