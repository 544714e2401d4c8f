"""
SSA Builder - AST to SSA IR

Translates a parsed template into straight-line SSA instructions in the
entry block, visiting nodes in pre-order, then runs the optimization passes
(DCE, constant aliasing, CSE) in that fixed order.
"""

from typing import Optional

from .errors import StructuralError
from .nodes import ASTNode, Component, Element, Expression, Fragment, Program, Text
from .parser import is_static_node
from .pass_manager import PassManager
from .ssa import (
    SSAIR, SSABasicBlock, SSAInstruction, Alloc, AllocShape, Call, CreateElement,
    CreateText, Load, SetProp, AppendChild, Return,
)
from .tokens import AttrValue, is_dynamic_value, unwrap_dynamic_value


def optimization_passes() -> list:
    """Fresh instances of the optimization passes, in pipeline order."""
    from .passes import DCEPass, ConstAliasPass, CSEPass
    return [DCEPass(), ConstAliasPass(), CSEPass()]


class SSABuilder:
    """Builder for template SSA IR."""

    def __init__(self, print_after_all: bool = False, print_metrics: bool = False):
        self.ir = SSAIR()
        self._block: SSABasicBlock = self.ir.new_block()
        self.ir.entry = self._block.id
        self.pass_manager = PassManager(
            print_after_all=print_after_all,
            print_metrics=print_metrics,
        )
        for p in optimization_passes():
            self.pass_manager.add_pass(p)

    def _emit(self, inst: SSAInstruction) -> Optional[str]:
        """Append an instruction to the current block; return its dest."""
        inst.block_id = self._block.id
        self._block.instructions.append(inst)
        return inst.dest

    def build(self, ast: Program) -> SSAIR:
        """Translate the AST, append the render-root return, and optimize."""
        root = self.visit(ast)
        if root:
            self.ir.result = root
            self._emit(Return(root))
        return self.pass_manager.run(self.ir)

    # === Visitors ===

    def visit(self, node: ASTNode) -> Optional[str]:
        """Visit a node; return the name of the value it produced, if any."""
        if isinstance(node, Program):
            return self.visit_program(node)
        if isinstance(node, Element):
            return self.visit_element(node)
        if isinstance(node, Text):
            return self.visit_text(node)
        if isinstance(node, Expression):
            return self.visit_expression(node)
        if isinstance(node, Component):
            return self.visit_component(node)
        if isinstance(node, Fragment):
            return self.visit_fragment(node)
        return None

    def visit_program(self, node: Program) -> Optional[str]:
        results = [self.visit(child) for child in node.children]
        results = [r for r in results if r]
        return results[-1] if results else None

    def visit_element(self, node: Element) -> str:
        if not node.tag:
            raise StructuralError("Element node missing tag", node.loc)

        dest = self.ir.new_name("el")
        self._emit(CreateElement(dest, node.tag, is_static=is_static_node(node)))

        for key, value in node.attributes.items():
            value_name = self.visit_value(value)
            self._emit(SetProp(dest, key, value_name, is_static=not is_dynamic_value(value)))

        for child in node.children:
            child_name = self.visit(child)
            if child_name:
                self._emit(AppendChild(dest, child_name))

        return dest

    def visit_text(self, node: Text) -> str:
        dest = self.ir.new_name("txt")
        self._emit(CreateText(dest, node.value))
        return dest

    def visit_expression(self, node: Expression) -> str:
        dest = self.ir.new_name("expr")
        self._emit(Load(dest, node.expression))
        return dest

    def visit_component(self, node: Component) -> str:
        if not node.tag:
            raise StructuralError("Component node missing tag", node.loc)
        if not node.tag.isidentifier():
            raise StructuralError(
                f"Component tag '{node.tag}' is not a valid identifier", node.loc
            )

        dest = self.ir.new_name("comp")
        props = self.ir.new_name("props")
        self._emit(Alloc(props, dict(node.attributes), shape=AllocShape.PROPS))
        self._emit(Call(dest, node.tag, props, component=True))
        return dest

    def visit_fragment(self, node: Fragment) -> str:
        dest = self.ir.new_name("frag")
        items = [self.visit(child) for child in node.children]
        self._emit(Alloc(dest, items=[i for i in items if i], shape=AllocShape.FRAGMENT))
        return dest

    def visit_value(self, value: AttrValue) -> str:
        """Materialize an attribute value: dynamic -> load, literal -> alloc."""
        if is_dynamic_value(value):
            dest = self.ir.new_name("val")
            self._emit(Load(dest, unwrap_dynamic_value(value)))
            return dest
        dest = self.ir.new_name("const")
        self._emit(Alloc(dest, value, shape=AllocShape.LITERAL, is_static=True))
        return dest


def build_ssa(ast: Program, print_after_all: bool = False, print_metrics: bool = False) -> SSAIR:
    """Build optimized SSA IR from a parsed template."""
    builder = SSABuilder(print_after_all=print_after_all, print_metrics=print_metrics)
    return builder.build(ast)
