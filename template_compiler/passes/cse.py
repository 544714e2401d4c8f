"""
Common Subexpression Detection (CSE) Pass

Detects redundant node constructions using value numbering.
"""

import json
from typing import Optional

from ..pass_manager import SSAPass, PassConfig
from ..ssa import SSAIR, AppendChild, SetProp, SSAOp, SSAInstruction


# Operations that are candidates for CSE
CSE_OPS = {SSAOp.CREATE_ELEMENT, SSAOp.CREATE_TEXT}


class CSEPass(SSAPass):
    """
    Common subexpression detection over node-construction ops.

    Instructions are keyed by (op, args, value). A later instruction sharing
    a key with an earlier one is not removed; its dest is recorded in the
    IR alias table as an alias of the first occurrence, and the code
    generator resolves names through that table.

    Only values that are never mutated are considered: a node that receives
    props or children (set_prop element, append_child parent) is unique even
    if its construction looks identical to another's.

    Aliased leaves are shared: `<ul><li/><li/></ul>` appends one node
    object twice. A runtime that keeps per-node state (a DOM ref, say) on
    tree nodes sees a single node in both positions.
    """

    def __init__(self):
        super().__init__()
        self._expressions_analyzed = 0
        self._aliases_recorded = 0

    @property
    def name(self) -> str:
        return "cse"

    def run(self, ir: SSAIR, config: PassConfig) -> SSAIR:
        self._init_metrics()
        self._expressions_analyzed = 0
        self._aliases_recorded = 0

        if not config.enabled:
            return ir

        mutated = self._collect_mutated(ir)
        expressions: dict[tuple, str] = {}

        for inst in ir.instructions():
            key = self._value_number(inst)
            if key is None:
                continue
            self._expressions_analyzed += 1
            if inst.dest in mutated:
                continue
            first = expressions.get(key)
            if first is not None:
                ir.aliases[inst.dest] = first
                self._aliases_recorded += 1
            else:
                expressions[key] = inst.dest

        if self._metrics:
            self._metrics.custom = {
                "expressions_analyzed": self._expressions_analyzed,
                "aliases_recorded": self._aliases_recorded,
            }

        return ir

    def _value_number(self, inst: SSAInstruction) -> Optional[tuple]:
        if inst.op not in CSE_OPS or inst.dest is None:
            return None
        return (inst.op, tuple(inst.args), json.dumps(inst.value))

    def _collect_mutated(self, ir: SSAIR) -> set[str]:
        mutated: set[str] = set()
        for inst in ir.instructions():
            if isinstance(inst, SetProp):
                mutated.add(inst.element)
            elif isinstance(inst, AppendChild):
                mutated.add(inst.parent)
        return mutated
