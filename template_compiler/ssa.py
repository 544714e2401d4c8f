"""
SSA IR - Tree-Construction Instructions

Static-single-assignment representation of a template. Every instruction
defines at most one freshly named value; arguments only ever refer to
earlier definitions (or to literal tag/key strings).

Instructions are a closed set of variants, one dataclass per op, each
carrying only the fields that op needs. Blocks keep predecessor/successor/
dominance fields for future control-flow constructs; today the builder only
ever populates the entry block.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Union


class SSAOp(Enum):
    """SSA opcodes."""
    ALLOC = "alloc"
    ASSIGN = "assign"
    LOAD = "load"
    STORE = "store"
    CALL = "call"
    BRANCH = "branch"    # reserved, no variant yet
    PHI = "phi"          # reserved, no variant yet
    RETURN = "return"
    CREATE_ELEMENT = "create_element"
    CREATE_TEXT = "create_text"
    SET_PROP = "set_prop"
    APPEND_CHILD = "append_child"
    MOUNT = "mount"
    PATCH = "patch"


# Ops that are never removed by dead-code elimination
SIDE_EFFECT_OPS = {SSAOp.CALL, SSAOp.STORE}


class AllocShape(Enum):
    """What an alloc instruction materializes."""
    LITERAL = "literal"      # attribute literal (string or True)
    PROPS = "props"          # component props object
    FRAGMENT = "fragment"    # list of child values


class InstructionMixin:
    """Shared accessors for SSA instruction variants.

    Each variant lists the fields making up its ordered argument list
    (ARG_FIELDS) and the subset of those that name SSA values
    (OPERAND_FIELDS). Literal tag/key strings are arguments but never
    operands, so renaming passes cannot touch them.
    """

    op: ClassVar[SSAOp]
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ()
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ()

    # Variants define these as fields or as ClassVars
    dest: Optional[str]
    is_static: Optional[bool]

    @property
    def value(self) -> Any:
        """Literal payload, if the op has one."""
        return None

    @property
    def args(self) -> list[str]:
        return self._collect(self.ARG_FIELDS)

    @property
    def operands(self) -> list[str]:
        return self._collect(self.OPERAND_FIELDS)

    def _collect(self, names: tuple[str, ...]) -> list[str]:
        out: list[str] = []
        for name in names:
            v = getattr(self, name)
            if v is None:
                continue
            if isinstance(v, list):
                out.extend(v)
            else:
                out.append(v)
        return out

    def rewrite_operands(self, fn: Callable[[str], str]) -> None:
        """Replace every operand name `x` with `fn(x)`, in argument order."""
        for name in self.OPERAND_FIELDS:
            v = getattr(self, name)
            if v is None:
                continue
            if isinstance(v, list):
                setattr(self, name, [fn(x) for x in v])
            else:
                setattr(self, name, fn(v))

    def __repr__(self):
        line = f"{self.dest} = {self.op.value}" if self.dest else self.op.value
        args = self.args
        if args:
            line += " " + ", ".join(args)
        if self.value is not None:
            line += f" [{json.dumps(self.value)}]"
        return line


@dataclass(repr=False)
class Alloc(InstructionMixin):
    """dest = literal / props object / fragment list."""
    op: ClassVar[SSAOp] = SSAOp.ALLOC
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("items",)
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("items",)

    dest: str
    literal: Any = None
    items: list[str] = field(default_factory=list)
    shape: AllocShape = AllocShape.LITERAL
    is_static: Optional[bool] = None
    block_id: int = 0

    @property
    def value(self) -> Any:
        return self.literal


@dataclass(repr=False)
class Assign(InstructionMixin):
    """dest = source (plain rename)."""
    op: ClassVar[SSAOp] = SSAOp.ASSIGN
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("source",)
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("source",)
    is_static: ClassVar[Optional[bool]] = None

    dest: str
    source: str
    block_id: int = 0


@dataclass(repr=False)
class Load(InstructionMixin):
    """dest = <opaque target-language expression>."""
    op: ClassVar[SSAOp] = SSAOp.LOAD
    is_static: ClassVar[bool] = False

    dest: str
    expression: str
    block_id: int = 0

    @property
    def value(self) -> Any:
        return self.expression


@dataclass(repr=False)
class Store(InstructionMixin):
    """target = source (side effect, never eliminated)."""
    op: ClassVar[SSAOp] = SSAOp.STORE
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("target", "source")
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("target", "source")
    dest: ClassVar[Optional[str]] = None
    is_static: ClassVar[Optional[bool]] = None

    target: str
    source: str
    block_id: int = 0


@dataclass(repr=False)
class Call(InstructionMixin):
    """dest = callee(props).

    For component calls the callee is the component's name, emitted
    verbatim; otherwise it names an SSA value.
    """
    op: ClassVar[SSAOp] = SSAOp.CALL
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("callee", "props")
    is_static: ClassVar[Optional[bool]] = None

    dest: Optional[str]
    callee: str
    props: str
    component: bool = True
    block_id: int = 0

    @property
    def OPERAND_FIELDS(self) -> tuple[str, ...]:
        if self.component:
            return ("props",)
        return ("callee", "props")


@dataclass(repr=False)
class CreateElement(InstructionMixin):
    """dest = new element node for `tag`."""
    op: ClassVar[SSAOp] = SSAOp.CREATE_ELEMENT
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("tag",)

    dest: str
    tag: str
    is_static: bool = False
    block_id: int = 0


@dataclass(repr=False)
class CreateText(InstructionMixin):
    """dest = text node."""
    op: ClassVar[SSAOp] = SSAOp.CREATE_TEXT
    is_static: ClassVar[bool] = True

    dest: str
    text: str
    block_id: int = 0

    @property
    def value(self) -> Any:
        return self.text


@dataclass(repr=False)
class SetProp(InstructionMixin):
    """element.props[key] = source."""
    op: ClassVar[SSAOp] = SSAOp.SET_PROP
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("element", "key", "source")
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("element", "source")
    dest: ClassVar[Optional[str]] = None

    element: str
    key: str
    source: str
    is_static: bool = True
    block_id: int = 0


@dataclass(repr=False)
class AppendChild(InstructionMixin):
    """parent.children.push(child)."""
    op: ClassVar[SSAOp] = SSAOp.APPEND_CHILD
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("parent", "child")
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("parent", "child")
    dest: ClassVar[Optional[str]] = None
    is_static: ClassVar[Optional[bool]] = None

    parent: str
    child: str
    block_id: int = 0


@dataclass(repr=False)
class Mount(InstructionMixin):
    """mount(node, container)."""
    op: ClassVar[SSAOp] = SSAOp.MOUNT
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("node", "container")
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("node", "container")
    dest: ClassVar[Optional[str]] = None
    is_static: ClassVar[Optional[bool]] = None

    node: str
    container: str
    block_id: int = 0


@dataclass(repr=False)
class Patch(InstructionMixin):
    """patch(old, new, container)."""
    op: ClassVar[SSAOp] = SSAOp.PATCH
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("old", "new", "container")
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("old", "new", "container")
    dest: ClassVar[Optional[str]] = None
    is_static: ClassVar[Optional[bool]] = None

    old: str
    new: str
    container: str
    block_id: int = 0


@dataclass(repr=False)
class Return(InstructionMixin):
    """return source (the render root)."""
    op: ClassVar[SSAOp] = SSAOp.RETURN
    ARG_FIELDS: ClassVar[tuple[str, ...]] = ("source",)
    OPERAND_FIELDS: ClassVar[tuple[str, ...]] = ("source",)
    dest: ClassVar[Optional[str]] = None
    is_static: ClassVar[Optional[bool]] = None

    source: Optional[str] = None
    block_id: int = 0


SSAInstruction = Union[
    Alloc, Assign, Load, Store, Call, CreateElement, CreateText,
    SetProp, AppendChild, Mount, Patch, Return,
]


@dataclass
class SSABasicBlock:
    """A basic block of SSA instructions."""
    id: int
    instructions: list[SSAInstruction] = field(default_factory=list)
    predecessors: set[int] = field(default_factory=set)
    successors: set[int] = field(default_factory=set)
    dominates: set[int] = field(default_factory=set)

    def __repr__(self):
        return f"SSABasicBlock({self.id}, {len(self.instructions)} insts)"


@dataclass
class SSAIR:
    """A complete SSA program: blocks, alias table and name counters."""
    blocks: dict[int, SSABasicBlock] = field(default_factory=dict)
    entry: int = 0
    # CSE alias table: duplicate dest -> first dest computing the same value
    aliases: dict[str, str] = field(default_factory=dict)
    # Per-prefix monotonic counters used to mint names
    counters: dict[str, int] = field(default_factory=dict)
    next_block_id: int = 0
    # Name of the render root, if any
    result: Optional[str] = None

    def new_block(self) -> SSABasicBlock:
        block = SSABasicBlock(self.next_block_id)
        self.blocks[block.id] = block
        self.next_block_id += 1
        return block

    def new_name(self, prefix: str = "v") -> str:
        """Mint a fresh value name, e.g. el0, el1, txt0."""
        n = self.counters.get(prefix, 0)
        self.counters[prefix] = n + 1
        return f"{prefix}{n}"

    @property
    def entry_block(self) -> Optional[SSABasicBlock]:
        return self.blocks.get(self.entry)

    def instructions(self):
        """Iterate over all instructions, block by block."""
        for block in self.blocks.values():
            yield from block.instructions

    def resolve(self, name: str) -> str:
        """Follow the alias table to the canonical name."""
        seen = set()
        while name in self.aliases and name not in seen:
            seen.add(name)
            name = self.aliases[name]
        return name
