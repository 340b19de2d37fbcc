"""
Decompiler: node trees to constructor code.

``decompile`` writes a Python expression that rebuilds a tree from the four
node constructors. Arguments left at their defaults are omitted, atoms are
written as their token text and bonds as their symbols, so the output reads
like hand-written construction code:

    >>> from smilax import parse
    >>> print(decompile(parse("CC(=O)O")))
    Linear(['C', 'C', 'O'], attachments={1: [Linear(['O'], leading_bond='=')]})

Calls that do not fit on one line are split one argument per line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from smilax.exceptions import StructuralInvariantViolation
from smilax.nodes import NODE_TYPES, FusedRing, Linear, Molecule, Ring

if TYPE_CHECKING:
    from smilax.nodes import Node

# Spaces per nesting level
INDENT: Final[int] = 4

# Longest line kept on one line
LINE_WIDTH: Final[int] = 79

# Names the generated code refers to
NAMESPACE: Final[dict[str, type]] = {
    "Linear": Linear,
    "Ring": Ring,
    "FusedRing": FusedRing,
    "Molecule": Molecule,
}


def _call_args(node: Node) -> tuple[list[Any], list[tuple[str, Any]]]:
    """Positional and keyword arguments that rebuild ``node``."""
    args: list[Any] = []
    kwargs: list[tuple[str, Any]] = []

    def attachments(mapping) -> dict[int, list[Node]]:
        return {pos: list(nodes) for pos, nodes in mapping.items()}

    if isinstance(node, Linear):
        args.append([a.token for a in node.atoms])
        if any(not b.is_default for b in node.bonds):
            kwargs.append(("bonds", [b.to_record() for b in node.bonds]))
        if node.attachments:
            kwargs.append(("attachments", attachments(node.attachments)))
    elif isinstance(node, Ring):
        kwargs.append(("atoms", node.atoms.token))
        kwargs.append(("size", node.size))
        kwargs.append(("ring_number", node.ring_number))
        if node.offset:
            kwargs.append(("offset", node.offset))
        if node.substitutions:
            kwargs.append(("substitutions", {p: a.token for p, a in node.substitutions.items()}))
        if node.attachments:
            kwargs.append(("attachments", attachments(node.attachments)))
        if any(not b.is_default for b in node.bonds):
            kwargs.append(("bonds", [b.to_record() for b in node.bonds]))
    elif isinstance(node, FusedRing):
        args.append(list(node.rings))
    else:
        args.append(list(node.components))

    if not isinstance(node, Molecule) and not node.leading_bond.is_default:
        kwargs.append(("leading_bond", node.leading_bond.symbol))
    return args, kwargs


class _CodeWriter:
    """Formats nodes and literals, splitting lines that run too long."""

    def __init__(self, indent: int, width: int) -> None:
        self._indent = indent
        self._width = width

    def format(self, value: Any, level: int = 0) -> str:
        inline = self._inline(value)
        if len(inline) + level * self._indent <= self._width:
            return inline
        return self._multiline(value, level)

    def _inline(self, value: Any) -> str:
        if isinstance(value, NODE_TYPES):
            args, kwargs = _call_args(value)
            parts = [self._inline(a) for a in args]
            parts += [f"{k}={self._inline(v)}" for k, v in kwargs]
            return f"{type(value).__name__}({', '.join(parts)})"
        if isinstance(value, list):
            return "[" + ", ".join(self._inline(v) for v in value) + "]"
        if isinstance(value, dict):
            return "{" + ", ".join(f"{k!r}: {self._inline(v)}" for k, v in value.items()) + "}"
        return repr(value)

    def _multiline(self, value: Any, level: int) -> str:
        pad = " " * (self._indent * (level + 1))
        close = " " * (self._indent * level)

        if isinstance(value, NODE_TYPES):
            args, kwargs = _call_args(value)
            items = [self.format(a, level + 1) for a in args]
            items += [f"{k}={self.format(v, level + 1)}" for k, v in kwargs]
            opener, closer = f"{type(value).__name__}(", ")"
        elif isinstance(value, list):
            items = [self.format(v, level + 1) for v in value]
            opener, closer = "[", "]"
        elif isinstance(value, dict):
            items = [f"{k!r}: {self.format(v, level + 1)}" for k, v in value.items()]
            opener, closer = "{", "}"
        else:
            return repr(value)

        body = "".join(f"{pad}{item},\n" for item in items)
        return f"{opener}\n{body}{close}{closer}"


def decompile(node: Node, indent: int = INDENT, width: int = LINE_WIDTH) -> str:
    """Generate constructor code for a node tree.

    Args:
        node: Tree to decompile.
        indent: Spaces per nesting level in split calls.
        width: Longest line kept on one line.

    Returns:
        A Python expression; evaluating it with NAMESPACE gives a tree
        equal to ``node``.

    Example:
        >>> from smilax import parse
        >>> decompile(parse("c1ccccc1"))
        "Ring(atoms='c', size=6, ring_number=1)"
    """
    if not isinstance(node, NODE_TYPES):
        raise StructuralInvariantViolation(f"Cannot decompile {type(node).__name__}: not a node")
    return _CodeWriter(indent, width).format(node)
