"""
SMILES string writer.

This module converts node trees back to SMILES text. Output is structural,
not canonical: the writer walks the tree in a fixed order and emits exactly
what the tree holds, so ``to_smiles(parse(s)) == s``.

Emission order at each position:
    1. incoming bond symbol (omitted when default)
    2. atom token, ring-bond labels included (substitution wins over base)
    3. ring-closure numbers: closings in member order, each preceded by
       its closure bond, then openings in member order
    4. attachments, each wrapped in parentheses, in insertion order
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from smilax.exceptions import StructuralInvariantViolation
from smilax.nodes import FusedRing, Linear, Molecule, Ring
from smilax.types import format_ring_number

if TYPE_CHECKING:
    from smilax.nodes import Node


class SmilesWriter:
    """SMILES writer for node trees.

    Example:
        >>> from smilax import parse
        >>> SmilesWriter(parse("CC(=O)O")).to_smiles()
        'CC(=O)O'
    """

    def __init__(self, node: Node) -> None:
        """Initialize writer.

        Args:
            node: Tree to write.
        """
        self._node = node

    def to_smiles(self) -> str:
        """Generate the SMILES string.

        Raises:
            StructuralInvariantViolation: If the tree holds something that
                is not a node.
        """
        out: list[str] = []
        self._write(self._node, out)
        return "".join(out)

    def _write(self, node: Node, out: list[str]) -> None:
        if isinstance(node, Molecule):
            for component in node.components:
                self._write(component, out)
        elif isinstance(node, Linear):
            self._write_linear(node, out)
        elif isinstance(node, Ring):
            self._write_ring(node, out)
        elif isinstance(node, FusedRing):
            self._write_fused(node, out)
        else:
            raise StructuralInvariantViolation(f"Cannot write {type(node).__name__}: not a node")

    def _write_linear(self, node: Linear, out: list[str]) -> None:
        out.append(node.leading_bond.symbol)
        for pos, atom in enumerate(node.atoms):
            if pos:
                out.append(node.bonds[pos - 1].symbol)
            out.append(atom.token)
            self._write_branches(node.attachments_at(pos), out)

    def _write_ring(self, ring: Ring, out: list[str]) -> None:
        out.append(ring.leading_bond.symbol)
        last = ring.size - 1
        for pos in range(ring.size):
            if pos:
                out.append(ring.bonds[pos - 1].symbol)
            out.append(ring.atom_at(pos).token)
            if pos == 0:
                out.append(format_ring_number(ring.ring_number))
            elif pos == last:
                out.append(ring.closure_bond.symbol)
                out.append(format_ring_number(ring.ring_number))
            self._write_branches(ring.attachments_at(pos), out)

    def _write_fused(self, fused: FusedRing, out: list[str]) -> None:
        out.append(fused.leading_bond.symbol)
        for pos in range(fused.length):
            if pos:
                out.append(fused.bond_after(pos - 1).symbol)
            out.append(fused.atom_at(pos).token)
            for ring in fused.closings_at(pos):
                out.append(ring.closure_bond.symbol)
                out.append(format_ring_number(ring.ring_number))
            for ring in fused.openings_at(pos):
                out.append(format_ring_number(ring.ring_number))
            self._write_branches(fused.attachments_at(pos), out)

    def _write_branches(self, branches: tuple[Node, ...], out: list[str]) -> None:
        for branch in branches:
            out.append("(")
            self._write(branch, out)
            out.append(")")


def to_smiles(node: Node) -> str:
    """Convert a node tree to a SMILES string.

    This is a convenience function that creates a SmilesWriter and
    calls to_smiles().

    Args:
        node: Tree to write.

    Returns:
        SMILES string.

    Example:
        >>> from smilax.nodes import Linear, Ring
        >>> to_smiles(Ring(atoms="C", size=6))
        'C1CCCCC1'
        >>> to_smiles(Linear(["C", "C", "O"]))
        'CCO'
    """
    return SmilesWriter(node).to_smiles()
