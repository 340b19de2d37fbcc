"""
Position edits: attaching branches and substituting atoms.

Both functions are pure. The input node is untouched and the returned node
reuses every unmodified child by reference. Positions address the atoms of
a node's text run: ``atoms`` of a Linear, ``0..size-1`` of a Ring, the run
of a FusedRing, and the concatenated atoms of a Molecule's components.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from smilax.exceptions import InvalidPositionError, StructuralInvariantViolation
from smilax.nodes import NODE_TYPES, FusedRing, Linear, Molecule, Ring
from smilax.types import Atom

if TYPE_CHECKING:
    from smilax.nodes import Node


def _check_position(node: Node, position: int) -> None:
    size = node.atom_count
    if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < size:
        raise InvalidPositionError(position, size)


def _replace_member(members: tuple, idx: int, member: Node) -> tuple:
    return members[:idx] + (member,) + members[idx + 1:]


def attach(node: Node, fragment: Node, position: int) -> Node:
    """Append a branch at a position.

    Branches at the same position keep insertion order and are written as
    adjacent parenthesized groups after the atom.

    Args:
        node: Node to extend.
        fragment: Branch to attach; its leading bond becomes the bond to
            the host atom.
        position: Host atom position.

    Returns:
        New node with the branch attached.

    Raises:
        InvalidPositionError: If position is outside the node.

    Example:
        >>> from smilax import Ring, Linear, to_smiles
        >>> to_smiles(attach(Ring(atoms="c", size=6), Linear(["C"]), 1))
        'c1c(C)cccc1'
    """
    if not isinstance(fragment, NODE_TYPES):
        raise StructuralInvariantViolation(f"Cannot attach {fragment!r}: not a node")
    _check_position(node, position)

    if isinstance(node, (Linear, Ring)):
        attachments = dict(node.attachments)
        attachments[position] = node.attachments_at(position) + (fragment,)
        return replace(node, attachments=attachments)

    if isinstance(node, FusedRing):
        idx, local = node.owner(position)
        ring = attach(node.rings[idx], fragment, local)
        return replace(node, rings=_replace_member(node.rings, idx, ring))

    idx, local = node.locate(position)
    component = attach(node.components[idx], fragment, local)
    return Molecule(_replace_member(node.components, idx, component))


def substitute(node: Node, position: int, atom: Atom | str) -> Node:
    """Replace the atom at a position.

    On a Ring this sets the substitution entry (last write wins); on a
    Linear it replaces the atom. FusedRing and Molecule delegate to the
    member owning the position.

    Args:
        node: Node to edit.
        position: Atom position.
        atom: New atom, or its token text ("n", "[nH]").

    Returns:
        New node with the atom replaced.

    Raises:
        InvalidPositionError: If position is outside the node.
        StructuralInvariantViolation: If atom is not a valid atom token.
    """
    atom = Atom.coerce(atom)
    _check_position(node, position)

    if isinstance(node, Linear):
        atoms = _replace_member(node.atoms, position, atom)
        return replace(node, atoms=atoms)

    if isinstance(node, Ring):
        substitutions = dict(node.substitutions)
        substitutions[position] = atom
        return replace(node, substitutions=substitutions)

    if isinstance(node, FusedRing):
        idx, local = node.owner(position)
        ring = substitute(node.rings[idx], local, atom)
        return replace(node, rings=_replace_member(node.rings, idx, ring))

    idx, local = node.locate(position)
    component = substitute(node.components[idx], local, atom)
    return Molecule(_replace_member(node.components, idx, component))
