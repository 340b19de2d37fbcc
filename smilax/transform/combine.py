"""
Combining nodes: ring fusion and concatenation.
"""

from __future__ import annotations

import warnings
from dataclasses import replace
from itertools import count
from typing import TYPE_CHECKING

from smilax.exceptions import RingSizeMismatchError, TransformError
from smilax.nodes import FusedRing, Molecule, Ring

if TYPE_CHECKING:
    from smilax.nodes import Node


def fuse(ring_a: Ring | FusedRing, ring_b: Ring, offset: int) -> FusedRing:
    """Fuse a ring onto a ring or ring system.

    ``ring_b`` is laid on the run of ``ring_a`` with its position 0 at run
    position ``offset``; the two share run positions
    ``offset .. min(len_a, offset + size_b) - 1``. The new member is
    placed after every member starting at or before ``offset``. Shared
    positions keep ``ring_a``'s atoms, branches and bonds.

    If ``ring_b``'s ring number is already used in ``ring_a`` it is
    renumbered to the smallest free number and a UserWarning is issued.

    Args:
        ring_a: Base Ring or FusedRing.
        ring_b: Ring to add. Its leading bond is dropped.
        offset: Run position of ``ring_a`` where ``ring_b`` starts.

    Returns:
        New FusedRing keeping ``ring_a``'s leading bond.

    Raises:
        TransformError: If the arguments are not rings, or ``ring_b``
            holds a different atom or bond at a shared position.
        RingSizeMismatchError: If offset is outside ``ring_a``.

    Example:
        >>> from smilax import Ring, to_smiles
        >>> outer = Ring(atoms="c", size=10)
        >>> inner = Ring(atoms="c", size=6, ring_number=2)
        >>> to_smiles(fuse(outer, inner, 3))
        'c1ccc2ccccc2c1'
    """
    if isinstance(ring_a, Ring):
        members = [replace(ring_a, offset=0, leading_bond=None)]
        length = ring_a.size
    elif isinstance(ring_a, FusedRing):
        members = list(ring_a.rings)
        length = ring_a.length
    else:
        raise TransformError(f"Cannot fuse onto {type(ring_a).__name__}: expected Ring or FusedRing")
    if not isinstance(ring_b, Ring):
        raise TransformError(f"Cannot fuse {type(ring_b).__name__}: expected Ring")
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise RingSizeMismatchError(f"Fusion offset must be an integer, got {offset!r}")

    if not 0 <= offset < length:
        raise RingSizeMismatchError(
            f"Fusion offset {offset} outside ring of {length} atoms"
        )
    number = ring_b.ring_number
    used = {r.ring_number for r in members}
    if number in used:
        number = next(n for n in count(1) if n not in used)
        warnings.warn(
            f"Ring number {ring_b.ring_number} already used; renumbered to {number}",
            stacklevel=2,
        )

    placed = replace(ring_b, offset=offset, ring_number=number, leading_bond=None)
    index = max((i + 1 for i, r in enumerate(members) if r.offset <= offset), default=0)
    members.insert(index, placed)
    members[index] = _take_over(ring_a, placed, FusedRing(members), index)
    return FusedRing(members, leading_bond=ring_a.leading_bond)


def _take_over(ring_a: Ring | FusedRing, placed: Ring, fused: FusedRing, index: int) -> Ring:
    """Copy ``ring_a``'s data at the shared positions ``placed`` now owns.

    ``ring_a``'s atoms, branches and bonds stay where they were; ``placed``
    adds its own branches after them and may set a bond ``ring_a`` leaves
    default.
    """
    length = ring_a.atom_count
    substitutions = dict(placed.substitutions)
    attachments = {pos: list(nodes) for pos, nodes in placed.attachments.items()}
    bonds = list(placed.bonds)

    for pos in range(placed.offset, min(length, placed.end + 1)):
        local = pos - placed.offset
        if fused.owner(pos)[0] == index:
            atom = ring_a.atom_at(pos)
            if substitutions.get(local, atom) != atom:
                raise TransformError(
                    f"Cannot fuse: shared position {pos} holds {atom.token!r} "
                    f"but the fused ring has {substitutions[local].token!r}"
                )
            if atom == placed.atoms:
                substitutions.pop(local, None)
            else:
                substitutions[local] = atom
            branches = ring_a.attachments_at(pos)
            if branches:
                attachments[local] = [*branches, *attachments.get(local, ())]

        if pos + 1 < length and pos < placed.end and fused.bond_owner(pos)[0] == index:
            if isinstance(ring_a, FusedRing):
                bond = ring_a.bond_after(pos)
            else:
                bond = ring_a.bonds[pos]
            if bond.is_default:
                continue
            if not bonds[local].is_default and bonds[local] != bond:
                raise TransformError(
                    f"Cannot fuse: shared bond after position {pos} is {bond.symbol!r} "
                    f"but the fused ring has {bonds[local].symbol!r}"
                )
            bonds[local] = bond

    return replace(placed, substitutions=substitutions, attachments=attachments, bonds=bonds)


def concat(a: Node, b: Node) -> Molecule:
    """Write ``b`` directly after ``a``.

    Molecules are flattened, so concatenation is associative on the
    resulting component lists. ``b``'s leading bond joins the two.

    Example:
        >>> from smilax import Linear, Ring, to_smiles
        >>> to_smiles(concat(Linear(["C"]), Ring(atoms="c", size=6)))
        'Cc1ccccc1'
    """
    return Molecule([a, b])
