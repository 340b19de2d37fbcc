"""
Structural tree nodes.

A SMILES string is modelled as a tree of four immutable node variants:

    Linear     - a chain of atoms joined by bonds
    Ring       - a cycle of ``size`` atoms written as one run closed by a
                 ring-closure number
    FusedRing  - several rings laid on one run of atoms, sharing positions
    Molecule   - components written one after another

Nodes are frozen dataclasses. Position-keyed data (substitutions,
attachments) is stored in read-only mappings sorted by position, so the
writer always walks it in ascending order. Linear and Ring hash those
mappings by their items, so every node is hashable. Constructors accept
plain lists, dicts, atom tokens and bond symbols and coerce them;
malformed input raises StructuralInvariantViolation.

    >>> ring = Ring(atoms="c", size=6)
    >>> ring.smiles
    'c1ccccc1'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Mapping, Union

from .exceptions import StructuralInvariantViolation
from .types import Atom, Bond

if TYPE_CHECKING:
    from collections.abc import Iterable


def _position(key: Any, size: int, owner: str, what: str) -> int:
    """Normalize a mapping key to an in-range integer position."""
    if isinstance(key, str) and key.lstrip("-").isascii() and key.lstrip("-").isdigit():
        key = int(key)
    if isinstance(key, bool) or not isinstance(key, int):
        raise StructuralInvariantViolation(f"{owner} {what} position must be an integer, got {key!r}")
    if not 0 <= key < size:
        raise StructuralInvariantViolation(
            f"{owner} {what} position {key} outside 0..{size - 1}"
        )
    return key


def _freeze_attachments(
    value: Mapping[Any, Iterable[Node]] | None,
    size: int,
    owner: str,
) -> Mapping[int, tuple[Node, ...]]:
    if not value:
        return MappingProxyType({})
    result: dict[int, tuple[Node, ...]] = {}
    for key, fragments in value.items():
        pos = _position(key, size, owner, "attachment")
        if isinstance(fragments, NODE_TYPES):
            fragments = (fragments,)
        nodes = tuple(fragments)
        for node in nodes:
            if not isinstance(node, NODE_TYPES):
                raise StructuralInvariantViolation(
                    f"{owner} attachment at {pos} is not a node: {node!r}"
                )
        if nodes:
            result[pos] = nodes
    return MappingProxyType(dict(sorted(result.items())))


def _freeze_bonds(value: Iterable[Bond | str | None] | None, count: int, owner: str) -> tuple[Bond, ...]:
    bonds = tuple(Bond.coerce(b) for b in value) if value else ()
    if not bonds:
        return (Bond.DEFAULT,) * count
    if len(bonds) != count:
        raise StructuralInvariantViolation(
            f"{owner} needs {count} bonds, got {len(bonds)}"
        )
    return bonds


class _NodeMethods:
    """Operations shared by every node, as methods returning new nodes."""

    __slots__ = ()

    @property
    def smiles(self) -> str:
        from .writer import to_smiles

        return to_smiles(self)

    def attach(self, fragment: Node, position: int) -> Node:
        from .transform import attach

        return attach(self, fragment, position)

    def substitute(self, position: int, atom: Atom | str) -> Node:
        from .transform import substitute

        return substitute(self, position, atom)

    def concat(self, other: Node) -> Molecule:
        from .transform import concat

        return concat(self, other)


class _RingMethods(_NodeMethods):
    __slots__ = ()

    def fuse(self, other: Ring, offset: int) -> FusedRing:
        from .transform import fuse

        return fuse(self, other, offset)


@dataclass(frozen=True, slots=True)
class Linear(_NodeMethods):
    """A chain of atoms.

    Attributes:
        atoms: Atoms in text order.
        bonds: ``len(atoms) - 1`` bonds; ``bonds[i]`` joins ``atoms[i]`` and
            ``atoms[i + 1]``.
        attachments: Position -> branches written after that atom.
        leading_bond: Bond into ``atoms[0]`` from whatever precedes the
            chain in text (host atom of a branch, previous component).
    """

    atoms: tuple[Atom, ...]
    bonds: tuple[Bond, ...] | None = None
    attachments: Mapping[int, tuple[Node, ...]] | None = None
    leading_bond: Bond | None = None

    type: ClassVar[str] = "linear"

    def __post_init__(self) -> None:
        if isinstance(self.atoms, (str, Atom)):
            raise StructuralInvariantViolation("Linear atoms must be a sequence of atoms")
        atoms = tuple(Atom.coerce(a) for a in self.atoms)
        if not atoms:
            raise StructuralInvariantViolation("Linear needs at least one atom")
        object.__setattr__(self, "atoms", atoms)
        object.__setattr__(self, "bonds", _freeze_bonds(self.bonds, len(atoms) - 1, "Linear"))
        object.__setattr__(
            self, "attachments", _freeze_attachments(self.attachments, len(atoms), "Linear")
        )
        object.__setattr__(self, "leading_bond", Bond.coerce(self.leading_bond))

    def __hash__(self) -> int:
        return hash((self.atoms, self.bonds, tuple(self.attachments.items()), self.leading_bond))

    @property
    def atom_count(self) -> int:
        return len(self.atoms)

    def atom_at(self, position: int) -> Atom:
        return self.atoms[position]

    def attachments_at(self, position: int) -> tuple[Node, ...]:
        return self.attachments.get(position, ())


@dataclass(frozen=True, slots=True)
class Ring(_RingMethods):
    """A ring written as one run of atoms.

    Position 0 carries the opening ring-closure number and position
    ``size - 1`` the closing one.

    Attributes:
        atoms: Base atom used at every position without a substitution.
        size: Number of atoms in the run.
        ring_number: Ring-closure number written at both ends.
        offset: Start of this ring on the run of an enclosing FusedRing;
            ignored for a standalone ring.
        substitutions: Position -> atom replacing the base atom.
        attachments: Position -> branches written after that atom.
        bonds: ``size`` bonds; ``bonds[i]`` joins positions ``i`` and
            ``(i + 1) % size``, so the last one is the closure bond.
        leading_bond: Bond into position 0 from whatever precedes the ring.
    """

    atoms: Atom
    size: int
    ring_number: int = 1
    offset: int = 0
    substitutions: Mapping[int, Atom] | None = None
    attachments: Mapping[int, tuple[Node, ...]] | None = None
    bonds: tuple[Bond, ...] | None = None
    leading_bond: Bond | None = None

    type: ClassVar[str] = "ring"

    def __post_init__(self) -> None:
        object.__setattr__(self, "atoms", Atom.coerce(self.atoms))
        for name in ("size", "ring_number", "offset"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise StructuralInvariantViolation(f"Ring {name} must be an integer, got {value!r}")
        if self.size < 2:
            raise StructuralInvariantViolation(f"Ring size must be at least 2, got {self.size}")
        if self.ring_number < 0:
            raise StructuralInvariantViolation(f"Ring number must be >= 0, got {self.ring_number}")
        if self.offset < 0:
            raise StructuralInvariantViolation(f"Ring offset must be >= 0, got {self.offset}")

        substitutions = {
            _position(k, self.size, "Ring", "substitution"): Atom.coerce(v)
            for k, v in (self.substitutions or {}).items()
        }
        object.__setattr__(self, "substitutions", MappingProxyType(dict(sorted(substitutions.items()))))
        object.__setattr__(
            self, "attachments", _freeze_attachments(self.attachments, self.size, "Ring")
        )
        object.__setattr__(self, "bonds", _freeze_bonds(self.bonds, self.size, "Ring"))
        object.__setattr__(self, "leading_bond", Bond.coerce(self.leading_bond))

    def __hash__(self) -> int:
        return hash((
            self.atoms,
            self.size,
            self.ring_number,
            self.offset,
            tuple(self.substitutions.items()),
            tuple(self.attachments.items()),
            self.bonds,
            self.leading_bond,
        ))

    @property
    def atom_count(self) -> int:
        return self.size

    @property
    def closure_bond(self) -> Bond:
        return self.bonds[-1]

    @property
    def end(self) -> int:
        """Last run position covered by this ring inside a FusedRing."""
        return self.offset + self.size - 1

    def covers(self, position: int) -> bool:
        """Whether a run position lies on this ring (uses ``offset``)."""
        return self.offset <= position <= self.end

    def atom_at(self, position: int) -> Atom:
        return self.substitutions.get(position, self.atoms)

    def attachments_at(self, position: int) -> tuple[Node, ...]:
        return self.attachments.get(position, ())


@dataclass(frozen=True, slots=True)
class FusedRing(_RingMethods):
    """Rings sharing atoms on one run.

    Each member ring spans run positions ``offset .. offset + size - 1``.
    A run position is owned by the last member (in list order) covering it;
    the bond between positions ``p`` and ``p + 1`` is owned by the last
    member covering both. Owners supply atoms, substitutions, attachments
    and bonds; whatever a member holds for positions it does not own is
    shadowed.

    Attributes:
        rings: Member rings, at least two.
        leading_bond: Bond into run position 0.
    """

    rings: tuple[Ring, ...]
    leading_bond: Bond | None = None
    length: int = field(init=False, compare=False)
    _owners: tuple[int, ...] = field(init=False, repr=False, compare=False)
    _bond_owners: tuple[int, ...] = field(init=False, repr=False, compare=False)

    type: ClassVar[str] = "fused_ring"

    def __post_init__(self) -> None:
        rings = tuple(self.rings)
        if len(rings) < 2:
            raise StructuralInvariantViolation("FusedRing needs at least two rings")
        for ring in rings:
            if not isinstance(ring, Ring):
                raise StructuralInvariantViolation(f"FusedRing member is not a Ring: {ring!r}")
            if not ring.leading_bond.is_default:
                raise StructuralInvariantViolation("FusedRing members cannot have a leading bond")
        if min(r.offset for r in rings) != 0:
            raise StructuralInvariantViolation("FusedRing run must start at offset 0")

        length = max(r.end for r in rings) + 1
        owners = []
        for pos in range(length):
            owners.append(max(i for i, r in enumerate(rings) if r.covers(pos)))
        bond_owners = []
        for pos in range(length - 1):
            covering = [i for i, r in enumerate(rings) if r.covers(pos) and r.covers(pos + 1)]
            if not covering:
                raise StructuralInvariantViolation(
                    f"FusedRing run is not connected between positions {pos} and {pos + 1}"
                )
            bond_owners.append(max(covering))

        # The same number may be reused only once the earlier ring is closed
        for i, first in enumerate(rings):
            for second in rings[i + 1:]:
                if first.ring_number != second.ring_number:
                    continue
                a, b = sorted((first, second), key=lambda r: r.offset)
                if b.offset < a.end:
                    raise StructuralInvariantViolation(
                        f"Ring number {first.ring_number} is open twice at once"
                    )

        object.__setattr__(self, "rings", rings)
        object.__setattr__(self, "leading_bond", Bond.coerce(self.leading_bond))
        object.__setattr__(self, "length", length)
        object.__setattr__(self, "_owners", tuple(owners))
        object.__setattr__(self, "_bond_owners", tuple(bond_owners))

    @property
    def atom_count(self) -> int:
        return self.length

    def owner(self, position: int) -> tuple[int, int]:
        """Member index owning a run position and the member-local position."""
        idx = self._owners[position]
        return idx, position - self.rings[idx].offset

    def atom_at(self, position: int) -> Atom:
        idx, local = self.owner(position)
        return self.rings[idx].atom_at(local)

    def attachments_at(self, position: int) -> tuple[Node, ...]:
        idx, local = self.owner(position)
        return self.rings[idx].attachments_at(local)

    def bond_owner(self, position: int) -> tuple[int, int]:
        """Member index owning the bond after a run position, and its local index."""
        idx = self._bond_owners[position]
        return idx, position - self.rings[idx].offset

    def bond_after(self, position: int) -> Bond:
        """Bond between run positions ``position`` and ``position + 1``."""
        idx, local = self.bond_owner(position)
        return self.rings[idx].bonds[local]

    def closings_at(self, position: int) -> list[Ring]:
        return [r for r in self.rings if r.end == position]

    def openings_at(self, position: int) -> list[Ring]:
        return [r for r in self.rings if r.offset == position]


@dataclass(frozen=True, slots=True)
class Molecule(_NodeMethods):
    """Components written one after another with no separator.

    Nested molecules are flattened, so ``components`` never holds a
    Molecule. Each component's leading bond joins it to the previous one.
    """

    components: tuple[Node, ...]

    type: ClassVar[str] = "molecule"

    def __post_init__(self) -> None:
        flat: list[Node] = []
        for component in self.components:
            if isinstance(component, Molecule):
                flat.extend(component.components)
            elif isinstance(component, NODE_TYPES):
                flat.append(component)
            else:
                raise StructuralInvariantViolation(f"Molecule component is not a node: {component!r}")
        if not flat:
            raise StructuralInvariantViolation("Molecule needs at least one component")
        object.__setattr__(self, "components", tuple(flat))

    @property
    def atom_count(self) -> int:
        return sum(c.atom_count for c in self.components)

    def locate(self, position: int) -> tuple[int, int]:
        """Component index holding a global atom position and the local position."""
        for idx, component in enumerate(self.components):
            if position < component.atom_count:
                return idx, position
            position -= component.atom_count
        raise IndexError(position)


NODE_TYPES = (Linear, Ring, FusedRing, Molecule)

Node = Union[Linear, Ring, FusedRing, Molecule]
