"""
SMILES string parser.

This module converts SMILES strings into node trees (Linear, Ring,
FusedRing, Molecule). Parsing is two-phase:

    1. A recursive-descent scan reads chains (the main chain and every
       branch) of atoms, bonds, ring-closure numbers and branches.
    2. Ring closures whose two ends lie on the same chain become ring
       structure; chains are then cut into Linear runs and ring systems.

A closure that cannot be written back from ring structure exactly as it
was read (it crosses a branch, carries its bond on the opening side, uses
a long spelling such as ``%(5)``, or appears out of writer order) is kept
as ring-bond labels on its two atoms. Either way the writer reproduces the
input, so ``to_smiles(parse(s)) == s`` for every accepted string.

Supported:
    - Organic subset atoms (B, C, N, O, P, S, F, Cl, Br, I), aromatic
      b, c, n, o, p, s and the wildcard *
    - Bracket atoms, passed through verbatim ([nH], [C@@H], [13CH3+])
    - Bonds - = # : $ / \\ and the '.' separator
    - Ring closures 0-9, %nn and %(n), with optional bond symbol
    - Branches, nested up to ``max_depth`` levels
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Final

from smilax.elements import TWO_LETTER_ORGANIC, is_organic_symbol
from smilax.exceptions import (
    DepthExceededError,
    InvalidAtomError,
    InvalidBondError,
    MismatchedParenError,
    UnclosedRingError,
)
from smilax.nodes import FusedRing, Linear, Molecule, Node, Ring
from smilax.types import BOND_SYMBOLS, Atom, Bond, bracket_symbol, format_ring_number

# Maximum branch nesting accepted by parse()
MAX_DEPTH: Final[int] = 100

# ASCII digits of ring-closure numbers
DIGITS: Final[str] = "0123456789"


class _Tokenizer:
    """Low-level SMILES tokenizer.

    Provides character-by-character access to a SMILES string with
    lookahead capability.
    """

    __slots__ = ("_string", "_pos")

    def __init__(self, string: str) -> None:
        self._string = string
        self._pos = 0

    @property
    def position(self) -> int:
        """Current position in the string."""
        return self._pos

    def peek(self, offset: int = 0) -> str | None:
        """Look at character at current position + offset without consuming."""
        pos = self._pos + offset
        if pos >= len(self._string):
            return None
        return self._string[pos]

    def next(self) -> str | None:
        """Consume and return the next character, or None at end."""
        if self._pos >= len(self._string):
            return None
        char = self._string[self._pos]
        self._pos += 1
        return char

    def skip(self, count: int = 1) -> None:
        """Skip forward by count characters."""
        self._pos += count

    def read_while(self, predicate) -> str:
        """Read characters while predicate is true."""
        start = self._pos
        while self._pos < len(self._string) and predicate(self._string[self._pos]):
            self._pos += 1
        return self._string[start:self._pos]

    def since(self, start: int) -> str:
        """Text consumed from ``start`` up to the current position."""
        return self._string[start:self._pos]

    def is_eof(self) -> bool:
        """Check if at end of string."""
        return self._pos >= len(self._string)


@dataclass(eq=False)
class _RingEvent:
    """One ring-bond token written after an atom."""

    closure: _Closure
    is_opening: bool
    bond: str
    number_text: str
    position: int

    @property
    def text(self) -> str:
        return self.bond + self.number_text


@dataclass(eq=False)
class _Closure:
    """A ring-closure number from opening to closing."""

    number: int
    order: int
    opening: _ChainAtom
    opening_event: _RingEvent | None = None
    closing: _ChainAtom | None = None
    closing_event: _RingEvent | None = None
    structural: bool = False


@dataclass(eq=False)
class _ChainAtom:
    """An atom as read, with everything written after it."""

    atom: Atom
    bond: Bond
    chain: _Chain
    index: int
    events: list[_RingEvent] = field(default_factory=list)
    branches: list[_Chain] = field(default_factory=list)

    @property
    def final(self) -> Atom:
        """The atom with ring-bond labels for closures kept as text."""
        labels = tuple(e.text for e in self.events if not e.closure.structural)
        return replace(self.atom, ring_bonds=labels) if labels else self.atom


@dataclass(eq=False)
class _Chain:
    atoms: list[_ChainAtom] = field(default_factory=list)


@dataclass
class _ParserState:
    """Mutable state for one parse() call."""

    # Ring closure tracking: ring number -> open closure
    open_rings: dict[int, _Closure] = field(default_factory=dict)

    # Every closure in order of opening
    closures: list[_Closure] = field(default_factory=list)


class SmilesParser:
    """SMILES string parser.

    Example:
        >>> parser = SmilesParser("CCO")
        >>> node = parser.parse()
        >>> node.type
        'linear'

    For convenience, use the module-level `parse()` function:
        >>> from smilax import parse
        >>> node = parse("c1ccccc1")
    """

    def __init__(self, smiles: str, max_depth: int = MAX_DEPTH) -> None:
        """Initialize parser with a SMILES string.

        Args:
            smiles: SMILES string to parse.
            max_depth: Deepest branch nesting accepted.
        """
        self._smiles = smiles
        self._max_depth = max_depth
        self._tokenizer = _Tokenizer(smiles)
        self._state = _ParserState()

    def parse(self) -> Node:
        """Parse the SMILES string into a node tree.

        Returns:
            Root node.

        Raises:
            ParseError: If SMILES syntax is invalid (one of the subclasses
                UnclosedRingError, InvalidAtomError, InvalidBondError,
                MismatchedParenError, DepthExceededError).
        """
        tok = self._tokenizer

        if not self._smiles:
            raise InvalidAtomError("", self._smiles, 0, reason="Empty SMILES")

        chain = self._parse_chain(depth=0)

        if not tok.is_eof():
            raise MismatchedParenError("Unmatched ')'", self._smiles, tok.position)
        if not chain.atoms:
            raise InvalidAtomError(tok.peek() or "", self._smiles, tok.position, reason="No atoms")

        # Validate: no unclosed rings
        if self._state.open_rings:
            first = min(self._state.open_rings.values(), key=lambda c: c.order)
            raise UnclosedRingError(first.number, self._smiles, first.opening_event.position)

        self._resolve_closures()
        return self._build_chain(chain)

    # ------------------------------------------------------------------
    # Phase 1: scanning

    def _parse_chain(self, depth: int) -> _Chain:
        """Parse atoms until ')' or end of input."""
        tok = self._tokenizer
        chain = _Chain()
        pending: tuple[Bond, int] | None = None

        while not tok.is_eof():
            char = tok.peek()

            if char == ")":
                break

            if char == "(":
                if not chain.atoms:
                    raise MismatchedParenError("Branch without preceding atom", self._smiles, tok.position)
                if pending is not None:
                    raise InvalidBondError(
                        pending[0].symbol, self._smiles, pending[1], reason="Bond before branch"
                    )
                self._parse_branch(chain.atoms[-1], depth)
                continue

            if char in BOND_SYMBOLS:
                start = tok.position
                if pending is not None:
                    raise InvalidBondError(char, self._smiles, start, reason="Consecutive bonds")
                if depth == 0 and not chain.atoms:
                    raise InvalidBondError(char, self._smiles, start, reason="Bond without preceding atom")
                tok.next()
                nxt = tok.peek()
                if nxt is not None and (nxt in DIGITS or nxt == "%"):
                    self._parse_ring_bond(chain, char, start)
                else:
                    pending = (Bond(char), start)
                continue

            if char in DIGITS or char == "%":
                self._parse_ring_bond(chain, "", tok.position)
                continue

            atom = self._read_atom()
            bond = pending[0] if pending is not None else Bond.DEFAULT
            chain.atoms.append(_ChainAtom(atom, bond, chain, len(chain.atoms)))
            pending = None

        if pending is not None:
            raise InvalidBondError(
                pending[0].symbol, self._smiles, pending[1], reason="Bond without following atom"
            )
        return chain

    def _parse_branch(self, host: _ChainAtom, depth: int) -> None:
        """Parse a parenthesized branch and hang it on ``host``."""
        tok = self._tokenizer
        open_pos = tok.position
        tok.next()  # consume '('

        if depth + 1 > self._max_depth:
            raise DepthExceededError(self._max_depth, self._smiles, open_pos)

        branch = self._parse_chain(depth + 1)

        if tok.peek() != ")":
            raise MismatchedParenError("Unclosed branch", self._smiles, open_pos)
        if not branch.atoms:
            raise MismatchedParenError("Empty branch", self._smiles, open_pos)
        tok.next()  # consume ')'
        host.branches.append(branch)

    def _parse_ring_bond(self, chain: _Chain, bond: str, start: int) -> None:
        """Parse a ring-closure number written after the last atom."""
        tok = self._tokenizer

        if not chain.atoms:
            raise InvalidAtomError(
                tok.peek() or "", self._smiles, start, reason="Ring closure without preceding atom"
            )
        atom = chain.atoms[-1]
        if bond == Bond.DISCONNECTED.symbol:
            raise InvalidBondError(bond, self._smiles, start, reason="Ring closure cannot use")
        if atom.branches:
            raise InvalidBondError(
                tok.peek() or "", self._smiles, start, reason="Ring closure must precede branches"
            )

        number_start = tok.position
        number = self._read_ring_number()
        number_text = tok.since(number_start)

        closure = self._state.open_rings.pop(number, None)
        if closure is None:
            # Open new ring closure
            closure = _Closure(number, len(self._state.closures), atom)
            event = _RingEvent(closure, True, bond, number_text, start)
            closure.opening_event = event
            self._state.open_rings[number] = closure
            self._state.closures.append(closure)
        else:
            # Close the ring
            event = _RingEvent(closure, False, bond, number_text, start)
            closure.closing = atom
            closure.closing_event = event
        atom.events.append(event)

    def _read_ring_number(self) -> int:
        """Read a ring closure number (0-9, %nn, %(n))."""
        tok = self._tokenizer
        start = tok.position

        if tok.peek() == "%":
            tok.next()  # consume '%'

            if tok.peek() == "(":
                # %(number) format
                tok.next()
                digits = tok.read_while(DIGITS.__contains__)
                if not digits or tok.peek() != ")":
                    raise InvalidBondError(
                        tok.since(start), self._smiles, start, reason="Malformed ring number"
                    )
                tok.next()
                return int(digits)

            # %nn format (two digits)
            d1 = tok.next()
            d2 = tok.next()
            if not (d1 and d1 in DIGITS and d2 and d2 in DIGITS):
                raise InvalidBondError(
                    tok.since(start), self._smiles, start, reason="Expected two digits after %"
                )
            return int(d1 + d2)

        # Single digit
        return int(tok.next())

    def _read_atom(self) -> Atom:
        """Read a bare or bracket atom."""
        tok = self._tokenizer
        start = tok.position
        char = tok.peek()

        if char == "[":
            end = self._smiles.find("]", start)
            nested = self._smiles.find("[", start + 1)
            if end == -1 or (nested != -1 and nested < end):
                stop = len(self._smiles) if nested == -1 else nested
                raise InvalidAtomError(
                    self._smiles[start:stop], self._smiles, start, reason="Unclosed bracket atom"
                )
            token = self._smiles[start:end + 1]
            symbol = bracket_symbol(token)
            if symbol is None:
                raise InvalidAtomError(token, self._smiles, start)
            tok.skip(len(token))
            return Atom(symbol, token)

        two = self._smiles[start:start + 2]
        if two in TWO_LETTER_ORGANIC:
            tok.skip(2)
            return Atom(two)

        if is_organic_symbol(char):
            tok.next()
            return Atom(char)

        raise InvalidAtomError(char, self._smiles, start)

    # ------------------------------------------------------------------
    # Phase 2: ring structure

    def _resolve_closures(self) -> None:
        """Decide which closures become ring structure.

        A closure starts structural when both ends sit on the same chain
        and its text is what the writer would emit. Then every atom whose
        ring-bond tokens are not in writer order (labels first, then
        closings by order of opening, then openings) has all its
        structural closures demoted to labels, until nothing changes.
        """
        closures = self._state.closures
        for c in closures:
            canonical = format_ring_number(c.number)
            c.structural = (
                c.opening.chain is c.closing.chain
                and c.closing.index > c.opening.index
                and not c.opening_event.bond
                and c.opening_event.number_text == canonical
                and c.closing_event.number_text == canonical
            )

        ring_atoms: list[_ChainAtom] = []
        seen: set[int] = set()
        for c in closures:
            for atom in (c.opening, c.closing):
                if id(atom) not in seen:
                    seen.add(id(atom))
                    ring_atoms.append(atom)

        changed = True
        while changed:
            changed = False
            for atom in ring_atoms:
                if _in_writer_order(atom.events):
                    continue
                for event in atom.events:
                    if event.closure.structural:
                        event.closure.structural = False
                        changed = True

    def _build_chain(self, chain: _Chain) -> Node:
        """Cut a chain into Linear runs and ring systems."""
        spans = sorted(
            (
                (e.closure.opening.index, e.closure.closing.index, e.closure)
                for a in chain.atoms
                for e in a.events
                if e.is_opening and e.closure.structural
            ),
            key=lambda span: span[2].order,
        )

        # Spans sharing at least one atom form one ring system
        systems: list[list] = []
        for start, end, closure in spans:
            if systems and start <= systems[-1][1]:
                systems[-1][1] = max(systems[-1][1], end)
                systems[-1][2].append(closure)
            else:
                systems.append([start, end, [closure]])

        components: list[Node] = []
        pos = 0
        for start, end, members in systems:
            if pos < start:
                components.append(self._build_linear(chain.atoms[pos:start]))
            components.append(self._build_ring_system(chain.atoms[start:end + 1], members))
            pos = end + 1
        if pos < len(chain.atoms):
            components.append(self._build_linear(chain.atoms[pos:]))

        if len(components) == 1:
            return components[0]
        return Molecule(components)

    def _build_attachments(self, run: list[_ChainAtom]) -> dict[int, list[Node]]:
        return {
            pos: [self._build_chain(branch) for branch in atom.branches]
            for pos, atom in enumerate(run)
            if atom.branches
        }

    def _build_linear(self, run: list[_ChainAtom]) -> Linear:
        return Linear(
            atoms=[a.final for a in run],
            bonds=[a.bond for a in run[1:]],
            attachments=self._build_attachments(run),
            leading_bond=run[0].bond,
        )

    def _build_ring_system(self, run: list[_ChainAtom], members: list[_Closure]) -> Ring | FusedRing:
        base_index = run[0].index
        atoms = [a.final for a in run]
        attachments = self._build_attachments(run)

        if len(members) == 1:
            closure = members[0]
            base = _base_atom(atoms)
            return Ring(
                atoms=base,
                size=len(run),
                ring_number=closure.number,
                substitutions={p: a for p, a in enumerate(atoms) if a != base},
                attachments=attachments,
                bonds=[a.bond for a in run[1:]] + [Bond.from_symbol(closure.closing_event.bond)],
                leading_bond=run[0].bond,
            )

        # Lay out bare member spans first so FusedRing decides ownership
        skeleton = FusedRing([
            Ring(
                atoms=atoms[c.opening.index - base_index],
                size=c.closing.index - c.opening.index + 1,
                ring_number=c.number,
                offset=c.opening.index - base_index,
            )
            for c in members
        ])

        owned: list[list[int]] = [[] for _ in members]
        for pos in range(skeleton.length):
            owned[skeleton.owner(pos)[0]].append(pos)
        owned_bonds: list[list[int]] = [[] for _ in members]
        for pos in range(skeleton.length - 1):
            owned_bonds[skeleton.bond_owner(pos)[0]].append(pos)

        rings = []
        for idx, (closure, shape) in enumerate(zip(members, skeleton.rings)):
            offset = shape.offset
            if owned[idx]:
                base = _base_atom([atoms[p] for p in owned[idx]])
            else:
                base = shape.atoms
            bonds = [Bond.DEFAULT] * shape.size
            for pos in owned_bonds[idx]:
                bonds[pos - offset] = run[pos + 1].bond
            bonds[-1] = Bond.from_symbol(closure.closing_event.bond)
            rings.append(Ring(
                atoms=base,
                size=shape.size,
                ring_number=closure.number,
                offset=offset,
                substitutions={p - offset: atoms[p] for p in owned[idx] if atoms[p] != base},
                attachments={p - offset: attachments[p] for p in owned[idx] if p in attachments},
                bonds=bonds,
            ))
        return FusedRing(rings, leading_bond=run[0].bond)


def _in_writer_order(events: list[_RingEvent]) -> bool:
    """Check one atom's ring-bond tokens against the writer's emission order."""
    seen_structural = False
    seen_opening = False
    last_order = -1
    for event in events:
        if not event.closure.structural:
            if seen_structural:
                return False
            continue
        seen_structural = True
        if event.is_opening:
            seen_opening = True
        elif seen_opening or event.closure.order < last_order:
            return False
        else:
            last_order = event.closure.order
    return True


def _base_atom(atoms: list[Atom]) -> Atom:
    """Most frequent atom; ties go to the one seen first."""
    return Counter(atoms).most_common(1)[0][0]


def parse(smiles: str, *, max_depth: int = MAX_DEPTH) -> Node:
    """Parse a SMILES string into a node tree.

    This is a convenience function that creates a SmilesParser and
    calls parse().

    Args:
        smiles: SMILES string to parse.
        max_depth: Deepest branch nesting accepted.

    Returns:
        Root node: a Linear, Ring or FusedRing, or a Molecule when the
        string has several top-level components.

    Raises:
        ParseError: If SMILES syntax is invalid.

    Example:
        >>> parse("Cc1ccccc1").type
        'molecule'
    """
    return SmilesParser(smiles, max_depth=max_depth).parse()
