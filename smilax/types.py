"""
Core value types.

This module defines the two primitives every tree node is built from:
Atom, an immutable atom token, and Bond, the enumerated bond symbols.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .elements import (
    WILDCARD,
    is_aromatic_symbol,
    is_element_symbol,
    is_organic_symbol,
)
from .exceptions import StructuralInvariantViolation


class Bond(Enum):
    """Bond kinds, valued by the symbol written in SMILES.

    DEFAULT is the unwritten bond between adjacent atoms; it is omitted on
    output. DISCONNECTED is the '.' separator, which the parser reads in
    bond position.
    """

    DEFAULT = ""
    SINGLE = "-"
    DOUBLE = "="
    TRIPLE = "#"
    AROMATIC = ":"
    QUADRUPLE = "$"
    UP = "/"
    DOWN = "\\"
    DISCONNECTED = "."

    def __str__(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        """Text emitted for this bond ('' for DEFAULT)."""
        return self.value

    @property
    def is_default(self) -> bool:
        return self is Bond.DEFAULT

    @classmethod
    def from_symbol(cls, symbol: str | None) -> "Bond":
        """Look up a bond by symbol; None and '' give DEFAULT.

        Raises:
            StructuralInvariantViolation: If symbol is not a bond symbol.
        """
        if symbol is None:
            return cls.DEFAULT
        try:
            return cls(symbol)
        except ValueError:
            raise StructuralInvariantViolation(f"Unknown bond symbol: {symbol!r}") from None

    @classmethod
    def coerce(cls, value: "Bond | str | None") -> "Bond":
        """Accept a Bond, a bond symbol or None."""
        if isinstance(value, Bond):
            return value
        return cls.from_symbol(value)

    def to_record(self) -> str | None:
        """Plain-record form: None for DEFAULT, else the symbol."""
        return None if self is Bond.DEFAULT else self.value


BOND_SYMBOLS: Final[frozenset[str]] = frozenset(b.value for b in Bond if b.value)

# One ring-bond label: optional bond symbol, then 0-9, %nn or %(n)
_RING_BOND_RE: Final = re.compile(r"[-=#:$/\\.]?(?:[0-9]|%[0-9][0-9]|%\([0-9]+\))")
_TOKEN_RE: Final = re.compile(
    r"(?P<atom>\[[^\[\]]*\]|Cl|Br|[A-Za-z*])(?P<labels>(?:" + _RING_BOND_RE.pattern + r")*)\Z"
)
_BRACKET_SYMBOL_RE: Final = re.compile(r"\[[0-9]*(\*|[A-Z][a-z]?|[a-z][a-z]?)")


def bracket_symbol(token: str) -> str | None:
    """Extract the element symbol from a bracket atom token.

    The isotope prefix is skipped. A two-letter candidate wins when it is a
    real symbol ("[Co]" is cobalt, "[CH4]" is carbon).

    Args:
        token: Full bracket text including '[' and ']'.

    Returns:
        The symbol as written (lower case for aromatic), or None if the
        bracket does not start with a valid symbol.
    """
    match = _BRACKET_SYMBOL_RE.match(token)
    if match is None:
        return None
    candidate = match.group(1)
    if candidate == WILDCARD:
        return candidate
    if candidate[0].isupper():
        if len(candidate) == 2 and is_element_symbol(candidate):
            return candidate
        return candidate[0] if is_element_symbol(candidate[0]) else None
    if is_aromatic_symbol(candidate):
        return candidate
    return candidate[0] if is_aromatic_symbol(candidate[0]) else None


def format_ring_number(number: int) -> str:
    """Shortest SMILES spelling of a ring-closure number."""
    if number < 10:
        return str(number)
    if number < 100:
        return f"%{number}"
    return f"%({number})"


@dataclass(frozen=True, slots=True)
class Atom:
    """An atom token.

    Attributes:
        symbol: Element symbol as written; lower case means aromatic and
            '*' is the wildcard.
        bracket: Full bracket text ("[nH]", "[C@@H]", "[13CH3+]") for
            bracket atoms, passed through verbatim; None for bare atoms.
        ring_bonds: Ring-bond labels written after the atom ("1", "=2",
            "%12") for ring closures kept as text instead of ring
            structure.
    """

    symbol: str
    bracket: str | None = None
    ring_bonds: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.bracket is None and not is_organic_symbol(self.symbol):
            raise StructuralInvariantViolation(
                f"Atom {self.symbol!r} needs brackets or is not an element"
            )
        if not isinstance(self.ring_bonds, tuple):
            object.__setattr__(self, "ring_bonds", tuple(self.ring_bonds))

    def __str__(self) -> str:
        return self.token

    @property
    def token(self) -> str:
        """SMILES text of this atom, ring-bond labels included."""
        return (self.bracket or self.symbol) + "".join(self.ring_bonds)

    @property
    def is_aromatic(self) -> bool:
        return is_aromatic_symbol(self.symbol)

    @property
    def is_bracket(self) -> bool:
        return self.bracket is not None

    @classmethod
    def from_token(cls, token: str) -> "Atom":
        """Build an atom from its SMILES text.

        Args:
            token: e.g. "c", "Cl", "[nH]", "c1", "C=2%10".

        Raises:
            StructuralInvariantViolation: If the text is not one atom.
        """
        match = _TOKEN_RE.match(token)
        if match is None:
            raise StructuralInvariantViolation(f"Not an atom token: {token!r}")
        text = match.group("atom")
        labels = tuple(_RING_BOND_RE.findall(match.group("labels")))
        if text.startswith("["):
            symbol = bracket_symbol(text)
            if symbol is None:
                raise StructuralInvariantViolation(f"Not an atom token: {token!r}")
            return cls(symbol, text, labels)
        return cls(text, None, labels)

    @classmethod
    def coerce(cls, value: "Atom | str") -> "Atom":
        """Accept an Atom or its token text."""
        if isinstance(value, Atom):
            return value
        if isinstance(value, str):
            return cls.from_token(value)
        raise StructuralInvariantViolation(f"Expected an atom, got {value!r}")
