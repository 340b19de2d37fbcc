"""
Chemical element symbols.

This module provides the periodic table symbols and the atom subsets that
decide which tokens the parser accepts with and without brackets. No
chemical properties are modelled; the engine only checks spelling.
"""

from __future__ import annotations

from typing import Final, FrozenSet

# Periodic table symbols, H through Og
_SYMBOLS: Final[str] = """
    H He Li Be B C N O F Ne Na Mg Al Si P S Cl Ar K Ca
    Sc Ti V Cr Mn Fe Co Ni Cu Zn Ga Ge As Se Br Kr Rb Sr Y Zr
    Nb Mo Tc Ru Rh Pd Ag Cd In Sn Sb Te I Xe Cs Ba La Ce Pr Nd
    Pm Sm Eu Gd Tb Dy Ho Er Tm Yb Lu Hf Ta W Re Os Ir Pt Au Hg
    Tl Pb Bi Po At Rn Fr Ra Ac Th Pa U Np Pu Am Cm Bk Cf Es Fm
    Md No Lr Rf Db Sg Bh Hs Mt Ds Rg Cn Nh Fl Mc Lv Ts Og
"""

ELEMENT_SYMBOLS: Final[FrozenSet[str]] = frozenset(_SYMBOLS.split())

# Daylight "organic subset" - atoms that can appear without brackets
ORGANIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "B", "C", "N", "O", "P", "S", "F", "Cl", "Br", "I",
})

# Aromatic symbols allowed without brackets
BARE_AROMATIC_SUBSET: Final[FrozenSet[str]] = frozenset({
    "b", "c", "n", "o", "p", "s",
})

# Aromatic symbols allowed inside brackets
AROMATIC_SUBSET: Final[FrozenSet[str]] = BARE_AROMATIC_SUBSET | frozenset({
    "as", "se", "te",
})

# Two-letter elements in organic subset (need special handling in parser)
TWO_LETTER_ORGANIC: Final[FrozenSet[str]] = frozenset({"Cl", "Br"})

WILDCARD: Final[str] = "*"


def is_element_symbol(symbol: str) -> bool:
    """Check if symbol is a periodic table symbol (exact case)."""
    return symbol in ELEMENT_SYMBOLS


def is_aromatic_symbol(symbol: str) -> bool:
    """Check if symbol represents an aromatic atom."""
    return symbol in AROMATIC_SUBSET


def is_organic_symbol(symbol: str) -> bool:
    """Check if symbol may be written without brackets."""
    return symbol in ORGANIC_SUBSET or symbol in BARE_AROMATIC_SUBSET or symbol == WILDCARD
