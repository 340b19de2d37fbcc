"""
Round-trip checks.

A string round-trips when parsing and writing it back gives the identical
text. The parser keeps enough structure (ring-bond labels, leading bonds,
verbatim bracket atoms) that every string it accepts round-trips; these
helpers make that checkable from the outside.
"""

from __future__ import annotations

from .exceptions import ParseError
from .parser import parse
from .writer import to_smiles


def regenerate(smiles: str) -> str:
    """Parse a SMILES string and write it back.

    Raises:
        ParseError: If the string does not parse.
    """
    return to_smiles(parse(smiles))


def is_valid_roundtrip(smiles: str) -> bool:
    """Whether ``smiles`` parses and writes back to the identical string.

    Unparseable input gives False instead of raising.

    Example:
        >>> is_valid_roundtrip("Cc1ccccc1")
        True
        >>> is_valid_roundtrip("C1CC")
        False
    """
    try:
        return regenerate(smiles) == smiles
    except ParseError:
        return False
