"""
Common fragment table.

Named SMILES fragments for building molecules, grouped into categories.
Fragments are written the way they attach: the first atom is the one
bonded to the host.

    >>> fragment("benzene").smiles
    'c1ccccc1'
"""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, Mapping

from .parser import parse

if TYPE_CHECKING:
    from .nodes import Node


FRAGMENTS: Final[Mapping[str, str]] = MappingProxyType({
    # Alkyl
    "methyl": "C",
    "ethyl": "CC",
    "propyl": "CCC",
    "isopropyl": "C(C)C",
    "butyl": "CCCC",
    "tertButyl": "C(C)(C)C",
    # Functional groups
    "hydroxyl": "O",
    "amino": "N",
    "carboxyl": "C(=O)O",
    "carbonyl": "C=O",
    "ester": "C(=O)OC",
    "ether": "OC",
    "aldehyde": "C=O",
    "ketone": "C(=O)C",
    # Aromatic substituents
    "phenyl": "c1ccccc1",
    "benzyl": "Cc1ccccc1",
    # Rings
    "benzene": "c1ccccc1",
    "cyclohexane": "C1CCCCC1",
    "cyclopentane": "C1CCCC1",
    "pyridine": "c1ccncc1",
    "furan": "c1ccoc1",
    "pyrrole": "c1cc[nH]c1",
    "imidazole": "c1c[nH]cn1",
    # Halides
    "fluoro": "F",
    "chloro": "Cl",
    "bromo": "Br",
    "iodo": "I",
    # Other
    "nitro": "[N+](=O)[O-]",
    "cyano": "C#N",
    "sulfhydryl": "S",
    "sulfonyl": "S(=O)(=O)",
    "phosphate": "OP(=O)(O)O",
})

CATEGORIES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType({
    "alkyl": ("methyl", "ethyl", "propyl", "isopropyl", "butyl", "tertButyl"),
    "functional": (
        "hydroxyl", "amino", "carboxyl", "carbonyl",
        "ester", "ether", "aldehyde", "ketone",
    ),
    "aromatic": ("phenyl", "benzyl"),
    "rings": (
        "benzene", "cyclohexane", "cyclopentane",
        "pyridine", "furan", "pyrrole", "imidazole",
    ),
    "halides": ("fluoro", "chloro", "bromo", "iodo"),
    "other": ("nitro", "cyano", "sulfhydryl", "sulfonyl", "phosphate"),
})


@lru_cache(maxsize=None)
def fragment(name: str) -> Node:
    """Parsed tree of a named fragment.

    Raises:
        KeyError: If ``name`` is not in FRAGMENTS.
    """
    try:
        smiles = FRAGMENTS[name]
    except KeyError:
        raise KeyError(f"Unknown fragment: {name!r}") from None
    return parse(smiles)


def fragments_in(category: str) -> dict[str, str]:
    """Name -> SMILES for every fragment in a category.

    Raises:
        KeyError: If ``category`` is not in CATEGORIES.
    """
    try:
        names = CATEGORIES[category]
    except KeyError:
        raise KeyError(f"Unknown fragment category: {category!r}") from None
    return {name: FRAGMENTS[name] for name in names}
