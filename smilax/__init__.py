"""
Smilax - SMILES notation engine.

A zero-dependency library for parsing SMILES into an immutable structural
tree, editing that tree, and writing it back to the identical string.

    >>> from smilax import parse, attach, Linear, to_smiles
    >>> ring = parse("c1ccccc1")
    >>> to_smiles(attach(ring, Linear(["C"]), 1))
    'c1c(C)cccc1'

Submodules:
    smilax.transform  - attach, substitute, fuse, concat
    smilax.decompiler - constructor code for a tree
    smilax.fragments  - named fragment table
    smilax.records    - plain-record conversion
    smilax.tools      - boundary operations returning result dicts
"""

__version__ = "0.1.0"

# Core types
from smilax.types import Atom, Bond
from smilax.nodes import FusedRing, Linear, Molecule, Ring

# Parsing and writing
from smilax.parser import parse, SmilesParser
from smilax.writer import to_smiles, SmilesWriter

# Transformations
from smilax.transform import attach, concat, fuse, substitute

# Decompiling and round trip
from smilax.decompiler import decompile
from smilax.roundtrip import is_valid_roundtrip, regenerate

# Exceptions
from smilax.exceptions import (
    SmilaxError,
    ParseError,
    UnclosedRingError,
    InvalidAtomError,
    InvalidBondError,
    MismatchedParenError,
    DepthExceededError,
    TransformError,
    InvalidPositionError,
    RingSizeMismatchError,
    StructuralInvariantViolation,
)

# Submodules
from smilax import fragments, records, tools, transform

__all__ = [
    # Types
    "Atom", "Bond", "Linear", "Ring", "FusedRing", "Molecule",
    # Parsing
    "parse", "SmilesParser",
    # Writing
    "to_smiles", "SmilesWriter",
    # Transformations
    "attach", "substitute", "fuse", "concat",
    # Decompiling and round trip
    "decompile", "is_valid_roundtrip", "regenerate",
    # Exceptions
    "SmilaxError", "ParseError", "UnclosedRingError", "InvalidAtomError",
    "InvalidBondError", "MismatchedParenError", "DepthExceededError",
    "TransformError", "InvalidPositionError", "RingSizeMismatchError",
    "StructuralInvariantViolation",
    # Submodules
    "fragments", "records", "tools", "transform",
]
