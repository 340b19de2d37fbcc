"""
Boundary operations.

Five request/response operations for callers that exchange plain data
(an agent tool layer, a JSON API). Each returns a dict with ``success``;
failures carry the error message under ``error`` instead of raising.
Only SmilaxError is converted; anything else is a bug and propagates.

    >>> validate_roundtrip("Cc1ccccc1")["valid"]
    True
"""

from __future__ import annotations

from typing import Any, Callable, Final

from .decompiler import decompile
from .exceptions import SmilaxError, StructuralInvariantViolation
from .fragments import CATEGORIES, FRAGMENTS, fragment
from .parser import parse
from .records import from_record, to_record
from .writer import to_smiles

Result = dict[str, Any]


def _failure(error: Exception) -> Result:
    return {"success": False, "error": str(error)}


def _check_smiles(smiles: Any) -> None:
    if not isinstance(smiles, str):
        raise StructuralInvariantViolation(f"SMILES must be a string, got {type(smiles).__name__}")


def parse_smiles(smiles: str) -> Result:
    """Parse a SMILES string into a plain record tree."""
    try:
        _check_smiles(smiles)
        ast = to_record(parse(smiles))
    except SmilaxError as e:
        return _failure(e)
    return {"success": True, "smiles": smiles, "ast": ast}


def build_smiles(ast: dict[str, Any]) -> Result:
    """Serialize a plain record tree to SMILES."""
    try:
        smiles = to_smiles(from_record(ast))
    except SmilaxError as e:
        return _failure(e)
    return {"success": True, "smiles": smiles}


def decompile_smiles(smiles: str) -> Result:
    """Parse a SMILES string and return constructor code for its tree."""
    try:
        _check_smiles(smiles)
        code = decompile(parse(smiles))
    except SmilaxError as e:
        return _failure(e)
    return {"success": True, "smiles": smiles, "code": code}


def validate_roundtrip(smiles: str) -> Result:
    """Check that a SMILES string parses and writes back unchanged.

    An unparseable string is a failure, not an invalid round trip.
    """
    try:
        _check_smiles(smiles)
        regenerated = to_smiles(parse(smiles))
    except SmilaxError as e:
        return _failure(e)

    if regenerated == smiles:
        return {
            "success": True,
            "smiles": smiles,
            "valid": True,
            "message": "SMILES round-trip validation passed",
        }
    return {
        "success": True,
        "smiles": smiles,
        "valid": False,
        "regenerated": regenerated,
        "message": f'Round-trip mismatch: expected "{smiles}", got "{regenerated}"',
    }


def get_common_fragments() -> Result:
    """List the fragment table with each fragment's SMILES and node type."""
    fragments = {
        name: {"smiles": smiles, "type": fragment(name).type}
        for name, smiles in FRAGMENTS.items()
    }
    categories = {category: list(names) for category, names in CATEGORIES.items()}
    return {"success": True, "fragments": fragments, "categories": categories}


TOOLS: Final[dict[str, Callable[..., Result]]] = {
    "parse_smiles": parse_smiles,
    "build_smiles": build_smiles,
    "decompile_smiles": decompile_smiles,
    "validate_roundtrip": validate_roundtrip,
    "get_common_fragments": get_common_fragments,
}
