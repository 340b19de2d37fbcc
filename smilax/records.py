"""
Plain-record conversion.

Records are the JSON-shaped form of a tree exchanged with callers that do
not use the node classes: dicts keyed by ``type`` (the discriminant) and
camelCase attribute names, with atoms as token strings, bonds as symbols
(None for the default bond) and position-keyed dicts.

    >>> from smilax import parse
    >>> to_record(parse("CCO"))
    {'type': 'linear', 'atoms': ['C', 'C', 'O'], 'bonds': [None, None], 'attachments': {}}

``from_record`` accepts what JSON round-tripping produces: string position
keys, and empty or missing optional entries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .exceptions import StructuralInvariantViolation
from .nodes import FusedRing, Linear, Molecule, Ring

if TYPE_CHECKING:
    from .nodes import Node


def _bonds(bonds) -> list[str | None]:
    return [b.to_record() for b in bonds]


def _attachments(attachments) -> dict[int, list[dict[str, Any]]]:
    return {pos: [to_record(n) for n in nodes] for pos, nodes in attachments.items()}


def _with_leading_bond(record: dict[str, Any], node: Node) -> dict[str, Any]:
    if not node.leading_bond.is_default:
        record["leadingBond"] = node.leading_bond.symbol
    return record


def to_record(node: Node) -> dict[str, Any]:
    """Convert a node tree to a plain record.

    Raises:
        StructuralInvariantViolation: If ``node`` is not a node.
    """
    if isinstance(node, Linear):
        return _with_leading_bond({
            "type": node.type,
            "atoms": [a.token for a in node.atoms],
            "bonds": _bonds(node.bonds),
            "attachments": _attachments(node.attachments),
        }, node)
    if isinstance(node, Ring):
        return _with_leading_bond({
            "type": node.type,
            "atoms": node.atoms.token,
            "size": node.size,
            "ringNumber": node.ring_number,
            "offset": node.offset,
            "substitutions": {pos: a.token for pos, a in node.substitutions.items()},
            "attachments": _attachments(node.attachments),
            "bonds": _bonds(node.bonds),
        }, node)
    if isinstance(node, FusedRing):
        return _with_leading_bond({
            "type": node.type,
            "rings": [to_record(r) for r in node.rings],
        }, node)
    if isinstance(node, Molecule):
        return {
            "type": node.type,
            "components": [to_record(c) for c in node.components],
        }
    raise StructuralInvariantViolation(f"Cannot convert {type(node).__name__} to a record: not a node")


def _require(record: dict[str, Any], key: str) -> Any:
    try:
        return record[key]
    except KeyError:
        raise StructuralInvariantViolation(
            f"{record.get('type')} record is missing {key!r}"
        ) from None


def _records(record: dict[str, Any], key: str) -> list[Node]:
    items = _require(record, key)
    if not isinstance(items, (list, tuple)):
        raise StructuralInvariantViolation(f"{record['type']} record {key!r} must be a list")
    return [from_record(item) for item in items]


def _attachments_from(record: dict[str, Any]) -> dict[Any, list[Node]]:
    attachments = record.get("attachments") or {}
    if not isinstance(attachments, dict):
        raise StructuralInvariantViolation(f"{record['type']} record 'attachments' must be a mapping")
    return {pos: [from_record(item) for item in items] for pos, items in attachments.items()}


def _linear(record: dict[str, Any]) -> Linear:
    return Linear(
        _require(record, "atoms"),
        bonds=record.get("bonds"),
        attachments=_attachments_from(record),
        leading_bond=record.get("leadingBond"),
    )


def _ring(record: dict[str, Any]) -> Ring:
    return Ring(
        atoms=_require(record, "atoms"),
        size=_require(record, "size"),
        ring_number=record.get("ringNumber", 1),
        offset=record.get("offset", 0),
        substitutions=record.get("substitutions"),
        attachments=_attachments_from(record),
        bonds=record.get("bonds"),
        leading_bond=record.get("leadingBond"),
    )


def _fused_ring(record: dict[str, Any]) -> FusedRing:
    return FusedRing(_records(record, "rings"), leading_bond=record.get("leadingBond"))


def _molecule(record: dict[str, Any]) -> Molecule:
    return Molecule(_records(record, "components"))


_BUILDERS: dict[str, Callable[[dict[str, Any]], Node]] = {
    Linear.type: _linear,
    Ring.type: _ring,
    FusedRing.type: _fused_ring,
    Molecule.type: _molecule,
}


def from_record(record: dict[str, Any]) -> Node:
    """Build a node tree from a plain record.

    Raises:
        StructuralInvariantViolation: If the record is malformed or
            describes an inconsistent tree.
    """
    if not isinstance(record, dict):
        raise StructuralInvariantViolation(f"Record must be a mapping, got {type(record).__name__}")
    kind = record.get("type")
    builder = _BUILDERS.get(kind) if isinstance(kind, str) else None
    if builder is None:
        raise StructuralInvariantViolation(f"Unknown node type: {kind!r}")
    try:
        return builder(record)
    except (TypeError, AttributeError) as e:
        raise StructuralInvariantViolation(f"Malformed {kind} record: {e}") from e
