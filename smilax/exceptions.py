"""
Custom exceptions for smilax.

This module defines a hierarchy of exceptions for handling notation errors
in a structured way. Every error the engine raises derives from SmilaxError,
so callers at a boundary can convert failures with a single except clause.
"""

from __future__ import annotations


class SmilaxError(Exception):
    """Base exception for all smilax errors."""

    pass


class ParseError(SmilaxError):
    """Error during SMILES parsing.

    Attributes:
        position: Character position in the SMILES string where error occurred.
        smiles: The original SMILES string being parsed.
        message: Description of what went wrong.
    """

    def __init__(
        self,
        message: str,
        smiles: str | None = None,
        position: int | None = None,
    ) -> None:
        self.message = message
        self.smiles = smiles
        self.position = position

        # Build detailed error message
        parts = [message]
        if smiles is not None and position is not None:
            parts.append(f"\n  {smiles}")
            parts.append(f"\n  {' ' * position}^")
        elif smiles is not None:
            parts.append(f" in: {smiles}")

        super().__init__("".join(parts))


class UnclosedRingError(ParseError):
    """A ring-closure number was opened but never closed.

    Attributes:
        ring_number: The ring-closure number left open.
    """

    def __init__(
        self,
        ring_number: int,
        smiles: str | None = None,
        position: int | None = None,
    ) -> None:
        self.ring_number = ring_number
        super().__init__(f"Unclosed ring: {ring_number}", smiles, position)


class InvalidAtomError(ParseError):
    """An atom token could not be read.

    Attributes:
        token: The offending text.
    """

    def __init__(
        self,
        token: str,
        smiles: str | None = None,
        position: int | None = None,
        reason: str = "Invalid atom",
    ) -> None:
        self.token = token
        super().__init__(f"{reason}: '{token}'", smiles, position)


class InvalidBondError(ParseError):
    """A bond symbol appeared where no atom can follow it.

    Attributes:
        symbol: The bond symbol.
    """

    def __init__(
        self,
        symbol: str,
        smiles: str | None = None,
        position: int | None = None,
        reason: str = "Invalid bond",
    ) -> None:
        self.symbol = symbol
        super().__init__(f"{reason}: '{symbol}'", smiles, position)


class MismatchedParenError(ParseError):
    """Unbalanced or misplaced branch parenthesis."""

    pass


class DepthExceededError(ParseError):
    """Branch nesting went deeper than the parser allows.

    Attributes:
        max_depth: The limit that was exceeded.
    """

    def __init__(
        self,
        max_depth: int,
        smiles: str | None = None,
        position: int | None = None,
    ) -> None:
        self.max_depth = max_depth
        super().__init__(
            f"Branch nesting deeper than {max_depth} levels",
            smiles,
            position,
        )


class TransformError(SmilaxError):
    """Error raised by a structural transformation."""

    pass


class InvalidPositionError(TransformError):
    """Position outside the atoms of the node being edited.

    Attributes:
        position: The requested position.
        size: Number of addressable positions in the node.
    """

    def __init__(self, position: int, size: int, message: str | None = None) -> None:
        self.position = position
        self.size = size
        if message is None:
            message = f"Invalid position {position}: expected 0 <= position < {size}"
        super().__init__(message)


class RingSizeMismatchError(TransformError):
    """Two rings cannot be fused at the requested offset."""

    pass


class StructuralInvariantViolation(SmilaxError):
    """A node was built from inconsistent parts (e.g. wrong bond count)."""

    pass
