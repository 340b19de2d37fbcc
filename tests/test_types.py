"""Tests for atoms, bonds, elements and node construction."""

import pytest

from smilax import Atom, Bond, FusedRing, Linear, Molecule, Ring, attach
from smilax.elements import (
    AROMATIC_SUBSET,
    ELEMENT_SYMBOLS,
    ORGANIC_SUBSET,
    is_aromatic_symbol,
    is_element_symbol,
    is_organic_symbol,
)
from smilax.exceptions import StructuralInvariantViolation
from smilax.types import bracket_symbol, format_ring_number


class TestElement:
    """Test element lookup."""

    def test_carbon(self):
        """Carbon is an element symbol."""
        assert is_element_symbol("C")

    def test_chlorine(self):
        """Two-letter symbols."""
        assert is_element_symbol("Cl")

    def test_table_size(self):
        """The table runs from hydrogen to oganesson."""
        assert len(ELEMENT_SYMBOLS) == 118
        assert {"H", "Og"} <= ELEMENT_SYMBOLS

    def test_invalid_symbol(self):
        """Unknown and lower-case symbols are rejected."""
        assert not is_element_symbol("Xx")
        assert not is_element_symbol("c")

    def test_subsets(self):
        """Organic and aromatic subsets."""
        assert "Cl" in ORGANIC_SUBSET
        assert "se" in AROMATIC_SUBSET
        assert is_organic_symbol("c")
        assert is_organic_symbol("*")
        assert not is_organic_symbol("se")
        assert is_aromatic_symbol("n")
        assert not is_aromatic_symbol("N")


class TestBond:
    """Test the bond enumeration."""

    def test_symbols(self):
        """Bonds are valued by their symbol."""
        assert Bond.from_symbol("=") is Bond.DOUBLE
        assert Bond.from_symbol("\\") is Bond.DOWN
        assert Bond.DOUBLE.symbol == "="

    def test_default(self):
        """None and '' give the default bond."""
        assert Bond.from_symbol(None) is Bond.DEFAULT
        assert Bond.from_symbol("") is Bond.DEFAULT
        assert Bond.DEFAULT.is_default
        assert Bond.DEFAULT.to_record() is None
        assert Bond.TRIPLE.to_record() == "#"

    def test_unknown(self):
        """Unknown symbols are rejected."""
        with pytest.raises(StructuralInvariantViolation):
            Bond.from_symbol("~")


class TestAtom:
    """Test atom tokens."""

    def test_bare(self):
        """Bare tokens."""
        atom = Atom.from_token("c")
        assert atom == Atom("c")
        assert atom.is_aromatic
        assert not atom.is_bracket

    def test_bracket(self):
        """Bracket tokens keep their text."""
        atom = Atom.from_token("[13CH3+]")
        assert atom.symbol == "C"
        assert atom.bracket == "[13CH3+]"
        assert str(atom) == "[13CH3+]"

    def test_labels(self):
        """Ring-bond labels follow the atom."""
        atom = Atom.from_token("C=1%12%(105)")
        assert atom.ring_bonds == ("=1", "%12", "%(105)")
        assert atom.token == "C=1%12%(105)"

    @pytest.mark.parametrize("token", ["", "Xx", "Na", "[Xx]", "CC", "C1(", "C²", "C%(١٢)"])
    def test_invalid(self, token):
        """Anything but one atom is rejected."""
        with pytest.raises(StructuralInvariantViolation):
            Atom.from_token(token)

    def test_bracket_symbol(self):
        """Element symbols inside brackets."""
        assert bracket_symbol("[Co]") == "Co"
        assert bracket_symbol("[CH4]") == "C"
        assert bracket_symbol("[2H]") == "H"
        assert bracket_symbol("[nH]") == "n"
        assert bracket_symbol("[as]") == "as"
        assert bracket_symbol("[*]") == "*"
        assert bracket_symbol("[Xx]") is None

    def test_format_ring_number(self):
        """Shortest spelling of ring numbers."""
        assert format_ring_number(0) == "0"
        assert format_ring_number(9) == "9"
        assert format_ring_number(10) == "%10"
        assert format_ring_number(99) == "%99"
        assert format_ring_number(100) == "%(100)"


class TestNodeInvariants:
    """Node constructors reject inconsistent trees."""

    def test_linear_bond_count(self):
        """Linear needs one bond fewer than atoms."""
        with pytest.raises(StructuralInvariantViolation):
            Linear(["C", "C"], bonds=["=", "="])

    def test_linear_needs_atoms(self):
        """Linear cannot be empty."""
        with pytest.raises(StructuralInvariantViolation):
            Linear([])

    def test_ring_size(self):
        """Rings have at least two atoms."""
        with pytest.raises(StructuralInvariantViolation):
            Ring(atoms="C", size=1)

    def test_ring_negative_offset(self):
        """Offsets are non-negative."""
        with pytest.raises(StructuralInvariantViolation):
            Ring(atoms="C", size=6, offset=-1)

    def test_ring_bond_count(self):
        """Rings need one bond per atom."""
        with pytest.raises(StructuralInvariantViolation):
            Ring(atoms="C", size=6, bonds=["="] * 5)

    def test_position_out_of_range(self):
        """Position keys must fall on the node."""
        with pytest.raises(StructuralInvariantViolation):
            Ring(atoms="c", size=6, substitutions={6: "n"})
        with pytest.raises(StructuralInvariantViolation):
            Linear(["C"], attachments={-1: [Linear(["O"])]})

    def test_string_position_keys(self):
        """Record-style string keys are read as ASCII integers only."""
        assert Ring(atoms="c", size=6, substitutions={"3": "n"}).substitutions == {3: Atom("n")}
        with pytest.raises(StructuralInvariantViolation):
            Ring(atoms="c", size=6, substitutions={"²": "n"})

    def test_fused_needs_two_rings(self):
        """A fused system has at least two members."""
        with pytest.raises(StructuralInvariantViolation):
            FusedRing([Ring(atoms="c", size=6)])

    def test_fused_connected(self):
        """Members must cover one connected run."""
        with pytest.raises(StructuralInvariantViolation):
            FusedRing([Ring(atoms="C", size=3), Ring(atoms="C", size=3, ring_number=2, offset=3)])

    def test_fused_number_open_twice(self):
        """A number cannot be reused while its ring is open."""
        with pytest.raises(StructuralInvariantViolation):
            FusedRing([Ring(atoms="C", size=6), Ring(atoms="C", size=6, offset=2)])

    def test_fused_member_leading_bond(self):
        """Members cannot carry a leading bond."""
        with pytest.raises(StructuralInvariantViolation):
            FusedRing([Ring(atoms="C", size=6), Ring(atoms="C", size=6, ring_number=2, leading_bond="=")])

    def test_molecule_needs_components(self):
        """Molecules cannot be empty."""
        with pytest.raises(StructuralInvariantViolation):
            Molecule([])

    def test_frozen(self):
        """Nodes are immutable."""
        ring = Ring(atoms="c", size=6)
        with pytest.raises(AttributeError):
            ring.size = 5
        with pytest.raises(TypeError):
            ring.substitutions[0] = Atom("n")

    def test_hashable(self):
        """Equal nodes hash equal and work as set members."""
        picoline = attach(Ring(atoms="c", size=6, substitutions={3: "n"}), Linear(["C"]), 0)
        same = Ring(atoms="c", size=6, substitutions={3: "n"}, attachments={0: [Linear(["C"])]})
        assert hash(picoline) == hash(same)
        assert hash(Ring(atoms="c", size=6)) == hash(Ring(atoms="c", size=6))
        fused = FusedRing([Ring(atoms="c", size=10), Ring(atoms="c", size=6, ring_number=2, offset=3)])
        nodes = {picoline, same, fused, Molecule([Linear(["C"]), fused])}
        assert len(nodes) == 3
        assert {same: "picoline"}[picoline] == "picoline"

    def test_coercion(self):
        """Plain values are coerced to atoms and bonds."""
        node = Linear(["C", "O"], bonds=["="], leading_bond="-")
        assert node.atoms == (Atom("C"), Atom("O"))
        assert node.bonds == (Bond.DOUBLE,)
        assert node.leading_bond is Bond.SINGLE

    def test_attachments_sorted(self):
        """Attachment mappings iterate by position."""
        node = Linear(["C", "C", "C"], attachments={2: [Linear(["N"])], 0: [Linear(["O"])]})
        assert list(node.attachments) == [0, 2]
