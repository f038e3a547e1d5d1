"""Tests for the Alea PRNG and seed helpers."""

from py_hexmap.core.alea_prng import AleaPRNG
from py_hexmap.utils.random import MAX_SEED, create_prng, derive_seed


class TestAleaPRNG:
    """Test draw helpers."""

    def test_same_seed_same_sequence(self):
        """Test equal seeds give equal sequences."""
        a = AleaPRNG(1234)
        b = AleaPRNG(1234)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_different_seeds_differ(self):
        """Test different seeds give different sequences."""
        a = AleaPRNG("north")
        b = AleaPRNG("south")
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_value_range(self):
        """Test value() stays in [0, 1)."""
        prng = AleaPRNG("values")
        for _ in range(1000):
            assert 0.0 <= prng.value() < 1.0

    def test_range_is_exclusive(self):
        """Test range() never returns its upper bound."""
        prng = AleaPRNG("range")
        draws = {prng.range(3, 7) for _ in range(500)}
        assert draws == {3, 4, 5, 6}

    def test_empty_range_does_not_draw(self):
        """Test an empty range returns its lower bound without drawing."""
        prng = AleaPRNG("range")
        assert prng.range(4, 4) == 4
        assert prng.call_count == 0

    def test_chance_matches_value_draw(self):
        """Test chance(p) is the same draw as value() < p."""
        a = AleaPRNG("chance")
        b = AleaPRNG("chance")
        for p in (0.0, 0.25, 0.5, 0.75, 1.0):
            assert a.chance(p) == (b.value() < p)

    def test_chance_extremes_still_draw(self):
        """Test certain and impossible chances still advance the stream."""
        prng = AleaPRNG("extremes")
        assert not prng.chance(0.0)
        assert prng.chance(1.0)
        assert prng.call_count == 2

    def test_call_count(self):
        """Test every helper counts its draws."""
        prng = AleaPRNG("count")
        prng.value()
        prng.range(0, 10)
        prng.chance(0.5)
        assert prng.call_count == 3


class TestSeeds:
    """Test seed derivation."""

    def test_derived_seed_in_range(self):
        """Test derived seeds fit in 31 bits."""
        for _ in range(20):
            assert 0 <= derive_seed() <= MAX_SEED

    def test_create_prng_is_seeded(self):
        """Test create_prng seeds a fresh generator."""
        assert create_prng(77).value() == AleaPRNG(77).value()
