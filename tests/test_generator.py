"""
Tests for the fractional-accumulator order generator.
"""

import unittest

import numpy as np

from dronefleet.config import FleetConfig
from dronefleet.mission import OrderGenerator, OrderState
from dronefleet.unit import Kilometer


def fixed_sampler(distance_km):
    """Sampler that always puts the target ``distance_km`` due north."""

    def sample(center, average_radius, max_radius, rng):
        rng.random()
        return center, Kilometer(distance_km)

    return sample


class TestOrderGenerator(unittest.TestCase):
    """Test OrderGenerator class."""

    def setUp(self):
        self.config = FleetConfig()
        self.gen = OrderGenerator(self.config, np.random.default_rng(0))

    def test_zero_rate_is_noop(self):
        """A rate of zero creates nothing and makes no attempts."""
        self.assertEqual(self.gen.advance(3600.0, 0.0, now=0.0), [])
        self.assertEqual(self.gen.attempted, 0)

    def test_zero_delta_is_noop(self):
        """A zero delta creates nothing."""
        self.assertEqual(self.gen.advance(0.0, 60.0, now=0.0), [])
        self.assertEqual(self.gen.accumulator, 0.0)

    def test_negative_delta_rejected(self):
        """Negative deltas raise ValueError."""
        with self.assertRaises(ValueError):
            self.gen.advance(-1.0, 60.0, now=0.0)

    def test_fraction_carries_over(self):
        """Half an arrival is kept until the next tick completes it."""
        self.assertEqual(self.gen.advance(0.5, 3600.0, now=0.0), [])
        self.assertAlmostEqual(self.gen.accumulator, 0.5)
        self.gen.advance(0.5, 3600.0, now=0.5)
        self.assertEqual(self.gen.attempted, 1)

    def test_long_run_attempts_match_rate(self):
        """One-second ticks over an hour attempt exactly the hourly rate."""
        for second in range(3600):
            self.gen.advance(1.0, 900.0, now=float(second))
        self.assertEqual(self.gen.attempted, 900)

    def test_ids_and_timestamps(self):
        """Orders get sequential ids from 1 and the given creation time."""
        gen = OrderGenerator(self.config, np.random.default_rng(0), fixed_sampler(2.0))
        orders = gen.advance(3.0, 3600.0, now=42.0)
        self.assertEqual([o.id for o in orders], [1, 2, 3])
        for order in orders:
            self.assertEqual(order.created_at, 42.0)
            self.assertEqual(order.distance_km, 2.0)
            self.assertEqual(order.current_state, OrderState.CREATED)

    def test_out_of_range_dropped_without_retry(self):
        """Targets beyond the range are dropped and do not consume an id."""
        config = self.config.replace(max_range_km=5.0)
        gen = OrderGenerator(config, np.random.default_rng(0), fixed_sampler(6.0))
        self.assertEqual(gen.advance(10.0, 3600.0, now=0.0), [])
        self.assertEqual(gen.attempted, 10)
        self.assertEqual(gen.created, 0)

        gen.config = config.replace(max_range_km=8.0)
        orders = gen.advance(1.0, 3600.0, now=10.0)
        self.assertEqual([o.id for o in orders], [1])

    def test_small_range_lowers_created_rate(self):
        """With the range well under the average radius most attempts are rejected."""
        config = self.config.replace(average_radius_km=3.0, max_range_km=0.5)
        gen = OrderGenerator(config, np.random.default_rng(11))
        orders = gen.advance(1000.0, 3600.0, now=0.0)
        self.assertEqual(gen.attempted, 1000)
        self.assertEqual(gen.created, len(orders))
        # about (0.5 / 0.75)^2 of the attempts fall inside the range
        self.assertLess(gen.created, 600)
        self.assertGreater(gen.created, 300)
        for order in orders:
            self.assertLessEqual(order.distance_km, 0.5)

    def test_reset(self):
        """Reset zeroes counters, accumulator and ids."""
        self.gen.advance(2.5, 3600.0, now=0.0)
        self.gen.reset()
        self.assertEqual((self.gen.attempted, self.gen.created), (0, 0))
        self.assertEqual(self.gen.accumulator, 0.0)


if __name__ == "__main__":
    unittest.main()
