"""
Tests for the pending-completion heap.
"""

import unittest

from dronefleet.geo import GeoPoint
from dronefleet.mission import Order, OrderState
from dronefleet.simulator import CompletionTracker

TARGET = GeoPoint.from_deg(37.58, 126.99)


def assigned_order(id, completed_at):
    order = Order(id, TARGET, 0.0, 1.0)
    order.assign(0, 0.0, completed_at)
    return order


class TestCompletionTracker(unittest.TestCase):
    """Test CompletionTracker class."""

    def setUp(self):
        self.tracker = CompletionTracker()

    def test_empty(self):
        """An empty tracker peeks None and drains nothing."""
        self.assertIsNone(self.tracker.peek())
        self.assertEqual(list(self.tracker.drain(1e9)), [])
        with self.assertRaises(IndexError):
            self.tracker.pop()

    def test_drain_in_completion_order(self):
        """Due orders leave in ascending completion time; later ones stay."""
        for id, t in ((1, 300.0), (2, 100.0), (3, 200.0), (4, 900.0)):
            self.tracker.push(assigned_order(id, t), t)
        drained = list(self.tracker.drain(300.0))
        self.assertEqual([o.id for o in drained], [2, 3, 1])
        self.assertTrue(all(o.current_state is OrderState.COMPLETED for o in drained))
        self.assertEqual(len(self.tracker), 1)
        self.assertEqual(self.tracker.peek()[0], 900.0)

    def test_ties_keep_insertion_order(self):
        """Equal completion times drain in push order."""
        for id in (5, 3, 9):
            self.tracker.push(assigned_order(id, 50.0), 50.0)
        self.assertEqual([o.id for o in self.tracker.drain(50.0)], [5, 3, 9])

    def test_each_order_drained_once(self):
        """A drained order is never yielded again."""
        self.tracker.push(assigned_order(1, 10.0), 10.0)
        self.assertEqual(len(list(self.tracker.drain(10.0))), 1)
        self.assertEqual(list(self.tracker.drain(20.0)), [])

    def test_pop_and_clear(self):
        """Pop returns the minimum; clear empties the heap."""
        self.tracker.push(assigned_order(1, 30.0), 30.0)
        self.tracker.push(assigned_order(2, 20.0), 20.0)
        completed_at, order = self.tracker.pop()
        self.assertEqual((completed_at, order.id), (20.0, 2))
        self.tracker.clear()
        self.assertEqual(len(self.tracker), 0)


if __name__ == "__main__":
    unittest.main()
