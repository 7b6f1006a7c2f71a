"""Order arrivals driven by a fractional accumulator.

Arrivals are not a Poisson process. Every tick adds ``rate / 3600 * delta``
to a persistent accumulator and each whole unit crossed becomes one order
attempt, so the long-run attempt rate matches the configured rate exactly
while individual ticks stay deterministic.

An attempt samples a delivery target around the depot. Targets beyond the
operating range are dropped without a retry; the shortfall shows up only as
the gap between ``attempted`` and ``created``.
"""

from __future__ import annotations

from collections.abc import Callable
from math import floor

import numpy as np

from dronefleet.config import FleetConfig
from dronefleet.geo import GeoPoint, sample_uniform_in_disk
from dronefleet.unit import Kilometer, Length

from .order import Order

Sampler = Callable[[GeoPoint, Length, Length, np.random.Generator], tuple[GeoPoint, Kilometer]]
"""Signature of a target sampler, see :func:`sample_uniform_in_disk`."""


class OrderGenerator:
    """Creates orders at a configured hourly rate.

    Attributes:
        config (FleetConfig): Depot, average radius and range used for new
            attempts. Replacing it affects the next call to :meth:`advance`.
        attempted (int): Attempts made so far, accepted or not.
        created (int): Orders actually created.

    Example:
        >>> gen = OrderGenerator(FleetConfig(), np.random.default_rng(0))
        >>> len(gen.advance(3600.0, 60.0, now=0.0)) <= 60
        True
        >>> gen.attempted
        60
    """

    def __init__(
        self,
        config: FleetConfig,
        rng: np.random.Generator,
        sampler: Sampler = sample_uniform_in_disk,
    ):
        self.config = config
        self._rng = rng
        self._sampler = sampler
        self.reset()

    def reset(self, rng: np.random.Generator | None = None):
        """Zero the accumulator and counters; ids restart at 1."""
        if rng is not None:
            self._rng = rng
        self._accumulator = 0.0
        self._next_id = 1
        self.attempted = 0
        self.created = 0

    @property
    def accumulator(self) -> float:
        """Fractional attempt carried over to the next tick, in [0, 1)."""
        return self._accumulator

    def advance(self, delta_seconds: float, rate_per_hour: float, now: float) -> list[Order]:
        """Accumulate ``delta_seconds`` of demand and emit the orders it yields.

        Args:
            delta_seconds: Simulated time covered by this call.
            rate_per_hour: Target arrival rate.
            now: Creation timestamp given to every new order.

        Returns:
            list[Order]: New orders in id order, possibly empty.

        Raises:
            ValueError: If ``delta_seconds`` is negative.
        """
        if delta_seconds < 0:
            msg = f"delta must be non-negative, got {delta_seconds}"
            raise ValueError(msg)
        if delta_seconds == 0 or rate_per_hour <= 0:
            return []

        self._accumulator += rate_per_hour / 3600.0 * delta_seconds
        attempts = floor(self._accumulator)
        self._accumulator -= attempts

        orders = []
        for _ in range(attempts):
            order = self._attempt(now)
            if order is not None:
                orders.append(order)
        return orders

    def _attempt(self, now: float) -> Order | None:
        config = self.config
        self.attempted += 1
        location, distance = self._sampler(
            config.depot,
            Kilometer(config.average_radius_km),
            Kilometer(config.max_range_km),
            self._rng,
        )
        distance_km = distance.to(Kilometer)
        if distance_km > config.max_range_km:
            return None

        order = Order(self._next_id, location, now, distance_km)
        self._next_id += 1
        self.created += 1
        return order
