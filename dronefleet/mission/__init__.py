"""Orders and how they arrive.

Exports:
    Order: A delivery request with a validated, write-once timeline
    OrderState: CREATED -> ASSIGNED -> COMPLETED
    CompletedOrderRecord: Immutable export row for a completed order
    OrderGenerator: Fractional-accumulator arrival process
"""

from .generator import OrderGenerator, Sampler
from .order import CompletedOrderRecord, Order, OrderState

__all__ = ["Order", "OrderState", "CompletedOrderRecord", "OrderGenerator", "Sampler"]
