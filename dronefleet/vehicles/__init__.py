"""Fleet members and their published flight legs.

Exports:
    Drone: Depot-based drone with a non-decreasing availability time
    FlightSegment: Immutable outbound or return leg
    SegmentKind: OUTBOUND / RETURN
"""

from .drone import Drone, FlightSegment, SegmentKind

__all__ = ["Drone", "FlightSegment", "SegmentKind"]
