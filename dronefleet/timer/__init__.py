"""Countdown timers for wall-time cadences."""

from .timer import Timer

__all__ = ["Timer"]
