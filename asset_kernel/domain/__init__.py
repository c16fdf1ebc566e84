"""
Pure domain layer.

Contains the injectable clock used by services.  Nothing here touches
the database or performs I/O (except ``SystemClock``).
"""

from asset_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
