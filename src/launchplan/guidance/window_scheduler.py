"""
===============================================================================
LAUNCHPLAN - Launch Window Scheduler
===============================================================================
Projects recurring transfer opportunities from a body's reference epoch.

Windows repeat every synodic period:

    launch(k)  = epoch + k * period
    arrival(k) = epoch + k * period + transit

Dates have day granularity. Fractional day offsets are truncated to the
calendar day they fall on, so a 29.5 day cadence alternates 29 and 30 day
gaps while the long-run average stays exact.

The first window is the earliest k >= 0 whose launch date is on or after the
start date. A start date on or before the epoch yields the epoch itself.
===============================================================================
"""

import datetime as dt
import logging
from typing import List, Optional

import numpy as np

from launchplan.core.constants import DEFAULT_WINDOW_COUNT
from launchplan.core.data_structures import (
    DateLike, InvalidDateError, LaunchWindow, parse_date,
)

logger = logging.getLogger(__name__)


class WindowScheduler:
    """
    Enumerates launch / arrival date pairs for a target body.

    Stateless: every call recomputes the sequence from its inputs, so the
    same arguments always give the same windows.
    """

    @staticmethod
    def first_window_index(elapsed_days: int, period_days: float) -> int:
        """
        Index of the earliest synodic cycle launching on or after the start.

        Args:
            elapsed_days: Whole days from the epoch to the start date
            period_days:  Synodic period (days), > 0

        Returns:
            Smallest k >= 0 with k * period >= elapsed_days.
        """
        if elapsed_days <= 0:
            return 0
        k = int(np.ceil(elapsed_days / period_days))
        # ceil of a rounded quotient can land one cycle off
        if k > 0 and (k - 1) * period_days >= elapsed_days:
            k -= 1
        elif k * period_days < elapsed_days:
            k += 1
        return k

    @staticmethod
    def _offset(epoch: dt.date, days: float) -> dt.date:
        return epoch + dt.timedelta(days=int(np.floor(days)))

    def windows(
        self,
        body,
        start_date: DateLike,
        count: int = DEFAULT_WINDOW_COUNT,
        transit_override: Optional[float] = None,
    ) -> List[LaunchWindow]:
        """
        Next ``count`` launch windows at or after ``start_date``.

        Args:
            body:             Target Body record (epoch, synodic period, transit)
            start_date:       Earliest acceptable launch (date or YYYY-MM-DD)
            count:            Number of windows to produce
            transit_override: Transit time (days) replacing the body's
                              typical value, e.g. for gravity-assist routing

        Returns:
            Windows ordered by launch date.

        Raises:
            InvalidDateError: If start_date cannot be parsed, or a window
                              falls past the last representable date.
            ValueError: If count or the transit override is negative.
        """
        start = parse_date(start_date)
        epoch = parse_date(body.epoch)
        period = float(body.synodic_period_days)
        if count < 0:
            raise ValueError(f"Window count must be non-negative, got {count}")
        if not period > 0.0:
            raise ValueError(f"{body.name}: synodic period must be positive")

        transit = body.typical_transit_days if transit_override is None else transit_override
        if transit < 0.0:
            raise ValueError(f"Transit time must be non-negative, got {transit}")

        elapsed = (start - epoch).days
        first = self.first_window_index(elapsed, period)
        logger.debug(
            "%s windows: epoch=%s start=%s elapsed=%d d, first cycle=%d, transit=%.1f d",
            body.name, epoch, start, elapsed, first, transit,
        )

        result = []
        for i in range(count):
            launch_offset = (first + i) * period
            try:
                result.append(LaunchWindow(
                    launch_date=self._offset(epoch, launch_offset),
                    arrival_date=self._offset(epoch, launch_offset + transit),
                ))
            except OverflowError:
                raise InvalidDateError(
                    f"{body.name}: launch window {i + 1} ({launch_offset:.0f} days "
                    f"after epoch {epoch.isoformat()}) falls outside the supported "
                    f"calendar range"
                ) from None
        return result


_SCHEDULER = WindowScheduler()


def windows(
    body,
    start_date: DateLike,
    count: int = DEFAULT_WINDOW_COUNT,
    transit_override: Optional[float] = None,
) -> List[LaunchWindow]:
    """Module-level shortcut for ``WindowScheduler().windows``."""
    return _SCHEDULER.windows(body, start_date, count, transit_override)
