# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Pseudorange from raw receiver clock and satellite transmit times

    t_rx(GPS) = TimeNanos - (FullBiasNanos + BiasNanos)
    t_tx      = ReceivedSvTimeNanos + TimeOffsetNanos  (+14 s BDS, + leap GLO)
    rho       = wrap((t_rx mod M) - (t_tx mod M)) * c

with M one week, or one day for GLONASS.
"""

import logging
from typing import Optional

from ..core.constants import CLIGHT, GPS_UTC_OFFSET, MAX_PSEUDORANGE, MIN_PSEUDORANGE, S_PER_NS
from ..core.data_structures import RawSatelliteMeasurement, ReceiverClockSnapshot
from ..core.time import (
    folded_receiver_time_ns,
    folded_transmit_time_ns,
    gps_alignment_offset_ns,
    rollover_window_ns,
    wrap_time_difference,
)

logger = logging.getLogger(__name__)


def travel_time_ns(clock: ReceiverClockSnapshot,
                   meas: RawSatelliteMeasurement,
                   default_leap_seconds: int = GPS_UTC_OFFSET) -> float:
    """
    Signal travel time with time scale alignment and rollover correction

    Parameters:
    -----------
    clock : ReceiverClockSnapshot
        Receiver clock of the epoch
    meas : RawSatelliteMeasurement
        Satellite measurement
    default_leap_seconds : int
        GLONASS leap seconds when the clock reports none

    Returns:
    --------
    float
        Receive minus transmit time (ns), within half a rollover window
    """
    window = rollover_window_ns(meas.constellation)
    alignment = gps_alignment_offset_ns(meas.constellation, clock.leap_second,
                                        default_leap_seconds)

    t_rx = folded_receiver_time_ns(clock, window)
    t_tx = folded_transmit_time_ns(meas.received_sv_time_ns, meas.time_offset_ns,
                                   alignment, window)
    return wrap_time_difference(t_rx - t_tx, window)


def compute_raw_pseudorange(clock: ReceiverClockSnapshot,
                            meas: RawSatelliteMeasurement,
                            default_leap_seconds: int = GPS_UTC_OFFSET) -> float:
    """Pseudorange (m) before the plausibility gate"""
    return travel_time_ns(clock, meas, default_leap_seconds) * S_PER_NS * CLIGHT


def is_plausible_range(pseudorange: float,
                       min_range: float = MIN_PSEUDORANGE,
                       max_range: float = MAX_PSEUDORANGE) -> bool:
    """Check a pseudorange against the physical range gate (bounds inclusive)"""
    return min_range <= pseudorange <= max_range


def compute_pseudorange(clock: ReceiverClockSnapshot,
                        meas: RawSatelliteMeasurement,
                        min_range: float = MIN_PSEUDORANGE,
                        max_range: float = MAX_PSEUDORANGE,
                        default_leap_seconds: int = GPS_UTC_OFFSET) -> Optional[float]:
    """
    Compute a gated pseudorange

    Returns:
    --------
    float or None
        Pseudorange in meters, or None if it falls outside the range gate
    """
    pr = compute_raw_pseudorange(clock, meas, default_leap_seconds)
    if not is_plausible_range(pr, min_range, max_range):
        logger.debug(f"Dropped PR {meas.constellation.letter}{meas.svid:02d}: {pr:.1f} m")
        return None
    return pr
