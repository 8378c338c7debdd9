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

"""GNSS time scale alignment and rollover handling.

Receiver and satellite timestamps live on different time scales and are only
meaningful modulo the period of the constellation's native epoch (one week for
GPS/Galileo/BeiDou/QZSS/SBAS/IRNSS, one day for GLONASS). The helpers here move
both onto the GPS time scale, fold them into the same window and undo a single
rollover of the difference.

Values are kept as Python ints wherever the inputs are ints; the large
full-bias term is folded before any float part is added so that sub-ns
resolution survives.
"""

from typing import Optional, Union

from .constants import (
    DAY_NS,
    GPS_BDS_OFFSET_NS,
    GPS_UTC_OFFSET,
    NS_PER_S,
    WEEK_NS,
)
from .data_structures import Constellation, ReceiverClockSnapshot

Number = Union[int, float]


def gps_alignment_offset_ns(constellation: Constellation,
                            leap_second: Optional[int] = None,
                            default_leap_seconds: int = GPS_UTC_OFFSET) -> int:
    """
    Offset to add to a constellation's transmit time to reach GPS time

    Parameters:
    -----------
    constellation : Constellation
        Satellite constellation
    leap_second : int, optional
        Leap seconds reported by the receiver clock
    default_leap_seconds : int
        Leap seconds used for GLONASS when the clock reports none

    Returns:
    --------
    int
        Offset in ns: +14 s for BeiDou (GPST = BDT + 14 s), + leap seconds for
        GLONASS (GPST = UTC(SU) + leap), zero for all other systems
    """
    if constellation == Constellation.BEIDOU:
        return GPS_BDS_OFFSET_NS
    if constellation == Constellation.GLONASS:
        leap = leap_second if leap_second is not None else default_leap_seconds
        return int(leap) * NS_PER_S
    return 0


def rollover_window_ns(constellation: Constellation) -> int:
    """Folding window: one day for GLONASS, one week for everything else"""
    if constellation == Constellation.GLONASS:
        return DAY_NS
    return WEEK_NS


def fold_time(t_ns: Number, window_ns: int) -> Number:
    """
    Fold a timestamp into [0, window)

    Python's modulo already takes the sign of the divisor, the explicit
    correction covers float results that land on the upper bound.
    """
    folded = t_ns % window_ns
    if folded < 0:
        folded += window_ns
    if folded >= window_ns:
        folded -= window_ns
    return folded


def fold_split(whole_ns: Number, fraction_ns: Number, window_ns: int) -> Number:
    """Fold ``whole_ns + fraction_ns`` keeping the large integer part exact"""
    return fold_time(fold_time(whole_ns, window_ns) + fraction_ns, window_ns)


def wrap_time_difference(dt_ns: Number, window_ns: int) -> Number:
    """
    Undo a single rollover of a folded time difference

    Parameters:
    -----------
    dt_ns : int or float
        Difference of two folded timestamps, in (-window, window)
    window_ns : int
        Folding window

    Returns:
    --------
    int or float
        Difference mapped into [-window/2, window/2]
    """
    half = 0.5 * window_ns
    if dt_ns > half:
        dt_ns -= window_ns
    if dt_ns < -half:
        dt_ns += window_ns
    return dt_ns


def receiver_gps_time_ns(clock: ReceiverClockSnapshot) -> Number:
    """
    Receiver time on the GPS time scale

    t_rx(GPS) = TimeNanos - (FullBiasNanos + BiasNanos), absent terms are zero.
    """
    full_bias = clock.full_bias_ns if clock.full_bias_ns is not None else 0
    bias = clock.bias_ns if clock.bias_ns is not None else 0.0
    return (clock.time_ns - full_bias) - bias


def folded_receiver_time_ns(clock: ReceiverClockSnapshot, window_ns: int) -> Number:
    """Receiver GPS time folded into the rollover window"""
    full_bias = clock.full_bias_ns if clock.full_bias_ns is not None else 0
    bias = clock.bias_ns if clock.bias_ns is not None else 0.0
    return fold_split(clock.time_ns - full_bias, -bias, window_ns)


def folded_transmit_time_ns(received_sv_time_ns: Number,
                            time_offset_ns: Number,
                            alignment_ns: int,
                            window_ns: int) -> Number:
    """Transmit time aligned to GPS time and folded into the rollover window"""
    return fold_split(received_sv_time_ns + alignment_ns, time_offset_ns, window_ns)
