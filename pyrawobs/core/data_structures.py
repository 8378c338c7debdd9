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

"""Core data structures for raw GNSS measurement processing"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Union

from .constants import ADR_STATE_VALID


class SensorType(Enum):
    """Enumeration of device sensor streams.

    Attributes
    ----------
    GNSS : int
        Raw GNSS measurements
    ACCELEROMETER : int
        Accelerometer including gravity
    LINEAR_ACCELERATION : int
        Accelerometer with gravity removed
    GYROSCOPE : int
        Angular rate sensor
    BAROMETER : int
        Atmospheric pressure sensor
    IMU : int
        Combined accelerometer and gyroscope sample
    """
    GNSS = 1
    ACCELEROMETER = 2
    LINEAR_ACCELERATION = 3
    GYROSCOPE = 4
    BAROMETER = 5
    IMU = 6


class Constellation(IntEnum):
    """Satellite constellation identifiers.

    Values follow the Android ``GnssStatus.CONSTELLATION_*`` numbering so raw
    records can be mapped without translation.
    """
    UNKNOWN = 0
    GPS = 1
    SBAS = 2
    GLONASS = 3
    QZSS = 4
    BEIDOU = 5
    GALILEO = 6
    IRNSS = 7

    @property
    def letter(self) -> str:
        """RINEX system character (G, S, R, J, C, E, I, or X if unknown)"""
        return _CONSTELLATION_LETTERS[self]

    @classmethod
    def from_value(cls, value: Union[int, "Constellation"]) -> "Constellation":
        """Map an integer code to a member, falling back to UNKNOWN"""
        try:
            return cls(int(value))
        except ValueError:
            return cls.UNKNOWN


_CONSTELLATION_LETTERS = {
    Constellation.UNKNOWN: 'X',
    Constellation.GPS: 'G',
    Constellation.SBAS: 'S',
    Constellation.GLONASS: 'R',
    Constellation.QZSS: 'J',
    Constellation.BEIDOU: 'C',
    Constellation.GALILEO: 'E',
    Constellation.IRNSS: 'I',
}


@dataclass
class RawSatelliteMeasurement:
    """Raw measurement of a single satellite at one epoch.

    Attributes
    ----------
    constellation : Constellation
        Satellite constellation
    svid : int
        Satellite identifier, scoped per constellation
    received_sv_time_ns : int
        Transmit time of the tracked code epoch in the constellation's own
        time scale (ns)
    time_offset_ns : float
        Offset between the measurement time and the clock snapshot (ns)
    accumulated_delta_range_m : float
        Accumulated carrier phase range (m), continuous while locked
    adr_state : int
        Android ADR state bit field; ``ADR_STATE_VALID`` marks phase lock

    Notes
    -----
    Built fresh by the measurement source for every epoch and not retained
    after the epoch has been processed.
    """
    constellation: Constellation
    svid: int
    received_sv_time_ns: int
    time_offset_ns: float = 0.0
    accumulated_delta_range_m: float = 0.0
    adr_state: int = 0

    def __post_init__(self):
        self.constellation = Constellation.from_value(self.constellation)

    @property
    def phase_lock_valid(self) -> bool:
        """True if the ADR state reports a valid carrier phase lock"""
        return bool(self.adr_state & ADR_STATE_VALID)


@dataclass(frozen=True)
class ReceiverClockSnapshot:
    """Receiver clock state shared by all measurements of one epoch.

    Attributes
    ----------
    time_ns : int
        Hardware clock time (ns)
    full_bias_ns : int, optional
        Difference between hardware clock and true GPS time (ns)
    bias_ns : float, optional
        Sub-nanosecond part of the clock bias (ns)
    leap_second : int, optional
        Leap seconds reported by the receiver
    """
    time_ns: int
    full_bias_ns: Optional[int] = None
    bias_ns: Optional[float] = None
    leap_second: Optional[int] = None


@dataclass(frozen=True)
class SatelliteObservation:
    """Pseudorange and TDCP output for one satellite at one epoch.

    Attributes
    ----------
    constellation : Constellation
        Satellite constellation
    svid : int
        Satellite identifier
    pseudorange_m : float
        Time-scale corrected pseudorange (m)
    tdcp_delta_m : float, optional
        Accumulated delta range change since the previous valid epoch (m)
    tdcp_rate_mps : float, optional
        ``tdcp_delta_m`` divided by the elapsed receiver time (m/s)
    epoch_time_ns : int
        Receiver hardware time of the epoch (ns)
    """
    constellation: Constellation
    svid: int
    pseudorange_m: float
    tdcp_delta_m: Optional[float] = None
    tdcp_rate_mps: Optional[float] = None
    epoch_time_ns: int = 0

    @property
    def has_tdcp(self) -> bool:
        return self.tdcp_delta_m is not None


@dataclass
class TDCPState:
    """Last valid carrier phase sample of one satellite"""
    phase_m: float  # accumulated delta range (m)
    time_ns: int    # receiver hardware time (ns)


@dataclass
class EpochResult:
    """Everything produced for a single epoch.

    Attributes
    ----------
    epoch_time_ns : int
        Receiver hardware time of the epoch (ns)
    observations : list[SatelliteObservation]
        Accepted observations, in input order
    summary : str
        Multi-line human readable summary
    num_rejected : int
        Satellites dropped by the plausibility gate
    """
    epoch_time_ns: int
    observations: list = field(default_factory=list)
    summary: str = ""
    num_rejected: int = 0

    def __len__(self):
        return len(self.observations)
