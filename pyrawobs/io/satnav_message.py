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

"""ASPN style message encoding for IMU, barometer and satnav epochs

Messages are encoded into plain dictionaries; any transport (LCM, a
log file, a queue) is supplied by the caller as a ``publish(channel, msg)``
callable. Field names of the satnav records changed between schema
revisions, each revision has its own explicit field table.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..core.constants import MISSING_VALUE_TEXT
from ..core.data_structures import Constellation, SatelliteObservation
from ..sensors.barometer import BarometerData
from ..sensors.imu import IMUData, ImuSampleAndHold
from ..pipeline import Sink

logger = logging.getLogger(__name__)

CHANNEL_IMU = "ASPN/IMU"
CHANNEL_BAROMETER = "ASPN/BAROMETER"
CHANNEL_SATNAV = "ASPN/SATNAV"

IMU_TYPE_INTEGRATED = 0
IMU_TYPE_SAMPLED = 1

# Field names per satnav schema revision
SCHEMA_V1 = {
    'pseudorange': 'pseudorange_m',
    'tdcp': 'tdcp_m',
    'tdcp_rate': 'tdcp_rate_mps',
    'system': 'system',
}
SCHEMA_V2 = {
    'pseudorange': 'pseudorange',
    'tdcp': 'delta_carrier_phase_m',
    'tdcp_rate': 'delta_carrier_phase_rate_mps',
    'system': 'satellite_system',
}
SCHEMAS = {1: SCHEMA_V1, 2: SCHEMA_V2}
DEFAULT_SCHEMA_VERSION = 2


@dataclass
class SatnavSignal:
    """One tracked signal of a satnav epoch"""
    constellation: Constellation
    svid: int
    pseudorange_m: float
    tdcp_m: Optional[float] = None
    tdcp_rate_mps: Optional[float] = None


@dataclass
class SatnavMessage:
    """All tracked signals of one epoch"""
    time_of_validity_ns: int
    signals: List[SatnavSignal] = field(default_factory=list)

    @property
    def num_signals_tracked(self) -> int:
        return len(self.signals)


class SatnavEpochBuilder:
    """Collect per-satellite values of one epoch into a SatnavMessage"""

    def __init__(self):
        self._signals: List[SatnavSignal] = []

    def add_sv(self, constellation: Constellation, svid: int, pseudorange_m: float,
               tdcp_m: Optional[float] = None,
               tdcp_rate_mps: Optional[float] = None) -> "SatnavEpochBuilder":
        self._signals.append(SatnavSignal(Constellation.from_value(constellation), svid,
                                          pseudorange_m, tdcp_m, tdcp_rate_mps))
        return self

    def add_observation(self, obs: SatelliteObservation) -> "SatnavEpochBuilder":
        return self.add_sv(obs.constellation, obs.svid, obs.pseudorange_m,
                           obs.tdcp_delta_m, obs.tdcp_rate_mps)

    def build(self, time_of_validity_ns: int) -> Optional[SatnavMessage]:
        """Message of the collected signals, or None for an empty epoch"""
        if not self._signals:
            return None
        return SatnavMessage(time_of_validity_ns, list(self._signals))

    def clear(self):
        self._signals.clear()

    def __len__(self):
        return len(self._signals)


def _schema(version: int) -> Dict[str, str]:
    try:
        return SCHEMAS[version]
    except KeyError:
        raise ValueError(f"Unknown satnav schema version: {version}. "
                         f"Must be one of {sorted(SCHEMAS)}") from None


def encode_satnav(message: SatnavMessage,
                  schema_version: int = DEFAULT_SCHEMA_VERSION) -> dict:
    """
    Encode a satnav epoch for the given schema revision

    Parameters:
    -----------
    message : SatnavMessage
        Epoch to encode
    schema_version : int
        Schema revision (1 or 2)

    Returns:
    --------
    dict
        Message with parallel ``obs`` and ``sv_data`` lists. Absent TDCP
        values are left out of the ``obs`` records.
    """
    names = _schema(schema_version)
    obs = []
    sv_data = []
    for sig in message.signals:
        record = {names['pseudorange']: sig.pseudorange_m}
        if sig.tdcp_m is not None:
            record[names['tdcp']] = sig.tdcp_m
        if sig.tdcp_rate_mps is not None:
            record[names['tdcp_rate']] = sig.tdcp_rate_mps
        obs.append(record)
        sv_data.append({'prn': sig.svid, names['system']: int(sig.constellation)})

    return {
        'schema_version': schema_version,
        'time_of_validity': {'elapsed_nsec': message.time_of_validity_ns},
        'num_signals_tracked': message.num_signals_tracked,
        'obs': obs,
        'sv_data': sv_data,
        'num_integrity': 0,
        'integrity': [],
    }


def encode_imu(imu: IMUData) -> dict:
    """Encode a sampled IMU measurement"""
    return {
        'time_of_validity': {'elapsed_nsec': imu.timestamp_ns},
        'imu_type': IMU_TYPE_SAMPLED,
        'meas_accel': [float(v) for v in imu.acceleration],
        'meas_gyro': [float(v) for v in imu.angular_velocity],
        'num_integrity': 0,
        'integrity': [],
    }


def encode_barometer(baro: BarometerData, variance_pa2: float = 0.0) -> dict:
    """Encode a barometer measurement, pressure in Pa"""
    return {
        'time_of_validity': {'elapsed_nsec': baro.timestamp_ns},
        'pressure': baro.pressure_pa,
        'variance': variance_pa2,
    }


def format_satnav_summary(message: SatnavMessage, max_svs: int = 4) -> str:
    """Short text block describing the first few signals of an epoch"""
    lines = [f"[{CHANNEL_SATNAV}] SVs={message.num_signals_tracked}  "
             f"t={message.time_of_validity_ns} ns"]
    for sig in message.signals[:max_svs]:
        tdcp = f"{sig.tdcp_m:.3f}" if sig.tdcp_m is not None else MISSING_VALUE_TEXT
        rate = f"{sig.tdcp_rate_mps:.3f}" if sig.tdcp_rate_mps is not None else MISSING_VALUE_TEXT
        lines.append(f"  C={int(sig.constellation)} SVID={sig.svid}  "
                     f"PR={sig.pseudorange_m:.3f} m  TDCP={tdcp}  RATE={rate}")
    return "\n".join(lines) + "\n"


class MessageBridge(Sink):
    """
    Turn pipeline callbacks into encoded messages

    IMU messages are published once both an accelerometer and a gyroscope
    sample have been seen. Satnav signals are collected per epoch and
    published when the epoch summary arrives.
    """

    def __init__(self,
                 publish: Callable[[str, dict], None],
                 schema_version: int = DEFAULT_SCHEMA_VERSION,
                 barometer_variance_pa2: float = 0.0):
        """
        Initialize bridge

        Parameters:
        -----------
        publish : Callable[[str, dict], None]
            Transport callback taking a channel name and an encoded message
        schema_version : int
            Satnav schema revision
        barometer_variance_pa2 : float
            Variance attached to barometer messages, 0 if unknown
        """
        _schema(schema_version)
        self.publish = publish
        self.schema_version = schema_version
        self.barometer_variance_pa2 = barometer_variance_pa2
        self.imu_hold = ImuSampleAndHold()
        self.builder = SatnavEpochBuilder()
        self.last_summary = ""

    def _send(self, channel: str, message: dict):
        try:
            self.publish(channel, message)
        except OSError as e:
            logger.warning(f"Publish on {channel} failed: {e}")

    def on_accel(self, ax, ay, az, elapsed_ns):
        imu = self.imu_hold.update_accel(ax, ay, az, elapsed_ns)
        if imu is not None:
            self._send(CHANNEL_IMU, encode_imu(imu))

    def on_gyro(self, gx, gy, gz, elapsed_ns):
        imu = self.imu_hold.update_gyro(gx, gy, gz, elapsed_ns)
        if imu is not None:
            self._send(CHANNEL_IMU, encode_imu(imu))

    def on_barometer(self, pressure_hpa, elapsed_ns):
        baro = BarometerData.from_hpa(pressure_hpa, elapsed_ns)
        self._send(CHANNEL_BAROMETER, encode_barometer(baro, self.barometer_variance_pa2))

    def on_gnss_pr_tdcp(self, observation, elapsed_ns):
        self.builder.add_observation(observation)

    def on_gnss_epoch(self, text, elapsed_ns):
        message = self.builder.build(elapsed_ns)
        self.builder.clear()
        if message is None:
            return
        self.last_summary = format_satnav_summary(message)
        self._send(CHANNEL_SATNAV, encode_satnav(message, self.schema_version))
