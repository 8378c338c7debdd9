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

"""IMU sample containers and accelerometer/gyroscope pairing"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .sensor_base import SensorData, SensorType


@dataclass
class IMUData(SensorData):
    """
    Combined accelerometer and gyroscope sample.

    Attributes:
        sensor_type (SensorType): Always set to SensorType.IMU
        data (np.ndarray): 6D array [acc_x, acc_y, acc_z, gyro_x, gyro_y, gyro_z]

    Notes:
        Axes are passed through from the device frame unchanged; acceleration
        in m/s², angular velocity in rad/s.

    Examples:
        >>> imu_data = IMUData(
        ...     timestamp_ns=1_000_000,
        ...     data=np.array([0.1, 0.2, 9.8, 0.01, 0.02, 0.03])
        ... )
        >>> print(imu_data.acceleration)
        [0.1 0.2 9.8]
    """
    sensor_type: SensorType = field(default=SensorType.IMU, init=False)

    def __post_init__(self):
        """
        Validate IMU data format after initialization.

        Raises:
            ValueError: If data array is not exactly 6 elements
        """
        self.sensor_type = SensorType.IMU
        self.data = np.asarray(self.data, dtype=float)
        if self.data.shape != (6,):
            raise ValueError("IMU data must be 6D [acc_x, acc_y, acc_z, gyro_x, gyro_y, gyro_z]")

    @property
    def acceleration(self) -> np.ndarray:
        """3D acceleration vector [ax, ay, az] in m/s²"""
        return self.data[:3]

    @property
    def angular_velocity(self) -> np.ndarray:
        """3D angular velocity vector [wx, wy, wz] in rad/s"""
        return self.data[3:6]


class ImuSampleAndHold:
    """
    Pair asynchronous accelerometer and gyroscope samples

    Accelerometer and gyroscope callbacks arrive independently. The latest
    sample of each is held; once both have been seen every new sample
    produces a combined IMUData stamped with the time of that sample.
    """

    def __init__(self):
        self._accel: Optional[np.ndarray] = None
        self._gyro: Optional[np.ndarray] = None

    def update_accel(self, ax: float, ay: float, az: float,
                     timestamp_ns: int) -> Optional[IMUData]:
        """Hold a new accelerometer sample (m/s²)"""
        self._accel = np.array([ax, ay, az], dtype=float)
        return self._combine(timestamp_ns)

    def update_gyro(self, gx: float, gy: float, gz: float,
                    timestamp_ns: int) -> Optional[IMUData]:
        """Hold a new gyroscope sample (rad/s)"""
        self._gyro = np.array([gx, gy, gz], dtype=float)
        return self._combine(timestamp_ns)

    def _combine(self, timestamp_ns: int) -> Optional[IMUData]:
        if self._accel is None or self._gyro is None:
            return None
        return IMUData(timestamp_ns=timestamp_ns,
                       data=np.concatenate([self._accel, self._gyro]))

    def reset(self):
        self._accel = None
        self._gyro = None
