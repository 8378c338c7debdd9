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

"""Barometer samples"""

from dataclasses import dataclass, field

import numpy as np

from ..core.constants import PA_PER_HPA
from .sensor_base import SensorData, SensorType


@dataclass
class BarometerData(SensorData):
    """Pressure sample as reported by the device, in hPa.

    ``data`` holds a single element [pressure_hPa].
    """
    sensor_type: SensorType = field(default=SensorType.BAROMETER, init=False)

    def __post_init__(self):
        self.sensor_type = SensorType.BAROMETER
        self.data = np.atleast_1d(np.asarray(self.data, dtype=float))
        if self.data.shape != (1,):
            raise ValueError("Barometer data must hold a single pressure value")

    @classmethod
    def from_hpa(cls, pressure_hpa: float, timestamp_ns: int) -> "BarometerData":
        return cls(timestamp_ns=timestamp_ns, data=np.array([pressure_hpa]))

    @property
    def pressure_hpa(self) -> float:
        return float(self.data[0])

    @property
    def pressure_pa(self) -> float:
        """Pressure in pascals"""
        return self.pressure_hpa * PA_PER_HPA
