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

"""
Inertial and barometric sensor samples.

These streams run beside the GNSS path and do not touch the pseudorange or
TDCP state. They are simple pass-through conversions:

Classes:
    SensorData: Base data container for sensor measurements
    IMUData: Combined accelerometer and gyroscope sample
    ImuSampleAndHold: Pairs independent accelerometer and gyroscope callbacks
    BarometerData: Pressure sample with hPa to Pa conversion

Examples:
    >>> from pyrawobs.sensors import ImuSampleAndHold
    >>> hold = ImuSampleAndHold()
    >>> hold.update_accel(0.0, 0.0, 9.8, 1000)    # None, no gyro yet
    >>> imu = hold.update_gyro(0.0, 0.0, 0.01, 2000)
"""

from .barometer import *
from .imu import *
from .sensor_base import *
