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

"""Core Raw GNSS Processing Module.

This module provides the foundation shared by the rest of pyrawobs:

- **Constants**: speed of light, time scale periods and offsets, the
  pseudorange plausibility gate, Android ADR state bits and log layouts
- **Data Structures**: raw measurement and clock inputs, per-satellite
  observation outputs and the carrier phase differencing state
- **Time Systems**: GPS time alignment of BeiDou and GLONASS transmit times,
  rollover window folding and single-rollover wrap correction
- **Configuration**: ``ProcessingConfig`` with the processing tunables

Example Usage:
    >>> from pyrawobs.core import *
    >>>
    >>> clock = ReceiverClockSnapshot(time_ns=1_000_000_000, full_bias_ns=0)
    >>> meas = RawSatelliteMeasurement(Constellation.GPS, 5, 920_000_000)
    >>> window = rollover_window_ns(meas.constellation)
"""

from .config import *
from .constants import *
from .data_structures import *
from .exceptions import *
from .time import *
