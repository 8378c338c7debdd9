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
PyRawObs - Pseudorange and TDCP from raw smartphone GNSS measurements

Turns raw per-satellite GNSS measurements and the receiver clock of each
epoch into time-scale corrected pseudoranges and time-differenced carrier
phase, with pass-through of accelerometer, gyroscope and barometer samples.
"""

__version__ = "1.0.0"
__author__ = "PyRawObs Development Team"
__title__ = "pyrawobs"
__description__ = "Pseudorange and TDCP extraction from raw smartphone GNSS measurements"

from .core import *
from .observation import *
from .sensors import *
from .pipeline import GnssSensorListener, MultiSink, Sink
