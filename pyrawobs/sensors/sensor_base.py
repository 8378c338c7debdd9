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

"""Base sensor data container"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..core.data_structures import SensorType


@dataclass
class SensorData:
    """Base sensor data container"""
    timestamp_ns: int  # monotonic elapsed time (ns)
    sensor_type: SensorType
    data: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_valid(self) -> bool:
        """Check if sensor data is valid.

        Returns
        -------
        bool
            True if data exists and contains only finite values, False otherwise
        """
        return self.data is not None and bool(np.all(np.isfinite(self.data)))
