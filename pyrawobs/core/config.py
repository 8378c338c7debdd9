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

"""Processing configuration"""

import logging
from dataclasses import dataclass, fields

from .constants import GPS_UTC_OFFSET, MAX_PSEUDORANGE, MIN_PSEUDORANGE

__all__ = ['ProcessingConfig']

logger = logging.getLogger(__name__)


@dataclass
class ProcessingConfig:
    """Tunables for pseudorange extraction and carrier phase differencing.

    Attributes
    ----------
    min_range_m : float
        Lower bound of the plausibility gate, inclusive (m)
    max_range_m : float
        Upper bound of the plausibility gate, inclusive (m)
    default_leap_seconds : int
        GLONASS leap seconds used when the clock does not report any
    key_by_constellation : bool
        Key the differencing table by (constellation, svid) instead of svid
        alone. Android svids overlap across constellations (GPS 5 and
        Galileo 5), so svid-only keying differences unrelated satellites.
    summary_max_lines : int
        Maximum number of satellite lines in the epoch summary, 0 for no limit
    """
    min_range_m: float = MIN_PSEUDORANGE
    max_range_m: float = MAX_PSEUDORANGE
    default_leap_seconds: int = GPS_UTC_OFFSET
    key_by_constellation: bool = True
    summary_max_lines: int = 0

    def __post_init__(self):
        if self.min_range_m > self.max_range_m:
            raise ValueError(
                f"min_range_m ({self.min_range_m}) exceeds max_range_m ({self.max_range_m})")

    @classmethod
    def from_dict(cls, config: dict) -> "ProcessingConfig":
        """Build from a dictionary, ignoring unknown keys

        Example config:
        {
            'min_range_m': 1.0e6,
            'max_range_m': 7.0e7,
            'default_leap_seconds': 18,
            'key_by_constellation': True
        }
        """
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            logger.warning(f"Ignoring unknown processing options: {sorted(unknown)}")
        return cls(**{k: v for k, v in config.items() if k in known})
