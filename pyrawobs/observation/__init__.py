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

"""Pseudorange and carrier phase observation processing"""

from .carrier_phase import CarrierPhaseDifferencer
from .epoch import (
    EpochObservationExtractor,
    format_epoch_summary,
    format_observation_line,
    format_tdcp,
)
from .pseudorange import (
    compute_pseudorange,
    compute_raw_pseudorange,
    is_plausible_range,
    travel_time_ns,
)

__all__ = [
    'CarrierPhaseDifferencer', 'EpochObservationExtractor',
    'format_epoch_summary', 'format_observation_line', 'format_tdcp',
    'compute_pseudorange', 'compute_raw_pseudorange', 'is_plausible_range',
    'travel_time_ns',
]
