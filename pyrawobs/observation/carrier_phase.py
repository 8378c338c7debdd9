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

"""Time-differenced carrier phase (TDCP) from accumulated delta range"""

import logging
from typing import Dict, Hashable, Optional, Tuple

from ..core.constants import S_PER_NS
from ..core.data_structures import Constellation, TDCPState

logger = logging.getLogger(__name__)

TDCPResult = Tuple[Optional[float], Optional[float]]


class CarrierPhaseDifferencer:
    """
    Difference accumulated delta range between consecutive epochs per satellite

    Keeps the last valid ADR sample of every tracked satellite. A satellite's
    entry exists only while its most recent sample reported a valid phase
    lock; any loss of lock forgets it so that the next valid sample starts a
    new baseline instead of differencing across a cycle slip.
    """

    def __init__(self, key_by_constellation: bool = True):
        """
        Initialize differencer

        Parameters:
        -----------
        key_by_constellation : bool
            Key the state table by (constellation, svid). When False, svid
            alone is used and satellites of different constellations sharing
            an svid overwrite each other.
        """
        self.key_by_constellation = key_by_constellation
        self._states: Dict[Hashable, TDCPState] = {}

    def _key(self, svid: int, constellation: Constellation) -> Hashable:
        if self.key_by_constellation:
            return (Constellation.from_value(constellation), svid)
        return svid

    def observe(self,
                svid: int,
                constellation: Constellation,
                phase_lock_valid: bool,
                accumulated_phase_m: float,
                receiver_time_ns: int) -> TDCPResult:
        """
        Feed one ADR sample and get the phase change since the last one

        Parameters:
        -----------
        svid : int
            Satellite identifier
        constellation : Constellation
            Satellite constellation
        phase_lock_valid : bool
            ADR validity flag for this sample
        accumulated_phase_m : float
            Accumulated delta range (m)
        receiver_time_ns : int
            Receiver hardware clock time (ns)

        Returns:
        --------
        delta_m : float or None
            ADR change since the stored baseline (m)
        rate_mps : float or None
            delta_m divided by the elapsed receiver time (m/s)
        """
        key = self._key(svid, constellation)

        if not phase_lock_valid:
            if self._states.pop(key, None) is not None:
                logger.debug(f"Phase lock lost for {key}, history cleared")
            return None, None

        prior = self._states.get(key)
        if prior is None:
            self._states[key] = TDCPState(accumulated_phase_m, receiver_time_ns)
            return None, None

        dt_ns = receiver_time_ns - prior.time_ns
        if dt_ns <= 0:
            # Stale or duplicate sample, the baseline stays as it was
            logger.debug(f"Non-advancing ADR time for {key} (dt={dt_ns} ns), skipped")
            return None, None

        delta_m = accumulated_phase_m - prior.phase_m
        rate_mps = delta_m / (dt_ns * S_PER_NS)
        self._states[key] = TDCPState(accumulated_phase_m, receiver_time_ns)
        return delta_m, rate_mps

    def get_state(self, svid: int,
                  constellation: Constellation = Constellation.UNKNOWN) -> Optional[TDCPState]:
        """Stored baseline for a satellite, or None"""
        return self._states.get(self._key(svid, constellation))

    def reset(self):
        """Forget all satellites (tracking restart)"""
        if self._states:
            logger.info(f"Clearing TDCP history for {len(self._states)} satellites")
        self._states.clear()

    def __len__(self):
        return len(self._states)

    def __contains__(self, key):
        return key in self._states
