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

"""Per-epoch extraction of pseudorange and TDCP observations"""

import logging
from typing import List, Optional, Sequence

from ..core.config import ProcessingConfig
from ..core.constants import MISSING_VALUE_TEXT, NO_GNSS_TEXT
from ..core.data_structures import (
    EpochResult,
    RawSatelliteMeasurement,
    ReceiverClockSnapshot,
    SatelliteObservation,
)
from ..core.exceptions import InputContractError
from .carrier_phase import CarrierPhaseDifferencer
from .pseudorange import compute_pseudorange

logger = logging.getLogger(__name__)


def format_tdcp(delta_m: Optional[float], rate_mps: Optional[float]) -> str:
    """TDCP text for the epoch summary"""
    if delta_m is None or rate_mps is None:
        return MISSING_VALUE_TEXT
    return f"Δ={delta_m:.3f} m  rate={rate_mps:.3f} m/s"


def format_observation_line(obs: SatelliteObservation) -> str:
    """One summary line per satellite"""
    return (f"SV {obs.svid} (C={int(obs.constellation)})  PR={obs.pseudorange_m:.3f} m  "
            f"TDCP={format_tdcp(obs.tdcp_delta_m, obs.tdcp_rate_mps)}")


def format_epoch_summary(observations: Sequence[SatelliteObservation],
                         max_lines: int = 0) -> str:
    """
    Multi-line epoch summary

    Parameters:
    -----------
    observations : Sequence[SatelliteObservation]
        Accepted observations of the epoch
    max_lines : int
        Limit on satellite lines, 0 for no limit

    Returns:
    --------
    str
        One line per satellite, or a placeholder when nothing was accepted
    """
    if not observations:
        return NO_GNSS_TEXT
    shown = observations if max_lines <= 0 else observations[:max_lines]
    lines = [format_observation_line(obs) for obs in shown]
    if len(shown) < len(observations):
        lines.append(f"... {len(observations) - len(shown)} more")
    return "\n".join(lines) + "\n"


class EpochObservationExtractor:
    """Turn one epoch of raw measurements into satellite observations"""

    def __init__(self,
                 differencer: Optional[CarrierPhaseDifferencer] = None,
                 config: Optional[ProcessingConfig] = None):
        self.config = config if config is not None else ProcessingConfig()
        if differencer is None:
            differencer = CarrierPhaseDifferencer(self.config.key_by_constellation)
        self.differencer = differencer

    def process_epoch(self,
                      clock: ReceiverClockSnapshot,
                      measurements: Sequence[RawSatelliteMeasurement]) -> List[SatelliteObservation]:
        """
        Compute observations for one epoch

        Parameters:
        -----------
        clock : ReceiverClockSnapshot
            Receiver clock shared by all measurements
        measurements : Sequence[RawSatelliteMeasurement]
            Raw measurements in receiver order

        Returns:
        --------
        List[SatelliteObservation]
            Observations in input order; satellites failing the range gate
            are left out

        Raises:
        -------
        InputContractError
            If the clock, the measurement sequence or one of its entries is None
        """
        return self.process(clock, measurements).observations

    def process(self,
                clock: ReceiverClockSnapshot,
                measurements: Sequence[RawSatelliteMeasurement]) -> EpochResult:
        """Same as ``process_epoch`` but also returns the summary and drop count"""
        if clock is None:
            raise InputContractError("Epoch has no receiver clock snapshot")
        if measurements is None:
            raise InputContractError("Epoch has no measurement list")

        cfg = self.config
        result = EpochResult(epoch_time_ns=clock.time_ns)

        for i, meas in enumerate(measurements):
            if meas is None:
                raise InputContractError(f"Measurement {i} of epoch {clock.time_ns} is None")

            pr = compute_pseudorange(clock, meas,
                                     min_range=cfg.min_range_m,
                                     max_range=cfg.max_range_m,
                                     default_leap_seconds=cfg.default_leap_seconds)
            if pr is None:
                result.num_rejected += 1
                continue

            # Differencing runs on the receiver's own monotonic clock, not GPS time
            delta_m, rate_mps = self.differencer.observe(
                meas.svid, meas.constellation, meas.phase_lock_valid,
                meas.accumulated_delta_range_m, clock.time_ns)

            result.observations.append(SatelliteObservation(
                constellation=meas.constellation,
                svid=meas.svid,
                pseudorange_m=pr,
                tdcp_delta_m=delta_m,
                tdcp_rate_mps=rate_mps,
                epoch_time_ns=clock.time_ns,
            ))

        result.summary = format_epoch_summary(result.observations, cfg.summary_max_lines)
        logger.debug(f"Epoch {clock.time_ns}: {len(result.observations)} observations, "
                     f"{result.num_rejected} rejected")
        return result

    def reset(self):
        """Drop all carrier phase history"""
        self.differencer.reset()
