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

"""Epoch driver connecting measurement callbacks to output sinks"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from .core.config import ProcessingConfig
from .core.data_structures import (
    EpochResult,
    RawSatelliteMeasurement,
    ReceiverClockSnapshot,
    SatelliteObservation,
    SensorType,
)
from .observation.epoch import EpochObservationExtractor

logger = logging.getLogger(__name__)


class Sink(ABC):
    """
    Output callbacks of the pipeline

    Only per-satellite observations are mandatory; the remaining callbacks
    default to no-ops so a sink can subscribe to the streams it cares about.
    """

    def on_barometer(self, pressure_hpa: float, elapsed_ns: int):
        pass

    def on_accel(self, ax: float, ay: float, az: float, elapsed_ns: int):
        pass

    def on_gyro(self, gx: float, gy: float, gz: float, elapsed_ns: int):
        pass

    def on_gnss_epoch(self, text: str, elapsed_ns: int):
        pass

    def on_status(self, text: str):
        pass

    @abstractmethod
    def on_gnss_pr_tdcp(self, observation: SatelliteObservation, elapsed_ns: int):
        """One accepted satellite observation"""
        pass


class MultiSink(Sink):
    """Fan out every callback to several sinks in order"""

    def __init__(self, sinks: Iterable[Sink] = ()):
        self.sinks = list(sinks)

    def add(self, sink: Sink):
        self.sinks.append(sink)

    def on_barometer(self, pressure_hpa, elapsed_ns):
        for sink in self.sinks:
            sink.on_barometer(pressure_hpa, elapsed_ns)

    def on_accel(self, ax, ay, az, elapsed_ns):
        for sink in self.sinks:
            sink.on_accel(ax, ay, az, elapsed_ns)

    def on_gyro(self, gx, gy, gz, elapsed_ns):
        for sink in self.sinks:
            sink.on_gyro(gx, gy, gz, elapsed_ns)

    def on_gnss_epoch(self, text, elapsed_ns):
        for sink in self.sinks:
            sink.on_gnss_epoch(text, elapsed_ns)

    def on_status(self, text):
        for sink in self.sinks:
            sink.on_status(text)

    def on_gnss_pr_tdcp(self, observation, elapsed_ns):
        for sink in self.sinks:
            sink.on_gnss_pr_tdcp(observation, elapsed_ns)


class GnssSensorListener:
    """
    Drive epoch processing and sensor pass-through

    Epochs and stop() are serialized through one lock, so measurement and
    sensor callbacks may arrive on different threads.
    """

    def __init__(self,
                 sink: Optional[Sink] = None,
                 config: Optional[ProcessingConfig] = None,
                 extractor: Optional[EpochObservationExtractor] = None):
        """
        Initialize listener

        Parameters:
        -----------
        sink : Sink, optional
            Receiver of all outputs
        config : ProcessingConfig, optional
            Processing options, ignored when ``extractor`` is given
        extractor : EpochObservationExtractor, optional
            Extractor owning the carrier phase state
        """
        self.sink = sink
        self.extractor = extractor if extractor is not None else EpochObservationExtractor(config=config)
        self._lock = threading.Lock()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        """Start accepting callbacks"""
        with self._lock:
            if self._running:
                return
            self._running = True
        logger.info("GNSS listener started")

    def stop(self):
        """Stop accepting callbacks and drop all carrier phase history"""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self.extractor.reset()
        logger.info("GNSS listener stopped")

    def on_gnss_measurements(self,
                             clock: ReceiverClockSnapshot,
                             measurements: Sequence[RawSatelliteMeasurement],
                             elapsed_ns: Optional[int] = None) -> Optional[EpochResult]:
        """
        Process one epoch and forward the results

        Parameters:
        -----------
        clock : ReceiverClockSnapshot
            Receiver clock of the epoch
        measurements : Sequence[RawSatelliteMeasurement]
            Raw satellite measurements
        elapsed_ns : int, optional
            Monotonic stamp attached to the outputs, defaults to now

        Returns:
        --------
        EpochResult or None
            None if the listener is not running
        """
        if elapsed_ns is None:
            elapsed_ns = time.monotonic_ns()

        with self._lock:
            if not self._running:
                logger.debug("Epoch received while stopped, ignored")
                return None
            result = self.extractor.process(clock, measurements)

        if self.sink is not None:
            for obs in result.observations:
                self.sink.on_gnss_pr_tdcp(obs, elapsed_ns)
            self.sink.on_gnss_epoch(result.summary, elapsed_ns)
        return result

    def on_sensor_event(self, sensor_type: SensorType,
                        values: Sequence[float],
                        elapsed_ns: Optional[int] = None):
        """Forward a barometer, accelerometer or gyroscope sample to the sink"""
        if not self._running or self.sink is None:
            return
        if elapsed_ns is None:
            elapsed_ns = time.monotonic_ns()

        if sensor_type == SensorType.BAROMETER:
            self.sink.on_barometer(values[0], elapsed_ns)
        elif sensor_type in (SensorType.ACCELEROMETER, SensorType.LINEAR_ACCELERATION):
            self.sink.on_accel(values[0], values[1], values[2], elapsed_ns)
        elif sensor_type == SensorType.GYROSCOPE:
            self.sink.on_gyro(values[0], values[1], values[2], elapsed_ns)
        else:
            logger.debug(f"Ignoring sensor event of type {sensor_type}")

    def replay(self, epochs: Iterable) -> int:
        """
        Feed recorded epochs through the pipeline

        Parameters:
        -----------
        epochs : Iterable
            (ReceiverClockSnapshot, measurements) pairs, e.g. from
            ``pyrawobs.io.gnsslogger.iter_epochs``

        Returns:
        --------
        int
            Number of epochs processed
        """
        count = 0
        for clock, measurements in epochs:
            if self.on_gnss_measurements(clock, measurements, elapsed_ns=clock.time_ns) is not None:
                count += 1
        return count
