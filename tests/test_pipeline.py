#!/usr/bin/env python3
"""Test suite for the epoch driver and sinks"""

import unittest
from unittest.mock import MagicMock, call

from pyrawobs.core.constants import ADR_STATE_VALID, NO_GNSS_TEXT, WEEK_NS
from pyrawobs.core.data_structures import (
    Constellation, RawSatelliteMeasurement, ReceiverClockSnapshot, SensorType,
)
from pyrawobs.pipeline import GnssSensorListener, MultiSink, Sink

BOOT_NS = 50_000_000_000
TOW_NS = 400_000_070_000_000
FULL_BIAS_NS = BOOT_NS - (2300 * WEEK_NS + TOW_NS)


def make_epoch(second, adr):
    dt = second * 1_000_000_000
    clock = ReceiverClockSnapshot(time_ns=BOOT_NS + dt, full_bias_ns=FULL_BIAS_NS, bias_ns=0.0)
    measurements = [
        RawSatelliteMeasurement(Constellation.GPS, 5, TOW_NS + dt - 70_000_000,
                                accumulated_delta_range_m=adr, adr_state=ADR_STATE_VALID),
    ]
    return clock, measurements


class RecordingSink(Sink):

    def __init__(self):
        self.observations = []

    def on_gnss_pr_tdcp(self, observation, elapsed_ns):
        self.observations.append((observation, elapsed_ns))


class TestSink(unittest.TestCase):

    def test_observation_callback_required(self):
        with self.assertRaises(TypeError):
            Sink()

    def test_optional_callbacks_default_to_noop(self):
        sink = RecordingSink()
        sink.on_barometer(1013.0, 1)
        sink.on_accel(0.0, 0.0, 9.8, 1)
        sink.on_gyro(0.0, 0.0, 0.0, 1)
        sink.on_gnss_epoch("text", 1)
        sink.on_status("ok")
        self.assertEqual(sink.observations, [])

    def test_multi_sink_fans_out(self):
        first, second = MagicMock(spec=Sink), MagicMock(spec=Sink)
        multi = MultiSink([first])
        multi.add(second)

        multi.on_barometer(1013.0, 7)
        multi.on_status("running")
        for sink in (first, second):
            sink.on_barometer.assert_called_once_with(1013.0, 7)
            sink.on_status.assert_called_once_with("running")


class TestGnssSensorListener(unittest.TestCase):

    def setUp(self):
        self.sink = MagicMock(spec=Sink)
        self.listener = GnssSensorListener(sink=self.sink)

    def test_ignored_until_started(self):
        self.assertFalse(self.listener.running)
        self.assertIsNone(self.listener.on_gnss_measurements(*make_epoch(0, 100.0), elapsed_ns=1))
        self.listener.on_sensor_event(SensorType.BAROMETER, [1013.0], elapsed_ns=1)
        self.sink.on_gnss_pr_tdcp.assert_not_called()
        self.sink.on_barometer.assert_not_called()

    def test_epoch_forwarded_to_sink(self):
        self.listener.start()
        result = self.listener.on_gnss_measurements(*make_epoch(0, 100.0), elapsed_ns=42)

        self.assertEqual(len(result), 1)
        self.sink.on_gnss_pr_tdcp.assert_called_once_with(result.observations[0], 42)
        self.sink.on_gnss_epoch.assert_called_once_with(result.summary, 42)

    def test_empty_epoch_still_reports_summary(self):
        self.listener.start()
        clock, _ = make_epoch(0, 0.0)
        self.listener.on_gnss_measurements(clock, [], elapsed_ns=3)
        self.sink.on_gnss_pr_tdcp.assert_not_called()
        self.sink.on_gnss_epoch.assert_called_once_with(NO_GNSS_TEXT, 3)

    def test_default_elapsed_time(self):
        self.listener.start()
        self.listener.on_gnss_measurements(*make_epoch(0, 100.0))
        _, elapsed_ns = self.sink.on_gnss_pr_tdcp.call_args[0]
        self.assertIsInstance(elapsed_ns, int)

    def test_tdcp_across_epochs(self):
        self.listener.start()
        self.listener.on_gnss_measurements(*make_epoch(0, 100.0), elapsed_ns=1)
        result = self.listener.on_gnss_measurements(*make_epoch(1, 101.0), elapsed_ns=2)
        self.assertAlmostEqual(result.observations[0].tdcp_delta_m, 1.0)

    def test_stop_resets_history(self):
        self.listener.start()
        self.listener.on_gnss_measurements(*make_epoch(0, 100.0), elapsed_ns=1)
        self.listener.stop()
        self.assertFalse(self.listener.running)
        self.assertEqual(len(self.listener.extractor.differencer), 0)

        self.listener.start()
        result = self.listener.on_gnss_measurements(*make_epoch(1, 101.0), elapsed_ns=2)
        self.assertIsNone(result.observations[0].tdcp_delta_m)

    def test_start_stop_idempotent(self):
        self.listener.start()
        self.listener.start()
        self.assertTrue(self.listener.running)
        self.listener.stop()
        self.listener.stop()
        self.assertFalse(self.listener.running)

    def test_sensor_dispatch(self):
        self.listener.start()
        self.listener.on_sensor_event(SensorType.BAROMETER, [1013.25], elapsed_ns=1)
        self.listener.on_sensor_event(SensorType.ACCELEROMETER, [0.1, 0.2, 9.8], elapsed_ns=2)
        self.listener.on_sensor_event(SensorType.LINEAR_ACCELERATION, [0.1, 0.2, 0.0], elapsed_ns=3)
        self.listener.on_sensor_event(SensorType.GYROSCOPE, [0.01, 0.02, 0.03], elapsed_ns=4)
        self.listener.on_sensor_event(SensorType.GNSS, [0.0], elapsed_ns=5)

        self.sink.on_barometer.assert_called_once_with(1013.25, 1)
        self.assertEqual(self.sink.on_accel.call_args_list,
                         [call(0.1, 0.2, 9.8, 2), call(0.1, 0.2, 0.0, 3)])
        self.sink.on_gyro.assert_called_once_with(0.01, 0.02, 0.03, 4)

    def test_replay(self):
        sink = RecordingSink()
        listener = GnssSensorListener(sink=sink)
        listener.start()
        count = listener.replay([make_epoch(0, 100.0), make_epoch(1, 100.5)])

        self.assertEqual(count, 2)
        self.assertEqual([elapsed for _, elapsed in sink.observations],
                         [BOOT_NS, BOOT_NS + 1_000_000_000])
        self.assertAlmostEqual(sink.observations[1][0].tdcp_rate_mps, 0.5)

    def test_replay_while_stopped(self):
        self.assertEqual(self.listener.replay([make_epoch(0, 100.0)]), 0)

    def test_without_sink(self):
        listener = GnssSensorListener()
        listener.start()
        result = listener.on_gnss_measurements(*make_epoch(0, 100.0), elapsed_ns=1)
        self.assertEqual(len(result), 1)
        listener.on_sensor_event(SensorType.BAROMETER, [1000.0])


if __name__ == '__main__':
    unittest.main()
