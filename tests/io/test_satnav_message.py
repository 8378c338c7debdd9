import unittest
from unittest.mock import MagicMock

import numpy as np

from pyrawobs.core.data_structures import Constellation, SatelliteObservation
from pyrawobs.io.satnav_message import (
    CHANNEL_BAROMETER, CHANNEL_IMU, CHANNEL_SATNAV,
    MessageBridge, SatnavEpochBuilder, SatnavMessage, SatnavSignal,
    encode_barometer, encode_imu, encode_satnav, format_satnav_summary,
)
from pyrawobs.sensors.barometer import BarometerData
from pyrawobs.sensors.imu import IMUData


def make_message():
    builder = SatnavEpochBuilder()
    builder.add_sv(Constellation.GPS, 5, 20000000.5, 0.25, 0.25)
    builder.add_sv(6, 11, 21000000.5)
    return builder.build(1_000)


class TestSatnavEpochBuilder(unittest.TestCase):

    def test_empty_epoch_builds_nothing(self):
        self.assertIsNone(SatnavEpochBuilder().build(1))

    def test_build(self):
        message = make_message()
        self.assertEqual(message.time_of_validity_ns, 1_000)
        self.assertEqual(message.num_signals_tracked, 2)
        self.assertIs(message.signals[1].constellation, Constellation.GALILEO)
        self.assertIsNone(message.signals[1].tdcp_m)

    def test_add_observation_and_clear(self):
        builder = SatnavEpochBuilder()
        builder.add_observation(SatelliteObservation(Constellation.BEIDOU, 20, 3.8e7, 1.0, 1.0))
        self.assertEqual(len(builder), 1)
        message = builder.build(5)
        builder.clear()
        self.assertEqual(len(builder), 0)
        # Built message does not share the builder's list
        self.assertEqual(message.num_signals_tracked, 1)


class TestEncoding(unittest.TestCase):

    def test_schema_v2(self):
        encoded = encode_satnav(make_message())
        self.assertEqual(encoded['schema_version'], 2)
        self.assertEqual(encoded['time_of_validity'], {'elapsed_nsec': 1_000})
        self.assertEqual(encoded['num_signals_tracked'], 2)
        self.assertEqual(encoded['obs'][0], {
            'pseudorange': 20000000.5,
            'delta_carrier_phase_m': 0.25,
            'delta_carrier_phase_rate_mps': 0.25,
        })
        # Absent TDCP values are left out, not zero
        self.assertEqual(encoded['obs'][1], {'pseudorange': 21000000.5})
        self.assertEqual(encoded['sv_data'], [
            {'prn': 5, 'satellite_system': 1},
            {'prn': 11, 'satellite_system': 6},
        ])
        self.assertEqual(encoded['num_integrity'], 0)

    def test_schema_v1(self):
        encoded = encode_satnav(make_message(), schema_version=1)
        self.assertEqual(set(encoded['obs'][0]), {'pseudorange_m', 'tdcp_m', 'tdcp_rate_mps'})
        self.assertEqual(encoded['sv_data'][0], {'prn': 5, 'system': 1})

    def test_unknown_schema(self):
        with self.assertRaises(ValueError):
            encode_satnav(make_message(), schema_version=3)

    def test_encode_imu(self):
        imu = IMUData(timestamp_ns=10, data=np.array([0.1, 0.2, 9.8, 0.01, 0.02, 0.03]))
        encoded = encode_imu(imu)
        self.assertEqual(encoded['time_of_validity'], {'elapsed_nsec': 10})
        self.assertEqual(encoded['meas_accel'], [0.1, 0.2, 9.8])
        self.assertEqual(encoded['meas_gyro'], [0.01, 0.02, 0.03])

    def test_encode_barometer(self):
        encoded = encode_barometer(BarometerData.from_hpa(1013.25, 10), variance_pa2=4.0)
        self.assertAlmostEqual(encoded['pressure'], 101325.0)
        self.assertEqual(encoded['variance'], 4.0)

    def test_summary(self):
        text = format_satnav_summary(make_message())
        lines = text.splitlines()
        self.assertEqual(lines[0], "[ASPN/SATNAV] SVs=2  t=1000 ns")
        self.assertEqual(lines[1], "  C=1 SVID=5  PR=20000000.500 m  TDCP=0.250  RATE=0.250")
        self.assertEqual(lines[2], "  C=6 SVID=11  PR=21000000.500 m  TDCP=—  RATE=—")

    def test_summary_limited(self):
        message = SatnavMessage(0, [SatnavSignal(Constellation.GPS, i, 2.0e7) for i in range(6)])
        self.assertEqual(len(format_satnav_summary(message, max_svs=4).splitlines()), 5)


class TestMessageBridge(unittest.TestCase):

    def setUp(self):
        self.sent = []
        self.bridge = MessageBridge(lambda channel, msg: self.sent.append((channel, msg)))

    def test_imu_needs_accel_and_gyro(self):
        self.bridge.on_accel(0.0, 0.0, 9.8, 1)
        self.assertEqual(self.sent, [])
        self.bridge.on_gyro(0.0, 0.0, 0.1, 2)
        self.assertEqual(len(self.sent), 1)
        channel, msg = self.sent[0]
        self.assertEqual(channel, CHANNEL_IMU)
        self.assertEqual(msg['time_of_validity'], {'elapsed_nsec': 2})

    def test_barometer(self):
        self.bridge.on_barometer(1013.25, 3)
        channel, msg = self.sent[0]
        self.assertEqual(channel, CHANNEL_BAROMETER)
        self.assertAlmostEqual(msg['pressure'], 101325.0)

    def test_satnav_epoch(self):
        self.bridge.on_gnss_pr_tdcp(SatelliteObservation(Constellation.GPS, 5, 2.0e7), 7)
        self.bridge.on_gnss_pr_tdcp(SatelliteObservation(Constellation.GALILEO, 5, 2.1e7), 7)
        self.assertEqual(self.sent, [])

        self.bridge.on_gnss_epoch("summary", 7)
        self.assertEqual(len(self.sent), 1)
        channel, msg = self.sent[0]
        self.assertEqual(channel, CHANNEL_SATNAV)
        self.assertEqual(msg['num_signals_tracked'], 2)
        self.assertTrue(self.bridge.last_summary.startswith("[ASPN/SATNAV] SVs=2"))

        # Next epoch starts empty and publishes nothing
        self.bridge.on_gnss_epoch("No raw GNSS this epoch", 8)
        self.assertEqual(len(self.sent), 1)

    def test_publish_failure_is_logged(self):
        publish = MagicMock(side_effect=OSError("socket closed"))
        bridge = MessageBridge(publish)
        with self.assertLogs('pyrawobs.io.satnav_message', level='WARNING'):
            bridge.on_barometer(1000.0, 1)
        publish.assert_called_once()

    def test_invalid_schema_rejected(self):
        with self.assertRaises(ValueError):
            MessageBridge(lambda channel, msg: None, schema_version=0)


if __name__ == '__main__':
    unittest.main()
