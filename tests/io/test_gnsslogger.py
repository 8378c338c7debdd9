import unittest
import tempfile
import shutil
from pathlib import Path

from pyrawobs.core.constants import CLIGHT, WEEK_NS
from pyrawobs.core.data_structures import Constellation
from pyrawobs.io.gnsslogger import GnssLogReader, iter_epochs, load_epochs
from pyrawobs.pipeline import GnssSensorListener, Sink

RAW_HEADER = ("# Raw,utcTimeMillis,TimeNanos,LeapSecond,FullBiasNanos,BiasNanos,Svid,"
              "TimeOffsetNanos,ReceivedSvTimeNanos,AccumulatedDeltaRangeState,"
              "AccumulatedDeltaRangeMeters,ConstellationType")

BOOT_NS = 50_000_000_000
TOW_NS = 400_000_070_000_000
FULL_BIAS_NS = BOOT_NS - (2300 * WEEK_NS + TOW_NS)


def raw_line(second, svid, constellation, adr, adr_state=1, leap=""):
    dt = second * 1_000_000_000
    return (f"Raw,1700000000000,{BOOT_NS + dt},{leap},{FULL_BIAS_NS},0.0,{svid},0.0,"
            f"{TOW_NS + dt - 70_000_000},{adr_state},{adr},{constellation}")


class CollectingSink(Sink):

    def __init__(self):
        self.observations = []

    def on_gnss_pr_tdcp(self, observation, elapsed_ns):
        self.observations.append(observation)


class TestGnssLogReader(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.log_file = Path(self.test_dir) / "gnss_log_2024_01_01.txt"

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _write(self, lines):
        self.log_file.write_text("\n".join(lines) + "\n", encoding='utf-8')

    def _default_log(self):
        self._write([
            "# Version: v3.0.5.6 Platform: 13",
            "#",
            "# Fix,Provider,LatitudeDegrees,LongitudeDegrees",
            RAW_HEADER,
            "#",
            "Fix,gps,35.0,139.0",
            raw_line(0, 5, 1, 100.25),
            raw_line(0, 11, 6, 0.0, adr_state=0),
            "Status,1700000000000,1,1",
            raw_line(1, 5, 1, 100.75),
        ])

    def test_file_not_found(self):
        with self.assertRaises(FileNotFoundError):
            GnssLogReader(Path(self.test_dir) / "missing.txt")

    def test_read(self):
        self._default_log()
        df = GnssLogReader(self.log_file).read()

        self.assertEqual(len(df), 3)
        self.assertEqual(df['Svid'].tolist(), [5, 11, 5])
        # Large counters keep full integer precision
        self.assertEqual(df['FullBiasNanos'].iloc[0], FULL_BIAS_NS)
        self.assertEqual(df['ReceivedSvTimeNanos'].iloc[2], TOW_NS + 1_000_000_000 - 70_000_000)
        self.assertIsNone(df['LeapSecond'].iloc[0])
        self.assertEqual(df['AccumulatedDeltaRangeMeters'].iloc[0], 100.25)

    def test_short_rows_padded(self):
        self._write([RAW_HEADER, raw_line(0, 5, 1, 100.25) + ",extra,fields",
                     raw_line(0, 7, 1, 1.0).rsplit(',', 1)[0]])
        df = GnssLogReader(self.log_file).read()
        self.assertEqual(len(df), 2)
        self.assertIsNone(df['ConstellationType'].iloc[1])

    def test_missing_header(self):
        self._write(["# Fix,Provider", "Fix,gps,35.0,139.0"])
        with self.assertRaises(ValueError):
            GnssLogReader(self.log_file).read()

    def test_record_before_header(self):
        self._write([raw_line(0, 5, 1, 100.25), RAW_HEADER])
        with self.assertRaises(ValueError):
            GnssLogReader(self.log_file).read()

    def test_missing_columns(self):
        self._write(["# Raw,utcTimeMillis,TimeNanos,Svid", "Raw,0,1,5"])
        with self.assertRaises(ValueError):
            GnssLogReader(self.log_file).read()

    def test_iter_epochs(self):
        self._default_log()
        epochs = load_epochs(self.log_file)

        self.assertEqual(len(epochs), 2)
        clock, measurements = epochs[0]
        self.assertEqual(clock.time_ns, BOOT_NS)
        self.assertEqual(clock.full_bias_ns, FULL_BIAS_NS)
        self.assertIsNone(clock.leap_second)
        self.assertEqual([(m.constellation, m.svid) for m in measurements],
                         [(Constellation.GPS, 5), (Constellation.GALILEO, 11)])
        self.assertTrue(measurements[0].phase_lock_valid)
        self.assertFalse(measurements[1].phase_lock_valid)

        clock, measurements = epochs[1]
        self.assertEqual(clock.time_ns, BOOT_NS + 1_000_000_000)
        self.assertEqual(len(measurements), 1)

    def test_leap_second_column(self):
        self._write([RAW_HEADER, raw_line(0, 3, 3, 0.0, leap=18)])
        clock, _ = next(iter_epochs(self.log_file))
        self.assertEqual(clock.leap_second, 18)

    def test_empty_log(self):
        self._write([RAW_HEADER])
        self.assertEqual(load_epochs(self.log_file), [])

    def test_replay_log(self):
        self._default_log()
        sink = CollectingSink()
        listener = GnssSensorListener(sink=sink)
        listener.start()

        self.assertEqual(listener.replay(iter_epochs(self.log_file)), 2)
        self.assertEqual(len(sink.observations), 3)
        for obs in sink.observations:
            self.assertAlmostEqual(obs.pseudorange_m, 0.07 * CLIGHT, delta=1e-6)
        self.assertAlmostEqual(sink.observations[2].tdcp_delta_m, 0.5)
        self.assertAlmostEqual(sink.observations[2].tdcp_rate_mps, 0.5)


if __name__ == '__main__':
    unittest.main()
