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

"""Reader for Android GnssLogger text logs (``Raw`` records)"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import pandas as pd

from ..core.data_structures import RawSatelliteMeasurement, ReceiverClockSnapshot

logger = logging.getLogger(__name__)

RAW_RECORD = 'Raw'

# Nanosecond counters exceed float64 precision, parse them as Python ints
INT_COLUMNS = [
    'TimeNanos', 'FullBiasNanos', 'LeapSecond', 'Svid', 'ConstellationType',
    'ReceivedSvTimeNanos', 'AccumulatedDeltaRangeState',
]
FLOAT_COLUMNS = ['BiasNanos', 'TimeOffsetNanos', 'AccumulatedDeltaRangeMeters']
REQUIRED_COLUMNS = [
    'TimeNanos', 'Svid', 'ConstellationType', 'ReceivedSvTimeNanos',
    'TimeOffsetNanos', 'AccumulatedDeltaRangeMeters', 'AccumulatedDeltaRangeState',
]

Epoch = Tuple[ReceiverClockSnapshot, List[RawSatelliteMeasurement]]


def _to_int(value) -> Optional[int]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == 'nan':
        return None
    try:
        return int(text)
    except ValueError:
        return int(float(text))


def _optional(value):
    return None if pd.isna(value) else value


class GnssLogReader:
    """Read raw measurements recorded by the Android GnssLogger app"""

    def __init__(self, file_path: Union[str, Path]):
        """
        Initialize reader

        Parameters:
        -----------
        file_path : str or Path
            Path to the GnssLogger .txt file
        """
        self.file_path = Path(file_path)
        self.logger = logging.getLogger(__name__)

        if not self.file_path.exists():
            raise FileNotFoundError(f"GnssLogger file not found: {file_path}")

    def read(self) -> pd.DataFrame:
        """
        Read all ``Raw`` records

        Returns:
        --------
        pd.DataFrame
            One row per measurement, columns named after the ``# Raw`` header.
            Integer counters are kept as Python ints (object dtype).

        Raises:
        -------
        ValueError
            If the file has no ``# Raw`` header or lacks a required column
        """
        self.logger.info(f"Reading GnssLogger raw records from: {self.file_path}")

        field_names = None
        rows = []
        with open(self.file_path, 'r', encoding='utf-8') as fh:
            for line in fh:
                line = line.strip()
                if line.startswith('#'):
                    fields = [f.strip() for f in line.lstrip('#').split(',')]
                    if fields and fields[0] == RAW_RECORD:
                        field_names = fields[1:]
                    continue
                if not line.startswith(RAW_RECORD + ','):
                    continue
                if field_names is None:
                    raise ValueError(f"Raw record before '# Raw' header in {self.file_path}")
                values = line.split(',')[1:]
                # Newer logger versions append fields; pad or cut to the header
                values = (values + [''] * len(field_names))[:len(field_names)]
                rows.append(values)

        if field_names is None:
            raise ValueError(f"No '# Raw' header found in {self.file_path}")

        df = pd.DataFrame(rows, columns=field_names)
        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"Missing raw columns: {missing}")

        for col in INT_COLUMNS:
            if col in df.columns:
                df[col] = pd.Series([_to_int(v) for v in df[col]], index=df.index, dtype=object)
        for col in FLOAT_COLUMNS:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors='coerce')

        self.logger.info(f"Loaded {len(df)} raw measurements")
        return df


def row_to_measurement(row) -> RawSatelliteMeasurement:
    """Build a measurement from one raw record"""
    return RawSatelliteMeasurement(
        constellation=row['ConstellationType'],
        svid=row['Svid'],
        received_sv_time_ns=row['ReceivedSvTimeNanos'],
        time_offset_ns=float(row['TimeOffsetNanos']) if not pd.isna(row['TimeOffsetNanos']) else 0.0,
        accumulated_delta_range_m=(float(row['AccumulatedDeltaRangeMeters'])
                                   if not pd.isna(row['AccumulatedDeltaRangeMeters']) else 0.0),
        adr_state=row['AccumulatedDeltaRangeState'] or 0,
    )


def row_to_clock(row) -> ReceiverClockSnapshot:
    """Build the clock snapshot from the clock fields of a raw record"""
    return ReceiverClockSnapshot(
        time_ns=row['TimeNanos'],
        full_bias_ns=_optional(row.get('FullBiasNanos')),
        bias_ns=_optional(row.get('BiasNanos')),
        leap_second=_optional(row.get('LeapSecond')),
    )


def iter_epochs(source: Union[str, Path, pd.DataFrame]) -> Iterator[Epoch]:
    """
    Group raw records into epochs

    Parameters:
    -----------
    source : str, Path or pd.DataFrame
        GnssLogger file or a DataFrame returned by ``GnssLogReader.read``

    Yields:
    -------
    (ReceiverClockSnapshot, List[RawSatelliteMeasurement])
        One item per distinct TimeNanos, in file order
    """
    df = source if isinstance(source, pd.DataFrame) else GnssLogReader(source).read()
    if df.empty:
        return

    for _, group in df.groupby('TimeNanos', sort=False):
        clock = row_to_clock(group.iloc[0])
        measurements = [row_to_measurement(row) for _, row in group.iterrows()]
        yield clock, measurements


def load_epochs(file_path: Union[str, Path]) -> List[Epoch]:
    """Convenience function to read every epoch of a GnssLogger file"""
    return list(iter_epochs(file_path))
