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

"""Spreadsheet friendly CSV logs of observations and sensor samples"""

import locale
import logging
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

import pandas as pd

from ..core.constants import (
    GNSS_LOG_COLUMNS,
    GNSS_LOG_FILE,
    SENSORS_LOG_COLUMNS,
    SENSORS_LOG_FILE,
)
from ..core.data_structures import SatelliteObservation
from ..pipeline import Sink

logger = logging.getLogger(__name__)

UTF8_BOM = '\ufeff'
BOM_SIZE = len(UTF8_BOM.encode('utf-8'))


def format_number(value: Optional[float], decimals: int = 9) -> str:
    """
    Format a number for a CSV cell

    Uses '.' as decimal separator regardless of locale, trims trailing zeros
    and returns an empty string for None so columns stay aligned.
    """
    if value is None:
        return ""
    text = f"{float(value):.{decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def default_delimiter_for_locale() -> str:
    """';' where the locale decimal separator is ',' (Excel convention), else ','"""
    decimal_point = locale.localeconv().get('decimal_point', '.')
    return ';' if decimal_point == ',' else ','


class SheetLogger(Sink):
    """
    Append GNSS observations and sensor samples to two CSV files

    Files are opened in append mode so a restarted session continues the
    same log. The header is written only when a file is empty (or holds
    nothing but a BOM). Write failures are logged and never reach the
    processing pipeline.
    """

    def __init__(self,
                 log_dir: Union[str, Path],
                 delimiter: str = ',',
                 bom: bool = True,
                 wall_clock: Callable[[], float] = time.time):
        """
        Initialize logger

        Parameters:
        -----------
        log_dir : str or Path
            Directory for gnss_log.csv and sensors_log.csv (created if missing)
        delimiter : str
            Field delimiter
        bom : bool
            Write a UTF-8 BOM at the start of new files (Excel encoding hint)
        wall_clock : Callable[[], float]
            Source of wall clock seconds for the Date/Time columns
        """
        self.log_dir = Path(log_dir)
        self.gnss_file = self.log_dir / GNSS_LOG_FILE
        self.sensors_file = self.log_dir / SENSORS_LOG_FILE
        self.delimiter = delimiter
        self.bom = bom
        self.wall_clock = wall_clock
        self._lock = threading.Lock()

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create log directory {self.log_dir}: {e}")
        self.ensure_headers()

    def _is_effectively_empty(self, path: Path) -> bool:
        if not path.exists():
            return True
        size = path.stat().st_size
        return size == 0 or (self.bom and size <= BOM_SIZE)

    def _write_rows(self, path: Path, rows: Sequence[Sequence[str]], columns: Sequence[str]):
        df = pd.DataFrame(list(rows), columns=list(columns))
        try:
            with self._lock:
                write_header = self._is_effectively_empty(path)
                fresh = not path.exists() or path.stat().st_size == 0
                with open(path, 'a', encoding='utf-8', newline='') as fh:
                    if fresh and self.bom:
                        fh.write(UTF8_BOM)
                    df.to_csv(fh, sep=self.delimiter, header=write_header, index=False,
                              lineterminator='\r\n')
        except OSError as e:
            logger.warning(f"Failed to write {path.name}: {e}")

    def ensure_headers(self):
        """Write headers into empty log files"""
        for path, columns in ((self.gnss_file, GNSS_LOG_COLUMNS),
                              (self.sensors_file, SENSORS_LOG_COLUMNS)):
            if self._is_effectively_empty(path):
                self._write_rows(path, [], columns)

    def _date_time(self):
        now = datetime.fromtimestamp(self.wall_clock())
        return now.strftime('%Y-%m-%d'), now.strftime('%H:%M:%S.') + f"{now.microsecond // 1000:03d}"

    def log_gnss(self, observation: SatelliteObservation, elapsed_ns: int):
        """One row per satellite per epoch; absent TDCP values are blank"""
        date, clock = self._date_time()
        row = [
            date, clock, str(elapsed_ns),
            str(int(observation.constellation)), str(observation.svid),
            format_number(observation.pseudorange_m),
            format_number(observation.tdcp_delta_m),
            format_number(observation.tdcp_rate_mps),
        ]
        self._write_rows(self.gnss_file, [row], GNSS_LOG_COLUMNS)

    def log_sensors(self, elapsed_ns: int,
                    baro_hpa: Optional[float] = None,
                    accel: Optional[Sequence[float]] = None,
                    gyro: Optional[Sequence[float]] = None):
        """One wide sensor row; columns of sensors not in this sample are blank"""
        date, clock = self._date_time()
        accel = accel if accel is not None else (None, None, None)
        gyro = gyro if gyro is not None else (None, None, None)
        row = [date, clock, str(elapsed_ns), format_number(baro_hpa, 6)]
        row += [format_number(v, 6) for v in accel]
        row += [format_number(v, 6) for v in gyro]
        self._write_rows(self.sensors_file, [row], SENSORS_LOG_COLUMNS)

    # Sink callbacks

    def on_gnss_pr_tdcp(self, observation, elapsed_ns):
        self.log_gnss(observation, elapsed_ns)

    def on_barometer(self, pressure_hpa, elapsed_ns):
        self.log_sensors(elapsed_ns, baro_hpa=pressure_hpa)

    def on_accel(self, ax, ay, az, elapsed_ns):
        self.log_sensors(elapsed_ns, accel=(ax, ay, az))

    def on_gyro(self, gx, gy, gz, elapsed_ns):
        self.log_sensors(elapsed_ns, gyro=(gx, gy, gz))


def read_gnss_log(file_path: Union[str, Path], delimiter: str = ',') -> pd.DataFrame:
    """
    Load a gnss_log.csv written by SheetLogger

    Parameters:
    -----------
    file_path : str or Path
        Path to the log
    delimiter : str
        Field delimiter used when writing

    Returns:
    --------
    pd.DataFrame
        One row per observation, blank TDCP cells as NaN
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"GNSS log not found: {file_path}")
    return pd.read_csv(file_path, sep=delimiter, encoding='utf-8-sig')
