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

"""GNSS Constants and Raw Measurement Parameters"""

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# Unit conversions
NS_PER_S = 1000000000  # nanoseconds per second
S_PER_NS = 1.0e-9      # seconds per nanosecond
PA_PER_HPA = 100.0     # pascals per hectopascal

# Time scale periods (integer ns so folding of int64 clock values stays exact)
SECONDS_PER_DAY = 86400
SECONDS_PER_WEEK = 604800
DAY_NS = SECONDS_PER_DAY * NS_PER_S    # GLONASS time of day rollover (ns)
WEEK_NS = SECONDS_PER_WEEK * NS_PER_S  # GPS/GAL/BDS/QZS time of week rollover (ns)

# Time system offsets (as of 2025)
GPS_BDS_OFFSET = 14            # GPST - BDT (seconds)
GPS_UTC_OFFSET = 18            # GPS-UTC leap seconds (as of 2025)
GPS_BDS_OFFSET_NS = GPS_BDS_OFFSET * NS_PER_S

# Plausibility gate on the raw pseudorange (m), bounds inclusive.
# Brackets LEO up to GEO augmentation satellites.
MIN_PSEUDORANGE = 1.0e6
MAX_PSEUDORANGE = 7.0e7

# Android GnssMeasurement accumulated delta range state bits
ADR_STATE_UNKNOWN = 0x00
ADR_STATE_VALID = 0x01
ADR_STATE_RESET = 0x02
ADR_STATE_CYCLE_SLIP = 0x04
ADR_STATE_HALF_CYCLE_RESOLVED = 0x08
ADR_STATE_HALF_CYCLE_REPORTED = 0x10

# Summary text
NO_GNSS_TEXT = "No raw GNSS this epoch"
MISSING_VALUE_TEXT = "—"  # shown for absent TDCP

# CSV log layout
GNSS_LOG_COLUMNS = [
    "Date", "Time", "ElapsedNs",
    "Constellation", "Svid",
    "Pseudorange_m", "TDCP_m", "TDCP_rate_mps",
]
SENSORS_LOG_COLUMNS = [
    "Date", "Time", "ElapsedNs",
    "Baro_hPa",
    "Accel_X_mps2", "Accel_Y_mps2", "Accel_Z_mps2",
    "Gyro_X_radps", "Gyro_Y_radps", "Gyro_Z_radps",
]
GNSS_LOG_FILE = "gnss_log.csv"
SENSORS_LOG_FILE = "sensors_log.csv"
