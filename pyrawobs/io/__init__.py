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

"""I/O utilities for pyrawobs."""

from .csv_logger import SheetLogger, default_delimiter_for_locale, format_number, read_gnss_log
from .gnsslogger import GnssLogReader, iter_epochs, load_epochs
from .satnav_message import (
    CHANNEL_BAROMETER,
    CHANNEL_IMU,
    CHANNEL_SATNAV,
    MessageBridge,
    SatnavEpochBuilder,
    SatnavMessage,
    SatnavSignal,
    encode_barometer,
    encode_imu,
    encode_satnav,
)

__all__ = [
    'SheetLogger', 'default_delimiter_for_locale', 'format_number', 'read_gnss_log',
    'GnssLogReader', 'iter_epochs', 'load_epochs',
    'CHANNEL_BAROMETER', 'CHANNEL_IMU', 'CHANNEL_SATNAV',
    'MessageBridge', 'SatnavEpochBuilder', 'SatnavMessage', 'SatnavSignal',
    'encode_barometer', 'encode_imu', 'encode_satnav',
]
