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

"""Time series plots of logged pseudorange and TDCP values"""

import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from ..core.constants import S_PER_NS
from ..core.data_structures import Constellation


class TDCPPlot:
    """Plot per-satellite series from a gnss log DataFrame"""

    def __init__(self):
        self._title = ''
        self._font = {
            'family': 'DejaVu Sans',
            'size': 10
        }

    def set_title(self, title: str):
        """
        Set the figure title

        Parameters:
        -----------
        title : str
            Desired title
        """
        self._title = title

    def set_font(self, font: dict):
        """
        Set the figure font

        Parameters:
        -----------
        font : dict
            Desired font configuration
        """
        self._font = font

    def plot(self, df: pd.DataFrame, column: str = 'TDCP_rate_mps',
             ylabel: str = 'TDCP rate (m/s)') -> Figure:
        """
        Plot one column per satellite against elapsed time

        Parameters:
        -----------
        df : pd.DataFrame
            Log as returned by ``read_gnss_log``
        column : str
            Column to plot, e.g. 'TDCP_rate_mps', 'TDCP_m' or 'Pseudorange_m'
        ylabel : str
            Y axis label

        Returns:
        --------
        Figure
            Matplotlib figure with one line per satellite
        """
        if column not in df.columns:
            raise ValueError(f"Column not in log: {column}")

        fig = Figure(figsize=(10, 5))
        ax = fig.add_subplot(1, 1, 1)

        if not df.empty:
            t0 = df['ElapsedNs'].min()
            for (constel, svid), group in df.groupby(['Constellation', 'Svid']):
                values = group[column].to_numpy(dtype=float)
                if np.all(np.isnan(values)):
                    continue
                t = (group['ElapsedNs'].to_numpy(dtype=float) - t0) * S_PER_NS
                label = f"{Constellation.from_value(constel).letter}{int(svid):02d}"
                ax.plot(t, values, marker='.', linewidth=0.8, label=label)

        ax.set_xlabel('Time (s)', fontdict=self._font)
        ax.set_ylabel(ylabel, fontdict=self._font)
        if self._title:
            ax.set_title(self._title, fontdict=self._font)
        ax.grid(True, alpha=0.3)
        if ax.lines:
            ax.legend(loc='upper right', fontsize='small', ncol=2)
        return fig


def plot_tdcp_rate(df: pd.DataFrame, title: str = '') -> Figure:
    """Convenience function for the TDCP rate plot"""
    plotter = TDCPPlot()
    plotter.set_title(title)
    return plotter.plot(df)
