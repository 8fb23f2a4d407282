"""Leica laser tracker positions (leica0)."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..common import Timestamp
from .sensor import SensorData, parse_timestamp, parse_vector


@dataclass(frozen=True, eq=False)
class PositionRecord:
    timestamp: Timestamp
    position: np.ndarray  # (3,) prism position in metres


class PositionData(SensorData[PositionRecord]):
    """Reader for leica0 (Machine Hall sequences only).

    CSV format:
        #timestamp [ns],p_RS_R_x [m],p_RS_R_y [m],p_RS_R_z [m]
    """

    kind = "position"
    num_columns = 4

    def _parse_row(self, fields: list[str]) -> PositionRecord:
        return PositionRecord(
            timestamp=parse_timestamp(fields[0]),
            position=parse_vector(fields, 1),
        )
